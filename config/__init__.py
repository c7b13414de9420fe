"""Configuration package for the mock interview services."""
from .registry import FEEDBACK_KEY, QUESTIONS_KEY, bind_model, get_model, unbind_model
from .routes import AppConfig, LlmRoute, load_app_registry, load_config, resolve_registry
from .settings import Settings, settings

__all__ = [
    "AppConfig",
    "LlmRoute",
    "load_app_registry",
    "load_config",
    "resolve_registry",
    "FEEDBACK_KEY",
    "QUESTIONS_KEY",
    "bind_model",
    "get_model",
    "unbind_model",
    "Settings",
    "settings",
]
