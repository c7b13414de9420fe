"""Observability utilities for the mock interview services."""
from .logger import configure_logging, log_event

__all__ = ["configure_logging", "log_event"]
