import json

import pytest

from config.registry import FEEDBACK_KEY, QUESTIONS_KEY, bind_model, get_model, unbind_model
from config.routes import load_app_registry
from config.settings import Settings
from services.model_bindings import MODEL_SCHEMAS, bind_llm_models


def test_settings_defaults():
    settings = Settings(_env_file=None)
    assert settings.DB_PATH.endswith(".db")
    assert settings.START_WINDOW_MINUTES == 5
    assert settings.PUBLIC_FEED_LIMIT == 20


def test_settings_from_env(monkeypatch):
    monkeypatch.setenv("START_WINDOW_MINUTES", "10")
    assert Settings(_env_file=None).START_WINDOW_MINUTES == 10


def test_registry_bind_and_retrieve():
    marker = object()
    bind_model(FEEDBACK_KEY, lambda **_: marker)
    try:
        assert get_model(FEEDBACK_KEY)() is marker
    finally:
        unbind_model(FEEDBACK_KEY)
    with pytest.raises(KeyError):
        get_model(FEEDBACK_KEY)


def _write_config(path, registry):
    path.write_text(
        json.dumps(
            {
                "llm_routes": {
                    "local": {
                        "name": "local",
                        "base_url": "http://localhost:11434/v1",
                        "endpoint": "/chat/completions",
                        "model": "llama3",
                        "timeout_s": 30,
                    }
                },
                "registry": registry,
            }
        ),
        encoding="utf-8",
    )


def test_bind_llm_models_from_file(tmp_path):
    config_path = tmp_path / "app_config.json"
    _write_config(config_path, {FEEDBACK_KEY: "local", QUESTIONS_KEY: "local"})

    try:
        assert bind_llm_models(config_path) == sorted([FEEDBACK_KEY, QUESTIONS_KEY])
        assert callable(get_model(QUESTIONS_KEY))
    finally:
        unbind_model(FEEDBACK_KEY)
        unbind_model(QUESTIONS_KEY)


def test_missing_config_binds_nothing(tmp_path):
    assert bind_llm_models(tmp_path / "absent.json") == []


def test_registry_entry_must_exist(tmp_path):
    config_path = tmp_path / "app_config.json"
    _write_config(config_path, {FEEDBACK_KEY: "local"})

    with pytest.raises(KeyError):
        load_app_registry(config_path, MODEL_SCHEMAS)


def test_registry_route_must_exist(tmp_path):
    config_path = tmp_path / "app_config.json"
    _write_config(config_path, {FEEDBACK_KEY: "local", QUESTIONS_KEY: "cloud"})

    with pytest.raises(KeyError):
        load_app_registry(config_path, MODEL_SCHEMAS)
