"""Basic smoke tests for the service wiring."""

def test_imports():
    import api_server  # noqa: F401
    from config.settings import settings

    assert settings.DB_PATH.endswith(".db")
