import logging

from surplus.config import load_settings
from surplus.logging_config import setup_logging


def test_load_settings(monkeypatch):
    monkeypatch.setenv("DATABASE_URL", "postgresql://market@db/surplus")
    monkeypatch.setenv("CORS_ORIGINS", "http://localhost:3000, https://surplus.example")
    monkeypatch.setenv("LOG_LEVEL", "debug")
    s = load_settings()
    assert s.database_url == "postgresql://market@db/surplus"
    assert s.cors_origins == ("http://localhost:3000", "https://surplus.example")
    assert s.log_level == "DEBUG"

    # defaults
    monkeypatch.delenv("DATABASE_URL")
    monkeypatch.delenv("CORS_ORIGINS")
    monkeypatch.delenv("LOG_LEVEL")
    s2 = load_settings()
    assert s2.database_url == "sqlite:///./surplus.db"
    assert s2.cors_origins == ("http://localhost:3000",)
    assert s2.log_level == "INFO"


def test_setup_logging_idempotent():
    logger1 = setup_logging(logging.DEBUG)
    logger2 = setup_logging(logging.DEBUG)
    assert logger1 is logger2
    assert logger1.name == "surplus"
    assert len(logger1.handlers) == 1
