"""Test server configuration."""

import pytest

from flowcompare.config import settings
from flowcompare.server import create_uvicorn_config


@pytest.mark.unit
def test_uvicorn_config():
    """Test uvicorn settings are derived from application settings."""
    config = create_uvicorn_config()

    assert config["app"] == "flowcompare.main:app"
    assert config["host"] == settings.host
    assert config["port"] == settings.port
    assert config["log_level"] == settings.log_level.lower()


@pytest.mark.unit
def test_reload_forces_single_worker(monkeypatch):
    """Test auto-reload runs a single worker."""
    monkeypatch.setattr(settings, "reload", True)
    monkeypatch.setattr(settings, "workers", 4)

    config = create_uvicorn_config()

    assert config["workers"] == 1
    assert config["reload"] is settings.is_development
