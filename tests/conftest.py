"""Shared pytest fixtures."""

import pytest
from fastapi.testclient import TestClient

from api.src.config import Settings, clear_settings_cache
from api.src.main import create_app


CSRF_TOKEN = "test-csrf-token-0123456789"


def make_settings(**overrides) -> Settings:
    """Settings for an isolated test application."""
    values = {
        "environment": "development",
        "log_level": "WARNING",
        "log_format": "text",
        "dictionary_path": None,
    }
    values.update(overrides)
    return Settings(**values)


@pytest.fixture(autouse=True)
def reset_settings_cache():
    clear_settings_cache()
    yield
    clear_settings_cache()


@pytest.fixture
def settings() -> Settings:
    return make_settings()


@pytest.fixture
def app(settings):
    return create_app(settings)


@pytest.fixture
def client(app):
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def dictionary_csv(tmp_path):
    path = tmp_path / "words.csv"
    path.write_text("cust,customer\nid,identifier\nqty,quantity\n", encoding="utf-8")
    return path
