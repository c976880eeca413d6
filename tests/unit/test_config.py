"""Unit tests for API and client settings."""

import pytest
from pydantic import ValidationError

from api.src.config import Settings, get_settings
from client.src.config import ClientSettings


class TestApiSettings:
    """Settings validation and normalization."""

    def test_defaults(self):
        settings = Settings()

        assert settings.context_root == ""
        assert settings.port == 8080
        assert settings.max_lines == 10000
        assert settings.csrf_header_name == "X-CSRF-TOKEN"
        assert not settings.csrf_active

    @pytest.mark.parametrize(
        "value,expected",
        [("/", ""), ("", ""), ("/app/", "/app"), ("app", "/app"), ("/a/b", "/a/b")],
    )
    def test_context_root_normalized(self, value, expected):
        assert Settings(context_root=value).context_root == expected

    def test_log_level_upper_cased(self):
        assert Settings(log_level="debug").log_level == "DEBUG"

    def test_invalid_log_level(self):
        with pytest.raises(ValidationError):
            Settings(log_level="LOUD")

    def test_invalid_environment(self):
        with pytest.raises(ValidationError):
            Settings(environment="qa")

    def test_dictionary_format(self):
        assert Settings(dictionary_format="yaml").dictionary_format == "YAML"
        with pytest.raises(ValidationError):
            Settings(dictionary_format="xml")

    def test_csrf_needs_token(self):
        assert not Settings(csrf_enabled=True).csrf_active
        assert Settings(csrf_enabled=True, csrf_token="x" * 16).csrf_active

    def test_short_csrf_token_rejected(self):
        with pytest.raises(ValidationError):
            Settings(csrf_token="short")

    def test_environment_properties(self):
        assert Settings(environment="development").is_development
        assert Settings(environment="production").is_production

    def test_environment_variables(self, monkeypatch):
        monkeypatch.setenv("PNAME_API_MAX_LINES", "5")
        monkeypatch.setenv("PNAME_API_CONTEXT_ROOT", "/names/")

        settings = get_settings()

        assert settings.max_lines == 5
        assert settings.context_root == "/names"
        assert get_settings() is settings


class TestClientSettings:
    """Client settings."""

    def test_environment_variables(self, monkeypatch):
        monkeypatch.setenv("PNAME_CLIENT_BASE_URL", "http://names.local:9000")
        monkeypatch.setenv("PNAME_CLIENT_CSRF_TOKEN", "tok")

        settings = ClientSettings()

        assert settings.base_url == "http://names.local:9000"
        assert settings.csrf_token == "tok"

    def test_base_url_requires_scheme(self):
        with pytest.raises(ValidationError):
            ClientSettings(base_url="names.local")
