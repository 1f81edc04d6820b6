"""
Tests for hrms_portal/core/config.py - Settings and startup validation.
"""
import pytest


class TestSettingsValidation:
    """Test configuration validation logic."""

    def test_development_defaults(self):
        """Development mode accepts the local http backend."""
        from hrms_portal.core.config import Settings

        settings = Settings(ENVIRONMENT="development", DEBUG=True)

        assert settings.api_url == "http://localhost:5001/api/v1"
        assert "/auth/login" in settings.AUTH_ENDPOINTS

    def test_api_url_strips_trailing_slash(self):
        """The base path is appended exactly once."""
        from hrms_portal.core.config import Settings

        settings = Settings(API_BASE_URL="https://hr.example.com/")

        assert settings.api_url == "https://hr.example.com/api/v1"

    def test_production_requires_https(self):
        """Production must not send bearer tokens over plain http."""
        from hrms_portal.core.config import Settings

        with pytest.raises(ValueError) as exc_info:
            Settings(ENVIRONMENT="production", DEBUG=False, API_BASE_URL="http://hr.example.com")

        assert "https" in str(exc_info.value)

    def test_production_rejects_debug(self):
        """DEBUG must be off in production."""
        from hrms_portal.core.config import Settings

        with pytest.raises(ValueError) as exc_info:
            Settings(ENVIRONMENT="production", DEBUG=True, API_BASE_URL="https://hr.example.com")

        assert "DEBUG must be False in production" in str(exc_info.value)

    def test_all_errors_reported_together(self):
        """Every violation appears in the same error."""
        from hrms_portal.core.config import Settings

        with pytest.raises(ValueError) as exc_info:
            Settings(ENVIRONMENT="production", DEBUG=True, API_BASE_URL="http://hr.example.com")

        message = str(exc_info.value)
        assert "https" in message
        assert "DEBUG" in message

    def test_rejects_non_http_scheme(self):
        """API_BASE_URL must be an http(s) URL."""
        from hrms_portal.core.config import Settings

        with pytest.raises(ValueError):
            Settings(API_BASE_URL="ftp://hr.example.com")


class TestSettingsParsing:
    """Test list parsing and derived values."""

    def test_auth_endpoints_from_comma_string(self):
        """Comma-separated endpoints are split and trimmed."""
        from hrms_portal.core.config import Settings

        settings = Settings(AUTH_ENDPOINTS="/auth/login, /auth/register ,")

        assert settings.AUTH_ENDPOINTS == ["/auth/login", "/auth/register"]

    def test_max_upload_bytes(self):
        """Upload limit is expressed in megabytes."""
        from hrms_portal.core.config import Settings

        settings = Settings(MAX_UPLOAD_SIZE_MB=2)

        assert settings.max_upload_bytes == 2 * 1024 * 1024
