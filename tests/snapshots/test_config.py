"""Tests for configuration validation."""

import os

import pytest

from services.snapshots.app.core.config import Settings, get_settings, validate_settings


class TestSettingsValidation:
    """Tests for validate_settings function."""

    def test_validate_settings_missing_database_url(self):
        """Test that missing DATABASE_URL raises ValueError."""
        settings = Settings(database_url="")

        with pytest.raises(ValueError) as exc_info:
            validate_settings(settings)

        assert "DATABASE_URL is required" in str(exc_info.value)

    def test_validate_settings_whitespace_only_database_url(self):
        settings = Settings(database_url="   ")

        with pytest.raises(ValueError):
            validate_settings(settings)

    def test_unknown_backend_rejected(self):
        settings = Settings(db_backend="db2")

        with pytest.raises(ValueError) as exc_info:
            validate_settings(settings)

        assert "DB_BACKEND" in str(exc_info.value)

    @pytest.mark.parametrize("backend", ["postgresql", "oracle", "sqlite", "Oracle"])
    def test_known_backends_accepted(self, backend):
        validate_settings(Settings(db_backend=backend))

    def test_missing_audit_log_path_rejected(self):
        with pytest.raises(ValueError, match="AUDIT_LOG_PATH"):
            validate_settings(Settings(audit_log_path=""))

    @pytest.mark.parametrize(
        "field", ["default_interval_days", "default_batch_size"]
    )
    def test_non_positive_defaults_rejected(self, field):
        with pytest.raises(ValueError):
            validate_settings(Settings(**{field: 0}))

    def test_sqlite_in_production_only_warns(self, capsys):
        validate_settings(Settings(env="production", database_url="sqlite:///x.db"))

        assert "[warn]" in capsys.readouterr().out


class TestGetSettings:
    def test_reads_environment(self):
        os.environ["DB_BACKEND"] = "oracle"
        os.environ["AUDIT_LOG_PATH"] = "/tmp/audit.log"

        settings = get_settings()

        assert settings.db_backend == "oracle"
        assert settings.audit_log_path == "/tmp/audit.log"

    def test_is_cached(self):
        assert get_settings() is get_settings()

    def test_defaults(self):
        settings = Settings()

        assert settings.default_interval_days == 90
        assert settings.default_batch_size == 1000
        assert settings.default_audit_user == "root"
