"""Tests for core.settings module.

Covers:
- StepbackSettings defaults
- STEPBACK_* environment overrides
- Field validation
"""

from pathlib import Path

import pytest
from pydantic import ValidationError

from stepback.core.settings import StepbackSettings


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch, tmp_path):
    for key in (
        "STEPBACK_ROLLBACK_ON_FAILURE",
        "STEPBACK_MIGRATIONS_DIR",
        "STEPBACK_CATALOG",
        "STEPBACK_LOG_LEVEL",
        "STEPBACK_JSON_LOGS",
        "STEPBACK_CHANNEL_MAXSIZE",
    ):
        monkeypatch.delenv(key, raising=False)
    # keep a stray .env in the working directory out of the picture
    monkeypatch.chdir(tmp_path)


class TestStepbackSettingsDefaults:
    def test_defaults(self):
        s = StepbackSettings()
        assert s.rollback_on_failure is False
        assert s.migrations_dir == Path("migrations")
        assert s.catalog is None
        assert s.log_level == "INFO"
        assert s.json_logs is None
        assert s.channel_maxsize == 0


class TestStepbackSettingsEnvOverride:
    def test_rollback_from_env(self, monkeypatch):
        monkeypatch.setenv("STEPBACK_ROLLBACK_ON_FAILURE", "true")
        assert StepbackSettings().rollback_on_failure is True

    def test_catalog_from_env(self, monkeypatch):
        monkeypatch.setenv("STEPBACK_CATALOG", "app.migrations:catalog")
        assert StepbackSettings().catalog == "app.migrations:catalog"

    def test_migrations_dir_from_env(self, monkeypatch, tmp_path):
        monkeypatch.setenv("STEPBACK_MIGRATIONS_DIR", str(tmp_path))
        assert StepbackSettings().migrations_dir == tmp_path

    def test_log_level_normalised(self, monkeypatch):
        monkeypatch.setenv("STEPBACK_LOG_LEVEL", "debug")
        assert StepbackSettings().log_level == "DEBUG"

    def test_unprefixed_vars_ignored(self, monkeypatch):
        monkeypatch.setenv("ROLLBACK_ON_FAILURE", "true")
        assert StepbackSettings().rollback_on_failure is False

    def test_dotenv_file(self, tmp_path):
        (tmp_path / ".env").write_text("STEPBACK_CHANNEL_MAXSIZE=8\n", encoding="utf-8")
        assert StepbackSettings().channel_maxsize == 8


class TestStepbackSettingsValidation:
    def test_bad_log_level(self):
        with pytest.raises(ValidationError):
            StepbackSettings(log_level="LOUD")

    def test_catalog_needs_attribute(self):
        with pytest.raises(ValidationError):
            StepbackSettings(catalog="just.a.module")

    def test_negative_channel_size(self):
        with pytest.raises(ValidationError):
            StepbackSettings(channel_maxsize=-1)
