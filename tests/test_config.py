"""Tests for settings loading."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from rulesmith.config import config_file_exists, get_config_path, get_settings, reset_settings
from rulesmith.core.rules.models import KeyMode
from rulesmith.infrastructure.engine.args import OutputFormat


class TestConfigPath:
    def test_override(self, tmp_path):
        assert get_config_path() == tmp_path / "config.toml"
        assert not config_file_exists()

    def test_default_location(self, monkeypatch):
        monkeypatch.delenv("RULESMITH_CONFIG")

        assert get_config_path() == Path.home() / ".config" / "rulesmith" / "config.toml"


class TestSettings:
    """Tests for the settings sources and their precedence."""

    def test_defaults(self):
        settings = get_settings()

        assert settings.ENGINE_BINARY == "semgrep"
        assert settings.ENGINE_TIMEOUT is None
        assert settings.METRICS is False
        assert settings.OUTPUT_FORMAT == OutputFormat.JSON
        assert settings.KEY_MODE == KeyMode.SIMPLE
        assert settings.RULE_EXTENSIONS == ["yml", "yaml"]
        assert settings.EXCLUDE_SUFFIXES == [".test.yml", ".test.yaml", ".test.fixed.yaml"]
        assert settings.POLICY_PATHS == []

    def test_singleton(self):
        assert get_settings() is get_settings()

    def test_reset(self):
        first = get_settings()
        reset_settings()

        assert get_settings() is not first

    def test_toml_file(self, tmp_path):
        (tmp_path / "config.toml").write_text(
            'ENGINE_BINARY = "/usr/local/bin/semgrep"\n'
            'KEY_MODE = "complete"\n'
            'POLICY_PATHS = ["/srv/policies"]\n'
        )

        settings = get_settings()

        assert config_file_exists()
        assert settings.ENGINE_BINARY == "/usr/local/bin/semgrep"
        assert settings.KEY_MODE == KeyMode.COMPLETE
        assert settings.POLICY_PATHS == ["/srv/policies"]

    def test_environment_overrides_file(self, tmp_path, monkeypatch):
        (tmp_path / "config.toml").write_text('ENGINE_BINARY = "from-file"\nMETRICS = false\n')
        monkeypatch.setenv("RULESMITH_ENGINE_BINARY", "from-env")

        settings = get_settings()

        assert settings.ENGINE_BINARY == "from-env"
        assert settings.METRICS is False

    def test_environment_values(self, monkeypatch):
        monkeypatch.setenv("RULESMITH_METRICS", "true")
        monkeypatch.setenv("RULESMITH_OUTPUT_FORMAT", "sarif")
        monkeypatch.setenv("RULESMITH_RULE_EXTENSIONS", '["yaml"]')

        settings = get_settings()

        assert settings.METRICS is True
        assert settings.OUTPUT_FORMAT == OutputFormat.SARIF
        assert settings.RULE_EXTENSIONS == ["yaml"]

    def test_invalid_value(self, monkeypatch):
        monkeypatch.setenv("RULESMITH_KEY_MODE", "fuzzy")

        with pytest.raises(ValidationError):
            get_settings()
