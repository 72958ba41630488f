"""Tests for configuration management."""

import json

import pytest

from jobmatch.core.errors import ConfigurationError
from jobmatch.utils.config import Config
from jobmatch.utils.logging_setup import configure_logging


@pytest.fixture
def config_path(tmp_path):
    return tmp_path / "jobmatch" / "config.json"


class TestConfig:
    """Tests for the Config class."""

    def test_defaults_without_file(self, config_path):
        config = Config(str(config_path))
        assert config.get("analysis.timeout_seconds") == 30
        assert config.get("batch.batch_size") == 3
        assert config.get("missing.key", "fallback") == "fallback"

    def test_file_is_deep_merged(self, config_path):
        config_path.parent.mkdir(parents=True)
        config_path.write_text(json.dumps({"analysis": {"max_retries": 5}}), encoding="utf-8")

        config = Config(str(config_path))

        assert config.get("analysis.max_retries") == 5
        assert config.get("analysis.timeout_seconds") == 30

    def test_invalid_file(self, config_path):
        config_path.parent.mkdir(parents=True)
        config_path.write_text("{oops", encoding="utf-8")
        with pytest.raises(ConfigurationError):
            Config(str(config_path))

    def test_defaults_are_not_shared(self, tmp_path):
        first = Config(str(tmp_path / "a.json"))
        first.set("batch.batch_size", 10)
        second = Config(str(tmp_path / "b.json"))
        assert second.get("batch.batch_size") == 3

    def test_set_and_save(self, config_path):
        config = Config(str(config_path))
        config.set("scoring.jitter", 2)
        config.save()

        reloaded = Config(str(config_path))
        assert reloaded.get("scoring.jitter") == 2

    def test_environment_key_takes_precedence(self, config_path, monkeypatch):
        config = Config(str(config_path))
        config.set("api_keys.anthropic", "from-file")
        assert config.get_api_key("anthropic") == "from-file"

        monkeypatch.setenv("ANTHROPIC_API_KEY", "from-env")
        assert config.get_api_key("anthropic") == "from-env"

    def test_require_api_key(self, config_path):
        config = Config(str(config_path))
        with pytest.raises(ConfigurationError, match="OPENAI_API_KEY"):
            config.require_api_key("openai")

    def test_set_api_key_persists(self, config_path):
        Config(str(config_path)).set_api_key("openai", "sk-saved")
        assert Config(str(config_path)).require_api_key("openai") == "sk-saved"

    def test_typed_sections(self, config_path):
        config = Config(str(config_path))
        config.set("analysis.timeout_seconds", "12")
        config.set("batch.batch_delay_seconds", 2)

        assert config.get_analysis_config()["timeout"] == 12.0
        assert config.get_analysis_config()["model"] is None
        assert config.get_batch_config() == {"batch_size": 3, "batch_delay": 2.0, "concurrency": 3}
        assert config.get_scoring_config()["jitter"] == 0
        assert config.get_log_level() == "WARNING"

    def test_unknown_provider(self, config_path):
        config = Config(str(config_path))
        config.set("analysis.provider", "nope")
        with pytest.raises(ConfigurationError):
            config.get_analysis_config()

    def test_print_config_masks_keys(self, config_path, capsys):
        config = Config(str(config_path))
        config.set("api_keys.anthropic", "sk-ant-1234567890")

        config.print_config()

        output = capsys.readouterr().out
        assert "sk-ant-1234567890" not in output
        assert "sk-a...7890" in output
        assert "(not set)" in output


class TestConfigureLogging:
    """Tests for logging setup."""

    def test_sets_root_level(self):
        import logging

        configure_logging("debug")
        assert logging.getLogger().level == logging.DEBUG
        configure_logging(logging.WARNING)
        assert logging.getLogger().level == logging.WARNING

    def test_unknown_level(self):
        with pytest.raises(ValueError):
            configure_logging("chatty")
