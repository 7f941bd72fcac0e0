"""
Settings tests: environment loading and logger configuration.
"""

import logging

import pytest
from pydantic import ValidationError

from tagmap.config import KeyOrder, TagMapSettings, configure_logging, load_settings


ENV_VARS = ("TAGMAP_KEY_ORDER", "TAGMAP_LOG_LEVEL")


@pytest.fixture
def clean_env(monkeypatch):
    """Unset tagmap variables and restore them after the test, even if a dotenv file set them."""
    for name in ENV_VARS:
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)
    return monkeypatch


class TestLoadSettings:
    """Tests for environment-driven settings."""

    def test_defaults(self, clean_env, tmp_path):
        settings = load_settings(env_file=str(tmp_path / "missing.env"))
        assert settings.key_order == KeyOrder.INSERTION
        assert settings.log_level == "WARNING"

    def test_reads_environment(self, clean_env, tmp_path):
        clean_env.setenv("TAGMAP_KEY_ORDER", "Sorted")
        clean_env.setenv("TAGMAP_LOG_LEVEL", "debug")
        settings = load_settings(env_file=str(tmp_path / "missing.env"))
        assert settings.key_order == KeyOrder.SORTED
        assert settings.log_level == "DEBUG"

    def test_reads_dotenv_file(self, clean_env, tmp_path):
        env_file = tmp_path / ".env"
        env_file.write_text("TAGMAP_KEY_ORDER=sorted\nTAGMAP_LOG_LEVEL=INFO\n")
        settings = load_settings(env_file=str(env_file))
        assert settings.key_order == KeyOrder.SORTED
        assert settings.log_level == "INFO"

    def test_environment_wins_over_dotenv(self, clean_env, tmp_path):
        env_file = tmp_path / ".env"
        env_file.write_text("TAGMAP_KEY_ORDER=sorted\n")
        clean_env.setenv("TAGMAP_KEY_ORDER", "insertion")
        settings = load_settings(env_file=str(env_file))
        assert settings.key_order == KeyOrder.INSERTION

    def test_rejects_unknown_key_order(self, clean_env, tmp_path):
        clean_env.setenv("TAGMAP_KEY_ORDER", "random")
        with pytest.raises(ValidationError):
            load_settings(env_file=str(tmp_path / "missing.env"))

    def test_rejects_unknown_log_level(self):
        with pytest.raises(ValidationError):
            TagMapSettings(log_level="chatty")

    def test_finds_dotenv_in_working_directory(self, clean_env, tmp_path):
        (tmp_path / ".env").write_text("TAGMAP_KEY_ORDER=sorted\n")
        clean_env.chdir(tmp_path)
        assert load_settings().key_order == KeyOrder.SORTED


class TestConfigureLogging:
    """Tests for package logger configuration."""

    def test_sets_package_level(self):
        package_logger = logging.getLogger("tagmap")
        previous = package_logger.level
        try:
            configure_logging(TagMapSettings(log_level="debug"))
            assert package_logger.level == logging.DEBUG
            assert logging.getLogger("tagmap.core.container").getEffectiveLevel() == logging.DEBUG
        finally:
            package_logger.setLevel(previous)
