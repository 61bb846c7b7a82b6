"""Tests for configuration management."""

# Standard library imports
import os
from pathlib import Path

# Third-party imports
import pytest

# Local/package imports
from cmdwrap.config import (
    DEFAULT_MAX_ARGUMENT_LENGTH,
    CmdWrapConfig,
    clear_config,
    get_config,
)
from cmdwrap.core.exceptions import ConfigurationError


@pytest.fixture
def environ(monkeypatch):
    """Isolated copy of the environment that .env loading can write to."""
    patched = dict(os.environ)
    monkeypatch.setattr(os, "environ", patched)
    return patched


@pytest.fixture
def no_dotenv(monkeypatch, tmp_path):
    """Run from a directory without a .env file."""
    monkeypatch.chdir(tmp_path)


def test_default_config(no_dotenv):
    """Test default configuration values."""
    config = CmdWrapConfig()

    assert config.max_argument_length == DEFAULT_MAX_ARGUMENT_LENGTH == 32767
    assert config.cancel_timeout == 5.0
    assert config.encoding == "utf-8"
    assert config.encoding_errors == "replace"
    assert config.log_level == "INFO"
    assert config.log_file is None
    assert config.verbose is False
    assert config.debug is False


def test_environment_overrides(monkeypatch):
    """Test that CMDWRAP_* variables override defaults, converted by type."""
    monkeypatch.setenv("CMDWRAP_MAX_ARGUMENT_LENGTH", "8191")
    monkeypatch.setenv("CMDWRAP_CANCEL_TIMEOUT", "0.5")
    monkeypatch.setenv("CMDWRAP_ENCODING", "latin-1")
    monkeypatch.setenv("CMDWRAP_LOG_LEVEL", "debug")
    monkeypatch.setenv("CMDWRAP_LOG_FILE", "~/cmdwrap.log")
    monkeypatch.setenv("CMDWRAP_VERBOSE", "yes")
    monkeypatch.setenv("CMDWRAP_DEBUG", "off")

    config = CmdWrapConfig()

    assert config.max_argument_length == 8191
    assert config.cancel_timeout == 0.5
    assert config.encoding == "latin-1"
    assert config.log_level == "DEBUG"
    assert config.log_file == Path(os.path.expanduser("~/cmdwrap.log"))
    assert config.verbose is True
    assert config.debug is False


def test_inline_comments_are_ignored(monkeypatch):
    """Trailing comments copied from .env files do not break parsing."""
    monkeypatch.setenv("CMDWRAP_CANCEL_TIMEOUT", "2  # seconds")

    assert CmdWrapConfig().cancel_timeout == 2.0


@pytest.mark.parametrize(
    "name, value",
    [
        ("CMDWRAP_MAX_ARGUMENT_LENGTH", "many"),
        ("CMDWRAP_MAX_ARGUMENT_LENGTH", "0"),
        ("CMDWRAP_CANCEL_TIMEOUT", "-1"),
        ("CMDWRAP_ENCODING", ""),
        ("CMDWRAP_LOG_LEVEL", "LOUD"),
    ],
)
def test_invalid_values_raise(monkeypatch, name, value):
    monkeypatch.setenv(name, value)

    with pytest.raises(ConfigurationError) as excinfo:
        CmdWrapConfig()

    assert excinfo.value.field == name[len("CMDWRAP_"):].lower()


def test_get_config_is_cached(no_dotenv):
    """Test the configuration singleton."""
    config = get_config()

    assert get_config() is config
    assert get_config(force_refresh=True) is not config

    clear_config()
    assert get_config() is not config


def test_get_config_refresh_sees_new_environment(monkeypatch, no_dotenv):
    assert get_config().cancel_timeout == 5.0

    monkeypatch.setenv("CMDWRAP_CANCEL_TIMEOUT", "1.5")

    assert get_config().cancel_timeout == 5.0
    assert get_config(force_refresh=True).cancel_timeout == 1.5


def test_env_file_is_loaded(environ, tmp_path):
    env_file = tmp_path / ".env"
    env_file.write_text("CMDWRAP_CANCEL_TIMEOUT=2.5\nCMDWRAP_LOG_LEVEL=WARNING\n")

    config = get_config(force_refresh=True, env_file=env_file)

    assert config.cancel_timeout == 2.5
    assert config.log_level == "WARNING"


def test_environment_wins_over_env_file(environ, tmp_path):
    """Variables already set are not overridden by the .env file."""
    env_file = tmp_path / ".env"
    env_file.write_text("CMDWRAP_CANCEL_TIMEOUT=2.5\n")
    environ["CMDWRAP_CANCEL_TIMEOUT"] = "9"

    assert get_config(force_refresh=True, env_file=env_file).cancel_timeout == 9.0


def test_env_file_is_found_from_working_directory(environ, monkeypatch, tmp_path):
    (tmp_path / ".env").write_text("CMDWRAP_MAX_ARGUMENT_LENGTH=100\n")
    monkeypatch.chdir(tmp_path)

    assert get_config().max_argument_length == 100
