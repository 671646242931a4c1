"""Tests for settings and logging setup."""

import logging
import sys

import pytest
from pydantic import ValidationError

import straits
from straits.config import StraitsSettings, get_settings, parse_log_level, reload_settings
from straits.logging_config import setup_logging


@pytest.fixture
def straits_logger():
    """Yield the straits logger and restore its level and handlers afterwards."""
    logger = logging.getLogger("straits")
    level = logger.level
    handlers = list(logger.handlers)
    yield logger
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    for handler in handlers:
        logger.addHandler(handler)
    logger.setLevel(level)


def test_settings_defaults():
    """Test the default settings."""
    settings = StraitsSettings()
    assert settings.STRICT_REBINDING is False
    assert settings.LOG_LEVEL == logging.WARNING


def test_settings_from_environment(monkeypatch: pytest.MonkeyPatch):
    """Test that settings are read from STRAITS_* variables and level names are converted."""
    monkeypatch.setenv("STRAITS_STRICT_REBINDING", "true")
    monkeypatch.setenv("STRAITS_LOG_LEVEL", "debug")
    settings = StraitsSettings()
    assert settings.STRICT_REBINDING is True
    assert settings.LOG_LEVEL == logging.DEBUG


def test_settings_reject_invalid_log_level(monkeypatch: pytest.MonkeyPatch):
    """Test that an unknown STRAITS_LOG_LEVEL fails validation."""
    monkeypatch.setenv("STRAITS_LOG_LEVEL", "chatty")
    with pytest.raises(ValidationError, match="Invalid log level 'chatty'"):
        StraitsSettings()


@pytest.mark.parametrize(
    ("value", "expected"),
    [("info", logging.INFO), (" Error ", logging.ERROR), ("15", 15), (logging.CRITICAL, logging.CRITICAL)],
)
def test_parse_log_level(value, expected):
    """Test the accepted forms of a log level."""
    assert parse_log_level(value) == expected


@pytest.mark.parametrize("value", ["LOUD", -1, True])
def test_parse_log_level_rejects_invalid(value):
    """Test that unknown names and nonsensical numbers are refused."""
    with pytest.raises(ValueError, match="Invalid log level"):
        parse_log_level(value)


def test_get_settings_is_cached(monkeypatch: pytest.MonkeyPatch):
    """Test that get_settings caches until reload_settings is called."""
    settings = get_settings()
    assert get_settings() is settings
    monkeypatch.setenv("STRAITS_STRICT_REBINDING", "1")
    assert get_settings().STRICT_REBINDING is False
    reloaded = reload_settings()
    assert reloaded is not settings
    assert get_settings().STRICT_REBINDING is True


def test_setup_logging_is_exported():
    """Test that setup_logging is part of the package API."""
    assert straits.setup_logging is setup_logging


def test_setup_logging_with_level(straits_logger: logging.Logger):
    """Test that repeated setup keeps a single stderr handler at the last level."""
    assert setup_logging(logging.INFO) is straits_logger
    setup_logging("debug")
    assert straits_logger.level == logging.DEBUG
    stream_handlers = [h for h in straits_logger.handlers if isinstance(h, logging.StreamHandler)]
    assert len(stream_handlers) == 1
    assert stream_handlers[0].stream is sys.stderr


def test_setup_logging_keeps_application_handlers(straits_logger: logging.Logger):
    """Test that handlers not installed by setup_logging survive a reconfiguration."""
    own_handler = logging.NullHandler()
    straits_logger.addHandler(own_handler)
    setup_logging("info")
    setup_logging("warning")
    assert own_handler in straits_logger.handlers


def test_setup_logging_from_settings(monkeypatch: pytest.MonkeyPatch, straits_logger: logging.Logger):
    """Test that the level falls back to STRAITS_LOG_LEVEL."""
    monkeypatch.setenv("STRAITS_LOG_LEVEL", "info")
    setup_logging()
    assert straits_logger.level == logging.INFO


def test_setup_logging_default(straits_logger: logging.Logger):
    """Test the default level when nothing is configured."""
    setup_logging()
    assert straits_logger.level == logging.WARNING


def test_setup_logging_rejects_invalid_level(straits_logger: logging.Logger):
    """Test that an invalid explicit level raises instead of being ignored."""
    with pytest.raises(ValueError, match="LOUD"):
        setup_logging("LOUD")


def test_setup_logging_output(straits_logger: logging.Logger, capsys: pytest.CaptureFixture[str]):
    """Test that records from straits modules reach stderr in the configured format."""
    setup_logging("debug")
    logging.getLogger("straits.registry").debug("bound %s", "thing")
    err = capsys.readouterr().err
    assert "straits.registry - DEBUG - bound thing" in err
