"""Logging setup for applications that want to see what straits does."""

import logging

from straits.config import get_settings, parse_log_level

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

_handler: logging.Handler | None = None


def setup_logging(level: int | str | None = None) -> logging.Logger:
    """
    Attach a stderr handler to the `straits` logger and set its level.

    Calling it again replaces the handler installed by the previous call;
    handlers added by the application are left alone.

    Args:
        level: A `logging` level number or name. Defaults to the
            `STRAITS_LOG_LEVEL` setting.

    Returns:
        The configured `straits` logger.

    Raises:
        ValueError: If `level` is not a valid log level.

    """
    global _handler
    log_level = get_settings().LOG_LEVEL if level is None else parse_log_level(level)

    straits_logger = logging.getLogger("straits")
    straits_logger.setLevel(log_level)

    if _handler is not None:
        straits_logger.removeHandler(_handler)
        _handler.close()
    _handler = logging.StreamHandler()
    _handler.setFormatter(logging.Formatter(LOG_FORMAT))
    straits_logger.addHandler(_handler)
    return straits_logger
