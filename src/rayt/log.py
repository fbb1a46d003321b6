"""Logging configuration for rayt."""

import logging

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
CONSOLE_HANDLER_NAME = "rayt.console"


def setup_logging(level: str = "INFO", name: str = "rayt") -> logging.Logger:
    """Attach a console handler to the package logger.

    Calling this more than once replaces the previous handler instead of
    adding a second one.

    Args:
        level: Log level name (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        name: Logger to configure.

    Returns:
        The configured logger.

    Raises:
        ValueError: If level is not a known log level name.
    """
    numeric_level = logging.getLevelName(level.upper())
    if not isinstance(numeric_level, int):
        raise ValueError(f"Unknown log level: {level!r}")

    logger = logging.getLogger(name)
    logger.setLevel(numeric_level)

    for handler in list(logger.handlers):
        if handler.get_name() == CONSOLE_HANDLER_NAME:
            logger.removeHandler(handler)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(numeric_level)
    console_handler.setFormatter(logging.Formatter(LOG_FORMAT))
    console_handler.set_name(CONSOLE_HANDLER_NAME)
    logger.addHandler(console_handler)

    return logger
