"""Logger module."""

import logging
import sys

import colorlog

from src.helpers.config import get_optional_env

loggers: dict[str, logging.Logger] = {}

LOG_LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def get_logger(
    name: str,
    log_handler: str = "stdout",
    log_level: str | None = None,
    log_color: bool = False,
) -> logging.Logger:
    """Get logger.

    Args:
        name: The name of the logger.
        log_handler: The log handler type ('stdout' or 'stderr').
        log_level: The logging level ('DEBUG', 'INFO', 'WARNING', 'ERROR',
            'CRITICAL'). Falls back to ETH_JSONRPC_LOG_LEVEL, then INFO.
        log_color: Whether to use colored output.

    Returns:
        logging.Logger: Configured logger instance.

    Raises:
        ValueError: If invalid handler or log level is provided.
    """
    if name in loggers:
        return loggers[name]

    streams = {"stdout": sys.stdout, "stderr": sys.stderr}
    if log_handler not in streams:
        err_msg = f"Invalid handler: {log_handler}"
        raise ValueError(err_msg)

    level_name = log_level or get_optional_env("ETH_JSONRPC_LOG_LEVEL", "INFO") or "INFO"
    level_name = level_name.upper()
    if level_name not in LOG_LEVELS:
        err_msg = f"Invalid log level: {level_name}"
        raise ValueError(err_msg)

    level = LOG_LEVELS[level_name]

    if log_color:
        logger = colorlog.getLogger(name)
        handler: logging.Handler = colorlog.StreamHandler(streams[log_handler])
        formatter: logging.Formatter = colorlog.ColoredFormatter(
            "%(log_color)s " + LOG_FORMAT,
            log_colors={
                "DEBUG": "cyan",
                "INFO": "green",
                "WARNING": "yellow",
                "ERROR": "red",
                "CRITICAL": "red,bg_white",
            },
        )
    else:
        logger = logging.getLogger(name)
        handler = logging.StreamHandler(streams[log_handler])
        formatter = logging.Formatter(LOG_FORMAT)

    logger.setLevel(level)
    handler.setLevel(level)
    handler.setFormatter(formatter)
    logger.addHandler(handler)

    loggers[name] = logger
    return logger


__all__ = ["LOG_LEVELS", "get_logger"]
