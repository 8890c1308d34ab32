"""
Logging setup shared by the storefront runtime and the voice_agent package.

Both package loggers write to one stdout handler. The level comes from the
LOG_LEVEL environment variable (default INFO).
"""
import logging
import os
import sys

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
PACKAGE_LOGGERS = ("storefront", "voice_agent")


def _configure(names=PACKAGE_LOGGERS, level: str = LOG_LEVEL) -> logging.Logger:
    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))

    for name in names:
        package_logger = logging.getLogger(name)
        package_logger.setLevel(level)
        if not package_logger.handlers:
            package_logger.addHandler(handler)
        # Root handlers would print every line twice
        package_logger.propagate = False
    return logging.getLogger(names[0])


logger = _configure()


def get_logger(name: str = None) -> logging.Logger:
    """Return ``storefront.<name>``, or the package logger when name is empty."""
    if name:
        return logging.getLogger(f"storefront.{name}")
    return logger
