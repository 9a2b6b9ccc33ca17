"""Logging setup shared by the services, store and CLI."""

import logging
import os
import sys

_FORMAT = "%(asctime)s  %(levelname)-8s  %(name)s  %(message)s"
_DATE_FMT = "%Y-%m-%d %H:%M:%S"
_configured = False


def get_logger(name: str) -> logging.Logger:
    """Return a named logger; configures the root handler on first call."""
    global _configured
    if not _configured:
        configure_logging(os.environ.get("LOG_LEVEL", "INFO"))
    return logging.getLogger(name)


def configure_logging(level_name: str) -> None:
    """Attach a stderr handler to the root logger (once) and set its level."""
    global _configured
    _configured = True
    level = getattr(logging, str(level_name).upper(), logging.INFO)

    root = logging.getLogger()
    root.setLevel(level)
    if root.handlers:
        return

    console = logging.StreamHandler(sys.stderr)
    console.setFormatter(logging.Formatter(_FORMAT, datefmt=_DATE_FMT))
    root.addHandler(console)
