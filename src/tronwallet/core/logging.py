"""Logging setup for applications embedding the wallet."""

import logging
import sys

from tronwallet.core.config import get_settings

CONSOLE_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOGFMT_FORMAT = 'ts=%(asctime)s logger=%(name)s level=%(levelname)s msg="%(message)s"'

_HANDLER_NAME = "tronwallet"


def configure_logging(level: str | None = None, fmt: str | None = None) -> logging.Logger:
    """Install a stdout handler on the ``tronwallet`` logger.

    Args:
        level: Logging level name (defaults to ``Settings.log_level``)
        fmt: ``"console"`` or ``"logfmt"`` (defaults to ``Settings.log_format``)

    Returns:
        The configured package logger
    """
    settings = get_settings()
    level = (level or settings.log_level).upper()
    fmt = fmt or settings.log_format

    logger = logging.getLogger("tronwallet")
    logger.setLevel(level)

    # Replace our own handler on repeated calls, leave foreign ones alone
    for handler in list(logger.handlers):
        if handler.get_name() == _HANDLER_NAME:
            logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stdout)
    handler.set_name(_HANDLER_NAME)
    handler.setFormatter(
        logging.Formatter(LOGFMT_FORMAT if fmt == "logfmt" else CONSOLE_FORMAT)
    )
    logger.addHandler(handler)
    return logger
