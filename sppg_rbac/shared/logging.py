"""Logging configuration for the service and the provisioning CLI."""

import logging
import sys

from sppg_rbac.core.config import get_settings

# Chatty at INFO; kept at WARNING unless settings.debug.
NOISY_LOGGERS = ("aiosqlite", "asyncio", "httpx", "httpcore")


def setup_logging() -> None:
    """Configure root logging once: stdout, DEBUG when settings.debug else INFO.

    SQL echo stays governed by DATABASE_ECHO, not by this level.
    """
    settings = get_settings()
    log_level = logging.DEBUG if settings.debug else logging.INFO
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
    )
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(log_level if settings.debug else logging.WARNING)
