"""Logging utilities shared across the supportlog package."""
from __future__ import annotations

import logging
import os

# HTTP client loggers used by the REST record store
NOISY_LOGGERS = ("urllib3", "requests")


def configure_logging(level: str | None = None) -> None:
    """Initialize basic logging with a shared format and log level.

    The level can be provided directly or via the ``LOG_LEVEL`` environment
    variable (defaults to ``INFO``). The CLI and the dashboard both call this
    at startup so store failures and rollbacks land in the same stream.
    Per-request chatter from the HTTP client only shows up at ``DEBUG``.
    """

    resolved_level = (level or os.getenv("LOG_LEVEL", "INFO")).upper()
    logging.basicConfig(
        level=resolved_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    client_level = logging.DEBUG if resolved_level == "DEBUG" else logging.WARNING
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(client_level)
