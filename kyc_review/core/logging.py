"""Logging utilities shared across the review console."""
from __future__ import annotations

import logging
import os

# Transport loggers that only matter when debugging the service client.
QUIET_LOGGERS = ("urllib3",)


def configure_logging(level: str | None = None) -> None:
    """Initialize console logging for the CLI and the Streamlit page.

    The level comes from ``level`` or ``LOG_LEVEL`` (default ``INFO``). Below
    ``DEBUG`` the transport loggers are held at ``WARNING`` so connection-pool
    chatter does not drown out queue and action messages.
    """

    resolved_level = (level or os.getenv("LOG_LEVEL", "INFO")).upper()
    logging.basicConfig(
        level=resolved_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    quiet_level = logging.DEBUG if resolved_level == "DEBUG" else logging.WARNING
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(quiet_level)
