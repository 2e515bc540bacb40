"""Logging configuration."""

from __future__ import annotations

import logging


def configure_logging(level: str = "INFO") -> None:
    """Configure root logging for the terminal client."""

    level_value = getattr(logging, str(level).upper(), logging.INFO)

    logging.basicConfig(
        level=level_value,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )

    # Connection pool chatter is noise at DEBUG
    logging.getLogger("urllib3").setLevel(logging.WARNING)
