"""Process-wide logging configuration."""

from __future__ import annotations

import logging

from civic_pulse.core.settings import settings

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: str | None = None) -> None:
    """Install a single stream handler on the root logger.

    Calling this more than once only adjusts the level.
    """
    root = logging.getLogger()
    root.setLevel((level or settings.log_level).upper())
    if not any(getattr(handler, "_civic_pulse", False) for handler in root.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler._civic_pulse = True  # type: ignore[attr-defined]
        root.addHandler(handler)

    # SQL echo is controlled separately through SQL_DEBUG.
    logging.getLogger("sqlalchemy.engine").setLevel(
        logging.INFO if settings.sql_debug else logging.WARNING
    )
