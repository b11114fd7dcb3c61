from __future__ import annotations

import logging

from .config import settings

_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: str | None = None) -> None:
    """Install a single stream handler on the ``trackpg`` logger."""
    logger = logging.getLogger("trackpg")
    logger.setLevel((level or settings.log_level).upper())
    if any(getattr(h, "_trackpg", False) for h in logger.handlers):
        return
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(_FORMAT))
    handler._trackpg = True  # type: ignore[attr-defined]
    logger.addHandler(handler)
