"""Process logging configuration shared by the API entrypoint and bootstrap."""

from __future__ import annotations

import logging

_LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"
_UVICORN_LOGGERS = ("uvicorn", "uvicorn.error", "uvicorn.access")


def resolve_log_level(level: str) -> int:
    """Map a level name such as `debug` to its numeric value, defaulting to INFO."""

    normalized_level = level.strip().upper() if level.strip() else "INFO"
    resolved = getattr(logging, normalized_level, logging.INFO)
    return resolved if isinstance(resolved, int) else logging.INFO


def configure_logging(*, level: str) -> None:
    """Configure root logging and keep uvicorn loggers on the same level."""

    resolved_level = resolve_log_level(level)
    logging.basicConfig(
        level=resolved_level,
        format=_LOG_FORMAT,
    )
    for name in _UVICORN_LOGGERS:
        logging.getLogger(name).setLevel(resolved_level)
