from __future__ import annotations

import logging
import os
import sys
from pathlib import Path

LOG_LEVEL_ENV = "FSMKIT_LOG_LEVEL"
_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

_FSMKIT_HANDLER: logging.Handler | None = None
_CONFIGURED_TARGET: str | None = None


def _level_from_name(name: str | None) -> int:
    if not name:
        return logging.WARNING
    value = logging.getLevelName(name.strip().upper())
    return value if isinstance(value, int) else logging.WARNING


def resolve_level(level: int | str | None = None) -> int:
    """Return the level from ``level``, else ``FSMKIT_LOG_LEVEL``, else WARNING."""
    if isinstance(level, int):
        return level
    if level:
        return _level_from_name(level)
    return _level_from_name(os.environ.get(LOG_LEVEL_ENV))


def configure_logging(*, level: int | str | None = None, log_path: Path | None = None) -> logging.Logger:
    """Attach a single handler to the ``fsmkit`` logger.

    Logs go to stderr unless ``log_path`` is given. Idempotent per target:
    calling again with the same target only updates the level.
    """
    global _FSMKIT_HANDLER, _CONFIGURED_TARGET

    logger = logging.getLogger("fsmkit")
    resolved_level = resolve_level(level)
    logger.setLevel(resolved_level)

    target = str(Path(log_path).resolve()) if log_path else "<stderr>"
    if _CONFIGURED_TARGET == target and _FSMKIT_HANDLER is not None:
        _FSMKIT_HANDLER.setLevel(resolved_level)
        return logger

    if _FSMKIT_HANDLER is not None:
        logger.removeHandler(_FSMKIT_HANDLER)
        _FSMKIT_HANDLER.close()
        _FSMKIT_HANDLER = None

    if log_path:
        Path(target).parent.mkdir(parents=True, exist_ok=True)
        handler: logging.Handler = logging.FileHandler(target, encoding="utf-8")
    else:
        handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(resolved_level)
    handler.setFormatter(logging.Formatter(_FORMAT))
    logger.addHandler(handler)

    _FSMKIT_HANDLER = handler
    _CONFIGURED_TARGET = target
    return logger


def reset_logging_for_tests() -> None:
    """Test-only: remove the handler installed by :func:`configure_logging`."""
    global _FSMKIT_HANDLER, _CONFIGURED_TARGET
    if _FSMKIT_HANDLER is not None:
        logging.getLogger("fsmkit").removeHandler(_FSMKIT_HANDLER)
        _FSMKIT_HANDLER.close()
    _FSMKIT_HANDLER = None
    _CONFIGURED_TARGET = None


__all__ = ["LOG_LEVEL_ENV", "configure_logging", "reset_logging_for_tests", "resolve_level"]
