"""Base structured logging utilities for the realm client.

Central place to configure consistent JSON (or plain) logging so the
resolver, pager, query client and transports do not set up loggers ad hoc.

``normalized_log_event`` wraps ``log_event`` and injects canonical structured
keys across components: ``structured`` (bool), ``phase`` (str), ``attempt``
(int|None), ``error_code`` (str|None) and ``count`` (int|None).
"""
from __future__ import annotations

import logging
import json
import sys
import os
import contextlib
from logging.handlers import RotatingFileHandler
from typing import Any, Dict, Optional

from .log_support import JsonFormatter, LogContext


BASE_LOGGER_NAME = "realm_providers"
LOG_LEVEL_ENV = "REALM_LOG_LEVEL"

_BASE_LOGGER_ATTR = "_realm_logger_initialized"
_CONSOLE_HANDLER_ATTR = "_realm_console_handler"
_FILE_HANDLER_ATTR = "_realm_file_handler"
_PLAIN_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"

# Level pinned by configure_logger; wins over REALM_LOG_LEVEL and call-site defaults.
_LEVEL_OVERRIDE: Optional[int] = None


def _formatter(json_mode: bool) -> logging.Formatter:
    return JsonFormatter() if json_mode else logging.Formatter(_PLAIN_FORMAT)


def _parse_level(value: str | None, default: int = logging.INFO) -> int:
    """Parse a logging level string into an integer constant.

    Accepts common names (DEBUG, INFO, WARNING, ERROR, CRITICAL) case-insensitively.
    Falls back to ``default`` on unknown values.
    """
    if not value:
        return default
    mapping = {
        "DEBUG": logging.DEBUG,
        "INFO": logging.INFO,
        "WARN": logging.WARNING,
        "WARNING": logging.WARNING,
        "ERROR": logging.ERROR,
        "CRITICAL": logging.CRITICAL,
    }
    return mapping.get(value.strip().upper(), default)


def _ensure_base_logger(json_mode: bool, level: int) -> logging.Logger:
    """Initialize and return the shared ``realm_providers`` logger."""

    logger = logging.getLogger(BASE_LOGGER_NAME)
    if _LEVEL_OVERRIDE is not None:
        desired_level = _LEVEL_OVERRIDE
    else:
        desired_level = _parse_level(os.getenv(LOG_LEVEL_ENV), default=level)
    if getattr(logger, _BASE_LOGGER_ATTR, False):
        if logger.level != desired_level:
            logger.setLevel(desired_level)
        for existing in list(logger.handlers):
            if not getattr(existing, _CONSOLE_HANDLER_ATTR, False):
                continue
            existing.setLevel(desired_level)
            # Follow stderr replacement (pytest capture, CLI redirection).
            if isinstance(existing, logging.StreamHandler) and existing.stream is not sys.stderr:
                with contextlib.suppress(ValueError):
                    existing.setStream(sys.stderr)
            if json_mode != isinstance(existing.formatter, JsonFormatter):
                existing.setFormatter(_formatter(json_mode))
        return logger

    logger.setLevel(desired_level)
    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(desired_level)
    handler.setFormatter(_formatter(json_mode))
    setattr(handler, _CONSOLE_HANDLER_ATTR, True)
    logger.handlers[:] = [handler]
    logger.propagate = False
    setattr(logger, _BASE_LOGGER_ATTR, True)
    return logger


def get_logger(name: str = BASE_LOGGER_NAME, json_mode: bool = True, level: int = logging.INFO) -> logging.Logger:
    """Return a logger under the shared ``realm_providers`` hierarchy.

    Child loggers carry no handlers of their own and propagate to the base
    logger, so a single console handler (and optional file handler) emits
    everything.
    """
    base_logger = _ensure_base_logger(json_mode=json_mode, level=level)
    if name == BASE_LOGGER_NAME:
        return base_logger

    logger = logging.getLogger(name)
    for handler in list(logger.handlers):
        if getattr(handler, _CONSOLE_HANDLER_ATTR, False):
            logger.removeHandler(handler)
            with contextlib.suppress(Exception):
                handler.close()
    logger.setLevel(logging.NOTSET)
    logger.propagate = True
    return logger


def configure_logger(
    *,
    level: int | str | None = None,
    file_path: Optional[str] = None,
    json_mode: bool = True,
) -> logging.Logger:
    """Reconfigure the shared realm logger at runtime.

    Parameters
    ----------
    level: int | str | None
        Desired logging level. Accepts numeric levels or names (e.g., "DEBUG").
        When ``None``, the current level is preserved. A level set here stays
        pinned for later ``get_logger`` calls and wins over ``REALM_LOG_LEVEL``.
    file_path: Optional[str]
        When provided, a rotating file handler is attached (or reused) writing
        to ``file_path``. When ``None``, any file handler previously attached
        by this function is removed.
    json_mode: bool
        Whether to use the JSON formatter or a plain text formatter.

    Returns
    -------
    logging.Logger
        The configured base logger.
    """
    global _LEVEL_OVERRIDE
    logger = _ensure_base_logger(json_mode=json_mode, level=logging.INFO)

    if level is not None:
        _LEVEL_OVERRIDE = _parse_level(level, default=logger.level) if isinstance(level, str) else level
        logger.setLevel(_LEVEL_OVERRIDE)
        for h in logger.handlers:
            h.setLevel(logger.level)

    managed = [h for h in logger.handlers if getattr(h, _FILE_HANDLER_ATTR, False)]
    if file_path is None:
        for h in managed:
            logger.removeHandler(h)
            h.close()
        return logger

    abs_path = os.path.abspath(os.path.expanduser(file_path))
    os.makedirs(os.path.dirname(abs_path), exist_ok=True)

    existing: Optional[logging.FileHandler] = None
    for h in managed:
        if isinstance(h, logging.FileHandler) and getattr(h, "baseFilename", None) == abs_path:
            existing = h
        else:
            logger.removeHandler(h)
            h.close()

    if existing is None:
        fh = RotatingFileHandler(abs_path, maxBytes=10 * 1024 * 1024, backupCount=5, encoding="utf-8")
        setattr(fh, _FILE_HANDLER_ATTR, True)
        existing = fh
        logger.addHandler(fh)
    existing.setFormatter(_formatter(json_mode))
    existing.setLevel(logger.level)
    return logger


def log_event(
    logger: logging.Logger,
    event: str,
    ctx: LogContext | None = None,
    *,
    level: int = logging.INFO,
    keep_none: bool = False,
    **fields: Any,
) -> None:
    """Emit a structured log event as a single JSON line.

    Parameters
    ----------
    logger: logging.Logger
        Logger instance (normally obtained from ``get_logger``).
    event: str
        Event name (e.g. ``cursor.start``).
    ctx: LogContext | None
        Provider/bean context; merged shallowly.
    level: int
        Logging level for the record.
    keep_none: bool
        When ``True``, preserve keys whose values are ``None``; otherwise drop them.
    **fields: Any
        Arbitrary serializable key/value pairs.
    """
    if not logger.isEnabledFor(level):
        return
    payload: Dict[str, Any] = {"event": event}
    if ctx:
        payload |= ctx.to_dict()
    if keep_none:
        payload.update(fields)
    else:
        payload.update({k: v for k, v in fields.items() if v is not None})
    logger.log(level, json.dumps(payload, ensure_ascii=False, default=str))


REQUIRED_NORMALIZED_KEYS = (
    "structured",
    "phase",
    "attempt",
    "error_code",
    "count",
)


def normalized_log_event(
    logger: logging.Logger,
    event: str,
    ctx: LogContext | None = None,
    *,
    phase: str,
    attempt: int | None = None,
    error_code: str | None = None,
    count: int | None = None,
    level: int = logging.INFO,
    structured: bool = True,
    **extra_fields: Any,
) -> None:
    """Emit a normalized structured log event with required keys.

    ``error_code`` is omitted when ``None`` to reflect "no error"; the other
    normalized keys are always present. ``extra_fields`` never overwrite a
    normalized value that is already set.
    """
    base_fields: Dict[str, Any] = {
        "structured": structured,
        "phase": phase,
        "attempt": attempt,
        "error_code": error_code,
        "count": count,
    }
    if error_code is None:
        base_fields.pop("error_code", None)
    for k, v in extra_fields.items():
        if v is None:
            continue
        if k in base_fields and base_fields[k] is not None:
            continue
        base_fields[k] = v
    log_event(logger, event, ctx, level=level, keep_none=True, **base_fields)


__all__ = [
    "LogContext",
    "get_logger",
    "configure_logger",
    "log_event",
    "normalized_log_event",
    "REQUIRED_NORMALIZED_KEYS",
]
