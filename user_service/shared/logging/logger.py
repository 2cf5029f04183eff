# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""loguru setup: request-scoped context, redaction, stderr and file sinks.

Every record passes through ``_enrich`` before reaching a sink, so the
correlation id and service name are present and secrets are already masked
no matter which sink (or test capture) consumes it.
"""

from __future__ import annotations

import logging
import os
import sys
from contextvars import ContextVar
from pathlib import Path
from typing import Any

from loguru import logger as _root_logger

from .sensitive_filter import sanitize_record

_FMT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
    "<lvl>{level:<8}</lvl> | "
    "{extra[service]} | "
    "<magenta>{extra[correlation_id]}</magenta> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | "
    "<lvl>{message}</lvl>"
)

_NOISY_LIBRARIES = {
    "werkzeug": logging.INFO,
    "httpx": logging.WARNING,
    "httpcore": logging.WARNING,
    "sqlalchemy.engine": logging.WARNING,
}

_CORRELATION_ID: ContextVar[str] = ContextVar("correlation_id", default="-")
_service_name = "user-service"


def _enrich(record: dict[str, Any]) -> None:
    extra = record["extra"]
    extra.setdefault("correlation_id", _CORRELATION_ID.get())
    extra.setdefault("service", _service_name)
    sanitize_record(record)


logger = _root_logger.patch(_enrich)


def set_correlation_id(value: str | None) -> None:
    _CORRELATION_ID.set(value or "-")


def clear_correlation_id() -> None:
    _CORRELATION_ID.set("-")


class _StdlibBridge(logging.Handler):
    """Routes records from libraries using ``logging`` into loguru."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level: str | int = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno
        frame, depth = logging.currentframe(), 2
        while frame is not None and frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back
            depth += 1
        logger.opt(depth=depth, exception=record.exc_info).log(level, record.getMessage())


def _resolve_log_file(explicit: str | None) -> Path:
    configured = explicit or os.getenv("LOG_FILE")
    if configured:
        path = Path(configured)
    else:
        path = Path(__file__).resolve().parents[2] / "instance" / "user_service.log"
    path.parent.mkdir(parents=True, exist_ok=True)
    return path


def _resolve_level(level: str | None, debug_mode: bool) -> str:
    if level:
        return level.upper()
    if debug_mode:
        return "DEBUG"
    return os.getenv("LOG_LEVEL", "INFO").upper()


def setup_logging(
    level: str | None = None,
    *,
    debug_mode: bool = False,
    service: str | None = None,
    log_file: str | None = None,
) -> None:
    global _service_name
    if service:
        _service_name = service

    resolved = _resolve_level(level, debug_mode)
    _root_logger.remove()
    _root_logger.add(
        sys.stderr,
        level=resolved,
        format=_FMT,
        colorize=sys.stderr.isatty(),
        backtrace=False,
        diagnose=False,
    )
    _root_logger.add(
        _resolve_log_file(log_file),
        level=resolved,
        format=_FMT,
        colorize=False,
        backtrace=False,
        diagnose=False,
        enqueue=True,
        rotation=os.getenv("LOG_ROTATION", "10 MB"),
        retention=int(os.getenv("LOG_RETENTION", "5")),
        encoding="utf-8",
    )

    logging.basicConfig(handlers=[_StdlibBridge()], level=0, force=True)
    for name, library_level in _NOISY_LIBRARIES.items():
        logging.getLogger(name).setLevel(library_level)


__all__ = [
    "clear_correlation_id",
    "logger",
    "set_correlation_id",
    "setup_logging",
]
