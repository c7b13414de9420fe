"""Structured logging utilities for the interview lifecycle."""
from __future__ import annotations

import json
import logging
import logging.handlers
import os
import sys
import time
import uuid
from typing import Any

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
ENABLE_FILE_LOGS = os.getenv("ENABLE_FILE_LOGS", "1") in ("1", "true", "True")
LOG_FILE = os.getenv("LOG_FILE", "logs/interviews.log")
LOG_MAX_BYTES = int(os.getenv("LOG_MAX_BYTES", "5242880"))
LOG_BACKUP_COUNT = int(os.getenv("LOG_BACKUP_COUNT", "5"))

HUMAN_FORMAT = "[%(asctime)s] %(levelname)s %(name)s :: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_logger = logging.getLogger("interviews.events")
_logger.setLevel(LOG_LEVEL)
_logger.propagate = False


def configure_logging(level: str = LOG_LEVEL) -> None:
    """Route module loggers to stdout with the same line format as events."""

    root = logging.getLogger()
    if any(getattr(handler, "_interviews_console", False) for handler in root.handlers):
        return
    console = logging.StreamHandler(stream=sys.stdout)
    console.setFormatter(logging.Formatter(HUMAN_FORMAT, datefmt=DATE_FORMAT))
    console._interviews_console = True  # type: ignore[attr-defined]
    root.addHandler(console)
    root.setLevel(level)


def _is_json(record: logging.LogRecord) -> bool:
    return getattr(record, "is_json", False) is True


def _handler(handler: logging.Handler, fmt: logging.Formatter, *, json_lines: bool) -> logging.Handler:
    handler.setLevel(LOG_LEVEL)
    handler.setFormatter(fmt)
    handler.addFilter(_is_json if json_lines else (lambda record: not _is_json(record)))
    return handler


def _rotating(path: str) -> logging.handlers.RotatingFileHandler:
    return logging.handlers.RotatingFileHandler(path, maxBytes=LOG_MAX_BYTES, backupCount=LOG_BACKUP_COUNT)


def _ensure_handlers() -> None:
    """Attach the event handlers once: stdout always, rotating files when enabled."""

    if _logger.handlers:
        return

    human = logging.Formatter(HUMAN_FORMAT, datefmt=DATE_FORMAT)
    _logger.addHandler(_handler(logging.StreamHandler(stream=sys.stdout), human, json_lines=False))
    if not ENABLE_FILE_LOGS:
        return

    log_dir = os.path.dirname(LOG_FILE)
    if log_dir:
        os.makedirs(log_dir, exist_ok=True)
    base, _ = os.path.splitext(LOG_FILE)
    _logger.addHandler(_handler(_rotating(LOG_FILE), logging.Formatter("%(message)s"), json_lines=True))
    _logger.addHandler(_handler(_rotating(f"{base}-human.log"), human, json_lines=False))


def _format_human(evt: dict[str, Any]) -> str:
    base = f"user={evt.get('user_id')} kind={evt.get('kind')}"
    extras: list[str] = []
    for key in ("interview_id", "status", "window", "outcome", "count", "feedback_id", "ms"):
        if key in evt and evt[key] is not None:
            extras.append(f"{key}={evt[key]}")
    return base + (" " + " ".join(extras) if extras else "")


def _emit(msg: str, *, is_json: bool) -> None:
    record = _logger.makeRecord(
        name=_logger.name,
        level=logging.INFO,
        fn="",
        lno=0,
        msg=msg,
        args=(),
        exc_info=None,
    )
    record.is_json = is_json  # type: ignore[attr-defined]
    _logger.handle(record)


def log_event(kind: str, user_id: str, **fields: Any) -> None:
    """Emit a human line to console and JSON/human lines to the rotating files."""

    _ensure_handlers()

    payload: dict[str, Any] = {
        "ts": time.time(),
        "trace": str(uuid.uuid4()),
        "kind": kind,
        "user_id": user_id,
    }
    payload.update(fields)

    _emit(_format_human(payload), is_json=False)

    if not ENABLE_FILE_LOGS:
        return

    _emit(json.dumps(payload, ensure_ascii=False, default=str), is_json=True)


__all__ = ["configure_logging", "log_event"]
