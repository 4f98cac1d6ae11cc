"""
Structured event logging for the soundboard store.

Every state change (clip created, trigger claimed a clip, profile
archived, ...) can be written as one JSON object per line so a
session can be audited or replayed against a fresh store:

    {"ts": 1700000000.1, "level": "info", "event": "clip_created",
     "logger": "callsound", "thread": "MainThread", "clip_id": 3, ...}

This sits beside the module loggers (``logging.getLogger(__name__)``),
which carry free-form diagnostics.
"""

from __future__ import annotations

import json
import logging
import sys
import threading
import time
from enum import IntEnum
from typing import Any, TextIO


class LogLevel(IntEnum):
    """Event levels, sharing the numbers of the stdlib logging levels."""

    DEBUG = logging.DEBUG
    INFO = logging.INFO
    WARNING = logging.WARNING
    ERROR = logging.ERROR

    @classmethod
    def parse(cls, level: "LogLevel | str") -> "LogLevel":
        if isinstance(level, LogLevel):
            return level
        return cls[level.upper()]


class StructuredLogger:
    """Event logger writing one JSON object per line.

    Example:
        events = StructuredLogger("callsound")
        events.clip_created(clip_id=3, name="airhorn", default_pool=True)

        bound = events.bind(session="abc123")
        bound.trigger_changed("created", trigger_id=1, phrase="go")
    """

    def __init__(
        self,
        name: str = "callsound",
        level: LogLevel | str = LogLevel.INFO,
        output: TextIO | None = None,
        context: dict[str, Any] | None = None,
    ):
        """Initialize the logger.

        Args:
            name: Logger name written into every event.
            level: Minimum level emitted.
            output: Output stream (default: stderr).
            context: Fields added to every event.
        """
        self.name = name
        self.level = LogLevel.parse(level)
        self._output = output or sys.stderr
        self._context = dict(context or {})
        self._lock = threading.Lock()

    def bind(self, **context: Any) -> "StructuredLogger":
        """Logger sharing this one's stream, with extra context fields."""
        bound = StructuredLogger(
            self.name,
            self.level,
            self._output,
            {**self._context, **context},
        )
        bound._lock = self._lock
        return bound

    def log(self, level: LogLevel, event: str, message: str = "", **data: Any) -> None:
        if level < self.level:
            return

        record = {
            "ts": time.time(),
            "level": level.name.lower(),
            "event": event,
            "logger": self.name,
            "thread": threading.current_thread().name,
        }
        if message:
            record["message"] = message
        record.update(self._context)
        record.update(data)

        line = json.dumps(record, default=str)
        with self._lock:
            print(line, file=self._output)

    def debug(self, event: str, message: str = "", **data: Any) -> None:
        self.log(LogLevel.DEBUG, event, message, **data)

    def info(self, event: str, message: str = "", **data: Any) -> None:
        self.log(LogLevel.INFO, event, message, **data)

    def warning(self, event: str, message: str = "", **data: Any) -> None:
        self.log(LogLevel.WARNING, event, message, **data)

    def error(self, event: str, message: str = "", **data: Any) -> None:
        self.log(LogLevel.ERROR, event, message, **data)

    # Soundboard events

    def clip_created(self, clip_id: int, name: str, default_pool: bool = False) -> None:
        self.info(
            "clip_created",
            f"Created sound clip {name}",
            clip_id=clip_id,
            name=name,
            default_pool=default_pool,
        )

    def clip_deleted(self, clip_id: int, triggers_removed: int = 0) -> None:
        self.info(
            "clip_deleted",
            f"Deleted sound clip {clip_id}",
            clip_id=clip_id,
            triggers_removed=triggers_removed,
        )

    def default_status_changed(self, clip_id: int, is_default: bool) -> None:
        self.debug("default_status_changed", clip_id=clip_id, is_default=is_default)

    def trigger_changed(self, action: str, trigger_id: int, phrase: str = "") -> None:
        self.info(
            f"trigger_{action}",
            f"Trigger {phrase!r} {action}",
            trigger_id=trigger_id,
            phrase=phrase,
        )

    def profile_exported(self, clips: int, triggers: int, skipped_clips: int = 0) -> None:
        self.info(
            "profile_exported",
            f"Exported {clips} clips and {triggers} triggers",
            clips=clips,
            triggers=triggers,
            skipped_clips=skipped_clips,
        )

    def profile_imported(self, clips: int, triggers: int, skipped_clips: int = 0, skipped_triggers: int = 0) -> None:
        self.info(
            "profile_imported",
            f"Imported {clips} clips and {triggers} triggers",
            clips=clips,
            triggers=triggers,
            skipped_clips=skipped_clips,
            skipped_triggers=skipped_triggers,
        )

    def profile_saved(self, filename: str, size_bytes: int, read_only: bool) -> None:
        self.info(
            "profile_saved",
            f"Saved profile {filename}",
            filename=filename,
            size_bytes=size_bytes,
            read_only=read_only,
        )

    def profile_rejected(self, filename: str, reason: str) -> None:
        self.warning("profile_rejected", reason, filename=filename)


_global_logger: StructuredLogger | None = None


def configure_logging(
    level: LogLevel | str = LogLevel.INFO,
    output: TextIO | None = None,
) -> StructuredLogger:
    """Install the process-wide event logger and return it."""
    global _global_logger

    _global_logger = StructuredLogger("callsound", level=level, output=output)
    return _global_logger


def get_logger() -> StructuredLogger:
    """The process-wide event logger, created on first use."""
    global _global_logger

    if _global_logger is None:
        _global_logger = StructuredLogger("callsound")
    return _global_logger
