"""
Errors - Failure taxonomy for the soundboard store.

Expected business conditions are not raised:
    NOT_FOUND   - lookups return None / False, archive returns a result
    CONFLICT    - read-only overwrite/delete, size limit exceeded
    CORRUPT     - archive file that does not parse

Error hierarchy (raised):
    CallsoundError (base)
    ├── ProfileFormatError   - malformed profile document
    └── ArchiveError         - ArchiveResult.unwrap() on a failed result

I/O errors (OSError) propagate unchanged.
"""

from __future__ import annotations

from enum import Enum
from typing import Any


class FailureKind(Enum):
    """Kinds of expected, non-exceptional failures."""

    NOT_FOUND = "not_found"
    CONFLICT = "conflict"
    CORRUPT = "corrupt"


class CallsoundError(Exception):
    """Base error for all soundboard store errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ProfileFormatError(CallsoundError):
    """Raised when a profile document is structurally invalid.

    Raised before any live state is touched, so a rejected import
    leaves the store unchanged.
    """

    def __init__(self, message: str, field: str | None = None):
        super().__init__(f"Invalid profile: {message}", details={"field": field})
        self.field = field


class ArchiveError(CallsoundError):
    """Raised for archive failures when the caller asks for exceptions."""

    def __init__(self, kind: FailureKind, message: str, filename: str = ""):
        super().__init__(message, details={"kind": kind.value, "filename": filename})
        self.kind = kind
        self.filename = filename
