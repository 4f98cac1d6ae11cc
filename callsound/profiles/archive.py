"""
Profile Archive - Named profiles stored on the server.

Each profile is one JSON file. The file name is derived from the
user-supplied name by replacing every character outside
``[A-Za-z0-9._-]`` with ``_`` and appending ``.json``; distinct names
can therefore share a file, and the later save wins unless the
existing file is read-only.

Directory structure:
    ./server-profiles/
        Party_Mix.json      # {...profile, "readOnly": false, "savedAt": "..."}
        Office.json

Business failures (missing profile, read-only, oversized) come back as
an ``ArchiveResult`` rather than an exception.

Usage:
    archive = ProfileArchive("./server-profiles")

    result = archive.save(codec.export_profile(), "Party Mix", read_only=True)
    if not result.ok:
        print(result.message)

    for entry in archive.list():
        print(entry.name, entry.read_only)
"""

from __future__ import annotations

import json
import logging
import re
import threading
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from callsound.config import MAX_PROFILE_BYTES
from callsound.errors import ArchiveError, FailureKind
from callsound.monitoring.logging import StructuredLogger
from callsound.profiles.document import ProfileDocument

logger = logging.getLogger(__name__)

PROFILE_EXTENSION = ".json"
ENVELOPE_FIELDS = ("readOnly", "savedAt")

_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9._-]")


def sanitize_filename(name: str) -> str:
    """Map a profile name to its archive file name.

    Example:
        >>> sanitize_filename("My Profile!")
        'My_Profile_.json'
    """
    return _UNSAFE_CHARS.sub("_", name) + PROFILE_EXTENSION


def strip_envelope(document: dict[str, Any]) -> dict[str, Any]:
    """Copy of an archived document without the archive metadata."""
    return {k: v for k, v in document.items() if k not in ENVELOPE_FIELDS}


@dataclass
class ArchiveEntry:
    """A profile listed in the archive."""
    name: str
    read_only: bool = False
    saved_at: str | None = None
    corrupt: bool = False

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"name": self.name, "readOnly": self.read_only}
        if self.saved_at:
            data["savedAt"] = self.saved_at
        return data


@dataclass
class ArchiveResult:
    """Outcome of an archive operation."""
    ok: bool
    filename: str
    message: str = ""
    failure: FailureKind | None = None
    document: dict[str, Any] | None = None

    @classmethod
    def success(cls, filename: str, message: str = "", document: dict[str, Any] | None = None) -> "ArchiveResult":
        return cls(ok=True, filename=filename, message=message, document=document)

    @classmethod
    def fail(cls, filename: str, failure: FailureKind, message: str) -> "ArchiveResult":
        return cls(ok=False, filename=filename, message=message, failure=failure)

    def unwrap(self) -> dict[str, Any] | None:
        """Return the document, raising ArchiveError on failure."""
        if not self.ok:
            raise ArchiveError(self.failure or FailureKind.CONFLICT, self.message, self.filename)
        return self.document


class ProfileArchive:
    """Filesystem-backed store of named profiles.

    The archive keeps whole documents and only looks at the
    ``readOnly`` and ``savedAt`` fields; it never interprets clips or
    triggers.
    """

    def __init__(
        self,
        directory: Path | str,
        max_profile_bytes: int = MAX_PROFILE_BYTES,
        events: StructuredLogger | None = None,
    ):
        """Initialize archive.

        Args:
            directory: Directory holding profile files (created if needed)
            max_profile_bytes: Largest serialized profile accepted by save
            events: Optional structured event logger
        """
        self.directory = Path(directory)
        self.max_profile_bytes = max_profile_bytes
        self._events = events
        self._lock = threading.Lock()

        self.directory.mkdir(parents=True, exist_ok=True)

    def path_for(self, filename: str) -> Path:
        return self.directory / sanitize_filename(filename)

    def exists(self, filename: str) -> bool:
        return self.path_for(filename).exists()

    def save(
        self,
        document: ProfileDocument | dict[str, Any],
        filename: str,
        read_only: bool = False,
    ) -> ArchiveResult:
        """Store a profile under ``filename``.

        Rejected without writing if the serialized profile exceeds the
        size limit or the existing file is read-only. An existing file
        that does not parse is overwritten.
        """
        if isinstance(document, ProfileDocument):
            document = document.to_dict()

        size_bytes = len(json.dumps(document).encode("utf-8"))
        if size_bytes > self.max_profile_bytes:
            size_mb = size_bytes / (1024 * 1024)
            limit_mb = self.max_profile_bytes / (1024 * 1024)
            return self._reject(
                filename,
                f"Profile size ({size_mb:.2f}MB) exceeds the {limit_mb:g}MB limit",
            )

        path = self.path_for(filename)
        with self._lock:
            existing = self._read(path)
            if isinstance(existing, dict) and existing.get("readOnly"):
                return self._reject(filename, f'Cannot overwrite read-only profile "{filename}"')

            envelope = {
                **document,
                "readOnly": bool(read_only),
                "savedAt": datetime.now(timezone.utc).isoformat(),
            }
            self._write_atomic(path, envelope)

        logger.info(f"Saved profile {path.name} ({size_bytes} bytes, read-only: {bool(read_only)})")
        if self._events:
            self._events.profile_saved(path.name, size_bytes, bool(read_only))
        return ArchiveResult.success(filename, "Profile saved to server successfully")

    def list(self) -> list[ArchiveEntry]:
        """List archived profiles, including ones that fail to parse."""
        entries = []
        for path in sorted(self.directory.glob(f"*{PROFILE_EXTENSION}")):
            data = self._read(path)
            if isinstance(data, dict):
                saved_at = data.get("savedAt")
                entries.append(ArchiveEntry(
                    name=path.stem,
                    read_only=bool(data.get("readOnly", False)),
                    saved_at=saved_at if isinstance(saved_at, str) else None,
                ))
            else:
                logger.warning(f"Could not parse archived profile {path.name}")
                entries.append(ArchiveEntry(name=path.stem, read_only=False, corrupt=True))
        return entries

    def load(self, filename: str) -> ArchiveResult:
        """Read an archived profile, envelope fields included."""
        path = self.path_for(filename)
        if not path.exists():
            return ArchiveResult.fail(
                filename, FailureKind.NOT_FOUND, f'Profile "{filename}" not found on server'
            )

        data = self._read(path)
        if not isinstance(data, dict):
            return ArchiveResult.fail(
                filename, FailureKind.CORRUPT, f'Profile "{filename}" could not be parsed'
            )
        return ArchiveResult.success(filename, document=data)

    def delete(self, filename: str) -> ArchiveResult:
        """Delete an archived profile unless it is read-only.

        A file whose contents cannot be parsed is deleted anyway.
        """
        path = self.path_for(filename)
        with self._lock:
            if not path.exists():
                return ArchiveResult.fail(
                    filename, FailureKind.NOT_FOUND, f'Profile "{filename}" not found on server'
                )

            data = self._read(path)
            if isinstance(data, dict) and data.get("readOnly"):
                return self._reject(filename, f'Cannot delete read-only profile "{filename}"')

            path.unlink()

        logger.info(f"Deleted profile {path.name}")
        return ArchiveResult.success(filename, "Profile deleted from server successfully")

    def __len__(self) -> int:
        return len(list(self.directory.glob(f"*{PROFILE_EXTENSION}")))

    def __contains__(self, filename: str) -> bool:
        return self.exists(filename)

    def _reject(self, filename: str, message: str) -> ArchiveResult:
        logger.warning(message)
        if self._events:
            self._events.profile_rejected(filename, message)
        return ArchiveResult.fail(filename, FailureKind.CONFLICT, message)

    @staticmethod
    def _read(path: Path) -> Any:
        """Parsed JSON, or None if missing or unparsable."""
        if not path.exists():
            return None
        try:
            with open(path, "r", encoding="utf-8") as f:
                return json.load(f)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            logger.warning(f"Failed to parse {path}: {e}")
            return None

    @staticmethod
    def _write_atomic(path: Path, payload: dict[str, Any]) -> None:
        tmp_path = path.with_suffix(path.suffix + ".tmp")
        try:
            with open(tmp_path, "w", encoding="utf-8") as f:
                json.dump(payload, f)
            tmp_path.replace(path)
        except Exception:
            tmp_path.unlink(missing_ok=True)
            raise
