"""
Blob storage for clip audio.

The store only needs three operations on audio bytes keyed by
filename. ``DirectoryBlobStore`` keeps them as files in the uploads
directory; tests use ``callsound.testing.MemoryBlobStore``.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Protocol, runtime_checkable

logger = logging.getLogger(__name__)


@runtime_checkable
class BlobStore(Protocol):
    """Protocol for clip audio storage."""

    def read(self, filename: str) -> bytes:
        """Read stored bytes. Raises FileNotFoundError if absent."""
        ...

    def write(self, filename: str, data: bytes) -> None:
        """Store bytes, replacing any existing blob."""
        ...

    def delete(self, filename: str) -> bool:
        """Delete a blob. Returns False if it did not exist."""
        ...


class DirectoryBlobStore:
    """Blob store backed by a flat directory.

    Example:
        blobs = DirectoryBlobStore("./uploads")
        blobs.write("1700000000000_airhorn.mp3", data)
        data = blobs.read("1700000000000_airhorn.mp3")
    """

    def __init__(self, directory: Path | str):
        self.directory = Path(directory)
        self.directory.mkdir(parents=True, exist_ok=True)

    def _path(self, filename: str) -> Path:
        name = Path(filename).name
        if not name or name != filename or name in (".", ".."):
            raise ValueError(f"Invalid blob filename: {filename!r}")
        return self.directory / name

    def read(self, filename: str) -> bytes:
        path = self._path(filename)
        if not path.exists():
            raise FileNotFoundError(f"Blob not found: {path}")
        return path.read_bytes()

    def write(self, filename: str, data: bytes) -> None:
        path = self._path(filename)
        path.write_bytes(data)
        logger.debug(f"Wrote {len(data)} bytes to {path}")

    def delete(self, filename: str) -> bool:
        path = self._path(filename)
        if not path.exists():
            return False
        path.unlink()
        logger.info(f"Deleted file: {path}")
        return True

    def __contains__(self, filename: str) -> bool:
        try:
            return self._path(filename).exists()
        except ValueError:
            return False
