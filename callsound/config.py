"""
Store configuration.

Paths default to environment variables so a deployment can relocate
uploads and the profile archive without code changes:

    CALLSOUND_UPLOADS_DIR    - clip audio files (default ./uploads)
    CALLSOUND_PROFILES_DIR   - named profile archive (default ./server-profiles)
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

MAX_PROFILE_BYTES = 10 * 1024 * 1024
DEFAULT_RESPONSE_DELAY_MS = 2000


@dataclass
class StoreConfig:
    """Soundboard store configuration."""
    uploads_dir: Path = field(
        default_factory=lambda: Path(os.environ.get("CALLSOUND_UPLOADS_DIR", "uploads"))
    )
    profiles_dir: Path = field(
        default_factory=lambda: Path(os.environ.get("CALLSOUND_PROFILES_DIR", "server-profiles"))
    )
    url_prefix: str = "/uploads"
    max_profile_bytes: int = MAX_PROFILE_BYTES
    default_response_delay_ms: int = DEFAULT_RESPONSE_DELAY_MS
    create_dirs: bool = True

    def __post_init__(self):
        self.uploads_dir = Path(self.uploads_dir)
        self.profiles_dir = Path(self.profiles_dir)
        self.url_prefix = self.url_prefix.rstrip("/")

        if self.max_profile_bytes <= 0:
            raise ValueError("max_profile_bytes must be > 0")
        if self.default_response_delay_ms < 0:
            raise ValueError("default_response_delay_ms must be >= 0")

        if self.create_dirs:
            self.uploads_dir.mkdir(parents=True, exist_ok=True)
            self.profiles_dir.mkdir(parents=True, exist_ok=True)

    def clip_url(self, filename: str) -> str:
        """Public URL for a stored clip file."""
        return f"{self.url_prefix}/{filename}"
