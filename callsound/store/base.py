"""
Store Base - SoundboardStore protocol.

STORE CONTRACT:
    Implementations MUST:
        - Assign ids from per-kind counters starting at 1, never reused
        - Keep clip default status in sync with trigger assignments
        - Delete triggers whose clip list becomes empty on clip deletion
        - Keep rotation cursors in range of their sequences
        - Return copies from lookups, never live records
        - Return None / False for unknown ids instead of raising

    Implementations MUST NOT:
        - Validate trigger phrases or clip lists (request layer work)
        - Inspect or transcode audio bytes

The in-memory ``MemoryStore`` is the reference implementation. A
database-backed store would satisfy the same protocol with
transactions instead of a lock.
"""

from __future__ import annotations

from contextlib import AbstractContextManager
from typing import Protocol, runtime_checkable

from callsound.blobs import BlobStore
from callsound.config import StoreConfig
from callsound.models import (
    Settings,
    SettingsPatch,
    SoundClip,
    SoundClipData,
    TriggerWord,
    TriggerWordData,
    TriggerWordPatch,
)


@runtime_checkable
class SoundboardStore(Protocol):
    """Protocol for soundboard state stores."""

    @property
    def config(self) -> StoreConfig:
        ...

    @property
    def blobs(self) -> BlobStore:
        ...

    def locked(self) -> AbstractContextManager:
        """Hold the store's critical section across several calls."""
        ...

    # Sound clips
    def get_sound_clips(self) -> list[SoundClip]: ...
    def get_sound_clip(self, clip_id: int) -> SoundClip | None: ...
    def create_sound_clip(self, data: SoundClipData) -> SoundClip: ...
    def delete_sound_clip(self, clip_id: int) -> bool: ...

    # Trigger words
    def get_trigger_words(self) -> list[TriggerWord]: ...
    def get_trigger_word(self, trigger_id: int) -> TriggerWord | None: ...
    def create_trigger_word(self, data: TriggerWordData) -> TriggerWord: ...
    def update_trigger_word(self, trigger_id: int, patch: TriggerWordPatch) -> TriggerWord | None: ...
    def delete_trigger_word(self, trigger_id: int) -> bool: ...
    def next_clip_for_trigger(self, trigger_id: int) -> int | None: ...

    # Settings
    def get_settings(self) -> Settings: ...
    def update_settings(self, patch: SettingsPatch) -> Settings: ...
    def next_default_response(self) -> int | None: ...

    def clear_all_data(self) -> None: ...
