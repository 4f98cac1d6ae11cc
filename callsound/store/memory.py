"""
Memory Store - In-process soundboard state.

Owns sound clips, trigger words and the settings record for the
lifetime of the process. Nothing survives a restart; profiles are the
way to carry a soundboard between sessions.

Every public method runs under a single re-entrant lock, so each call
is one critical section and concurrent callers observe mutations in a
total order. ``locked()`` lets a collaborator (the profile codec)
extend that section across several calls.

Usage:
    store = MemoryStore(StoreConfig(uploads_dir="./uploads"))

    clip = store.create_sound_clip(SoundClipData(
        name="airhorn", filename="airhorn.mp3", format="mp3",
        duration=1.2, size=19200, url="/uploads/airhorn.mp3",
    ))
    trigger = store.create_trigger_word(TriggerWordData(
        phrase="go team", sound_clip_ids=[clip.id],
    ))

    clip_id = store.next_clip_for_trigger(trigger.id)
"""

from __future__ import annotations

import logging
import threading
from contextlib import contextmanager
from copy import deepcopy
from typing import Iterator

from callsound.blobs import BlobStore, DirectoryBlobStore
from callsound.config import StoreConfig
from callsound.matching import find_matching_triggers
from callsound.models import (
    Settings,
    SettingsPatch,
    SoundClip,
    SoundClipData,
    TriggerWord,
    TriggerWordData,
    TriggerWordPatch,
)
from callsound.monitoring.logging import StructuredLogger
from callsound.rotation import next_in_rotation
from callsound.store.reconciler import reconcile_assignment, reconcile_deletion

logger = logging.getLogger(__name__)


class MemoryStore:
    """Volatile soundboard store.

    Example:
        store = MemoryStore(config, blobs=DirectoryBlobStore(config.uploads_dir))
        store.update_settings(SettingsPatch(default_response_enabled=False))
    """

    def __init__(
        self,
        config: StoreConfig | None = None,
        blobs: BlobStore | None = None,
        events: StructuredLogger | None = None,
    ):
        """Initialize an empty store.

        Args:
            config: Store configuration (defaults from environment)
            blobs: Clip audio storage (defaults to the uploads directory)
            events: Optional structured event logger
        """
        self._config = config or StoreConfig()
        self._blobs = blobs if blobs is not None else DirectoryBlobStore(self._config.uploads_dir)
        self._events = events

        self._lock = threading.RLock()
        self._clips: dict[int, SoundClip] = {}
        self._triggers: dict[int, TriggerWord] = {}
        self._settings = Settings()

        # Never reset, so ids stay unique for the process lifetime
        self._next_clip_id = 1
        self._next_trigger_id = 1

    @property
    def config(self) -> StoreConfig:
        return self._config

    @property
    def blobs(self) -> BlobStore:
        return self._blobs

    @property
    def events(self) -> StructuredLogger | None:
        return self._events

    @contextmanager
    def locked(self) -> Iterator["MemoryStore"]:
        """Hold the store lock across several operations."""
        with self._lock:
            yield self

    # -- Sound clips ---------------------------------------------------------

    def get_sound_clips(self) -> list[SoundClip]:
        with self._lock:
            return [deepcopy(clip) for clip in self._clips.values()]

    def get_sound_clip(self, clip_id: int) -> SoundClip | None:
        with self._lock:
            clip = self._clips.get(clip_id)
            return deepcopy(clip) if clip else None

    def create_sound_clip(self, data: SoundClipData) -> SoundClip:
        """Register a new clip.

        New clips start as default. While default responses are enabled
        the id is appended to the default pool without a duplicate check.
        """
        with self._lock:
            clip_id = self._next_clip_id
            self._next_clip_id += 1

            clip = SoundClip.from_data(clip_id, data)
            self._clips[clip_id] = clip

            in_pool = self._settings.default_response_enabled
            if in_pool:
                self._settings.default_response_sound_clip_ids.append(clip_id)
                logger.info(f"Added sound clip {clip.name} (ID: {clip_id}) to default responses")

            logger.info(f"Created sound clip: {clip.name} (ID: {clip_id}) - Default: true")
            if self._events:
                self._events.clip_created(clip_id, clip.name, default_pool=in_pool)

            return deepcopy(clip)

    def delete_sound_clip(self, clip_id: int) -> bool:
        """Delete a clip, its audio, and every reference to it.

        Triggers left without clips are deleted; the others keep their
        cursor clamped into the shortened list.

        Returns:
            True if deleted, False if not found
        """
        with self._lock:
            clip = self._clips.get(clip_id)
            if clip is None:
                return False

            if not self._blobs.delete(clip.filename):
                logger.warning(f"Audio file for sound clip {clip_id} was already missing: {clip.filename}")

            del self._clips[clip_id]

            triggers_removed = 0
            for trigger_id, trigger in list(self._triggers.items()):
                if clip_id not in trigger.sound_clip_ids:
                    continue

                remaining = [i for i in trigger.sound_clip_ids if i != clip_id]
                if not remaining:
                    del self._triggers[trigger_id]
                    triggers_removed += 1
                    logger.info(f"Deleted trigger word {trigger.phrase} (no sound clips remaining)")
                    if self._events:
                        self._events.trigger_changed("deleted", trigger_id, trigger.phrase)
                else:
                    trigger.sound_clip_ids = remaining
                    trigger.clamp_index()
                    logger.info(f"Updated trigger word {trigger.phrase} (removed deleted sound clip)")

            settings = self._settings
            if clip_id in settings.default_response_sound_clip_ids:
                settings.default_response_sound_clip_ids = [
                    i for i in settings.default_response_sound_clip_ids if i != clip_id
                ]
                settings.clamp_index()
                logger.info("Removed deleted sound clip from default responses")

            if self._events:
                self._events.clip_deleted(clip_id, triggers_removed=triggers_removed)
            return True

    # -- Trigger words -------------------------------------------------------

    def get_trigger_words(self) -> list[TriggerWord]:
        with self._lock:
            return [deepcopy(trigger) for trigger in self._triggers.values()]

    def get_trigger_word(self, trigger_id: int) -> TriggerWord | None:
        with self._lock:
            trigger = self._triggers.get(trigger_id)
            return deepcopy(trigger) if trigger else None

    def create_trigger_word(self, data: TriggerWordData) -> TriggerWord:
        with self._lock:
            trigger_id = self._next_trigger_id
            self._next_trigger_id += 1

            trigger = TriggerWord(
                id=trigger_id,
                phrase=data.phrase,
                sound_clip_ids=list(data.sound_clip_ids),
                current_index=0,
                case_sensitive=bool(data.case_sensitive),
                enabled=data.enabled is not False,
            )
            self._triggers[trigger_id] = trigger

            reconcile_assignment(
                trigger_id,
                [],
                trigger.sound_clip_ids,
                self._clips,
                self._triggers,
                self._settings,
                self._events,
            )

            if self._events:
                self._events.trigger_changed("created", trigger_id, trigger.phrase)
            return deepcopy(trigger)

    def update_trigger_word(self, trigger_id: int, patch: TriggerWordPatch) -> TriggerWord | None:
        """Apply a partial update.

        Default status is reconciled only when the patch carries a clip
        list. The rotation cursor is kept and clamped into the new list.

        Returns:
            Updated trigger, or None if not found
        """
        with self._lock:
            trigger = self._triggers.get(trigger_id)
            if trigger is None:
                return None

            old_ids = list(trigger.sound_clip_ids)
            for name, value in patch.present().items():
                setattr(trigger, name, list(value) if isinstance(value, list) else value)
            trigger.clamp_index()

            if patch.sound_clip_ids is not None:
                reconcile_assignment(
                    trigger_id,
                    old_ids,
                    trigger.sound_clip_ids,
                    self._clips,
                    self._triggers,
                    self._settings,
                    self._events,
                )

            if self._events:
                self._events.trigger_changed("updated", trigger_id, trigger.phrase)
            return deepcopy(trigger)

    def delete_trigger_word(self, trigger_id: int) -> bool:
        """Delete a trigger, restoring its unclaimed clips to default.

        Returns:
            True if deleted, False if not found
        """
        with self._lock:
            trigger = self._triggers.get(trigger_id)
            if trigger is None:
                return False

            reconcile_deletion(trigger, self._clips, self._triggers, self._settings, self._events)
            del self._triggers[trigger_id]

            if self._events:
                self._events.trigger_changed("deleted", trigger_id, trigger.phrase)
            return True

    def next_clip_for_trigger(self, trigger_id: int) -> int | None:
        """Pick the trigger's next clip and advance its rotation.

        Returns:
            Clip id, or None if the trigger is missing or has no clips
        """
        with self._lock:
            trigger = self._triggers.get(trigger_id)
            if trigger is None:
                return None
            return self._advance_trigger(trigger)

    def _advance_trigger(self, trigger: TriggerWord) -> int | None:
        selected, trigger.current_index = next_in_rotation(
            trigger.sound_clip_ids, trigger.current_index
        )
        return selected

    # -- Settings ------------------------------------------------------------

    def get_settings(self) -> Settings:
        with self._lock:
            return deepcopy(self._settings)

    def update_settings(self, patch: SettingsPatch) -> Settings:
        with self._lock:
            for name, value in patch.present().items():
                setattr(self._settings, name, list(value) if isinstance(value, list) else value)
            self._settings.clamp_index()
            return deepcopy(self._settings)

    def next_default_response(self) -> int | None:
        """Pick the next clip from the default-response pool.

        Disabled default responses leave the cursor where it is, so
        re-enabling resumes the rotation instead of restarting it.

        Returns:
            Clip id, or None if disabled or the pool is empty
        """
        with self._lock:
            settings = self._settings
            if not settings.default_response_enabled:
                return None

            selected, settings.default_response_index = next_in_rotation(
                settings.default_response_sound_clip_ids,
                settings.default_response_index,
            )
            return selected

    # -- Matching ------------------------------------------------------------

    def match_transcript(self, transcript: str) -> list[tuple[TriggerWord | None, int]]:
        """Resolve recognized speech to the clips that should play.

        Every matching trigger advances its rotation. When nothing
        matches, the default-response rotation is consulted instead.

        Returns:
            ``(trigger, clip_id)`` pairs; the trigger is None for a
            default response. Empty when nothing should play.
        """
        with self._lock:
            matches = find_matching_triggers(transcript, self._triggers.values())

            played = []
            for trigger in matches:
                clip_id = self._advance_trigger(trigger)
                if clip_id is not None:
                    played.append((deepcopy(trigger), clip_id))

            if matches or not transcript.strip():
                return played

            clip_id = self.next_default_response()
            return [(None, clip_id)] if clip_id is not None else []

    # -- Bulk ----------------------------------------------------------------

    def clear_all_data(self) -> None:
        """Delete every clip (and its audio), trigger and setting.

        Id counters keep counting so ids are never reused.
        """
        with self._lock:
            for clip in self._clips.values():
                try:
                    self._blobs.delete(clip.filename)
                except OSError as e:
                    logger.warning(f"Could not delete file {clip.filename}: {e}")

            self._clips.clear()
            self._triggers.clear()
            self._settings = Settings()
            logger.info("Cleared all soundboard data")

    def __len__(self) -> int:
        """Number of sound clips."""
        return len(self._clips)
