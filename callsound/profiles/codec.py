"""
Profile Codec - Convert live store state to and from profiles.

Export walks the store, embeds each clip's audio and rewrites every
clip id as a clip name. Import replaces the whole store: it writes the
embedded audio under fresh filenames, recreates clips through the
normal create path, then resolves trigger and pool names through a
single name -> id table built along the way.

Lossy:
    - clips whose audio cannot be read (export) or decoded (import)
      are skipped
    - triggers naming a clip that did not survive are skipped
    - ids are reassigned on import

Names and topology survive: exporting right after an import yields
the same document up to ids and dates.

Usage:
    codec = ProfileCodec(store)
    document = codec.export_profile()
    Path("party.json").write_text(json.dumps(document.to_dict()))

    report = codec.import_profile(json.loads(Path("party.json").read_text()))
    print(report.clips_imported, report.skipped_triggers)
"""

from __future__ import annotations

import base64
import binascii
import logging
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from callsound.errors import ProfileFormatError
from callsound.models import SettingsPatch, SoundClipData, TriggerWordData
from callsound.monitoring.logging import StructuredLogger
from callsound.profiles.document import (
    ProfileClip,
    ProfileDocument,
    ProfileSettings,
    ProfileTrigger,
    validate_profile,
)
from callsound.store.base import SoundboardStore

logger = logging.getLogger(__name__)


@dataclass
class ExportReport:
    """What an export left out."""
    skipped_clips: list[str] = field(default_factory=list)
    dropped_triggers: list[str] = field(default_factory=list)


@dataclass
class ImportReport:
    """Outcome of a profile import."""
    clips_imported: int = 0
    triggers_imported: int = 0
    skipped_clips: list[str] = field(default_factory=list)
    skipped_triggers: list[str] = field(default_factory=list)
    unresolved_default_names: list[str] = field(default_factory=list)
    clip_ids: dict[str, int] = field(default_factory=dict)

    @property
    def complete(self) -> bool:
        """True if nothing in the document was dropped."""
        return not (self.skipped_clips or self.skipped_triggers or self.unresolved_default_names)


class ProfileCodec:
    """Exports and imports profiles against a store.

    Example:
        codec = ProfileCodec(store)
        backup = codec.export_profile()
        codec.import_profile(backup)
    """

    def __init__(self, store: SoundboardStore, events: StructuredLogger | None = None):
        """Initialize codec.

        Args:
            store: Store whose state is exported or replaced
            events: Optional structured event logger
        """
        self.store = store
        self._events = events
        self.last_export = ExportReport()

    def export_profile(self) -> ProfileDocument:
        """Capture the store as a self-contained profile document."""
        with self.store.locked():
            clips = self.store.get_sound_clips()
            triggers = self.store.get_trigger_words()
            settings = self.store.get_settings()

        report = ExportReport()

        exported: list[tuple[int, ProfileClip]] = []
        for clip in clips:
            try:
                audio = self.store.blobs.read(clip.filename)
            except OSError as e:
                logger.warning(f"Could not read audio file {clip.filename}: {e}")
                report.skipped_clips.append(clip.name)
                continue

            exported.append((clip.id, ProfileClip(
                name=clip.name,
                filename=clip.filename,
                format=clip.format,
                duration=clip.duration,
                size=clip.size,
                audio_data=base64.b64encode(audio).decode("ascii"),
            )))

        def name_of(clip_id: int) -> str | None:
            return next((c.name for i, c in exported if i == clip_id), None)

        profile_triggers = []
        for trigger in triggers:
            names = [n for n in map(name_of, trigger.sound_clip_ids) if n is not None]
            if not names:
                report.dropped_triggers.append(trigger.phrase)
                continue
            profile_triggers.append(ProfileTrigger(
                phrase=trigger.phrase,
                sound_clip_names=names,
                case_sensitive=trigger.case_sensitive,
                enabled=trigger.enabled,
            ))

        pool_names = [
            n for n in map(name_of, settings.default_response_sound_clip_ids)
            if n is not None
        ]

        document = ProfileDocument(
            sound_clips=[c for _, c in exported],
            trigger_words=profile_triggers,
            settings=ProfileSettings(
                default_response_enabled=settings.default_response_enabled,
                default_response_sound_clip_names=pool_names,
                default_response_delay=settings.default_response_delay,
            ),
        )

        self.last_export = report
        if self._events:
            self._events.profile_exported(
                len(document.sound_clips),
                len(document.trigger_words),
                skipped_clips=len(report.skipped_clips),
            )
        return document

    def import_profile(self, document: ProfileDocument | dict[str, Any]) -> ImportReport:
        """Replace the store's contents with a profile.

        This is not a merge: every existing clip, its audio, every
        trigger and the settings are discarded first.

        Args:
            document: ProfileDocument or decoded profile JSON

        Returns:
            ImportReport describing what was created and skipped

        Raises:
            ProfileFormatError: If the document is malformed; the
                store is left untouched in that case
        """
        if not isinstance(document, ProfileDocument):
            document = validate_profile(
                document,
                default_delay=self.store.config.default_response_delay_ms,
            )

        settings = document.settings
        try:
            SettingsPatch(
                default_response_enabled=settings.default_response_enabled,
                default_response_delay=settings.default_response_delay,
            )
        except ValueError as e:
            raise ProfileFormatError(str(e), field="settings") from e

        report = ImportReport()
        with self.store.locked():
            self.store.clear_all_data()

            name_to_id = report.clip_ids
            used_filenames: set[str] = set()
            for clip in document.sound_clips:
                clip_id = self._import_clip(clip, used_filenames)
                if clip_id is None:
                    report.skipped_clips.append(clip.name)
                    continue
                # later clips with the same name win
                name_to_id[clip.name] = clip_id
                report.clips_imported += 1

            for trigger in document.trigger_words:
                ids = [name_to_id.get(name) for name in trigger.sound_clip_names]
                if not ids or None in ids:
                    logger.warning(f"Skipping trigger word {trigger.phrase!r}: unresolved sound clip names")
                    report.skipped_triggers.append(trigger.phrase)
                    continue

                self.store.create_trigger_word(TriggerWordData(
                    phrase=trigger.phrase,
                    sound_clip_ids=ids,
                    case_sensitive=trigger.case_sensitive,
                    enabled=trigger.enabled,
                ))
                report.triggers_imported += 1

            pool_ids = []
            for name in document.settings.default_response_sound_clip_names:
                clip_id = name_to_id.get(name)
                if clip_id is None:
                    report.unresolved_default_names.append(name)
                else:
                    pool_ids.append(clip_id)

            self.store.update_settings(SettingsPatch(
                default_response_enabled=document.settings.default_response_enabled,
                default_response_sound_clip_ids=pool_ids,
                default_response_delay=document.settings.default_response_delay,
                default_response_index=0,
            ))

        logger.info(
            f"Imported profile: {report.clips_imported} clips, "
            f"{report.triggers_imported} triggers"
        )
        if self._events:
            self._events.profile_imported(
                report.clips_imported,
                report.triggers_imported,
                skipped_clips=len(report.skipped_clips),
                skipped_triggers=len(report.skipped_triggers),
            )
        return report

    def _import_clip(self, clip: ProfileClip, used_filenames: set[str]) -> int | None:
        try:
            audio = base64.b64decode(clip.audio_data, validate=True)
        except (binascii.Error, ValueError) as e:
            logger.error(f"Error importing sound clip {clip.name}: invalid audio data ({e})")
            return None

        filename = self._fresh_filename(clip.filename, used_filenames)
        try:
            self.store.blobs.write(filename, audio)
        except OSError as e:
            logger.error(f"Error importing sound clip {clip.name}: {e}")
            return None

        created = self.store.create_sound_clip(SoundClipData(
            name=clip.name,
            filename=filename,
            format=clip.format,
            duration=clip.duration,
            size=clip.size,
            url=self.store.config.clip_url(filename),
        ))
        return created.id

    @staticmethod
    def _fresh_filename(original: str, used: set[str]) -> str:
        """Timestamp-prefixed filename, unique within this import."""
        base = Path(original).name or "clip"
        stamp = int(time.time() * 1000)

        filename = f"{stamp}_{base}"
        counter = 1
        while filename in used:
            filename = f"{stamp}-{counter}_{base}"
            counter += 1

        used.add(filename)
        return filename
