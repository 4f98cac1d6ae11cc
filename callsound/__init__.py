"""
callsound v1.0 - State store for a voice-triggered soundboard.

Architecture:
    API handlers → MemoryStore (clips, triggers, settings)
                      ├── reconciler   default-clip bookkeeping
                      └── rotation     round-robin clip selection
                 → ProfileCodec   (store ⇄ portable profile)
                 → ProfileArchive (named profiles on disk)

Public API (stable):
    MemoryStore      - In-memory store. One per process, passed to handlers.
    StoreConfig      - Directories, limits and defaults.
    ProfileCodec     - export_profile() / import_profile().
    ProfileArchive   - save / list / load / delete named profiles.

Example:
    from callsound import MemoryStore, StoreConfig, ProfileCodec, ProfileArchive
    from callsound.models import SoundClipData, TriggerWordData

    config = StoreConfig()
    store = MemoryStore(config)

    clip = store.create_sound_clip(SoundClipData(
        name="airhorn", filename="airhorn.mp3", format="mp3",
        duration=1.2, size=19200, url=config.clip_url("airhorn.mp3"),
    ))
    store.create_trigger_word(TriggerWordData(phrase="go team", sound_clip_ids=[clip.id]))

    for trigger, clip_id in store.match_transcript("Go team, go!"):
        play(store.get_sound_clip(clip_id).url)

    archive = ProfileArchive(config.profiles_dir)
    archive.save(ProfileCodec(store).export_profile(), "Game Night")
"""

__version__ = "1.0.0"

from callsound.config import StoreConfig
from callsound.errors import (
    ArchiveError,
    CallsoundError,
    FailureKind,
    ProfileFormatError,
)
from callsound.models import (
    Settings,
    SettingsPatch,
    SoundClip,
    SoundClipData,
    TriggerWord,
    TriggerWordData,
    TriggerWordPatch,
)
from callsound.blobs import BlobStore, DirectoryBlobStore
from callsound.store import MemoryStore, SoundboardStore
from callsound.profiles import (
    ArchiveResult,
    ImportReport,
    ProfileArchive,
    ProfileCodec,
    ProfileDocument,
)

__all__ = [
    "__version__",
    # Config
    "StoreConfig",
    # Errors
    "ArchiveError",
    "CallsoundError",
    "FailureKind",
    "ProfileFormatError",
    # Models
    "Settings",
    "SettingsPatch",
    "SoundClip",
    "SoundClipData",
    "TriggerWord",
    "TriggerWordData",
    "TriggerWordPatch",
    # Storage
    "BlobStore",
    "DirectoryBlobStore",
    "MemoryStore",
    "SoundboardStore",
    # Profiles
    "ArchiveResult",
    "ImportReport",
    "ProfileArchive",
    "ProfileCodec",
    "ProfileDocument",
]
