"""
Profiles - Portable soundboard exports and the server-side archive.

Usage:
    from callsound.profiles import ProfileCodec, ProfileArchive

    codec = ProfileCodec(store)
    archive = ProfileArchive(config.profiles_dir)

    archive.save(codec.export_profile(), "Party Mix")
    result = archive.load("Party Mix")
    if result.ok:
        codec.import_profile(result.document)
"""

from callsound.profiles.document import (
    PROFILE_VERSION,
    ProfileClip,
    ProfileDocument,
    ProfileSettings,
    ProfileTrigger,
    validate_profile,
)
from callsound.profiles.codec import ExportReport, ImportReport, ProfileCodec
from callsound.profiles.archive import (
    ArchiveEntry,
    ArchiveResult,
    ProfileArchive,
    sanitize_filename,
    strip_envelope,
)

__all__ = [
    "PROFILE_VERSION",
    "ProfileClip",
    "ProfileDocument",
    "ProfileSettings",
    "ProfileTrigger",
    "validate_profile",
    "ExportReport",
    "ImportReport",
    "ProfileCodec",
    "ArchiveEntry",
    "ArchiveResult",
    "ProfileArchive",
    "sanitize_filename",
    "strip_envelope",
]
