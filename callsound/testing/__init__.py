"""
Testing Utilities - Helpers for exercising the store without a disk.

Components:
    MemoryBlobStore    - In-memory BlobStore with failure injection
    Fixtures           - Tone audio, WAV bytes, sample profiles

Usage:
    from callsound.testing import MemoryBlobStore, add_test_clip

    store = MemoryStore(config, blobs=MemoryBlobStore())
    clip = add_test_clip(store, "airhorn")
"""

from callsound.testing.mock import (
    MemoryBlobStore,
    CallRecord,
)

from callsound.testing.fixtures import (
    create_test_audio,
    create_test_wav_bytes,
    add_test_clip,
    create_sample_profile,
)

__all__ = [
    # Mock
    "MemoryBlobStore",
    "CallRecord",
    # Fixtures
    "create_test_audio",
    "create_test_wav_bytes",
    "add_test_clip",
    "create_sample_profile",
]
