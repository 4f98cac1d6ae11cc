"""
Shared fixtures for callsound tests.

Provides:
    - Isolated store instances (tmp directories, in-memory blobs)
    - Codec and archive bound to those instances
    - An invariant checker run after store operations
"""

from __future__ import annotations

import pytest

from callsound.config import StoreConfig
from callsound.profiles import ProfileArchive, ProfileCodec
from callsound.store import MemoryStore
from callsound.testing import MemoryBlobStore


def check_invariants(store: MemoryStore, pool_matches_defaults: bool = False) -> None:
    """Assert the store's cross-entity invariants."""
    clips = store.get_sound_clips()
    triggers = store.get_trigger_words()
    settings = store.get_settings()

    live_ids = {clip.id for clip in clips}
    claimed = {clip_id for trigger in triggers for clip_id in trigger.sound_clip_ids}

    for clip in clips:
        assert clip.is_default == (clip.id not in claimed), f"clip {clip.id} default flag out of sync"

    for trigger in triggers:
        assert trigger.sound_clip_ids, f"trigger {trigger.id} has no clips"
        assert set(trigger.sound_clip_ids) <= live_ids
        assert 0 <= trigger.current_index < len(trigger.sound_clip_ids)

    pool = settings.default_response_sound_clip_ids
    if pool:
        assert 0 <= settings.default_response_index < len(pool)
    else:
        assert settings.default_response_index == 0

    default_ids = {clip.id for clip in clips if clip.is_default}
    assert set(pool) <= default_ids, "pool holds a claimed or deleted clip"
    if pool_matches_defaults:
        assert set(pool) == default_ids


@pytest.fixture
def invariants():
    """The invariant checker, for use inside tests."""
    return check_invariants


@pytest.fixture
def config(tmp_path):
    """Config rooted in a temporary directory."""
    return StoreConfig(
        uploads_dir=tmp_path / "uploads",
        profiles_dir=tmp_path / "server-profiles",
    )


@pytest.fixture
def blobs():
    return MemoryBlobStore()


@pytest.fixture
def store(config, blobs):
    return MemoryStore(config, blobs=blobs)


@pytest.fixture
def codec(store):
    return ProfileCodec(store)


@pytest.fixture
def archive(config):
    return ProfileArchive(config.profiles_dir)
