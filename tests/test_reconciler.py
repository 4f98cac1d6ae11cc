"""
Tests for default-status reconciliation.

Unit tests for the reconciler functions plus randomized operation
sequences checking the store invariants after every step.
"""

import random

import pytest

from callsound.models import Settings, SoundClip, TriggerWord, TriggerWordData, TriggerWordPatch
from callsound.store.reconciler import (
    claim_clips,
    is_claimed_elsewhere,
    reconcile_assignment,
    release_clips,
)
from callsound.testing import add_test_clip


def make_clips(*ids):
    return {i: SoundClip(id=i, name=f"c{i}", filename=f"c{i}.wav", format="wav") for i in ids}


class TestReconcilerFunctions:
    """Tests for the reconciler building blocks."""

    def test_is_claimed_elsewhere(self):
        triggers = {
            1: TriggerWord(id=1, phrase="a", sound_clip_ids=[1]),
            2: TriggerWord(id=2, phrase="b", sound_clip_ids=[1, 2]),
        }

        assert is_claimed_elsewhere(1, triggers, exclude_trigger_id=1)
        assert not is_claimed_elsewhere(2, triggers, exclude_trigger_id=2)

    def test_claim_removes_every_pool_occurrence(self):
        """Duplicated pool entries all go."""
        clips = make_clips(1, 2)
        settings = Settings(default_response_sound_clip_ids=[1, 2, 1])

        claim_clips([1], clips, settings)

        assert settings.default_response_sound_clip_ids == [2]
        assert clips[1].is_default is False

    def test_claim_ignores_unknown_ids(self):
        clips = make_clips(1)
        settings = Settings(default_response_sound_clip_ids=[1])

        assert claim_clips([9], clips, settings) == []
        assert settings.default_response_sound_clip_ids == [1]

    def test_claim_clamps_pool_cursor(self):
        clips = make_clips(1, 2, 3)
        settings = Settings(default_response_sound_clip_ids=[1, 2, 3], default_response_index=2)

        claim_clips([3], clips, settings)

        assert settings.default_response_index == 1

    def test_release_appends_without_duplicates(self):
        clips = make_clips(1, 2)
        clips[1].is_default = False
        settings = Settings(default_response_sound_clip_ids=[2, 1])

        restored = release_clips([1], 5, clips, {}, settings)

        assert restored == [1]
        assert settings.default_response_sound_clip_ids == [2, 1]

    def test_release_respects_other_triggers(self):
        """A clip still used by another trigger stays claimed."""
        clips = make_clips(1)
        clips[1].is_default = False
        triggers = {2: TriggerWord(id=2, phrase="x", sound_clip_ids=[1])}
        settings = Settings()

        assert release_clips([1], 1, clips, triggers, settings) == []
        assert clips[1].is_default is False
        assert settings.default_response_sound_clip_ids == []

    def test_reconcile_assignment_swap(self):
        clips = make_clips(1, 2)
        clips[1].is_default = False
        triggers = {1: TriggerWord(id=1, phrase="go", sound_clip_ids=[2])}
        settings = Settings(default_response_sound_clip_ids=[2])

        reconcile_assignment(1, [1], [2], clips, triggers, settings)

        assert clips[1].is_default is True
        assert clips[2].is_default is False
        assert settings.default_response_sound_clip_ids == [1]


class TestSharedClips:
    """Tests for clips shared between triggers."""

    def test_reassign_shared_clip(self, store, invariants):
        """Moving one trigger off a shared clip keeps it claimed."""
        a = add_test_clip(store, "a")
        b = add_test_clip(store, "b")
        t1 = store.create_trigger_word(TriggerWordData(phrase="one", sound_clip_ids=[a.id]))
        t2 = store.create_trigger_word(TriggerWordData(phrase="two", sound_clip_ids=[a.id]))

        store.update_trigger_word(t1.id, TriggerWordPatch(sound_clip_ids=[b.id]))
        assert store.get_sound_clip(a.id).is_default is False
        invariants(store, pool_matches_defaults=True)

        store.delete_trigger_word(t2.id)
        assert store.get_sound_clip(a.id).is_default is True
        assert store.get_settings().default_response_sound_clip_ids == [a.id]
        invariants(store, pool_matches_defaults=True)

    def test_disabled_trigger_blocks_release(self, store, invariants):
        """A disabled trigger still counts when checking other claims."""
        a = add_test_clip(store, "a")
        t1 = store.create_trigger_word(TriggerWordData(phrase="one", sound_clip_ids=[a.id]))
        store.create_trigger_word(TriggerWordData(phrase="two", sound_clip_ids=[a.id], enabled=False))

        store.delete_trigger_word(t1.id)

        assert store.get_sound_clip(a.id).is_default is False
        invariants(store)


class TestRandomSequences:
    """Invariants hold across random operation sequences."""

    @pytest.mark.parametrize("seed", range(12))
    def test_invariants_hold(self, store, invariants, seed):
        rng = random.Random(seed)
        names = iter(f"clip{i}" for i in range(1000))

        for _ in range(120):
            clips = [c.id for c in store.get_sound_clips()]
            triggers = [t.id for t in store.get_trigger_words()]
            op = rng.choice([
                "create_clip", "create_clip", "delete_clip",
                "create_trigger", "update_trigger", "toggle_trigger",
                "delete_trigger", "next_clip", "next_default",
            ])

            if op == "create_clip" or not clips:
                add_test_clip(store, next(names), duration=0.01)
            elif op == "delete_clip":
                store.delete_sound_clip(rng.choice(clips))
            elif op == "create_trigger":
                ids = rng.sample(clips, rng.randint(1, min(3, len(clips))))
                store.create_trigger_word(TriggerWordData(phrase=f"p{rng.random()}", sound_clip_ids=ids))
            elif not triggers:
                continue
            elif op == "update_trigger":
                ids = rng.sample(clips, rng.randint(1, min(3, len(clips))))
                store.update_trigger_word(rng.choice(triggers), TriggerWordPatch(sound_clip_ids=ids))
            elif op == "toggle_trigger":
                store.update_trigger_word(rng.choice(triggers), TriggerWordPatch(enabled=rng.random() < 0.5))
            elif op == "delete_trigger":
                store.delete_trigger_word(rng.choice(triggers))
            elif op == "next_clip":
                assert store.next_clip_for_trigger(rng.choice(triggers)) in clips
            elif op == "next_default":
                store.next_default_response()

            invariants(store, pool_matches_defaults=True)
