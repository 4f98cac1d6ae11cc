"""
Concurrency tests for the store.

Operations from many threads must serialize: ids stay unique,
rotations hand out every clip equally and the cross-entity
invariants hold afterwards.
"""

from collections import Counter
from concurrent.futures import ThreadPoolExecutor

from callsound.models import SoundClipData, TriggerWordData, TriggerWordPatch
from callsound.testing import add_test_clip, create_sample_profile


class TestConcurrentStore:
    """Tests for concurrent store access."""

    def test_unique_clip_ids(self, store, invariants):
        def create(i):
            return store.create_sound_clip(
                SoundClipData(name=f"c{i}", filename=f"c{i}.wav", format="wav")
            ).id

        with ThreadPoolExecutor(max_workers=8) as pool:
            ids = list(pool.map(create, range(200)))

        assert sorted(ids) == list(range(1, 201))
        assert len(store.get_settings().default_response_sound_clip_ids) == 200
        invariants(store, pool_matches_defaults=True)

    def test_trigger_rotation_is_fair(self, store):
        """N*k concurrent picks give every clip exactly k times."""
        clips = [add_test_clip(store, n) for n in "abcd"]
        trigger = store.create_trigger_word(
            TriggerWordData(phrase="go", sound_clip_ids=[c.id for c in clips])
        )

        with ThreadPoolExecutor(max_workers=8) as pool:
            picks = list(pool.map(lambda _: store.next_clip_for_trigger(trigger.id), range(400)))

        assert Counter(picks) == {c.id: 100 for c in clips}
        assert store.get_trigger_word(trigger.id).current_index == 0

    def test_default_rotation_is_fair(self, store):
        clips = [add_test_clip(store, n) for n in "abc"]

        with ThreadPoolExecutor(max_workers=8) as pool:
            picks = list(pool.map(lambda _: store.next_default_response(), range(300)))

        assert Counter(picks) == {c.id: 100 for c in clips}

    def test_mixed_operations_keep_invariants(self, store, invariants):
        clips = [add_test_clip(store, f"c{i}", duration=0.01) for i in range(10)]
        ids = [c.id for c in clips]

        def work(i):
            trigger = store.create_trigger_word(
                TriggerWordData(phrase=f"p{i}", sound_clip_ids=[ids[i % 10], ids[(i + 3) % 10]])
            )
            store.next_clip_for_trigger(trigger.id)
            store.next_default_response()
            if i % 3 == 0:
                store.update_trigger_word(trigger.id, TriggerWordPatch(sound_clip_ids=[ids[(i + 5) % 10]]))
            if i % 2 == 0:
                store.delete_trigger_word(trigger.id)

        with ThreadPoolExecutor(max_workers=8) as pool:
            list(pool.map(work, range(60)))

        invariants(store, pool_matches_defaults=True)

    def test_import_during_reads(self, store, codec, invariants):
        """Readers never observe a half-imported profile."""
        codec.import_profile(create_sample_profile())

        def read(_):
            with store.locked():
                names = sorted(c.name for c in store.get_sound_clips())
                triggers = store.get_trigger_words()
            return names, len(triggers)

        with ThreadPoolExecutor(max_workers=4) as pool:
            imports = [pool.submit(codec.import_profile, create_sample_profile()) for _ in range(5)]
            snapshots = list(pool.map(read, range(50)))
            for future in imports:
                future.result()

        assert all(snapshot == (["a", "b"], 1) for snapshot in snapshots)
        invariants(store, pool_matches_defaults=True)
