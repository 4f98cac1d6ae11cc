"""
Default-status reconciliation.

A clip is "default" exactly while no trigger claims it. Whenever a
trigger's clip list changes, the clips it gained lose default status
and leave the default-response pool; the clips it lost regain default
status (and rejoin the pool) unless another trigger still claims them.

Disabled triggers still claim their clips.

These functions mutate the collections they are given and must be
called while the owning store holds its lock.
"""

from __future__ import annotations

import logging
from typing import Iterable, Mapping

from callsound.models import Settings, SoundClip, TriggerWord
from callsound.monitoring.logging import StructuredLogger

logger = logging.getLogger(__name__)


def is_claimed_elsewhere(
    clip_id: int,
    triggers: Mapping[int, TriggerWord],
    exclude_trigger_id: int,
) -> bool:
    """Check whether any trigger other than ``exclude_trigger_id`` uses the clip."""
    return any(
        trigger.id != exclude_trigger_id and clip_id in trigger.sound_clip_ids
        for trigger in triggers.values()
    )


def claim_clips(
    clip_ids: Iterable[int],
    clips: Mapping[int, SoundClip],
    settings: Settings,
    events: StructuredLogger | None = None,
) -> list[int]:
    """Mark clips as assigned to a trigger.

    Returns:
        Ids whose default status changed (or that left the pool)
    """
    changed = []
    for clip_id in clip_ids:
        clip = clips.get(clip_id)
        if clip is None:
            continue

        clip.is_default = False
        pool = settings.default_response_sound_clip_ids
        if clip_id in pool:
            settings.default_response_sound_clip_ids = [i for i in pool if i != clip_id]

        logger.info(f"Marked sound clip {clip.name} as non-default (assigned to trigger)")
        if events:
            events.default_status_changed(clip_id, False)
        changed.append(clip_id)

    settings.clamp_index()
    return changed


def release_clips(
    clip_ids: Iterable[int],
    owner_id: int,
    clips: Mapping[int, SoundClip],
    triggers: Mapping[int, TriggerWord],
    settings: Settings,
    events: StructuredLogger | None = None,
) -> list[int]:
    """Return clips to default status if no other trigger claims them.

    Args:
        clip_ids: Ids the trigger ``owner_id`` no longer references
        owner_id: Trigger that released them (excluded from the check)

    Returns:
        Ids restored to default status
    """
    restored = []
    for clip_id in clip_ids:
        if is_claimed_elsewhere(clip_id, triggers, owner_id):
            continue

        clip = clips.get(clip_id)
        if clip is None:
            continue

        clip.is_default = True
        if clip_id not in settings.default_response_sound_clip_ids:
            settings.default_response_sound_clip_ids.append(clip_id)

        logger.info(f"Marked sound clip {clip.name} as default (no longer assigned to any trigger)")
        if events:
            events.default_status_changed(clip_id, True)
        restored.append(clip_id)

    return restored


def reconcile_assignment(
    trigger_id: int,
    old_ids: list[int],
    new_ids: list[int],
    clips: Mapping[int, SoundClip],
    triggers: Mapping[int, TriggerWord],
    settings: Settings,
    events: StructuredLogger | None = None,
) -> None:
    """Apply default-status effects of a trigger's clip list changing.

    ``triggers`` must already reflect the new list for ``trigger_id``.
    Pass an empty ``old_ids`` for a freshly created trigger.
    """
    old_set = set(old_ids)
    new_set = set(new_ids)

    added = [clip_id for clip_id in dict.fromkeys(new_ids) if clip_id not in old_set]
    removed = [clip_id for clip_id in dict.fromkeys(old_ids) if clip_id not in new_set]

    claim_clips(added, clips, settings, events)
    release_clips(removed, trigger_id, clips, triggers, settings, events)


def reconcile_deletion(
    trigger: TriggerWord,
    clips: Mapping[int, SoundClip],
    triggers: Mapping[int, TriggerWord],
    settings: Settings,
    events: StructuredLogger | None = None,
) -> None:
    """Restore default status for clips of a trigger being deleted."""
    release_clips(
        list(dict.fromkeys(trigger.sound_clip_ids)),
        trigger.id,
        clips,
        triggers,
        settings,
        events,
    )
