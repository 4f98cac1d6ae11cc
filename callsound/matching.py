"""
Trigger matching - Find triggers spoken in a transcript.

A trigger matches when its phrase occurs anywhere in the transcript.
Matching ignores case unless the trigger is case sensitive; disabled
triggers never match.
"""

from __future__ import annotations

from typing import Iterable

from callsound.models import TriggerWord


def phrase_matches(trigger: TriggerWord, transcript: str) -> bool:
    """Check whether a single trigger fires for ``transcript``."""
    if not trigger.enabled or not trigger.phrase:
        return False

    if trigger.case_sensitive:
        return trigger.phrase in transcript
    return trigger.phrase.lower() in transcript.lower()


def find_matching_triggers(transcript: str, triggers: Iterable[TriggerWord]) -> list[TriggerWord]:
    """Return triggers that fire for ``transcript``, in the given order."""
    if not transcript:
        return []
    return [trigger for trigger in triggers if phrase_matches(trigger, transcript)]
