"""
Round-robin rotation over a stored cursor.

Used for per-trigger clip cycling and for the default-response pool.
The function is pure; the store persists the returned cursor.
"""

from __future__ import annotations

from typing import Sequence, TypeVar

T = TypeVar("T")


def next_in_rotation(sequence: Sequence[T], index: int) -> tuple[T | None, int]:
    """Pick the element at ``index`` and advance the cursor.

    Args:
        sequence: Items to rotate through
        index: Stored cursor

    Returns:
        ``(selected, next_index)``. ``selected`` is None for an empty
        sequence, in which case the cursor is returned unchanged.

    Example:
        >>> next_in_rotation([7, 8, 9], 2)
        (9, 0)
    """
    if not sequence:
        return None, index

    length = len(sequence)
    index = index % length
    return sequence[index], (index + 1) % length
