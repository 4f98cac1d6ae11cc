"""
Store module - Soundboard state and its consistency rules.

The store NEVER reads audio content; clip bytes live in a BlobStore.
"""

from callsound.store.base import SoundboardStore
from callsound.store.memory import MemoryStore

__all__ = [
    "SoundboardStore",
    "MemoryStore",
]
