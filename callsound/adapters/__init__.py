"""
Adapters - Entry points wrapping the store and archive.
"""

from callsound.adapters.cli import main

__all__ = ["main"]
