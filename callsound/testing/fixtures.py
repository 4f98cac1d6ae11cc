"""
Test Fixtures - Common fixtures for testing.

Provides:
    - Test audio generation (raw samples and encoded WAV bytes)
    - Clip registration with real audio in a blob store
    - Sample profile documents
"""

from __future__ import annotations

import base64
import io
from typing import TYPE_CHECKING

import numpy as np
import soundfile as sf

from callsound.models import SoundClip, SoundClipData

if TYPE_CHECKING:
    from callsound.store.base import SoundboardStore


def create_test_audio(
    duration: float = 0.25,
    sample_rate: int = 16000,
    frequency: float = 440.0,
    amplitude: float = 0.5,
    audio_type: str = "tone",
) -> np.ndarray:
    """
    Create test audio samples.

    Args:
        duration: Duration in seconds
        sample_rate: Sample rate in Hz
        frequency: Frequency for tone (if audio_type == "tone")
        amplitude: Amplitude (0-1)
        audio_type: Type of audio ("tone", "silence", "noise")

    Returns:
        Float32 numpy array
    """
    num_samples = int(duration * sample_rate)

    if audio_type == "tone":
        t = np.linspace(0, duration, num_samples, dtype=np.float32)
        return (np.sin(2 * np.pi * frequency * t) * amplitude).astype(np.float32)

    elif audio_type == "noise":
        return np.random.uniform(-amplitude, amplitude, num_samples).astype(np.float32)

    return np.zeros(num_samples, dtype=np.float32)


def create_test_wav_bytes(
    duration: float = 0.25,
    sample_rate: int = 16000,
    **kwargs,
) -> bytes:
    """Create test audio encoded as a 16-bit PCM WAV file."""
    audio = create_test_audio(duration, sample_rate, **kwargs)

    buffer = io.BytesIO()
    sf.write(buffer, audio, sample_rate, format="WAV", subtype="PCM_16")
    return buffer.getvalue()


def add_test_clip(
    store: "SoundboardStore",
    name: str,
    duration: float = 0.25,
    frequency: float = 440.0,
) -> SoundClip:
    """Write a tone to the store's blobs and register it as a clip."""
    data = create_test_wav_bytes(duration=duration, frequency=frequency)
    filename = f"{name}.wav"
    store.blobs.write(filename, data)

    return store.create_sound_clip(SoundClipData(
        name=name,
        filename=filename,
        format="wav",
        duration=duration,
        size=len(data),
        url=store.config.clip_url(filename),
    ))


def create_sample_profile(
    clip_names: tuple[str, ...] = ("a", "b"),
    triggers: dict[str, list[str]] | None = None,
    default_names: list[str] | None = None,
    default_enabled: bool = True,
) -> dict:
    """
    Create a profile document as decoded JSON.

    Args:
        clip_names: One tone clip per name, each at a different pitch
        triggers: phrase -> clip names (default: {"go": ["a"]})
        default_names: Default-response pool (default: ["b"])
        default_enabled: Whether default responses are enabled

    Returns:
        Profile dict in the version 1.0 format
    """
    if triggers is None:
        triggers = {"go": ["a"]}
    if default_names is None:
        default_names = ["b"]

    clips = []
    for i, name in enumerate(clip_names):
        data = create_test_wav_bytes(frequency=220.0 * (i + 1))
        clips.append({
            "name": name,
            "filename": f"{name}.wav",
            "format": "wav",
            "duration": 0.25,
            "size": len(data),
            "audioData": base64.b64encode(data).decode("ascii"),
        })

    return {
        "version": "1.0",
        "exportDate": "2024-01-01T00:00:00+00:00",
        "soundClips": clips,
        "triggerWords": [
            {
                "phrase": phrase,
                "soundClipNames": list(names),
                "caseSensitive": False,
                "enabled": True,
            }
            for phrase, names in triggers.items()
        ],
        "settings": {
            "defaultResponseEnabled": default_enabled,
            "defaultResponseSoundClipNames": list(default_names),
            "defaultResponseDelay": 2000,
        },
    }
