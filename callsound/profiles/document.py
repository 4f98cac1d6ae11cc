"""
Profile Document - Portable, name-addressed soundboard export.

A profile carries the whole soundboard without internal ids: clips
embed their audio as base64, triggers and the default-response pool
refer to clips by name.

Format (version 1.0):
    {
        "version": "1.0",
        "exportDate": "2024-05-01T12:00:00+00:00",
        "soundClips": [
            {"name", "filename", "format", "duration", "size", "audioData"}
        ],
        "triggerWords": [
            {"phrase", "soundClipNames": [...], "caseSensitive", "enabled"}
        ],
        "settings": {
            "defaultResponseEnabled", "defaultResponseSoundClipNames": [...],
            "defaultResponseDelay"
        }
    }

Older single-clip profiles store ``"soundClipName": "x"`` on triggers;
``from_dict`` reads that as ``["x"]``.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

from callsound.config import DEFAULT_RESPONSE_DELAY_MS
from callsound.errors import ProfileFormatError

PROFILE_VERSION = "1.0"
REQUIRED_KEYS = ("version", "soundClips", "triggerWords", "settings")


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


@dataclass
class ProfileClip:
    """A clip with embedded audio."""
    name: str
    filename: str
    format: str
    duration: float = 0.0
    size: int = 0
    audio_data: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "filename": self.filename,
            "format": self.format,
            "duration": self.duration,
            "size": self.size,
            "audioData": self.audio_data,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ProfileClip":
        name = _require_str(data, "name", "soundClips[].name")
        return cls(
            name=name,
            filename=str(data.get("filename") or name),
            format=str(data.get("format", "")),
            duration=_number(data.get("duration", 0.0), "soundClips[].duration"),
            size=int(_number(data.get("size", 0), "soundClips[].size")),
            audio_data=str(data.get("audioData", "")),
        )


@dataclass
class ProfileTrigger:
    """A trigger referring to its clips by name."""
    phrase: str
    sound_clip_names: list[str] = field(default_factory=list)
    case_sensitive: bool = False
    enabled: bool = True

    def to_dict(self) -> dict[str, Any]:
        return {
            "phrase": self.phrase,
            "soundClipNames": list(self.sound_clip_names),
            "caseSensitive": self.case_sensitive,
            "enabled": self.enabled,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ProfileTrigger":
        phrase = _require_str(data, "phrase", "triggerWords[].phrase")

        names = data.get("soundClipNames")
        if names is None and isinstance(data.get("soundClipName"), str):
            names = [data["soundClipName"]]
        names = _str_list(names or [], "triggerWords[].soundClipNames")

        return cls(
            phrase=phrase,
            sound_clip_names=names,
            case_sensitive=bool(data.get("caseSensitive", False)),
            enabled=data.get("enabled") is not False,
        )


@dataclass
class ProfileSettings:
    """Default-response settings with the pool as clip names."""
    default_response_enabled: bool = False
    default_response_sound_clip_names: list[str] = field(default_factory=list)
    default_response_delay: int = DEFAULT_RESPONSE_DELAY_MS

    def to_dict(self) -> dict[str, Any]:
        return {
            "defaultResponseEnabled": self.default_response_enabled,
            "defaultResponseSoundClipNames": list(self.default_response_sound_clip_names),
            "defaultResponseDelay": self.default_response_delay,
        }

    @classmethod
    def from_dict(
        cls,
        data: dict[str, Any],
        default_delay: int = DEFAULT_RESPONSE_DELAY_MS,
    ) -> "ProfileSettings":
        delay = data.get("defaultResponseDelay")
        return cls(
            default_response_enabled=bool(data.get("defaultResponseEnabled", False)),
            default_response_sound_clip_names=_str_list(
                data.get("defaultResponseSoundClipNames") or [],
                "settings.defaultResponseSoundClipNames",
            ),
            default_response_delay=default_delay if delay is None else _delay(delay),
        )


@dataclass
class ProfileDocument:
    """A complete soundboard profile."""
    sound_clips: list[ProfileClip] = field(default_factory=list)
    trigger_words: list[ProfileTrigger] = field(default_factory=list)
    settings: ProfileSettings = field(default_factory=ProfileSettings)
    version: str = PROFILE_VERSION
    export_date: str = field(default_factory=utc_now_iso)

    def to_dict(self) -> dict[str, Any]:
        return {
            "version": self.version,
            "exportDate": self.export_date,
            "soundClips": [clip.to_dict() for clip in self.sound_clips],
            "triggerWords": [trigger.to_dict() for trigger in self.trigger_words],
            "settings": self.settings.to_dict(),
        }

    @classmethod
    def from_dict(
        cls,
        data: dict[str, Any],
        default_delay: int = DEFAULT_RESPONSE_DELAY_MS,
    ) -> "ProfileDocument":
        return validate_profile(data, default_delay=default_delay)

    def clip_names(self) -> list[str]:
        return [clip.name for clip in self.sound_clips]


def validate_profile(
    data: Any,
    default_delay: int = DEFAULT_RESPONSE_DELAY_MS,
) -> ProfileDocument:
    """Check a decoded profile and build a ProfileDocument.

    Archive envelope fields (``readOnly``, ``savedAt``) are ignored.

    Raises:
        ProfileFormatError: If required keys are missing or mistyped
    """
    if not isinstance(data, dict):
        raise ProfileFormatError("document must be a JSON object")

    for key in REQUIRED_KEYS:
        if key not in data or data[key] is None:
            raise ProfileFormatError(f"missing '{key}'", field=key)

    if not isinstance(data["soundClips"], list):
        raise ProfileFormatError("'soundClips' must be a list", field="soundClips")
    if not isinstance(data["triggerWords"], list):
        raise ProfileFormatError("'triggerWords' must be a list", field="triggerWords")
    if not isinstance(data["settings"], dict):
        raise ProfileFormatError("'settings' must be an object", field="settings")

    return ProfileDocument(
        version=str(data["version"]),
        export_date=str(data.get("exportDate") or ""),
        sound_clips=[ProfileClip.from_dict(_entry(c, "soundClips")) for c in data["soundClips"]],
        trigger_words=[ProfileTrigger.from_dict(_entry(t, "triggerWords")) for t in data["triggerWords"]],
        settings=ProfileSettings.from_dict(data["settings"], default_delay=default_delay),
    )


def _entry(value: Any, field_name: str) -> dict[str, Any]:
    if not isinstance(value, dict):
        raise ProfileFormatError(f"entries of '{field_name}' must be objects", field=field_name)
    return value


def _require_str(data: dict[str, Any], key: str, field_name: str) -> str:
    value = data.get(key)
    if not isinstance(value, str):
        raise ProfileFormatError(f"'{field_name}' must be a string", field=field_name)
    return value


def _str_list(value: Any, field_name: str) -> list[str]:
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise ProfileFormatError(f"'{field_name}' must be a list of strings", field=field_name)
    return list(value)


def _number(value: Any, field_name: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ProfileFormatError(f"'{field_name}' must be a number", field=field_name)
    if isinstance(value, float) and not math.isfinite(value):
        raise ProfileFormatError(f"'{field_name}' must be finite", field=field_name)
    return value


def _delay(value: Any) -> int:
    field_name = "settings.defaultResponseDelay"
    delay = int(_number(value, field_name))
    if delay < 0:
        raise ProfileFormatError(f"'{field_name}' must be >= 0", field=field_name)
    return delay
