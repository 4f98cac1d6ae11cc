"""
Entity models - Sound clips, trigger words and settings.

Entities are plain dataclasses owned by the store. Input records
(``*Data``) carry what a caller supplies on creation; patch records
(``*Patch``) carry a partial update where ``None`` means "leave as is".

Serialization:
    Every entity has ``to_dict()`` producing the camelCase JSON shape
    served to the web client (``isDefault``, ``soundClipIds``, ...).
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from typing import Any

SETTINGS_ID = 1


@dataclass
class SoundClipData:
    """Fields supplied when a clip is uploaded or imported."""
    name: str
    filename: str
    format: str
    duration: float = 0.0
    size: int = 0
    url: str = ""


@dataclass
class SoundClip:
    """An uploaded or recorded audio asset."""
    id: int
    name: str
    filename: str
    format: str
    duration: float = 0.0
    size: int = 0
    url: str = ""
    is_default: bool = True

    @classmethod
    def from_data(cls, clip_id: int, data: SoundClipData) -> "SoundClip":
        return cls(
            id=clip_id,
            name=data.name,
            filename=data.filename,
            format=data.format,
            duration=data.duration,
            size=data.size,
            url=data.url,
            is_default=True,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "filename": self.filename,
            "format": self.format,
            "duration": self.duration,
            "size": self.size,
            "url": self.url,
            "isDefault": self.is_default,
        }


@dataclass
class TriggerWordData:
    """Fields supplied when a trigger is created.

    ``sound_clip_ids`` is expected to be non-empty and ``phrase``
    non-blank; the request layer validates both.
    """
    phrase: str
    sound_clip_ids: list[int] = field(default_factory=list)
    case_sensitive: bool = False
    enabled: bool = True


@dataclass
class TriggerWord:
    """A phrase bound to an ordered list of clips, cycled round-robin."""
    id: int
    phrase: str
    sound_clip_ids: list[int] = field(default_factory=list)
    current_index: int = 0
    case_sensitive: bool = False
    enabled: bool = True

    def clamp_index(self) -> None:
        """Pull ``current_index`` back into range of ``sound_clip_ids``."""
        if not self.sound_clip_ids:
            self.current_index = 0
        else:
            self.current_index = max(0, min(self.current_index, len(self.sound_clip_ids) - 1))

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "phrase": self.phrase,
            "soundClipIds": list(self.sound_clip_ids),
            "currentIndex": self.current_index,
            "caseSensitive": self.case_sensitive,
            "enabled": self.enabled,
        }


@dataclass
class Settings:
    """Default-response configuration (singleton)."""
    id: int = SETTINGS_ID
    default_response_enabled: bool = True
    default_response_sound_clip_ids: list[int] = field(default_factory=list)
    default_response_delay: int = 0
    default_response_index: int = 0

    def clamp_index(self) -> None:
        """Pull ``default_response_index`` back into range of the pool."""
        pool = self.default_response_sound_clip_ids
        if not pool:
            self.default_response_index = 0
        else:
            self.default_response_index = max(0, min(self.default_response_index, len(pool) - 1))

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "defaultResponseEnabled": self.default_response_enabled,
            "defaultResponseSoundClipIds": list(self.default_response_sound_clip_ids),
            "defaultResponseDelay": self.default_response_delay,
            "defaultResponseIndex": self.default_response_index,
        }


def _check_field(name: str, value: Any, expected: type) -> None:
    # bool is an int subclass; never accept it where a number is expected
    if isinstance(value, bool) and expected is not bool:
        raise ValueError(f"{name} must be {expected.__name__}, got bool")
    if not isinstance(value, expected):
        raise ValueError(f"{name} must be {expected.__name__}, got {type(value).__name__}")


def _check_id_list(name: str, value: Any) -> None:
    _check_field(name, value, list)
    for item in value:
        _check_field(f"{name}[]", item, int)


class _Patch:
    """Shared helpers for patch records."""

    def present(self) -> dict[str, Any]:
        """Fields that are part of this update."""
        return {
            f.name: getattr(self, f.name)
            for f in fields(self)  # type: ignore[arg-type]
            if getattr(self, f.name) is not None
        }

    def is_empty(self) -> bool:
        return not self.present()


@dataclass
class TriggerWordPatch(_Patch):
    """Partial update for a trigger word."""
    phrase: str | None = None
    sound_clip_ids: list[int] | None = None
    case_sensitive: bool | None = None
    enabled: bool | None = None

    def __post_init__(self) -> None:
        if self.phrase is not None:
            _check_field("phrase", self.phrase, str)
        if self.sound_clip_ids is not None:
            _check_id_list("sound_clip_ids", self.sound_clip_ids)
            self.sound_clip_ids = list(self.sound_clip_ids)
        if self.case_sensitive is not None:
            _check_field("case_sensitive", self.case_sensitive, bool)
        if self.enabled is not None:
            _check_field("enabled", self.enabled, bool)


@dataclass
class SettingsPatch(_Patch):
    """Partial update for the settings record."""
    default_response_enabled: bool | None = None
    default_response_sound_clip_ids: list[int] | None = None
    default_response_delay: int | None = None
    default_response_index: int | None = None

    def __post_init__(self) -> None:
        if self.default_response_enabled is not None:
            _check_field("default_response_enabled", self.default_response_enabled, bool)
        if self.default_response_sound_clip_ids is not None:
            _check_id_list("default_response_sound_clip_ids", self.default_response_sound_clip_ids)
            self.default_response_sound_clip_ids = list(self.default_response_sound_clip_ids)
        if self.default_response_delay is not None:
            _check_field("default_response_delay", self.default_response_delay, int)
            if self.default_response_delay < 0:
                raise ValueError("default_response_delay must be >= 0")
        if self.default_response_index is not None:
            _check_field("default_response_index", self.default_response_index, int)
            if self.default_response_index < 0:
                raise ValueError("default_response_index must be >= 0")
