"""Compression presets.

`PRESETS` maps 'maximum'|'balanced'|'minimal' -> Preset(settings, description).
The 'custom' preset is not part of the table: its settings belong to the
session that edits them and are passed to `resolve` explicitly.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Any, List, Mapping

from pdf_compressor.errors import InvalidSettings, UnknownPreset

QUALITY_MIN = 0.1
QUALITY_MAX = 1.0

# camelCase save-option name -> dataclass field
_SAVE_OPTION_FIELDS = {
    "quality": "quality",
    "useObjectStreams": "use_object_streams",
    "addDefaultPage": "add_default_page",
    "objectsPerTick": "objects_per_tick",
}


@dataclass(frozen=True, slots=True)
class CompressionSettings:
    """Options handed to the document model's save step.

    quality:
        Nominal quality knob in [0.1, 1.0]. Carried through for interface
        parity; the save step does not re-encode images with it.
    use_object_streams:
        Pack indirect objects into compressed object streams.
    add_default_page:
        Give an otherwise empty output document one blank page.
    objects_per_tick:
        Batch size for cooperative time-slicing while the document is built.
    """
    quality: float
    use_object_streams: bool
    add_default_page: bool
    objects_per_tick: int

    def __post_init__(self) -> None:
        q = self.quality
        if isinstance(q, bool) or not isinstance(q, (int, float)):
            raise InvalidSettings(f"quality must be a number, got {q!r}")
        if not (QUALITY_MIN <= q <= QUALITY_MAX):
            raise InvalidSettings(f"quality must be between {QUALITY_MIN} and {QUALITY_MAX}, got {q}")
        for name in ("use_object_streams", "add_default_page"):
            if not isinstance(getattr(self, name), bool):
                raise InvalidSettings(f"{name} must be a boolean")
        n = self.objects_per_tick
        if isinstance(n, bool) or not isinstance(n, int) or n <= 0:
            raise InvalidSettings(f"objects_per_tick must be a positive integer, got {n!r}")
        # normalise ints like 1 -> 1.0 so equal records compare and hash alike
        object.__setattr__(self, "quality", float(q))

    def replace(self, **changes: Any) -> "CompressionSettings":
        try:
            return dataclasses.replace(self, **changes)
        except TypeError as e:
            raise InvalidSettings(str(e)) from None

    def as_save_options(self) -> dict:
        return {opt: getattr(self, field) for opt, field in _SAVE_OPTION_FIELDS.items()}

    @classmethod
    def from_mapping(
            cls,
            data: Mapping[str, Any],
            base: "CompressionSettings | None" = None,
    ) -> "CompressionSettings":
        """Build settings from camelCase or snake_case keys.

        Missing keys are taken from `base` (the custom defaults when omitted).
        """
        base = base or DEFAULT_CUSTOM_SETTINGS
        known = set(_SAVE_OPTION_FIELDS) | set(_SAVE_OPTION_FIELDS.values())
        unknown = sorted(k for k in data if k not in known)
        if unknown:
            raise InvalidSettings(f"Unknown settings fields: {', '.join(unknown)}")
        changes = {}
        for opt, field in _SAVE_OPTION_FIELDS.items():
            if opt in data:
                changes[field] = data[opt]
            elif field in data:
                changes[field] = data[field]
        return base.replace(**changes)


class PresetId(str, Enum):
    maximum = "maximum"
    balanced = "balanced"
    minimal = "minimal"
    custom = "custom"

    @classmethod
    def parse(cls, value: "str | PresetId") -> "PresetId":
        try:
            return cls(value)
        except ValueError:
            raise UnknownPreset(f"Unknown compression preset: {value!r}") from None


@dataclass(frozen=True, slots=True)
class Preset:
    id: PresetId
    settings: CompressionSettings
    description: str


DEFAULT_PRESET = PresetId.balanced

DEFAULT_CUSTOM_SETTINGS = CompressionSettings(
    quality=0.5, use_object_streams=True, add_default_page=False, objects_per_tick=50,
)

CUSTOM_DESCRIPTION = "Custom settings"

PRESETS: Mapping[PresetId, Preset] = MappingProxyType({
    PresetId.maximum: Preset(
        PresetId.maximum,
        CompressionSettings(quality=0.2, use_object_streams=True, add_default_page=False, objects_per_tick=100),
        "Maximum compression (smallest file, lowest quality)",
    ),
    PresetId.balanced: Preset(
        PresetId.balanced,
        CompressionSettings(quality=0.5, use_object_streams=True, add_default_page=False, objects_per_tick=50),
        "Balanced compression (good quality, smaller file)",
    ),
    PresetId.minimal: Preset(
        PresetId.minimal,
        CompressionSettings(quality=0.8, use_object_streams=True, add_default_page=False, objects_per_tick=25),
        "Minimal compression (best quality, larger file)",
    ),
})


def resolve(
        preset_id: PresetId,
        custom: CompressionSettings = DEFAULT_CUSTOM_SETTINGS,
) -> CompressionSettings:
    """Return the settings for `preset_id`; 'custom' yields `custom` itself."""
    preset_id = PresetId.parse(preset_id)
    if preset_id is PresetId.custom:
        return custom
    return PRESETS[preset_id].settings


def describe(preset_id: PresetId) -> str:
    preset_id = PresetId.parse(preset_id)
    if preset_id is PresetId.custom:
        return CUSTOM_DESCRIPTION
    return PRESETS[preset_id].description


def list_presets() -> List[Preset]:
    return list(PRESETS.values())
