"""
Inversion dimensions and presets.

Six 0-100 knobs describe how a track would be inverted. Presets and
remix suggestions both name knob values; applying one replaces the named
knobs and keeps the rest. Rendering audio from these settings is not
part of this package.
"""

from dataclasses import dataclass
from typing import Dict, Mapping, Optional, Tuple

from sonicmind.core.models import RemixSuggestion


@dataclass(frozen=True)
class InversionDimension:
    id: str
    name: str
    description: str
    min_value: float = 0.0
    max_value: float = 100.0

    def clamp(self, value: float) -> float:
        return float(min(max(value, self.min_value), self.max_value))


@dataclass(frozen=True)
class Preset:
    id: str
    name: str
    description: str
    category: str  # basic, experimental or creative
    inversions: Mapping[str, float]


INVERSION_DIMENSIONS: Tuple[InversionDimension, ...] = (
    InversionDimension("phase", "Phase Inversion", "Flip the phase of the audio signal"),
    InversionDimension("time", "Time Reversal", "Play the audio backwards"),
    InversionDimension("spectral", "Spectral Mirror", "Mirror the frequency spectrum"),
    InversionDimension("dynamics", "Dynamic Inversion", "Invert the dynamic range"),
    InversionDimension("pitch", "Pitch Flip", "Shift pitch harmonics"),
    InversionDimension("rhythm", "Rhythm Deconstruct", "Deconstruct and reassemble rhythm"),
)

DIMENSIONS: Dict[str, InversionDimension] = {d.id: d for d in INVERSION_DIMENSIONS}

PRESET_CATEGORIES: Tuple[str, ...] = ("basic", "experimental", "creative")


def _preset(preset_id, name, description, category, values) -> Preset:
    # values follow INVERSION_DIMENSIONS order
    return Preset(
        id=preset_id,
        name=name,
        description=description,
        category=category,
        inversions=dict(zip(DIMENSIONS, (float(v) for v in values))),
    )


PRESETS: Dict[str, Preset] = {
    p.id: p for p in (
        _preset("clean", "Clean", "No effects applied", "basic", (0, 0, 0, 0, 0, 0)),
        _preset("phase-flip", "Phase Flip", "Full phase inversion", "basic", (100, 0, 0, 0, 0, 0)),
        _preset("reverse", "Reverse", "Time reversal effect", "basic", (0, 100, 0, 0, 0, 0)),
        _preset("mirror-world", "Mirror World", "Combined mirror effects", "experimental",
                (50, 0, 100, 50, 0, 0)),
        _preset("chaos", "Chaos", "Experimental chaos mode", "experimental",
                (30, 30, 70, 60, 40, 80)),
        _preset("deep-flip", "Deep Flip", "Deep inversion effect", "experimental",
                (100, 0, 50, 100, 70, 0)),
        _preset("glitch", "Glitch", "Glitchy rhythm effects", "creative",
                (20, 40, 30, 0, 60, 100)),
        _preset("ambient", "Ambient", "Soft ambient textures", "creative",
                (10, 0, 80, 30, 20, 10)),
    )
}


def default_settings() -> Dict[str, float]:
    """All knobs at zero."""
    return {dimension_id: 0.0 for dimension_id in DIMENSIONS}


def presets_in_category(category: str) -> Tuple[Preset, ...]:
    return tuple(p for p in PRESETS.values() if p.category == category)


def merge_settings(
    values: Mapping[str, float],
    settings: Optional[Mapping[str, float]] = None,
) -> Dict[str, float]:
    """
    Overlay ``values`` onto ``settings`` (or the defaults).

    Keys that name no dimension are ignored; every result is clamped to
    its dimension's range.
    """
    merged = default_settings()
    if settings:
        merged.update({k: float(v) for k, v in settings.items() if k in DIMENSIONS})
    merged.update({k: float(v) for k, v in values.items() if k in DIMENSIONS})
    return {k: DIMENSIONS[k].clamp(v) for k, v in merged.items()}


def apply_preset(
    preset_id: str,
    settings: Optional[Mapping[str, float]] = None,
) -> Dict[str, float]:
    """
    Settings after selecting a preset.

    Raises:
        KeyError: If ``preset_id`` is not a known preset
    """
    if preset_id not in PRESETS:
        raise KeyError(f"Unknown preset: {preset_id}")
    return merge_settings(PRESETS[preset_id].inversions, settings)


def apply_suggestion(
    suggestion: RemixSuggestion,
    settings: Optional[Mapping[str, float]] = None,
) -> Dict[str, float]:
    """Settings after accepting a remix suggestion."""
    return merge_settings(suggestion.parameters, settings)
