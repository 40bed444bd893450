"""
Remix suggestions and inversion presets.
"""

from sonicmind.suggestions.rules import RULES, SuggestionRule
from sonicmind.suggestions.generator import SuggestionGenerator, create_suggestion_generator
from sonicmind.suggestions.presets import (
    INVERSION_DIMENSIONS,
    PRESETS,
    InversionDimension,
    Preset,
    apply_preset,
    apply_suggestion,
    default_settings,
)

__all__ = [
    "RULES",
    "SuggestionRule",
    "SuggestionGenerator",
    "create_suggestion_generator",
    "INVERSION_DIMENSIONS",
    "PRESETS",
    "InversionDimension",
    "Preset",
    "apply_preset",
    "apply_suggestion",
    "default_settings",
]
