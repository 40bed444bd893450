"""
Probability wave generator.

Purely synthetic: a damped sin^2 envelope plus fixed variant states,
collapse points and uncertainty windows scaled to the buffer duration.
"""

import numpy as np

from sonicmind.core.analyzer_base import register_analyzer
from sonicmind.core.models import (
    ProbabilityWave,
    SampleBuffer,
    SuperpositionState,
    UncertaintyZone,
)

WAVE_POINTS = 100

SUPERPOSITION_STATES = (
    SuperpositionState(id="original", probability=0.4, audio_variant="original"),
    SuperpositionState(id="reversed", probability=0.2, audio_variant="reversed"),
    SuperpositionState(id="pitched", probability=0.15, audio_variant="pitched"),
    SuperpositionState(id="stretched", probability=0.15, audio_variant="stretched"),
    SuperpositionState(id="granular", probability=0.1, audio_variant="granular"),
)

COLLAPSE_FRACTIONS = (0.25, 0.5, 0.75)

# (start fraction, end fraction, entropy)
UNCERTAINTY_WINDOWS = (
    (0.1, 0.2, 0.8),
    (0.4, 0.5, 0.9),
    (0.7, 0.8, 0.7),
)


def wave_function(points: int = WAVE_POINTS) -> np.ndarray:
    x = np.arange(points) / points * np.pi * 4
    return np.sin(x) ** 2 * np.exp(-x / 10)


def probability_wave_for(duration: float) -> ProbabilityWave:
    """The full record for a buffer of ``duration`` seconds; nothing else varies."""
    return ProbabilityWave(
        wave_function=tuple(float(v) for v in wave_function()),
        superposition_states=SUPERPOSITION_STATES,
        collapse_points=tuple(p * duration for p in COLLAPSE_FRACTIONS),
        uncertainty_zones=tuple(
            UncertaintyZone(start=start * duration, end=end * duration, entropy=entropy)
            for start, end, entropy in UNCERTAINTY_WINDOWS
        ),
    )


@register_analyzer("probability_wave", "1.0.0", default=ProbabilityWave.neutral)
def analyze_probability_wave(buffer: SampleBuffer) -> ProbabilityWave:
    """Synthetic wave scaled to the buffer duration; the samples are never read."""
    return probability_wave_for(buffer.duration)
