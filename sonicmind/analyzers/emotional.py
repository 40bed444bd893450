"""
Emotional DNA analyzer.

Classifies 100 time slices by amplitude and an amplitude-weighted
position centroid ("brightness"), then folds the arc into
valence/arousal/dominance, tension/release and a color signature.
"""

from collections import Counter
from typing import Dict, List, Tuple

import numpy as np

from sonicmind.analyzers.common import chunk_matrix, safe_divide
from sonicmind.core.analyzer_base import register_analyzer
from sonicmind.core.models import (
    EMOTION_COLORS,
    EMOTIONS,
    NEUTRAL_COLOR,
    EmotionalDNA,
    EmotionalPoint,
    SampleBuffer,
)

ARC_POINTS = 100

# Fixed intensity per emotion, before doubling
EMOTION_INTENSITY: Dict[str, float] = {
    "euphoric": 0.9,
    "tense": 0.8,
    "peaceful": 0.6,
    "melancholic": 0.7,
    "energetic": 0.85,
}


def classify_emotion(energy: float, brightness: float) -> Tuple[str, float]:
    """
    Map normalized energy and brightness to (emotion, intensity in 0-1).

    Neutral slices take their energy as intensity. Intensity is doubled
    and capped at 1.
    """
    if energy > 0.5 and brightness > 0.5:
        emotion = "euphoric"
    elif energy > 0.5 and brightness < 0.3:
        emotion = "tense"
    elif energy < 0.3 and brightness > 0.5:
        emotion = "peaceful"
    elif energy < 0.3 and brightness < 0.3:
        emotion = "melancholic"
    elif energy > 0.7:
        emotion = "energetic"
    else:
        emotion = "neutral"

    intensity = EMOTION_INTENSITY.get(emotion, energy)
    return emotion, min(intensity * 2, 1.0)


def dominant_color(arc: List[EmotionalPoint]) -> str:
    """Color of the emotion with the largest summed intensity."""
    totals: Counter = Counter()
    for point in arc:
        totals[point.emotion] += point.intensity
    if not totals:
        return NEUTRAL_COLOR

    present = [emotion for emotion in EMOTIONS if emotion in totals]
    top = max(present, key=lambda emotion: (totals[emotion], -EMOTIONS.index(emotion)))
    return EMOTION_COLORS.get(top, NEUTRAL_COLOR)


@register_analyzer("emotional_dna", "1.0.0", default=EmotionalDNA.neutral)
def analyze_emotional_dna(buffer: SampleBuffer) -> EmotionalDNA:
    """Per-chunk emotion from energy and centroid, folded into valence, arousal, dominance."""
    samples = buffer.primary_channel
    matrix, chunk_size = chunk_matrix(np.abs(samples), ARC_POINTS)

    chunk_energy = matrix.sum(axis=1)
    positions = np.arange(chunk_size, dtype=np.float64)
    centroid = safe_divide(matrix @ positions, chunk_energy)
    # an all-zero chunk has centroid 0, matching a unit denominator
    norm_energy = safe_divide(chunk_energy, chunk_size)
    norm_brightness = safe_divide(centroid, chunk_size)

    arc = []
    for i in range(ARC_POINTS):
        emotion, intensity = classify_emotion(float(norm_energy[i]), float(norm_brightness[i]))
        arc.append(EmotionalPoint(
            time=(i / ARC_POINTS) * buffer.duration,
            emotion=emotion,
            intensity=float(intensity),
        ))

    avg_brightness = float(centroid.sum()) / ARC_POINTS
    avg_energy = float(safe_divide(chunk_energy.sum(), len(samples)))

    valence = (float(safe_divide(avg_brightness, chunk_size)) - 0.5) * 2
    arousal = avg_energy * 4 - 0.5
    dominance = abs(valence) + abs(arousal) - 0.5

    deltas = np.diff([point.intensity for point in arc])
    tension = float(deltas[deltas > 0].sum())
    release = float(-deltas[deltas < 0].sum())

    return EmotionalDNA(
        valence=_clamp_unit(valence),
        arousal=_clamp_unit(arousal),
        dominance=_clamp_unit(dominance),
        tension=tension * 100,
        release=release * 100,
        emotional_arc=tuple(arc),
        color_signature=dominant_color(arc),
    )


def _clamp_unit(value: float) -> float:
    return float(max(-1.0, min(1.0, value)))
