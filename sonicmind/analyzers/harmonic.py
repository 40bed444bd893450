"""
Harmonic signature analyzer.

Estimates the fundamental with a time-domain autocorrelation lag search,
derives the harmonic series, scores consonance against simple ratios and
maps sample-to-sample dissonance over 100 time slices.
"""

import logging
from typing import Sequence

import numpy as np

from sonicmind.analyzers.common import chunk_matrix, lagged_correlations
from sonicmind.core.analyzer_base import register_analyzer
from sonicmind.core.models import HarmonicSignature, SampleBuffer

logger = logging.getLogger("analyzer.harmonic_signature")

MIN_LAG = 20
MAX_LAG = 500  # exclusive
CORRELATION_WINDOW = 1000
FALLBACK_FUNDAMENTAL = 440.0
NUM_HARMONICS = 8
SIMPLE_RATIOS = (1.0, 1.25, 1.33, 1.5, 2.0)
DISSONANCE_SLICES = 100


def estimate_fundamental_lag(
    samples: np.ndarray,
    subharmonic_tolerance: float = 0.01,
) -> int:
    """
    Pick the fundamental period in samples, or 0 when nothing correlates.

    Multiples of the true period score almost identically on a periodic
    signal, so the earliest local correlation peak within
    ``subharmonic_tolerance`` of the best score wins over the arg-max.
    A tolerance of 0 degenerates to the plain arg-max.
    """
    lags = np.arange(MIN_LAG, MAX_LAG)
    correlations = lagged_correlations(samples, lags, CORRELATION_WINDOW)

    best = int(np.argmax(correlations))
    peak_value = correlations[best]
    if peak_value <= 0:
        return 0

    threshold = peak_value * (1.0 - subharmonic_tolerance)
    for k in range(1, best):
        is_peak = (
            correlations[k] > correlations[k - 1]
            and correlations[k] >= correlations[k + 1]
        )
        if is_peak and correlations[k] >= threshold:
            return int(lags[k])
    return int(lags[best])


def consonance_score(ratios: Sequence[float]) -> float:
    """
    Mean closeness of each ratio to its nearest simple ratio, times 100.

    Not clamped: ratios far from every simple ratio drive it negative.
    """
    if not ratios:
        return 0.0
    simple = np.asarray(SIMPLE_RATIOS)
    total = 0.0
    for ratio in ratios:
        closest = simple[np.argmin(np.abs(simple - ratio))]
        total += 1.0 - abs(ratio - closest)
    return total / len(ratios) * 100


def dissonance_map(samples: np.ndarray, slices: int = DISSONANCE_SLICES) -> np.ndarray:
    """Per-slice sum of |x[j+1] - x[j]| within the slice, divided by the slice length."""
    matrix, chunk_size = chunk_matrix(samples, slices)
    if chunk_size == 0:
        return np.zeros(slices)
    return np.abs(np.diff(matrix, axis=1)).sum(axis=1) / chunk_size


@register_analyzer(
    "harmonic_signature", "1.0.0", default=HarmonicSignature.neutral
)
def analyze_harmonics(
    buffer: SampleBuffer,
    subharmonic_tolerance: float = 0.01,
) -> HarmonicSignature:
    """
    Fundamental from the autocorrelation peak, or 440 Hz when nothing correlates.

    Args:
        buffer: Source audio; channel 0 is read
        subharmonic_tolerance: How close a shorter lag must come to the best
            correlation to be preferred over it
    """
    samples = buffer.primary_channel

    lag = estimate_fundamental_lag(samples, subharmonic_tolerance)
    if lag > 0:
        fundamental = buffer.sample_rate / lag
    else:
        logger.debug("No positive correlation, using fallback fundamental")
        fundamental = FALLBACK_FUNDAMENTAL

    harmonics = tuple(fundamental * k for k in range(1, NUM_HARMONICS + 1))
    ratios = tuple(h / fundamental for h in harmonics)

    return HarmonicSignature(
        fundamental_freq=float(fundamental),
        harmonics=harmonics,
        harmonic_ratios=ratios,
        consonance_score=float(consonance_score(ratios)),
        dissonance_map=tuple(float(v) for v in dissonance_map(samples)),
    )
