"""
Consciousness sync analyzer.

Estimates a dominant rhythm between 0.5 Hz and 10 Hz by autocorrelation
and labels it with a brainwave band.
"""

import math

import numpy as np

from sonicmind.analyzers.common import lagged_correlations
from sonicmind.core.analyzer_base import register_analyzer
from sonicmind.core.models import BRAINWAVE_BANDS, ConsciousnessSync, SampleBuffer

MIN_PERIOD_SECONDS = 0.1
MAX_PERIOD_SECONDS = 2.0
PERIOD_STEP = 100
CORRELATION_WINDOW = 1000
FLOW_WINDOW = 10000

# Upper bounds (Hz) for delta, theta, alpha, beta; anything above is gamma
BAND_LIMITS = (4.0, 8.0, 13.0, 30.0)

BINAURAL_OFFSETS = dict(zip(BRAINWAVE_BANDS, (1.5, 4.0, 7.83, 10.0, 40.0)))

MEDITATIVE_BANDS = ("theta", "alpha")


def band_for_frequency(frequency: float) -> str:
    for band, limit in zip(BRAINWAVE_BANDS, BAND_LIMITS):
        if frequency < limit:
            return band
    return BRAINWAVE_BANDS[-1]


def dominant_rhythm(samples: np.ndarray, sample_rate: float) -> tuple:
    """
    Search candidate periods for the strongest positive self-correlation.

    Returns:
        (rhythm frequency in Hz, peak correlation). Both are 0 when no
        period correlates positively.
    """
    periods = range(
        math.floor(sample_rate * MIN_PERIOD_SECONDS),
        math.floor(sample_rate * MAX_PERIOD_SECONDS),
        PERIOD_STEP,
    )
    # zero-length period would correlate the window with itself
    periods = [p for p in periods if p > 0]
    if not periods:
        return 0.0, 0.0

    correlations = lagged_correlations(samples, periods, CORRELATION_WINDOW)
    best = int(np.argmax(correlations))
    if correlations[best] <= 0:
        return 0.0, 0.0
    return sample_rate / periods[best], float(correlations[best])


def flow_score(samples: np.ndarray) -> float:
    """Sample-to-sample consistency over the first FLOW_WINDOW samples, 0-100."""
    head = samples[:FLOW_WINDOW]
    if len(head) < 2:
        return 0.0
    consistency = float(np.sum(1.0 - np.abs(np.diff(head))))
    return min(max(consistency / FLOW_WINDOW * 100, 0.0), 100.0)


@register_analyzer("consciousness_sync", "1.0.0", default=ConsciousnessSync.neutral)
def analyze_consciousness_sync(buffer: SampleBuffer) -> ConsciousnessSync:
    """Brainwave band of the dominant autocorrelation rhythm."""
    rhythm, peak = dominant_rhythm(buffer.primary_channel, buffer.sample_rate)
    band = band_for_frequency(rhythm)

    return ConsciousnessSync(
        brainwave_target=band,
        binaural_offset=BINAURAL_OFFSETS[band],
        isochronic_pulse=float(rhythm),
        entrainment_strength=float(min(peak * 100, 100.0)),
        flow_state_score=flow_score(buffer.primary_channel),
        meditation_depth=80.0 if band in MEDITATIVE_BANDS else 40.0,
    )
