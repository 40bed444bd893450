"""
Crowd energy simulator.

Builds a 200-point RMS energy curve normalized to its maximum and reads
peaks, buildups and drops off it. The response delay is a presentation
value drawn from the injected generator.
"""

from typing import List

import numpy as np

from sonicmind.analyzers.common import chunk_matrix, safe_divide
from sonicmind.core.analyzer_base import register_analyzer
from sonicmind.core.models import BuildupZone, CrowdEnergySimulation, SampleBuffer

CURVE_POINTS = 200
PEAK_THRESHOLD = 60.0
PEAK_RADIUS = 2
BUILDUP_FLOOR = 30.0
BUILDUP_MIN_LENGTH = 5
DROP_THRESHOLD = 20.0


def energy_curve(samples: np.ndarray) -> np.ndarray:
    """RMS per chunk, scaled so the loudest chunk is 100 (all zero when silent)."""
    matrix, chunk_size = chunk_matrix(samples, CURVE_POINTS)
    rms = np.sqrt(safe_divide((matrix ** 2).sum(axis=1), chunk_size))
    peak = rms.max()
    if peak <= 0:
        return np.zeros(CURVE_POINTS)
    return rms / peak * 100


def find_peaks(curve: np.ndarray) -> List[int]:
    """Indices strictly above both neighbours on each side and above PEAK_THRESHOLD."""
    peaks = []
    for i in range(PEAK_RADIUS, len(curve) - PEAK_RADIUS):
        neighbours = np.concatenate(
            (curve[i - PEAK_RADIUS:i], curve[i + 1:i + PEAK_RADIUS + 1])
        )
        if curve[i] > PEAK_THRESHOLD and np.all(curve[i] > neighbours):
            peaks.append(i)
    return peaks


def find_buildups(curve: np.ndarray) -> List[tuple]:
    """
    (start, end) index pairs of rising runs that begin above BUILDUP_FLOOR
    and last more than BUILDUP_MIN_LENGTH steps. ``end`` is the first index
    that stops rising; a run still rising at the end is dropped.
    """
    runs = []
    start = -1
    for i in range(1, len(curve)):
        rising = curve[i] > curve[i - 1]
        if rising and start == -1 and curve[i] > BUILDUP_FLOOR:
            start = i
        elif not rising and start != -1:
            if i - start > BUILDUP_MIN_LENGTH:
                runs.append((start, i))
            start = -1
    return runs


@register_analyzer(
    "crowd_energy", "1.0.0", default=CrowdEnergySimulation.neutral, stochastic=True
)
def analyze_crowd_energy(buffer: SampleBuffer, rng: np.random.Generator) -> CrowdEnergySimulation:
    """Peaks, buildups and drops of the energy curve. Only the response delay is random."""
    curve = energy_curve(buffer.primary_channel)
    duration = buffer.duration

    def at(index: int) -> float:
        return float((index / CURVE_POINTS) * duration)

    peaks = find_peaks(curve)
    buildups = tuple(
        BuildupZone(start=at(start), end=at(end), intensity=float(curve[end]))
        for start, end in find_buildups(curve)
    )
    drops = tuple(at(i) for i in np.nonzero(np.diff(curve) > DROP_THRESHOLD)[0] + 1)

    mean_energy = float(curve.mean())
    mosh_pit = min((mean_energy / 50) * (len(peaks) / 10), 1.0) * 100

    return CrowdEnergySimulation(
        energy_curve=tuple(float(v) for v in curve),
        peak_moments=tuple(at(i) for i in peaks),
        buildup_zones=buildups,
        drop_impact=drops,
        crowd_response_delay=float(0.2 + rng.random() * 0.3),
        mosh_pit_probability=float(mosh_pit),
    )
