"""
Dimensional rift detector.

Flags energy discontinuities across 100 slices. Rift type and alternate
reality labels are drawn from the injected generator.
"""

import numpy as np

from sonicmind.analyzers.common import chunk_matrix, safe_divide
from sonicmind.core.analyzer_base import register_analyzer
from sonicmind.core.models import (
    ALTERNATE_REALITIES,
    RIFT_TYPES,
    DimensionalRift,
    RiftPoint,
    SampleBuffer,
)

SLICES = 100
DELTA_THRESHOLD = 0.1
CHECKPOINT_EVERY = 20
CHECKPOINT_ENERGY = 0.3
MAX_RIFTS = 10
MAX_TIMELINES = 7


@register_analyzer(
    "dimensional_rift", "1.0.0", default=DimensionalRift.neutral, stochastic=True
)
def analyze_dimensional_rift(buffer: SampleBuffer, rng: np.random.Generator) -> DimensionalRift:
    """Energy jumps between slices become rifts; their type and reality are drawn from ``rng``."""
    matrix, chunk_size = chunk_matrix(np.abs(buffer.primary_channel), SLICES)
    energy = safe_divide(matrix.sum(axis=1), chunk_size)
    deltas = np.abs(np.diff(energy, prepend=0.0))

    rifts = []
    for i in range(SLICES):
        checkpoint = i % CHECKPOINT_EVERY == 0 and energy[i] > CHECKPOINT_ENERGY
        if deltas[i] > DELTA_THRESHOLD or checkpoint:
            rifts.append(RiftPoint(
                time=(i / SLICES) * buffer.duration,
                intensity=float(min(deltas[i] * 500, 100.0)),
                rift_type=RIFT_TYPES[rng.integers(len(RIFT_TYPES))],
                alternate_reality=ALTERNATE_REALITIES[rng.integers(len(ALTERNATE_REALITIES))],
            ))

    kept = rifts[:MAX_RIFTS]
    if kept:
        bleed = sum(r.intensity for r in kept) / len(kept)
    else:
        bleed = 0.0

    return DimensionalRift(
        rift_points=tuple(kept),
        parallel_timelines=min(len(rifts), MAX_TIMELINES),
        dimensional_bleed=float(bleed),
        reality_stability=float(max(0, 100 - len(rifts) * 5)),
    )
