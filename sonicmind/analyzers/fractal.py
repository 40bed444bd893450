"""
Temporal fractal analyzer.

Box-counting dimension over five partition scales, plus window-to-window
similarity at power-of-two distances.
"""

from typing import List, Sequence

import numpy as np

from sonicmind.analyzers.common import chunk_matrix
from sonicmind.core.analyzer_base import register_analyzer
from sonicmind.core.models import RecursivePattern, SampleBuffer, TemporalFractal

BOX_SCALES = (10, 20, 50, 100, 200)
ACTIVE_RANGE = 0.01
PATTERN_WINDOWS = 16
REPETITION_SCALES = (2, 4, 8)
COMPARED_WINDOWS = 4
PATTERN_THRESHOLD = 0.6
ZOOM_THRESHOLD = 80.0


def box_counts(samples: np.ndarray, scales: Sequence[int] = BOX_SCALES) -> List[int]:
    """Per scale, the number of boxes whose sample range exceeds ACTIVE_RANGE."""
    counts = []
    for scale in scales:
        boxes, box_size = chunk_matrix(samples, scale)
        if box_size == 0:
            counts.append(0)
            continue
        spread = boxes.max(axis=1) - boxes.min(axis=1)
        counts.append(int(np.count_nonzero(spread > ACTIVE_RANGE)))
    return counts


def fractal_dimension(counts: Sequence[int], scales: Sequence[int] = BOX_SCALES) -> float:
    """|slope| of the least-squares fit of log(count) on log(scale), capped at 2."""
    log_scales = np.log(np.asarray(scales, dtype=np.float64))
    # empty scales count as one box so log stays finite
    log_counts = np.log(np.maximum(np.asarray(counts, dtype=np.float64), 1.0))

    slope = np.polyfit(log_scales, log_counts, 1)[0]
    return float(min(abs(slope), 2.0))


def recursive_patterns(samples: np.ndarray, duration: float) -> List[RecursivePattern]:
    total = len(samples)
    window = total // PATTERN_WINDOWS
    if window == 0:
        return []

    patterns = []
    for scale in REPETITION_SCALES:
        for i in range(COMPARED_WINDOWS):
            start1 = i * window
            start2 = (i + scale) * window
            if start2 + window > total:
                continue

            a = samples[start1:start1 + window]
            b = samples[start2:start2 + window]
            similarity = float(np.mean(1.0 - np.abs(a - b)))

            if similarity > PATTERN_THRESHOLD:
                patterns.append(RecursivePattern(
                    start_time=(start1 / total) * duration,
                    duration=(window / total) * duration,
                    repetition_scale=scale,
                    similarity=similarity * 100,
                ))
    return patterns


@register_analyzer("temporal_fractal", "1.0.0", default=TemporalFractal.neutral)
def analyze_temporal_fractal(buffer: SampleBuffer) -> TemporalFractal:
    """Box-counting dimension plus the patterns that repeat at coarser scales."""
    samples = buffer.primary_channel

    patterns = recursive_patterns(samples, buffer.duration)
    if patterns:
        self_similarity = sum(p.similarity for p in patterns) / len(patterns)
    else:
        self_similarity = 0.0

    return TemporalFractal(
        fractal_dimension=fractal_dimension(box_counts(samples)),
        self_similarity_score=float(min(self_similarity, 100.0)),
        recursive_patterns=tuple(patterns),
        infinite_zoom_points=tuple(
            p.start_time for p in patterns if p.similarity > ZOOM_THRESHOLD
        ),
    )
