"""
Quantum beat grid analyzer.

Detects energy onsets in 10 ms frames and measures how far each lands
from an idealised 120 BPM grid.
"""

import numpy as np

from sonicmind.analyzers.common import safe_divide
from sonicmind.core.analyzer_base import register_analyzer
from sonicmind.core.models import QuantumBeatGrid, SampleBuffer

FRAME_SECONDS = 0.01
ONSET_THRESHOLD = 0.3
MAX_ONSETS = 32
BEAT_INTERVAL = 0.5  # seconds per beat at 120 BPM
POLYRHYTHM_STRIDES = (4, 3, 5)


def detect_onsets(samples: np.ndarray, sample_rate: float) -> np.ndarray:
    """
    Onset times (seconds) where mean-square frame energy jumps by more than
    ONSET_THRESHOLD over the previous frame. The first frame compares
    against silence.
    """
    frame_size = int(np.floor(sample_rate * FRAME_SECONDS))
    if frame_size <= 0:
        return np.zeros(0)

    # frames start at 0, frame_size, ... while start < len - frame_size
    num_frames = max(0, -(-(len(samples) - frame_size) // frame_size))
    if num_frames == 0:
        return np.zeros(0)

    frames = samples[:num_frames * frame_size].reshape(num_frames, frame_size)
    energy = np.mean(frames ** 2, axis=1)
    previous = np.concatenate(([0.0], energy[:-1]))

    onset_frames = np.nonzero(energy - previous > ONSET_THRESHOLD)[0]
    return onset_frames * frame_size / sample_rate


@register_analyzer(
    "quantum_beat_grid", "1.0.0", default=QuantumBeatGrid.neutral
)
def analyze_quantum_beat(buffer: SampleBuffer) -> QuantumBeatGrid:
    """Micro-timing of each onset against a 120 BPM grid, in milliseconds."""
    onsets = detect_onsets(buffer.primary_channel, buffer.sample_rate)[:MAX_ONSETS]

    expected = np.arange(len(onsets)) * BEAT_INTERVAL
    timings = (onsets - expected) * 1000.0

    groove = np.sin(timings * 0.1) * 0.5 + 0.5

    even, odd = timings[0::2], timings[1::2]
    if len(even) and len(odd):
        swing = abs(odd.mean() - even.mean())
    else:
        swing = 0.0

    syncopation = float(safe_divide(np.abs(timings).sum(), len(timings)))

    if len(timings) > 1:
        entanglement = np.sum(1.0 - np.abs(np.diff(timings)) / 100.0)
    else:
        entanglement = 0.0
    entanglement = float(safe_divide(entanglement, len(timings))) * 100

    return QuantumBeatGrid(
        micro_timings=tuple(float(t) for t in timings),
        groove_pattern=tuple(float(g) for g in groove),
        swing_factor=float(min(swing * 10, 100.0)),
        syncopation_index=float(min(syncopation, 100.0)),
        polyrhythm_layers=tuple(
            tuple(float(t) for t in timings[::stride]) for stride in POLYRHYTHM_STRIDES
        ),
        quantum_entanglement=float(np.clip(entanglement, 0.0, 100.0)),
    )
