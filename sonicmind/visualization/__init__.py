"""Visualization data for audio analysis."""

from sonicmind.visualization.waveform import OVERVIEW_POINTS, WaveformData

__all__ = [
    "OVERVIEW_POINTS",
    "WaveformData",
]
