"""
Waveform display data.

Turns channel 0 of a SampleBuffer into the small arrays a display needs:
a fixed-size normalized overview and min/max envelopes for a time range.
Drawing is left to the caller.
"""

from dataclasses import dataclass
from typing import Optional, Tuple

import numpy as np

from sonicmind.core.models import SampleBuffer

OVERVIEW_POINTS = 200


@dataclass(frozen=True)
class WaveformData:
    """
    Immutable data container for waveform visualization.

    Holds channel 0 only, matching what the analyzers see.
    """

    audio_data: np.ndarray  # channel 0 samples
    sample_rate: float
    duration: float
    source: Optional[str] = None

    @classmethod
    def from_buffer(cls, buffer: SampleBuffer) -> "WaveformData":
        """
        Factory method to create WaveformData from a SampleBuffer.

        Args:
            buffer: Decoded audio

        Returns:
            WaveformData instance
        """
        return cls(
            audio_data=buffer.channel_data[0],
            sample_rate=buffer.sample_rate,
            duration=buffer.duration,
            source=buffer.source,
        )

    def overview(self, points: int = OVERVIEW_POINTS) -> np.ndarray:
        """
        Mean absolute amplitude per block, scaled so the loudest block is 1.

        Trailing samples that don't fill a block are ignored. Silent or too
        short audio gives all zeros.
        """
        block_size = len(self.audio_data) // points
        if block_size == 0:
            return np.zeros(points)

        blocks = np.abs(self.audio_data[:points * block_size].astype(np.float64))
        levels = blocks.reshape(points, block_size).mean(axis=1)

        peak = levels.max()
        if peak <= 0:
            return np.zeros(points)
        return levels / peak

    def get_samples_in_range(self, start_time: float, end_time: float) -> np.ndarray:
        """
        Get audio samples within a time range.

        Args:
            start_time: Start time in seconds
            end_time: End time in seconds

        Returns:
            Numpy array of samples in the range
        """
        start_sample = int(start_time * self.sample_rate)
        end_sample = int(end_time * self.sample_rate)

        # Clamp to valid range
        start_sample = max(0, start_sample)
        end_sample = min(len(self.audio_data), end_sample)

        return self.audio_data[start_sample:end_sample]

    def downsample_for_display(
        self,
        start_time: float,
        end_time: float,
        num_points: int
    ) -> Tuple[np.ndarray, np.ndarray]:
        """
        Downsample audio for efficient display, computing min/max per bucket.

        Args:
            start_time: Start time in seconds
            end_time: End time in seconds
            num_points: Number of display points (typically canvas width)

        Returns:
            Tuple of (min_values, max_values) arrays for envelope display
        """
        samples = self.get_samples_in_range(start_time, end_time)
        mins = np.zeros(num_points)
        maxs = np.zeros(num_points)

        if len(samples) == 0:
            return mins, maxs

        if len(samples) <= num_points:
            # No downsampling needed, pad with zeros
            mins[:len(samples)] = samples
            maxs[:len(samples)] = samples
            return mins, maxs

        edges = (np.arange(num_points + 1) * (len(samples) / num_points)).astype(int)
        for i in range(num_points):
            bucket = samples[edges[i]:edges[i + 1]]
            if len(bucket):
                mins[i] = bucket.min()
                maxs[i] = bucket.max()

        return mins, maxs

    def position_ratio(self, current_time: float) -> float:
        """Playhead position as a 0-1 fraction of the duration."""
        if self.duration <= 0:
            return 0.0
        return float(min(max(current_time / self.duration, 0.0), 1.0))
