"""Shared fixtures for SonicMind tests."""

import numpy as np
import pytest

from sonicmind.core.models import SampleBuffer


# ---------------------------------------------------------------------------
# Buffer builders
# ---------------------------------------------------------------------------


def sine(frequency: float, seconds: float = 1.0, sample_rate: int = 44100, amplitude: float = 1.0):
    t = np.arange(int(seconds * sample_rate)) / sample_rate
    return amplitude * np.sin(2 * np.pi * frequency * t)


def pulse_train(period: float, seconds: float = 4.0, sample_rate: int = 8000, width: float = 0.05):
    """Unit-amplitude bursts of ``width`` seconds every ``period`` seconds."""
    t = np.arange(int(seconds * sample_rate)) / sample_rate
    return ((t % period) < width).astype(np.float64)


@pytest.fixture
def make_buffer():
    """Factory: ``make_buffer(samples, sample_rate=44100)`` -> SampleBuffer."""
    def _make(samples, sample_rate: int = 44100, **kwargs):
        return SampleBuffer.from_array(samples, sample_rate=sample_rate, **kwargs)
    return _make


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def sine_buffer():
    """1 s of 440 Hz at 44.1 kHz."""
    return SampleBuffer.from_array(sine(440.0), sample_rate=44100)


@pytest.fixture
def silent_buffer():
    """1 s of digital silence at 44.1 kHz."""
    return SampleBuffer.from_array(np.zeros(44100), sample_rate=44100)


@pytest.fixture
def noise_buffer():
    """2 s of seeded uniform noise in [-1, 1] at 22.05 kHz."""
    rng = np.random.default_rng(1234)
    return SampleBuffer.from_array(rng.uniform(-1.0, 1.0, 44100), sample_rate=22050)


@pytest.fixture
def pulse_buffer():
    """4 s pulse train with a 0.5 s period at 8 kHz."""
    return SampleBuffer.from_array(pulse_train(0.5), sample_rate=8000)


@pytest.fixture
def stereo_buffer():
    """Left channel 440 Hz, right channel silent."""
    left = sine(440.0, seconds=0.5)
    return SampleBuffer.from_array(np.vstack([left, np.zeros_like(left)]), sample_rate=44100)


@pytest.fixture
def empty_buffer():
    """Zero-length mono buffer."""
    return SampleBuffer.from_array(np.zeros(0), sample_rate=44100)


@pytest.fixture
def short_buffer():
    """Fewer samples than any chunk count."""
    return SampleBuffer.from_array(np.array([0.5, -0.5, 0.25]), sample_rate=44100)


@pytest.fixture(params=["sine", "silent", "noise", "pulse", "empty", "short"])
def any_buffer(request, sine_buffer, silent_buffer, noise_buffer, pulse_buffer, empty_buffer, short_buffer):
    """Each standard buffer in turn."""
    return {
        "sine": sine_buffer,
        "silent": silent_buffer,
        "noise": noise_buffer,
        "pulse": pulse_buffer,
        "empty": empty_buffer,
        "short": short_buffer,
    }[request.param]


@pytest.fixture
def make_sine():
    """Factory: ``make_sine(frequency, seconds=1.0, sample_rate=44100)`` -> ndarray."""
    return sine


@pytest.fixture
def make_pulse_train():
    """Factory: ``make_pulse_train(period, seconds=4.0, sample_rate=8000)`` -> ndarray."""
    return pulse_train


@pytest.fixture
def neutral_analysis():
    """IntelligentAnalysis built from every analyzer's neutral record (1 s duration)."""
    from sonicmind.core.analyzer_base import get_registered_analyzers
    from sonicmind.core.models import IntelligentAnalysis

    records = {
        name: spec.default(1.0) for name, spec in get_registered_analyzers().items()
    }
    return IntelligentAnalysis(**records, duration=1.0)
