"""Tests for the dimensional rift detector."""

import numpy as np
import pytest

from sonicmind.analyzers.rift import analyze_dimensional_rift
from sonicmind.core.models import ALTERNATE_REALITIES, RIFT_TYPES


@pytest.fixture
def step_buffer(make_buffer):
    """Silent first half, full-scale second half, 1 s at 10 kHz."""
    return make_buffer(np.concatenate([np.zeros(5000), np.ones(5000)]), sample_rate=10000)


@pytest.fixture
def flicker_buffer(make_buffer):
    """Slices alternate between silence and full scale."""
    return make_buffer(np.repeat(np.tile([0.0, 1.0], 50), 100), sample_rate=10000)


class TestDimensionalRift:
    def test_silence_is_stable(self, silent_buffer):
        result = analyze_dimensional_rift(silent_buffer, np.random.default_rng(0))

        assert result.rift_points == ()
        assert result.parallel_timelines == 0
        assert result.dimensional_bleed == 0.0
        assert result.reality_stability == 100.0

    def test_step_and_checkpoints(self, step_buffer):
        result = analyze_dimensional_rift(step_buffer, np.random.default_rng(0))

        # the jump at slice 50, then loud checkpoints at slices 60 and 80
        assert [p.time for p in result.rift_points] == pytest.approx([0.5, 0.6, 0.8])
        assert [p.intensity for p in result.rift_points] == pytest.approx([100.0, 0.0, 0.0])
        assert result.parallel_timelines == 3
        assert result.reality_stability == 85.0
        assert result.dimensional_bleed == pytest.approx(100.0 / 3)

    def test_labels_from_fixed_sets(self, step_buffer):
        result = analyze_dimensional_rift(step_buffer, np.random.default_rng(5))
        for point in result.rift_points:
            assert point.rift_type in RIFT_TYPES
            assert point.alternate_reality in ALTERNATE_REALITIES

    def test_truncated_to_ten(self, flicker_buffer):
        result = analyze_dimensional_rift(flicker_buffer, np.random.default_rng(0))

        assert len(result.rift_points) == 10
        assert result.parallel_timelines == 7
        assert result.reality_stability == 0.0
        assert result.dimensional_bleed == pytest.approx(100.0)

    def test_same_seed_same_labels(self, flicker_buffer):
        a = analyze_dimensional_rift(flicker_buffer, np.random.default_rng(11))
        b = analyze_dimensional_rift(flicker_buffer, np.random.default_rng(11))
        assert a == b

    def test_bounds(self, any_buffer):
        result = analyze_dimensional_rift(any_buffer, np.random.default_rng(0))
        assert len(result.rift_points) <= 10
        assert 0 <= result.parallel_timelines <= 7
        assert 0.0 <= result.dimensional_bleed <= 100.0
        assert 0.0 <= result.reality_stability <= 100.0
