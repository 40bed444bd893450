"""Tests for the crowd energy simulator."""

import numpy as np
import pytest

from sonicmind.analyzers.crowd import (
    CURVE_POINTS,
    analyze_crowd_energy,
    energy_curve,
    find_buildups,
    find_peaks,
)


@pytest.fixture
def rng():
    return np.random.default_rng(0)


class TestEnergyCurve:
    def test_fixed_length(self, any_buffer):
        assert len(energy_curve(any_buffer.primary_channel)) == CURVE_POINTS

    def test_normalized_to_loudest_chunk(self, noise_buffer):
        curve = energy_curve(noise_buffer.primary_channel)
        assert curve.max() == pytest.approx(100.0)
        assert curve.min() >= 0.0

    def test_silence_is_flat_zero(self, silent_buffer):
        assert not energy_curve(silent_buffer.primary_channel).any()


class TestFindPeaks:
    def test_isolated_peak(self):
        curve = np.zeros(200)
        curve[50] = 80.0
        assert find_peaks(curve) == [50]

    def test_peak_below_threshold(self):
        curve = np.zeros(200)
        curve[50] = 50.0
        assert find_peaks(curve) == []

    def test_plateau_is_not_a_peak(self):
        curve = np.zeros(200)
        curve[50:52] = 80.0
        assert find_peaks(curve) == []

    def test_edges_excluded(self):
        curve = np.zeros(200)
        curve[1] = 90.0
        curve[198] = 90.0
        assert find_peaks(curve) == []


class TestFindBuildups:
    def test_long_rise_recorded(self):
        curve = np.zeros(200)
        curve[10:20] = np.arange(31, 41)
        assert find_buildups(curve) == [(10, 20)]

    def test_short_rise_ignored(self):
        curve = np.zeros(200)
        curve[10:14] = np.arange(31, 35)
        assert find_buildups(curve) == []

    def test_rise_starting_low_ignored(self):
        curve = np.zeros(200)
        curve[10:20] = np.arange(1, 11)
        assert find_buildups(curve) == []

    def test_unfinished_rise_dropped(self):
        curve = np.linspace(31.0, 100.0, 200)
        assert find_buildups(curve) == []


class TestCrowdEnergy:
    def test_silence(self, silent_buffer, rng):
        result = analyze_crowd_energy(silent_buffer, rng)

        assert result.energy_curve == (0.0,) * 200
        assert result.peak_moments == ()
        assert result.buildup_zones == ()
        assert result.drop_impact == ()
        assert result.mosh_pit_probability == 0.0

    def test_response_delay_range(self, noise_buffer):
        for seed in range(20):
            delay = analyze_crowd_energy(noise_buffer, np.random.default_rng(seed)).crowd_response_delay
            assert 0.2 <= delay < 0.5

    def test_drop_after_silence(self, make_buffer, rng):
        samples = np.concatenate([np.zeros(10000), np.ones(10000)])
        result = analyze_crowd_energy(make_buffer(samples, sample_rate=10000), rng)
        # chunk 100 is the first loud one; duration is 2 s
        assert result.drop_impact == pytest.approx((1.0,))

    def test_peaks_raise_mosh_pit(self, make_buffer, rng):
        # 20 short loud bursts on a quiet bed
        samples = np.full(20000, 0.1)
        for start in range(500, 20000, 1000):
            samples[start:start + 100] = 1.0
        result = analyze_crowd_energy(make_buffer(samples, sample_rate=10000), rng)

        assert len(result.peak_moments) == 20
        assert 0.0 < result.mosh_pit_probability <= 100.0

    def test_bounds(self, any_buffer, rng):
        result = analyze_crowd_energy(any_buffer, rng)
        assert all(0.0 <= v <= 100.0 for v in result.energy_curve)
        assert 0.0 <= result.mosh_pit_probability <= 100.0
