"""Tests for the consciousness sync analyzer."""

import numpy as np
import pytest

from sonicmind.analyzers.consciousness import (
    BINAURAL_OFFSETS,
    analyze_consciousness_sync,
    band_for_frequency,
    dominant_rhythm,
    flow_score,
)


class TestBands:
    @pytest.mark.parametrize("frequency, band", [
        (0.0, "delta"),
        (3.9, "delta"),
        (4.0, "theta"),
        (7.9, "theta"),
        (8.0, "alpha"),
        (12.9, "alpha"),
        (13.0, "beta"),
        (29.9, "beta"),
        (30.0, "gamma"),
    ])
    def test_thresholds(self, frequency, band):
        assert band_for_frequency(frequency) == band

    def test_binaural_offsets(self):
        assert BINAURAL_OFFSETS == {
            "delta": 1.5, "theta": 4.0, "alpha": 7.83, "beta": 10.0, "gamma": 40.0,
        }


class TestDominantRhythm:
    def test_half_second_envelope(self, pulse_buffer):
        rhythm, peak = dominant_rhythm(pulse_buffer.primary_channel, 8000)
        assert rhythm == pytest.approx(2.0)
        assert peak == pytest.approx(400.0, abs=1.0)

    def test_no_positive_correlation(self, silent_buffer):
        assert dominant_rhythm(silent_buffer.primary_channel, 44100) == (0.0, 0.0)

    def test_rate_too_low_for_any_period(self):
        assert dominant_rhythm(np.ones(100), 5.0) == (0.0, 0.0)


class TestFlowScore:
    def test_constant_signal(self):
        assert flow_score(np.zeros(20000)) == pytest.approx(99.99)

    def test_harsh_alternation_clamped(self):
        assert flow_score(np.tile([1.0, -1.0], 5000)) == 0.0

    def test_short_input(self):
        assert flow_score(np.array([0.5])) == 0.0


class TestConsciousnessSync:
    def test_envelope_band_follows_rhythm(self, pulse_buffer):
        result = analyze_consciousness_sync(pulse_buffer)

        assert 0.5 <= result.isochronic_pulse <= 10.0
        assert result.brainwave_target == band_for_frequency(result.isochronic_pulse)
        assert result.binaural_offset == BINAURAL_OFFSETS[result.brainwave_target]
        assert result.entrainment_strength == 100.0

    def test_faster_envelope_is_theta(self, make_buffer, make_pulse_train):
        buffer = make_buffer(make_pulse_train(0.2), sample_rate=8000)
        result = analyze_consciousness_sync(buffer)

        assert result.isochronic_pulse == pytest.approx(5.0)
        assert result.brainwave_target == "theta"
        assert result.meditation_depth == 80.0

    def test_silence_falls_back_to_delta(self, silent_buffer):
        result = analyze_consciousness_sync(silent_buffer)

        assert result.brainwave_target == "delta"
        assert result.isochronic_pulse == 0.0
        assert result.entrainment_strength == 0.0
        assert result.meditation_depth == 40.0
        assert result.flow_state_score == pytest.approx(99.99)

    def test_bounds(self, any_buffer):
        result = analyze_consciousness_sync(any_buffer)
        assert 0.0 <= result.entrainment_strength <= 100.0
        assert 0.0 <= result.flow_state_score <= 100.0
        assert result.meditation_depth in (40.0, 80.0)
