"""Tests for the quantum beat grid analyzer."""

import numpy as np
import pytest

from sonicmind.analyzers.quantum_beat import MAX_ONSETS, analyze_quantum_beat, detect_onsets


def step_signal(onset_seconds: float, seconds: float = 1.0, sample_rate: int = 1000):
    samples = np.zeros(int(seconds * sample_rate))
    samples[int(onset_seconds * sample_rate):] = 1.0
    return samples


class TestDetectOnsets:
    def test_single_step(self):
        onsets = detect_onsets(step_signal(0.25), 1000)
        assert onsets.tolist() == pytest.approx([0.25])

    def test_silence_has_no_onsets(self, silent_buffer):
        assert len(detect_onsets(silent_buffer.primary_channel, 44100)) == 0

    def test_buffer_shorter_than_a_frame(self):
        assert len(detect_onsets(np.ones(5), 1000)) == 0

    def test_first_frame_compares_against_silence(self):
        onsets = detect_onsets(np.ones(1000), 1000)
        assert onsets.tolist() == [0.0]

    def test_quiet_rise_is_ignored(self):
        samples = np.zeros(1000)
        samples[500:] = 0.5  # energy 0.25 < threshold
        assert len(detect_onsets(samples, 1000)) == 0


class TestQuantumBeatGrid:
    def test_on_grid_pulses(self, pulse_buffer):
        result = analyze_quantum_beat(pulse_buffer)

        assert len(result.micro_timings) == 8
        assert result.micro_timings == pytest.approx([0.0] * 8)
        assert result.groove_pattern == pytest.approx([0.5] * 8)
        assert result.swing_factor == 0.0
        assert result.syncopation_index == 0.0
        # seven unit steps averaged over eight onsets
        assert result.quantum_entanglement == pytest.approx(87.5)

    def test_polyrhythm_strides(self, pulse_buffer):
        layers = analyze_quantum_beat(pulse_buffer).polyrhythm_layers
        assert [len(layer) for layer in layers] == [2, 3, 2]

    def test_single_late_onset(self, make_buffer):
        result = analyze_quantum_beat(make_buffer(step_signal(0.25), sample_rate=1000))

        assert result.micro_timings == pytest.approx([250.0])
        assert result.syncopation_index == 100.0
        assert result.swing_factor == 0.0
        assert result.quantum_entanglement == 0.0

    def test_onsets_capped(self, make_buffer, make_pulse_train):
        buffer = make_buffer(make_pulse_train(0.1), sample_rate=8000)
        assert len(analyze_quantum_beat(buffer).micro_timings) == MAX_ONSETS

    def test_silence_is_empty(self, silent_buffer):
        result = analyze_quantum_beat(silent_buffer)
        assert result.micro_timings == ()
        assert result.polyrhythm_layers == ((), (), ())
        assert result.quantum_entanglement == 0.0

    def test_bounds(self, any_buffer):
        result = analyze_quantum_beat(any_buffer)
        for value in (result.swing_factor, result.syncopation_index, result.quantum_entanglement):
            assert 0.0 <= value <= 100.0
        assert all(0.0 <= g <= 1.0 for g in result.groove_pattern)
