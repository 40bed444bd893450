"""Tests for the synaesthetic mapper."""

import numpy as np
import pytest

from sonicmind.analyzers.synaesthetic import SPATIAL_BANDS, analyze_synaesthesia, texture_profile
from sonicmind.core.models import FREQUENCY_BANDS, TEXTURE_PROFILES


class TestSynaestheticMap:
    def test_seven_fixed_bands(self, noise_buffer):
        result = analyze_synaesthesia(noise_buffer, np.random.default_rng(0))

        assert len(result.frequency_colors) == 7
        assert [c.color for c in result.frequency_colors] == [b[3] for b in FREQUENCY_BANDS]
        assert result.frequency_colors[0].freq == pytest.approx(40.0)
        assert result.synesthesia_type == "chromesthesia"

    def test_placeholder_intensities_in_range(self, noise_buffer):
        result = analyze_synaesthesia(noise_buffer, np.random.default_rng(1))
        assert all(0.3 <= c.intensity < 0.8 for c in result.frequency_colors)

    def test_spatial_position_from_bands(self, noise_buffer):
        result = analyze_synaesthesia(noise_buffer, np.random.default_rng(2))
        pos = result.spatial_position
        expected = [result.frequency_colors[i].intensity * 2 - 1 for i in SPATIAL_BANDS]
        assert [pos.x, pos.y, pos.z] == pytest.approx(expected)
        assert all(-1.0 <= v <= 1.0 for v in (pos.x, pos.y, pos.z))

    def test_same_seed_same_map(self, noise_buffer):
        a = analyze_synaesthesia(noise_buffer, np.random.default_rng(7))
        b = analyze_synaesthesia(noise_buffer, np.random.default_rng(7))
        assert a == b

    def test_different_seed_different_map(self, noise_buffer):
        a = analyze_synaesthesia(noise_buffer, np.random.default_rng(7))
        b = analyze_synaesthesia(noise_buffer, np.random.default_rng(8))
        assert a.frequency_colors != b.frequency_colors


class TestTextureProfile:
    def test_silence_is_first_profile(self, silent_buffer):
        assert texture_profile(silent_buffer.primary_channel) == TEXTURE_PROFILES[0]

    def test_always_a_known_label(self, any_buffer):
        assert texture_profile(any_buffer.primary_channel) in TEXTURE_PROFILES

    def test_roughness_selects_label(self):
        # |step| of 0.02 -> floor(0.02 * 6 * 10) = 1
        samples = np.arange(10001) * 0.02
        assert texture_profile(samples) == TEXTURE_PROFILES[1]
