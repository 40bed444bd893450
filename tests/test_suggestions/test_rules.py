"""Tests for the individual suggestion rules."""

from dataclasses import replace

import pytest

from sonicmind.suggestions.rules import RULES

RULES_BY_ID = {rule.id: rule for rule in RULES}


def _with(analysis, record, **changes):
    return replace(analysis, **{record: replace(getattr(analysis, record), **changes)})


class TestRuleTable:
    def test_order(self):
        assert [rule.id for rule in RULES] == [
            "brighten", "energize", "fractal-break", "trance-inducer",
            "harmonic-heal", "stabilize", "polish",
        ]

    def test_suggestion_fields(self):
        energize = RULES_BY_ID["energize"].suggestion

        assert energize.name == "Crowd Igniter"
        assert energize.confidence == 0.9
        assert energize.impact == "dramatic"
        assert energize.parameters == {"dynamics": 70, "rhythm": 50}


class TestThresholds:
    @pytest.mark.parametrize("valence, fires", [(-0.01, True), (0.0, False)])
    def test_brighten(self, neutral_analysis, valence, fires):
        analysis = _with(neutral_analysis, "emotional_dna", valence=valence)
        assert RULES_BY_ID["brighten"].evaluate(analysis) is fires

    @pytest.mark.parametrize("probability, fires", [(49.9, True), (50.0, False)])
    def test_energize(self, neutral_analysis, probability, fires):
        analysis = _with(neutral_analysis, "crowd_energy", mosh_pit_probability=probability)
        assert RULES_BY_ID["energize"].evaluate(analysis) is fires

    @pytest.mark.parametrize("score, fires", [(70.0, False), (70.1, True)])
    def test_fractal_break(self, neutral_analysis, score, fires):
        analysis = _with(neutral_analysis, "temporal_fractal", self_similarity_score=score)
        assert RULES_BY_ID["fractal-break"].evaluate(analysis) is fires

    @pytest.mark.parametrize("band, fires", [("beta", True), ("alpha", False), ("gamma", False)])
    def test_trance_inducer(self, neutral_analysis, band, fires):
        analysis = _with(neutral_analysis, "consciousness_sync", brainwave_target=band)
        assert RULES_BY_ID["trance-inducer"].evaluate(analysis) is fires

    @pytest.mark.parametrize("score, fires", [(-162.5, True), (59.9, True), (60.0, False)])
    def test_harmonic_heal(self, neutral_analysis, score, fires):
        analysis = _with(neutral_analysis, "harmonic_signature", consonance_score=score)
        assert RULES_BY_ID["harmonic-heal"].evaluate(analysis) is fires

    @pytest.mark.parametrize("stability, fires", [(49.0, True), (50.0, False)])
    def test_stabilize(self, neutral_analysis, stability, fires):
        analysis = _with(neutral_analysis, "dimensional_rift", reality_stability=stability)
        assert RULES_BY_ID["stabilize"].evaluate(analysis) is fires

    @pytest.mark.parametrize("roughness, fires", [(70.0, False), (71.0, True)])
    def test_polish(self, neutral_analysis, roughness, fires):
        analysis = _with(neutral_analysis, "sonic_texture", roughness=roughness)
        assert RULES_BY_ID["polish"].evaluate(analysis) is fires


class TestBuild:
    def test_build_copies_parameters(self):
        rule = RULES_BY_ID["stabilize"]
        built = rule.build()

        assert built == rule.suggestion
        assert built.parameters is not rule.suggestion.parameters
