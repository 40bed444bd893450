"""
Remix suggestion rule table.

Each rule pairs a predicate over an IntelligentAnalysis with the
suggestion it produces. Rules are independent; RULES order is the order
suggestions are reported in.
"""

from dataclasses import dataclass, replace
from typing import Callable, List

from sonicmind.core.models import IntelligentAnalysis, RemixSuggestion


@dataclass(frozen=True)
class SuggestionRule:
    """A (predicate, suggestion) pair."""

    predicate: Callable[[IntelligentAnalysis], bool]
    suggestion: RemixSuggestion

    @property
    def id(self) -> str:
        return self.suggestion.id

    def evaluate(self, analysis: IntelligentAnalysis) -> bool:
        return bool(self.predicate(analysis))

    def build(self) -> RemixSuggestion:
        """Fresh copy, so callers can edit parameters without touching the table."""
        return replace(self.suggestion, parameters=dict(self.suggestion.parameters))


RULES: List[SuggestionRule] = [
    SuggestionRule(
        predicate=lambda a: a.emotional_dna.valence < 0,
        suggestion=RemixSuggestion(
            id="brighten",
            name="Emotional Brightening",
            description="Increase high frequencies and add subtle pitch shift to lift the mood",
            confidence=0.85,
            impact="moderate",
            parameters={"pitch": 20, "spectral": 40},
            reasoning="Low valence detected - brightening will create more positive emotional response",
        ),
    ),
    SuggestionRule(
        predicate=lambda a: a.crowd_energy.mosh_pit_probability < 50,
        suggestion=RemixSuggestion(
            id="energize",
            name="Crowd Igniter",
            description="Add rhythmic intensity and compress dynamics for maximum energy",
            confidence=0.9,
            impact="dramatic",
            parameters={"dynamics": 70, "rhythm": 50},
            reasoning="Energy simulation suggests crowd needs more intensity to reach peak response",
        ),
    ),
    SuggestionRule(
        predicate=lambda a: a.temporal_fractal.self_similarity_score > 70,
        suggestion=RemixSuggestion(
            id="fractal-break",
            name="Pattern Disruption",
            description="Break repetitive patterns at key moments for unexpected drops",
            confidence=0.75,
            impact="reality-bending",
            parameters={"time": 60, "rhythm": 80},
            reasoning="High self-similarity detected - strategic pattern breaks will create memorable moments",
        ),
    ),
    SuggestionRule(
        predicate=lambda a: a.consciousness_sync.brainwave_target == "beta",
        suggestion=RemixSuggestion(
            id="trance-inducer",
            name="Hypnotic State",
            description="Slow down rhythmic elements to induce alpha/theta states",
            confidence=0.8,
            impact="subtle",
            parameters={"rhythm": 30, "phase": 40},
            reasoning="Current rhythm promotes alertness - adjusting for deeper consciousness engagement",
        ),
    ),
    SuggestionRule(
        predicate=lambda a: a.harmonic_signature.consonance_score < 60,
        suggestion=RemixSuggestion(
            id="harmonic-heal",
            name="Harmonic Resolution",
            description="Smooth dissonant frequencies for more pleasing harmonic relationships",
            confidence=0.85,
            impact="moderate",
            parameters={"spectral": 50, "pitch": 25},
            reasoning="Detected dissonance that may cause listener fatigue - resolving for better flow",
        ),
    ),
    SuggestionRule(
        predicate=lambda a: a.dimensional_rift.reality_stability < 50,
        suggestion=RemixSuggestion(
            id="stabilize",
            name="Reality Anchor",
            description="Reduce chaotic elements to create stable foundation",
            confidence=0.7,
            impact="dramatic",
            parameters={"phase": 20, "time": 10, "rhythm": 20},
            reasoning="Multiple dimensional rifts detected - stabilizing for coherent listening experience",
        ),
    ),
    SuggestionRule(
        predicate=lambda a: a.sonic_texture.roughness > 70,
        suggestion=RemixSuggestion(
            id="polish",
            name="Sonic Polish",
            description="Smooth harsh frequencies while maintaining energy",
            confidence=0.8,
            impact="subtle",
            parameters={"spectral": 30, "dynamics": 40},
            reasoning="Rough texture detected - polishing will improve long-term listenability",
        ),
    ),
]
