"""
Suggestion generator.

Evaluates the rule table against a finished analysis. Output keeps rule
declaration order and is never re-sorted by confidence.
"""

import logging
from typing import Any, Dict, List, Optional, Sequence

from sonicmind.core.models import IntelligentAnalysis, RemixSuggestion
from sonicmind.suggestions.rules import RULES, SuggestionRule

MAX_SUGGESTIONS = 5


class SuggestionGenerator:
    """
    Stateless rule evaluator.

    Usage:
        generator = SuggestionGenerator()
        suggestions = generator.suggest(analysis)
    """

    def __init__(
        self,
        rules: Optional[Sequence[SuggestionRule]] = None,
        max_suggestions: int = MAX_SUGGESTIONS,
    ):
        """
        Args:
            rules: Ordered rule table (defaults to RULES)
            max_suggestions: Truncation limit applied after evaluation
        """
        if max_suggestions < 0:
            raise ValueError(f"max_suggestions must be >= 0, got {max_suggestions}")
        self.rules = list(RULES if rules is None else rules)
        self.max_suggestions = max_suggestions
        self.logger = logging.getLogger("suggestions")

    def suggest(self, analysis: IntelligentAnalysis) -> List[RemixSuggestion]:
        """First ``max_suggestions`` suggestions whose rule fires, in rule order."""
        fired = [rule.build() for rule in self.rules if rule.evaluate(analysis)]

        if len(fired) > self.max_suggestions:
            self.logger.debug(
                f"{len(fired)} rules fired, keeping first {self.max_suggestions}",
                extra={"dropped": [s.id for s in fired[self.max_suggestions:]]},
            )
        return fired[:self.max_suggestions]


def create_suggestion_generator(config: Optional[Dict[str, Any]] = None) -> SuggestionGenerator:
    """
    Factory function to create SuggestionGenerator with configuration.

    Args:
        config: Optional full configuration dict; reads its ``suggestions`` section
    """
    section = (config or {}).get("suggestions", {}) or {}
    return SuggestionGenerator(
        max_suggestions=section.get("max_suggestions", MAX_SUGGESTIONS),
    )
