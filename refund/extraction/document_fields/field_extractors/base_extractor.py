"""
Base Field Extractor - Shared wiring for the four field extractors
"""
import logging
from typing import List, Optional, Pattern, Sequence

from ..shared_utils.config_manager import ConfigManager
from ..shared_utils.pattern_matcher import PatternMatcher
from ..shared_utils.confidence_scorer import ConfidenceScorer
from ..models.extraction_models import DocumentSection, FieldResult

logger = logging.getLogger(__name__)


class FieldExtractor:
    """
    Combines registry patterns (priority order) with the extractor's built-in
    fallback patterns and runs them through the band search.
    """

    field_type: str = ''
    not_found_value: str = 'Unknown'
    builtin_patterns: Sequence[Pattern] = ()

    def __init__(self, config_manager: ConfigManager, pattern_matcher: PatternMatcher,
                 confidence_scorer: ConfidenceScorer, pattern_registry=None):
        self.config_manager = config_manager
        self.config = config_manager.config
        self.pattern_matcher = pattern_matcher
        self.confidence_scorer = confidence_scorer
        self.pattern_registry = pattern_registry

    def get_patterns(self) -> List[Pattern]:
        """Trained patterns first, then built-ins."""
        trained = self.pattern_registry.get_patterns(self.field_type) if self.pattern_registry else ()
        return list(trained) + list(self.builtin_patterns)

    def not_found(self) -> FieldResult:
        return FieldResult(value=self.not_found_value, confidence=0, position=-1)

    def extract(self, sections: Sequence[DocumentSection]) -> FieldResult:
        raise NotImplementedError

    def _fallback_in_sections(self, sections: Sequence[DocumentSection], pattern: Pattern):
        """First (section, capture) for a bare shape regex, scanning sections in order."""
        for section in sections:
            captured = self.pattern_matcher.first_capture(section.content, pattern)
            if captured is not None:
                return section, captured
        return None, None

    def _result(self, value: str, confidence: float, position: float) -> FieldResult:
        result = FieldResult(value=value, confidence=self.confidence_scorer.clamp(confidence), position=position)
        logger.debug(f"{self.field_type}: {result.value!r} ({result.confidence:.0f}) at {result.position}")
        return result
