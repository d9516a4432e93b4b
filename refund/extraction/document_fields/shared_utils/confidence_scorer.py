"""
Confidence Scorer - Calculates confidence scores for extracted field values
"""
import re
from typing import Iterable, Pattern, Union

from .config_manager import ExtractionConfig
from ..models.extraction_models import FieldResult


class ConfidenceScorer:
    """Applies the 0-100 confidence arithmetic shared by all field extractors."""

    def __init__(self, config: ExtractionConfig):
        self.config = config

    @staticmethod
    def clamp(confidence: float) -> float:
        return max(0.0, min(100.0, float(confidence)))

    @staticmethod
    def context_bonus(text: str, keywords: Iterable[str], bonus: float) -> float:
        """Return bonus if any keyword occurs in text (case-insensitive)."""
        if not text:
            return 0
        lowered = text.lower()
        return bonus if any(keyword in lowered for keyword in keywords) else 0

    @staticmethod
    def format_bonus(value: str, pattern: Union[str, Pattern], bonus: float) -> float:
        """Return bonus if the whole value already has its canonical shape."""
        return bonus if re.search(pattern, value) else 0

    def apply_layout_boost(self, result: FieldResult, layout_confidence: float) -> FieldResult:
        """Reward internally consistent documents: +boost when the layout match is strong."""
        if layout_confidence > self.config.layout_boost_threshold:
            return FieldResult(
                value=result.value,
                confidence=min(result.confidence + self.config.layout_boost, 100),
                position=result.position
            )
        return result
