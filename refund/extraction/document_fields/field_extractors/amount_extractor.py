"""
Amount Extractor - Extracts the refund amount
"""
import re
from typing import Sequence

from .base_extractor import FieldExtractor
from ..models.extraction_models import DocumentSection, FieldResult, FieldType

CURRENCY = r"(?:SAR|SR|ر.س.|﷼)"

BUILTIN_AMOUNT_PATTERNS = (
    re.compile(r"refund\s*amount\s*:\s*" + CURRENCY + r"?\s*([0-9,.]+)", re.IGNORECASE),
    re.compile(r"amount\s*:\s*" + CURRENCY + r"?\s*([0-9,.]+)", re.IGNORECASE),
    re.compile(r"total\s*:\s*" + CURRENCY + r"?\s*([0-9,.]+)", re.IGNORECASE),
    re.compile(r"payment\s*amount\s*:\s*" + CURRENCY + r"?\s*([0-9,.]+)", re.IGNORECASE),
    re.compile(CURRENCY + r"\s*([0-9,.]+)", re.IGNORECASE),
    re.compile(r"([0-9,.]+)\s*" + CURRENCY, re.IGNORECASE),
)

CANONICAL_AMOUNT = re.compile(r'^[0-9]+(\.[0-9]{2})?$')
BARE_NUMBER = re.compile(r'([0-9]+(\.[0-9]{2})?)')
MONEY_KEYWORDS = ('amount', 'payment', 'total', 'sum', 'sar', 'refund')


class AmountExtractor(FieldExtractor):
    """Extracts the refund amount as it appears in the document (no normalisation)."""

    field_type = FieldType.REFUND_AMOUNT
    not_found_value = '0.00'
    builtin_patterns = BUILTIN_AMOUNT_PATTERNS

    def extract_refund_amount(self, sections: Sequence[DocumentSection]) -> FieldResult:
        cfg = self.config
        scorer = self.confidence_scorer

        result = self.pattern_matcher.find_pattern_in_sections(sections, self.get_patterns())
        if result.match is not None and result.match.strip():
            amount = result.match.strip()
            confidence = result.confidence
            confidence += scorer.context_bonus(result.source_text, ('refund',), cfg.amount_refund_context_bonus)
            confidence += scorer.format_bonus(amount, CANONICAL_AMOUNT, cfg.amount_format_bonus)
            return self._result(amount, confidence, result.position)

        # Any bare number, trusted more next to money words
        section, amount = self._fallback_in_sections(sections, BARE_NUMBER)
        if section is not None:
            has_money_context = scorer.context_bonus(section.content, MONEY_KEYWORDS, 1) > 0
            confidence = (cfg.amount_fallback_keyword_confidence if has_money_context
                          else cfg.amount_fallback_confidence)
            return self._result(amount, confidence, section.midpoint)

        return self.not_found()

    extract = extract_refund_amount
