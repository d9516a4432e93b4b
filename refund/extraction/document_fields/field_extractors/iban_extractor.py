"""
IBAN Extractor - Extracts the Saudi IBAN the refund is paid to
"""
import re
from typing import Sequence

from .base_extractor import FieldExtractor
from ..models.extraction_models import DocumentSection, FieldResult, FieldType

BUILTIN_IBAN_PATTERNS = (
    re.compile(r"iban\s*:\s*(SA\d{22})", re.IGNORECASE),
    re.compile(r"iban\s*number\s*:\s*(SA\d{22})", re.IGNORECASE),
    re.compile(r"bank\s*account\s*:\s*(SA\d{22})", re.IGNORECASE),
    re.compile(r"account\s*number\s*:\s*(SA\d{22})", re.IGNORECASE),
    re.compile(r"(SA\d{22})", re.IGNORECASE),
)

SAUDI_IBAN = re.compile(r'^SA\d{22}$')
IBAN_LIKE = re.compile(r'(SA\d{10,})', re.IGNORECASE)


class IBANExtractor(FieldExtractor):
    """Extracts IBANs; only SA + 22 digits earns the format bonus."""

    field_type = FieldType.IBAN_NUMBER
    not_found_value = 'Unknown'
    builtin_patterns = BUILTIN_IBAN_PATTERNS

    def extract_iban(self, sections: Sequence[DocumentSection]) -> FieldResult:
        cfg = self.config
        scorer = self.confidence_scorer

        result = self.pattern_matcher.find_pattern_in_sections(sections, self.get_patterns())
        if result.match is not None and result.match.strip():
            iban = result.match.strip()
            confidence = result.confidence
            confidence += scorer.context_bonus(result.source_text, ('iban', 'bank'), cfg.iban_context_bonus)
            confidence += scorer.format_bonus(iban, SAUDI_IBAN, cfg.iban_format_bonus)
            return self._result(iban, confidence, result.position)

        section, iban = self._fallback_in_sections(sections, IBAN_LIKE)
        if section is not None:
            return self._result(iban, cfg.iban_fallback_confidence, section.midpoint)

        return self.not_found()

    extract = extract_iban
