"""
Service Number Extractor - Extracts the FTTH customer service number
"""
import re
from typing import Sequence

from .base_extractor import FieldExtractor
from ..models.extraction_models import DocumentSection, FieldResult, FieldType, SECTION_CUSTOMER_INFO

BUILTIN_SERVICE_PATTERNS = (
    re.compile(r"customer information[\s\S]{0,100}(FTTH\d+)", re.IGNORECASE),
    re.compile(r"service\s*number\s*:\s*(FTTH\d+)", re.IGNORECASE),
    re.compile(r"customer\s*service\s*number\s*:\s*(FTTH\d+)", re.IGNORECASE),
    re.compile(r"customer\s*id\s*:\s*(FTTH\d+)", re.IGNORECASE),
    re.compile(r"reference\s*number\s*:\s*(FTTH\d+)", re.IGNORECASE),
    re.compile(r"reference\s*:\s*(FTTH\d+)", re.IGNORECASE),
    re.compile(r"(FTTH\d+)", re.IGNORECASE),
)

CANONICAL_SERVICE_NUMBER = re.compile(r'^FTTH\d{3,9}$')
FTTH_TOKEN = re.compile(r'(FTTH\d+)', re.IGNORECASE)


class ServiceNumberExtractor(FieldExtractor):
    """Extracts FTTH service numbers, preferring the customer information block."""

    field_type = FieldType.CUSTOMER_SERVICE_NUMBER
    not_found_value = 'Unknown'
    builtin_patterns = BUILTIN_SERVICE_PATTERNS

    def extract_service_number(self, sections: Sequence[DocumentSection]) -> FieldResult:
        cfg = self.config
        scorer = self.confidence_scorer

        result = self.pattern_matcher.find_pattern_in_sections(sections, self.get_patterns())
        if result.match is not None and result.match.strip():
            service_number = result.match.strip()
            confidence = result.confidence
            confidence += scorer.context_bonus(result.source_text, ('service', 'customer id'),
                                               cfg.service_context_bonus)
            confidence += scorer.format_bonus(service_number, CANONICAL_SERVICE_NUMBER, cfg.service_format_bonus)
            if result.section_type == SECTION_CUSTOMER_INFO:
                confidence += cfg.service_customer_info_bonus
            return self._result(service_number, confidence, result.position)

        section, service_number = self._fallback_in_sections(sections, FTTH_TOKEN)
        if section is not None:
            confidence = (cfg.service_fallback_customer_info_confidence if section.is_customer_info_section
                          else cfg.service_fallback_confidence)
            return self._result(service_number, confidence, section.midpoint)

        return self.not_found()

    extract = extract_service_number
