"""
Name Extractor - Extracts the customer name, distrusting office-use/signature areas
"""
import re
from typing import Optional, Sequence

from .base_extractor import FieldExtractor
from ..models.extraction_models import (
    DocumentSection, FieldResult, FieldType,
    SECTION_CUSTOMER_INFO, SECTION_TOP, SECTION_SIGNATURE
)
from ..support_modules.section_divider import SIGNATURE_KEYWORDS

# Horizontal characters only, so a capture never runs onto the next line
NAME_CHARS = r"[A-Za-z .'\-]+"

TITLE_PATTERN = re.compile(r"\b(MRS|MR|DR|MS)\s*\.\s*([A-Za-z][A-Za-z .'\-]*)", re.IGNORECASE)
NAME_SHAPE = re.compile(r'^[A-Z][a-z]+(\s[A-Z][a-z]+)+$')
COMPOUND_NAME_MARKER = re.compile(r'\b(Al|El)\b', re.IGNORECASE)
CAPITALIZED_RUN = re.compile(r'\b([A-Z][a-z]+(?:[ \t]+[A-Z][a-z]+)+)')

BUILTIN_NAME_PATTERNS = (
    re.compile(r"customer information[\s\S]{0,50}name\s*[:.\s]*(" + NAME_CHARS + ")", re.IGNORECASE),
    re.compile(r"MR\s*\.\s*(" + NAME_CHARS + ")", re.IGNORECASE),
    # Middle-Eastern compound names: "Mohammed Al Motaeri", "Omar El Sayed Hassan"
    re.compile(r"\b([A-Z][a-z]+ (?:Al|El) [A-Z][a-z]+(?: [A-Z][a-z]+)*)"),
    re.compile(r"customer[\s\S]{0,50}name\s*[:.\s]*(" + NAME_CHARS + ")", re.IGNORECASE),
    re.compile(r"customer\s*name\s*:\s*(" + NAME_CHARS + ")", re.IGNORECASE),
    re.compile(r"name\s*:\s*(" + NAME_CHARS + ")", re.IGNORECASE),
    re.compile(r"client\s*:\s*(" + NAME_CHARS + ")", re.IGNORECASE),
    re.compile(r"applicant\s*:\s*(" + NAME_CHARS + ")", re.IGNORECASE),
    re.compile(r"recipient\s*:\s*(" + NAME_CHARS + ")", re.IGNORECASE),
    re.compile(r"account\s*holder\s*:\s*(" + NAME_CHARS + ")", re.IGNORECASE),
)


class NameExtractor(FieldExtractor):
    """Extracts the customer name with title pre-checks and name-shape scoring."""

    field_type = FieldType.CUSTOMER_NAME
    not_found_value = 'Unknown'
    builtin_patterns = BUILTIN_NAME_PATTERNS

    @staticmethod
    def _title_name(section: DocumentSection) -> Optional[str]:
        match = TITLE_PATTERN.search(section.content)
        if match and match.group(2).strip():
            return match.group(2).strip()
        return None

    def extract_customer_name(self, sections: Sequence[DocumentSection]) -> FieldResult:
        cfg = self.config

        # 1. Title-prefixed name inside the customer information section
        for section in sections:
            if section.is_customer_info_section:
                name = self._title_name(section)
                if name:
                    return self._result(name, cfg.name_title_customer_info_confidence, section.midpoint)

        # 2. Title-prefixed name in the top of the document
        for section in sections:
            if section.end_percentage <= cfg.top_band_limit and not section.is_signature_section:
                name = self._title_name(section)
                if name:
                    return self._result(name, cfg.name_title_top_confidence, section.midpoint)

        # 3. Band search with name-specific adjustments
        result = self.pattern_matcher.find_pattern_in_sections(sections, self.get_patterns())
        if result.match is not None and result.match.strip():
            name = result.match.strip()
            confidence = result.confidence

            if result.section_type == SECTION_CUSTOMER_INFO:
                confidence += cfg.name_customer_info_bonus
            elif result.section_type == SECTION_TOP:
                confidence += cfg.name_top_bonus
            elif result.section_type == SECTION_SIGNATURE:
                confidence -= cfg.name_signature_penalty

            if 3 < len(name) < 50:
                confidence += cfg.name_length_bonus
            if NAME_SHAPE.match(name):
                confidence += cfg.name_shape_bonus
            if COMPOUND_NAME_MARKER.search(name):
                confidence += cfg.name_compound_bonus

            if result.section_type == SECTION_SIGNATURE:
                confidence = min(confidence, cfg.name_signature_cap)

            return self._result(name, confidence, result.position)

        # 4. Any capitalized word run outside the signature area
        section, name, after_office_header = self._capitalized_fallback(sections)
        if section is not None:
            if section.is_customer_info_section:
                confidence = cfg.name_fallback_customer_info_confidence
            elif section.end_percentage <= cfg.top_band_limit:
                confidence = cfg.name_fallback_top_confidence
            else:
                confidence = cfg.name_fallback_confidence
            if after_office_header:
                confidence = min(confidence - cfg.name_signature_penalty, cfg.name_signature_cap)
            return self._result(name, confidence, section.midpoint)

        return self.not_found()

    @staticmethod
    def _capitalized_fallback(sections: Sequence[DocumentSection]):
        """
        First capitalized run outside the tagged signature section.

        Office-use and signature lines never yield a name. An untagged one
        (short documents put it above 50%) still marks every later line as
        office-use text.
        """
        after_office_header = False
        for section in sections:
            if section.is_signature_section:
                continue
            for line in section.content.split('\n'):
                if any(keyword.search(line) for keyword in SIGNATURE_KEYWORDS):
                    after_office_header = True
                    continue
                match = CAPITALIZED_RUN.search(line)
                if match:
                    return section, match.group(1).strip(), after_office_header
        return None, None, False

    extract = extract_customer_name
