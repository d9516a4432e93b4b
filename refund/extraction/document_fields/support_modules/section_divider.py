"""
Section Divider - Splits document text into positional sections and tags
the customer-information and signature/office-use sections
"""
import re
import logging
from typing import List, Optional

from ..models.extraction_models import DocumentSection
from ..shared_utils.config_manager import ExtractionConfig

logger = logging.getLogger(__name__)


CUSTOMER_HEADER_PATTERNS = [
    re.compile(r'customer information', re.IGNORECASE),
    re.compile(r'customer details', re.IGNORECASE),
    re.compile(r'client details', re.IGNORECASE),
]

CUSTOMER_KEYWORDS = [
    re.compile(r'customer information', re.IGNORECASE),
    re.compile(r'customer info', re.IGNORECASE),
    re.compile(r'client information', re.IGNORECASE),
    re.compile(r'بيانات العميل'),
    re.compile(r'معلومات العميل'),
    re.compile(r'customer', re.IGNORECASE),
]

SIGNATURE_KEYWORDS = [
    re.compile(r'office use only', re.IGNORECASE),
    re.compile(r'signature', re.IGNORECASE),
    re.compile(r'sign', re.IGNORECASE),
    re.compile(r'للاستعمال الرسمي'),
    re.compile(r'توقيع'),
    re.compile(r'office', re.IGNORECASE),
    re.compile(r'Regional\s+Sales\s+Manager', re.IGNORECASE),
    re.compile(r'Back\s+Office\s+Manager', re.IGNORECASE),
    re.compile(r'Sales\s+Director', re.IGNORECASE),
    re.compile(r'Customer\s+Operation', re.IGNORECASE),
    re.compile(r'Customer\s+Signature', re.IGNORECASE),
    re.compile(r'Technical\s+Report', re.IGNORECASE),
]

_NAME_LABEL = re.compile(r'name\s*[:.\s]', re.IGNORECASE)
_CUSTOMER_FIELD_MARKERS = [
    re.compile(r'MR\s*\.', re.IGNORECASE),
    re.compile(r'phone', re.IGNORECASE),
    re.compile(r'FTTH', re.IGNORECASE),
]


def _has_any(text: str, patterns) -> bool:
    return any(p.search(text) for p in patterns)


def _looks_like_signature_block(text: str) -> bool:
    return bool(
        (re.search(r'Manager', text, re.IGNORECASE) and re.search(r'Name', text, re.IGNORECASE))
        or re.search(r'Director', text, re.IGNORECASE)
        or re.search(r'Signature:', text, re.IGNORECASE)
        or (re.search(r'Date:', text, re.IGNORECASE) and re.search(r'Sign', text, re.IGNORECASE))
    )


class SectionDivider:
    """Divides raw text into equal line-count sections covering 0-100% of the document."""

    def __init__(self, config: Optional[ExtractionConfig] = None):
        self.config = config or ExtractionConfig()

    def divide_into_sections(self, text: str, section_count: Optional[int] = None) -> List[DocumentSection]:
        """
        Section i covers lines [floor(i*L/n), floor((i+1)*L/n)) and percentages
        [i*100/n, (i+1)*100/n]. Exactly n sections are returned, some possibly empty.
        """
        if section_count is None:
            section_count = self.config.section_count
        if section_count < 1:
            raise ValueError(f"section_count must be at least 1, got {section_count}")

        lines = text.split('\n')
        total_lines = len(lines)

        bounds = []
        for i in range(section_count):
            start_line = (i * total_lines) // section_count
            end_line = ((i + 1) * total_lines) // section_count
            bounds.append((
                i * 100 / section_count,
                (i + 1) * 100 / section_count,
                '\n'.join(lines[start_line:end_line])
            ))

        customer_index = self.detect_customer_info_section(bounds)
        signature_index = self.detect_signature_section(bounds)
        logger.debug(f"Divided {total_lines} lines into {section_count} sections "
                     f"(customer info: {customer_index}, signature: {signature_index})")

        return [
            DocumentSection(
                start_percentage=start,
                end_percentage=end,
                content=content,
                is_customer_info_section=(i == customer_index),
                is_signature_section=(i == signature_index)
            )
            for i, (start, end, content) in enumerate(bounds)
        ]

    def detect_customer_info_section(self, bounds) -> int:
        """
        Index of the customer-info section among sections ending within the scan
        limit. Falls back to section 0 when nothing qualifies.
        """
        candidates = [(i, content) for i, (_, end, content) in enumerate(bounds)
                      if end <= self.config.customer_info_scan_limit]

        for i, content in candidates:
            if _has_any(content, CUSTOMER_HEADER_PATTERNS):
                return i
        for i, content in candidates:
            if _has_any(content, CUSTOMER_KEYWORDS):
                return i
        for i, content in candidates:
            if _NAME_LABEL.search(content) and _has_any(content, _CUSTOMER_FIELD_MARKERS):
                return i
        return 0

    def detect_signature_section(self, bounds) -> int:
        """Index of the first office-use/signature section in the lower half, or -1."""
        candidates = [(i, content) for i, (start, _, content) in enumerate(bounds)
                      if start >= self.config.signature_scan_start]

        for i, content in candidates:
            if _has_any(content, SIGNATURE_KEYWORDS):
                return i
        for i, content in candidates:
            if _looks_like_signature_block(content):
                return i
        return -1


def divide_into_sections(text: str, section_count: int = 10) -> List[DocumentSection]:
    """Module-level convenience wrapper using default configuration."""
    return SectionDivider().divide_into_sections(text, section_count)
