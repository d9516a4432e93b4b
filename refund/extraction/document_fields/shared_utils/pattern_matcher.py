"""
Pattern Matcher - Position-aware regex search over document sections
"""
import re
import logging
from typing import Callable, Dict, List, Optional, Pattern, Sequence, Tuple, Union

from .config_manager import ExtractionConfig
from ..models.extraction_models import (
    DocumentSection, MatchResult,
    SECTION_CUSTOMER_INFO, SECTION_TOP, SECTION_MIDDLE, SECTION_ANY, SECTION_SIGNATURE, SECTION_DOCUMENT
)

logger = logging.getLogger(__name__)

PatternLike = Union[str, Pattern]


class PatternMatcher:
    """Greedy band search: the first non-empty capture in the highest band wins."""

    def __init__(self, config: Optional[ExtractionConfig] = None):
        self.config = config or ExtractionConfig()
        self.cache: Dict[Tuple[str, int], Pattern] = {}  # compiled patterns by (source, flags)

    def compile_pattern(self, pattern: PatternLike, flags: int = re.IGNORECASE) -> Pattern:
        """Compile and cache a pattern. Already compiled patterns pass through unchanged."""
        if not isinstance(pattern, str):
            return pattern
        cache_key = (pattern, flags)
        if cache_key not in self.cache:
            self.cache[cache_key] = re.compile(pattern, flags)
        return self.cache[cache_key]

    @staticmethod
    def first_capture(text: str, pattern: Pattern) -> Optional[str]:
        """Return group 1 of the first match, or None when absent or blank."""
        if not text or pattern.groups < 1:
            return None
        match = pattern.search(text)
        if match is None:
            return None
        captured = match.group(1)
        return captured if captured and captured.strip() else None

    def _bands(self) -> List[Tuple[str, Callable[[DocumentSection], bool], float, float]]:
        cfg = self.config
        return [
            (SECTION_CUSTOMER_INFO,
             lambda s: s.is_customer_info_section,
             cfg.customer_info_base_confidence, cfg.customer_info_decay),
            (SECTION_TOP,
             lambda s: s.end_percentage <= cfg.top_band_limit and not s.is_signature_section,
             cfg.top_base_confidence, cfg.top_decay),
            (SECTION_MIDDLE,
             lambda s: (s.start_percentage > cfg.middle_band_start
                        and s.end_percentage < cfg.middle_band_end
                        and not s.is_signature_section),
             cfg.middle_base_confidence, cfg.middle_decay),
            (SECTION_ANY,
             lambda s: not s.is_signature_section,
             cfg.any_section_base_confidence, cfg.any_section_decay),
            (SECTION_SIGNATURE,
             lambda s: s.is_signature_section,
             cfg.signature_base_confidence, cfg.signature_decay),
        ]

    def find_pattern_in_sections(self, sections: Sequence[DocumentSection],
                                 patterns: Sequence[PatternLike]) -> MatchResult:
        """
        Search sections band by band.

        Within a band sections are scanned in index order and, for each section,
        patterns in list order. Confidence is the band base minus decay times the
        pattern's index in the list. Bands never search exhaustively for a better
        match once one is found.
        """
        compiled = [self.compile_pattern(p) for p in patterns]

        for section_type, in_band, base, decay in self._bands():
            for index, section in enumerate(sections):
                if not in_band(section):
                    continue
                for pattern_index, pattern in enumerate(compiled):
                    captured = self.first_capture(section.content, pattern)
                    if captured is None:
                        continue
                    logger.debug(f"Band '{section_type}' matched {pattern.pattern!r} in section {index}")
                    return MatchResult(
                        position=section.midpoint,
                        match=captured,
                        confidence=base - decay * pattern_index,
                        section_type=section_type,
                        section_index=index,
                        source_text=section.content
                    )

        combined = '\n'.join(s.content for s in sections)
        for pattern_index, pattern in enumerate(compiled):
            captured = self.first_capture(combined, pattern)
            if captured is not None:
                logger.debug(f"Whole-document fallback matched {pattern.pattern!r}")
                return MatchResult(
                    position=self.config.document_fallback_position,
                    match=captured,
                    confidence=self.config.document_base_confidence - self.config.document_decay * pattern_index,
                    section_type=SECTION_DOCUMENT,
                    source_text=combined
                )

        return MatchResult()
