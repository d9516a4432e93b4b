#!/usr/bin/env python3
"""
Refund Document Extractor - Main Orchestrator v1.0.0
Coordinates section division, the four field extractors, layout detection
and the correction feedback loop
"""
import uuid
import logging
from pathlib import Path
from datetime import datetime
from typing import Dict, Optional, Sequence, Tuple, Pattern

from .document_fields.field_extractors.name_extractor import NameExtractor
from .document_fields.field_extractors.amount_extractor import AmountExtractor
from .document_fields.field_extractors.iban_extractor import IBANExtractor
from .document_fields.field_extractors.service_number_extractor import ServiceNumberExtractor
from .document_fields.support_modules.section_divider import SectionDivider
from .document_fields.support_modules.layout_detector import LayoutDetector
from .document_fields.shared_utils.config_manager import ConfigManager, ExtractionConfig
from .document_fields.shared_utils.pattern_matcher import PatternMatcher
from .document_fields.shared_utils.confidence_scorer import ConfidenceScorer
from .document_fields.models.extraction_models import (
    DocumentSection, ExtractedData, FieldResult, FieldType
)
from ..learning.training_store import TrainingStore
from ..learning.pattern_registry import PatternRegistry
from ..learning.pattern_learner import PatternLearner, CorrectionRecord
from ..ingestion.text_extraction_client import TextExtractionClient, get_text_extraction_client

logger = logging.getLogger(__name__)

ERROR_VALUE = 'Error processing file'
ERROR_LAYOUT = 'Error'


class RefundDocumentExtractor:
    """
    Refund Document Extractor v1.0.0
    Main orchestrator. Extraction itself never writes to the registry; only
    corrections do, as a separate step.
    """

    def __init__(
        self,
        config_path: Optional[str] = None,
        config: Optional[ExtractionConfig] = None,
        pattern_registry: Optional[PatternRegistry] = None,
        pattern_learner: Optional[PatternLearner] = None,
        text_client: Optional[TextExtractionClient] = None
    ):
        """Initialize the extractor with all modular components."""
        # Shared utilities
        self.config_manager = ConfigManager(config_path, config)
        self.config = self.config_manager.config
        self.pattern_matcher = PatternMatcher(self.config)
        self.confidence_scorer = ConfidenceScorer(self.config)

        # Pattern registry and feedback loop
        if pattern_registry is None:
            pattern_registry = pattern_learner.registry if pattern_learner else PatternRegistry(TrainingStore.from_env())
        self.pattern_registry = pattern_registry
        self.pattern_learner = pattern_learner or PatternLearner(pattern_registry, self.config)

        # Field extractors
        components = (self.config_manager, self.pattern_matcher, self.confidence_scorer, self.pattern_registry)
        self.field_extractors = {
            FieldType.CUSTOMER_NAME: NameExtractor(*components),
            FieldType.REFUND_AMOUNT: AmountExtractor(*components),
            FieldType.IBAN_NUMBER: IBANExtractor(*components),
            FieldType.CUSTOMER_SERVICE_NUMBER: ServiceNumberExtractor(*components),
        }

        # Support modules
        self.section_divider = SectionDivider(self.config)
        self.layout_detector = LayoutDetector()
        self._text_client = text_client

        logger.info(f"✅ RefundDocumentExtractor initialized with {len(self.field_extractors)} field extractors")

    @property
    def text_client(self) -> TextExtractionClient:
        if self._text_client is None:
            self._text_client = get_text_extraction_client()
        return self._text_client

    # ------------------------------------------------------------------
    # Field-level entry points
    # ------------------------------------------------------------------

    def divide_into_sections(self, text: str, section_count: Optional[int] = None):
        return self.section_divider.divide_into_sections(text, section_count)

    def extract_customer_name(self, sections: Sequence[DocumentSection]) -> FieldResult:
        return self.field_extractors[FieldType.CUSTOMER_NAME].extract_customer_name(sections)

    def extract_refund_amount(self, sections: Sequence[DocumentSection]) -> FieldResult:
        return self.field_extractors[FieldType.REFUND_AMOUNT].extract_refund_amount(sections)

    def extract_iban(self, sections: Sequence[DocumentSection]) -> FieldResult:
        return self.field_extractors[FieldType.IBAN_NUMBER].extract_iban(sections)

    def extract_service_number(self, sections: Sequence[DocumentSection]) -> FieldResult:
        return self.field_extractors[FieldType.CUSTOMER_SERVICE_NUMBER].extract_service_number(sections)

    def get_patterns(self, field_type: str) -> Tuple[Pattern, ...]:
        return self.pattern_registry.get_patterns(field_type)

    def _extract_field(self, field_type: str, sections: Sequence[DocumentSection]) -> FieldResult:
        """Run one extractor; its failure downgrades only its own field."""
        extractor = self.field_extractors[field_type]
        try:
            return extractor.extract(sections)
        except Exception as e:
            logger.error(f"❌ {field_type} extraction failed: {e}", exc_info=True)
            return extractor.not_found()

    # ------------------------------------------------------------------
    # Document-level entry points
    # ------------------------------------------------------------------

    def process_document_text(self, text: str, file_name: str) -> ExtractedData:
        """Extract all four fields, classify the layout and apply the layout boost."""
        sections = self.section_divider.divide_into_sections(text)
        results: Dict[str, FieldResult] = {
            field_type: self._extract_field(field_type, sections) for field_type in FieldType.ALL
        }

        layout_match = self.layout_detector.detect_form_layout(
            results[FieldType.CUSTOMER_NAME].position,
            results[FieldType.REFUND_AMOUNT].position,
            results[FieldType.IBAN_NUMBER].position,
            results[FieldType.CUSTOMER_SERVICE_NUMBER].position
        )
        boosted = {
            field_type: self.confidence_scorer.apply_layout_boost(result, layout_match.confidence)
            for field_type, result in results.items()
        }

        customer_index = next((i for i, s in enumerate(sections) if s.is_customer_info_section), -1)
        signature_index = next((i for i, s in enumerate(sections) if s.is_signature_section), -1)

        data = ExtractedData(
            id=uuid.uuid4().hex,
            file_name=file_name,
            customer_name=boosted[FieldType.CUSTOMER_NAME],
            refund_amount=boosted[FieldType.REFUND_AMOUNT],
            iban_number=boosted[FieldType.IBAN_NUMBER],
            customer_service_number=boosted[FieldType.CUSTOMER_SERVICE_NUMBER],
            detected_layout=layout_match.layout,
            layout_confidence=layout_match.confidence,
            timestamp=datetime.now().isoformat(),
            metadata={
                'sectionCount': len(sections),
                'customerInfoSection': customer_index,
                'signatureSection': signature_index
            }
        )
        logger.info(f"✅ Processed {file_name}: layout '{data.detected_layout}' ({data.layout_confidence:.1f})")
        return data

    def process_document_file(self, file_path: str) -> ExtractedData:
        """Fetch text through the text-extraction service, then extract. Failures yield a placeholder."""
        file_name = Path(file_path).name
        try:
            text = self.text_client.extract_text(file_path)
        except (RuntimeError, TimeoutError, OSError, ValueError) as e:
            logger.error(f"❌ Could not read {file_name}: {e}")
            return self.error_result(file_name)
        return self.process_document_text(text, file_name)

    @staticmethod
    def error_result(file_name: str) -> ExtractedData:
        def failed(value: str) -> FieldResult:
            return FieldResult(value=value, confidence=0, position=-1)

        return ExtractedData(
            id=uuid.uuid4().hex,
            file_name=file_name,
            customer_name=failed(ERROR_VALUE),
            refund_amount=failed('0.00'),
            iban_number=failed('Unknown'),
            customer_service_number=failed('Unknown'),
            detected_layout=ERROR_LAYOUT,
            layout_confidence=0,
            timestamp=datetime.now().isoformat()
        )

    # ------------------------------------------------------------------
    # Corrections
    # ------------------------------------------------------------------

    def record_correction(self, field_type: str, original_value: str, corrected_value: str,
                          document_id: str, context: Optional[str] = None) -> CorrectionRecord:
        return self.pattern_learner.record_correction(
            field_type, original_value, corrected_value, document_id, context
        )

    def apply_correction(self, data: ExtractedData, field_type: str, corrected_value: str,
                         context: Optional[str] = None) -> ExtractedData:
        """Record the correction for learning, then overwrite the field in place."""
        original_value = data.get_field(field_type).value
        self.record_correction(field_type, original_value, corrected_value, data.id, context)
        data.apply_correction(field_type, corrected_value)
        return data


# Singleton instance
_refund_extractor_instance = None


def get_refund_extractor() -> RefundDocumentExtractor:
    """Get singleton RefundDocumentExtractor instance."""
    global _refund_extractor_instance
    if _refund_extractor_instance is None:
        _refund_extractor_instance = RefundDocumentExtractor()
    return _refund_extractor_instance
