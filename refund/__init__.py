"""
Refund Document Extraction - Field extraction for refund request documents

Organized into 5 functional components:

📂 extraction/ - Positional extraction core
   ├─ RefundDocumentExtractor: Main orchestrator
   └─ document_fields/: section divider, band search, field extractors, layout detector

📂 learning/ - Pattern registry and correction feedback
   ├─ PatternRegistry: Priority-ordered patterns per field type
   └─ PatternLearner: Corrections, learned patterns, insights

📂 standardization/ - Field validation
   └─ FieldValidator: IBAN, service number, amount and name checks

📂 ingestion/ - Document text acquisition
   └─ TextExtractionClient: External text-extraction service client

📂 api/ - FastAPI service

QUICK START:
    from refund import get_refund_extractor

    extractor = get_refund_extractor()
    data = extractor.process_document_text(text, "refund_form.docx")
    print(data.customer_name.value, data.customer_name.confidence)
"""

# extraction first: learning imports its models
from .extraction import RefundDocumentExtractor, get_refund_extractor
from .learning import PatternRegistry, PatternLearner, TrainingStore
from .standardization import FieldValidator
from .ingestion import TextExtractionClient, TextExtractionError

__version__ = "1.0.0"

__all__ = [
    'RefundDocumentExtractor',
    'get_refund_extractor',
    'PatternRegistry',
    'PatternLearner',
    'TrainingStore',
    'FieldValidator',
    'TextExtractionClient',
    'TextExtractionError'
]
