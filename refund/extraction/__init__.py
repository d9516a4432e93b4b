"""
Refund Extraction Module - Extract the four refund fields from document text

Handles:
- Positional section division and customer-info/signature tagging
- Band-ordered pattern search per field
- Form layout detection

Exports:
- RefundDocumentExtractor: Main orchestrator
- get_refund_extractor: Singleton accessor
"""

from . import document_fields
from .refund_document_extractor import RefundDocumentExtractor, get_refund_extractor

__all__ = [
    'document_fields',
    'RefundDocumentExtractor',
    'get_refund_extractor'
]
