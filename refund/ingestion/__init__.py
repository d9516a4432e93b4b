"""
Ingestion Module - Document text acquisition

Exports:
- TextExtractionClient: Client for the external text-extraction service
- TextExtractionError: Raised when the service fails
"""
from .text_extraction_client import TextExtractionClient, TextExtractionError, get_text_extraction_client

__all__ = [
    'TextExtractionClient',
    'TextExtractionError',
    'get_text_extraction_client'
]
