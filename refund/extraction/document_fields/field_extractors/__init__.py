"""
Field Extractors Package
"""
from .base_extractor import FieldExtractor
from .name_extractor import NameExtractor
from .amount_extractor import AmountExtractor
from .iban_extractor import IBANExtractor
from .service_number_extractor import ServiceNumberExtractor

__all__ = [
    'FieldExtractor',
    'NameExtractor',
    'AmountExtractor',
    'IBANExtractor',
    'ServiceNumberExtractor'
]
