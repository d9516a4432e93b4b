"""
Standardization Module - Post-extraction validation and formatting

Exports:
- FieldValidator: Validates and normalises the four refund fields
- FieldValidation: Per-field validation result
"""
from .field_validator import FieldValidator, FieldValidation, SAUDI_BANK_CODES

__all__ = [
    'FieldValidator',
    'FieldValidation',
    'SAUDI_BANK_CODES'
]
