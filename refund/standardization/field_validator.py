#!/usr/bin/env python3
"""
Field Validator for Refund Extraction
Validates and normalises the four extracted fields before they are exported.

Each validator returns a FieldValidation:
1. is_valid - whether the value can be used as-is
2. formatted_value - the normalised value (or the cleaned input when invalid)
3. message - error text when invalid, warning text when valid but suspicious
"""

import re
from typing import Dict, Optional, Any
from dataclasses import dataclass

from ..extraction.document_fields.models.extraction_models import ExtractedData, FieldType

# =============================================================================
# REFERENCE DATA
# =============================================================================

SAUDI_BANK_CODES = {
    '10': 'The Saudi National Bank (SNB)',
    '15': 'Al Rajhi Bank',
    '20': 'Riyad Bank',
    '30': 'Saudi British Bank (SABB)',
    '40': 'Banque Saudi Fransi',
    '50': 'Arab National Bank',
    '60': 'Bank AlJazira',
}

LARGE_AMOUNT_THRESHOLD = 100000

_NAME_ALLOWED = re.compile(r"^[A-Za-z\u0600-\u06FF .'\-]+$")
_LEADING_NUMBER = re.compile(r'\d*\.?\d+')

# =============================================================================
# RESULT STRUCTURE
# =============================================================================

@dataclass
class FieldValidation:
    """Outcome of validating one field."""
    is_valid: bool
    formatted_value: str
    message: Optional[str] = None
    numeric_value: Optional[float] = None
    bank_name: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        result = {
            'value': self.formatted_value,
            'isValid': self.is_valid,
            'message': self.message
        }
        if self.numeric_value is not None:
            result['numericValue'] = self.numeric_value
        if self.bank_name is not None:
            result['bankName'] = self.bank_name
        return result

# =============================================================================
# VALIDATORS
# =============================================================================

class FieldValidator:
    """Validates IBANs, service numbers, amounts and customer names."""

    def validate_iban(self, iban: str) -> FieldValidation:
        clean = re.sub(r'\s', '', iban or '').upper()

        if not clean.startswith('SA'):
            return FieldValidation(False, clean, 'IBAN must start with SA (Saudi Arabia)')
        if len(clean) != 24:
            return FieldValidation(False, clean, 'Saudi IBAN must be 24 characters (SA + 22 digits)')
        if not re.match(r'^SA\d{22}$', clean):
            return FieldValidation(False, clean, 'IBAN format invalid - must be SA followed by 22 digits')

        bank_name = SAUDI_BANK_CODES.get(clean[4:6])
        formatted = ' '.join(clean[i:i + 4] for i in range(0, len(clean), 4))
        if bank_name is None:
            return FieldValidation(True, formatted, 'Bank code not recognised', bank_name='Unknown Bank')
        return FieldValidation(True, formatted, bank_name=bank_name)

    def validate_service_number(self, service_number: str) -> FieldValidation:
        clean = re.sub(r'\s', '', service_number or '').upper()

        if not clean.startswith('FTTH'):
            return FieldValidation(False, clean, 'Service number must start with FTTH')
        if not re.match(r'^FTTH\d+$', clean):
            return FieldValidation(False, clean, 'Service number must be FTTH followed by digits')
        if not 3 <= len(clean) - 4 <= 9:
            return FieldValidation(False, clean, 'Service number must have between 3 and 9 digits after FTTH')
        return FieldValidation(True, clean)

    def validate_amount(self, amount: str) -> FieldValidation:
        clean = re.sub(r'[^\d.,]', '', amount or '')

        if ',' in clean and '.' in clean:
            if clean.rfind('.') > clean.rfind(','):
                clean = clean.replace(',', '')                      # 1,234.56
            else:
                clean = clean.replace('.', '').replace(',', '.')    # 1.234,56
        elif ',' in clean:
            if len(clean) - clean.rfind(',') - 1 <= 2:
                clean = clean.replace(',', '.')                     # 12,50
            else:
                clean = clean.replace(',', '')                      # 1,234

        # leading number only: captures may keep a sentence-final dot ("379.50.")
        number = _LEADING_NUMBER.match(clean)
        if number is None:
            return FieldValidation(False, amount, 'Invalid numeric format', numeric_value=0.0)
        numeric = float(number.group())

        if numeric <= 0:
            return FieldValidation(False, amount, 'Amount must be greater than zero', numeric_value=numeric)

        message = 'Unusually large refund amount' if numeric > LARGE_AMOUNT_THRESHOLD else None
        return FieldValidation(True, f"{numeric:.2f}", message, numeric_value=numeric)

    def validate_customer_name(self, name: str) -> FieldValidation:
        clean = re.sub(r'\s+', ' ', (name or '').strip())

        if len(clean) < 2:
            return FieldValidation(False, clean, 'Name is too short')
        if not _NAME_ALLOWED.match(clean):
            return FieldValidation(False, clean, 'Name contains invalid characters')

        formatted = ' '.join(word[:1].upper() + word[1:].lower() for word in clean.split(' '))
        if ' ' not in clean:
            return FieldValidation(True, formatted, 'Name may be incomplete - no surname detected')
        return FieldValidation(True, formatted)

    def validate_extraction_data(self, data) -> Dict[str, Any]:
        """
        Validate all four fields.

        Accepts an ExtractedData or a mapping of field type to raw value.
        """
        if isinstance(data, ExtractedData):
            values = {field_type: data.get_field(field_type).value for field_type in FieldType.ALL}
        else:
            values = {field_type: str(data.get(field_type, '')) for field_type in FieldType.ALL}

        validated = {
            FieldType.CUSTOMER_NAME: self.validate_customer_name(values[FieldType.CUSTOMER_NAME]),
            FieldType.REFUND_AMOUNT: self.validate_amount(values[FieldType.REFUND_AMOUNT]),
            FieldType.IBAN_NUMBER: self.validate_iban(values[FieldType.IBAN_NUMBER]),
            FieldType.CUSTOMER_SERVICE_NUMBER: self.validate_service_number(values[FieldType.CUSTOMER_SERVICE_NUMBER]),
        }

        return {
            'isValid': all(v.is_valid for v in validated.values()),
            'validatedData': {field_type: v.to_dict() for field_type, v in validated.items()}
        }
