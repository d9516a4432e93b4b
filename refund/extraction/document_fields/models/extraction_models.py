"""
Extraction Models - Data classes for sections, field results and layout matches
"""
from dataclasses import dataclass, field
from typing import Optional, Dict, Any, List


class FieldType:
    """Field type identifiers. Values are persisted, so they keep their wire spelling."""
    CUSTOMER_NAME = 'customerName'
    REFUND_AMOUNT = 'refundAmount'
    IBAN_NUMBER = 'ibanNumber'
    CUSTOMER_SERVICE_NUMBER = 'customerServiceNumber'

    ALL = (CUSTOMER_NAME, REFUND_AMOUNT, IBAN_NUMBER, CUSTOMER_SERVICE_NUMBER)

    @classmethod
    def validate(cls, field_type: str) -> str:
        if field_type not in cls.ALL:
            raise ValueError(f"Unknown field type: {field_type!r}")
        return field_type


# Section types reported by the band search
SECTION_CUSTOMER_INFO = 'customerInfo'
SECTION_TOP = 'top'
SECTION_MIDDLE = 'middle'
SECTION_ANY = 'none'
SECTION_SIGNATURE = 'signature'
SECTION_DOCUMENT = 'document'


@dataclass(frozen=True)
class DocumentSection:
    """A contiguous percentage slice of the document text."""
    start_percentage: float
    end_percentage: float
    content: str
    is_customer_info_section: bool = False
    is_signature_section: bool = False

    @property
    def midpoint(self) -> float:
        return (self.start_percentage + self.end_percentage) / 2

    def to_dict(self) -> Dict[str, Any]:
        return {
            'startPercentage': self.start_percentage,
            'endPercentage': self.end_percentage,
            'content': self.content,
            'isCustomerInfoSection': self.is_customer_info_section,
            'isSignatureSection': self.is_signature_section,
        }


@dataclass
class FieldResult:
    """Value, confidence (0-100) and position (section midpoint, -1 when not found)."""
    value: str
    confidence: float
    position: float

    @property
    def found(self) -> bool:
        return self.position >= 0

    def to_dict(self) -> Dict[str, Any]:
        return {'value': self.value, 'confidence': self.confidence, 'position': self.position}


@dataclass
class MatchResult:
    """Outcome of a band search."""
    position: float = -1
    match: Optional[str] = None
    confidence: float = 0
    section_type: Optional[str] = None
    section_index: Optional[int] = None
    source_text: Optional[str] = None


@dataclass(frozen=True)
class LayoutSection:
    expected_location: float
    tolerance: float


@dataclass(frozen=True)
class LayoutTemplate:
    """Reference profile of expected field positions for a known form."""
    name: str
    description: str
    name_section: LayoutSection
    amount_section: LayoutSection
    iban_section: LayoutSection
    service_number_section: LayoutSection

    def to_dict(self) -> Dict[str, Any]:
        def _section(s: LayoutSection) -> Dict[str, float]:
            return {'expectedLocation': s.expected_location, 'tolerance': s.tolerance}

        return {
            'name': self.name,
            'description': self.description,
            'nameSection': _section(self.name_section),
            'amountSection': _section(self.amount_section),
            'ibanSection': _section(self.iban_section),
            'serviceNumberSection': _section(self.service_number_section),
        }


@dataclass
class LayoutMatch:
    layout: str
    confidence: float


@dataclass
class ExtractedData:
    """Aggregate extraction result for one document."""
    id: str
    file_name: str
    customer_name: FieldResult
    refund_amount: FieldResult
    iban_number: FieldResult
    customer_service_number: FieldResult
    detected_layout: str
    layout_confidence: float
    timestamp: str
    metadata: Dict[str, Any] = field(default_factory=dict)

    _ATTRIBUTES = {
        FieldType.CUSTOMER_NAME: 'customer_name',
        FieldType.REFUND_AMOUNT: 'refund_amount',
        FieldType.IBAN_NUMBER: 'iban_number',
        FieldType.CUSTOMER_SERVICE_NUMBER: 'customer_service_number',
    }

    def get_field(self, field_type: str) -> FieldResult:
        return getattr(self, self._ATTRIBUTES[FieldType.validate(field_type)])

    def fields(self) -> List[FieldResult]:
        return [self.get_field(field_type) for field_type in FieldType.ALL]

    def apply_correction(self, field_type: str, value: str) -> FieldResult:
        """Replace a field value in place. Corrected values are fully trusted."""
        current = self.get_field(field_type)
        current.value = value
        current.confidence = 100
        return current

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'fileName': self.file_name,
            'customerName': self.customer_name.to_dict(),
            'refundAmount': self.refund_amount.to_dict(),
            'ibanNumber': self.iban_number.to_dict(),
            'customerServiceNumber': self.customer_service_number.to_dict(),
            'detectedLayout': self.detected_layout,
            'layoutConfidence': self.layout_confidence,
            'timestamp': self.timestamp,
            'metadata': self.metadata,
        }
