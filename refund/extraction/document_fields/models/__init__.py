"""
Models Package
"""
from .extraction_models import (
    FieldType,
    DocumentSection,
    FieldResult,
    MatchResult,
    LayoutSection,
    LayoutTemplate,
    LayoutMatch,
    ExtractedData
)

__all__ = [
    'FieldType',
    'DocumentSection',
    'FieldResult',
    'MatchResult',
    'LayoutSection',
    'LayoutTemplate',
    'LayoutMatch',
    'ExtractedData'
]
