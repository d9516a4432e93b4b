"""
Support Modules Package
"""
from .section_divider import SectionDivider, divide_into_sections
from .layout_detector import (
    FORM_LAYOUTS,
    LayoutDetector,
    calculate_layout_match_score,
    detect_form_layout
)

__all__ = [
    'SectionDivider',
    'divide_into_sections',
    'FORM_LAYOUTS',
    'LayoutDetector',
    'calculate_layout_match_score',
    'detect_form_layout'
]
