"""
Layout Detector - Classifies a document against known form layouts using
the positions at which the four fields were found
"""
import logging
from typing import List, Optional, Sequence

from ..models.extraction_models import LayoutMatch, LayoutSection, LayoutTemplate

logger = logging.getLogger(__name__)


def _layout(name, description, name_at, amount_at, iban_at, service_at) -> LayoutTemplate:
    return LayoutTemplate(
        name=name,
        description=description,
        name_section=LayoutSection(*name_at),
        amount_section=LayoutSection(*amount_at),
        iban_section=LayoutSection(*iban_at),
        service_number_section=LayoutSection(*service_at),
    )


# Catalog order matters: ties keep the earlier template and index 0 is the default.
FORM_LAYOUTS: List[LayoutTemplate] = [
    _layout("Standard Layout",
            "Standard form with name at top, IBAN in middle, amount in upper-middle",
            (15, 15), (35, 15), (50, 20), (75, 20)),
    _layout("Compact Layout",
            "Compact form with all fields close together in upper portion",
            (15, 10), (25, 10), (35, 10), (45, 10)),
    _layout("Extended Layout",
            "Extended form with fields spread throughout document",
            (10, 10), (40, 20), (70, 20), (85, 15)),
    _layout("Reverse Layout",
            "Fields in reverse order with amount at bottom",
            (15, 15), (85, 15), (65, 15), (40, 15)),
    _layout("Treasury Form",
            "Standard Treasury form with customer info at top and signatures at bottom",
            (20, 10), (40, 15), (60, 20), (25, 10)),
    _layout("SCTTR Form",
            "Service Cancellation/Termination/Refund form with customer info at top section",
            (18, 8), (35, 12), (65, 15), (18, 8)),
    _layout("Tabular Layout",
            "Form with fields arranged in a table-like structure",
            (22, 12), (50, 18), (70, 20), (22, 12)),
    _layout("Custom Layout",
            "Custom layout detected from document patterns",
            (20, 30), (40, 30), (60, 30), (80, 30)),
]


def _field_score(actual: float, section: LayoutSection) -> float:
    deviation = abs(actual - section.expected_location) / section.tolerance
    return 25 * max(0.0, 1 - deviation)


def calculate_layout_match_score(name_position: float, amount_position: float,
                                 iban_position: float, service_number_position: float,
                                 layout: LayoutTemplate) -> float:
    """0-100 score, up to 25 points per field. Any missing field (-1) scores 0."""
    if min(name_position, amount_position, iban_position, service_number_position) < 0:
        return 0.0

    return (_field_score(name_position, layout.name_section)
            + _field_score(amount_position, layout.amount_section)
            + _field_score(iban_position, layout.iban_section)
            + _field_score(service_number_position, layout.service_number_section))


class LayoutDetector:
    """Picks the best matching template from a catalog."""

    def __init__(self, layouts: Optional[Sequence[LayoutTemplate]] = None):
        self.layouts = list(layouts) if layouts is not None else list(FORM_LAYOUTS)
        if not self.layouts:
            raise ValueError("Layout catalog must not be empty")

    def detect_form_layout(self, name_position: float, amount_position: float,
                           iban_position: float, service_number_position: float) -> LayoutMatch:
        best = self.layouts[0]
        best_score = 0.0

        for layout in self.layouts:
            score = calculate_layout_match_score(
                name_position, amount_position, iban_position, service_number_position, layout
            )
            if score > best_score:
                best, best_score = layout, score

        logger.debug(f"Detected layout '{best.name}' ({best_score:.1f})")
        return LayoutMatch(layout=best.name, confidence=best_score)

    def get_layout(self, name: str) -> LayoutTemplate:
        for layout in self.layouts:
            if layout.name == name:
                return layout
        raise KeyError(name)


def detect_form_layout(name_position: float, amount_position: float,
                       iban_position: float, service_number_position: float) -> LayoutMatch:
    return LayoutDetector().detect_form_layout(
        name_position, amount_position, iban_position, service_number_position
    )
