"""Shared fixtures: isolated in-memory registries and sample refund documents."""
from unittest.mock import Mock

import pytest

from refund.extraction.refund_document_extractor import RefundDocumentExtractor
from refund.extraction.document_fields.support_modules.section_divider import SectionDivider
from refund.learning.training_store import TrainingStore
from refund.learning.pattern_registry import PatternRegistry
from refund.learning.pattern_learner import PatternLearner


# 20 lines -> two lines per section
SCTTR_FORM_LINES = [
    "Form No: F-A-TMP-10-01.0.1",
    "REFUND AND FINAL SETTLEMENT FORM (SCTRR)",
    "CUSTOMER INFORMATION",
    "Name: MR. Mohammed Al Motaeri",
    "Mobile No: 556130748",
    "Service Number: FTTH00516134",
    "Subscription Valid Until:",
    "One time fees:",
    "Refund Amount: SAR 379.50",
    "IBAN Number: SA0380000000608010167519",
    "Refund Payment Method: Wire Transfer",
    "Bank: Al Rajhi Bank",
    "Customer paid for renew for old modem by mistake",
    "",
    "OFFICE USE ONLY",
    "Regional Sales Manager Name: Karim Abu Taha",
    "Back Office Manager: Adnan Mehaidi",
    "Sales Director Name: Esam Ereifej",
    "Technical Report:",
    "Recommendation:",
]

# No customer block; the only name sits in the office-use section
OFFICE_ONLY_LINES = [
    "REFUND REQUEST",
    "Reference: 2024/118",
    "Mobile No: 556130748",
    "Service Number: FTTH00516134",
    "Refund Amount: SAR 250.00",
    "IBAN: SA0380000000608010167519",
    "Payment Method: Wire Transfer",
] + [""] * 11 + [
    "OFFICE USE ONLY",
    "Regional Sales Manager Name: Karim Abu Taha",
]


def filler_document(lines_by_index, total_lines=10, filler="-----"):
    """Build a document of total_lines lines with the given lines placed by index."""
    lines = [filler] * total_lines
    for index, line in lines_by_index.items():
        lines[index] = line
    return "\n".join(lines)


@pytest.fixture(autouse=True)
def isolated_environment(monkeypatch):
    monkeypatch.delenv("REFUND_EXTRACTION_CONFIG", raising=False)
    monkeypatch.delenv("REFUND_TRAINING_STORE", raising=False)
    monkeypatch.delenv("TEXT_EXTRACTION_URL", raising=False)
    monkeypatch.delenv("REFUND_DOCUMENTS_DIR", raising=False)


@pytest.fixture
def store():
    return TrainingStore()


@pytest.fixture
def registry(store):
    return PatternRegistry(store)


@pytest.fixture
def learner(registry):
    return PatternLearner(registry)


@pytest.fixture
def text_client():
    return Mock()


@pytest.fixture
def extractor(registry, learner, text_client):
    return RefundDocumentExtractor(pattern_registry=registry, pattern_learner=learner, text_client=text_client)


@pytest.fixture
def divider():
    return SectionDivider()


@pytest.fixture
def scttr_text():
    return "\n".join(SCTTR_FORM_LINES)


@pytest.fixture
def scttr_sections(divider, scttr_text):
    return divider.divide_into_sections(scttr_text)


@pytest.fixture
def office_only_sections(divider):
    return divider.divide_into_sections("\n".join(OFFICE_ONLY_LINES))
