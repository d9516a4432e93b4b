"""End-to-end tests for the refund document orchestrator."""
import pytest
import requests

from refund.extraction.document_fields.models.extraction_models import ExtractedData, FieldType
from refund.extraction.refund_document_extractor import RefundDocumentExtractor, get_refund_extractor
from refund.ingestion.text_extraction_client import TextExtractionError
from refund.learning.training_store import CORRECTION_HISTORY
from conftest import filler_document, OFFICE_ONLY_LINES

STANDARD_FORM = filler_document({
    0: "Refund Request Form",
    1: "Customer Name: Omar Al Harbi",
    3: "Refund Amount: 500.00",
    4: "IBAN: SA0380000000608010167519",
    7: "Service Number: FTTH123456",
}, filler="-")


class TestProcessDocumentText:

    def test_scttr_form(self, extractor, scttr_text):
        data = extractor.process_document_text(scttr_text, "scttr.txt")

        assert data.file_name == "scttr.txt"
        assert data.customer_name.to_dict() == {'value': "Mohammed Al Motaeri", 'confidence': 98, 'position': 15}
        assert data.refund_amount.to_dict() == {'value': "379.50", 'confidence': 90, 'position': 45}
        assert data.iban_number.to_dict() == {'value': "SA0380000000608010167519", 'confidence': 80, 'position': 45}
        assert data.customer_service_number.to_dict() == {'value': "FTTH00516134", 'confidence': 100,
                                                          'position': 25}
        assert data.detected_layout == "Treasury Form"
        assert data.layout_confidence == pytest.approx(60.4167, abs=1e-3)
        assert data.metadata == {'sectionCount': 10, 'customerInfoSection': 1, 'signatureSection': 7}

    def test_office_use_name_gets_zero_confidence(self, extractor):
        data = extractor.process_document_text("\n".join(OFFICE_ONLY_LINES), "office.txt")

        assert data.customer_name.value == "Karim Abu Taha"
        assert data.customer_name.confidence == 0
        assert data.metadata['signatureSection'] == 9

    def test_strong_layout_match_boosts_every_field(self, extractor):
        data = extractor.process_document_text(STANDARD_FORM, "standard.txt")

        assert data.detected_layout == "Standard Layout"
        assert data.layout_confidence == pytest.approx(93.75)
        assert [f.confidence for f in data.fields()] == [100, 90, 95, 90]
        assert [f.position for f in data.fields()] == [15, 35, 45, 75]
        assert data.customer_name.value == "Omar Al Harbi"

    def test_empty_document(self, extractor):
        data = extractor.process_document_text("", "empty.txt")

        assert [f.value for f in data.fields()] == ["Unknown", "0.00", "Unknown", "Unknown"]
        assert all(f.confidence == 0 and f.position == -1 for f in data.fields())
        assert data.detected_layout == "Standard Layout"
        assert data.layout_confidence == 0

    def test_extraction_does_not_write_to_registry(self, extractor, store, scttr_text):
        before = {table: store.all(table) for table in ('trainingExamples', 'extractionPatterns')}
        extractor.process_document_text(scttr_text, "scttr.txt")

        assert {table: store.all(table) for table in before} == before

    def test_failing_extractor_only_affects_its_field(self, extractor, scttr_text, monkeypatch):
        def broken(sections):
            raise RuntimeError("boom")

        monkeypatch.setattr(extractor.field_extractors[FieldType.IBAN_NUMBER], 'extract', broken)
        data = extractor.process_document_text(scttr_text, "scttr.txt")

        assert data.iban_number.to_dict() == {'value': "Unknown", 'confidence': 0, 'position': -1}
        assert data.customer_name.value == "Mohammed Al Motaeri"
        assert data.refund_amount.value == "379.50"

    def test_ids_are_unique(self, extractor):
        assert extractor.process_document_text("x", "a").id != extractor.process_document_text("x", "a").id

    def test_to_dict_uses_wire_names(self, extractor, scttr_text):
        data = extractor.process_document_text(scttr_text, "scttr.txt").to_dict()

        assert set(data) == {'id', 'fileName', 'customerName', 'refundAmount', 'ibanNumber',
                             'customerServiceNumber', 'detectedLayout', 'layoutConfidence',
                             'timestamp', 'metadata'}


class TestProcessDocumentFile:

    def test_text_is_fetched_through_the_client(self, extractor, text_client, scttr_text):
        text_client.extract_text.return_value = scttr_text

        data = extractor.process_document_file("/uploads/refund_scan.pdf")

        text_client.extract_text.assert_called_once_with("/uploads/refund_scan.pdf")
        assert data.file_name == "refund_scan.pdf"
        assert data.customer_service_number.value == "FTTH00516134"

    @pytest.mark.parametrize("error", [
        TextExtractionError("service unavailable"),
        TimeoutError("took too long"),
        FileNotFoundError("missing"),
    ])
    def test_failures_yield_error_placeholder(self, extractor, text_client, error):
        text_client.extract_text.side_effect = error

        data = extractor.process_document_file("/uploads/refund_scan.pdf")

        assert data.file_name == "refund_scan.pdf"
        assert data.customer_name.value == "Error processing file"
        assert data.refund_amount.value == "0.00"
        assert data.iban_number.value == "Unknown"
        assert data.customer_service_number.value == "Unknown"
        assert data.detected_layout == "Error"
        assert all(f.confidence == 0 and f.position == -1 for f in data.fields())


class TestCorrections:

    def test_apply_correction_overwrites_and_records(self, extractor, store):
        data = extractor.process_document_text("\n".join(OFFICE_ONLY_LINES), "office.txt")

        corrected = extractor.apply_correction(data, FieldType.CUSTOMER_NAME, "Faisal Al Dosari")

        assert corrected is data
        assert data.customer_name.value == "Faisal Al Dosari"
        assert data.customer_name.confidence == 100
        history = extractor.pattern_learner.get_correction_history()
        assert history[0].original_value == "Karim Abu Taha"
        assert history[0].document_id == data.id
        assert store.count(CORRECTION_HISTORY) == 1

    def test_get_patterns_reads_registry(self, extractor):
        assert len(extractor.get_patterns(FieldType.CUSTOMER_NAME)) == 6
        with pytest.raises(ValueError):
            extractor.get_patterns("phoneNumber")


def test_error_result_is_extracted_data():
    assert isinstance(RefundDocumentExtractor.error_result("bad.pdf"), ExtractedData)


def test_singleton(monkeypatch):
    monkeypatch.setattr("refund.extraction.refund_document_extractor._refund_extractor_instance", None)

    assert get_refund_extractor() is get_refund_extractor()


def test_network_errors_are_wrapped_by_the_client(extractor, monkeypatch, tmp_path):
    document = tmp_path / "scan.pdf"
    document.write_bytes(b"%PDF-1.4")

    def refuse(*args, **kwargs):
        raise requests.ConnectionError("refused")

    monkeypatch.setattr("refund.ingestion.text_extraction_client.requests.post", refuse)
    extractor._text_client = None
    monkeypatch.setattr("refund.ingestion.text_extraction_client._text_client_instance", None)

    data = extractor.process_document_file(str(document))

    assert data.detected_layout == "Error"
