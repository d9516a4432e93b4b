"""Tests for field validation and normalisation."""
import pytest

from refund.extraction.document_fields.models.extraction_models import FieldType
from refund.standardization.field_validator import FieldValidator


@pytest.fixture
def validator():
    return FieldValidator()


class TestIBAN:

    def test_known_bank(self, validator):
        result = validator.validate_iban("sa44 1500 0000 6080 1016 7519")

        assert result.is_valid
        assert result.formatted_value == "SA44 1500 0000 6080 1016 7519"
        assert result.bank_name == "Al Rajhi Bank"
        assert result.message is None

    def test_unknown_bank_code_is_still_valid(self, validator):
        result = validator.validate_iban("SA0380000000608010167519")

        assert result.is_valid
        assert result.bank_name == "Unknown Bank"
        assert result.message == "Bank code not recognised"

    @pytest.mark.parametrize("iban", ["GB29NWBK60161331926819", "SA123", "SA12345678901234567890AB", ""])
    def test_invalid(self, validator, iban):
        assert not validator.validate_iban(iban).is_valid


class TestServiceNumber:

    def test_normalised(self, validator):
        result = validator.validate_service_number("ftth 00516134")

        assert result.is_valid
        assert result.formatted_value == "FTTH00516134"

    @pytest.mark.parametrize("value", ["FTTH12", "FTTH1234567890", "ABC123", "FTTH12A4", "Unknown"])
    def test_invalid(self, validator, value):
        assert not validator.validate_service_number(value).is_valid


class TestAmount:

    @pytest.mark.parametrize("raw, formatted, numeric", [
        ("SAR 1,250.00", "1250.00", 1250.0),
        ("1.234,56", "1234.56", 1234.56),
        ("12,50", "12.50", 12.5),
        ("1,234", "1234.00", 1234.0),
        ("379.50", "379.50", 379.5),
    ])
    def test_separators(self, validator, raw, formatted, numeric):
        result = validator.validate_amount(raw)

        assert result.is_valid
        assert result.formatted_value == formatted
        assert result.numeric_value == pytest.approx(numeric)

    def test_sentence_final_dot_is_ignored(self, validator):
        result = validator.validate_amount("379.50.")

        assert result.is_valid
        assert result.formatted_value == "379.50"
        assert result.numeric_value == pytest.approx(379.5)

    def test_not_a_number(self, validator):
        result = validator.validate_amount("abc")

        assert not result.is_valid
        assert result.formatted_value == "abc"
        assert result.numeric_value == 0.0

    def test_zero_is_invalid(self, validator):
        assert not validator.validate_amount("0.00").is_valid

    def test_large_amount_warns(self, validator):
        result = validator.validate_amount("150000")

        assert result.is_valid
        assert result.message == "Unusually large refund amount"


class TestCustomerName:

    def test_title_cased(self, validator):
        result = validator.validate_customer_name("  mohammed   al motaeri ")

        assert result.is_valid
        assert result.formatted_value == "Mohammed Al Motaeri"
        assert result.message is None

    def test_single_word_warns(self, validator):
        result = validator.validate_customer_name("Ali")

        assert result.is_valid
        assert "no surname" in result.message

    @pytest.mark.parametrize("name", ["A", "", "John123", "Error processing file!"])
    def test_invalid(self, validator, name):
        assert not validator.validate_customer_name(name).is_valid


class TestExtractionData:

    def test_extracted_document_is_valid(self, validator, extractor, scttr_text):
        data = extractor.process_document_text(scttr_text, "scttr.txt")

        report = validator.validate_extraction_data(data)

        assert report['isValid']
        assert report['validatedData'][FieldType.REFUND_AMOUNT] == {
            'value': "379.50", 'isValid': True, 'message': None, 'numericValue': 379.5
        }
        assert report['validatedData'][FieldType.IBAN_NUMBER]['bankName'] == "Unknown Bank"

    def test_amount_ending_a_sentence(self, validator, extractor):
        data = extractor.process_document_text("Refund Amount: SAR 379.50.", "sentence.txt")

        report = validator.validate_extraction_data(data)

        assert data.refund_amount.value == "379.50."
        assert report['validatedData'][FieldType.REFUND_AMOUNT] == {
            'value': "379.50", 'isValid': True, 'message': None, 'numericValue': 379.5
        }

    def test_mapping_with_missing_fields(self, validator):
        report = validator.validate_extraction_data({FieldType.REFUND_AMOUNT: "50"})

        assert not report['isValid']
        assert report['validatedData'][FieldType.REFUND_AMOUNT]['isValid']
        assert not report['validatedData'][FieldType.CUSTOMER_NAME]['isValid']
