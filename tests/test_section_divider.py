"""Tests for positional section division and special-section tagging."""
import pytest

from refund.extraction.document_fields.support_modules.section_divider import (
    SectionDivider, divide_into_sections
)
from conftest import filler_document


class TestSectionCoverage:

    @pytest.mark.parametrize("line_count", [0, 1, 3, 7, 10, 23, 101])
    @pytest.mark.parametrize("section_count", [1, 3, 10, 17])
    def test_sections_are_contiguous_and_cover_document(self, line_count, section_count):
        text = "\n".join(f"line {i}" for i in range(line_count))
        sections = divide_into_sections(text, section_count)

        assert len(sections) == section_count
        assert sections[0].start_percentage == 0
        assert sections[-1].end_percentage == 100
        for current, following in zip(sections, sections[1:]):
            assert current.end_percentage == following.start_percentage

    def test_every_line_lands_in_exactly_one_section(self):
        lines = [f"line {i}" for i in range(23)]
        sections = divide_into_sections("\n".join(lines), 10)

        rebuilt = [line for s in sections if s.content for line in s.content.split("\n")]
        assert rebuilt == lines

    def test_short_document_leaves_leading_sections_empty(self):
        sections = divide_into_sections("only line", 10)

        assert [s.content for s in sections[:9]] == [""] * 9
        assert sections[9].content == "only line"

    def test_percentages_are_exact_multiples(self):
        sections = divide_into_sections("a\nb\nc", 10)
        assert [s.start_percentage for s in sections] == [i * 10 for i in range(10)]

    def test_rejects_non_positive_section_count(self):
        with pytest.raises(ValueError):
            SectionDivider().divide_into_sections("text", 0)


class TestCustomerInfoDetection:

    def test_header_wins_over_earlier_keyword(self):
        text = filler_document({0: "Dear customer", 2: "Customer Details"})
        sections = divide_into_sections(text)
        assert [i for i, s in enumerate(sections) if s.is_customer_info_section] == [2]

    def test_keyword_match(self):
        text = filler_document({1: "Client information"})
        sections = divide_into_sections(text)
        assert sections[1].is_customer_info_section

    def test_arabic_keyword_match(self):
        text = filler_document({3: "بيانات العميل"})
        sections = divide_into_sections(text)
        assert sections[3].is_customer_info_section

    def test_name_with_title_heuristic(self):
        text = filler_document({1: "Name: MR. Ali Hassan"})
        sections = divide_into_sections(text)
        assert sections[1].is_customer_info_section

    def test_only_top_forty_percent_is_scanned(self):
        text = filler_document({5: "CUSTOMER INFORMATION"})
        sections = divide_into_sections(text)
        assert sections[0].is_customer_info_section
        assert not sections[5].is_customer_info_section

    def test_defaults_to_first_section(self):
        sections = divide_into_sections(filler_document({}))
        assert sections[0].is_customer_info_section
        assert sum(s.is_customer_info_section for s in sections) == 1

    def test_detects_scttr_customer_block(self, scttr_sections):
        assert scttr_sections[1].is_customer_info_section


class TestSignatureDetection:

    def test_keyword_in_lower_half(self):
        text = filler_document({6: "Customer Signature"})
        sections = divide_into_sections(text)
        assert [i for i, s in enumerate(sections) if s.is_signature_section] == [6]

    def test_upper_half_is_ignored(self):
        text = filler_document({2: "Signature"})
        sections = divide_into_sections(text)
        assert not any(s.is_signature_section for s in sections)

    def test_director_heuristic(self):
        text = filler_document({8: "Approved: Director"})
        sections = divide_into_sections(text)
        assert sections[8].is_signature_section

    def test_no_default_when_absent(self):
        sections = divide_into_sections(filler_document({}))
        assert not any(s.is_signature_section for s in sections)

    def test_first_qualifying_section_wins(self, scttr_sections):
        assert [i for i, s in enumerate(scttr_sections) if s.is_signature_section] == [7]
