"""Tests for display formatting, the copy summary, the report document and
PDF rendering."""

from unittest.mock import patch

import pytest

from backend.models.enums import Industry
from backend.models.inputs import CalculatorInputs
from backend.report.assembler import NARRATIVE_PLACEHOLDER, assemble_report
from backend.report.document import build_report_document, report_filename, split_narrative
from backend.report.formatting import format_currency, format_hours, format_number
from backend.report.pdf import ReportRenderError, render_pdf
from backend.report.summary import build_copy_summary


@pytest.fixture
def bundle(reference_inputs, reference_result, reference_chart, sample_narrative):
    return assemble_report(reference_inputs, reference_result, reference_chart, sample_narrative)


class TestFormatting:
    def test_thousands_grouping(self):
        assert format_number(1234567) == "1\u202f234\u202f567"

    def test_decimals_use_comma(self):
        assert format_number(1234.5, 2) == "1\u202f234,50"

    def test_currency(self):
        assert format_currency(44075) == "44\u202f075\u00a0€"

    def test_currency_rounds_for_display(self):
        assert format_currency(3658.95) == "3\u202f659\u00a0€"

    def test_hours(self):
        assert format_hours(1763) == "1\u202f763\u00a0h"


class TestCopySummary:
    def test_contains_results_and_narrative(self, bundle, sample_narrative):
        text = build_copy_summary(bundle)
        assert "Secteur : Services" in text
        assert "Économies annuelles : 44\u202f075\u00a0€" in text
        assert "ROI sur 3 ans : 132\u202f225\u00a0€" in text
        assert "Heures récupérées / an : 1\u202f763\u00a0h" in text
        assert "Coût avec IA : 14\u202f675\u00a0€" in text
        assert sample_narrative.strip() in text

    def test_pending_narrative_placeholder(self, reference_inputs, reference_result, reference_chart):
        text = build_copy_summary(assemble_report(reference_inputs, reference_result, reference_chart))
        assert text.endswith(NARRATIVE_PLACEHOLDER)


class TestReportDocument:
    def test_filename_is_ascii(self):
        assert report_filename("Santé") == "Nexalis_Audit_Sante.pdf"
        assert report_filename("Commerce / Retail") == "Nexalis_Audit_Commerce_Retail.pdf"

    def test_document_mirrors_bundle(self, bundle):
        document = build_report_document(bundle)
        assert document.filename == "Nexalis_Audit_Services.pdf"
        assert [card.value for card in document.cards] == [
            "1\u202f763\u00a0h",
            "44\u202f075\u00a0€",
            "132\u202f225\u00a0€",
        ]
        assert [bar.amount for bar in document.bars] == [58750, 14675, 44075]
        assert [bar.color for bar in document.bars] == ["#ef4444", "#1a365d", "#38a169"]
        assert document.narrative_pending is False

    def test_split_narrative_sections(self, sample_narrative):
        sections = split_narrative(sample_narrative)
        assert [s.heading for s in sections] == [
            "1. Recommandations Personnalisées",
            "2. Analyse Sectorielle",
            "3. Points d'Amélioration",
        ]
        assert sections[0].bullets == (
            "Automatiser la saisie des devis",
            "Centraliser le reporting **hebdomadaire**",
        )
        assert sections[1].paragraphs == (
            "Le secteur des services adopte rapidement l'IA générative.",
        )

    def test_split_plain_text_without_headings(self):
        sections = split_narrative("Une seule phrase.")
        assert len(sections) == 1
        assert sections[0].heading is None
        assert sections[0].paragraphs == ("Une seule phrase.",)


class TestRenderPdf:
    def test_renders_pdf_bytes(self, bundle):
        pdf = render_pdf(build_report_document(bundle))
        assert pdf.startswith(b"%PDF")
        assert len(pdf) > 1000

    def test_renders_zero_result(self, engine, no_repetitive_work):
        from backend.engine.calculator import build_chart_data

        result = engine.calculate(no_repetitive_work)
        document = build_report_document(
            assemble_report(no_repetitive_work, result, build_chart_data(result))
        )
        assert render_pdf(document).startswith(b"%PDF")

    def test_renders_markup_sensitive_text(self, engine):
        inputs = CalculatorInputs(
            employees=3, hourly_wage=40, hours_repetitive=2, industry=Industry.CONSTRUCTION
        )
        result = engine.calculate(inputs)
        from backend.engine.calculator import build_chart_data

        bundle = assemble_report(inputs, result, build_chart_data(result), "Coûts < 5 % & marges > 10 %")
        assert render_pdf(build_report_document(bundle)).startswith(b"%PDF")

    def test_render_failure_raises_report_error(self, bundle):
        document = build_report_document(bundle)
        with patch("backend.report.pdf.SimpleDocTemplate.build", side_effect=RuntimeError("layout")):
            with pytest.raises(ReportRenderError):
                render_pdf(document)
