"""Render a ReportDocument to an A4 PDF with reportlab."""

from __future__ import annotations

import logging
import re
from io import BytesIO
from xml.sax.saxutils import escape

from reportlab.graphics.charts.barcharts import VerticalBarChart
from reportlab.graphics.shapes import Drawing
from reportlab.lib import colors
from reportlab.lib.colors import HexColor
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import mm
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from backend.report.document import ReportDocument

logger = logging.getLogger(__name__)

BRAND_DARK = HexColor("#1a365d")
BRAND_ACCENT = HexColor("#38a169")

_BOLD_RE = re.compile(r"\*\*(.+?)\*\*")


class ReportRenderError(Exception):
    """The PDF could not be produced."""


def _markup(text: str) -> str:
    # Standard PDF fonts lack U+202F; a plain no-break space keeps the grouping.
    text = escape(text.replace("\u202f", "\u00a0"))
    return _BOLD_RE.sub(r"<b>\1</b>", text)


def _styles() -> dict[str, ParagraphStyle]:
    base = getSampleStyleSheet()
    return {
        "title": ParagraphStyle(
            "ReportTitle",
            parent=base["Heading1"],
            fontSize=22,
            textColor=BRAND_DARK,
            spaceAfter=6,
        ),
        "subtitle": ParagraphStyle(
            "ReportSubtitle", parent=base["Heading3"], textColor=colors.grey, spaceAfter=12
        ),
        "heading": ParagraphStyle(
            "SectionHeading",
            parent=base["Heading2"],
            textColor=BRAND_DARK,
            spaceBefore=10,
            spaceAfter=6,
        ),
        "body": base["BodyText"],
        "bullet": ParagraphStyle("Bullet", parent=base["BodyText"], leftIndent=12, bulletIndent=2),
        "small": ParagraphStyle(
            "Small", parent=base["BodyText"], fontSize=8, textColor=colors.grey
        ),
        "card_label": ParagraphStyle(
            "CardLabel", parent=base["BodyText"], fontSize=9, textColor=colors.grey
        ),
        "card_value": ParagraphStyle(
            "CardValue", parent=base["BodyText"], fontSize=15, leading=18, textColor=BRAND_DARK
        ),
    }


def _cards_table(document: ReportDocument, styles: dict[str, ParagraphStyle], width: float) -> Table:
    cells = []
    for card in document.cards:
        value_style = styles["card_value"]
        if card.highlight:
            value_style = ParagraphStyle("CardValueHighlight", parent=value_style, textColor=BRAND_ACCENT)
        cells.append(
            [
                Paragraph(_markup(card.label), styles["card_label"]),
                Paragraph(f"<b>{_markup(card.value)}</b>", value_style),
            ]
        )
    table = Table([cells], colWidths=[width / len(cells)] * len(cells))
    table.setStyle(
        TableStyle(
            [
                ("BOX", (0, 0), (-1, -1), 0.5, colors.lightgrey),
                ("INNERGRID", (0, 0), (-1, -1), 0.5, colors.lightgrey),
                ("VALIGN", (0, 0), (-1, -1), "TOP"),
                ("TOPPADDING", (0, 0), (-1, -1), 8),
                ("BOTTOMPADDING", (0, 0), (-1, -1), 8),
            ]
        )
    )
    return table


def _bar_chart(document: ReportDocument, width: float, height: float = 90 * mm) -> Drawing:
    amounts = [bar.amount for bar in document.bars]
    drawing = Drawing(width, height)
    chart = VerticalBarChart()
    chart.x = 40
    chart.y = 25
    chart.width = width - 60
    chart.height = height - 40
    chart.data = [tuple(amounts)]
    chart.categoryAxis.categoryNames = [bar.label for bar in document.bars]
    chart.valueAxis.valueMin = min(0, *amounts)
    chart.valueAxis.valueMax = max(amounts) * 1.1 if max(amounts) > 0 else 1
    chart.barWidth = 20
    chart.strokeColor = None
    for index, bar in enumerate(document.bars):
        chart.bars[(0, index)].fillColor = HexColor(bar.color)
        chart.bars[(0, index)].strokeColor = None
    drawing.add(chart)
    return drawing


def render_pdf(document: ReportDocument) -> bytes:
    """Return the PDF bytes for a report document.

    Raises ReportRenderError if reportlab fails.
    """
    buffer = BytesIO()
    doc = SimpleDocTemplate(
        buffer,
        pagesize=A4,
        topMargin=10 * mm,
        bottomMargin=10 * mm,
        leftMargin=10 * mm,
        rightMargin=10 * mm,
        title=document.title,
        author=document.author,
    )
    styles = _styles()
    story = [
        Paragraph(_markup(document.title), styles["title"]),
        Paragraph(_markup(document.subtitle), styles["subtitle"]),
    ]
    for line in document.input_lines:
        story.append(Paragraph(_markup(line), styles["small"]))
    story.append(Spacer(1, 6 * mm))
    story.append(_cards_table(document, styles, doc.width))
    story.append(Spacer(1, 6 * mm))
    story.append(Paragraph("Comparaison des coûts annuels", styles["heading"]))
    story.append(_bar_chart(document, doc.width))

    story.append(Paragraph("Analyse stratégique", styles["heading"]))
    for section in document.sections:
        if section.heading:
            story.append(Paragraph(f"<b>{_markup(section.heading)}</b>", styles["body"]))
        for paragraph in section.paragraphs:
            story.append(Paragraph(_markup(paragraph), styles["body"]))
        for bullet in section.bullets:
            story.append(Paragraph(_markup(bullet), styles["bullet"], bulletText="•"))
        story.append(Spacer(1, 3 * mm))

    story.append(Spacer(1, 6 * mm))
    story.append(Paragraph(_markup(document.disclaimer), styles["small"]))

    try:
        doc.build(story)
    except Exception as e:
        logger.exception("PDF rendering failed for %s", document.filename)
        raise ReportRenderError(f"Could not render {document.filename}") from e
    return buffer.getvalue()
