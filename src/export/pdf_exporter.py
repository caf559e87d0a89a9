"""
Report PDF Exporter - Branded PDF rendering with ReportLab.

Layout:
- Centered company logo (when available)
- Company name, contact line and a divider
- Report title and metadata lines
- Striped data table with a blue header row repeated on every page
- Summary block
- Footer on every page: "<company> - Confidential" and "Page X of Y"

The whole document is built into memory; callers receive complete bytes
or an exception, never a truncated file.
"""

from __future__ import annotations

import logging
from io import BytesIO
from typing import List, Type
from xml.sax.saxutils import escape

from reportlab.lib import colors
from reportlab.lib.enums import TA_CENTER, TA_LEFT
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import getSampleStyleSheet, ParagraphStyle
from reportlab.lib.units import mm
from reportlab.pdfgen import canvas
from reportlab.platypus import (
    SimpleDocTemplate,
    Paragraph,
    Spacer,
    Table,
    TableStyle,
    Image as RLImage,
    Flowable,
)
from reportlab.platypus.flowables import HRFlowable

from config.settings import ExportSettings
from export.document import ExportDocument
from export.formatting import format_cell

logger = logging.getLogger(__name__)

HEADER_BLUE = colors.Color(30 / 255, 64 / 255, 175 / 255)
STRIPE_COLOR = colors.Color(248 / 255, 250 / 255, 252 / 255)
BORDER_COLOR = colors.Color(220 / 255, 220 / 255, 220 / 255)
MUTED_TEXT = colors.Color(100 / 255, 100 / 255, 100 / 255)
FOOTER_TEXT = colors.Color(150 / 255, 150 / 255, 150 / 255)

PAGE_MARGIN = 14 * mm
FOOTER_OFFSET = 10 * mm


def numbered_canvas(footer_text: str) -> Type[canvas.Canvas]:
    """
    Canvas class that stamps the footer once the page count is known.

    Pages are buffered on showPage() and drawn in save(), so each footer
    can read "Page X of Y".
    """

    class NumberedCanvas(canvas.Canvas):
        def __init__(self, *args, **kwargs):
            canvas.Canvas.__init__(self, *args, **kwargs)
            self._saved_page_states = []

        def showPage(self):
            self._saved_page_states.append(dict(self.__dict__))
            self._startPage()

        def save(self):
            page_count = len(self._saved_page_states)
            for state in self._saved_page_states:
                self.__dict__.update(state)
                self._draw_footer(page_count)
                canvas.Canvas.showPage(self)
            canvas.Canvas.save(self)

        def _draw_footer(self, page_count: int):
            width, _ = self._pagesize
            self.saveState()
            self.setFont("Helvetica-Oblique", 8)
            self.setFillColor(FOOTER_TEXT)
            self.drawString(PAGE_MARGIN, FOOTER_OFFSET, footer_text)
            self.drawRightString(
                width - PAGE_MARGIN,
                FOOTER_OFFSET,
                f"Page {self._pageNumber} of {page_count}",
            )
            self.restoreState()

    return NumberedCanvas


class PDFReportExporter:
    """
    Render an ExportDocument to PDF bytes.

    Usage:
        exporter = PDFReportExporter(settings.export)
        pdf_bytes = exporter.render(document)
    """

    def __init__(self, settings: ExportSettings = None):
        self.settings = settings or ExportSettings()
        self.styles = self._build_styles()

    def _build_styles(self):
        styles = getSampleStyleSheet()
        styles.add(ParagraphStyle(
            name='CompanyName',
            parent=styles['Heading1'],
            fontName='Helvetica-Bold',
            fontSize=18,
            leading=22,
            textColor=HEADER_BLUE,
            alignment=TA_CENTER,
            spaceAfter=4,
        ))
        styles.add(ParagraphStyle(
            name='ContactLine',
            parent=styles['Normal'],
            fontSize=9,
            leading=11,
            textColor=MUTED_TEXT,
            alignment=TA_CENTER,
        ))
        styles.add(ParagraphStyle(
            name='ReportTitle',
            parent=styles['Heading2'],
            fontName='Helvetica-Bold',
            fontSize=14,
            leading=18,
            textColor=colors.black,
            alignment=TA_CENTER,
            spaceAfter=6,
        ))
        styles.add(ParagraphStyle(
            name='Metadata',
            parent=styles['Normal'],
            fontSize=9,
            leading=12,
            textColor=MUTED_TEXT,
            alignment=TA_LEFT,
        ))
        styles.add(ParagraphStyle(
            name='Cell',
            parent=styles['Normal'],
            fontSize=8,
            leading=10,
        ))
        styles.add(ParagraphStyle(
            name='SummaryHeading',
            parent=styles['Normal'],
            fontName='Helvetica-Bold',
            fontSize=11,
            leading=14,
            textColor=HEADER_BLUE,
            spaceBefore=10,
            spaceAfter=4,
        ))
        styles.add(ParagraphStyle(
            name='SummaryLine',
            parent=styles['Normal'],
            fontSize=10,
            leading=14,
        ))
        styles.add(ParagraphStyle(
            name='EmptyNotice',
            parent=styles['Normal'],
            fontName='Helvetica-Oblique',
            fontSize=10,
            textColor=MUTED_TEXT,
            alignment=TA_CENTER,
            spaceBefore=12,
        ))
        return styles

    def render(self, document: ExportDocument) -> bytes:
        """Build the complete PDF in memory and return its bytes."""
        buffer = BytesIO()
        doc = SimpleDocTemplate(
            buffer,
            pagesize=A4,
            leftMargin=PAGE_MARGIN,
            rightMargin=PAGE_MARGIN,
            topMargin=10 * mm,
            bottomMargin=25 * mm,
            title=document.title,
            author=document.company.name,
        )

        story: List[Flowable] = []
        story.extend(self._build_header(document))
        story.extend(self._build_table(document, doc.width))
        story.extend(self._build_summary(document))

        doc.build(story, canvasmaker=numbered_canvas(document.footer_text))
        pdf_bytes = buffer.getvalue()
        buffer.close()

        logger.info(f"PDF generated for {document.report_type} report ({len(pdf_bytes)} bytes)")
        return pdf_bytes

    def _build_header(self, document: ExportDocument) -> List[Flowable]:
        story: List[Flowable] = []

        if document.logo is not None:
            width, height = document.logo.scaled(self.settings.logo_size_mm * mm)
            logo = RLImage(document.logo.stream(), width=width, height=height, mask='auto')
            logo.hAlign = 'CENTER'
            story.append(logo)
            story.append(Spacer(1, 4 * mm))

        story.append(Paragraph(escape(document.company.name), self.styles['CompanyName']))

        contact_line = document.company.contact_line()
        if contact_line:
            story.append(Paragraph(escape(contact_line), self.styles['ContactLine']))

        story.append(Spacer(1, 3 * mm))
        story.append(HRFlowable(width="100%", thickness=0.5, color=BORDER_COLOR, spaceAfter=4 * mm))

        story.append(Paragraph(escape(document.title), self.styles['ReportTitle']))
        for line in document.metadata_lines:
            story.append(Paragraph(escape(line), self.styles['Metadata']))
        story.append(Spacer(1, 4 * mm))
        return story

    def _build_table(self, document: ExportDocument, available_width: float) -> List[Flowable]:
        if not document.has_table:
            return [Paragraph(escape(document.empty_message), self.styles['EmptyNotice'])]

        table_data = document.table
        currency = self.settings.currency_symbol
        cell_style = self.styles['Cell']

        rows = [list(table_data.headers)]
        for row in table_data.rows:
            rows.append([
                Paragraph(escape(format_cell(value, header, currency)), cell_style)
                for header, value in zip(table_data.headers, row)
            ])

        column_width = available_width / len(table_data.headers)
        table = Table(rows, colWidths=[column_width] * len(table_data.headers), repeatRows=1)
        table.setStyle(TableStyle([
            # Header row
            ('BACKGROUND', (0, 0), (-1, 0), HEADER_BLUE),
            ('TEXTCOLOR', (0, 0), (-1, 0), colors.white),
            ('FONTNAME', (0, 0), (-1, 0), 'Helvetica-Bold'),
            ('FONTSIZE', (0, 0), (-1, 0), 9),
            ('ALIGN', (0, 0), (-1, 0), 'CENTER'),
            ('VALIGN', (0, 0), (-1, -1), 'TOP'),
            # Body
            ('ROWBACKGROUNDS', (0, 1), (-1, -1), [colors.white, STRIPE_COLOR]),
            ('GRID', (0, 0), (-1, -1), 0.25, BORDER_COLOR),
            ('TOPPADDING', (0, 0), (-1, -1), 3),
            ('BOTTOMPADDING', (0, 0), (-1, -1), 3),
        ]))
        return [table]

    def _build_summary(self, document: ExportDocument) -> List[Flowable]:
        if not document.summary:
            return []
        story: List[Flowable] = [Paragraph("Summary:", self.styles['SummaryHeading'])]
        for label, value in document.summary:
            story.append(Paragraph(
                f"<b>{escape(label)}:</b> {escape(value)}",
                self.styles['SummaryLine'],
            ))
        return story
