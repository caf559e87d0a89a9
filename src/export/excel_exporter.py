"""
Branded Excel Export for reports.

Sheet layout (single sheet):
    logo (optional)
    company name / contact line / divider
    report title / metadata lines
    data table (blue header, striped rows, thin borders)
    Summary:
    "<company> - Confidential" footer row

Spreadsheets have no fixed page geometry, so the footer is one trailing
row instead of a per-page stamp.
"""

import logging
from io import BytesIO
from typing import Any, List

from openpyxl import Workbook
from openpyxl.drawing.image import Image as XLImage
from openpyxl.styles import Alignment, Border, Font, PatternFill, Side
from openpyxl.utils import get_column_letter
from openpyxl.worksheet.worksheet import Worksheet

from config.settings import ExportSettings
from export.document import ExportDocument
from export.formatting import is_amount_header, is_number, is_percent_header

logger = logging.getLogger(__name__)

EXCEL_STYLES = {
    "header_fill_color": "1E40AF",
    "header_font_color": "FFFFFF",
    "stripe_fill_color": "F8FAFC",
    "border_color": "DCDCDC",
    "muted_font_color": "646464",
    "amount_format": '#,##0',
    "integer_format": '#,##0',
    "decimal_format": '#,##0.00',
    "percent_format": '0"%"',
    "percent_decimal_format": '0.0"%"',
}

LOGO_PIXELS = 96
LOGO_ROW_SPAN = 5
MIN_COLUMN_WIDTH = 12
MAX_COLUMN_WIDTH = 45
SHEET_TITLE_LIMIT = 31


class ExcelReportExporter:
    """
    Excel report generator for branded report exports.

    Usage:
        exporter = ExcelReportExporter(settings.export)
        xlsx_bytes = exporter.render(document)
    """

    def __init__(self, settings: ExportSettings = None):
        """Initialize with default styles."""
        self.settings = settings or ExportSettings()
        self._init_styles()

    def _init_styles(self):
        """Initialize reusable styles."""
        self.header_fill = PatternFill(
            start_color=EXCEL_STYLES['header_fill_color'],
            end_color=EXCEL_STYLES['header_fill_color'],
            fill_type='solid'
        )
        self.stripe_fill = PatternFill(
            start_color=EXCEL_STYLES['stripe_fill_color'],
            end_color=EXCEL_STYLES['stripe_fill_color'],
            fill_type='solid'
        )

        self.header_font = Font(
            bold=True,
            color=EXCEL_STYLES['header_font_color'],
            size=10
        )
        self.company_font = Font(bold=True, size=16, color=EXCEL_STYLES['header_fill_color'])
        self.title_font = Font(bold=True, size=12)
        self.muted_font = Font(size=9, color=EXCEL_STYLES['muted_font_color'])
        self.footer_font = Font(italic=True, size=8, color=EXCEL_STYLES['muted_font_color'])
        self.bold_font = Font(bold=True)

        thin_border = Side(style='thin', color=EXCEL_STYLES['border_color'])
        self.cell_border = Border(
            left=thin_border,
            right=thin_border,
            top=thin_border,
            bottom=thin_border
        )
        self.divider_border = Border(bottom=Side(style='thin', color=EXCEL_STYLES['border_color']))

        self.center_align = Alignment(horizontal='center', vertical='center')
        self.right_align = Alignment(horizontal='right', vertical='center')
        self.left_align = Alignment(horizontal='left', vertical='center', wrap_text=True)

    def render(self, document: ExportDocument) -> bytes:
        """Build the workbook in memory and return the .xlsx bytes."""
        wb = Workbook()
        ws = wb.active
        ws.title = (document.title or "Report")[:SHEET_TITLE_LIMIT]
        wb.properties.creator = document.company.name
        wb.properties.title = document.title

        width = max(document.column_count, 2)
        row = self._write_header(ws, document, width)
        row = self._write_table(ws, document, row + 1)
        row = self._write_summary(ws, document, row + 1)
        self._write_footer(ws, document, row + 1, width)
        self._fit_columns(ws, document)

        output = BytesIO()
        wb.save(output)
        logger.info(f"Excel report created for {document.report_type}")
        return output.getvalue()

    # =========================================================================
    # HEADER
    # =========================================================================

    def _merged_line(self, ws: Worksheet, row: int, width: int, value: str, font: Font) -> None:
        ws.merge_cells(start_row=row, start_column=1, end_row=row, end_column=width)
        cell = ws.cell(row=row, column=1, value=value)
        cell.font = font
        cell.alignment = self.center_align

    def _write_header(self, ws: Worksheet, document: ExportDocument, width: int) -> int:
        """Write branding and metadata; returns the next free row."""
        row = 1

        if document.logo is not None:
            image = XLImage(document.logo.stream())
            image.width, image.height = (round(side) for side in document.logo.scaled(LOGO_PIXELS))
            anchor_column = get_column_letter(max(1, (width + 1) // 2))
            ws.add_image(image, f"{anchor_column}{row}")
            row += LOGO_ROW_SPAN

        self._merged_line(ws, row, width, document.company.name, self.company_font)
        ws.row_dimensions[row].height = 24
        row += 1

        contact_line = document.company.contact_line()
        if contact_line:
            self._merged_line(ws, row, width, contact_line, self.muted_font)
            row += 1

        for column in range(1, width + 1):
            ws.cell(row=row, column=column).border = self.divider_border
        row += 1

        self._merged_line(ws, row, width, document.title, self.title_font)
        row += 1

        for line in document.metadata_lines:
            cell = ws.cell(row=row, column=1, value=line)
            cell.font = self.muted_font
            row += 1

        return row

    # =========================================================================
    # TABLE
    # =========================================================================

    def _number_format(self, header: str, value: Any) -> str:
        if is_percent_header(header):
            if float(value).is_integer():
                return EXCEL_STYLES['percent_format']
            return EXCEL_STYLES['percent_decimal_format']
        if is_amount_header(header, self.settings.currency_symbol):
            return EXCEL_STYLES['amount_format']
        if float(value).is_integer():
            return EXCEL_STYLES['integer_format']
        return EXCEL_STYLES['decimal_format']

    def _write_table(self, ws: Worksheet, document: ExportDocument, start_row: int) -> int:
        """Write the data table; returns the last row used."""
        if not document.has_table:
            cell = ws.cell(row=start_row, column=1, value=document.empty_message)
            cell.font = Font(italic=True, color=EXCEL_STYLES['muted_font_color'])
            return start_row

        table = document.table
        for column, header in enumerate(table.headers, start=1):
            cell = ws.cell(row=start_row, column=column, value=header)
            cell.font = self.header_font
            cell.fill = self.header_fill
            cell.alignment = self.center_align
            cell.border = self.cell_border
        ws.row_dimensions[start_row].height = 22
        ws.freeze_panes = ws.cell(row=start_row + 1, column=1)

        row = start_row
        for index, values in enumerate(table.rows):
            row = start_row + 1 + index
            for column, (header, value) in enumerate(zip(table.headers, values), start=1):
                cell = ws.cell(row=row, column=column, value=value)
                cell.border = self.cell_border
                if is_number(value):
                    cell.number_format = self._number_format(header, value)
                    cell.alignment = self.right_align
                else:
                    cell.alignment = self.left_align
                if index % 2 == 1:
                    cell.fill = self.stripe_fill

        return row

    # =========================================================================
    # SUMMARY & FOOTER
    # =========================================================================

    def _write_summary(self, ws: Worksheet, document: ExportDocument, start_row: int) -> int:
        if not document.summary:
            return start_row - 1

        row = start_row + 1
        ws.cell(row=row, column=1, value="Summary:").font = Font(bold=True, size=11)
        for label, value in document.summary:
            row += 1
            ws.cell(row=row, column=1, value=f"{label}:").font = self.bold_font
            ws.cell(row=row, column=2, value=value)
        return row

    def _write_footer(self, ws: Worksheet, document: ExportDocument, start_row: int, width: int) -> None:
        row = start_row + 1
        ws.merge_cells(start_row=row, start_column=1, end_row=row, end_column=width)
        cell = ws.cell(row=row, column=1, value=document.footer_text)
        cell.font = self.footer_font

    def _fit_columns(self, ws: Worksheet, document: ExportDocument) -> None:
        if not document.has_table:
            ws.column_dimensions['A'].width = MAX_COLUMN_WIDTH
            return
        table = document.table
        for column, header in enumerate(table.headers, start=1):
            lengths: List[int] = [len(header)]
            lengths.extend(len(str(values[column - 1])) for values in table.rows if len(values) >= column)
            width = min(max(max(lengths) + 2, MIN_COLUMN_WIDTH), MAX_COLUMN_WIDTH)
            ws.column_dimensions[get_column_letter(column)].width = width
