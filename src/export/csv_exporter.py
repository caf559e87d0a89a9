"""
CSV export for reports.

Minimal comma-separated table: no branding, no header text. Only the known
report column sets are supported; any other shape yields a single
placeholder line.
"""

import csv
import io
import logging
from typing import Any, Dict, Optional

from config.settings import ExportSettings
from export.formatting import format_csv_cell
from export.tables import NO_DATA_MESSAGE, TableData, resolve_table_data

logger = logging.getLogger(__name__)


class CSVReportExporter:
    """Render report tables as UTF-8 CSV bytes."""

    def __init__(self, settings: ExportSettings = None):
        self.settings = settings or ExportSettings()

    def render(
        self,
        report_type: str,
        payload: Optional[Dict[str, Any]],
        allow_generic: bool = False,
    ) -> bytes:
        table = resolve_table_data(
            report_type,
            payload,
            date_format=self.settings.date_format,
            allow_generic=allow_generic,
        )
        return self.render_table(table)

    def render_table(self, table: Optional[TableData]) -> bytes:
        output = io.StringIO()
        writer = csv.writer(output, lineterminator="\n")

        if table is None or table.is_empty:
            writer.writerow([NO_DATA_MESSAGE])
        else:
            currency = self.settings.currency_symbol
            writer.writerow(table.headers)
            for row in table.rows:
                writer.writerow([
                    format_csv_cell(value, header, currency)
                    for header, value in zip(table.headers, row)
                ])

        content = output.getvalue()
        logger.debug(f"CSV rendered ({len(content)} chars)")
        return content.encode("utf-8")
