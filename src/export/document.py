"""
Export Document - Format-independent content of a branded export.

The renderer composes one ExportDocument and hands it to the PDF or
spreadsheet exporter; both lay out the same header, table, summary and
footer.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple, TYPE_CHECKING

from config.branding import CompanyInfo
from export.formatting import format_currency, format_date, format_summary_value, summary_label
from export.tables import NO_DATA_MESSAGE, TableData
from reports.metrics import to_number
from reports.models import Filters

if TYPE_CHECKING:
    from export.logo import LogoImage

# Column headers that get a total in the summary block
TOTAL_MARKERS = ("amount", "revenue", "due", "arrears", "balance", "paid")


@dataclass
class ExportDocument:
    """Everything an exporter needs to lay out one report."""
    report_type: str
    title: str
    company: CompanyInfo
    generated_at: datetime
    table: Optional[TableData] = None
    metadata_lines: List[str] = field(default_factory=list)
    summary: List[Tuple[str, str]] = field(default_factory=list)
    logo: Optional["LogoImage"] = None
    empty_message: str = NO_DATA_MESSAGE

    @property
    def has_table(self) -> bool:
        return self.table is not None and not self.table.is_empty

    @property
    def footer_text(self) -> str:
        return self.company.footer_text

    @property
    def column_count(self) -> int:
        return len(self.table.headers) if self.table is not None else 1


def report_title(report_type: str) -> str:
    """"financial" -> "Financial Report", "unpaid_tenants" -> "Unpaid Tenants Report"."""
    words = str(report_type).replace("_", " ").split()
    return " ".join(word.capitalize() for word in words) + " Report"


def metadata_lines(
    generated_at: datetime,
    filters: Filters,
    datetime_format: str = "%d %b %Y, %H:%M",
    date_format: str = "%d %b %Y",
) -> List[str]:
    lines = [f"Generated: {generated_at.strftime(datetime_format)}"]
    if filters.period:
        lines.append(f"Period: {filters.period.replace('_', ' ')}")
    if filters.has_date_range:
        start = format_date(filters.start_date, date_format)
        end = format_date(filters.end_date, date_format)
        lines.append(f"Date Range: {start} to {end}")
    return lines


def summary_entries(payload: Optional[Dict[str, Any]], currency_symbol: str = "KSh") -> List[Tuple[str, str]]:
    """Label/value pairs for the scalar entries of ``payload["summary"]``."""
    if not isinstance(payload, dict):
        return []
    summary = payload.get("summary")
    if not isinstance(summary, dict):
        return []
    return [
        (summary_label(key), format_summary_value(key, value, currency_symbol))
        for key, value in summary.items()
        if not isinstance(value, (dict, list))
    ]


def totals_entries(table: Optional[TableData], currency_symbol: str = "KSh") -> List[Tuple[str, str]]:
    """
    Record count plus a total for every money column of ``table``.

    Cells may be numbers or display text ("12,500", "KSh 1,000"); anything
    unparsable counts as zero.
    """
    if table is None or table.is_empty:
        return []

    entries = [("Records", str(len(table.rows)))]
    for index, header in enumerate(table.headers):
        lowered = header.lower()
        if not any(marker in lowered for marker in TOTAL_MARKERS):
            continue
        total = sum(to_number(row[index]) for row in table.rows if index < len(row))
        label = header if lowered.startswith("total") else f"Total {header}"
        entries.append((label, format_currency(total, currency_symbol)))
    return entries


def override_entries(totals: Dict[str, Any], currency_symbol: str = "KSh") -> List[Tuple[str, str]]:
    """Caller-supplied totals; labels are kept, text values pass through unchanged."""
    return [
        (label, format_summary_value(label, value, currency_symbol))
        for label, value in totals.items()
    ]
