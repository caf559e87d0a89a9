"""Value formatting shared by the PDF, spreadsheet and CSV exporters."""

from __future__ import annotations

import re
from datetime import date, datetime
from typing import Any, Optional

from reports.metrics import to_number

MISSING = "N/A"

PERCENT_MARKER = "%"
AMOUNT_MARKERS = ("amount", "revenue")

_ISO_DATE = re.compile(r"^\d{4}-\d{2}-\d{2}")
_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])")


def is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def is_percent_header(header: str) -> bool:
    return PERCENT_MARKER in header


def is_amount_header(header: str, currency_symbol: str = "KSh") -> bool:
    lowered = header.lower()
    if currency_symbol and currency_symbol.lower() in lowered:
        return True
    return any(marker in lowered for marker in AMOUNT_MARKERS)


def header_label(key: str) -> str:
    """snake_case key to a column header: "total_units" -> "Total Units"."""
    words = key.replace("_", " ").split()
    return " ".join(word[:1].upper() + word[1:] for word in words)


def summary_label(key: str) -> str:
    """camelCase or snake_case key to a label: "totalRevenue" -> "Total Revenue"."""
    return header_label(_CAMEL_BOUNDARY.sub(" ", key))


def format_plain_number(value: float) -> str:
    """Ungrouped number, dropping a zero fraction: 10.0 -> "10"."""
    number = float(value)
    if number.is_integer():
        return str(int(number))
    return f"{number:.2f}".rstrip("0").rstrip(".")


def format_grouped(value: Any) -> str:
    """Thousands-grouped number: 1234567 -> "1,234,567", 1234.5 -> "1,234.50"."""
    number = to_number(value)
    if number.is_integer():
        return f"{int(number):,}"
    return f"{number:,.2f}"


def format_grouped_integer(value: Any) -> str:
    """Amount column value: rounded and grouped."""
    return f"{round(to_number(value)):,}"


def format_percent(value: Any) -> str:
    """70 -> "70%", 66.666 -> "66.7%". Strings already ending in % pass through."""
    if isinstance(value, str):
        stripped = value.strip()
        if stripped.endswith(PERCENT_MARKER):
            return stripped
        if not stripped:
            return MISSING
    if value is None:
        return MISSING
    number = round(to_number(value), 1)
    if number.is_integer():
        return f"{int(number)}%"
    return f"{number:.1f}%"


def format_currency(value: Any, currency_symbol: str = "KSh") -> str:
    return f"{currency_symbol} {format_grouped(value)}"


def parse_date(value: Any) -> Optional[date]:
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return value
    if isinstance(value, str) and _ISO_DATE.match(value):
        text = value.replace("Z", "+00:00")
        try:
            return datetime.fromisoformat(text)
        except ValueError:
            try:
                return date.fromisoformat(value[:10])
            except ValueError:
                return None
    return None


def looks_like_date(value: Any) -> bool:
    return parse_date(value) is not None


def format_date(value: Any, date_format: str = "%d %b %Y") -> str:
    """Locale-style date, "N/A" when missing, unchanged text when unparsable."""
    if value is None or value == "":
        return MISSING
    parsed = parse_date(value)
    if parsed is None:
        return str(value)
    return parsed.strftime(date_format)


def format_generic_value(value: Any, date_format: str = "%d %b %Y") -> str:
    """Cell text for the generic-data table."""
    if value is None or value == "":
        return MISSING
    if is_number(value):
        return format_grouped(value)
    if looks_like_date(value):
        return format_date(value, date_format)
    return str(value)


def format_cell(value: Any, header: str, currency_symbol: str = "KSh") -> str:
    """Display text for a table cell, driven by the column header."""
    if value is None:
        return MISSING
    if isinstance(value, str):
        return value
    if is_percent_header(header):
        return format_percent(value)
    if is_amount_header(header, currency_symbol):
        return format_grouped_integer(value)
    if is_number(value):
        return format_grouped(value)
    return str(value)


def format_csv_cell(value: Any, header: str, currency_symbol: str = "KSh") -> str:
    """CSV cell text: percentages keep their sign, numbers stay ungrouped."""
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if is_percent_header(header):
        return format_percent(value)
    if is_number(value):
        return format_plain_number(value)
    return str(value)


def format_summary_value(key: str, value: Any, currency_symbol: str = "KSh") -> str:
    """Summary entry value: rates as percentages, other numbers as money."""
    if "rate" in key.lower():
        return format_percent(value)
    if is_number(value):
        return format_currency(value, currency_symbol)
    if value is None:
        return MISSING
    return str(value)
