"""
Table extraction for report exports.

Every export format renders the same table. The columns are chosen by the
report type, never by guessing across shapes:

- financial + transactions -> Date, Tenant, Property, Amount, Status
- occupancy + properties   -> Property, Total Units, Occupied, Vacant, Occupancy %
- payment + payments       -> Date, Tenant, Amount, Method, Status
- revenue + breakdown      -> Period, Rent Revenue, Other Revenue, Total Revenue, Growth %

Anything else falls back to a generic ``data`` list (first six keys of the
first record) when allowed, or to no table at all.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

from export.formatting import (
    MISSING,
    format_date,
    format_generic_value,
    header_label,
)
from reports.metrics import first_present, to_number

NO_DATA_MESSAGE = "No data available for this report"
GENERIC_COLUMN_LIMIT = 6

FINANCIAL_HEADERS = ["Date", "Tenant", "Property", "Amount", "Status"]
OCCUPANCY_HEADERS = ["Property", "Total Units", "Occupied", "Vacant", "Occupancy %"]
PAYMENT_HEADERS = ["Date", "Tenant", "Amount", "Method", "Status"]
REVENUE_HEADERS = ["Period", "Rent Revenue", "Other Revenue", "Total Revenue", "Growth %"]


@dataclass
class TableData:
    """Headers plus rows of raw cell values (numbers stay numbers)."""
    headers: List[str]
    rows: List[List[Any]] = field(default_factory=list)
    source: str = "generic"

    @property
    def is_empty(self) -> bool:
        return not self.rows


def _text(value: Any) -> str:
    if value is None or value == "":
        return MISSING
    return str(value)


def _count(value: Any) -> Any:
    if value is None:
        return 0
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return value
    number = to_number(value)
    return int(number) if number.is_integer() else number


def _rate(value: Any) -> Any:
    """Percent value as a number; text already ending in "%" is kept."""
    if isinstance(value, str) and value.strip().endswith("%"):
        return value.strip()
    return _count(value)


def _records(payload: Dict[str, Any], key: str) -> Optional[List[Dict[str, Any]]]:
    records = payload.get(key)
    if not isinstance(records, list) or not records:
        return None
    return [record for record in records if isinstance(record, dict)]


def _financial_table(payload: Dict[str, Any], date_format: str) -> Optional[TableData]:
    transactions = _records(payload, "transactions")
    if transactions is None:
        return None
    rows = [
        [
            format_date(first_present(item, "payment_date", "paymentDate", "date"), date_format),
            _text(first_present(item, "tenant_name", "tenantName")),
            _text(first_present(item, "property_name", "propertyName")),
            to_number(item.get("amount")),
            _text(item.get("status")),
        ]
        for item in transactions
    ]
    return TableData(FINANCIAL_HEADERS, rows, source="financial")


def _occupancy_rows(properties: List[Dict[str, Any]]) -> List[List[Any]]:
    rows = []
    for item in properties:
        total = _count(first_present(item, "total_units", "totalUnits"))
        occupied = _count(first_present(item, "occupied_units", "occupiedUnits"))
        vacant = first_present(item, "vacant_units", "available_units", "availableUnits")
        rate = first_present(item, "occupancy_rate", "occupancyRate")
        if rate is None and total:
            rate = round(to_number(occupied) / to_number(total) * 100, 1)
        rows.append([
            _text(first_present(item, "name", "property_name", "propertyName")),
            total,
            occupied,
            _count(vacant) if vacant is not None else _count(to_number(total) - to_number(occupied)),
            _rate(rate),
        ])
    return rows


def _occupancy_table(payload: Dict[str, Any], date_format: str) -> Optional[TableData]:
    properties = _records(payload, "properties")
    if properties is None:
        occupancy = payload.get("occupancy")
        if isinstance(occupancy, dict):
            properties = _records(occupancy, "byProperty")
    if properties is None:
        return None
    return TableData(OCCUPANCY_HEADERS, _occupancy_rows(properties), source="occupancy")


def _payment_table(payload: Dict[str, Any], date_format: str) -> Optional[TableData]:
    payments = _records(payload, "payments")
    if payments is None:
        return None
    rows = [
        [
            format_date(first_present(item, "payment_date", "paymentDate", "created_at"), date_format),
            _text(first_present(item, "tenant_name", "tenantName")),
            to_number(item.get("amount")),
            _text(first_present(item, "payment_method", "method", "paymentMethod")),
            _text(item.get("status")),
        ]
        for item in payments
    ]
    return TableData(PAYMENT_HEADERS, rows, source="payment")


def _revenue_table(payload: Dict[str, Any], date_format: str) -> Optional[TableData]:
    breakdown = _records(payload, "breakdown")
    if breakdown is None:
        return None
    rows = [
        [
            _text(item.get("period")),
            to_number(first_present(item, "rentRevenue", "rent_revenue")),
            to_number(first_present(item, "otherRevenue", "other_revenue")),
            to_number(first_present(item, "totalRevenue", "total_revenue")),
            to_number(item.get("growth")),
        ]
        for item in breakdown
    ]
    return TableData(REVENUE_HEADERS, rows, source="revenue")


def generic_table(records: Any, date_format: str = "%d %b %Y") -> Optional[TableData]:
    """Table from arbitrary records: first six keys of the first record."""
    if not isinstance(records, list) or not records or not isinstance(records[0], dict):
        return None
    keys = list(records[0].keys())[:GENERIC_COLUMN_LIMIT]
    if not keys:
        return None
    rows = [
        [format_generic_value(record.get(key), date_format) for key in keys]
        for record in records
        if isinstance(record, dict)
    ]
    return TableData([header_label(key) for key in keys], rows, source="generic")


TYPED_EXTRACTORS: Dict[str, Callable[[Dict[str, Any], str], Optional[TableData]]] = {
    "financial": _financial_table,
    "occupancy": _occupancy_table,
    "payment": _payment_table,
    "revenue": _revenue_table,
}


def resolve_table_data(
    report_type: str,
    payload: Optional[Dict[str, Any]],
    date_format: str = "%d %b %Y",
    allow_generic: bool = True,
) -> Optional[TableData]:
    """
    Pick the export table for a report payload.

    Returns None when nothing matches; callers render NO_DATA_MESSAGE.
    """
    if not isinstance(payload, dict):
        return None

    extractor = TYPED_EXTRACTORS.get(getattr(report_type, "value", report_type))
    if extractor is not None:
        table = extractor(payload, date_format)
        if table is not None:
            return table

    if allow_generic:
        return generic_table(payload.get("data"), date_format)
    return None
