"""
Derived report metrics.

The backend returns raw totals; the financial summary is enriched locally
with growth and overdue figures before it is displayed or exported.
"""

from __future__ import annotations

import copy
import re
from typing import Any, Dict, Iterable, Optional, Tuple

COMPLETED_STATUS = "completed"

_NON_NUMERIC = re.compile(r"[^0-9.\-]")


def to_number(value: Any) -> float:
    """
    Parse a money-like value, treating anything unparsable as 0.

    Accepts numbers and strings such as "15000", "15,000" or "KSh 15,000".
    """
    if isinstance(value, bool) or value is None:
        return 0.0
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        cleaned = _NON_NUMERIC.sub("", value)
        try:
            return float(cleaned)
        except ValueError:
            return 0.0
    try:
        return float(value)
    except (TypeError, ValueError):
        return 0.0


def first_present(data: Dict[str, Any], *keys: str) -> Optional[Any]:
    """First non-None value among camelCase/snake_case spellings of a field."""
    for key in keys:
        value = data.get(key)
        if value is not None:
            return value
    return None


def compute_growth_rate(current: Any, previous: Any) -> float:
    """(current - previous) / previous * 100, or 0 when previous is absent or zero."""
    previous_value = to_number(previous)
    if previous is None or previous_value == 0:
        return 0.0
    return (to_number(current) - previous_value) / previous_value * 100


def compute_overdue(transactions: Iterable[Dict[str, Any]]) -> Tuple[int, float]:
    """Count and total of transactions whose status is not "completed"."""
    count = 0
    amount = 0.0
    for transaction in transactions:
        if not isinstance(transaction, dict):
            continue
        if transaction.get("status") == COMPLETED_STATUS:
            continue
        count += 1
        amount += to_number(transaction.get("amount"))
    return count, amount


def enrich_financial_payload(payload: Dict[str, Any]) -> Dict[str, Any]:
    """
    Return a copy of a financial payload with derived summary fields.

    Adds growthRate, overduePaymentsCount and overduePaymentsAmount to
    ``summary``. The input payload is left untouched.
    """
    enriched = copy.deepcopy(payload)
    raw_summary = enriched.get("summary")
    summary = dict(raw_summary) if isinstance(raw_summary, dict) else {}

    transactions = enriched.get("transactions")
    if not isinstance(transactions, list):
        transactions = []

    current = first_present(summary, "totalRevenue", "total_revenue")
    previous = first_present(summary, "previousRevenue", "previous_revenue")
    overdue_count, overdue_amount = compute_overdue(transactions)

    summary["growthRate"] = compute_growth_rate(current, previous)
    summary["overduePaymentsCount"] = overdue_count
    summary["overduePaymentsAmount"] = overdue_amount

    enriched["summary"] = summary
    return enriched
