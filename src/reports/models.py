"""
Report Models - Typed structures shared by aggregation, state and export.

A Report is an immutable snapshot of aggregated business data. Its payload
shape is fixed by its type:

- financial: summary, transactions, expenses
- occupancy: occupancy, trends, properties
- payment:   payments, summary
- revenue:   revenue, breakdown
- custom:    free-form, optionally a generic ``data`` list
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import date, datetime
from enum import Enum
from typing import Any, Dict, Optional


class ReportType(str, Enum):
    """Kinds of report the backend can aggregate."""
    FINANCIAL = "financial"
    OCCUPANCY = "occupancy"
    PAYMENT = "payment"
    CUSTOM = "custom"
    REVENUE = "revenue"

    @property
    def title(self) -> str:
        return f"{self.value.title()} Report"


@dataclass(frozen=True)
class Filters:
    """
    User-supplied constraints for one generate/export action.

    Never persisted. ``group_by`` travels as ``groupBy`` on the wire.
    """
    period: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    property_id: Optional[str] = None
    group_by: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "Filters":
        data = data or {}
        return cls(
            period=data.get("period"),
            start_date=_as_date(data.get("start_date") or data.get("startDate")),
            end_date=_as_date(data.get("end_date") or data.get("endDate")),
            property_id=_as_str(data.get("property_id") or data.get("propertyId")),
            group_by=data.get("group_by") or data.get("groupBy"),
        )

    def to_params(self) -> Dict[str, str]:
        """Query parameters for the backend, omitting unset filters."""
        params = {
            "period": self.period,
            "start_date": self.start_date.isoformat() if self.start_date else None,
            "end_date": self.end_date.isoformat() if self.end_date else None,
            "property_id": self.property_id,
            "groupBy": self.group_by,
        }
        return {key: value for key, value in params.items() if value is not None}

    @property
    def has_date_range(self) -> bool:
        return self.start_date is not None and self.end_date is not None


@dataclass(frozen=True)
class DateRange:
    """Date range selected in the reporting screen."""
    start_date: date
    end_date: date

    @classmethod
    def current_month(cls, today: Optional[date] = None) -> "DateRange":
        """First day of the current month through today."""
        today = today or date.today()
        return cls(start_date=today.replace(day=1), end_date=today)


@dataclass(frozen=True)
class Report:
    """A generated, typed snapshot of aggregated business data."""
    id: str
    type: ReportType
    title: str
    generated_at: datetime
    payload: Dict[str, Any] = field(default_factory=dict)
    description: Optional[str] = None
    period: Optional[str] = None
    filters: Filters = field(default_factory=Filters)

    @property
    def summary(self) -> Dict[str, Any]:
        summary = self.payload.get("summary")
        return summary if isinstance(summary, dict) else {}

    def with_payload(self, payload: Dict[str, Any]) -> "Report":
        return replace(self, payload=payload)


@dataclass(frozen=True)
class ReportSummary:
    """Metadata entry of the historical report list."""
    id: str
    type: str
    title: Optional[str] = None
    created_at: Optional[datetime] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None


@dataclass(frozen=True)
class CustomReportRequest:
    """
    User-authored custom report definition.

    ``fields`` carries any additional user-defined criteria and is sent to
    the backend unchanged alongside title, description and filters.
    """
    title: str
    description: Optional[str] = None
    filters: Filters = field(default_factory=Filters)
    fields: Dict[str, Any] = field(default_factory=dict)

    def to_body(self) -> Dict[str, Any]:
        body: Dict[str, Any] = dict(self.fields)
        body.update(self.filters.to_params())
        body["type"] = ReportType.CUSTOM.value
        body["title"] = self.title
        if self.description:
            body["description"] = self.description
        return body


def _as_date(value: Any) -> Optional[date]:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value)[:10])


def _as_str(value: Any) -> Optional[str]:
    return None if value is None else str(value)
