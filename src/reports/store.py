"""
Report Store - State container for the reporting screen.

Holds the last generated report, the historical report list and the
loading/error flags the presentation layer renders. The store performs no
I/O: ReportAggregator writes generation results into it, and the setters
below cover UI-only fields.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from reports.models import DateRange, Filters, Report, ReportSummary, ReportType


@dataclass
class ReportStore:
    """Mutable reporting state shared by the aggregator and the exporter."""

    reports: List[ReportSummary] = field(default_factory=list)
    report_data: Optional[Dict[str, Any]] = None
    generated_report: Optional[Report] = None
    date_range: DateRange = field(default_factory=DateRange.current_month)
    filters: Filters = field(default_factory=Filters)
    loading: bool = False
    error: Optional[str] = None
    reports_loaded: bool = False

    @property
    def has_report(self) -> bool:
        return self.report_data is not None or self.generated_report is not None

    @property
    def stats(self) -> Dict[str, int]:
        """Count of historical reports by type."""
        counts = Counter(summary.type for summary in self.reports)
        stats = {report_type.value: counts.get(report_type.value, 0) for report_type in ReportType}
        # Types the backend knows about but this client does not
        for report_type, count in counts.items():
            stats.setdefault(report_type, count)
        stats["total"] = len(self.reports)
        return stats

    def current_payload(self) -> Optional[Dict[str, Any]]:
        """Payload used for export: raw data first, display report second."""
        if self.report_data is not None:
            return self.report_data
        if self.generated_report is not None:
            return self.generated_report.payload
        return None

    def current_type(self) -> Optional[ReportType]:
        if self.generated_report is not None:
            return self.generated_report.type
        return None

    # -- Written by ReportAggregator --------------------------------------

    def record_report(self, raw_payload: Dict[str, Any], report: Report) -> None:
        self.report_data = raw_payload
        self.generated_report = report
        self.error = None

    def record_failure(self, message: str) -> None:
        self.error = message
        self.report_data = None
        self.generated_report = None

    def record_reports(self, reports: List[ReportSummary]) -> None:
        self.reports = list(reports)
        self.reports_loaded = True

    # -- UI setters --------------------------------------------------------

    def set_date_range(self, date_range: DateRange) -> None:
        if date_range.start_date > date_range.end_date:
            raise ValueError("start_date must not be after end_date")
        self.date_range = date_range

    def set_filters(self, filters: Filters) -> None:
        self.filters = filters

    def set_error(self, message: str) -> None:
        self.error = message

    def clear_error(self) -> None:
        self.error = None

    def reset(self) -> None:
        """Drop the generated report, keeping the historical list."""
        self.report_data = None
        self.generated_report = None
        self.loading = False
        self.error = None
