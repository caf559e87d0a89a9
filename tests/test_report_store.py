"""Tests for ReportStore state container and report models."""

from datetime import date, datetime

import pytest

from reports.models import (
    CustomReportRequest,
    DateRange,
    Filters,
    Report,
    ReportSummary,
    ReportType,
)
from reports.store import ReportStore


def _report(report_type=ReportType.FINANCIAL, payload=None) -> Report:
    return Report(
        id="r-1",
        type=report_type,
        title=report_type.title,
        generated_at=datetime(2024, 3, 15),
        payload=payload or {"summary": {}},
    )


class TestReportStoreDefaults:
    """Tests for the initial store state."""

    def test_starts_empty(self, store):
        assert store.reports == []
        assert store.report_data is None
        assert store.generated_report is None
        assert store.loading is False
        assert store.error is None
        assert store.has_report is False

    def test_default_date_range_is_current_month(self, store):
        today = date.today()
        assert store.date_range.start_date == today.replace(day=1)
        assert store.date_range.end_date == today


class TestReportStoreWrites:
    """Tests for the writes made by the aggregator."""

    def test_record_report_sets_both_views(self, store):
        report = _report()
        store.error = "previous failure"

        store.record_report({"summary": {}}, report)

        assert store.report_data == {"summary": {}}
        assert store.generated_report is report
        assert store.error is None
        assert store.has_report is True

    def test_record_failure_clears_display_data(self, store):
        store.record_report({"summary": {}}, _report())

        store.record_failure("Failed to generate financial report: boom")

        assert store.error == "Failed to generate financial report: boom"
        assert store.report_data is None
        assert store.generated_report is None

    def test_record_reports_marks_loaded(self, store):
        store.record_reports([ReportSummary(id="1", type="financial")])
        assert store.reports_loaded is True
        assert len(store.reports) == 1


class TestReportStoreDerived:
    """Tests for derived values."""

    def test_stats_count_by_type(self, store):
        store.record_reports([
            ReportSummary(id="1", type="financial"),
            ReportSummary(id="2", type="financial"),
            ReportSummary(id="3", type="occupancy"),
            ReportSummary(id="4", type="tenant"),
        ])

        stats = store.stats

        assert stats["financial"] == 2
        assert stats["occupancy"] == 1
        assert stats["payment"] == 0
        assert stats["tenant"] == 1
        assert stats["total"] == 4

    def test_current_payload_prefers_raw_data(self, store):
        store.record_report({"raw": True}, _report(payload={"enriched": True}))
        assert store.current_payload() == {"raw": True}

    def test_current_payload_falls_back_to_generated_report(self, store):
        store.generated_report = _report(payload={"enriched": True})
        assert store.current_payload() == {"enriched": True}

    def test_current_type(self, store):
        assert store.current_type() is None
        store.generated_report = _report(ReportType.OCCUPANCY)
        assert store.current_type() is ReportType.OCCUPANCY


class TestReportStoreSetters:
    """Tests for UI-only setters."""

    def test_set_date_range(self, store):
        date_range = DateRange(date(2024, 1, 1), date(2024, 1, 31))
        store.set_date_range(date_range)
        assert store.date_range == date_range

    def test_set_date_range_rejects_inverted_range(self, store):
        with pytest.raises(ValueError):
            store.set_date_range(DateRange(date(2024, 2, 1), date(2024, 1, 1)))

    def test_set_filters_and_errors(self, store):
        store.set_filters(Filters(period="monthly"))
        store.set_error("oops")
        assert store.filters.period == "monthly"
        assert store.error == "oops"

        store.clear_error()
        assert store.error is None

    def test_reset_keeps_history(self, store):
        store.record_reports([ReportSummary(id="1", type="financial")])
        store.record_report({}, _report())
        store.loading = True

        store.reset()

        assert store.has_report is False
        assert store.loading is False
        assert len(store.reports) == 1


class TestFilters:
    """Tests for Filters conversion."""

    def test_from_dict_accepts_both_spellings(self):
        filters = Filters.from_dict({
            "period": "monthly",
            "startDate": "2024-01-01",
            "end_date": "2024-01-31T00:00:00.000Z",
            "propertyId": 7,
            "groupBy": "property",
        })

        assert filters.start_date == date(2024, 1, 1)
        assert filters.end_date == date(2024, 1, 31)
        assert filters.property_id == "7"
        assert filters.group_by == "property"
        assert filters.has_date_range is True

    def test_to_params_omits_unset(self):
        params = Filters(period="monthly", group_by="month").to_params()
        assert params == {"period": "monthly", "groupBy": "month"}

    def test_from_empty_dict(self):
        assert Filters.from_dict({}) == Filters()
        assert Filters.from_dict(None).has_date_range is False


class TestModels:

    def test_report_type_title(self):
        assert ReportType.FINANCIAL.title == "Financial Report"
        assert ReportType("payment") is ReportType.PAYMENT

    def test_report_is_immutable(self):
        report = _report()
        with pytest.raises(AttributeError):
            report.title = "changed"

    def test_with_payload_returns_copy(self):
        report = _report(payload={"a": 1})
        updated = report.with_payload({"b": 2})
        assert report.payload == {"a": 1}
        assert updated.payload == {"b": 2}

    def test_report_summary_property(self):
        assert _report(payload={"summary": {"x": 1}}).summary == {"x": 1}
        assert _report(payload={"summary": "bad"}).summary == {}

    def test_custom_request_body(self):
        request = CustomReportRequest(
            title="Arrears by block",
            description="Tenants in arrears",
            filters=Filters(property_id="3"),
            fields={"min_balance": 1000},
        )

        body = request.to_body()

        assert body == {
            "min_balance": 1000,
            "property_id": "3",
            "type": "custom",
            "title": "Arrears by block",
            "description": "Tenants in arrears",
        }
