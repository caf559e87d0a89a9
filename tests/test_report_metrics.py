"""Tests for derived financial report metrics."""

import pytest

from reports.metrics import (
    compute_growth_rate,
    compute_overdue,
    enrich_financial_payload,
    first_present,
    to_number,
)


class TestToNumber:
    """Tests for money-like value parsing."""

    @pytest.mark.parametrize("value,expected", [
        (1500, 1500.0),
        (12.5, 12.5),
        ("15000", 15000.0),
        ("15,000", 15000.0),
        ("KSh 2,500.50", 2500.5),
        ("-300", -300.0),
    ])
    def test_parses_numbers_and_strings(self, value, expected):
        assert to_number(value) == expected

    @pytest.mark.parametrize("value", [None, "", "abc", "1.2.3", True, [], {}])
    def test_unparsable_values_are_zero(self, value):
        """Anything that is not a number counts as 0."""
        assert to_number(value) == 0.0


class TestGrowthRate:
    """Tests for (current - previous) / previous * 100."""

    def test_growth_from_previous(self):
        assert compute_growth_rate(150000, 120000) == pytest.approx(25.0)

    def test_decline_is_negative(self):
        assert compute_growth_rate(90, 100) == pytest.approx(-10.0)

    def test_previous_absent_is_zero(self):
        assert compute_growth_rate(150000, None) == 0

    def test_previous_zero_is_zero(self):
        assert compute_growth_rate(150000, 0) == 0

    def test_string_amounts(self):
        assert compute_growth_rate("2,000", "1,000") == pytest.approx(100.0)

    @pytest.mark.parametrize("current,previous", [
        (100, 80), (0, 50), (123.45, 67.8), (-10, 40),
    ])
    def test_matches_formula(self, current, previous):
        assert compute_growth_rate(current, previous) == pytest.approx(
            (current - previous) / previous * 100
        )


class TestOverdue:
    """Tests for overdue transaction totals."""

    def test_scenario_one_pending(self):
        """1000 completed + 500 pending -> one overdue payment of 500."""
        transactions = [
            {"amount": 1000, "status": "completed"},
            {"amount": 500, "status": "pending"},
        ]
        count, amount = compute_overdue(transactions)
        assert count == 1
        assert amount == 500

    def test_unparsable_amount_counts_as_zero(self):
        transactions = [
            {"amount": "n/a", "status": "failed"},
            {"amount": "250", "status": "pending"},
        ]
        assert compute_overdue(transactions) == (2, 250.0)

    def test_missing_status_is_overdue(self):
        assert compute_overdue([{"amount": 40}]) == (1, 40.0)

    def test_empty(self):
        assert compute_overdue([]) == (0, 0.0)

    def test_non_dict_entries_skipped(self):
        assert compute_overdue(["junk", None, {"amount": 5, "status": "pending"}]) == (1, 5.0)


class TestEnrichFinancialPayload:
    """Tests for the enriched financial summary."""

    def test_adds_derived_fields(self, financial_payload):
        enriched = enrich_financial_payload(financial_payload)
        summary = enriched["summary"]

        assert summary["growthRate"] == pytest.approx(25.0)
        assert summary["overduePaymentsCount"] == 1
        assert summary["overduePaymentsAmount"] == 500
        assert summary["totalExpenses"] == 40000

    def test_input_is_not_mutated(self, financial_payload):
        enrich_financial_payload(financial_payload)
        assert "growthRate" not in financial_payload["summary"]

    def test_missing_summary_and_transactions(self):
        enriched = enrich_financial_payload({})
        assert enriched["summary"] == {
            "growthRate": 0,
            "overduePaymentsCount": 0,
            "overduePaymentsAmount": 0,
        }

    def test_snake_case_revenue_keys(self):
        enriched = enrich_financial_payload({
            "summary": {"total_revenue": 110, "previous_revenue": 100},
        })
        assert enriched["summary"]["growthRate"] == pytest.approx(10.0)


class TestFirstPresent:

    def test_returns_first_non_none(self):
        assert first_present({"a": None, "b": 0, "c": 1}, "a", "b", "c") == 0

    def test_none_when_absent(self):
        assert first_present({}, "a", "b") is None
