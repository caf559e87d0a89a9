"""
Pytest fixtures for export functionality tests.

Provides:
- Branded export documents
- Branding caches backed by mock fetchers
- In-memory download sinks
"""

from unittest.mock import AsyncMock

import pytest

from cache.branding_cache import BrandingCache
from export.document import ExportDocument, metadata_lines, summary_entries
from export.download import MemoryDownloadSink
from export.tables import resolve_table_data
from reports.models import Filters


@pytest.fixture
def occupancy_document(company, fixed_now, occupancy_payload):
    return ExportDocument(
        report_type="occupancy",
        title="Occupancy Report",
        company=company,
        generated_at=fixed_now,
        table=resolve_table_data("occupancy", occupancy_payload),
        metadata_lines=metadata_lines(fixed_now, Filters(period="monthly")),
    )


@pytest.fixture
def financial_document(company, fixed_now, financial_payload):
    return ExportDocument(
        report_type="financial",
        title="Financial Report",
        company=company,
        generated_at=fixed_now,
        table=resolve_table_data("financial", financial_payload),
        metadata_lines=metadata_lines(fixed_now, Filters()),
        summary=summary_entries(financial_payload),
    )


@pytest.fixture
def empty_document(company, fixed_now):
    return ExportDocument(
        report_type="custom",
        title="Custom Report",
        company=company,
        generated_at=fixed_now,
        table=None,
        metadata_lines=metadata_lines(fixed_now, Filters()),
    )


@pytest.fixture
def company_fetcher(company):
    return AsyncMock(return_value=company)


@pytest.fixture
def branding_cache(company_fetcher, fake_clock):
    return BrandingCache(company_fetcher, clock=fake_clock)


@pytest.fixture
def memory_sink():
    return MemoryDownloadSink()
