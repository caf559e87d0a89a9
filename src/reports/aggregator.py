"""
Report Aggregator - Fetch report data from the backend and derive metrics.

One operation per report type. Each operation:

1. Marks the store as loading
2. Calls the backend endpoint for the type with the filters
3. Enriches financial payloads with derived metrics
4. Stamps type, generation time and the input filters on a Report
5. Stores the raw payload (for export) and the Report (for display)
6. On any failure records an error and clears the display data

Loading is always cleared on exit. Concurrent calls are not fenced: the
last response to resolve wins.
"""

from __future__ import annotations

import logging
import uuid
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional

from reports.exceptions import ReportingError
from reports.metrics import enrich_financial_payload
from reports.models import CustomReportRequest, Filters, Report, ReportSummary, ReportType
from reports.store import ReportStore
from services.api_client import ReportsApiClient
from services.logging_config import get_logger, operation_context

logger = logging.getLogger(__name__)


class ReportAggregator:
    """
    Generate reports into a ReportStore.

    Usage:
        aggregator = ReportAggregator(api_client, store)
        report = await aggregator.generate_financial_report(Filters(period="monthly"))
        if report is None:
            show_error(store.error)
    """

    def __init__(
        self,
        client: ReportsApiClient,
        store: ReportStore,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.client = client
        self.store = store
        self._clock = clock

    async def generate_financial_report(self, filters: Optional[Filters] = None) -> Optional[Report]:
        return await self._generate(ReportType.FINANCIAL, filters)

    async def generate_occupancy_report(self, filters: Optional[Filters] = None) -> Optional[Report]:
        return await self._generate(ReportType.OCCUPANCY, filters)

    async def generate_payment_report(self, filters: Optional[Filters] = None) -> Optional[Report]:
        return await self._generate(ReportType.PAYMENT, filters)

    async def generate_revenue_report(self, filters: Optional[Filters] = None) -> Optional[Report]:
        return await self._generate(ReportType.REVENUE, filters)

    async def generate_custom_report(self, request: CustomReportRequest) -> Optional[Report]:
        """Generate a report from user-authored title, description and criteria."""
        return await self._generate(ReportType.CUSTOM, request.filters, custom=request)

    async def generate_report(self, report_type: ReportType, filters: Optional[Filters] = None) -> Optional[Report]:
        """Dispatch by type; custom reports need generate_custom_report."""
        report_type = ReportType(report_type)
        if report_type is ReportType.CUSTOM:
            raise ValueError("Custom reports require a CustomReportRequest")
        return await self._generate(report_type, filters)

    async def load_reports(self, force: bool = False) -> List[ReportSummary]:
        """
        Fill the historical report list.

        Fetched once; pass ``force=True`` to refetch. Failures leave the
        previous list in place and set the store error.
        """
        if self.store.reports_loaded and not force:
            return self.store.reports

        self.store.loading = True
        try:
            reports = await self.client.list_reports()
            self.store.record_reports(reports)
            logger.info(f"Loaded {len(reports)} historical reports")
        except ReportingError as e:
            logger.error(f"Error loading reports: {e}")
            self.store.set_error(f"Failed to load reports: {e}")
        finally:
            self.store.loading = False
        return self.store.reports

    async def _generate(
        self,
        report_type: ReportType,
        filters: Optional[Filters],
        custom: Optional[CustomReportRequest] = None,
    ) -> Optional[Report]:
        filters = filters if filters is not None else self.store.filters

        with operation_context():
            log = get_logger(__name__, report_type=report_type.value)
            self.store.loading = True
            try:
                if custom is not None:
                    raw_payload = await self.client.generate_custom_report(custom)
                else:
                    raw_payload = await self.client.fetch_report(report_type, filters)

                report = self._build_report(report_type, raw_payload, filters, custom)
                self.store.record_report(raw_payload, report)
                log.info("Report generated", extra={'extra_data': {'report_id': report.id}})
                return report

            except Exception as e:
                log.error(f"Error generating {report_type.value} report: {e}")
                self.store.record_failure(f"Failed to generate {report_type.value} report: {e}")
                return None

            finally:
                self.store.loading = False

    def _build_report(
        self,
        report_type: ReportType,
        raw_payload: Dict[str, Any],
        filters: Filters,
        custom: Optional[CustomReportRequest],
    ) -> Report:
        if report_type is ReportType.FINANCIAL:
            payload = enrich_financial_payload(raw_payload)
        else:
            payload = dict(raw_payload)

        title = raw_payload.get("title") or report_type.title
        description = raw_payload.get("description")
        if custom is not None:
            title = custom.title or title
            description = custom.description or description

        report_id = raw_payload.get("id") or raw_payload.get("report_id") or uuid.uuid4().hex

        return Report(
            id=str(report_id),
            type=report_type,
            title=title,
            description=description,
            period=filters.period or raw_payload.get("period"),
            generated_at=self._clock(),
            payload=payload,
            filters=filters,
        )
