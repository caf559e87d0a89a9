"""
Export Renderer - Turns the current report into a downloadable artifact.

Flow for PDF and Excel:
    store payload -> table extraction -> branding + logo -> ExportDocument
    -> format exporter -> bytes -> download sink

CSV skips branding entirely and only supports the typed column sets.

The document is always built completely in memory before the sink is
called; a failure while rendering raises ExportError and nothing reaches
the sink.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Union

from cache.branding_cache import BrandingCache
from config.branding import CompanyInfo
from config.settings import ExportSettings
from export.csv_exporter import CSVReportExporter
from export.document import (
    ExportDocument,
    metadata_lines,
    override_entries,
    report_title,
    summary_entries,
    totals_entries,
)
from export.download import DownloadSink, ExportArtifact, FileSystemDownloadSink
from export.excel_exporter import ExcelReportExporter
from export.logo import LogoImage, LogoLoader
from export.pdf_exporter import PDFReportExporter
from export.tables import generic_table, resolve_table_data
from reports.exceptions import ExportError, LogoError, MissingReportError
from reports.models import Filters, ReportType
from reports.store import ReportStore
from services.logging_config import log_performance

logger = logging.getLogger(__name__)

NO_REPORT_MESSAGE = "No report data available to export. Generate a report first."


class ExportFormat(str, Enum):
    """Supported export formats."""
    PDF = "pdf"
    EXCEL = "excel"
    CSV = "csv"

    @property
    def extension(self) -> str:
        return FORMAT_EXTENSIONS[self]

    @property
    def media_type(self) -> str:
        return FORMAT_MEDIA_TYPES[self]


FORMAT_EXTENSIONS = {
    ExportFormat.PDF: "pdf",
    ExportFormat.EXCEL: "xlsx",
    ExportFormat.CSV: "csv",
}

FORMAT_MEDIA_TYPES = {
    ExportFormat.PDF: "application/pdf",
    ExportFormat.EXCEL: "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    ExportFormat.CSV: "text/csv",
}


def coerce_report_type(value: Union[ReportType, str]) -> Union[ReportType, str]:
    """Known type names become ReportType; anything else stays a plain string."""
    if isinstance(value, ReportType):
        return value
    try:
        return ReportType(value)
    except ValueError:
        return str(value)


@dataclass(frozen=True)
class ExportRequest:
    """
    One export action.

    ``report_type`` names the payload shape explicitly. Unknown type names
    are kept as strings and export the "no data" placeholder unless the
    payload carries a generic ``data`` list. ``report_id`` refers
    to the currently generated report, whose type is then inferred. With
    neither set, the current report is exported. ``filters`` of None means
    "use the filters the report was generated with".
    """
    format: ExportFormat
    report_type: Optional[Union[ReportType, str]] = None
    report_id: Optional[str] = None
    filters: Optional[Filters] = None

    def __post_init__(self):
        object.__setattr__(self, "format", ExportFormat(self.format))
        if self.report_type is not None:
            object.__setattr__(self, "report_type", coerce_report_type(self.report_type))

    @classmethod
    def from_args(cls, *args: Any) -> "ExportRequest":
        """
        Build a request from the older positional calling convention.

        ``(format, report_type, filters)`` when the first argument is a
        format name, otherwise ``(report_id, format)``.
        """
        if not args:
            raise ValueError("Export needs at least a format")

        first = getattr(args[0], "value", args[0])
        if first in {fmt.value for fmt in ExportFormat}:
            report_type = args[1] if len(args) > 1 else None
            filters = args[2] if len(args) > 2 else None
            if isinstance(filters, dict):
                filters = Filters.from_dict(filters)
            return cls(format=ExportFormat(first), report_type=report_type or None, filters=filters)

        if len(args) < 2:
            raise ValueError(f"Unknown export format: {first}")
        return cls(format=ExportFormat(getattr(args[1], "value", args[1])), report_id=str(first))


def build_filename(report_type: Union[ReportType, str], export_format: ExportFormat, on: datetime) -> str:
    """``{type}_report_{YYYY-MM-DD}.{ext}``"""
    type_name = getattr(report_type, "value", report_type)
    return f"{type_name}_report_{on.date().isoformat()}.{ExportFormat(export_format).extension}"


class ExportRenderer:
    """
    Render the current report to PDF, Excel or CSV.

    Usage:
        renderer = ExportRenderer(store, branding_cache, logo_loader, sink)
        ok = await renderer.export_report(ExportRequest(ExportFormat.PDF, ReportType.FINANCIAL))
    """

    def __init__(
        self,
        store: ReportStore,
        branding: BrandingCache,
        logo_loader: Optional[LogoLoader] = None,
        sink: Optional[DownloadSink] = None,
        settings: Optional[ExportSettings] = None,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.store = store
        self.branding = branding
        self.logo_loader = logo_loader
        self.settings = settings or ExportSettings()
        self.sink = sink or FileSystemDownloadSink(self.settings.download_dir)
        self._clock = clock

        self.pdf_exporter = PDFReportExporter(self.settings)
        self.excel_exporter = ExcelReportExporter(self.settings)
        self.csv_exporter = CSVReportExporter(self.settings)

    # =========================================================================
    # PUBLIC API
    # =========================================================================

    @log_performance("export_report")
    async def export_report(self, request: ExportRequest) -> bool:
        """
        Export the current report.

        Returns False (with ``store.error`` set) when there is no report to
        export; no branding fetch and no download happen in that case.

        Raises:
            ExportError: rendering or saving failed
        """
        try:
            payload, report_type = self._resolve_current(request)
        except MissingReportError as e:
            logger.warning(f"Export skipped: {e}")
            self.store.set_error(str(e))
            return False

        filters = self._resolve_filters(request)
        artifact = await self._render(request.format, report_type, payload, filters)
        self.sink.save(artifact)
        logger.info(f"Exported {artifact.filename} ({artifact.size} bytes)")
        return True

    async def export_report_args(self, *args: Any) -> bool:
        """Positional form: ``(format, type, filters)`` or ``(report_id, format)``."""
        return await self.export_report(ExportRequest.from_args(*args))

    @log_performance("export_data")
    async def export_data(
        self,
        export_format: ExportFormat,
        report_type: Union[ReportType, str],
        records: List[Dict[str, Any]],
        filters: Optional[Filters] = None,
        title: Optional[str] = None,
        totals: Optional[Dict[str, Any]] = None,
    ) -> ExportArtifact:
        """
        Export an arbitrary list of records without touching the store.

        Columns come from the first record's keys; the CSV path writes the
        same generic table. PDF and Excel add a summary block: ``totals``
        when given (label -> value), otherwise a record count and a total
        for every money column.
        """
        export_format = ExportFormat(export_format)
        table = generic_table(records, self.settings.date_format)
        generated_at = self._clock()
        type_name = getattr(report_type, "value", report_type)

        try:
            if export_format is ExportFormat.CSV:
                content = self.csv_exporter.render_table(table)
            else:
                document = await self._compose_document(
                    type_name, {"data": records}, filters or Filters(), generated_at
                )
                document.table = table
                document.summary = (
                    override_entries(totals, self.settings.currency_symbol)
                    if totals
                    else totals_entries(table, self.settings.currency_symbol)
                )
                if title:
                    document.title = title
                content = self._render_document(export_format, document)
        except ExportError:
            raise
        except Exception as e:
            logger.error(f"Failed to export {type_name} data as {export_format.value}: {e}")
            raise ExportError(f"Failed to export {type_name} data: {e}") from e

        artifact = ExportArtifact(
            filename=build_filename(type_name, export_format, generated_at),
            content=content,
            media_type=export_format.media_type,
        )
        self.sink.save(artifact)
        return artifact

    # =========================================================================
    # HELPERS
    # =========================================================================

    def _resolve_current(self, request: ExportRequest):
        payload = self.store.current_payload()
        if payload is None:
            raise MissingReportError(NO_REPORT_MESSAGE)

        report = self.store.generated_report
        if request.report_id and report is not None and report.id != request.report_id:
            logger.warning(
                f"Requested report {request.report_id} is not the current report "
                f"({report.id}); exporting the current report"
            )

        report_type = request.report_type or self.store.current_type() or ReportType.CUSTOM
        return payload, report_type

    def _resolve_filters(self, request: ExportRequest) -> Filters:
        if request.filters is not None:
            return request.filters
        if self.store.generated_report is not None:
            return self.store.generated_report.filters
        return Filters()

    async def _render(
        self,
        export_format: ExportFormat,
        report_type: Union[ReportType, str],
        payload: Dict[str, Any],
        filters: Filters,
    ) -> ExportArtifact:
        generated_at = self._clock()
        type_name = getattr(report_type, "value", report_type)
        try:
            if export_format is ExportFormat.CSV:
                content = self.csv_exporter.render(type_name, payload)
            else:
                document = await self._compose_document(type_name, payload, filters, generated_at)
                content = self._render_document(export_format, document)
        except ExportError:
            raise
        except Exception as e:
            logger.error(f"Failed to export {type_name} report as {export_format.value}: {e}")
            raise ExportError(f"Failed to export {type_name} report: {e}") from e

        return ExportArtifact(
            filename=build_filename(type_name, export_format, generated_at),
            content=content,
            media_type=export_format.media_type,
        )

    def _render_document(self, export_format: ExportFormat, document: ExportDocument) -> bytes:
        if export_format is ExportFormat.PDF:
            return self.pdf_exporter.render(document)
        return self.excel_exporter.render(document)

    async def _compose_document(
        self,
        report_type: Union[ReportType, str],
        payload: Dict[str, Any],
        filters: Filters,
        generated_at: datetime,
    ) -> ExportDocument:
        company = await self.branding.get_company_info()
        logo = await self._load_logo(company)
        currency = self.settings.currency_symbol
        type_name = getattr(report_type, "value", report_type)
        table = resolve_table_data(type_name, payload, self.settings.date_format)

        return ExportDocument(
            report_type=type_name,
            title=report_title(type_name),
            company=company,
            generated_at=generated_at,
            table=table,
            metadata_lines=metadata_lines(
                generated_at,
                filters,
                datetime_format=self.settings.datetime_format,
                date_format=self.settings.date_format,
            ),
            # Backend summary wins; otherwise total the money columns
            summary=summary_entries(payload, currency) or totals_entries(table, currency),
            logo=logo,
        )

    async def _load_logo(self, company: CompanyInfo) -> Optional[LogoImage]:
        if not company.logo or self.logo_loader is None:
            return None
        try:
            return await self.logo_loader.load(company.logo)
        except LogoError as e:
            logger.warning(f"Continuing without logo: {e}")
            return None
