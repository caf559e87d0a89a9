"""
Backend API client for report aggregation and company settings.

Every JSON response is validated against one envelope schema at this
boundary, so callers receive either a typed result or a typed error:

    {"success": true, "data": {...}}

Older backend routes answer with the payload under ``report`` or ``result``
instead of ``data``, or with the bare payload object. ``ApiEnvelope``
normalizes those shapes once, here, and business logic never has to guess
which key holds the data.
"""

from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Any, Dict, List, Optional

import httpx
from pydantic import BaseModel, ConfigDict, ValidationError, field_validator, model_validator

from config.branding import CompanyInfo
from config.settings import ApiSettings
from reports.exceptions import ApiClientError, ApiResponseError
from reports.models import CustomReportRequest, Filters, ReportSummary, ReportType

logger = logging.getLogger(__name__)

# Alternate keys some routes use instead of "data"
LEGACY_ENVELOPE_KEYS = ("report", "result", "reportData")

REPORT_ENDPOINTS = {
    ReportType.FINANCIAL: "/reports/financial",
    ReportType.OCCUPANCY: "/reports/occupancy",
    ReportType.PAYMENT: "/reports/payments",
    ReportType.REVENUE: "/reports/revenue",
}
CUSTOM_REPORT_ENDPOINT = "/reports/generate"
REPORT_LIST_ENDPOINT = "/reports"
COMPANY_INFO_ENDPOINT = "/admin/company-info"


class ApiEnvelope(BaseModel):
    """Standard backend response envelope."""

    model_config = ConfigDict(extra="allow")

    success: bool = True
    data: Any = None
    message: Optional[str] = None
    error: Optional[str] = None

    @model_validator(mode="before")
    @classmethod
    def normalize_envelope(cls, value: Any) -> Any:
        if isinstance(value, list):
            return {"success": True, "data": value}
        if not isinstance(value, dict):
            raise ValueError("response body must be a JSON object or array")
        if "data" in value:
            return value
        for key in LEGACY_ENVELOPE_KEYS:
            if key in value:
                return {**value, "data": value[key]}
        if "success" not in value:
            # Bare payload object
            return {"success": True, "data": value}
        return value

    @property
    def failure_message(self) -> str:
        return self.error or self.message or "Request was not successful"

    def require_object(self) -> Dict[str, Any]:
        """Return ``data`` as a dict or raise ApiResponseError."""
        if not self.success:
            raise ApiResponseError(self.failure_message)
        if not isinstance(self.data, dict):
            raise ApiResponseError("Response contained no report data")
        return self.data

    def require_list(self) -> List[Any]:
        """Return ``data`` as a list or raise ApiResponseError."""
        if not self.success:
            raise ApiResponseError(self.failure_message)
        if not isinstance(self.data, list):
            raise ApiResponseError("Response contained no list data")
        return self.data


class ReportSummaryModel(BaseModel):
    """One row of the historical report list."""

    model_config = ConfigDict(extra="ignore")

    id: str
    type: str
    title: Optional[str] = None
    created_at: Optional[datetime] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None

    @field_validator("id", mode="before")
    @classmethod
    def coerce_id(cls, value: Any) -> str:
        return str(value)

    @field_validator("start_date", "end_date", mode="before")
    @classmethod
    def trim_timestamp(cls, value: Any) -> Any:
        # Backend serializes DATE columns as midnight timestamps
        if isinstance(value, str) and len(value) > 10:
            return value[:10]
        return value

    def to_summary(self) -> ReportSummary:
        return ReportSummary(
            id=self.id,
            type=self.type,
            title=self.title,
            created_at=self.created_at,
            start_date=self.start_date,
            end_date=self.end_date,
        )


class CompanyInfoModel(BaseModel):
    """Company branding block returned by the settings endpoint."""

    model_config = ConfigDict(extra="ignore")

    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    logo: Optional[str] = None

    def to_company_info(self) -> CompanyInfo:
        return CompanyInfo.from_api(self.model_dump())


class ReportsApiClient:
    """
    Async client for the reporting and settings endpoints.

    Usage:
        async with ReportsApiClient(settings.api) as client:
            payload = await client.fetch_report(ReportType.FINANCIAL, filters)
    """

    def __init__(
        self,
        settings: Optional[ApiSettings] = None,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        self.settings = settings or ApiSettings()
        self._client = http_client
        self._owns_client = http_client is None

    async def __aenter__(self) -> "ReportsApiClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    @property
    def client(self) -> httpx.AsyncClient:
        if self._client is None:
            headers = {"Accept": "application/json"}
            if self.settings.token:
                headers["Authorization"] = f"Bearer {self.settings.token}"
            self._client = httpx.AsyncClient(
                base_url=self.settings.base_url,
                headers=headers,
                timeout=self.settings.timeout,
            )
        return self._client

    async def aclose(self) -> None:
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    async def _send(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        try:
            response = await self.client.request(method, path, **kwargs)
        except httpx.HTTPError as exc:
            logger.error(f"Backend request failed: {method} {path} ({exc})")
            raise ApiClientError(f"Unable to reach backend: {exc}") from exc

        if response.status_code >= 400:
            message = f"Backend returned HTTP {response.status_code}"
            try:
                body = response.json()
                if isinstance(body, dict):
                    message = body.get("error") or body.get("message") or message
            except ValueError:
                pass
            logger.error(f"Backend error {method} {path}: {message}")
            raise ApiClientError(message, status_code=response.status_code)

        return response

    async def _request(self, method: str, path: str, **kwargs: Any) -> ApiEnvelope:
        response = await self._send(method, path, **kwargs)
        try:
            return ApiEnvelope.model_validate(response.json())
        except ValueError as exc:
            # ValidationError is a ValueError; so is a JSON decode error
            raise ApiResponseError(f"Malformed response from {path}: {exc}") from exc

    async def fetch_report(self, report_type: ReportType, filters: Filters) -> Dict[str, Any]:
        """Fetch the raw payload for one of the canned report types."""
        endpoint = REPORT_ENDPOINTS.get(report_type)
        if endpoint is None:
            raise ValueError(f"No canned endpoint for report type {report_type.value!r}")

        envelope = await self._request("GET", endpoint, params=filters.to_params())
        return envelope.require_object()

    async def generate_custom_report(self, request: CustomReportRequest) -> Dict[str, Any]:
        """Ask the backend to build a user-defined report."""
        envelope = await self._request("POST", CUSTOM_REPORT_ENDPOINT, json=request.to_body())
        return envelope.require_object()

    async def list_reports(self) -> List[ReportSummary]:
        """Historical report metadata, newest first."""
        envelope = await self._request("GET", REPORT_LIST_ENDPOINT)
        summaries = []
        for row in envelope.require_list():
            try:
                summaries.append(ReportSummaryModel.model_validate(row).to_summary())
            except ValidationError as exc:
                logger.warning(f"Skipping malformed report list entry: {exc}")
        return summaries

    async def get_company_info(self) -> CompanyInfo:
        """Company branding from the settings endpoint."""
        envelope = await self._request("GET", COMPANY_INFO_ENDPOINT)
        data = envelope.require_object()
        try:
            return CompanyInfoModel.model_validate(data).to_company_info()
        except ValidationError as exc:
            raise ApiResponseError(f"Invalid company info: {exc}") from exc

    async def fetch_bytes(self, url: str) -> bytes:
        """Download a binary resource such as the company logo."""
        response = await self._send("GET", url)
        return response.content
