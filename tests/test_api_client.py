"""Tests for the backend API client and response envelope."""

import json
import logging

import httpx
import pytest

from config.branding import DEFAULT_COMPANY
from reports.exceptions import ApiClientError, ApiResponseError
from reports.models import CustomReportRequest, Filters, ReportType
from services.api_client import ApiEnvelope, ReportsApiClient


class TestApiEnvelope:
    """Tests for envelope normalization."""

    def test_standard_envelope(self):
        envelope = ApiEnvelope.model_validate({"success": True, "data": {"a": 1}})
        assert envelope.require_object() == {"a": 1}

    @pytest.mark.parametrize("key", ["report", "result", "reportData"])
    def test_legacy_keys(self, key):
        envelope = ApiEnvelope.model_validate({"success": True, key: {"a": 1}})
        assert envelope.require_object() == {"a": 1}

    def test_bare_payload(self):
        envelope = ApiEnvelope.model_validate({"transactions": [], "summary": {}})
        assert envelope.require_object() == {"transactions": [], "summary": {}}

    def test_bare_list(self):
        envelope = ApiEnvelope.model_validate([{"id": 1}])
        assert envelope.require_list() == [{"id": 1}]

    def test_unsuccessful_envelope_raises(self):
        envelope = ApiEnvelope.model_validate({"success": False, "error": "Report failed"})
        with pytest.raises(ApiResponseError, match="Report failed"):
            envelope.require_object()

    def test_missing_data_raises(self):
        envelope = ApiEnvelope.model_validate({"success": True, "message": "ok"})
        with pytest.raises(ApiResponseError):
            envelope.require_object()

    def test_scalar_body_rejected(self):
        with pytest.raises(ValueError):
            ApiEnvelope.model_validate("not json object")


class TestFetchReport:
    """Tests for canned report endpoints."""

    @pytest.mark.asyncio
    async def test_sends_filters_as_query(self, make_api_client, financial_payload):
        client = make_api_client({
            "/reports/financial": {"success": True, "data": financial_payload},
        })

        payload = await client.fetch_report(
            ReportType.FINANCIAL,
            Filters.from_dict({"period": "monthly", "start_date": "2024-03-01", "groupBy": "property"}),
        )

        assert payload == financial_payload
        request = client.recorder.requests[0]
        assert request.method == "GET"
        assert request.url.params["period"] == "monthly"
        assert request.url.params["start_date"] == "2024-03-01"
        assert request.url.params["groupBy"] == "property"
        assert "end_date" not in request.url.params
        assert request.headers["Authorization"] == "Bearer test-token"

    @pytest.mark.asyncio
    async def test_payment_endpoint_is_plural(self, make_api_client, payment_payload):
        client = make_api_client({"/reports/payments": {"success": True, "data": payment_payload}})
        assert await client.fetch_report(ReportType.PAYMENT, Filters()) == payment_payload

    @pytest.mark.asyncio
    async def test_custom_type_has_no_canned_endpoint(self, make_api_client):
        client = make_api_client({})
        with pytest.raises(ValueError):
            await client.fetch_report(ReportType.CUSTOM, Filters())

    @pytest.mark.asyncio
    async def test_http_error_status(self, make_api_client):
        client = make_api_client({
            "/reports/occupancy": lambda request: httpx.Response(
                500, json={"success": False, "message": "Database unavailable"}
            ),
        })

        with pytest.raises(ApiClientError) as exc_info:
            await client.fetch_report(ReportType.OCCUPANCY, Filters())

        assert exc_info.value.status_code == 500
        assert "Database unavailable" in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_http_error_is_logged(self, make_api_client, caplog):
        client = make_api_client({
            "/reports/occupancy": lambda request: httpx.Response(503, json={"error": "Maintenance"}),
        })

        with caplog.at_level(logging.ERROR, logger="services.api_client"):
            with pytest.raises(ApiClientError):
                await client.fetch_report(ReportType.OCCUPANCY, Filters())

        [record] = caplog.records
        assert record.msg == "Backend error GET /reports/occupancy: Maintenance"

    @pytest.mark.asyncio
    async def test_transport_error(self, make_api_client):
        def fail(request):
            raise httpx.ConnectError("connection refused", request=request)

        client = make_api_client({"/reports/revenue": fail})

        with pytest.raises(ApiClientError, match="Unable to reach backend"):
            await client.fetch_report(ReportType.REVENUE, Filters())

    @pytest.mark.asyncio
    async def test_non_json_body(self, make_api_client):
        client = make_api_client({
            "/reports/financial": lambda request: httpx.Response(200, text="<html>oops</html>"),
        })
        with pytest.raises(ApiResponseError):
            await client.fetch_report(ReportType.FINANCIAL, Filters())


class TestCustomReport:

    @pytest.mark.asyncio
    async def test_posts_request_body(self, make_api_client):
        client = make_api_client({
            "/reports/generate": {"success": True, "report": {"data": [{"tenant": "A"}]}},
        })
        request = CustomReportRequest(title="Arrears", fields={"status": "overdue"})

        payload = await client.generate_custom_report(request)

        assert payload == {"data": [{"tenant": "A"}]}
        sent = client.recorder.requests[0]
        assert sent.method == "POST"
        body = json.loads(sent.content)
        assert body["title"] == "Arrears"
        assert body["type"] == "custom"
        assert body["status"] == "overdue"


class TestListReports:

    @pytest.mark.asyncio
    async def test_parses_and_skips_malformed_rows(self, make_api_client):
        client = make_api_client({
            "/reports": {
                "success": True,
                "data": [
                    {"id": 1, "type": "financial", "title": "March", "start_date": "2024-03-01T00:00:00.000Z"},
                    {"type": "occupancy"},
                    {"id": "b2", "type": "occupancy", "created_at": "2024-03-02T08:00:00"},
                ],
            },
        })

        reports = await client.list_reports()

        assert [report.id for report in reports] == ["1", "b2"]
        assert reports[0].start_date.isoformat() == "2024-03-01"


class TestCompanyInfo:

    @pytest.mark.asyncio
    async def test_company_info(self, make_api_client):
        client = make_api_client({
            "/admin/company-info": {
                "success": True,
                "data": {"name": "Acme", "email": "a@b.c", "phone": None, "logo": "http://cdn.test/logo.png"},
            },
        })

        info = await client.get_company_info()

        assert info.name == "Acme"
        assert info.email == "a@b.c"
        assert info.phone == ""
        assert info.logo == "http://cdn.test/logo.png"

    @pytest.mark.asyncio
    async def test_missing_name_uses_default(self, make_api_client):
        client = make_api_client({"/admin/company-info": {"success": True, "data": {"email": "x@y.z"}}})
        info = await client.get_company_info()
        assert info.name == DEFAULT_COMPANY.name

    @pytest.mark.asyncio
    async def test_fetch_bytes(self, make_api_client, png_bytes):
        client = make_api_client({
            "/logo.png": lambda request: httpx.Response(200, content=png_bytes),
        })
        assert await client.fetch_bytes("http://cdn.test/logo.png") == png_bytes


class TestClientLifecycle:

    @pytest.mark.asyncio
    async def test_does_not_close_injected_client(self, make_api_client):
        client = make_api_client({})
        http_client = client.client

        await client.aclose()

        assert http_client.is_closed is False
        await http_client.aclose()

    @pytest.mark.asyncio
    async def test_owned_client_built_from_settings(self, api_settings):
        async with ReportsApiClient(settings=api_settings) as client:
            http_client = client.client
            assert str(http_client.base_url).startswith("http://backend.test")
            assert http_client.headers["Authorization"] == "Bearer test-token"
        assert http_client.is_closed is True
