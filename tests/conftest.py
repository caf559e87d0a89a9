"""Pytest configuration and fixtures for test suite."""

import io
import sys
from datetime import datetime
from pathlib import Path
from typing import Any, Callable, Dict, List

import httpx
import pytest

# Add src to path for imports
src_path = Path(__file__).parent.parent / "src"
if str(src_path) not in sys.path:
    sys.path.insert(0, str(src_path))

from config.branding import CompanyInfo
from config.settings import ApiSettings, ExportSettings
from reports.models import Filters
from reports.store import ReportStore
from services.api_client import ReportsApiClient


FIXED_NOW = datetime(2024, 3, 15, 10, 30)


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class RecordingTransport:
    """
    httpx.MockTransport wrapper that records every request.

    ``routes`` maps a URL path to either a JSON-able body (served with
    status 200) or a callable taking the request and returning a Response.
    """

    def __init__(self, routes: Dict[str, Any]):
        self.routes = routes
        self.requests: List[httpx.Request] = []
        self.transport = httpx.MockTransport(self._handle)

    def _handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        route = self.routes.get(request.url.path)
        if route is None:
            return httpx.Response(404, json={"success": False, "error": "Not found"})
        if callable(route):
            return route(request)
        return httpx.Response(200, json=route)

    def calls_to(self, path: str) -> List[httpx.Request]:
        return [request for request in self.requests if request.url.path == path]


# =============================================================================
# PAYLOADS
# =============================================================================

@pytest.fixture
def financial_payload() -> Dict[str, Any]:
    return {
        "summary": {
            "totalRevenue": 150000,
            "previousRevenue": 120000,
            "totalExpenses": 40000,
            "netIncome": 110000,
            "profitMargin": 73.3,
        },
        "transactions": [
            {
                "payment_date": "2024-03-01T09:15:00.000Z",
                "tenant_name": "Jane Wanjiru",
                "property_name": "Sunrise Apartments",
                "amount": 1000,
                "status": "completed",
            },
            {
                "payment_date": "2024-03-05",
                "tenant_name": "Peter Otieno",
                "property_name": "Sunrise Apartments",
                "amount": 500,
                "status": "pending",
            },
        ],
        "expenses": [
            {"expense_type": "maintenance", "total_amount": 25000, "count": 3},
        ],
    }


@pytest.fixture
def occupancy_payload() -> Dict[str, Any]:
    return {
        "properties": [
            {
                "name": "A",
                "total_units": 10,
                "occupied_units": 7,
                "vacant_units": 3,
                "occupancy_rate": 70,
            },
        ],
    }


@pytest.fixture
def payment_payload() -> Dict[str, Any]:
    return {
        "payments": [
            {
                "payment_date": "2024-03-02",
                "tenant_name": "Jane Wanjiru",
                "amount": 15000,
                "payment_method": "mpesa",
                "status": "completed",
            },
        ],
        "summary": {"totalCollected": 15000, "collectionRate": 92.5},
    }


@pytest.fixture
def revenue_payload() -> Dict[str, Any]:
    return {
        "revenue": {"totalRevenue": 300000, "averageMonthly": 100000, "growthRate": 4.2},
        "breakdown": [
            {"period": "2024-01", "rentRevenue": 90000, "otherRevenue": 5000, "totalRevenue": 95000, "growth": 0},
            {"period": "2024-02", "rentRevenue": 95000, "otherRevenue": 4000, "totalRevenue": 99000, "growth": 4.2},
        ],
    }


# =============================================================================
# COLLABORATORS
# =============================================================================

@pytest.fixture
def fixed_now() -> datetime:
    return FIXED_NOW


@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def company() -> CompanyInfo:
    return CompanyInfo(
        name="Acme Properties",
        email="info@acme.co.ke",
        phone="+254700000000",
        address="Moi Avenue, Nairobi",
    )


@pytest.fixture
def store() -> ReportStore:
    return ReportStore()


@pytest.fixture
def export_settings(tmp_path) -> ExportSettings:
    return ExportSettings(download_dir=tmp_path / "downloads")


@pytest.fixture
def api_settings() -> ApiSettings:
    return ApiSettings(base_url="http://backend.test", token="test-token")


@pytest.fixture
def make_api_client(api_settings) -> Callable[[Dict[str, Any]], ReportsApiClient]:
    """Factory building a ReportsApiClient over a RecordingTransport."""

    def _make(routes: Dict[str, Any]) -> ReportsApiClient:
        recorder = RecordingTransport(routes)
        http_client = httpx.AsyncClient(
            base_url=api_settings.base_url,
            transport=recorder.transport,
            headers={"Authorization": f"Bearer {api_settings.token}"},
        )
        client = ReportsApiClient(settings=api_settings, http_client=http_client)
        client.recorder = recorder
        return client

    return _make


@pytest.fixture
def png_bytes() -> bytes:
    """A small valid PNG logo."""
    from PIL import Image

    output = io.BytesIO()
    Image.new("RGB", (64, 48), (200, 30, 30)).save(output, format="PNG")
    return output.getvalue()


@pytest.fixture
def empty_filters() -> Filters:
    return Filters()
