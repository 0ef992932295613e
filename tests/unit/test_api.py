"""Unit tests for the HTTP surface"""

import pytest
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock
import sys

from fastapi.testclient import TestClient

# Add project root to path
project_root = Path(__file__).parent.parent.parent
sys.path.insert(0, str(project_root))

from browser_fakes import CONFIRMED_TEXT, VALID_URL, FakeDriver, FakePage
from src.analytics.metrics import ForwardingMetrics
from src.api import server as server_module
from src.api.server import create_app
from src.browser.launcher import BrowserLauncher
from src.forwarding.service import ForwardingService


def make_client(settings, driver=None, **overrides) -> TestClient:
    settings = settings.model_copy(update=overrides)
    metrics = ForwardingMetrics()
    driver = driver or FakeDriver(page_factory=lambda: FakePage(text=CONFIRMED_TEXT))
    launcher = BrowserLauncher(settings, driver=driver, metrics=metrics)
    service = ForwardingService(settings, launcher=launcher, metrics=metrics)
    return TestClient(create_app(settings, service=service))


class TestAcceptForwardingEndpoint:
    """Test POST /accept-forwarding"""

    def test_success(self, settings):
        client = make_client(settings)

        response = client.post("/accept-forwarding", json={"url": VALID_URL})

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["alreadyConfirmed"] is True
        assert body["url"] == VALID_URL
        assert body["responseTime"] >= 0
        assert body["requestId"] == response.headers["x-request-id"]
        assert "timestamp" in body

    def test_request_id_echoed(self, settings):
        client = make_client(settings)

        response = client.post("/accept-forwarding", json={"url": VALID_URL}, headers={"x-request-id": "req-42"})

        assert response.headers["x-request-id"] == "req-42"
        assert response.json()["requestId"] == "req-42"

    def test_failed_result_is_400(self, settings):
        driver = FakeDriver()
        client = make_client(settings, driver=driver)

        response = client.post("/accept-forwarding", json={"url": "https://example.com/not-gmail"})

        assert response.status_code == 400
        assert response.json()["success"] is False
        assert response.json()["message"] == "Invalid Gmail forwarding URL format"
        assert driver.launch_calls == []

    def test_empty_url_is_invalid_format(self, settings):
        driver = FakeDriver()
        client = make_client(settings, driver=driver)

        response = client.post("/accept-forwarding", json={"url": ""})

        assert response.status_code == 400
        assert response.json()["success"] is False
        assert response.json()["message"] == "Invalid Gmail forwarding URL format"
        assert driver.launch_calls == []

    def test_missing_url_is_validation_error(self, settings):
        client = make_client(settings)

        response = client.post("/accept-forwarding", json={}, headers={"x-request-id": "req-7"})

        assert response.status_code == 400
        body = response.json()
        assert body["error"] == "Validation error"
        assert body["details"][0]["field"] == "url"
        assert body["requestId"] == "req-7"

    def test_wrong_type_is_validation_error(self, settings):
        client = make_client(settings)

        response = client.post("/accept-forwarding", json={"url": 42})

        assert response.status_code == 400
        assert response.json()["error"] == "Validation error"

    def test_workflow_task_released_after_request(self, settings):
        """Test the in-flight task registry is emptied once a request finishes"""
        client = make_client(settings)

        client.post("/accept-forwarding", json={"url": VALID_URL})

        assert server_module._background_tasks == set()

    def test_unexpected_exception_is_500(self, settings):
        service = MagicMock(spec=ForwardingService)
        service.accept_forwarding = AsyncMock(side_effect=RuntimeError("boom"))
        client = TestClient(create_app(settings, service=service, metrics=ForwardingMetrics()))

        response = client.post("/accept-forwarding", json={"url": VALID_URL})

        assert response.status_code == 500
        assert response.json()["success"] is False
        assert response.json()["message"] == "Internal server error"


class TestApiKeyAuth:
    """Test optional API key protection"""

    def test_not_required_by_default(self, settings):
        client = make_client(settings)

        assert client.post("/accept-forwarding", json={"url": VALID_URL}).status_code == 200

    def test_missing_key(self, settings):
        client = make_client(settings, api_key_required=True, api_keys=["secret-key-1"])

        response = client.post("/accept-forwarding", json={"url": VALID_URL})

        assert response.status_code == 401

    def test_wrong_key(self, settings):
        client = make_client(settings, api_key_required=True, api_keys=["secret-key-1"])

        response = client.post("/accept-forwarding", json={"url": VALID_URL}, headers={"x-api-key": "nope"})

        assert response.status_code == 403

    def test_valid_key(self, settings):
        client = make_client(settings, api_key_required=True, api_keys=["secret-key-1", "secret-key-2"])

        response = client.post("/accept-forwarding", json={"url": VALID_URL}, headers={"x-api-key": "secret-key-2"})

        assert response.status_code == 200

    def test_health_is_open(self, settings):
        client = make_client(settings, api_key_required=True, api_keys=["secret-key-1"])

        assert client.get("/health").status_code == 200


class TestHealthAndMetrics:
    """Test GET /health and GET /metrics"""

    def test_health(self, settings):
        response = make_client(settings).get("/health")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert body["environment"] == "test"
        assert "system" not in body

    def test_detailed_health(self, settings):
        body = make_client(settings).get("/health", params={"detailed": "true"}).json()

        assert body["system"]["active_browsers"] == 0
        assert "python_version" in body["system"]

    def test_metrics(self, settings):
        client = make_client(settings)
        client.post("/accept-forwarding", json={"url": VALID_URL})

        response = client.get("/metrics")

        assert response.status_code == 200
        assert response.json()["requests_by_status"] == {"success": 1}

    def test_metrics_disabled(self, settings):
        client = make_client(settings, enable_metrics=False)

        assert client.get("/metrics").status_code == 404
