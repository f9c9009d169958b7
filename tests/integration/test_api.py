"""HTTP-level tests for the /api/fortune endpoint using FastAPI's TestClient."""

from datetime import datetime, timezone

import pytest
from fastapi.testclient import TestClient

from fortune_report.core.errors import ConfigError, UpstreamError
from fortune_report.main import create_app
from fortune_report.routers.fortune import get_report_service
from fortune_report.services.fortune import FortuneReportService


@pytest.fixture
def app(settings):
    return create_app(settings)


@pytest.fixture
def api(app, service):
    """TestClient with the report service swapped for one backed by the fake client."""
    app.dependency_overrides[get_report_service] = lambda: service
    with TestClient(app) as client:
        yield client
    app.dependency_overrides.clear()


class TestFortuneEndpoint:
    def test_success_returns_html(self, api, fake_client):
        response = api.post("/api/fortune", json={"dob": "08DEC1977", "language": "en"})

        assert response.status_code == 200
        body = response.json()
        assert list(body) == ["html"]
        assert isinstance(body["html"], str) and body["html"]
        fake_client.generate.assert_awaited_once()

    def test_chinese_request(self, api, fake_client):
        response = api.post("/api/fortune", json={"dob": "08dec1977", "language": "zh"})

        assert response.status_code == 200
        prompt = fake_client.generate.await_args.args[0]
        assert "Simplified Chinese" in prompt
        assert "'Do:' and 'Don't:'" in prompt

    @pytest.mark.parametrize("method", ["get", "put", "patch", "delete", "options"])
    def test_wrong_method_is_405(self, api, fake_client, method):
        response = api.request(method.upper(), "/api/fortune")

        assert response.status_code == 405
        assert response.json() == {"error": "Method not allowed. Use POST."}
        assert response.headers["allow"] == "POST"
        fake_client.generate.assert_not_awaited()

    def test_head_is_405(self, api, fake_client):
        response = api.head("/api/fortune")

        assert response.status_code == 405
        assert response.headers["allow"] == "POST"
        fake_client.generate.assert_not_awaited()

    def test_cors_preflight_still_answered(self, api, fake_client):
        response = api.options(
            "/api/fortune",
            headers={"Origin": "https://site.example", "Access-Control-Request-Method": "POST"},
        )

        assert response.status_code == 200
        assert "POST" in response.headers["access-control-allow-methods"]
        fake_client.generate.assert_not_awaited()

    def test_malformed_json_is_400(self, api, fake_client):
        response = api.post(
            "/api/fortune", content=b"{not json", headers={"Content-Type": "application/json"}
        )

        assert response.status_code == 400
        assert response.json() == {"error": "Invalid JSON body."}
        fake_client.generate.assert_not_awaited()

    @pytest.mark.parametrize("payload", [{}, {"dob": ""}, {"dob": "2026"}, {"dob": "08-Dec-1977"}])
    def test_invalid_dob_is_400(self, api, fake_client, payload):
        response = api.post("/api/fortune", json=payload)

        assert response.status_code == 400
        assert "DDMMMYYYY" in response.json()["error"]
        fake_client.generate.assert_not_awaited()

    def test_upstream_error_is_502_without_raw_body(self, api, fake_client):
        fake_client.generate.side_effect = UpstreamError(401, '{"error": "invalid api key sk-test-key"}')

        response = api.post("/api/fortune", json={"dob": "08DEC1977"})

        assert response.status_code == 502
        assert list(response.json()) == ["error"]
        assert "invalid api key" not in response.text
        assert "sk-test-key" not in response.text

    def test_missing_credential_is_500(self, api, fake_client):
        fake_client.generate.side_effect = ConfigError("Missing OPENAI_API_KEY environment variable.")

        response = api.post("/api/fortune", json={"dob": "08DEC1977"})

        assert response.status_code == 500
        assert response.json() == {"error": "Server configuration error: API key not set."}

    def test_unexpected_error_is_500(self, api, fake_client):
        fake_client.generate.side_effect = KeyError("choices")

        response = api.post("/api/fortune", json={"dob": "08DEC1977"})

        assert response.status_code == 500
        assert response.json() == {"error": "Unexpected server error. Please try again later."}


class TestExpiredService:
    def test_expired_is_410(self, app, settings, fake_client):
        expired = FortuneReportService(
            settings.model_copy(update=dict(expiry_date="2026-04-30")),
            fake_client,
            clock=lambda: datetime(2026, 10, 19, tzinfo=timezone.utc),
        )
        app.dependency_overrides[get_report_service] = lambda: expired

        with TestClient(app) as client:
            response = client.post("/api/fortune", json={"dob": "08DEC1977"})

        assert response.status_code == 410
        assert "campaign has ended" in response.json()["error"]
        fake_client.generate.assert_not_awaited()


class TestAppWiring:
    def test_health(self, app):
        with TestClient(app) as client:
            assert client.get("/health").json() == {"status": "ok"}

    def test_lifespan_builds_service(self, app, settings):
        with TestClient(app) as client:
            service = client.app.state.report_service
            assert isinstance(service, FortuneReportService)
            assert service.settings is settings

    def test_unknown_route_uses_error_envelope(self, app):
        with TestClient(app) as client:
            response = client.get("/api/unknown")

        assert response.status_code == 404
        assert response.json() == {"error": "Not Found"}

    def test_real_client_without_key_is_500(self, settings):
        app = create_app(settings.model_copy(update=dict(openai_api_key=None)))

        with TestClient(app) as client:
            response = client.post("/api/fortune", json={"dob": "08DEC1977"})

        assert response.status_code == 500
        assert response.json() == {"error": "Server configuration error: API key not set."}
