"""
Tests for middleware and infrastructure components.
"""

import pytest
from unittest.mock import MagicMock, patch
from fastapi import FastAPI
from fastapi.testclient import TestClient

from rest_api.core.middlewares import (
    SecurityHeadersMiddleware,
    ContentTypeValidationMiddleware,
    register_middlewares,
)
from shared.infrastructure.correlation import (
    CorrelationIdMiddleware,
    CorrelationIdFilter,
    get_request_id,
    request_id_var,
)
from shared.infrastructure.db import safe_commit


def build_app(*middlewares) -> FastAPI:
    app = FastAPI()
    for middleware in middlewares:
        app.add_middleware(middleware)

    @app.get("/ping")
    def ping():
        return {"request_id": get_request_id()}

    @app.post("/echo")
    def echo():
        return {"ok": True}

    return app


# =============================================================================
# SecurityHeadersMiddleware Tests
# =============================================================================

class TestSecurityHeadersMiddleware:
    """Tests for security headers middleware."""

    @pytest.fixture
    def client(self):
        return TestClient(build_app(SecurityHeadersMiddleware))

    def test_static_headers(self, client):
        headers = client.get("/ping").headers

        assert headers["X-Content-Type-Options"] == "nosniff"
        assert headers["X-Frame-Options"] == "DENY"
        assert headers["Referrer-Policy"] == "strict-origin-when-cross-origin"
        assert "camera=()" in headers["Permissions-Policy"]

    def test_content_security_policy_blocks_everything(self, client):
        csp = client.get("/ping").headers["Content-Security-Policy"]
        assert "default-src 'none'" in csp
        assert "frame-ancestors 'none'" in csp

    def test_adds_hsts_in_production(self):
        with patch("rest_api.core.middlewares.settings") as mock_settings:
            mock_settings.environment = "production"
            response = TestClient(build_app(SecurityHeadersMiddleware)).get("/ping")

        assert "max-age=31536000" in response.headers["Strict-Transport-Security"]

    def test_no_hsts_outside_production(self):
        with patch("rest_api.core.middlewares.settings") as mock_settings:
            mock_settings.environment = "development"
            response = TestClient(build_app(SecurityHeadersMiddleware)).get("/ping")

        assert "Strict-Transport-Security" not in response.headers


# =============================================================================
# ContentTypeValidationMiddleware Tests
# =============================================================================

class TestContentTypeValidationMiddleware:
    """Tests for content type validation middleware."""

    @pytest.fixture
    def client(self):
        return TestClient(build_app(ContentTypeValidationMiddleware))

    def test_allows_json(self, client):
        response = client.post("/echo", json={"name": "Joe"})
        assert response.status_code == 200

    def test_allows_json_with_charset(self, client):
        response = client.post(
            "/echo",
            content='{"name": "Joe"}',
            headers={"Content-Type": "application/json; charset=utf-8"},
        )
        assert response.status_code == 200

    def test_rejects_form_body(self, client):
        response = client.post(
            "/echo",
            content="name=Joe",
            headers={"Content-Type": "application/x-www-form-urlencoded"},
        )
        assert response.status_code == 415
        assert response.json() == {"detail": "Unsupported Media Type. Use application/json"}

    def test_allows_bodyless_post(self, client):
        assert client.post("/echo").status_code == 200

    def test_ignores_get(self, client):
        response = client.get("/ping", headers={"Content-Type": "text/plain"})
        assert response.status_code == 200


# =============================================================================
# CorrelationIdMiddleware Tests
# =============================================================================

class TestCorrelationIdMiddleware:
    """Tests for correlation ID middleware."""

    @pytest.fixture
    def client(self):
        return TestClient(build_app(CorrelationIdMiddleware))

    def test_generates_request_id_when_not_provided(self, client):
        response = client.get("/ping")

        request_id = response.headers.get("X-Request-ID")
        assert request_id is not None
        assert len(request_id) == 36  # UUID v4 length
        assert response.json()["request_id"] == request_id

    def test_uses_provided_request_id(self, client):
        response = client.get("/ping", headers={"X-Request-ID": "menu-load-42"})

        assert response.headers["X-Request-ID"] == "menu-load-42"
        assert response.json()["request_id"] == "menu-load-42"

    def test_context_is_reset_after_request(self, client):
        client.get("/ping", headers={"X-Request-ID": "short-lived"})
        assert get_request_id() == ""


# =============================================================================
# CorrelationIdFilter Tests
# =============================================================================

class TestCorrelationIdFilter:
    """Tests for correlation ID logging filter."""

    def test_adds_request_id_to_log_record(self):
        token = request_id_var.set("scan-123")
        try:
            record = MagicMock()
            assert CorrelationIdFilter().filter(record) is True
            assert record.request_id == "scan-123"
        finally:
            request_id_var.reset(token)

    def test_uses_dash_when_no_request_id(self):
        record = MagicMock()
        CorrelationIdFilter().filter(record)
        assert record.request_id == "-"


# =============================================================================
# safe_commit Tests
# =============================================================================

class TestSafeCommit:
    """Tests for safe_commit utility."""

    def test_commits_successfully(self):
        mock_db = MagicMock()

        safe_commit(mock_db)

        mock_db.commit.assert_called_once()
        mock_db.rollback.assert_not_called()

    def test_rolls_back_and_reraises(self):
        class CustomDBError(Exception):
            pass

        mock_db = MagicMock()
        mock_db.commit.side_effect = CustomDBError("disk full")

        with pytest.raises(CustomDBError, match="disk full"):
            safe_commit(mock_db)

        mock_db.rollback.assert_called_once()


# =============================================================================
# register_middlewares Tests
# =============================================================================

class TestRegisterMiddlewares:
    """Tests for middleware registration."""

    def test_registers_all_middlewares(self):
        app = FastAPI()

        register_middlewares(app)

        middleware_classes = [m.cls for m in app.user_middleware]
        assert SecurityHeadersMiddleware in middleware_classes
        assert ContentTypeValidationMiddleware in middleware_classes
        assert CorrelationIdMiddleware in middleware_classes
