"""
Unit tests for HTTP middleware and its wiring
"""
import os
from unittest.mock import MagicMock, patch

import pytest
from fastapi import Request
from fastapi.testclient import TestClient

from exam_backend.middleware.body_limit import BodySizeLimitMiddleware
from exam_backend.middleware.rate_limit import RateLimitMiddleware
from exam_backend.middleware.request_logging import LoggingMiddleware, redact_headers
from exam_backend.middleware.security_headers import SecurityHeadersMiddleware


class TestSecurityHeaders:
    def test_headers_added(self, app):
        app.add_middleware(SecurityHeadersMiddleware)
        with TestClient(app) as client:
            response = client.get("/api/health")
        assert response.headers["x-content-type-options"] == "nosniff"
        assert response.headers["x-frame-options"] == "DENY"
        assert "max-age=31536000" in response.headers["strict-transport-security"]
        assert response.headers["referrer-policy"] == "no-referrer"
        assert "cache-control" not in response.headers

    def test_exam_routes_not_cached(self, app, exam_payload):
        app.add_middleware(SecurityHeadersMiddleware)
        with TestClient(app) as client:
            client.post("/api/teacher/create-exam", json=exam_payload)
            response = client.get("/api/teacher/results/MATH-7A")
        assert response.headers["cache-control"] == "no-store"


class TestRateLimit:
    def test_blocks_after_limit(self, app):
        app.add_middleware(RateLimitMiddleware, requests=2, window_seconds=60)
        with TestClient(app) as client:
            codes = [
                client.post("/api/student/get-exam", json={"examKey": "x"}).status_code
                for _ in range(3)
            ]
            limited = client.post("/api/student/get-exam", json={"examKey": "x"})
        assert codes == [404, 404, 429]
        assert limited.json()["error"] == "RateLimited"
        assert int(limited.headers["retry-after"]) >= 1

    def test_health_exempt(self, app):
        app.add_middleware(RateLimitMiddleware, requests=1, window_seconds=60)
        with TestClient(app) as client:
            codes = [client.get("/api/health").status_code for _ in range(5)]
        assert codes == [200] * 5


class TestBodyLimit:
    def test_rejects_oversized_body(self, app, exam_payload):
        app.add_middleware(BodySizeLimitMiddleware, max_bytes=100)
        with TestClient(app) as client:
            response = client.post("/api/teacher/create-exam", json=exam_payload)
        assert response.status_code == 413
        assert response.json()["error"] == "PayloadTooLarge"

    def test_allows_small_body(self, app):
        app.add_middleware(BodySizeLimitMiddleware, max_bytes=1024)
        with TestClient(app) as client:
            response = client.post("/api/student/get-exam", json={"examKey": "x"})
        assert response.status_code == 404


class TestLoggingMiddleware:
    def test_redact_headers(self):
        redacted = redact_headers({"Authorization": "Bearer t", "User-Agent": "ua"})
        assert redacted == {"Authorization": "[REDACTED]", "User-Agent": "ua"}

    @pytest.mark.asyncio
    async def test_sensitive_headers_not_logged(self):
        middleware = LoggingMiddleware(MagicMock())

        async def call_next(request):
            return MagicMock(status_code=200)

        request = Request(
            {
                "type": "http",
                "method": "POST",
                "path": "/api/teacher/create-exam",
                "headers": [
                    (b"authorization", b"Bearer secret_token"),
                    (b"cookie", b"session=secret_cookie"),
                    (b"user-agent", b"test-agent"),
                ],
            }
        )

        with patch("exam_backend.middleware.request_logging.logger") as mock_logger:
            await middleware.dispatch(request, call_next)

        messages = [call.args[0] for call in mock_logger.info.call_args_list]
        header_lines = [m for m in messages if "Headers:" in m]
        assert header_lines
        for line in header_lines:
            assert "secret_token" not in line
            assert "secret_cookie" not in line
            assert "[REDACTED]" in line
        assert any("-> 200" in m for m in messages)


class TestInstallMiddleware:
    def _installed(self, app):
        return [m.cls.__name__ for m in app.user_middleware]

    def test_default_stack(self):
        from exam_backend.entrypoint import install_middleware
        from exam_backend.index import create_app

        with patch.dict(os.environ, {}, clear=False):
            os.environ.pop("ENABLE_RATE_LIMIT", None)
            app = install_middleware(create_app())
        names = self._installed(app)
        for expected in (
            "SecurityHeadersMiddleware",
            "BodySizeLimitMiddleware",
            "CORSMiddleware",
            "LoggingMiddleware",
        ):
            assert expected in names
        assert "RateLimitMiddleware" not in names
        # Last registered runs first.
        assert names[0] == "LoggingMiddleware"

    def test_rate_limit_opt_in(self):
        from exam_backend.entrypoint import install_middleware
        from exam_backend.index import create_app

        env = {
            "ENABLE_RATE_LIMIT": "true",
            "RATE_LIMIT_REQUESTS": "7",
            "RATE_LIMIT_WINDOW_SECONDS": "30",
        }
        with patch.dict(os.environ, env):
            app = install_middleware(create_app())
        limiter = next(m for m in app.user_middleware if m.cls is RateLimitMiddleware)
        assert limiter.kwargs == {"requests": 7, "window_seconds": 30}

    def test_default_stack_accepts_every_submission(self, app, exam_payload):
        """A whole class behind one address must not lose submissions."""
        from exam_backend.entrypoint import install_middleware

        with patch.dict(os.environ, {}, clear=False):
            os.environ.pop("ENABLE_RATE_LIMIT", None)
            install_middleware(app)

        submission = {
            "examKey": "MATH-7A",
            "studentData": {"name": "Budi", "nis": "1", "class": "7A"},
            "answers": [["B"]],
        }
        with TestClient(app) as client:
            client.post("/api/teacher/create-exam", json=exam_payload)
            codes = [
                client.post("/api/student/submit-exam", json=submission).status_code
                for _ in range(130)
            ]
            results = client.get("/api/teacher/results/MATH-7A").json()["results"]
        assert codes == [200] * 130
        assert len(results) == 130
