from __future__ import annotations

from typing import Iterable

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """
    Adds security headers to every JSON API response.

    Responses under ``no_store_prefixes`` also get ``Cache-Control: no-store``
    so answer keys and result lists never sit in shared caches.
    """

    def __init__(
        self,
        app,
        *,
        hsts_max_age: int = 31536000,  # 1 year
        hsts_include_subdomains: bool = True,
        content_security_policy: str = "default-src 'none'; frame-ancestors 'none'",
        referrer_policy: str = "no-referrer",
        no_store_prefixes: Iterable[str] = ("/api/teacher", "/api/student"),
    ):
        super().__init__(app)
        self.hsts_max_age = hsts_max_age
        self.hsts_include_subdomains = hsts_include_subdomains
        self.content_security_policy = content_security_policy
        self.referrer_policy = referrer_policy
        self.no_store_prefixes = tuple(no_store_prefixes)

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        response = await call_next(request)

        hsts = f"max-age={self.hsts_max_age}"
        if self.hsts_include_subdomains:
            hsts += "; includeSubDomains"
        response.headers["Strict-Transport-Security"] = hsts
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["Content-Security-Policy"] = self.content_security_policy
        response.headers["Referrer-Policy"] = self.referrer_policy

        if request.url.path.startswith(self.no_store_prefixes):
            response.headers["Cache-Control"] = "no-store"

        return response
