from __future__ import annotations

import asyncio
import time
from collections import defaultdict, deque
from typing import Callable, Deque, Dict, Iterable

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import JSONResponse, Response


class RateLimitMiddleware(BaseHTTPMiddleware):
    """
    Sliding-window request cap per client IP.

    Guards the submission and exam-fetch endpoints against clients hammering
    the server, e.g. a broken exam page retrying in a loop. Paths listed in
    ``exempt_paths`` (liveness probes) are never counted.
    """

    def __init__(
        self,
        app,
        *,
        requests: int = 120,
        window_seconds: int = 60,
        key_func: Callable[[Request], str] | None = None,
        exempt_paths: Iterable[str] = ("/api/health",),
    ):
        super().__init__(app)
        self.requests = max(1, requests)
        self.window = max(1, window_seconds)
        self.key_func = key_func or self._client_ip
        self.exempt_paths = frozenset(exempt_paths)
        self._hits: Dict[str, Deque[float]] = defaultdict(deque)
        self._locks: Dict[str, asyncio.Lock] = defaultdict(asyncio.Lock)
        self._state_lock = asyncio.Lock()
        self._last_sweep = time.monotonic()

    @staticmethod
    def _client_ip(request: Request) -> str:
        client = request.client
        return client.host if client else "unknown"

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if request.url.path in self.exempt_paths:
            return await call_next(request)

        client_key = self.key_func(request)
        now = time.monotonic()
        window_start = now - self.window

        async with self._state_lock:
            self._sweep(now)
            hits = self._hits[client_key]
            client_lock = self._locks[client_key]

        async with client_lock:
            while hits and hits[0] < window_start:
                hits.popleft()

            if len(hits) >= self.requests:
                retry_after = max(1, int(hits[0] + self.window - now) + 1)
                return JSONResponse(
                    {
                        "success": False,
                        "error": "RateLimited",
                        "message": "Too many requests. Please slow down and try again.",
                    },
                    status_code=429,
                    headers={"Retry-After": str(retry_after)},
                )

            hits.append(now)

        return await call_next(request)

    def _sweep(self, now: float) -> None:
        """Drop clients idle for two windows so memory stays bounded."""
        if now - self._last_sweep < self.window:
            return

        cutoff = now - self.window * 2
        for key in [k for k, hits in self._hits.items() if not hits or hits[-1] < cutoff]:
            self._hits.pop(key, None)
            self._locks.pop(key, None)

        self._last_sweep = now
