from __future__ import annotations

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import JSONResponse, Response


class BodySizeLimitMiddleware(BaseHTTPMiddleware):
    """
    Rejects requests whose declared Content-Length exceeds ``max_bytes``.

    Exams embed images as data URLs, so the default cap is generous.
    """

    def __init__(self, app, *, max_bytes: int = 50 * 1024 * 1024):
        super().__init__(app)
        self.max_bytes = max(1, max_bytes)

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        declared = request.headers.get("content-length")
        if declared is not None:
            try:
                size = int(declared)
            except ValueError:
                return JSONResponse(
                    {
                        "success": False,
                        "error": "InvalidInput",
                        "message": "Malformed Content-Length header",
                    },
                    status_code=400,
                )
            if size > self.max_bytes:
                return JSONResponse(
                    {
                        "success": False,
                        "error": "PayloadTooLarge",
                        "message": f"Request body exceeds {self.max_bytes} bytes",
                    },
                    status_code=413,
                )
        return await call_next(request)
