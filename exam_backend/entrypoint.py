from __future__ import annotations

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from . import config
from .index import app as _app
from .logging_config import setup_logging
from .middleware.body_limit import BodySizeLimitMiddleware
from .middleware.rate_limit import RateLimitMiddleware
from .middleware.request_logging import LoggingMiddleware
from .middleware.security_headers import SecurityHeadersMiddleware

logger = logging.getLogger(__name__)


def install_middleware(app: FastAPI) -> FastAPI:
    """Wrap ``app`` with the HTTP middleware stack configured from the environment.

    Starlette runs middleware in reverse order of registration, so request
    logging (added last) sees every request, including rejected ones.
    """
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(
        BodySizeLimitMiddleware, max_bytes=config.MAX_BODY_MB * 1024 * 1024
    )

    if config.env_flag("ENABLE_RATE_LIMIT"):
        rate_limit_requests = config.env_int("RATE_LIMIT_REQUESTS", 120, 10000)
        rate_limit_window = config.env_int("RATE_LIMIT_WINDOW_SECONDS", 60, 3600)
        logger.info(
            f"Rate limiting enabled: {rate_limit_requests} requests per "
            f"{rate_limit_window} seconds"
        )
        app.add_middleware(
            RateLimitMiddleware,
            requests=rate_limit_requests,
            window_seconds=rate_limit_window,
        )

    origins = config.cors_origins()
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials="*" not in origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(LoggingMiddleware)
    return app


app = install_middleware(_app)


def main() -> None:
    import uvicorn

    setup_logging()
    logger.info(f"Exam server running on http://{config.HOST}:{config.PORT}")
    uvicorn.run(app, host=config.HOST, port=config.PORT, log_config=None)
