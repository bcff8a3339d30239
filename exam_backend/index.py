from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from . import __version__
from .exams import router as exams_router
from .middleware.error_handler import register_error_handlers
from .routes.system import router as system_router

logger = logging.getLogger(__name__)

API_PREFIX = "/api"


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Exam server started. Endpoints:")
    for path, operations in app.openapi()["paths"].items():
        if path.startswith(API_PREFIX):
            methods = ",".join(sorted(m.upper() for m in operations))
            logger.info(f"  {methods:<5} {path}")
    yield
    logger.info("Exam server stopped; in-memory exams discarded")


def create_app() -> FastAPI:
    app = FastAPI(title="Exam Backend", version=__version__, lifespan=lifespan)
    app.include_router(system_router, prefix=API_PREFIX)
    app.include_router(exams_router, prefix=API_PREFIX)
    register_error_handlers(app)
    return app


app = create_app()
