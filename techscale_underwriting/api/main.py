"""FastAPI application factory"""

import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from starlette.responses import Response

from techscale_underwriting.api.middleware import RequestIDMiddleware, MetricsMiddleware
from techscale_underwriting.api.v1 import history, offers, readiness, rules, sponsors, underwriting
from techscale_underwriting.infrastructure.database.session import init_db
from techscale_underwriting.infrastructure.observability.logging import setup_logging
from techscale_underwriting.config import settings

API_VERSION = "0.1.0"

# Setup structured logging
setup_logging(settings.log_level)

# (router module, tag) pairs mounted under /v1
ROUTERS = (
    (underwriting, "underwriting"),
    (offers, "offers"),
    (history, "history"),
    (readiness, "readiness"),
    (sponsors, "sponsors"),
    (rules, "rules"),
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    if settings.auto_create_tables:
        logging.info("Creating missing database tables")
        init_db()
    yield


def create_app() -> FastAPI:
    """Create and configure FastAPI application"""
    app = FastAPI(
        title="TechScale Underwriting Service",
        description="Risk assessment, loan offers, sponsor matching and credit readiness",
        version=API_VERSION,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    # Last added runs first: request ID is set before metrics are timed
    app.add_middleware(MetricsMiddleware)
    app.add_middleware(RequestIDMiddleware)

    @app.get("/health")
    def health_check():
        return {"status": "ok", "service": settings.service_name, "version": API_VERSION}

    @app.get("/metrics")
    def metrics():
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    for module, tag in ROUTERS:
        app.include_router(module.router, prefix="/v1", tags=[tag])

    return app


app = create_app()
