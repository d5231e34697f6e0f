"""FastAPI application factory"""

from fastapi import FastAPI
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from starlette.responses import Response

from coverage_gateway.api.middleware import RequestIDMiddleware, MetricsMiddleware
from coverage_gateway.api.v1 import coverage, history, plan, planned_payments
from coverage_gateway.infrastructure.observability.logging import setup_logging
from coverage_gateway.config import settings

# Setup structured logging
setup_logging(settings.log_level, settings.service_name)


def create_app() -> FastAPI:
    """Create and configure FastAPI application"""
    app = FastAPI(
        title="Coverage Gateway",
        description="Cash-flow gap coverage planning service",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
    )

    # Add middleware (order matters: last added = first executed)
    app.add_middleware(MetricsMiddleware)
    app.add_middleware(RequestIDMiddleware)

    # Health check endpoint
    @app.get("/health")
    def health_check():
        return {"status": "ok", "service": settings.service_name}

    # Prometheus metrics endpoint
    @app.get("/metrics")
    def metrics():
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    # Register API routers; history must precede plan so "/history" isn't read as a plan ID
    app.include_router(coverage.router, prefix="/v1", tags=["coverage"])
    app.include_router(history.router, prefix="/v1", tags=["history"])
    app.include_router(plan.router, prefix="/v1", tags=["coverage"])
    app.include_router(planned_payments.router, prefix="/v1", tags=["planned-payments"])

    return app


app = create_app()
