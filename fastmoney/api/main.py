"""FastMoney HTTP application"""

from fastapi import FastAPI
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from starlette.responses import Response

from fastmoney import __version__
from fastmoney.api.middleware import RequestIDMiddleware, MetricsMiddleware
from fastmoney.api.v1 import bills, categories, depositors, forms, installments
from fastmoney.infrastructure.observability.logging import setup_logging
from fastmoney.config import settings

setup_logging(settings.log_level)

# (router, openapi tag), mounted under /v1
V1_ROUTERS = (
    (bills.router, "bills"),
    (forms.router, "bills"),
    (installments.router, "installments"),
    (categories.router, "reference data"),
    (depositors.router, "reference data"),
)


def create_app() -> FastAPI:
    """Build the app: middleware, service endpoints and the v1 bill API"""
    app = FastAPI(
        title="FastMoney",
        description="Bills payable and receivable",
        version=__version__,
    )

    # Request id runs outermost so metrics and handlers can see it
    app.add_middleware(MetricsMiddleware)
    app.add_middleware(RequestIDMiddleware)

    @app.get("/health")
    def health_check():
        return {"status": "ok", "service": settings.service_name, "store": settings.store_backend}

    @app.get("/metrics")
    def metrics():
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    for router, tag in V1_ROUTERS:
        app.include_router(router, prefix="/v1", tags=[tag])

    return app


app = create_app()
