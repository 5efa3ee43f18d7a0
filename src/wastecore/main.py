"""FastAPI application entry point."""

from __future__ import annotations

import logging
from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .api.routes import allocation, centers, demand, health, payments, requests, schedules, vehicles
from .config import settings
from .db import create_store
from .errors import (
    ConflictError,
    NotFoundError,
    PaymentGatewayError,
    PersistenceError,
    ValidationError,
    WasteCoreError,
)
from .persistence.store import DocumentStore
from .services.payments import build_checkout_gateway

_UNSET = object()

_STATUS_BY_ERROR: tuple[tuple[type[WasteCoreError], int], ...] = (
    (ValidationError, status.HTTP_400_BAD_REQUEST),
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    (ConflictError, status.HTTP_409_CONFLICT),
    (PersistenceError, status.HTTP_503_SERVICE_UNAVAILABLE),
    (PaymentGatewayError, status.HTTP_502_BAD_GATEWAY),
)


def _status_for(exc: WasteCoreError) -> int:
    for error_type, code in _STATUS_BY_ERROR:
        if isinstance(exc, error_type):
            return code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


async def _handle_domain_error(request: Request, exc: WasteCoreError) -> JSONResponse:
    code = _status_for(exc)
    body: dict = {"detail": exc.message, "error": type(exc).__name__}
    if isinstance(exc, ValidationError) and exc.missing:
        body["missing"] = exc.missing
    if code >= 500:
        logging.error(f"{request.method} {request.url.path} failed: {exc}")
    return JSONResponse(status_code=code, content=body)


def create_app(
    store: DocumentStore | None = None,
    checkout_gateway: Any = _UNSET,
) -> FastAPI:
    app = FastAPI(
        title=settings.app_name,
        root_path="",
    )
    app.state.store = store if store is not None else create_store(settings)
    app.state.checkout_gateway = (
        build_checkout_gateway(settings) if checkout_gateway is _UNSET else checkout_gateway
    )

    if settings.frontend_allowed_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=list(settings.frontend_allowed_origins),
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )
    app.add_exception_handler(WasteCoreError, _handle_domain_error)

    # Root endpoint for diagnostics
    @app.get("/")
    def root():
        return {
            "service": settings.app_name,
            "status": "running",
            "api_prefix": settings.api_prefix,
            "health": f"{settings.api_prefix}/health",
            "docs": "/docs",
        }

    app.include_router(health.router, prefix=settings.api_prefix)
    app.include_router(demand.router, prefix=settings.api_prefix)
    app.include_router(allocation.router, prefix=settings.api_prefix)
    app.include_router(schedules.router, prefix=settings.api_prefix)
    app.include_router(requests.router, prefix=settings.api_prefix)
    app.include_router(vehicles.router, prefix=settings.api_prefix)
    app.include_router(centers.router, prefix=settings.api_prefix)
    app.include_router(payments.router, prefix=settings.api_prefix)
    return app


app = create_app()
