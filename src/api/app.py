"""
FastAPI application factory.

* Registers routes for accounts, rides, ratings, payments, the queue,
  staff actions, admin and analytics.
* Wires the store client, password hasher, token service and fare
  strategy onto ``app.state``.
* Maps domain errors to ``{"error": kind, "detail": message}`` bodies.
* Applies rate-limiting and request-logging middleware.
* Swagger / OpenAPI UI available at ``/docs``.
"""

from contextlib import asynccontextmanager
import logging
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from sqlalchemy.exc import IntegrityError

from src.api.middleware import configure_limiter, log_requests
from src.api.schemas import ErrorResponse
from src.api.routes import (
    admin,
    analytics,
    customers,
    drivers,
    payments,
    queue,
    ratings,
    rides,
    staff,
)
from src.config import Settings, get_settings
from src.domain.errors import HTTP_STATUS, DomainError, ErrorKind
from src.domain.pricing import FareStrategy, PlaceholderFare
from src.infrastructure.database import Database
from src.infrastructure.security import PasswordHasher, TokenService
from src.logging_config import configure_logging

logger = logging.getLogger(__name__)


def _error(kind: ErrorKind, detail: str) -> JSONResponse:
    return JSONResponse(
        status_code=HTTP_STATUS[kind],
        content=ErrorResponse(error=kind.value, detail=detail).model_dump(),
    )


async def domain_error_handler(request: Request, exc: DomainError) -> JSONResponse:
    if exc.kind == ErrorKind.UNAVAILABLE:
        logger.warning("%s %s: %s", request.method, request.url.path, exc.message)
    return _error(exc.kind, exc.message)


async def validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    problems = "; ".join(
        f"{'.'.join(str(p) for p in err.get('loc', ()))}: {err.get('msg')}"
        for err in exc.errors()
    )
    return _error(ErrorKind.VALIDATION, problems or "Invalid request.")


async def integrity_error_handler(
    request: Request, exc: IntegrityError
) -> JSONResponse:
    logger.warning("Integrity error on %s %s: %s", request.method, request.url.path, exc.orig)
    return _error(ErrorKind.CONFLICT, "Request conflicts with existing data.")


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return _error(ErrorKind.INTERNAL, "Internal server error.")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Release pooled connections on shutdown."""
    yield
    await app.state.db.dispose()


def create_app(
    settings: Optional[Settings] = None,
    database: Optional[Database] = None,
    fares: Optional[FareStrategy] = None,
) -> FastAPI:
    settings = settings or get_settings()
    configure_logging(settings.log_level)

    app = FastAPI(
        title="Taxi & Queue API",
        description=(
            "Books taxi rides with immediate driver assignment, tracks the "
            "ride lifecycle, ratings and payments, and issues per-location "
            "queue numbers for appointment categories."
        ),
        version="1.0.0",
        lifespan=lifespan,
    )

    app.state.settings = settings
    app.state.db = database or Database.from_settings(settings)
    app.state.hasher = PasswordHasher(settings.password_schemes)
    app.state.tokens = TokenService.from_settings(settings)
    app.state.fares = fares or PlaceholderFare(settings.fare_min, settings.fare_max)

    # Rate limiter
    app.state.limiter = configure_limiter(settings)
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

    # Errors
    app.add_exception_handler(DomainError, domain_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(IntegrityError, integrity_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)

    # Middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[o.strip() for o in settings.cors_origins.split(",")],
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.middleware("http")(log_requests)

    # Routers
    for module in (
        customers,
        drivers,
        rides,
        ratings,
        payments,
        queue,
        staff,
        admin,
        analytics,
    ):
        app.include_router(module.router)

    return app
