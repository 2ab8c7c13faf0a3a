"""
Shared API Middleware
======================

Common middleware and exception handlers for the FastAPI application.
"""

import time
import uuid
from datetime import datetime, timezone
from typing import Callable

from fastapi import Request, Response
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from devdesk_insights.core import (
    DomainException, UpstreamAuthException, UpstreamUnavailableException, ValidationException
)
from devdesk_insights.shared.infrastructure.logging import get_logger

logger = get_logger(__name__)


class CorrelationIDMiddleware(BaseHTTPMiddleware):
    """
    Adds correlation ID to requests for tracing.

    Correlation IDs link the log lines of one request, including the
    background refresh it may trigger.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        correlation_id = request.headers.get("X-Correlation-ID", str(uuid.uuid4()))
        request.state.correlation_id = correlation_id

        response = await call_next(request)
        response.headers["X-Correlation-ID"] = correlation_id
        return response


class LoggingMiddleware(BaseHTTPMiddleware):
    """Logs all requests and responses with their latency."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        correlation_id = getattr(request.state, "correlation_id", "unknown")
        start_time = time.perf_counter()

        try:
            response = await call_next(request)
        except Exception as e:
            logger.error(
                "Request failed",
                extra={
                    "correlation_id": correlation_id,
                    "method": request.method,
                    "path": request.url.path,
                    "error": str(e),
                    "response_time_ms": int((time.perf_counter() - start_time) * 1000)
                }
            )
            raise

        response_time = time.perf_counter() - start_time
        response.headers["X-Response-Time"] = f"{response_time:.3f}s"
        logger.info(
            "Request completed",
            extra={
                "correlation_id": correlation_id,
                "method": request.method,
                "path": request.url.path,
                "status_code": response.status_code,
                "response_time_ms": int(response_time * 1000)
            }
        )
        return response


def _error_body(request: Request, detail: str) -> dict:
    return {
        "detail": detail,
        "correlation_id": getattr(request.state, "correlation_id", "unknown"),
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


async def upstream_auth_exception_handler(
    request: Request, exc: UpstreamAuthException
) -> JSONResponse:
    """The tracker rejected the caller's credentials."""
    logger.warning(
        "Ticket source rejected credentials",
        extra={"path": request.url.path, "status_code": exc.status_code}
    )
    return JSONResponse(status_code=401, content=_error_body(request, "Unauthorized"))


async def upstream_unavailable_exception_handler(
    request: Request, exc: UpstreamUnavailableException
) -> JSONResponse:
    """The tracker could not be reached; never answer with an empty dashboard."""
    logger.error(
        "Ticket source unavailable",
        extra={"path": request.url.path, "error": exc.message}
    )
    return JSONResponse(
        status_code=502,
        content=_error_body(request, "Ticket source unavailable")
    )


async def validation_exception_handler(
    request: Request, exc: ValidationException
) -> JSONResponse:
    """Request parameters that parse but make no sense together."""
    logger.info(
        "Request rejected",
        extra={"path": request.url.path, "error": exc.message}
    )
    return JSONResponse(status_code=400, content=_error_body(request, exc.message))


async def domain_exception_handler(request: Request, exc: DomainException) -> JSONResponse:
    """Invariant violations such as a ticket priority without SLA targets."""
    logger.error(
        "Domain invariant violated",
        extra={"path": request.url.path, "error": exc.message, **exc.details}
    )
    return JSONResponse(status_code=500, content=_error_body(request, exc.message))


async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """
    Global exception handler for unhandled exceptions.

    Returns consistent error responses for all exceptions.
    """
    logger.error(
        "Unhandled exception",
        extra={
            "correlation_id": getattr(request.state, "correlation_id", "unknown"),
            "path": request.url.path,
            "method": request.method,
            "error_type": type(exc).__name__,
            "error_message": str(exc)
        }
    )

    body = _error_body(request, "Internal server error")
    # Don't expose internal details in production
    settings = getattr(request.app.state, "settings", None)
    if getattr(settings, "environment", None) == "development":
        body["debug_info"] = str(exc)
    return JSONResponse(status_code=500, content=body)
