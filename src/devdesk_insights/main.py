"""
DevDesk Insights - Main Application
===================================

SLA and team analytics over tickets from an external issue tracker.

Modules:
- SLA Monitoring: Deadlines, risk classification and urgency ranking
- Team Analytics: Per-member workload and sampled response times
- Reporting: Activity heatmap and monthly checkpoint

Clean Architecture Layers:
- Interfaces: FastAPI controllers
- Application: Services and DTOs
- Domain: Entities and value objects
- Infrastructure: Ticket source adapter, policy loading, response-time cache
"""

from contextlib import asynccontextmanager
from datetime import timedelta
from typing import AsyncGenerator, Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

# Configuration and Core
from devdesk_insights.config import Settings, get_settings
from devdesk_insights.core import (
    DomainException,
    UpstreamAuthException,
    UpstreamUnavailableException,
    ValidationException,
)

# Infrastructure
from devdesk_insights.sla.infrastructure import StaticSLAPolicyProvider
from devdesk_insights.team.infrastructure import ResponseTimeCache
from devdesk_insights.tickets.application import ITicketSource
from devdesk_insights.tickets.infrastructure import HttpTicketSource

# Module Routers
from devdesk_insights.reporting.interfaces import reporting_router
from devdesk_insights.sla.interfaces import sla_router
from devdesk_insights.team.interfaces import team_router

# Shared API
from devdesk_insights.shared.api.middleware import (
    CorrelationIDMiddleware,
    LoggingMiddleware,
    domain_exception_handler,
    global_exception_handler,
    upstream_auth_exception_handler,
    upstream_unavailable_exception_handler,
    validation_exception_handler,
)

# Logging
from devdesk_insights.shared.infrastructure.logging import get_logger, setup_logging

logger = get_logger(__name__)


def create_app(
    settings: Optional[Settings] = None,
    ticket_source: Optional[ITicketSource] = None
) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        settings: Settings to run with, the environment when omitted
        ticket_source: Ticket source to use instead of the HTTP adapter

    Returns:
        Configured FastAPI app
    """
    app_settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator:
        """
        Application lifespan manager.

        STARTUP:
        1. Setup structured logging
        2. Resolve the SLA policy
        3. Create the ticket source
        4. Create the process-wide response-time cache

        SHUTDOWN:
        1. Cancel a pending cache refresh
        2. Close the ticket source client
        """
        # === STARTUP ===
        setup_logging(app_settings.log_level, app_settings.environment)
        logger.info("Starting DevDesk Insights", extra={
            "version": app_settings.app_version,
            "environment": app_settings.environment
        })

        logger.info("Loading SLA policy")
        policy_provider = StaticSLAPolicyProvider.from_settings(app_settings)

        source = ticket_source or HttpTicketSource(
            base_url=app_settings.ticket_source_url,
            token=app_settings.ticket_source_token,
            timeout_seconds=app_settings.ticket_source_timeout_seconds,
        )
        response_cache = ResponseTimeCache(
            ttl=timedelta(seconds=app_settings.response_cache_ttl_seconds)
        )

        # Store services in app state for dependency injection
        app.state.settings = app_settings
        app.state.policy_provider = policy_provider
        app.state.ticket_source = source
        app.state.response_cache = response_cache

        logger.info("DevDesk Insights started successfully")

        yield  # Application runs here

        # === SHUTDOWN ===
        logger.info("Shutting down DevDesk Insights")

        await response_cache.aclose()

        # Only close what this app created
        if ticket_source is None and isinstance(source, HttpTicketSource):
            await source.close()

        logger.info("DevDesk Insights shutdown complete")

    app = FastAPI(
        title="DevDesk Insights API",
        description="""
    ## SLA and Team Analytics for a Ticket Tracker

    ---

    ### SLA Monitoring

    - `GET /sla/status` - Breached and at-risk tickets with summary counts

    ### Team Analytics

    - `GET /team` - Per-member workload, resolutions and response times

    ### Reporting

    - `GET /team/activity` - Daily activity heatmap for the last year
    - `GET /reporting/checkpoint` - KPIs and daily trend for a period

    ---

    ### Configuration

    **SLA Targets (Response / Resolution):**

    | Priority | Response | Resolution |
    |----------|----------|------------|
    | Urgent   | 1h       | 4h         |
    | High     | 4h       | 8h         |
    | Normal   | 8h       | 24h        |
    | Low      | 24h      | 72h        |

    Override with `SLA_CONFIG` (JSON) or `SLA_CONFIG_PATH` (YAML file).
    """,
        version=app_settings.app_version,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan
    )

    # === CORS Middleware ===
    app.add_middleware(
        CORSMiddleware,
        allow_origins=app_settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # === Custom Middleware (from shared) ===
    app.add_middleware(LoggingMiddleware)
    app.add_middleware(CorrelationIDMiddleware)

    app.add_exception_handler(UpstreamAuthException, upstream_auth_exception_handler)
    app.add_exception_handler(UpstreamUnavailableException, upstream_unavailable_exception_handler)
    app.add_exception_handler(ValidationException, validation_exception_handler)
    app.add_exception_handler(DomainException, domain_exception_handler)
    app.add_exception_handler(Exception, global_exception_handler)

    # === Include Module Routers ===
    app.include_router(sla_router)
    app.include_router(team_router)
    app.include_router(reporting_router)

    # === Health Check Endpoint ===

    @app.get("/health", tags=["Health"], responses={
        200: {
            "description": "Service is healthy",
            "content": {
                "application/json": {
                    "example": {
                        "status": "healthy",
                        "version": "1.0.0",
                        "environment": "development",
                        "checks": {
                            "sla_policy": "loaded",
                            "ticket_source": "configured",
                            "response_cache": "warm"
                        }
                    }
                }
            }
        }
    })
    async def health_check(request: Request):
        """
        Health check endpoint for load balancers and orchestrators.

        Does not call the ticket source; reports local state only.
        """
        state = request.app.state
        cache = getattr(state, "response_cache", None)
        if cache is None:
            cache_state = "not_initialized"
        elif cache.snapshot is None:
            cache_state = "cold"
        else:
            cache_state = "warm" if cache.is_fresh() else "stale"

        checks = {
            "sla_policy": "loaded" if getattr(state, "policy_provider", None) else "not_loaded",
            "ticket_source": "configured" if getattr(state, "ticket_source", None) else "missing",
            "response_cache": cache_state,
        }

        return {
            "status": "healthy",
            "version": app_settings.app_version,
            "environment": app_settings.environment,
            "checks": checks
        }

    @app.get("/", tags=["Root"])
    async def root():
        """Root endpoint with API information."""
        return {
            "service": "DevDesk Insights",
            "version": app_settings.app_version,
            "architecture": "Clean Architecture / Modular Monolith",
            "docs": "/docs",
            "health": "/health",
            "modules": ["sla", "team", "reporting"]
        }

    return app


app = create_app()


# === Development Entry Point ===

if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "devdesk_insights.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        log_level=settings.log_level.lower()
    )
