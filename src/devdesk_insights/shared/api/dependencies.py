"""
Shared API Dependencies
=======================

FastAPI dependencies that hand out the process-wide collaborators created in
the application lifespan. Tests replace them through
``app.dependency_overrides``.
"""

from typing import Optional

from fastapi import Header, HTTPException, Request

from devdesk_insights.config import Settings
from devdesk_insights.sla.application import ISLAPolicyProvider
from devdesk_insights.team.infrastructure import ResponseTimeCache
from devdesk_insights.tickets.application import ITicketSource


def _state(request: Request, name: str):
    value = getattr(request.app.state, name, None)
    if value is None:
        raise HTTPException(status_code=503, detail=f"{name} not initialized")
    return value


async def get_app_settings(request: Request) -> Settings:
    """Settings the application was started with."""
    return _state(request, "settings")


async def get_ticket_source(request: Request) -> ITicketSource:
    """Shared upstream ticket source."""
    return _state(request, "ticket_source")


async def get_policy_provider(request: Request) -> ISLAPolicyProvider:
    """SLA policy loaded at startup."""
    return _state(request, "policy_provider")


async def get_response_cache(request: Request) -> ResponseTimeCache:
    """Process-wide response-time cache."""
    return _state(request, "response_cache")


async def get_requester_email(
    x_user_email: Optional[str] = Header(None, description="Email of the signed-in user")
) -> Optional[str]:
    """Email of the caller, forwarded by the front end."""
    return x_user_email
