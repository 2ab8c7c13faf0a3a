"""
Team Controllers (API Routes)
=============================

FastAPI routes for the team dashboard.

Controllers are thin - they delegate to application services.
"""

from typing import Optional

from fastapi import APIRouter, Depends

from devdesk_insights.config import Settings
from devdesk_insights.shared.api.dependencies import (
    get_app_settings,
    get_requester_email,
    get_response_cache,
    get_ticket_source,
)
from devdesk_insights.team.application import (
    ResponseTimeSampler,
    TeamAggregator,
    TeamResponse,
    TeamService,
)
from devdesk_insights.team.domain import TeamStatusThresholds
from devdesk_insights.team.infrastructure import ResponseTimeCache
from devdesk_insights.tickets.application import ITicketSource

router = APIRouter(prefix="/team", tags=["Team"])


# ========== Example payloads for Swagger ==========

TEAM_RESPONSE_EXAMPLE = {
    "members": [
        {
            "id": "7f1c",
            "displayName": "Dana Whitfield",
            "email": "dana@example.com",
            "status": "Behind",
            "ticketsAssigned": 12,
            "ticketsResolved": 40,
            "weeklyResolutions": 6,
            "previousWeekResolutions": 4,
            "weeklyTrend": "+2",
            "pendingTickets": 1,
            "avgResponseTime": "3h",
            "avgResolutionTime": "2d"
        }
    ],
    "stats": {
        "totalMembers": 1,
        "openTickets": 9,
        "inProgressTickets": 3,
        "needsAttention": 2
    },
    "responseTimesComputedAt": "2024-01-15T10:00:00Z"
}


# ========== Dependencies ==========

def build_team_thresholds(settings: Settings) -> TeamStatusThresholds:
    return TeamStatusThresholds(
        needs_attention_pending=settings.team_needs_attention_pending,
        needs_attention_assigned=settings.team_needs_attention_assigned,
        behind_pending=settings.team_behind_pending,
        behind_assigned=settings.team_behind_assigned,
    )


async def get_team_service(
    ticket_source: ITicketSource = Depends(get_ticket_source),
    cache: ResponseTimeCache = Depends(get_response_cache),
    settings: Settings = Depends(get_app_settings)
) -> TeamService:
    """Get team service instance."""
    sampler = ResponseTimeSampler(
        ticket_source,
        batch_size=settings.sampler_batch_size,
        lookback_days=settings.sampler_lookback_days,
        max_tickets=settings.sampler_max_tickets,
    )
    return TeamService(
        ticket_source,
        cache,
        sampler,
        TeamAggregator(build_team_thresholds(settings)),
        internal_domain=settings.internal_email_domain,
    )


# ========== Route Handlers ==========

@router.get(
    "",
    response_model=TeamResponse,
    summary="Team workload dashboard",
    description="""
    Per-member workload, resolutions and response times plus team-wide counts.

    **Status**: `Needs Attention` when pending > 5 or assigned > 15,
    `Behind` when pending > 2 or assigned > 10, otherwise `On Track`
    (thresholds are configurable).

    **Response times** come from a background-refreshed cache. Until the
    first refresh completes a workload-based estimate is shown.
    """,
    responses={
        200: {
            "description": "Team dashboard",
            "content": {"application/json": {"example": TEAM_RESPONSE_EXAMPLE}}
        },
        401: {"description": "Ticket source rejected the credentials"},
        502: {"description": "Ticket source unavailable"}
    }
)
async def get_team(
    requester_email: Optional[str] = Depends(get_requester_email),
    team_service: TeamService = Depends(get_team_service)
):
    overview = await team_service.get_overview(requester_email)
    return TeamResponse.from_domain(overview)


# Export router for inclusion in main app
team_router = router
