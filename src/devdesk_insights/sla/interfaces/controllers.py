"""
SLA Controllers (API Routes)
=============================

FastAPI routes for SLA monitoring endpoints.

Controllers are thin - they delegate to application services.
"""

from fastapi import APIRouter, Depends

from devdesk_insights.shared.api.dependencies import get_policy_provider, get_ticket_source
from devdesk_insights.sla.application import (
    ISLAPolicyProvider,
    SLAService,
    SLAStatusResponse,
)
from devdesk_insights.tickets.application import ITicketSource

router = APIRouter(prefix="/sla", tags=["SLA Monitoring"])


# ========== Example payloads for Swagger ==========

SLA_STATUS_RESPONSE_EXAMPLE = {
    "summary": {"breached": 1, "atRisk": 1, "onTrack": 7},
    "tickets": [
        {
            "ticket": {
                "id": 1042,
                "project": "Support",
                "title": "VPN drops every hour",
                "status": "Open",
                "priority": "Urgent",
                "createdAt": "2024-01-15T10:00:00Z",
                "updatedAt": "2024-01-15T12:30:00Z",
                "assignee": "Dana Whitfield"
            },
            "riskStatus": "breached",
            "resolutionTarget": "2024-01-15T14:00:00Z",
            "responseTarget": "2024-01-15T11:00:00Z",
            "timeRemaining": -600000,
            "timeRemainingLabel": "10m overdue",
            "percentageRemaining": 0.0,
            "isResponseBreached": True,
            "isResolutionBreached": True,
            "slaLevel": None,
            "firstResponse": {
                "targetMinutes": 60.0,
                "elapsedMinutes": 250,
                "remainingMinutes": -190.0,
                "status": "breached",
                "met": False
            },
            "resolution": {
                "targetMinutes": 240.0,
                "elapsedMinutes": 250,
                "remainingMinutes": -10.0,
                "status": "breached",
                "met": False
            }
        }
    ]
}


# ========== Dependencies ==========

async def get_sla_service(
    ticket_source: ITicketSource = Depends(get_ticket_source),
    policy_provider: ISLAPolicyProvider = Depends(get_policy_provider)
) -> SLAService:
    """Get SLA service instance."""
    return SLAService(ticket_source, policy_provider)


# ========== Route Handlers ==========

@router.get(
    "/status",
    response_model=SLAStatusResponse,
    summary="SLA status of active tickets",
    description="""
    Evaluate every active ticket (New, Open, In Progress, Pending) against the
    priority-based SLA targets.

    **Summary** counts all active tickets by risk. **Tickets** lists only the
    breached and at-risk ones, breached first, most overdue first.

    **Default targets (response / resolution)**:

    | Priority | Response | Resolution |
    |----------|----------|------------|
    | Urgent   | 1h       | 4h         |
    | High     | 4h       | 8h         |
    | Normal   | 8h       | 24h        |
    | Low      | 24h      | 72h        |

    A ticket is `at-risk` when 25% or less of its resolution window is left.
    """,
    responses={
        200: {
            "description": "SLA dashboard",
            "content": {"application/json": {"example": SLA_STATUS_RESPONSE_EXAMPLE}}
        },
        401: {"description": "Ticket source rejected the credentials"},
        502: {"description": "Ticket source unavailable"}
    }
)
async def get_sla_status(sla_service: SLAService = Depends(get_sla_service)):
    dashboard = await sla_service.get_dashboard()
    return SLAStatusResponse.from_domain(dashboard)


# Export router for inclusion in main app
sla_router = router
