"""
Reporting Controllers (API Routes)
==================================

FastAPI routes for the activity heatmap and the checkpoint report.

Controllers are thin - they delegate to application services.
"""

from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query

from devdesk_insights.reporting.application import (
    CheckpointResponse,
    CheckpointService,
    TeamActivityResponse,
    TeamActivityService,
)
from devdesk_insights.shared.api.dependencies import get_ticket_source
from devdesk_insights.tickets.application import ITicketSource

router = APIRouter(tags=["Reporting"])


# ========== Dependencies ==========

async def get_activity_service(
    ticket_source: ITicketSource = Depends(get_ticket_source)
) -> TeamActivityService:
    """Get team activity service instance."""
    return TeamActivityService(ticket_source)


async def get_checkpoint_service(
    ticket_source: ITicketSource = Depends(get_ticket_source)
) -> CheckpointService:
    """Get checkpoint service instance."""
    return CheckpointService(ticket_source)


# ========== Route Handlers ==========

@router.get(
    "/team/activity",
    response_model=TeamActivityResponse,
    summary="Team activity heatmap",
    description="""
    Ticket activity per day over the last 365 days.

    A ticket counts on the day it was created and, when different, on the day
    it was last updated. **Level** (0-4) is the day's count relative to the
    busiest day in quartiles.
    """
)
async def get_team_activity(
    member: Optional[str] = Query(None, description="Member id, or 'all' for the whole team"),
    activity_service: TeamActivityService = Depends(get_activity_service)
):
    activity = await activity_service.get_activity(member)
    return TeamActivityResponse.from_domain(activity)


@router.get(
    "/reporting/checkpoint",
    response_model=CheckpointResponse,
    summary="Monthly checkpoint report",
    description="""
    KPIs and a daily trend for a period (default: the last 30 days).

    **Response time** is approximated by the first update of a ticket.
    **SLA compliance** is the share of tickets updated within 24 hours.
    """
)
async def get_checkpoint(
    start_date: Optional[date] = Query(None, alias="startDate", description="First day (YYYY-MM-DD)"),
    end_date: Optional[date] = Query(None, alias="endDate", description="Last day (YYYY-MM-DD)"),
    project: Optional[str] = Query(None, description="Restrict to one project"),
    checkpoint_service: CheckpointService = Depends(get_checkpoint_service)
):
    report = await checkpoint_service.get_checkpoint(start_date, end_date, project)
    return CheckpointResponse.from_domain(report)


# Export router for inclusion in main app
reporting_router = router
