"""
SLA Application DTOs
=====================

Data Transfer Objects for SLA API layer.

These Pydantic models handle serialization for API responses.
Following YAGNI - only what's needed.
"""

from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from devdesk_insights.sla.domain import (
    SLADashboard, SLAStageCheck, SLASummary, TicketSLAStatus, format_time_remaining
)

# ========== Type Aliases for Literals ==========
SLARiskStatusStr = Literal["on-track", "at-risk", "breached"]
SLAStageStatusStr = Literal["within_sla", "at_risk", "breached"]
SLALevelStr = Literal["Gold", "Silver", "Bronze"]


class _CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class TicketRefResponse(_CamelModel):
    """Ticket fields echoed next to its SLA status."""
    id: int
    project: str
    title: str
    status: str
    priority: str
    created_at: datetime = Field(serialization_alias="createdAt")
    updated_at: datetime = Field(serialization_alias="updatedAt")
    assignee: Optional[str] = Field(None, description="Assignee display name")


class SLAStageResponse(_CamelModel):
    """Progress of one SLA stage."""
    target_minutes: float = Field(serialization_alias="targetMinutes")
    elapsed_minutes: int = Field(serialization_alias="elapsedMinutes")
    remaining_minutes: float = Field(serialization_alias="remainingMinutes")
    status: SLAStageStatusStr
    met: bool

    @classmethod
    def from_domain(cls, check: SLAStageCheck) -> "SLAStageResponse":
        return cls(
            target_minutes=check.target_minutes,
            elapsed_minutes=check.elapsed_minutes,
            remaining_minutes=check.remaining_minutes,
            status=check.status.value,
            met=check.met,
        )


class TicketSLAStatusResponse(_CamelModel):
    """Response model for SLA status of a single ticket."""
    ticket: TicketRefResponse
    risk_status: SLARiskStatusStr = Field(serialization_alias="riskStatus")
    resolution_deadline: datetime = Field(serialization_alias="resolutionTarget")
    response_deadline: datetime = Field(serialization_alias="responseTarget")
    time_remaining_ms: int = Field(
        serialization_alias="timeRemaining",
        description="Signed milliseconds until the resolution deadline"
    )
    time_remaining_label: str = Field(serialization_alias="timeRemainingLabel")
    percentage_remaining: float = Field(serialization_alias="percentageRemaining")
    response_breached: bool = Field(serialization_alias="isResponseBreached")
    resolution_breached: bool = Field(serialization_alias="isResolutionBreached")
    sla_level: Optional[SLALevelStr] = Field(None, serialization_alias="slaLevel")
    first_response: Optional[SLAStageResponse] = Field(None, serialization_alias="firstResponse")
    resolution: Optional[SLAStageResponse] = None

    @classmethod
    def from_domain(cls, status: TicketSLAStatus) -> "TicketSLAStatusResponse":
        ticket = status.ticket
        return cls(
            ticket=TicketRefResponse(
                id=ticket.id,
                project=ticket.project,
                title=ticket.title,
                status=ticket.status.value,
                priority=ticket.priority.value,
                created_at=ticket.created_at,
                updated_at=ticket.updated_at,
                assignee=ticket.assignee.display_name if ticket.assignee else None,
            ),
            risk_status=status.risk_status.value,
            resolution_deadline=status.resolution_deadline,
            response_deadline=status.response_deadline,
            time_remaining_ms=status.time_remaining_ms,
            time_remaining_label=format_time_remaining(status.time_remaining_ms),
            percentage_remaining=round(status.percentage_remaining, 1),
            response_breached=status.response_breached,
            resolution_breached=status.resolution_breached,
            sla_level=status.sla_level.value if status.sla_level else None,
            first_response=(
                SLAStageResponse.from_domain(status.first_response)
                if status.first_response else None
            ),
            resolution=(
                SLAStageResponse.from_domain(status.resolution)
                if status.resolution else None
            ),
        )


class SLASummaryResponse(_CamelModel):
    """Summary statistics for the SLA dashboard."""
    breached: int
    at_risk: int = Field(serialization_alias="atRisk")
    on_track: int = Field(serialization_alias="onTrack")

    @classmethod
    def from_domain(cls, summary: SLASummary) -> "SLASummaryResponse":
        return cls(breached=summary.breached, at_risk=summary.at_risk, on_track=summary.on_track)


class SLAStatusResponse(_CamelModel):
    """Response model for the SLA dashboard."""
    summary: SLASummaryResponse
    tickets: List[TicketSLAStatusResponse] = Field(
        default_factory=list,
        description="Breached and at-risk tickets, most urgent first"
    )

    @classmethod
    def from_domain(cls, dashboard: SLADashboard) -> "SLAStatusResponse":
        return cls(
            summary=SLASummaryResponse.from_domain(dashboard.summary),
            tickets=[TicketSLAStatusResponse.from_domain(s) for s in dashboard.tickets],
        )
