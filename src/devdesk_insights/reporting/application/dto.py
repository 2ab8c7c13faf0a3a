"""
Reporting Application DTOs
==========================

Response models for the activity heatmap and the checkpoint report.
"""

from datetime import date, datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from devdesk_insights.reporting.domain import (
    CheckpointKPIs, CheckpointReport, TeamActivity, TrendPoint
)
from devdesk_insights.tickets.domain import Member, Ticket


class _CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class MemberResponse(_CamelModel):
    id: str
    display_name: str = Field(serialization_alias="displayName")
    email: str

    @classmethod
    def from_domain(cls, member: Member) -> "MemberResponse":
        return cls(id=member.id, display_name=member.display_name, email=member.email)


class ActivityDayResponse(_CamelModel):
    day: date = Field(serialization_alias="date")
    count: int
    level: int = Field(ge=0, le=4)


class TeamActivityResponse(_CamelModel):
    """Response model for the activity heatmap."""
    activities: List[ActivityDayResponse]
    members: List[MemberResponse]
    total_activities: int = Field(serialization_alias="totalActivities")

    @classmethod
    def from_domain(cls, activity: TeamActivity) -> "TeamActivityResponse":
        return cls(
            activities=[
                ActivityDayResponse(day=d.day, count=d.count, level=d.level)
                for d in activity.days
            ],
            members=[MemberResponse.from_domain(m) for m in activity.members],
            total_activities=activity.total_activities,
        )


class PeriodResponse(_CamelModel):
    start_date: datetime = Field(serialization_alias="startDate")
    end_date: datetime = Field(serialization_alias="endDate")


class CheckpointKPIsResponse(_CamelModel):
    total_tickets_created: int = Field(serialization_alias="totalTicketsCreated")
    total_tickets_resolved: int = Field(serialization_alias="totalTicketsResolved")
    total_tickets_pending: int = Field(serialization_alias="totalTicketsPending")
    total_tickets_open: int = Field(serialization_alias="totalTicketsOpen")
    avg_response_time_hours: float = Field(serialization_alias="avgResponseTimeHours")
    avg_resolution_time_hours: float = Field(serialization_alias="avgResolutionTimeHours")
    sla_compliance_percent: int = Field(serialization_alias="slaCompliancePercent")

    @classmethod
    def from_domain(cls, kpis: CheckpointKPIs) -> "CheckpointKPIsResponse":
        return cls(
            total_tickets_created=kpis.total_tickets_created,
            total_tickets_resolved=kpis.total_tickets_resolved,
            total_tickets_pending=kpis.total_tickets_pending,
            total_tickets_open=kpis.total_tickets_open,
            avg_response_time_hours=kpis.avg_response_time_hours,
            avg_resolution_time_hours=kpis.avg_resolution_time_hours,
            sla_compliance_percent=kpis.sla_compliance_percent,
        )


class TrendPointResponse(_CamelModel):
    day: date = Field(serialization_alias="date")
    tickets_created: int = Field(serialization_alias="ticketsCreated")
    tickets_resolved: int = Field(serialization_alias="ticketsResolved")
    avg_response_time_hours: float = Field(serialization_alias="avgResponseTimeHours")
    avg_resolution_time_hours: float = Field(serialization_alias="avgResolutionTimeHours")

    @classmethod
    def from_domain(cls, point: TrendPoint) -> "TrendPointResponse":
        return cls(
            day=point.day,
            tickets_created=point.tickets_created,
            tickets_resolved=point.tickets_resolved,
            avg_response_time_hours=point.avg_response_time_hours,
            avg_resolution_time_hours=point.avg_resolution_time_hours,
        )


class CheckpointTicketResponse(_CamelModel):
    id: int
    project: str
    title: str
    status: str
    priority: str
    created_at: datetime = Field(serialization_alias="createdAt")
    updated_at: datetime = Field(serialization_alias="updatedAt")
    assignee: Optional[str] = None

    @classmethod
    def from_domain(cls, ticket: Ticket) -> "CheckpointTicketResponse":
        return cls(
            id=ticket.id,
            project=ticket.project,
            title=ticket.title,
            status=ticket.status.value,
            priority=ticket.priority.value,
            created_at=ticket.created_at,
            updated_at=ticket.updated_at,
            assignee=ticket.assignee.display_name if ticket.assignee else None,
        )


class CheckpointResponse(_CamelModel):
    """Response model for the monthly checkpoint report."""
    period: PeriodResponse
    kpis: CheckpointKPIsResponse
    trends: List[TrendPointResponse]
    tickets: List[CheckpointTicketResponse]

    @classmethod
    def from_domain(cls, report: CheckpointReport) -> "CheckpointResponse":
        return cls(
            period=PeriodResponse(start_date=report.period_start, end_date=report.period_end),
            kpis=CheckpointKPIsResponse.from_domain(report.kpis),
            trends=[TrendPointResponse.from_domain(p) for p in report.trends],
            tickets=[CheckpointTicketResponse.from_domain(t) for t in report.tickets],
        )
