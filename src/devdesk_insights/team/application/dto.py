"""
Team Application DTOs
=====================

Response models for the team dashboard. Field names are serialized in
camelCase for the browser client.
"""

from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from devdesk_insights.team.domain import TeamMemberMetrics, TeamOverview, TeamStats

MemberStatusStr = Literal["On Track", "Behind", "Needs Attention"]


class _CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class TeamMemberResponse(_CamelModel):
    """Workload metrics of one member."""
    id: str
    display_name: str = Field(serialization_alias="displayName")
    email: str
    status: MemberStatusStr
    tickets_assigned: int = Field(serialization_alias="ticketsAssigned")
    tickets_resolved: int = Field(serialization_alias="ticketsResolved")
    weekly_resolutions: int = Field(serialization_alias="weeklyResolutions")
    previous_week_resolutions: int = Field(serialization_alias="previousWeekResolutions")
    weekly_trend: Optional[str] = Field(
        None,
        serialization_alias="weeklyTrend",
        description="Signed week-over-week delta, null when unchanged"
    )
    pending_tickets: int = Field(serialization_alias="pendingTickets")
    avg_response_time: str = Field(serialization_alias="avgResponseTime")
    avg_resolution_time: str = Field(serialization_alias="avgResolutionTime")

    @classmethod
    def from_domain(cls, metrics: TeamMemberMetrics) -> "TeamMemberResponse":
        return cls(
            id=metrics.member.id,
            display_name=metrics.member.display_name,
            email=metrics.member.email,
            status=metrics.status.value,
            tickets_assigned=metrics.tickets_assigned,
            tickets_resolved=metrics.tickets_resolved,
            weekly_resolutions=metrics.weekly_resolutions,
            previous_week_resolutions=metrics.previous_week_resolutions,
            weekly_trend=metrics.weekly_trend,
            pending_tickets=metrics.pending_tickets,
            avg_response_time=metrics.avg_response_time,
            avg_resolution_time=metrics.avg_resolution_time,
        )


class TeamStatsResponse(_CamelModel):
    """Team-wide counts."""
    total_members: int = Field(serialization_alias="totalMembers")
    open_tickets: int = Field(serialization_alias="openTickets")
    in_progress_tickets: int = Field(serialization_alias="inProgressTickets")
    needs_attention: int = Field(serialization_alias="needsAttention")

    @classmethod
    def from_domain(cls, stats: TeamStats) -> "TeamStatsResponse":
        return cls(
            total_members=stats.total_members,
            open_tickets=stats.open_tickets,
            in_progress_tickets=stats.in_progress_tickets,
            needs_attention=stats.needs_attention,
        )


class TeamResponse(_CamelModel):
    """Response model for the team dashboard."""
    members: List[TeamMemberResponse] = Field(default_factory=list)
    stats: TeamStatsResponse
    response_times_computed_at: Optional[datetime] = Field(
        None,
        serialization_alias="responseTimesComputedAt",
        description="When the sampled response times were computed; null before the first refresh"
    )

    @classmethod
    def from_domain(cls, overview: TeamOverview) -> "TeamResponse":
        return cls(
            members=[TeamMemberResponse.from_domain(m) for m in overview.members],
            stats=TeamStatsResponse.from_domain(overview.stats),
            response_times_computed_at=overview.response_times_computed_at,
        )
