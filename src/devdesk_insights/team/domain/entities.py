"""
Team Domain Entities
====================

Per-member workload metrics and the team summary. All of them are built
fresh per request and discarded after serialization.
"""

from dataclasses import dataclass, field
from datetime import datetime
from types import MappingProxyType
from typing import Mapping, Optional, Sequence, Tuple

from pydantic import BaseModel, ConfigDict, Field

from devdesk_insights.config import MemberStatus
from devdesk_insights.tickets.domain import Member

EMPTY_SAMPLES: Mapping[str, Tuple[float, ...]] = MappingProxyType({})


class TeamStatusThresholds(BaseModel):
    """Workload limits above which a member is Behind / Needs Attention."""
    model_config = ConfigDict(frozen=True)

    needs_attention_pending: int = Field(default=5, ge=0)
    needs_attention_assigned: int = Field(default=15, ge=0)
    behind_pending: int = Field(default=2, ge=0)
    behind_assigned: int = Field(default=10, ge=0)

    def classify(self, tickets_assigned: int, pending_tickets: int) -> MemberStatus:
        """Strict greater-than comparisons, most severe status first."""
        if (pending_tickets > self.needs_attention_pending
                or tickets_assigned > self.needs_attention_assigned):
            return MemberStatus.NEEDS_ATTENTION
        if pending_tickets > self.behind_pending or tickets_assigned > self.behind_assigned:
            return MemberStatus.BEHIND
        return MemberStatus.ON_TRACK


@dataclass(frozen=True)
class TeamMemberMetrics:
    """Workload and performance figures for one internal member."""

    member: Member
    status: MemberStatus
    tickets_assigned: int = 0
    tickets_resolved: int = 0
    weekly_resolutions: int = 0
    previous_week_resolutions: int = 0
    pending_tickets: int = 0
    avg_response_time: str = "-"
    avg_resolution_time: str = "-"
    response_time_sampled: bool = False

    @property
    def weekly_trend(self) -> Optional[str]:
        """Signed week-over-week delta ("+3", "-1"); None when unchanged."""
        delta = self.weekly_resolutions - self.previous_week_resolutions
        if delta == 0:
            return None
        return f"{delta:+d}"


@dataclass(frozen=True)
class TeamStats:
    """Team-wide counts."""

    total_members: int
    open_tickets: int
    in_progress_tickets: int
    needs_attention: int


@dataclass(frozen=True)
class TeamOverview:
    """Members sorted by assigned tickets (descending) plus team stats."""

    members: Tuple[TeamMemberMetrics, ...]
    stats: TeamStats
    response_times_computed_at: Optional[datetime] = None


@dataclass(frozen=True)
class ResponseTimeSnapshot:
    """
    Cached first-response samples keyed by lower-cased assignee email.

    Read-only once built; a refresh replaces the whole snapshot.
    ``internal_domain`` is the staff domain the samples were taken for.
    """

    samples: Mapping[str, Tuple[float, ...]] = field(default_factory=lambda: EMPTY_SAMPLES)
    computed_at: Optional[datetime] = None
    internal_domain: Optional[str] = None

    @classmethod
    def build(
        cls,
        samples: Mapping[str, Sequence[float]],
        computed_at: datetime,
        internal_domain: Optional[str] = None
    ) -> "ResponseTimeSnapshot":
        frozen = {
            email.lower(): tuple(values)
            for email, values in samples.items()
            if values
        }
        return cls(
            samples=MappingProxyType(frozen),
            computed_at=computed_at,
            internal_domain=internal_domain,
        )
