"""
SLA Domain Entities
====================

Derived SLA results. They are computed fresh on every evaluation against a
caller-supplied "now" and never cached.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional, Tuple

from devdesk_insights.config import SLALevel, SLARiskStatus, SLAStageStatus
from devdesk_insights.tickets.domain import Ticket


@dataclass(frozen=True)
class SLAStageCheck:
    """First-response or resolution progress against its target, in minutes."""

    target_minutes: float
    elapsed_minutes: int
    remaining_minutes: float
    status: SLAStageStatus
    met: bool = False


@dataclass(frozen=True)
class TicketSLAStatus:
    """
    SLA status of a single ticket.

    ``time_remaining_ms`` is signed: negative once the resolution
    deadline has passed.
    """

    ticket: Ticket
    risk_status: SLARiskStatus
    resolution_deadline: datetime
    response_deadline: datetime
    time_remaining_ms: int
    percentage_remaining: float
    response_breached: bool
    resolution_breached: bool
    sla_level: Optional[SLALevel] = None
    first_response: Optional[SLAStageCheck] = None
    resolution: Optional[SLAStageCheck] = None


@dataclass(frozen=True)
class SLASummary:
    """Counts of evaluated tickets by risk classification."""

    breached: int = 0
    at_risk: int = 0
    on_track: int = 0

    @property
    def total(self) -> int:
        return self.breached + self.at_risk + self.on_track

    def to_dict(self) -> dict:
        """Convert to dictionary for API responses."""
        return {
            "breached": self.breached,
            "atRisk": self.at_risk,
            "onTrack": self.on_track,
        }


@dataclass(frozen=True)
class SLADashboard:
    """Summary over all active tickets plus the breached/at-risk ones, most urgent first."""

    summary: SLASummary
    tickets: Tuple[TicketSLAStatus, ...] = field(default_factory=tuple)
    evaluated_at: Optional[datetime] = None
