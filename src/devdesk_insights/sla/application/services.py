"""
SLA Application Services
=========================

Application services orchestrate business logic and coordinate between
domain value objects and the ticket source.

Following SOLID principles:
- Single Responsibility: Each service has one clear purpose
- Dependency Inversion: Depend on abstractions (ITicketSource, ISLAPolicyProvider)
"""

from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Iterable, List, Optional

from devdesk_insights.config import SLARiskStatus
from devdesk_insights.sla.domain import (
    SLACalculator, SLADashboard, SLAPolicy, SLASummary, TicketSLAStatus
)
from devdesk_insights.shared.infrastructure.logging import get_logger
from devdesk_insights.tickets.application import ITicketSource
from devdesk_insights.tickets.domain import Ticket

logger = get_logger(__name__)

URGENCY_RANK = {
    SLARiskStatus.BREACHED: 0,
    SLARiskStatus.AT_RISK: 1,
    SLARiskStatus.ON_TRACK: 2,
}


# ========== Provider Interfaces (Dependency Inversion) ==========

class ISLAPolicyProvider(ABC):
    """Interface for SLA policy access."""

    @abstractmethod
    def get_policy(self) -> SLAPolicy:
        """Get the SLA policy in effect."""


# ========== Pure aggregation ==========

def filter_active(tickets: Iterable[Ticket]) -> List[Ticket]:
    """Keep New/Open/In Progress/Pending; SLA risk is meaningless once resolved."""
    return [ticket for ticket in tickets if ticket.is_active]


def sort_by_urgency(statuses: Iterable[TicketSLAStatus]) -> List[TicketSLAStatus]:
    """
    Stable urgency ordering.

    Breached before at-risk before on-track; within a tier ascending signed
    time remaining, so the most overdue ticket comes first.
    """
    return sorted(
        statuses,
        key=lambda status: (URGENCY_RANK[status.risk_status], status.time_remaining_ms)
    )


def summarize(statuses: Iterable[TicketSLAStatus]) -> SLASummary:
    """Count statuses by risk classification."""
    counts = {risk: 0 for risk in SLARiskStatus}
    for status in statuses:
        counts[status.risk_status] += 1
    return SLASummary(
        breached=counts[SLARiskStatus.BREACHED],
        at_risk=counts[SLARiskStatus.AT_RISK],
        on_track=counts[SLARiskStatus.ON_TRACK],
    )


# ========== Application Services ==========

class SLAService:
    """
    Service for SLA evaluation over a ticket set.

    Coordinates between domain logic and the ticket source.
    """

    def __init__(
        self,
        ticket_source: Optional[ITicketSource],
        policy_provider: ISLAPolicyProvider
    ):
        self._ticket_source = ticket_source
        self._policy_provider = policy_provider

    def evaluate_tickets(
        self,
        tickets: Iterable[Ticket],
        now: Optional[datetime] = None
    ) -> List[TicketSLAStatus]:
        """
        Evaluate every active ticket against the current policy.

        Raises:
            UnmappedPriorityException: a ticket's priority has no targets
        """
        policy = self._policy_provider.get_policy()
        current_time = now or datetime.now(timezone.utc)
        return [
            SLACalculator.evaluate(ticket, policy, current_time)
            for ticket in filter_active(tickets)
        ]

    def build_dashboard(
        self,
        tickets: Iterable[Ticket],
        now: Optional[datetime] = None
    ) -> SLADashboard:
        """Summary over all active tickets plus the breached/at-risk ones."""
        current_time = now or datetime.now(timezone.utc)
        statuses = sort_by_urgency(self.evaluate_tickets(tickets, current_time))
        summary = summarize(statuses)

        needing_action = tuple(
            status for status in statuses
            if status.risk_status in (SLARiskStatus.BREACHED, SLARiskStatus.AT_RISK)
        )

        logger.info(
            "SLA evaluation complete",
            extra={
                "tickets_evaluated": len(statuses),
                "breached": summary.breached,
                "at_risk": summary.at_risk,
            }
        )

        return SLADashboard(summary=summary, tickets=needing_action, evaluated_at=current_time)

    async def get_dashboard(self, now: Optional[datetime] = None) -> SLADashboard:
        """
        Fetch all tickets and build the SLA dashboard.

        Upstream failures propagate: no partial dashboard is meaningful.
        """
        if self._ticket_source is None:
            raise ValueError("Ticket source not configured")

        tickets = await self._ticket_source.list_tickets()
        return self.build_dashboard(tickets, now)
