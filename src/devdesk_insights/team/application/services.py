"""
Team Application Services
=========================

Turns the member directory, the ticket set and sampled response times into
per-member workload metrics and team-wide counts.

Following SOLID principles:
- Single Responsibility: TeamAggregator is pure; TeamService does the I/O
- Dependency Inversion: Depend on abstractions (ITicketSource)
"""

import asyncio
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Dict, Iterable, List, Mapping, Optional, Sequence

from devdesk_insights.config import TicketStatus
from devdesk_insights.sla.domain import format_average
from devdesk_insights.shared.infrastructure.logging import get_logger
from devdesk_insights.team.application.sampler import ResponseTimeSampler
from devdesk_insights.team.domain import (
    EMPTY_SAMPLES,
    TeamMemberMetrics,
    TeamOverview,
    TeamStats,
    TeamStatusThresholds,
)
from devdesk_insights.team.infrastructure.cache import ResponseTimeCache
from devdesk_insights.tickets.application import ITicketSource
from devdesk_insights.tickets.domain import Member, Ticket, email_domain

logger = get_logger(__name__)

ONE_WEEK = timedelta(days=7)
TWO_WEEKS = timedelta(days=14)
STALE_AFTER = timedelta(days=3)

UNASSIGNED_ATTENTION_STATUSES = (TicketStatus.NEW, TicketStatus.OPEN)
STALE_ATTENTION_STATUSES = (
    TicketStatus.OPEN, TicketStatus.IN_PROGRESS, TicketStatus.PENDING
)


def estimate_response_time(tickets_assigned: int) -> str:
    """Workload-based guess used when no response samples exist."""
    if tickets_assigned > 10:
        return "> 4 hours"
    if tickets_assigned > 5:
        return "2-4 hours"
    return "< 2 hours"


def _average(values: Sequence[float]) -> float:
    return sum(values) / len(values)


@dataclass
class _Tally:
    """Mutable per-request counters; never leaves the aggregator."""

    member: Member
    assigned: int = 0
    pending: int = 0
    resolved: int = 0
    this_week: int = 0
    previous_week: int = 0
    resolution_ms: List[float] = field(default_factory=list)


class TeamAggregator:
    """Pure aggregation over already fetched data."""

    def __init__(self, thresholds: Optional[TeamStatusThresholds] = None):
        self.thresholds = thresholds or TeamStatusThresholds()

    @staticmethod
    def internal_members(
        members: Iterable[Member],
        internal_domain: Optional[str]
    ) -> List[Member]:
        """
        Deduplicate by id (first occurrence wins) and keep staff only.

        Without a known domain nobody can be told apart, so everyone is kept.
        """
        domain = internal_domain.lower() if internal_domain else None
        seen = set()
        result = []
        for member in members:
            if member.id in seen:
                continue
            seen.add(member.id)
            if domain is not None and member.domain != domain:
                continue
            result.append(member)
        return result

    def aggregate(
        self,
        members: Iterable[Member],
        tickets: Sequence[Ticket],
        response_samples: Mapping[str, Sequence[float]] = EMPTY_SAMPLES,
        internal_domain: Optional[str] = None,
        now: Optional[datetime] = None
    ) -> TeamOverview:
        """
        Build the team overview.

        Args:
            members: Member directory, possibly with duplicates
            tickets: Active and resolved tickets
            response_samples: Lower-cased assignee email -> latencies in ms
            internal_domain: Staff email domain
            now: Reference time for weekly windows and staleness

        Returns:
            TeamOverview with members sorted by assigned tickets, descending
        """
        current_time = now or datetime.now(timezone.utc)
        week_ago = current_time - ONE_WEEK
        two_weeks_ago = current_time - TWO_WEEKS

        tallies: Dict[str, _Tally] = {}
        by_email: Dict[str, _Tally] = {}
        for member in self.internal_members(members, internal_domain):
            tally = _Tally(member=member)
            tallies[member.id] = tally
            if member.normalized_email:
                by_email.setdefault(member.normalized_email, tally)

        for ticket in tickets:
            if ticket.assignee is None:
                continue
            tally = tallies.get(ticket.assignee.id) or by_email.get(ticket.assignee_email)
            if tally is None:
                continue

            if ticket.is_active:
                tally.assigned += 1
                if ticket.status == TicketStatus.PENDING:
                    tally.pending += 1
            elif ticket.is_resolved:
                tally.resolved += 1
                resolved_at = ticket.resolved_at or ticket.updated_at
                if resolved_at >= week_ago:
                    tally.this_week += 1
                elif resolved_at >= two_weeks_ago:
                    tally.previous_week += 1
                # updated_at is not a resolution time, only resolved_at counts here
                if ticket.resolved_at is not None:
                    elapsed = ticket.resolved_at - ticket.created_at
                    tally.resolution_ms.append(elapsed.total_seconds() * 1000)

        metrics = [
            self._member_metrics(tally, response_samples)
            for tally in tallies.values()
        ]
        # sorted() is stable, ties keep directory order
        metrics = sorted(metrics, key=lambda m: m.tickets_assigned, reverse=True)

        stats = TeamStats(
            total_members=len(metrics),
            open_tickets=sum(
                1 for t in tickets if t.status in (TicketStatus.NEW, TicketStatus.OPEN)
            ),
            in_progress_tickets=sum(
                1 for t in tickets if t.status == TicketStatus.IN_PROGRESS
            ),
            needs_attention=self.count_needs_attention(tickets, current_time),
        )

        logger.info(
            "Team metrics aggregated",
            extra={
                "members": stats.total_members,
                "tickets": len(tickets),
                "needs_attention": stats.needs_attention,
                "members_with_samples": sum(1 for m in metrics if m.response_time_sampled),
            }
        )
        return TeamOverview(members=tuple(metrics), stats=stats)

    def _member_metrics(
        self,
        tally: _Tally,
        response_samples: Mapping[str, Sequence[float]]
    ) -> TeamMemberMetrics:
        samples = response_samples.get(tally.member.normalized_email) or ()
        if samples:
            avg_response = format_average(_average(samples))
        else:
            avg_response = estimate_response_time(tally.assigned)

        avg_resolution = (
            format_average(_average(tally.resolution_ms)) if tally.resolution_ms else "-"
        )

        return TeamMemberMetrics(
            member=tally.member,
            status=self.thresholds.classify(tally.assigned, tally.pending),
            tickets_assigned=tally.assigned,
            tickets_resolved=tally.resolved,
            weekly_resolutions=tally.this_week,
            previous_week_resolutions=tally.previous_week,
            pending_tickets=tally.pending,
            avg_response_time=avg_response,
            avg_resolution_time=avg_resolution,
            response_time_sampled=bool(samples),
        )

    @staticmethod
    def count_needs_attention(tickets: Iterable[Ticket], now: datetime) -> int:
        """Unassigned New/Open tickets plus open work idle for 3+ days."""
        stale_before = now - STALE_AFTER
        count = 0
        for ticket in tickets:
            if ticket.assignee is None and ticket.status in UNASSIGNED_ATTENTION_STATUSES:
                count += 1
            elif ticket.updated_at < stale_before and ticket.status in STALE_ATTENTION_STATUSES:
                count += 1
        return count


class TeamService:
    """
    Service for the team dashboard.

    Coordinates the ticket source, the shared response-time cache and the
    aggregator. One instance per request; the cache outlives it.
    """

    def __init__(
        self,
        ticket_source: ITicketSource,
        cache: ResponseTimeCache,
        sampler: ResponseTimeSampler,
        aggregator: Optional[TeamAggregator] = None,
        internal_domain: Optional[str] = None
    ):
        self._ticket_source = ticket_source
        self._cache = cache
        self._sampler = sampler
        self._aggregator = aggregator or TeamAggregator()
        self._internal_domain = internal_domain

    async def resolve_internal_domain(self, requester_email: Optional[str] = None) -> Optional[str]:
        """Configured domain, else the caller's own email domain."""
        if self._internal_domain:
            return self._internal_domain.lower()
        domain = email_domain(requester_email)
        if domain:
            return domain
        current_user = await self._ticket_source.get_current_user()
        return current_user.domain

    async def get_overview(
        self,
        requester_email: Optional[str] = None,
        now: Optional[datetime] = None
    ) -> TeamOverview:
        """
        Fetch members and tickets, read cached samples, aggregate.

        Never waits on response sampling: a stale or empty cache schedules a
        background refresh and the current samples (or heuristics) are used.

        The cache is shared by every request. Samples are tagged with the
        internal domain they were taken for, and a caller only sees samples
        for its own domain. Set ``INTERNAL_EMAIL_DOMAIN`` so all callers share
        one domain; otherwise callers from different domains take turns
        refreshing it.
        """
        current_time = now or datetime.now(timezone.utc)
        internal_domain = await self.resolve_internal_domain(requester_email)

        members, tickets = await asyncio.gather(
            self._ticket_source.list_members(),
            self._ticket_source.list_tickets(),
        )

        async def load_samples() -> Dict[str, List[float]]:
            return await self._sampler.sample(tickets, internal_domain, current_time)

        samples = self._cache.get(load_samples, internal_domain)
        overview = self._aggregator.aggregate(
            members, tickets, samples, internal_domain, current_time
        )

        snapshot = self._cache.snapshot
        if snapshot is not None and snapshot.internal_domain != internal_domain:
            snapshot = None
        return TeamOverview(
            members=overview.members,
            stats=overview.stats,
            response_times_computed_at=snapshot.computed_at if snapshot else None,
        )
