"""
Reporting Application Services
==============================

Activity heatmap and monthly checkpoint report over the ticket set.

Days are calendar days in UTC.
"""

import asyncio
import math
from datetime import date, datetime, time, timedelta, timezone
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from devdesk_insights.config import TicketStatus
from devdesk_insights.core import ValidationException
from devdesk_insights.reporting.domain import (
    ActivityDay,
    CheckpointKPIs,
    CheckpointReport,
    TeamActivity,
    TrendPoint,
)
from devdesk_insights.shared.infrastructure.logging import get_logger
from devdesk_insights.tickets.application import ITicketSource
from devdesk_insights.tickets.domain import Member, Ticket

logger = get_logger(__name__)

ACTIVITY_WINDOW_DAYS = 365
DEFAULT_CHECKPOINT_DAYS = 30
RESPONSE_TARGET_HOURS = 24
SECONDS_PER_HOUR = 3600

CHECKPOINT_OPEN_STATUSES = (TicketStatus.NEW, TicketStatus.OPEN, TicketStatus.IN_PROGRESS)
ALL_MEMBERS = "all"


def utc_day(moment: datetime) -> date:
    """Calendar day of a timestamp in UTC; naive timestamps are taken as UTC."""
    if moment.tzinfo is None:
        return moment.date()
    return moment.astimezone(timezone.utc).date()


def activity_level(count: int, max_count: int) -> int:
    """Quartile bucket of a day's count relative to the busiest day."""
    if count == 0 or max_count == 0:
        return 0
    ratio = count / max_count
    if ratio <= 0.25:
        return 1
    if ratio <= 0.5:
        return 2
    if ratio <= 0.75:
        return 3
    return 4


def round_half_up(value: float, digits: int = 0) -> float:
    scale = 10 ** digits
    return math.floor(value * scale + 0.5) / scale


def _hours(start: datetime, end: datetime) -> float:
    return (end - start).total_seconds() / SECONDS_PER_HOUR


def _mean_hours(values: Sequence[float]) -> float:
    if not values:
        return 0.0
    return round_half_up(sum(values) / len(values), 1)


def _response_hours(tickets: Iterable[Ticket]) -> List[float]:
    # First update stands in for the first response
    return [
        _hours(t.created_at, t.updated_at)
        for t in tickets
        if t.updated_at != t.created_at
    ]


def _resolution_hours(tickets: Iterable[Ticket]) -> List[float]:
    return [_hours(t.created_at, t.updated_at) for t in tickets]


class TeamActivityService:
    """Per-day ticket activity over the trailing year."""

    def __init__(self, ticket_source: Optional[ITicketSource] = None):
        self._ticket_source = ticket_source

    @staticmethod
    def build_activity(
        tickets: Iterable[Ticket],
        members: Iterable[Member],
        member_id: Optional[str] = None,
        now: Optional[datetime] = None
    ) -> TeamActivity:
        """
        Build the activity heatmap.

        Args:
            tickets: All tickets
            members: Member directory, possibly with duplicates
            member_id: Restrict to tickets assigned to this member; None or
                "all" means the whole team
            now: Reference time; the range ends on its day

        Returns:
            TeamActivity with one entry per day, oldest first
        """
        current_time = now or datetime.now(timezone.utc)
        end_day = utc_day(current_time)
        start_day = end_day - timedelta(days=ACTIVITY_WINDOW_DAYS - 1)

        counts: Dict[date, int] = {
            start_day + timedelta(days=offset): 0
            for offset in range(ACTIVITY_WINDOW_DAYS)
        }

        if member_id and member_id != ALL_MEMBERS:
            tickets = [t for t in tickets if t.assignee and t.assignee.id == member_id]

        for ticket in tickets:
            created_day = utc_day(ticket.created_at)
            if created_day in counts:
                counts[created_day] += 1
            updated_day = utc_day(ticket.updated_at)
            if updated_day != created_day and updated_day in counts:
                counts[updated_day] += 1

        max_count = max(max(counts.values()), 1)
        days = tuple(
            ActivityDay(day=day, count=count, level=activity_level(count, max_count))
            for day, count in counts.items()
        )

        unique: Dict[str, Member] = {}
        for member in members:
            unique.setdefault(member.id, member)
        sorted_members = sorted(unique.values(), key=lambda m: m.display_name.lower())

        return TeamActivity(days=days, members=tuple(sorted_members))

    async def get_activity(
        self,
        member_id: Optional[str] = None,
        now: Optional[datetime] = None
    ) -> TeamActivity:
        """Fetch tickets and members, then build the heatmap."""
        if self._ticket_source is None:
            raise ValueError("Ticket source not configured")

        tickets, members = await asyncio.gather(
            self._ticket_source.list_tickets(),
            self._ticket_source.list_members(),
        )
        activity = self.build_activity(tickets, members, member_id, now)
        logger.info(
            "Team activity built",
            extra={
                "member_filter": member_id or ALL_MEMBERS,
                "total_activities": activity.total_activities,
            }
        )
        return activity


class CheckpointService:
    """KPIs and daily trend for a reporting period."""

    def __init__(self, ticket_source: Optional[ITicketSource] = None):
        self._ticket_source = ticket_source

    @staticmethod
    def period_bounds(
        start: Optional[date] = None,
        end: Optional[date] = None,
        now: Optional[datetime] = None
    ) -> Tuple[datetime, datetime]:
        """Start of the first day and end of the last day, in UTC."""
        current_time = now or datetime.now(timezone.utc)
        end_day = end or utc_day(current_time)
        start_day = start or (end_day - timedelta(days=DEFAULT_CHECKPOINT_DAYS))
        if start_day > end_day:
            raise ValidationException(
                "startDate must not be after endDate",
                {"start_date": start_day.isoformat(), "end_date": end_day.isoformat()}
            )
        return (
            datetime.combine(start_day, time.min, tzinfo=timezone.utc),
            datetime.combine(end_day, time.max, tzinfo=timezone.utc),
        )

    @staticmethod
    def build_checkpoint(
        tickets: Sequence[Ticket],
        start: Optional[date] = None,
        end: Optional[date] = None,
        project: Optional[str] = None,
        now: Optional[datetime] = None
    ) -> CheckpointReport:
        """
        Build the checkpoint report.

        Tickets count as created when created inside the period and as
        resolved when Resolved/Closed with their last update inside it.

        Raises:
            ValidationException: start is after end
        """
        period_start, period_end = CheckpointService.period_bounds(start, end, now)
        if project:
            tickets = [t for t in tickets if t.project == project]

        def in_period(moment: datetime) -> bool:
            return period_start <= moment <= period_end

        created = [t for t in tickets if in_period(t.created_at)]
        resolved = [t for t in tickets if t.is_resolved and in_period(t.updated_at)]

        response_hours = _response_hours(created)
        within_target = sum(1 for h in response_hours if h <= RESPONSE_TARGET_HOURS)
        compliance = (within_target / len(response_hours) * 100) if response_hours else 0

        kpis = CheckpointKPIs(
            total_tickets_created=len(created),
            total_tickets_resolved=len({t.id for t in resolved}),
            total_tickets_pending=sum(1 for t in tickets if t.status == TicketStatus.PENDING),
            total_tickets_open=sum(1 for t in tickets if t.status in CHECKPOINT_OPEN_STATUSES),
            avg_response_time_hours=_mean_hours(response_hours),
            avg_resolution_time_hours=_mean_hours(_resolution_hours(resolved)),
            sla_compliance_percent=int(round_half_up(compliance)),
        )

        trends = CheckpointService._daily_trend(
            tickets, period_start.date(), period_end.date()
        )

        relevant_ids = {t.id for t in created} | {t.id for t in resolved}
        relevant = sorted(
            (t for t in tickets if t.id in relevant_ids),
            key=lambda t: t.created_at,
            reverse=True
        )

        return CheckpointReport(
            period_start=period_start,
            period_end=period_end,
            kpis=kpis,
            trends=trends,
            tickets=tuple(relevant),
        )

    @staticmethod
    def _daily_trend(
        tickets: Sequence[Ticket],
        first_day: date,
        last_day: date
    ) -> Tuple[TrendPoint, ...]:
        created_by_day: Dict[date, List[Ticket]] = {}
        resolved_by_day: Dict[date, List[Ticket]] = {}
        for ticket in tickets:
            created_by_day.setdefault(utc_day(ticket.created_at), []).append(ticket)
            if ticket.is_resolved:
                resolved_by_day.setdefault(utc_day(ticket.updated_at), []).append(ticket)

        points = []
        day = first_day
        while day <= last_day:
            created = created_by_day.get(day, [])
            resolved = resolved_by_day.get(day, [])
            points.append(TrendPoint(
                day=day,
                tickets_created=len(created),
                tickets_resolved=len(resolved),
                avg_response_time_hours=_mean_hours(_response_hours(created)),
                avg_resolution_time_hours=_mean_hours(_resolution_hours(resolved)),
            ))
            day += timedelta(days=1)
        return tuple(points)

    async def get_checkpoint(
        self,
        start: Optional[date] = None,
        end: Optional[date] = None,
        project: Optional[str] = None,
        now: Optional[datetime] = None
    ) -> CheckpointReport:
        """Fetch tickets and build the checkpoint report."""
        if self._ticket_source is None:
            raise ValueError("Ticket source not configured")

        tickets = await self._ticket_source.list_tickets()
        report = self.build_checkpoint(tickets, start, end, project, now)
        logger.info(
            "Checkpoint report built",
            extra={
                "period_start": report.period_start.isoformat(),
                "period_end": report.period_end.isoformat(),
                "project": project,
                "tickets_created": report.kpis.total_tickets_created,
                "tickets_resolved": report.kpis.total_tickets_resolved,
            }
        )
        return report
