"""
Reporting Domain Entities
=========================

Read models for the activity heatmap and the monthly checkpoint report.
"""

from dataclasses import dataclass
from datetime import date, datetime
from typing import Tuple

from devdesk_insights.tickets.domain import Member, Ticket


@dataclass(frozen=True)
class ActivityDay:
    """Ticket activity on one calendar day with a 0-4 intensity level."""

    day: date
    count: int
    level: int


@dataclass(frozen=True)
class TeamActivity:
    """Heatmap over a trailing year plus the members it can be filtered by."""

    days: Tuple[ActivityDay, ...]
    members: Tuple[Member, ...]

    @property
    def total_activities(self) -> int:
        return sum(day.count for day in self.days)


@dataclass(frozen=True)
class CheckpointKPIs:
    total_tickets_created: int
    total_tickets_resolved: int
    total_tickets_pending: int
    total_tickets_open: int
    avg_response_time_hours: float
    avg_resolution_time_hours: float
    sla_compliance_percent: int


@dataclass(frozen=True)
class TrendPoint:
    day: date
    tickets_created: int
    tickets_resolved: int
    avg_response_time_hours: float
    avg_resolution_time_hours: float


@dataclass(frozen=True)
class CheckpointReport:
    """KPIs and daily trend for a reporting period."""

    period_start: datetime
    period_end: datetime
    kpis: CheckpointKPIs
    trends: Tuple[TrendPoint, ...]
    tickets: Tuple[Ticket, ...]
