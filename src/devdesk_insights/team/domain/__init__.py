"""
Team Domain Layer
=================

Contains:
- Entities: TeamMemberMetrics, TeamStats, TeamOverview
- Value Objects: TeamStatusThresholds, ResponseTimeSnapshot
"""

from devdesk_insights.team.domain.entities import (
    EMPTY_SAMPLES,
    ResponseTimeSnapshot,
    TeamMemberMetrics,
    TeamOverview,
    TeamStats,
    TeamStatusThresholds,
)

__all__ = [
    "EMPTY_SAMPLES",
    "ResponseTimeSnapshot",
    "TeamMemberMetrics",
    "TeamOverview",
    "TeamStats",
    "TeamStatusThresholds",
]
