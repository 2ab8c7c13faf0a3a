"""
Reporting Domain Layer
======================

Contains:
- Entities: ActivityDay, TeamActivity, CheckpointKPIs, TrendPoint, CheckpointReport
"""

from devdesk_insights.reporting.domain.entities import (
    ActivityDay,
    CheckpointKPIs,
    CheckpointReport,
    TeamActivity,
    TrendPoint,
)

__all__ = [
    "ActivityDay",
    "CheckpointKPIs",
    "CheckpointReport",
    "TeamActivity",
    "TrendPoint",
]
