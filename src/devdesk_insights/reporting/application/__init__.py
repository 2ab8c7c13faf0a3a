"""
Reporting Application Layer
===========================

Contains:
- Services: TeamActivityService, CheckpointService
- DTOs: Response models for the API
"""

from devdesk_insights.reporting.application.dto import (
    ActivityDayResponse,
    CheckpointKPIsResponse,
    CheckpointResponse,
    CheckpointTicketResponse,
    MemberResponse,
    PeriodResponse,
    TeamActivityResponse,
    TrendPointResponse,
)
from devdesk_insights.reporting.application.services import (
    CheckpointService,
    TeamActivityService,
    activity_level,
    round_half_up,
    utc_day,
)

__all__ = [
    # DTOs
    "ActivityDayResponse",
    "CheckpointKPIsResponse",
    "CheckpointResponse",
    "CheckpointTicketResponse",
    "MemberResponse",
    "PeriodResponse",
    "TeamActivityResponse",
    "TrendPointResponse",
    # Services
    "CheckpointService",
    "TeamActivityService",
    "activity_level",
    "round_half_up",
    "utc_day",
]
