"""
Team Application Layer
======================

Contains:
- Services: TeamAggregator (pure), TeamService (orchestration)
- Sampler: ResponseTimeSampler
- DTOs: Response models for the API
"""

from devdesk_insights.team.application.dto import (
    TeamMemberResponse,
    TeamResponse,
    TeamStatsResponse,
)
from devdesk_insights.team.application.sampler import (
    ResponseTimeSampler,
    first_internal_response_ms,
)
from devdesk_insights.team.application.services import (
    TeamAggregator,
    TeamService,
    estimate_response_time,
)

__all__ = [
    # DTOs
    "TeamMemberResponse",
    "TeamResponse",
    "TeamStatsResponse",
    # Sampling
    "ResponseTimeSampler",
    "first_internal_response_ms",
    # Services
    "TeamAggregator",
    "TeamService",
    "estimate_response_time",
]
