"""
SLA Application Layer
======================

Application layer for SLA monitoring module.

Contains:
- Services: Orchestrate business logic and coordinate with the ticket source
- DTOs: Data transfer objects for API serialization

This layer depends on the domain layer and provider interfaces,
but not on concrete infrastructure implementations.
"""

from devdesk_insights.sla.application.dto import (
    SLAStageResponse,
    SLAStatusResponse,
    SLASummaryResponse,
    TicketRefResponse,
    TicketSLAStatusResponse,
)
from devdesk_insights.sla.application.services import (
    ISLAPolicyProvider,
    SLAService,
    filter_active,
    sort_by_urgency,
    summarize,
)

__all__ = [
    # DTOs
    "SLAStageResponse",
    "SLAStatusResponse",
    "SLASummaryResponse",
    "TicketRefResponse",
    "TicketSLAStatusResponse",
    # Services
    "SLAService",
    "filter_active",
    "sort_by_urgency",
    "summarize",
    # Provider Interfaces
    "ISLAPolicyProvider",
]
