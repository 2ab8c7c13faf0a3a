"""
SLA Domain Layer
================

Domain layer for SLA monitoring module.

Contains:
- Entities: Derived results (TicketSLAStatus, SLAStageCheck, SLASummary)
- Value Objects: Immutable objects defined by attributes (SLATargets, SLAPolicy)
- Domain Services: Stateless business logic (SLACalculator, formatters, tier parsing)

This layer has no dependencies on infrastructure - pure Python business logic.
"""

from devdesk_insights.sla.domain.entities import (
    SLADashboard,
    SLAStageCheck,
    SLASummary,
    TicketSLAStatus,
)
from devdesk_insights.sla.domain.formatting import (
    format_average,
    format_duration,
    format_time_remaining,
)
from devdesk_insights.sla.domain.levels import (
    DEFAULT_SLA_LEVEL,
    coerce_sla_level,
    parse_sla_level,
)
from devdesk_insights.sla.domain.value_objects import (
    DEFAULT_SLA_TARGETS,
    SLA_LEVEL_TARGETS,
    SLACalculator,
    SLAPolicy,
    SLATargets,
)

__all__ = [
    # Entities
    "SLADashboard",
    "SLAStageCheck",
    "SLASummary",
    "TicketSLAStatus",
    # Value Objects & Services
    "DEFAULT_SLA_TARGETS",
    "SLA_LEVEL_TARGETS",
    "SLACalculator",
    "SLAPolicy",
    "SLATargets",
    # Tiers
    "DEFAULT_SLA_LEVEL",
    "coerce_sla_level",
    "parse_sla_level",
    # Formatting
    "format_average",
    "format_duration",
    "format_time_remaining",
]
