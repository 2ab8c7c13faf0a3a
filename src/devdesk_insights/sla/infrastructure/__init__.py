"""
SLA Infrastructure Layer
=========================

Infrastructure implementations for SLA monitoring:
- External: policy resolution from JSON/YAML configuration
"""

from devdesk_insights.sla.infrastructure.external import (
    StaticSLAPolicyProvider,
    resolve_policy,
)

__all__ = [
    "StaticSLAPolicyProvider",
    "resolve_policy",
]
