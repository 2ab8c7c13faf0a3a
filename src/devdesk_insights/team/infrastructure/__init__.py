"""
Team Infrastructure Layer
=========================

Process-wide response-time cache.
"""

from devdesk_insights.team.infrastructure.cache import ResponseTimeCache

__all__ = ["ResponseTimeCache"]
