"""
Reporting Interfaces Layer
==========================

FastAPI route handlers for activity and checkpoint reports.
"""

from devdesk_insights.reporting.interfaces.controllers import reporting_router

__all__ = ["reporting_router"]
