"""
Team Interfaces Layer
=====================

FastAPI route handlers for the team dashboard.
"""

from devdesk_insights.team.interfaces.controllers import team_router

__all__ = ["team_router"]
