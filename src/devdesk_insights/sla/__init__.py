"""
SLA Monitoring Module
=====================

Bounded Context for Service Level Agreement evaluation.

Responsibilities:
- Resolve response/resolution targets per priority, with optional override
- Compute deadlines and remaining time for every active ticket
- Classify tickets as on-track, at-risk or breached
- Rank tickets by urgency and summarize counts for the dashboard
"""

__version__ = "1.0.0"
