"""
Ticket Application Layer
========================

Interfaces the analytics services consume.
"""

from devdesk_insights.tickets.application.interfaces import ITicketSource

__all__ = ["ITicketSource"]
