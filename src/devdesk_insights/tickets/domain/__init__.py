"""
Ticket Domain Layer
===================

Entities shared by every analytics module: tickets, comments and members.
"""

from devdesk_insights.tickets.domain.entities import (
    Comment,
    Member,
    Ticket,
    email_domain,
)

__all__ = [
    "Comment",
    "Member",
    "Ticket",
    "email_domain",
]
