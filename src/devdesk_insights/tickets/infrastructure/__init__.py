"""
Ticket Infrastructure Layer
===========================

Concrete ticket sources:
- External: httpx adapter for the upstream tracker API
"""

from devdesk_insights.tickets.infrastructure.external import (
    CommentPayload,
    HttpTicketSource,
    MemberPayload,
    TicketPayload,
)

__all__ = [
    "CommentPayload",
    "HttpTicketSource",
    "MemberPayload",
    "TicketPayload",
]
