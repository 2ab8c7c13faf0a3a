"""
Ticket Domain Entities
======================

Read-only view of the work items supplied by the upstream issue tracker.

These entities are frozen: analytics derive fresh objects from them and never
write back, so the same ticket list can be shared between concurrent requests.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from devdesk_insights.config import (
    ACTIVE_STATUSES, RESOLVED_STATUSES, Priority, TicketStatus
)


def email_domain(email: Optional[str]) -> Optional[str]:
    """Lower-cased domain part of an email address, or None."""
    if not email or "@" not in email:
        return None
    domain = email.rsplit("@", 1)[1].strip().lower()
    return domain or None


@dataclass(frozen=True)
class Member:
    """A person known to the tracker (agent or requester)."""

    id: str
    display_name: str
    email: str = ""

    @property
    def normalized_email(self) -> str:
        return self.email.strip().lower()

    @property
    def domain(self) -> Optional[str]:
        return email_domain(self.email)


@dataclass(frozen=True)
class Comment:
    """A comment on a ticket."""

    id: int
    author: Member
    content: str
    created_at: datetime


@dataclass(frozen=True)
class Ticket:
    """
    Ticket entity representing a support ticket.

    Owned by the ticket source; the core only reads it.
    """

    # Core attributes
    id: int
    project: str
    title: str
    status: TicketStatus
    priority: Priority

    # Timestamps
    created_at: datetime
    updated_at: datetime
    resolved_at: Optional[datetime] = None

    # People
    assignee: Optional[Member] = None
    requester: Optional[Member] = None

    def __post_init__(self):
        """Validate ticket on initialization."""
        if self.resolved_at and self.resolved_at < self.created_at:
            raise ValueError("resolved_at cannot be before created_at")

    @property
    def is_active(self) -> bool:
        """Check if ticket still needs resolution."""
        return self.status in ACTIVE_STATUSES

    @property
    def is_resolved(self) -> bool:
        """Check if ticket has been resolved or closed."""
        return self.status in RESOLVED_STATUSES

    @property
    def assignee_email(self) -> str:
        return self.assignee.normalized_email if self.assignee else ""

    @property
    def requester_email(self) -> str:
        return self.requester.normalized_email if self.requester else ""
