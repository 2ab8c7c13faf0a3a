"""
Ticket Source Interface
=======================

The analytics core depends on this abstraction only (Dependency Inversion);
concrete adapters live in the infrastructure layer.
"""

from abc import ABC, abstractmethod
from typing import List, Optional

from devdesk_insights.tickets.domain import Comment, Member, Ticket


class ITicketSource(ABC):
    """Interface for reading tickets, comments and members from the tracker."""

    @abstractmethod
    async def list_tickets(self) -> List[Ticket]:
        """List all tickets visible to the caller."""

    @abstractmethod
    async def list_comments(
        self,
        ticket_id: int,
        project: Optional[str] = None
    ) -> List[Comment]:
        """List comments of a ticket, in any order."""

    @abstractmethod
    async def list_members(self) -> List[Member]:
        """List team members across all projects (may contain duplicates)."""

    @abstractmethod
    async def get_current_user(self) -> Member:
        """Profile of the caller on whose behalf the source is queried."""
