"""Shared fixtures: an in-memory ticket source and ticket builders."""

import asyncio
from datetime import datetime, timedelta, timezone
from typing import Dict, List, Optional

import pytest

from devdesk_insights.config import Priority, TicketStatus
from devdesk_insights.tickets.application import ITicketSource
from devdesk_insights.tickets.domain import Comment, Member, Ticket

T0 = datetime(2024, 3, 4, 9, 0, tzinfo=timezone.utc)

ALICE = Member(id="u-alice", display_name="Alice Moreno", email="alice@acme.io")
BOB = Member(id="u-bob", display_name="Bob Okafor", email="Bob@Acme.io")
CAROL = Member(id="u-carol", display_name="Carol Singh", email="carol@acme.io")
CUSTOMER = Member(id="c-1", display_name="Pat Customer", email="pat@customer.com")


def make_ticket(
    ticket_id: int = 1,
    status: TicketStatus = TicketStatus.OPEN,
    priority: Priority = Priority.NORMAL,
    created_at: datetime = T0,
    updated_at: Optional[datetime] = None,
    resolved_at: Optional[datetime] = None,
    assignee: Optional[Member] = None,
    requester: Optional[Member] = CUSTOMER,
    project: str = "Support",
) -> Ticket:
    return Ticket(
        id=ticket_id,
        project=project,
        title=f"Ticket {ticket_id}",
        status=status,
        priority=priority,
        created_at=created_at,
        updated_at=updated_at or created_at,
        resolved_at=resolved_at,
        assignee=assignee,
        requester=requester,
    )


def make_comment(comment_id: int, author: Member, created_at: datetime) -> Comment:
    return Comment(id=comment_id, author=author, content="...", created_at=created_at)


class FakeTicketSource(ITicketSource):
    """
    In-memory ticket source.

    Tracks how many comment fetches are in flight at once so tests can check
    the sampler's concurrency bound. Per-ticket delays let fetches finish in
    a different order than they started.
    """

    def __init__(
        self,
        tickets: Optional[List[Ticket]] = None,
        members: Optional[List[Member]] = None,
        comments: Optional[Dict[int, List[Comment]]] = None,
        comment_errors: Optional[Dict[int, Exception]] = None,
        current_user: Member = ALICE,
        comment_delay: float = 0.0,
        comment_delays: Optional[Dict[int, float]] = None,
        error: Optional[Exception] = None,
    ):
        self.tickets = tickets or []
        self.members = members or []
        self.comments = comments or {}
        self.comment_errors = comment_errors or {}
        self.current_user = current_user
        self.comment_delay = comment_delay
        self.comment_delays = comment_delays or {}
        self.error = error
        self.comment_calls: List[int] = []
        self.comment_completions: List[int] = []
        self.in_flight = 0
        self.max_in_flight = 0

    async def list_tickets(self) -> List[Ticket]:
        if self.error:
            raise self.error
        return list(self.tickets)

    async def list_comments(self, ticket_id: int, project: Optional[str] = None) -> List[Comment]:
        self.comment_calls.append(ticket_id)
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            await asyncio.sleep(self.comment_delays.get(ticket_id, self.comment_delay))
            if ticket_id in self.comment_errors:
                raise self.comment_errors[ticket_id]
            return list(self.comments.get(ticket_id, []))
        finally:
            self.in_flight -= 1
            self.comment_completions.append(ticket_id)

    async def list_members(self) -> List[Member]:
        if self.error:
            raise self.error
        return list(self.members)

    async def get_current_user(self) -> Member:
        if self.error:
            raise self.error
        return self.current_user


@pytest.fixture
def now() -> datetime:
    return T0 + timedelta(days=20)


@pytest.fixture
def fake_source() -> FakeTicketSource:
    return FakeTicketSource(members=[ALICE, BOB, CAROL, CUSTOMER])
