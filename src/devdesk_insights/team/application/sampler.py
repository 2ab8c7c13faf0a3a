"""
Response-Time Sampler
=====================

Estimates first-response time per assignee from comment histories, since
the upstream tracker does not record it.

A response is the first comment by an internal (same email domain) author
who is not the requester, posted strictly after the ticket was created.
"""

import asyncio
from datetime import datetime, timedelta, timezone
from typing import Dict, Iterable, List, Optional

from devdesk_insights.core import UpstreamAuthException
from devdesk_insights.shared.infrastructure.logging import get_logger, log_latency
from devdesk_insights.tickets.application import ITicketSource
from devdesk_insights.tickets.domain import Comment, Ticket

logger = get_logger(__name__)

DEFAULT_BATCH_SIZE = 10
DEFAULT_LOOKBACK_DAYS = 30
DEFAULT_MAX_TICKETS = 100


def first_internal_response_ms(
    ticket: Ticket,
    comments: Iterable[Comment],
    internal_domain: str
) -> Optional[float]:
    """Milliseconds from creation to the first qualifying staff comment, or None."""
    domain = internal_domain.lower()
    requester_email = ticket.requester_email

    for comment in sorted(comments, key=lambda c: c.created_at):
        author = comment.author
        if author.domain != domain:
            continue
        if requester_email and author.normalized_email == requester_email:
            continue
        elapsed_ms = (comment.created_at - ticket.created_at).total_seconds() * 1000
        if elapsed_ms > 0:
            return elapsed_ms
    return None


class ResponseTimeSampler:
    """
    Samples first-response latencies for recent tickets.

    Comment fetches run in fixed-size batches; every batch settles before the
    next one starts, so at most ``batch_size`` requests are in flight.
    """

    def __init__(
        self,
        ticket_source: ITicketSource,
        batch_size: int = DEFAULT_BATCH_SIZE,
        lookback_days: int = DEFAULT_LOOKBACK_DAYS,
        max_tickets: int = DEFAULT_MAX_TICKETS
    ):
        if batch_size < 1:
            raise ValueError("batch_size must be at least 1")
        self._ticket_source = ticket_source
        self.batch_size = batch_size
        self.lookback = timedelta(days=lookback_days)
        self.max_tickets = max_tickets

    def select_tickets(self, tickets: Iterable[Ticket], now: datetime) -> List[Ticket]:
        """Most recently created assigned tickets inside the lookback window."""
        cutoff = now - self.lookback
        recent = [
            ticket for ticket in tickets
            if ticket.assignee_email and ticket.created_at >= cutoff
        ]
        recent.sort(key=lambda t: t.created_at, reverse=True)
        return recent[:self.max_tickets]

    async def _first_response_ms(self, ticket: Ticket, internal_domain: str) -> Optional[float]:
        comments = await self._ticket_source.list_comments(ticket.id, ticket.project)
        return first_internal_response_ms(ticket, comments, internal_domain)

    async def sample(
        self,
        tickets: Iterable[Ticket],
        internal_domain: Optional[str],
        now: Optional[datetime] = None
    ) -> Dict[str, List[float]]:
        """
        Sample response times.

        Args:
            tickets: Candidate tickets (not mutated)
            internal_domain: Staff email domain
            now: Reference time for the lookback window

        Returns:
            Lower-cased assignee email -> latencies in ms. Assignees without
            samples are absent.

        Raises:
            UpstreamAuthException: the tracker rejected the credentials
        """
        if not internal_domain:
            logger.debug("No internal email domain, skipping response sampling")
            return {}

        current_time = now or datetime.now(timezone.utc)
        selected = self.select_tickets(tickets, current_time)
        samples: Dict[str, List[float]] = {}
        failures = 0

        with log_latency(logger, "response_time_sampling", tickets=len(selected)):
            for start in range(0, len(selected), self.batch_size):
                batch = selected[start:start + self.batch_size]
                results = await asyncio.gather(
                    *(self._first_response_ms(ticket, internal_domain) for ticket in batch),
                    return_exceptions=True
                )

                # gather keeps argument order, whatever the completion order
                for ticket, result in zip(batch, results):
                    if isinstance(result, UpstreamAuthException):
                        raise result
                    if isinstance(result, BaseException) and not isinstance(result, Exception):
                        raise result
                    if isinstance(result, Exception):
                        failures += 1
                        logger.warning(
                            "Comment fetch failed, no response sample",
                            extra={"ticket_id": ticket.id, "error": str(result)}
                        )
                        continue
                    if result is None:
                        continue
                    samples.setdefault(ticket.assignee_email, []).append(result)

        logger.info(
            "Response times sampled",
            extra={
                "tickets_sampled": len(selected),
                "assignees": len(samples),
                "failures": failures,
            }
        )
        return samples
