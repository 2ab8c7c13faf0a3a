"""Tests for first-response sampling."""

from datetime import timedelta

import pytest

from devdesk_insights.core import UpstreamAuthException, UpstreamUnavailableException
from devdesk_insights.team.application import ResponseTimeSampler, first_internal_response_ms
from devdesk_insights.tickets.domain import Member

from tests.conftest import (
    ALICE, BOB, CAROL, CUSTOMER, T0, FakeTicketSource, make_comment, make_ticket
)

MINUTE_MS = 60 * 1000


class TestFirstInternalResponse:
    def test_first_staff_comment_after_creation(self):
        ticket = make_ticket(assignee=ALICE)
        comments = [
            make_comment(3, BOB, T0 + timedelta(minutes=90)),
            make_comment(1, CUSTOMER, T0 + timedelta(minutes=5)),
            make_comment(2, ALICE, T0 + timedelta(minutes=30)),
        ]
        assert first_internal_response_ms(ticket, comments, "acme.io") == 30 * MINUTE_MS

    def test_requester_comment_is_ignored_even_when_internal(self):
        ticket = make_ticket(assignee=BOB, requester=ALICE)
        comments = [
            make_comment(1, ALICE, T0 + timedelta(minutes=10)),
            make_comment(2, BOB, T0 + timedelta(minutes=40)),
        ]
        assert first_internal_response_ms(ticket, comments, "acme.io") == 40 * MINUTE_MS

    def test_comment_at_creation_time_does_not_count(self):
        ticket = make_ticket(assignee=ALICE)
        comments = [
            make_comment(1, ALICE, T0),
            make_comment(2, ALICE, T0 + timedelta(minutes=2)),
        ]
        assert first_internal_response_ms(ticket, comments, "acme.io") == 2 * MINUTE_MS

    def test_domain_match_is_case_insensitive(self):
        ticket = make_ticket(assignee=BOB)
        comments = [make_comment(1, BOB, T0 + timedelta(minutes=1))]
        assert first_internal_response_ms(ticket, comments, "ACME.IO") == MINUTE_MS

    def test_no_qualifying_comment(self):
        ticket = make_ticket(assignee=ALICE)
        comments = [make_comment(1, CUSTOMER, T0 + timedelta(minutes=5))]
        assert first_internal_response_ms(ticket, comments, "acme.io") is None


class TestSelectTickets:
    def test_recent_assigned_tickets_newest_first_and_capped(self, now):
        tickets = [
            make_ticket(ticket_id=i, assignee=ALICE, created_at=now - timedelta(days=i))
            for i in range(1, 6)
        ]
        tickets.append(make_ticket(ticket_id=99, assignee=None, created_at=now))
        tickets.append(make_ticket(ticket_id=98, assignee=ALICE, created_at=now - timedelta(days=45)))
        tickets.append(make_ticket(
            ticket_id=97,
            assignee=Member(id="x", display_name="No Mail"),
            created_at=now,
        ))

        sampler = ResponseTimeSampler(FakeTicketSource(), max_tickets=3)
        selected = sampler.select_tickets(tickets, now)
        assert [t.id for t in selected] == [1, 2, 3]


class TestSample:
    async def test_samples_keyed_by_lowercased_assignee_email(self, now):
        created = now - timedelta(days=1)
        tickets = [
            make_ticket(ticket_id=1, assignee=BOB, created_at=created),
            make_ticket(ticket_id=2, assignee=BOB, created_at=created),
            make_ticket(ticket_id=3, assignee=ALICE, created_at=created),
        ]
        source = FakeTicketSource(comments={
            1: [make_comment(1, BOB, created + timedelta(minutes=10))],
            2: [make_comment(2, BOB, created + timedelta(minutes=20))],
            3: [make_comment(3, CUSTOMER, created + timedelta(minutes=5))],
        })

        samples = await ResponseTimeSampler(source).sample(tickets, "acme.io", now)

        assert samples == {"bob@acme.io": [10 * MINUTE_MS, 20 * MINUTE_MS]}
        assert "alice@acme.io" not in samples

    async def test_samples_follow_their_ticket_when_fetches_finish_out_of_order(self, now):
        tickets = [
            make_ticket(ticket_id=1, assignee=ALICE, created_at=now - timedelta(hours=1)),
            make_ticket(ticket_id=2, assignee=BOB, created_at=now - timedelta(hours=2)),
            make_ticket(ticket_id=3, assignee=CAROL, created_at=now - timedelta(hours=3)),
        ]
        source = FakeTicketSource(
            comments={
                1: [make_comment(1, ALICE, now - timedelta(hours=1) + timedelta(minutes=10))],
                2: [make_comment(2, BOB, now - timedelta(hours=2) + timedelta(minutes=20))],
                3: [make_comment(3, CAROL, now - timedelta(hours=3) + timedelta(minutes=30))],
            },
            comment_delays={1: 0.06, 2: 0.03, 3: 0.0},
        )

        samples = await ResponseTimeSampler(source, batch_size=3).sample(tickets, "acme.io", now)

        assert source.comment_calls == [1, 2, 3]
        assert source.comment_completions == [3, 2, 1]
        assert samples == {
            "alice@acme.io": [10 * MINUTE_MS],
            "bob@acme.io": [20 * MINUTE_MS],
            "carol@acme.io": [30 * MINUTE_MS],
        }

    async def test_never_exceeds_batch_size_in_flight(self, now):
        tickets = [
            make_ticket(ticket_id=i, assignee=ALICE, created_at=now - timedelta(hours=i))
            for i in range(1, 26)
        ]
        source = FakeTicketSource(comment_delay=0.01)

        await ResponseTimeSampler(source, batch_size=10).sample(tickets, "acme.io", now)

        assert len(source.comment_calls) == 25
        assert source.max_in_flight == 10

    async def test_failed_fetch_skips_only_that_ticket(self, now):
        created = now - timedelta(days=2)
        tickets = [
            make_ticket(ticket_id=1, assignee=ALICE, created_at=created),
            make_ticket(ticket_id=2, assignee=ALICE, created_at=created - timedelta(hours=1)),
        ]
        source = FakeTicketSource(
            comments={2: [make_comment(1, ALICE, created)]},
            comment_errors={1: UpstreamUnavailableException("timeout")},
        )

        samples = await ResponseTimeSampler(source).sample(tickets, "acme.io", now)

        assert samples == {"alice@acme.io": [60 * MINUTE_MS]}

    async def test_auth_failure_propagates(self, now):
        tickets = [make_ticket(ticket_id=1, assignee=ALICE, created_at=now - timedelta(days=1))]
        source = FakeTicketSource(comment_errors={1: UpstreamAuthException("expired token")})

        with pytest.raises(UpstreamAuthException):
            await ResponseTimeSampler(source).sample(tickets, "acme.io", now)

    async def test_unknown_domain_samples_nothing(self, now):
        tickets = [make_ticket(ticket_id=1, assignee=ALICE, created_at=now - timedelta(days=1))]
        source = FakeTicketSource()

        assert await ResponseTimeSampler(source).sample(tickets, None, now) == {}
        assert source.comment_calls == []

    def test_rejects_zero_batch_size(self):
        with pytest.raises(ValueError):
            ResponseTimeSampler(FakeTicketSource(), batch_size=0)
