"""Tests for the HTTP layer."""

from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient

from devdesk_insights.config import Priority, Settings, TicketStatus
from devdesk_insights.core import UpstreamAuthException, UpstreamUnavailableException
from devdesk_insights.main import create_app

from tests.conftest import ALICE, BOB, CUSTOMER, FakeTicketSource, make_ticket


def _settings(**overrides):
    values = {"environment": "test", "internal_email_domain": None, "sla_config": None}
    values.update(overrides)
    return Settings(**values)


@pytest.fixture
def recent_tickets():
    now = datetime.now(timezone.utc)
    return [
        make_ticket(ticket_id=1, priority=Priority.URGENT, assignee=ALICE,
                    created_at=now - timedelta(hours=5)),
        make_ticket(ticket_id=2, priority=Priority.LOW, assignee=BOB,
                    created_at=now - timedelta(hours=1)),
        make_ticket(ticket_id=3, priority=Priority.HIGH, status=TicketStatus.RESOLVED,
                    assignee=BOB, created_at=now - timedelta(days=2),
                    resolved_at=now - timedelta(days=1)),
    ]


@pytest.fixture
def client_for():
    clients = []

    def build(source, **settings_overrides):
        app = create_app(_settings(**settings_overrides), ticket_source=source)
        client = TestClient(app, raise_server_exceptions=False)
        client.__enter__()
        clients.append(client)
        return client

    yield build
    for client in clients:
        client.__exit__(None, None, None)


class TestSLAStatus:
    def test_dashboard(self, client_for, recent_tickets):
        client = client_for(FakeTicketSource(tickets=recent_tickets))
        response = client.get("/sla/status")

        assert response.status_code == 200
        body = response.json()
        assert body["summary"] == {"breached": 1, "atRisk": 0, "onTrack": 1}
        assert [t["ticket"]["id"] for t in body["tickets"]] == [1]
        assert body["tickets"][0]["riskStatus"] == "breached"
        assert "X-Correlation-ID" in response.headers

    def test_policy_override_from_settings(self, client_for, recent_tickets):
        override = '{"Low": {"responseTimeMinutes": 10, "resolutionTimeMinutes": 30}}'
        client = client_for(FakeTicketSource(tickets=recent_tickets), sla_config=override)
        body = client.get("/sla/status").json()
        assert body["summary"]["breached"] == 2

    def test_upstream_auth_failure_is_401(self, client_for):
        client = client_for(FakeTicketSource(error=UpstreamAuthException("token expired")))
        response = client.get("/sla/status")
        assert response.status_code == 401
        assert response.json()["detail"] == "Unauthorized"

    def test_upstream_unavailable_is_502(self, client_for):
        client = client_for(FakeTicketSource(error=UpstreamUnavailableException("connect timeout")))
        response = client.get("/sla/status")
        assert response.status_code == 502


class TestTeam:
    def test_team_dashboard(self, client_for, recent_tickets):
        source = FakeTicketSource(tickets=recent_tickets, members=[ALICE, BOB, CUSTOMER])
        client = client_for(source)
        response = client.get("/team", headers={"X-User-Email": "alice@acme.io"})

        assert response.status_code == 200
        body = response.json()
        assert {m["id"] for m in body["members"]} == {"u-alice", "u-bob"}
        assert body["stats"]["totalMembers"] == 2
        assert body["stats"]["openTickets"] == 2
        bob = next(m for m in body["members"] if m["id"] == "u-bob")
        assert bob["ticketsResolved"] == 1
        assert bob["avgResolutionTime"] == "1d"

    def test_team_auth_failure_is_401(self, client_for):
        client = client_for(FakeTicketSource(error=UpstreamAuthException("denied", status_code=403)))
        response = client.get("/team", headers={"X-User-Email": "alice@acme.io"})
        assert response.status_code == 401


class TestReporting:
    def test_activity(self, client_for, recent_tickets):
        client = client_for(FakeTicketSource(tickets=recent_tickets, members=[BOB, ALICE]))
        body = client.get("/team/activity", params={"member": "all"}).json()

        assert len(body["activities"]) == 365
        assert [m["displayName"] for m in body["members"]] == ["Alice Moreno", "Bob Okafor"]
        assert body["totalActivities"] >= 3

    def test_checkpoint(self, client_for, recent_tickets):
        client = client_for(FakeTicketSource(tickets=recent_tickets))
        response = client.get("/reporting/checkpoint")

        assert response.status_code == 200
        body = response.json()
        assert body["kpis"]["totalTicketsCreated"] == 3
        assert len(body["trends"]) == 31

    def test_checkpoint_inverted_period_is_400(self, client_for):
        client = client_for(FakeTicketSource())
        response = client.get(
            "/reporting/checkpoint",
            params={"startDate": "2024-06-10", "endDate": "2024-06-01"},
        )
        assert response.status_code == 400

    def test_checkpoint_bad_date_is_422(self, client_for):
        client = client_for(FakeTicketSource())
        response = client.get("/reporting/checkpoint", params={"startDate": "June"})
        assert response.status_code == 422


class TestHealth:
    def test_health_and_root(self, client_for):
        client = client_for(FakeTicketSource())
        health = client.get("/health").json()
        assert health["status"] == "healthy"
        assert health["checks"]["response_cache"] == "cold"
        assert client.get("/").json()["service"] == "DevDesk Insights"
