"""Tests for per-ticket SLA evaluation."""

from datetime import timedelta

import pytest

from devdesk_insights.config import Priority, SLARiskStatus, TicketStatus
from devdesk_insights.core import UnmappedPriorityException
from devdesk_insights.sla.domain import SLACalculator, SLAPolicy, SLATargets

from tests.conftest import T0, make_ticket


def _evaluate(ticket, minutes_after_creation, policy=None):
    return SLACalculator.evaluate(
        ticket, policy or SLAPolicy.default(), T0 + timedelta(minutes=minutes_after_creation)
    )


class TestDeadlines:
    def test_deadlines_follow_priority_targets(self):
        status = _evaluate(make_ticket(priority=Priority.HIGH), 0)
        assert status.response_deadline == T0 + timedelta(hours=4)
        assert status.resolution_deadline == T0 + timedelta(hours=8)

    def test_low_priority_defaults(self):
        status = _evaluate(make_ticket(priority=Priority.LOW), 0)
        assert status.response_deadline == T0 + timedelta(hours=24)
        assert status.resolution_deadline == T0 + timedelta(hours=72)


class TestRiskClassification:
    def test_urgent_past_resolution_deadline_is_breached(self):
        status = _evaluate(make_ticket(priority=Priority.URGENT), 250)
        assert status.resolution_breached is True
        assert status.response_breached is True
        assert status.risk_status == SLARiskStatus.BREACHED
        assert status.time_remaining_ms == -600000
        assert status.percentage_remaining == 0.0

    def test_normal_with_little_window_left_is_at_risk(self):
        status = _evaluate(make_ticket(priority=Priority.NORMAL), 1300)
        assert status.risk_status == SLARiskStatus.AT_RISK
        assert status.percentage_remaining == pytest.approx(9.72, abs=0.01)
        assert status.resolution_breached is False
        assert status.response_breached is True

    def test_exactly_at_threshold_is_at_risk(self):
        # 75% of a 240 minute window elapsed leaves exactly 25%
        status = _evaluate(make_ticket(priority=Priority.URGENT), 180)
        assert status.percentage_remaining == pytest.approx(25.0)
        assert status.risk_status == SLARiskStatus.AT_RISK

    def test_fresh_ticket_is_on_track(self):
        status = _evaluate(make_ticket(priority=Priority.NORMAL), 60)
        assert status.risk_status == SLARiskStatus.ON_TRACK
        assert status.time_remaining_ms == 23 * 60 * 60 * 1000

    def test_exactly_at_deadline_is_not_breached(self):
        status = _evaluate(make_ticket(priority=Priority.URGENT), 240)
        assert status.resolution_breached is False
        assert status.time_remaining_ms == 0
        assert status.risk_status == SLARiskStatus.AT_RISK

    def test_creation_in_future_is_on_track_with_full_window(self):
        status = _evaluate(make_ticket(priority=Priority.URGENT), -30)
        assert status.percentage_remaining == 100.0
        assert status.risk_status == SLARiskStatus.ON_TRACK

    def test_percentage_stays_within_bounds(self):
        ticket = make_ticket(priority=Priority.HIGH)
        for minutes in (-600, 0, 100, 480, 5000):
            assert 0.0 <= _evaluate(ticket, minutes).percentage_remaining <= 100.0

    def test_evaluation_is_deterministic(self):
        ticket = make_ticket(priority=Priority.HIGH)
        assert _evaluate(ticket, 90) == _evaluate(ticket, 90)


class TestPolicyLookup:
    def test_unmapped_priority_raises(self):
        policy = SLAPolicy(targets={
            Priority.URGENT: SLATargets(response_time_minutes=30, resolution_time_minutes=60)
        })
        ticket = make_ticket(ticket_id=77, priority=Priority.LOW)
        with pytest.raises(UnmappedPriorityException) as exc_info:
            SLACalculator.evaluate(ticket, policy, T0)
        assert exc_info.value.ticket_id == 77
        assert exc_info.value.priority == "Low"

    def test_ticket_rejects_resolution_before_creation(self):
        with pytest.raises(ValueError):
            make_ticket(
                status=TicketStatus.RESOLVED,
                resolved_at=T0 - timedelta(minutes=1),
            )
