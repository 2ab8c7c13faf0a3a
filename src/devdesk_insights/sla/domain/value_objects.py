"""
SLA Value Objects
==================

Immutable value objects for SLA domain.

Value objects are defined by their attributes rather than an identity.
They are immutable and can be freely shared.
"""

from datetime import datetime, timedelta
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from devdesk_insights.config import (
    AT_RISK_THRESHOLD, Priority, SLALevel, SLARiskStatus, SLAStageStatus
)
from devdesk_insights.core import UnmappedPriorityException
from devdesk_insights.sla.domain.entities import SLAStageCheck, TicketSLAStatus
from devdesk_insights.sla.domain.formatting import MS_PER_MINUTE
from devdesk_insights.sla.domain.levels import coerce_sla_level
from devdesk_insights.tickets.domain import Ticket

_HOUR_KEYS = {
    "responseTimeHours": "responseTimeMinutes",
    "resolutionTimeHours": "resolutionTimeMinutes",
    "response_time_hours": "response_time_minutes",
    "resolution_time_hours": "resolution_time_minutes",
}


class SLATargets(BaseModel):
    """
    Response and resolution targets for one priority, in minutes.

    Accepts hour-based keys (``responseTimeHours``) and scales them.
    """
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    response_time_minutes: float = Field(
        gt=0, alias="responseTimeMinutes", description="Time to first response"
    )
    resolution_time_minutes: float = Field(
        gt=0, alias="resolutionTimeMinutes", description="Time to resolution"
    )

    @model_validator(mode="before")
    @classmethod
    def convert_hours(cls, data: Any) -> Any:
        """Scale hour-based keys to minutes."""
        if not isinstance(data, dict):
            return data
        data = dict(data)
        for hours_key, minutes_key in _HOUR_KEYS.items():
            if hours_key not in data:
                continue
            hours = data.pop(hours_key)
            if minutes_key in data:
                continue
            try:
                data[minutes_key] = float(hours) * 60
            except (TypeError, ValueError):
                data[minutes_key] = hours
        return data


DEFAULT_SLA_TARGETS: Dict[Priority, SLATargets] = {
    Priority.URGENT: SLATargets(response_time_minutes=60, resolution_time_minutes=4 * 60),
    Priority.HIGH: SLATargets(response_time_minutes=4 * 60, resolution_time_minutes=8 * 60),
    Priority.NORMAL: SLATargets(response_time_minutes=8 * 60, resolution_time_minutes=24 * 60),
    Priority.LOW: SLATargets(response_time_minutes=24 * 60, resolution_time_minutes=72 * 60),
}


def _tier(*hours) -> Dict[Priority, SLATargets]:
    # (response, resolution) hour pairs for Urgent, High, Normal, Low
    priorities = (Priority.URGENT, Priority.HIGH, Priority.NORMAL, Priority.LOW)
    return {
        priority: SLATargets(
            response_time_minutes=response * 60, resolution_time_minutes=resolution * 60
        )
        for priority, (response, resolution) in zip(priorities, hours)
    }


SLA_LEVEL_TARGETS: Mapping[SLALevel, Mapping[Priority, SLATargets]] = MappingProxyType({
    SLALevel.GOLD: MappingProxyType(_tier((4, 24), (6, 32), (6, 40), (8, 48))),
    SLALevel.SILVER: MappingProxyType(_tier((6, 32), (8, 40), (8, 48), (12, 64))),
    SLALevel.BRONZE: MappingProxyType(_tier((8, 40), (12, 48), (16, 60), (16, 72))),
})


def _normalize_priority_keys(v: Mapping) -> Dict:
    by_lower = {p.value.lower(): p for p in Priority}
    normalized = {}
    for key, value in v.items():
        if not isinstance(key, Priority):
            key = by_lower.get(str(key).lower(), key)
        normalized[key] = value
    return normalized


class SLAPolicy(BaseModel):
    """
    SLA policy: targets per priority plus the at-risk threshold.

    Projects mapped to an SLA tier use that tier's targets instead of the
    priority targets. Loaded once per evaluation pass; both mappings are
    read-only views, so a shared policy cannot change mid-evaluation.
    """
    model_config = ConfigDict(frozen=True)

    targets: Mapping[Priority, SLATargets] = Field(
        default_factory=lambda: dict(DEFAULT_SLA_TARGETS),
        validate_default=True,
        description="SLA targets by priority"
    )
    project_levels: Mapping[str, SLALevel] = Field(
        default_factory=dict,
        validate_default=True,
        description="SLA tier by lower-cased project name"
    )
    at_risk_threshold: float = Field(
        default=AT_RISK_THRESHOLD,
        ge=0,
        le=100,
        description="Percentage of the window left at or below which a ticket is at risk"
    )

    @field_validator("targets", mode="before")
    @classmethod
    def normalize_priority_keys(cls, v: Any) -> Any:
        """Accept priority names in any letter case ("urgent", "URGENT")."""
        if not isinstance(v, Mapping):
            return v
        return _normalize_priority_keys(v)

    @field_validator("project_levels", mode="before")
    @classmethod
    def normalize_project_levels(cls, v: Any) -> Any:
        """Lower-case project names; values may be tier names or project descriptions."""
        if not isinstance(v, Mapping):
            return v
        normalized = {}
        for project, value in v.items():
            level = coerce_sla_level(value)
            normalized[str(project).strip().lower()] = level if level is not None else value
        return normalized

    @field_validator("targets", "project_levels", mode="after")
    @classmethod
    def freeze_mapping(cls, v: Mapping) -> Mapping:
        return MappingProxyType(dict(v))

    @classmethod
    def default(cls) -> "SLAPolicy":
        return cls()

    @classmethod
    def from_override(
        cls,
        data: Mapping[str, Any],
        project_levels: Optional[Mapping[str, Any]] = None
    ) -> "SLAPolicy":
        """
        Build a policy from an override mapping.

        Priorities absent from the override keep their default targets.
        Raises pydantic.ValidationError on malformed input.
        """
        override = cls(targets=data)
        return cls(
            targets={**DEFAULT_SLA_TARGETS, **override.targets},
            project_levels=project_levels or {},
        )

    def with_project_levels(self, project_levels: Mapping[str, Any]) -> "SLAPolicy":
        """Copy of this policy with extra project tiers; new entries win."""
        return SLAPolicy(
            targets=self.targets,
            project_levels={**self.project_levels, **project_levels},
            at_risk_threshold=self.at_risk_threshold,
        )

    def level_for(self, project: Optional[str]) -> Optional[SLALevel]:
        """SLA tier of a project, or None when it has none."""
        if not project:
            return None
        return self.project_levels.get(project.strip().lower())

    def targets_for(
        self,
        priority: Priority,
        ticket_id: Optional[int] = None,
        project: Optional[str] = None
    ) -> SLATargets:
        """Get targets for a priority; an unmapped priority is a contract violation."""
        level = self.level_for(project)
        targets = SLA_LEVEL_TARGETS[level] if level is not None else self.targets
        try:
            return targets[priority]
        except KeyError:
            raise UnmappedPriorityException(str(getattr(priority, "value", priority)), ticket_id) from None


class SLACalculator:
    """
    Pure functions for SLA calculations.

    Stateless utility class - all SLA calculation logic in one place.
    """

    @staticmethod
    def calculate_deadline(created_at: datetime, minutes: float) -> datetime:
        """Deadline that lies ``minutes`` after creation."""
        return created_at + timedelta(minutes=minutes)

    @staticmethod
    def calculate_percentage_remaining(
        created_at: datetime,
        window_minutes: float,
        current_time: datetime
    ) -> float:
        """
        Share of the SLA window still left, clamped to [0, 100].

        A creation time in the future (clock skew) yields 100.
        """
        window_ms = window_minutes * MS_PER_MINUTE
        elapsed_ms = (current_time - created_at).total_seconds() * 1000
        percentage = (window_ms - elapsed_ms) / window_ms * 100
        return max(0.0, min(100.0, percentage))

    @staticmethod
    def classify(
        resolution_breached: bool,
        percentage_remaining: float,
        at_risk_threshold: float = AT_RISK_THRESHOLD
    ) -> SLARiskStatus:
        """Risk classification: breached, then at-risk, then on-track."""
        if resolution_breached:
            return SLARiskStatus.BREACHED
        if percentage_remaining <= at_risk_threshold:
            return SLARiskStatus.AT_RISK
        return SLARiskStatus.ON_TRACK

    @staticmethod
    def stage_status(
        elapsed_minutes: float,
        target_minutes: float,
        met: bool,
        at_risk_threshold: float = AT_RISK_THRESHOLD
    ) -> SLAStageStatus:
        """
        Status of one SLA stage.

        A met stage is judged by when it was met. An open stage is breached
        once the target is reached and at risk with 25% or less of it left.
        """
        if met:
            if elapsed_minutes <= target_minutes:
                return SLAStageStatus.WITHIN_SLA
            return SLAStageStatus.BREACHED
        if elapsed_minutes >= target_minutes:
            return SLAStageStatus.BREACHED
        remaining_percent = (target_minutes - elapsed_minutes) / target_minutes * 100
        if remaining_percent <= at_risk_threshold:
            return SLAStageStatus.AT_RISK
        return SLAStageStatus.WITHIN_SLA

    @staticmethod
    def check_stage(
        created_at: datetime,
        target_minutes: float,
        current_time: datetime,
        met_at: Optional[datetime] = None,
        at_risk_threshold: float = AT_RISK_THRESHOLD
    ) -> SLAStageCheck:
        """Elapsed whole minutes and status of a stage started at ``created_at``."""
        stopped_at = met_at or current_time
        elapsed = max(0, int((stopped_at - created_at).total_seconds() // 60))
        met = met_at is not None
        return SLAStageCheck(
            target_minutes=target_minutes,
            elapsed_minutes=elapsed,
            remaining_minutes=target_minutes - elapsed,
            status=SLACalculator.stage_status(elapsed, target_minutes, met, at_risk_threshold),
            met=met,
        )

    @staticmethod
    def evaluate(
        ticket: Ticket,
        policy: SLAPolicy,
        current_time: datetime,
        first_response_at: Optional[datetime] = None
    ) -> TicketSLAStatus:
        """
        Calculate the SLA status of a ticket at ``current_time``.

        Args:
            ticket: Ticket to evaluate
            policy: SLA policy in effect
            current_time: Evaluation instant
            first_response_at: When staff first responded, if known

        Returns:
            TicketSLAStatus computed fresh for this instant

        Raises:
            UnmappedPriorityException: ticket priority missing from the policy
        """
        targets = policy.targets_for(ticket.priority, ticket.id, ticket.project)

        response_deadline = SLACalculator.calculate_deadline(
            ticket.created_at, targets.response_time_minutes
        )
        resolution_deadline = SLACalculator.calculate_deadline(
            ticket.created_at, targets.resolution_time_minutes
        )

        time_remaining_ms = round((resolution_deadline - current_time).total_seconds() * 1000)
        percentage_remaining = SLACalculator.calculate_percentage_remaining(
            ticket.created_at, targets.resolution_time_minutes, current_time
        )

        response_breached = current_time > response_deadline
        resolution_breached = current_time > resolution_deadline

        return TicketSLAStatus(
            ticket=ticket,
            risk_status=SLACalculator.classify(
                resolution_breached, percentage_remaining, policy.at_risk_threshold
            ),
            resolution_deadline=resolution_deadline,
            response_deadline=response_deadline,
            time_remaining_ms=time_remaining_ms,
            percentage_remaining=percentage_remaining,
            response_breached=response_breached,
            resolution_breached=resolution_breached,
            sla_level=policy.level_for(ticket.project),
            first_response=SLACalculator.check_stage(
                ticket.created_at, targets.response_time_minutes, current_time,
                first_response_at, policy.at_risk_threshold
            ),
            resolution=SLACalculator.check_stage(
                ticket.created_at, targets.resolution_time_minutes, current_time,
                ticket.resolved_at, policy.at_risk_threshold
            ),
        )
