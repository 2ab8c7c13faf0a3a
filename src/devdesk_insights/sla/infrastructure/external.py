"""
SLA Policy Loading
==================

Resolves the SLA policy from an external configuration source:
- a JSON override (``SLA_CONFIG`` setting)
- a YAML file (``SLA_CONFIG_PATH`` setting)
- project SLA tiers (``SLA_PROJECT_LEVELS`` setting or a ``project_levels`` key)

Malformed configuration never raises: it is logged and the built-in
defaults are used instead.
"""

import json
from pathlib import Path
from typing import Any, Mapping, Optional, Union

import yaml
from pydantic import ValidationError

from devdesk_insights.config import Settings
from devdesk_insights.shared.infrastructure.logging import get_logger
from devdesk_insights.sla.application import ISLAPolicyProvider
from devdesk_insights.sla.domain import SLAPolicy

logger = get_logger(__name__)


def _policy_from_data(data: Any) -> SLAPolicy:
    # Targets may be nested under "sla_targets", next to "project_levels"
    project_levels = None
    if isinstance(data, Mapping):
        project_levels = data.get("project_levels")
        if "sla_targets" in data:
            data = data["sla_targets"]
        elif project_levels is not None:
            data = {k: v for k, v in data.items() if k != "project_levels"}
    return SLAPolicy.from_override(data, project_levels)


def _apply_project_levels(
    policy: SLAPolicy,
    project_levels: Optional[Union[str, Mapping[str, Any]]]
) -> SLAPolicy:
    """Attach project tiers from a JSON string or mapping; invalid input is ignored."""
    if not project_levels:
        return policy
    try:
        data = json.loads(project_levels) if isinstance(project_levels, str) else project_levels
        policy = policy.with_project_levels(data)
    except (ValidationError, ValueError, TypeError) as e:
        logger.warning(
            "Failed to parse SLA project levels, keeping priority targets",
            extra={"error": str(e)}
        )
        return policy
    logger.info("SLA project levels loaded", extra={"projects": len(policy.project_levels)})
    return policy


def resolve_policy(
    override: Optional[Union[str, Mapping[str, Any]]] = None,
    path: Optional[Path] = None,
    project_levels: Optional[Union[str, Mapping[str, Any]]] = None
) -> SLAPolicy:
    """
    Resolve the SLA policy.

    Args:
        override: JSON string or mapping of priority -> targets
        path: YAML file with the same structure, used when no override is set
        project_levels: JSON string or mapping of project -> SLA tier (or
            project description declaring one); wins over tiers from the file

    Returns:
        SLAPolicy, the built-in default when nothing valid is configured
    """
    return _apply_project_levels(_resolve_targets(override, path), project_levels)


def _resolve_targets(
    override: Optional[Union[str, Mapping[str, Any]]],
    path: Optional[Path]
) -> SLAPolicy:
    if override:
        try:
            data = json.loads(override) if isinstance(override, str) else override
            policy = _policy_from_data(data)
            logger.info("SLA policy loaded from override")
            return policy
        except (ValidationError, ValueError, TypeError) as e:
            logger.warning(
                "Failed to parse SLA override, using defaults",
                extra={"error": str(e)}
            )
            return SLAPolicy.default()

    if path is not None:
        if not path.exists():
            logger.warning(f"SLA config file not found: {path}, using defaults")
            return SLAPolicy.default()
        try:
            with open(path, "r") as f:
                data = yaml.safe_load(f) or {}
            policy = _policy_from_data(data)
            logger.info("SLA policy loaded from file", extra={"path": str(path)})
            return policy
        except (OSError, yaml.YAMLError, ValidationError, ValueError, TypeError) as e:
            logger.warning(
                "Failed to load SLA config file, using defaults",
                extra={"path": str(path), "error": str(e)}
            )
            return SLAPolicy.default()

    return SLAPolicy.default()


class StaticSLAPolicyProvider(ISLAPolicyProvider):
    """
    Holds one resolved policy for the lifetime of the process.

    Policies are reloaded only at process boundaries, never mid-evaluation.
    """

    def __init__(self, policy: SLAPolicy):
        self._policy = policy

    @classmethod
    def from_settings(cls, settings: Settings) -> "StaticSLAPolicyProvider":
        return cls(resolve_policy(
            settings.sla_config, settings.sla_config_path, settings.sla_project_levels
        ))

    def get_policy(self) -> SLAPolicy:
        return self._policy
