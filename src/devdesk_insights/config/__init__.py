"""
Configuration Module
====================

Application settings and configuration management using Pydantic.
"""

from enum import Enum
from functools import lru_cache
from pathlib import Path
from typing import List, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Uses Pydantic for validation and type safety.
    """

    # ========== Application ==========
    app_name: str = Field(default="devdesk-insights", description="Application name")
    app_version: str = Field(default="1.0.0", description="Application version")
    environment: str = Field(default="development", description="Environment name")
    debug: bool = Field(default=False, description="Enable debug mode")
    log_level: str = Field(default="INFO", description="Root log level")

    # ========== Server ==========
    host: str = Field(default="0.0.0.0", description="Server host")
    port: int = Field(default=8000, description="Server port", ge=1, le=65535)

    # ========== Ticket Source ==========
    ticket_source_url: str = Field(
        default="http://localhost:9000/api",
        description="Base URL of the upstream issue tracker adapter"
    )
    ticket_source_token: Optional[str] = Field(
        default=None,
        description="Bearer token forwarded to the upstream tracker"
    )
    ticket_source_timeout_seconds: float = Field(
        default=10.0,
        description="Timeout for upstream API calls",
        ge=0.1,
        le=120
    )
    internal_email_domain: Optional[str] = Field(
        default=None,
        description="Staff email domain; derived from the requesting user when unset"
    )

    # ========== SLA Configuration ==========
    sla_config: Optional[str] = Field(
        default=None,
        description="JSON override of SLA targets by priority"
    )
    sla_config_path: Optional[Path] = Field(
        default=None,
        description="Path to an SLA targets YAML file"
    )
    sla_project_levels: Optional[str] = Field(
        default=None,
        description='JSON map of project -> SLA tier or project description, e.g. {"Acme": "Gold"}'
    )

    # ========== Team Analytics ==========
    team_needs_attention_pending: int = Field(default=5, ge=0)
    team_needs_attention_assigned: int = Field(default=15, ge=0)
    team_behind_pending: int = Field(default=2, ge=0)
    team_behind_assigned: int = Field(default=10, ge=0)

    response_cache_ttl_seconds: int = Field(
        default=300,
        description="Seconds before sampled response times are refreshed",
        ge=1
    )
    sampler_batch_size: int = Field(
        default=10,
        description="Concurrent comment fetches per batch",
        ge=1,
        le=100
    )
    sampler_lookback_days: int = Field(
        default=30,
        description="Only tickets created within this many days are sampled",
        ge=1
    )
    sampler_max_tickets: int = Field(
        default=100,
        description="Upper bound on sampled tickets",
        ge=1
    )

    # ========== CORS ==========
    cors_origins: List[str] = Field(
        default=["http://localhost:3000"],
        description="Allowed CORS origins"
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    @field_validator("environment")
    @classmethod
    def validate_environment(cls, v: str) -> str:
        """Ensure environment is one of allowed values."""
        allowed = {"development", "staging", "production", "test"}
        if v not in allowed:
            raise ValueError(f"environment must be one of {allowed}")
        return v


@lru_cache()
def get_settings() -> Settings:
    """Returns cached Settings instance."""
    return Settings()


# Global settings instance
settings = get_settings()


# ========== Constants ==========

class TicketStatus(str, Enum):
    """Ticket lifecycle statuses."""
    NEW = "New"
    OPEN = "Open"
    IN_PROGRESS = "In Progress"
    PENDING = "Pending"
    RESOLVED = "Resolved"
    CLOSED = "Closed"


class Priority(str, Enum):
    """Ticket priority levels."""
    LOW = "Low"
    NORMAL = "Normal"
    HIGH = "High"
    URGENT = "Urgent"


class SLARiskStatus(str, Enum):
    """SLA risk classification."""
    ON_TRACK = "on-track"
    AT_RISK = "at-risk"
    BREACHED = "breached"


class SLALevel(str, Enum):
    """Customer SLA tier; Gold has the tightest targets."""
    GOLD = "Gold"
    SILVER = "Silver"
    BRONZE = "Bronze"


class SLAStageStatus(str, Enum):
    """Status of one SLA stage (first response or resolution)."""
    WITHIN_SLA = "within_sla"
    AT_RISK = "at_risk"
    BREACHED = "breached"


class MemberStatus(str, Enum):
    """Team member workload classification."""
    ON_TRACK = "On Track"
    BEHIND = "Behind"
    NEEDS_ATTENTION = "Needs Attention"


# ========== Lists for validation ==========

ACTIVE_STATUSES = [
    TicketStatus.NEW, TicketStatus.OPEN,
    TicketStatus.IN_PROGRESS, TicketStatus.PENDING
]
RESOLVED_STATUSES = [TicketStatus.RESOLVED, TicketStatus.CLOSED]

AT_RISK_THRESHOLD = 25  # percent of the resolution window left
