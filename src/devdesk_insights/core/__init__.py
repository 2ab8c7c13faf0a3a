"""
Core Module
============

Shared core utilities and abstractions used across the application.

This module contains framework-agnostic code that defines the fundamental
building blocks of the system.
"""

from devdesk_insights.core.exceptions import (
    ApplicationException,
    DomainException,
    ValidationException,
    ExternalServiceException,
    UpstreamUnavailableException,
    UpstreamAuthException,
    UnmappedPriorityException,
)

__all__ = [
    "ApplicationException",
    "DomainException",
    "ValidationException",
    "ExternalServiceException",
    "UpstreamUnavailableException",
    "UpstreamAuthException",
    "UnmappedPriorityException",
]
