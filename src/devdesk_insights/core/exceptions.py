"""
Core Exceptions
================

Custom exceptions for the application following clean architecture principles.

These exceptions define domain-specific errors that can be caught and handled
appropriately at the application boundaries.
"""

from typing import Optional


class ApplicationException(Exception):
    """Base exception for all application errors."""

    def __init__(self, message: str, details: Optional[dict] = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)


class DomainException(ApplicationException):
    """Base exception for domain logic violations."""


class ValidationException(ApplicationException):
    """Exception for validation errors."""


class ExternalServiceException(ApplicationException):
    """Base exception for external service failures."""

    def __init__(
        self,
        service_name: str,
        message: str,
        details: Optional[dict] = None
    ):
        self.service_name = service_name
        super().__init__(f"{service_name}: {message}", details)


class UpstreamUnavailableException(ExternalServiceException):
    """The ticket source could not be reached or answered with an error."""

    def __init__(self, message: str, details: Optional[dict] = None):
        super().__init__("Ticket Source", message, details)


class UpstreamAuthException(ExternalServiceException):
    """
    The ticket source rejected the caller's credentials.

    Never degraded to "no data": every figure derived after this would be
    systematically wrong, not just sparse.
    """

    def __init__(
        self,
        message: str,
        status_code: int = 401,
        details: Optional[dict] = None
    ):
        self.status_code = status_code
        super().__init__("Ticket Source", message, details)


class UnmappedPriorityException(DomainException):
    """Raised when a ticket's priority has no SLA targets configured."""

    def __init__(self, priority: str, ticket_id: Optional[int] = None):
        self.priority = priority
        self.ticket_id = ticket_id
        super().__init__(
            f"No SLA targets configured for priority '{priority}'",
            {"priority": priority, "ticket_id": ticket_id}
        )
