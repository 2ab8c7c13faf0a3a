"""
Ticket Source HTTP Adapter
==========================

Generic JSON adapter for the upstream issue tracker:
- GET /tickets                 -> list of tickets
- GET /tickets/{id}/comments   -> list of comments
- GET /members                 -> list of team members
- GET /me                      -> profile of the caller

Tracker-specific field mapping is expected to happen behind this API.
"""

from datetime import datetime, timezone
from typing import Any, List, Optional

import httpx
from pydantic import BaseModel, ConfigDict, Field, field_validator

from devdesk_insights.config import Priority, TicketStatus, settings
from devdesk_insights.core import UpstreamAuthException, UpstreamUnavailableException
from devdesk_insights.shared.infrastructure.logging import get_logger
from devdesk_insights.tickets.application import ITicketSource
from devdesk_insights.tickets.domain import Comment, Member, Ticket

logger = get_logger(__name__)


# ========== Wire DTOs ==========

def _assume_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Timestamps without an offset are UTC."""
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class MemberPayload(BaseModel):
    """Member as returned by the upstream API."""
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: str
    display_name: str = Field(default="", alias="displayName")
    email: Optional[str] = None

    def to_domain(self) -> Member:
        return Member(id=self.id, display_name=self.display_name, email=self.email or "")


class CommentPayload(BaseModel):
    """Comment as returned by the upstream API."""
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: int
    author: MemberPayload
    content: str = ""
    created_at: datetime = Field(alias="createdAt")

    @field_validator("created_at")
    @classmethod
    def assume_utc(cls, v: datetime) -> datetime:
        return _assume_utc(v)

    def to_domain(self) -> Comment:
        return Comment(
            id=self.id,
            author=self.author.to_domain(),
            content=self.content,
            created_at=self.created_at,
        )


class TicketPayload(BaseModel):
    """Ticket as returned by the upstream API."""
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: int
    project: str = ""
    title: str = ""
    status: TicketStatus
    priority: Priority
    created_at: datetime = Field(alias="createdAt")
    updated_at: datetime = Field(alias="updatedAt")
    resolved_at: Optional[datetime] = Field(default=None, alias="resolvedAt")
    assignee: Optional[MemberPayload] = None
    requester: Optional[MemberPayload] = None

    @field_validator("created_at", "updated_at", "resolved_at")
    @classmethod
    def assume_utc(cls, v: Optional[datetime]) -> Optional[datetime]:
        return _assume_utc(v)

    def to_domain(self) -> Ticket:
        return Ticket(
            id=self.id,
            project=self.project,
            title=self.title,
            status=self.status,
            priority=self.priority,
            created_at=self.created_at,
            updated_at=self.updated_at,
            resolved_at=self.resolved_at,
            assignee=self.assignee.to_domain() if self.assignee else None,
            requester=self.requester.to_domain() if self.requester else None,
        )


# ========== Client ==========

class HttpTicketSource(ITicketSource):
    """
    httpx-backed ticket source.

    Error mapping:
    - 401/403 -> UpstreamAuthException (fails the whole request)
    - other HTTP errors, timeouts, connection errors -> UpstreamUnavailableException
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        token: Optional[str] = None,
        timeout_seconds: Optional[float] = None,
        http_client: Optional[httpx.AsyncClient] = None
    ):
        self._base_url = (base_url or settings.ticket_source_url).rstrip("/")
        self._token = token if token is not None else settings.ticket_source_token
        self._timeout = timeout_seconds or settings.ticket_source_timeout_seconds
        self._http_client = http_client

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._http_client is None:
            headers = {"Accept": "application/json"}
            if self._token:
                headers["Authorization"] = f"Bearer {self._token}"
            self._http_client = httpx.AsyncClient(
                base_url=self._base_url,
                headers=headers,
                timeout=self._timeout
            )
        return self._http_client

    async def _get_json(self, path: str, params: Optional[dict] = None) -> Any:
        client = await self._get_client()
        try:
            response = await client.get(path, params=params)
        except httpx.HTTPError as e:
            logger.error(
                "Ticket source request failed",
                extra={"path": path, "error": str(e)}
            )
            raise UpstreamUnavailableException(str(e), {"path": path}) from e

        if response.status_code in (401, 403):
            raise UpstreamAuthException(
                f"Access denied for {path}",
                status_code=response.status_code
            )
        if response.status_code >= 400:
            raise UpstreamUnavailableException(
                f"{path} returned {response.status_code}",
                {"path": path, "status_code": response.status_code}
            )

        data = response.json()
        # Some trackers wrap collections as {"value": [...]}
        if isinstance(data, dict) and "value" in data:
            return data["value"]
        return data

    async def list_tickets(self) -> List[Ticket]:
        data = await self._get_json("/tickets")
        return [TicketPayload.model_validate(item).to_domain() for item in data]

    async def list_comments(
        self,
        ticket_id: int,
        project: Optional[str] = None
    ) -> List[Comment]:
        params = {"project": project} if project else None
        data = await self._get_json(f"/tickets/{ticket_id}/comments", params)
        return [CommentPayload.model_validate(item).to_domain() for item in data]

    async def list_members(self) -> List[Member]:
        data = await self._get_json("/members")
        return [MemberPayload.model_validate(item).to_domain() for item in data]

    async def get_current_user(self) -> Member:
        data = await self._get_json("/me")
        return MemberPayload.model_validate(data).to_domain()

    async def close(self) -> None:
        """Close HTTP client."""
        if self._http_client:
            await self._http_client.aclose()
            self._http_client = None
