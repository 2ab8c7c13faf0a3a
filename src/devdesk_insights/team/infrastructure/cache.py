"""
Response-Time Cache
===================

Process-wide holder for sampled first-response latencies.

Sampling walks comment histories of up to a hundred tickets, far too slow to
sit in the request path. Readers get whatever snapshot is present, and an
expired or missing snapshot schedules a detached refresh instead.
"""

import asyncio
from datetime import datetime, timedelta, timezone
from typing import Awaitable, Callable, Dict, List, Mapping, Optional, Tuple

from devdesk_insights.shared.infrastructure.logging import get_logger
from devdesk_insights.team.domain import EMPTY_SAMPLES, ResponseTimeSnapshot

logger = get_logger(__name__)

SampleLoader = Callable[[], Awaitable[Dict[str, List[float]]]]
Clock = Callable[[], datetime]

DEFAULT_TTL = timedelta(minutes=5)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ResponseTimeCache:
    """
    TTL cache with stale-while-revalidate reads.

    One instance lives on the application state and is shared by every
    request. The snapshot is swapped as a whole value, so readers never see
    a half-built mapping.
    """

    def __init__(self, ttl: timedelta = DEFAULT_TTL, clock: Optional[Clock] = None):
        self.ttl = ttl
        self._clock = clock or _utcnow
        self._snapshot: Optional[ResponseTimeSnapshot] = None
        self._refresh_task: Optional[asyncio.Task] = None

    @property
    def snapshot(self) -> Optional[ResponseTimeSnapshot]:
        """Current entry, or None before the first successful refresh."""
        return self._snapshot

    @property
    def refresh_task(self) -> Optional[asyncio.Task]:
        """The refresh currently in flight, if any."""
        if self._refresh_task is not None and self._refresh_task.done():
            return None
        return self._refresh_task

    def is_fresh(self) -> bool:
        snapshot = self._snapshot
        if snapshot is None or snapshot.computed_at is None:
            return False
        return self._clock() - snapshot.computed_at < self.ttl

    def get(
        self,
        loader: SampleLoader,
        internal_domain: Optional[str] = None
    ) -> Mapping[str, Tuple[float, ...]]:
        """
        Return the cached samples without waiting on I/O.

        A stale or missing entry triggers a background refresh; the caller
        still gets the stale samples (or an empty mapping) immediately.
        Samples taken for another internal domain are never returned; they
        count as missing. Must be called from inside a running event loop.
        """
        snapshot = self._snapshot
        matches = snapshot is not None and snapshot.internal_domain == internal_domain
        if matches and self.is_fresh():
            return snapshot.samples

        self.refresh_async(loader, internal_domain)
        if not matches:
            return EMPTY_SAMPLES
        return snapshot.samples

    def refresh_async(
        self,
        loader: SampleLoader,
        internal_domain: Optional[str] = None
    ) -> asyncio.Task:
        """
        Schedule a refresh and return its task.

        A refresh already in flight is returned instead of starting another.
        """
        in_flight = self.refresh_task
        if in_flight is not None:
            return in_flight

        # The reference is kept so the task is not garbage collected mid-run
        self._refresh_task = asyncio.get_running_loop().create_task(
            self._refresh(loader, internal_domain)
        )
        return self._refresh_task

    async def _refresh(self, loader: SampleLoader, internal_domain: Optional[str]) -> None:
        """Run the loader and replace the snapshot; failures keep the old one."""
        started = self._clock()
        try:
            samples = await loader()
        except asyncio.CancelledError:
            logger.info("Response time refresh cancelled")
            raise
        except Exception as e:
            logger.error(
                "Response time refresh failed",
                extra={"error_type": type(e).__name__, "error": str(e)}
            )
            return

        self._snapshot = ResponseTimeSnapshot.build(
            samples, computed_at=self._clock(), internal_domain=internal_domain
        )
        logger.info(
            "Response time cache refreshed",
            extra={
                "assignees": len(self._snapshot.samples),
                "duration_ms": int((self._clock() - started).total_seconds() * 1000),
            }
        )

    def clear(self) -> None:
        """Drop the snapshot; an in-flight refresh keeps running."""
        self._snapshot = None

    async def aclose(self) -> None:
        """Cancel a pending refresh on shutdown."""
        task = self._refresh_task
        self._refresh_task = None
        if task is None or task.done():
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass
