"""Thread-safe, time-bounded cache for the steamgaug.es status document."""

import logging
import time
from dataclasses import dataclass
from datetime import datetime, timezone
from threading import Lock
from typing import Callable, Optional

from steamgauges.errors import UpstreamUnavailableError
from steamgauges.models import StatusDocument

logger = logging.getLogger("steamgauges.cache")


@dataclass(frozen=True)
class CacheSnapshot:
    """A document and the time its fetch started, published together."""

    document: StatusDocument
    fetched_at: float
    fetched_at_utc: datetime


class StatusCache:
    """Serves the last fetched StatusDocument, refreshing at most once per TTL.

    The staleness check, the fetch and the publish all run under one lock, so
    callers arriving inside the same window trigger a single upstream request.
    A failed refresh leaves the published snapshot untouched and starts a
    cooldown during which callers get ``UpstreamUnavailableError`` without a
    new request being made.
    """

    def __init__(
        self,
        fetch: Callable[[], StatusDocument],
        ttl_seconds: float = 10.0,
        retry_cooldown_seconds: Optional[float] = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._fetch = fetch
        self._ttl = ttl_seconds
        self._retry_cooldown = ttl_seconds if retry_cooldown_seconds is None else retry_cooldown_seconds
        self._clock = clock
        self._lock = Lock()
        self._snapshot: Optional[CacheSnapshot] = None
        self._last_failure_at: Optional[float] = None

    @property
    def ttl_seconds(self) -> float:
        return self._ttl

    @property
    def snapshot(self) -> Optional[CacheSnapshot]:
        return self._snapshot

    @property
    def last_failure_at(self) -> Optional[float]:
        return self._last_failure_at

    def _is_fresh(self, now: float) -> bool:
        snapshot = self._snapshot
        return snapshot is not None and (now - snapshot.fetched_at) < self._ttl

    def _in_cooldown(self, now: float) -> bool:
        return self._last_failure_at is not None and (now - self._last_failure_at) < self._retry_cooldown

    def get_document(self) -> StatusDocument:
        return self.get_snapshot().document

    def get_snapshot(self) -> CacheSnapshot:
        """Return a fresh snapshot, refreshing first if the current one has expired."""
        with self._lock:
            now = self._clock()
            if self._is_fresh(now):
                return self._snapshot  # type: ignore[return-value]

            if self._in_cooldown(now):
                logger.debug("Skipping refresh, last attempt failed %.1fs ago", now - self._last_failure_at)
                raise UpstreamUnavailableError("steamgaug.es is unavailable (last refresh failed)")

            return self._refresh(now)

    def _refresh(self, started: float) -> CacheSnapshot:
        started_utc = datetime.now(timezone.utc)
        try:
            document = self._fetch()
        except UpstreamUnavailableError as exc:
            self._last_failure_at = started
            logger.warning("Status refresh failed (%s)", exc)
            raise
        except Exception as exc:
            self._last_failure_at = started
            logger.warning("Status refresh failed (%s)", exc.__class__.__name__)
            raise UpstreamUnavailableError(f"steamgaug.es refresh failed: {exc}") from exc

        snapshot = CacheSnapshot(document=document, fetched_at=started, fetched_at_utc=started_utc)
        self._snapshot = snapshot
        self._last_failure_at = None
        logger.info("Status refreshed duration_ms=%d", int((self._clock() - started) * 1000))
        return snapshot

    def invalidate(self) -> None:
        with self._lock:
            self._snapshot = None
            self._last_failure_at = None
