"""Store availability: weekly schedule, manual pause and admin block.

Precedence, highest first: an admin block closes the store, then an
active (unexpired) pause, then the weekly schedule. Pause expiry is
evaluated lazily on every read, so no background job is needed.
"""
import logging
import threading
from dataclasses import dataclass
from datetime import datetime, tzinfo
from typing import Optional

from storefront.core.cache import TTLCache
from storefront.core.config import (AVAILABILITY_CACHE_SIZE,
                                    AVAILABILITY_CACHE_TTL,
                                    CLOSED_OUTSIDE_HOURS_REASON, PAUSED_REASON)
from storefront.core.time import SystemClock, ensure_instant
from storefront.services.block import block_state
from storefront.services.pause import PauseState, effective_pause, stored_pause
from storefront.services.schedule import is_schedule_open, next_change

logger = logging.getLogger(__name__)


def _iso(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None


@dataclass(frozen=True)
class AvailabilityResult:
    store_id: str
    is_open: bool
    schedule_open: bool
    reason: Optional[str]
    pause: PauseState
    blocked: bool = False
    has_schedule: bool = False
    next_open_at: Optional[datetime] = None
    next_close_at: Optional[datetime] = None
    pause_expired: bool = False

    @property
    def next_change_at(self) -> Optional[datetime]:
        if self.schedule_open:
            return self.next_close_at
        return self.next_open_at

    def to_dict(self) -> dict:
        return {
            "storeId": self.store_id,
            "isOpen": self.is_open,
            "scheduleOpen": self.schedule_open,
            "reason": self.reason,
            "pause": self.pause.to_dict(),
            "blocked": self.blocked,
            "hasSchedule": self.has_schedule,
            "nextOpenAt": _iso(self.next_open_at),
            "nextCloseAt": _iso(self.next_close_at),
            "nextChangeAt": _iso(self.next_change_at),
        }


def resolve_availability(
    store, now: datetime, tz: Optional[tzinfo] = None
) -> AvailabilityResult:
    ensure_instant(now)
    local_now = now.astimezone(tz) if tz else now
    pause = effective_pause(store, local_now)
    if tz and pause.active:
        pause = pause.astimezone(tz)
    pause_expired = stored_pause(store).active and not pause.active

    windows = list(getattr(store, "windows", None) or [])
    schedule_open = is_schedule_open(windows, local_now)
    next_open_at, next_close_at = next_change(windows, local_now)
    block = block_state(store)

    if block.blocked:
        is_open = False
        reason = block.reason
    elif pause.active:
        is_open = False
        reason = pause.reason or PAUSED_REASON
    else:
        is_open = schedule_open
        reason = None if is_open else CLOSED_OUTSIDE_HOURS_REASON

    return AvailabilityResult(
        store_id=store.id,
        is_open=is_open,
        schedule_open=schedule_open,
        reason=reason,
        pause=pause,
        blocked=block.blocked,
        has_schedule=bool(windows),
        next_open_at=next_open_at,
        next_close_at=next_close_at,
        pause_expired=pause_expired,
    )


class AvailabilityResolver:
    """Resolves availability against an injected clock.

    Results are cached per store id. An entry never outlives the next
    moment the answer could change on its own (pause expiry or a
    schedule boundary); mutations must call ``invalidate``.

    Every ``invalidate`` bumps a generation counter. A reader takes
    ``generation()`` before loading the store and passes it to
    ``remember``, which drops the result if a mutation landed in between.
    """

    def __init__(
        self,
        clock=None,
        cache_ttl: float = AVAILABILITY_CACHE_TTL,
        cache_size: int = AVAILABILITY_CACHE_SIZE,
    ):
        self.clock = clock or SystemClock()
        self.cache = TTLCache(cache_ttl, self.clock, maxsize=cache_size)
        self._generation = 0
        self._lock = threading.Lock()

    @property
    def tz(self) -> tzinfo:
        return self.clock.tz

    def now(self) -> datetime:
        return self.clock.now()

    def resolve(self, store, now: Optional[datetime] = None) -> AvailabilityResult:
        return resolve_availability(
            store, self.now() if now is None else now, self.tz
        )

    def cached(self, store_id: str) -> Optional[AvailabilityResult]:
        return self.cache.get(store_id)

    def generation(self) -> int:
        with self._lock:
            return self._generation

    def remember(
        self, result: AvailabilityResult, generation: Optional[int] = None
    ) -> None:
        boundaries = [
            moment
            for moment in (
                result.pause.expires_at,
                result.next_open_at,
                result.next_close_at,
            )
            if moment is not None
        ]
        deadline = min(boundaries) if boundaries else None
        with self._lock:
            if generation is not None and generation != self._generation:
                logger.debug("Skipping stale availability for %s", result.store_id)
                return
            self.cache.put(result.store_id, result, deadline)

    def invalidate(self, store_id: str) -> None:
        with self._lock:
            self._generation += 1
            self.cache.delete(store_id)
