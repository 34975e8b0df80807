import math
from dataclasses import dataclass, replace
from datetime import datetime, timedelta, tzinfo
from typing import Any, Optional

from storefront.core.errors import ValidationError
from storefront.core.time import ensure_instant, from_storage, to_storage


@dataclass(frozen=True)
class PauseState:
    active: bool = False
    reason: str = ""
    started_at: Optional[datetime] = None
    expires_at: Optional[datetime] = None
    minutes: Optional[float] = None

    def expired(self, now: datetime) -> bool:
        return (
            self.active
            and self.expires_at is not None
            and now >= self.expires_at
        )

    def astimezone(self, tz: tzinfo) -> "PauseState":
        return replace(
            self,
            started_at=self.started_at.astimezone(tz)
            if self.started_at else None,
            expires_at=self.expires_at.astimezone(tz)
            if self.expires_at else None,
        )

    def to_dict(self) -> dict:
        return {
            "active": self.active,
            "reason": self.reason,
            "startedAt": self.started_at.isoformat()
            if self.started_at else None,
            "expiresAt": self.expires_at.isoformat()
            if self.expires_at else None,
            "minutes": self.minutes,
        }


NO_PAUSE = PauseState()


def stored_pause(store) -> PauseState:
    if not store.pause_active:
        return NO_PAUSE
    return PauseState(
        active=True,
        reason=store.pause_reason or "",
        started_at=from_storage(store.pause_started_at),
        expires_at=from_storage(store.pause_expires_at),
        minutes=store.pause_minutes,
    )


def effective_pause(store, now: datetime) -> PauseState:
    pause = stored_pause(store)
    if pause.expired(now):
        return NO_PAUSE
    return pause


def validate_minutes(minutes: Any) -> float:
    if isinstance(minutes, bool) or not isinstance(minutes, (int, float)):
        raise ValidationError("Pause duration must be a number of minutes")
    if not math.isfinite(minutes):
        raise ValidationError("Pause duration must be finite")
    if minutes < 0:
        raise ValidationError("Pause duration cannot be negative")
    return float(minutes)


def apply_pause(
    store, minutes: Any, reason: Optional[str], now: datetime
) -> PauseState:
    duration = validate_minutes(minutes)
    ensure_instant(now)
    if reason is not None and not isinstance(reason, str):
        raise ValidationError("Pause reason must be text")
    expires_at = None
    if duration > 0:
        try:
            expires_at = now + timedelta(minutes=duration)
        except OverflowError:
            raise ValidationError("Pause duration is too long") from None
        if expires_at <= now:
            raise ValidationError("Pause duration is too short")

    pause = PauseState(
        active=True,
        reason=(reason or "").strip(),
        started_at=now,
        expires_at=expires_at,
        minutes=duration if expires_at else None,
    )
    store.pause_active = True
    store.pause_reason = pause.reason
    store.pause_minutes = pause.minutes
    store.pause_started_at = to_storage(pause.started_at)
    store.pause_expires_at = to_storage(pause.expires_at)
    return pause


def clear_pause(store) -> bool:
    if not store.pause_active and store.pause_started_at is None:
        return False
    store.pause_active = False
    store.pause_reason = None
    store.pause_minutes = None
    store.pause_started_at = None
    store.pause_expires_at = None
    return True
