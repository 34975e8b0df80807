from dataclasses import dataclass
from datetime import datetime, time, timedelta
from typing import Any, Iterable, Mapping, Optional

from storefront.core.config import WEEKDAY_ALIASES, WEEKDAYS
from storefront.core.errors import ValidationError


@dataclass(frozen=True)
class Window:
    weekday: int
    opens_at: time
    closes_at: time
    position: int = 0


def parse_time_of_day(raw: Any) -> time:
    if isinstance(raw, time):
        return raw.replace(second=0, microsecond=0, tzinfo=None)
    if not isinstance(raw, str):
        raise ValidationError(f"Invalid time {raw!r}, expected HH:MM")
    parts = raw.strip().split(":")
    if len(parts) != 2 or not all(part.isdigit() for part in parts):
        raise ValidationError(f"Invalid time {raw!r}, expected HH:MM")
    hours, minutes = int(parts[0]), int(parts[1])
    if not (0 <= hours <= 23 and 0 <= minutes <= 59):
        raise ValidationError(f"Time {raw!r} is outside 00:00-23:59")
    return time(hours, minutes)


def format_time_of_day(value: time) -> str:
    return f"{value.hour:02d}:{value.minute:02d}"


def resolve_weekday(key: Any) -> int:
    if isinstance(key, bool):
        raise ValidationError(f"Unknown weekday {key!r}")
    if isinstance(key, int):
        weekday = key
    else:
        cleaned = str(key).strip().lower()
        if cleaned.isdigit():
            weekday = int(cleaned)
        elif cleaned in WEEKDAYS:
            return WEEKDAYS.index(cleaned)
        elif cleaned in WEEKDAY_ALIASES:
            return WEEKDAY_ALIASES[cleaned]
        else:
            raise ValidationError(f"Unknown weekday {key!r}")
    if not 0 <= weekday <= 6:
        raise ValidationError(f"Weekday {key!r} is outside 0-6")
    return weekday


def _window_bounds(entry: Any) -> tuple[Any, Any]:
    if isinstance(entry, Mapping):
        return entry.get("opensAt"), entry.get("closesAt")
    try:
        opens_at, closes_at = entry
    except (TypeError, ValueError):
        raise ValidationError(
            f"Invalid window {entry!r}, expected opensAt/closesAt"
        ) from None
    return opens_at, closes_at


def build_windows(schedule: Mapping[Any, Iterable[Any]]) -> list[Window]:
    """Validate a weekday -> windows mapping and return ordered windows.

    Keys may be 0-6 (Monday is 0), English day names or the Portuguese
    aliases in ``WEEKDAY_ALIASES``. Each window is a mapping with
    ``opensAt``/``closesAt`` or an ``(opens, closes)`` pair of ``HH:MM``
    strings. A window closing before it opens runs past midnight.
    """
    if not isinstance(schedule, Mapping):
        raise ValidationError("Schedule must map weekdays to windows")
    by_day: dict[int, list[tuple[time, time]]] = {}
    for key, entries in schedule.items():
        weekday = resolve_weekday(key)
        if entries is None:
            continue
        if isinstance(entries, (str, bytes, Mapping)):
            raise ValidationError(f"Windows for {key!r} must be a list")
        for entry in entries:
            raw_open, raw_close = _window_bounds(entry)
            opens_at = parse_time_of_day(raw_open)
            closes_at = parse_time_of_day(raw_close)
            if opens_at == closes_at:
                raise ValidationError(
                    f"Window {format_time_of_day(opens_at)} on "
                    f"{WEEKDAYS[weekday]} opens and closes at the same time"
                )
            by_day.setdefault(weekday, []).append((opens_at, closes_at))

    windows = []
    for weekday in sorted(by_day):
        for position, (opens_at, closes_at) in enumerate(sorted(by_day[weekday])):
            windows.append(Window(weekday, opens_at, closes_at, position))
    return windows


def serialize_windows(windows: Iterable[Any]) -> dict[str, list[dict]]:
    payload: dict[str, list[dict]] = {day: [] for day in WEEKDAYS}
    for window in windows:
        payload[WEEKDAYS[window.weekday]].append(
            {
                "opensAt": format_time_of_day(window.opens_at),
                "closesAt": format_time_of_day(window.closes_at),
            }
        )
    return payload


def is_overnight(window: Any) -> bool:
    """Works for both ``Window`` values and stored ``ScheduleWindow`` rows."""
    return window.closes_at < window.opens_at


def is_schedule_open(windows: Optional[Iterable[Any]], moment: datetime) -> bool:
    """True when ``moment`` (already in local time) falls in a window.

    Overnight windows belong to the day they open on, so the previous
    day's overnight windows are checked for the early hours.
    """
    if not windows:
        return False
    current = moment.time().replace(tzinfo=None)
    today = moment.weekday()
    yesterday = (today - 1) % 7
    for window in windows:
        if window.weekday == today:
            if is_overnight(window):
                if current >= window.opens_at:
                    return True
            elif window.opens_at <= current < window.closes_at:
                return True
        elif window.weekday == yesterday and is_overnight(window):
            if current < window.closes_at:
                return True
    return False


def schedule_intervals(
    windows: Optional[Iterable[Any]], moment: datetime, days: int = 7
) -> list[tuple[datetime, datetime]]:
    if not windows:
        return []
    windows = list(windows)
    base = moment.date()
    tz = moment.tzinfo
    intervals = []
    for offset in range(-1, days + 1):
        day = base + timedelta(days=offset)
        for window in windows:
            if window.weekday != day.weekday():
                continue
            start = datetime.combine(day, window.opens_at, tzinfo=tz)
            end_day = day + timedelta(days=1) if is_overnight(window) else day
            end = datetime.combine(end_day, window.closes_at, tzinfo=tz)
            intervals.append((start, end))
    intervals.sort()

    merged: list[tuple[datetime, datetime]] = []
    for start, end in intervals:
        if merged and start <= merged[-1][1]:
            if end > merged[-1][1]:
                merged[-1] = (merged[-1][0], end)
            continue
        merged.append((start, end))
    return merged


def next_change(
    windows: Optional[Iterable[Any]], moment: datetime, days: int = 7
) -> tuple[Optional[datetime], Optional[datetime]]:
    intervals = schedule_intervals(windows, moment, days)
    if not intervals:
        return None, None
    horizon = datetime.combine(
        moment.date() + timedelta(days=days + 1), time.min, tzinfo=moment.tzinfo
    )
    active = next(
        (item for item in intervals if item[0] <= moment < item[1]), None
    )
    upcoming = next((item for item in intervals if item[0] > moment), None)
    next_open_at = upcoming[0] if upcoming else None
    if active:
        next_close_at = active[1] if active[1] < horizon else None
    else:
        next_close_at = upcoming[1] if upcoming else None
    return next_open_at, next_close_at
