from __future__ import annotations

import re
from datetime import date, datetime, timedelta

from ._util import _now_local

WEEKDAYS = ("monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday")


def _with_local_tz(dt: datetime) -> datetime:
    if dt.tzinfo is None:
        return dt.replace(tzinfo=_now_local().tzinfo)
    return dt.astimezone()


def parse_ts(value: str | None, now: datetime | None = None) -> str:
    """
    Parse flexible user time into ISO 8601 with local timezone.
    Accepts:
      - None / "" / "now" -> now
      - ISO 8601 (with or without tz; naive assumed local)
      - "7:34am", "7:34 am", "19:34", "7am"
      - "2026-02-25 7:34am", "2026-02-25 19:34"
      - relative: "3 days ago", "1 day ago", "2 hours ago", "15 minutes ago"
      - keywords: "today 14:30", "yesterday 9am"
      - weekdays: "monday 9am" (most recent monday, today included)
    Returns: ISO string with local timezone, seconds precision.
    Raises ValueError when nothing matches.
    """
    now = now or _now_local()
    if not value or not value.strip() or value.strip().lower() == "now":
        return now.isoformat(timespec="seconds")

    s = value.strip().lower()

    # --- 1) ISO 8601 ---
    try:
        dt = datetime.fromisoformat(value.strip())
        return _with_local_tz(dt).isoformat(timespec="seconds")
    except ValueError:
        pass

    # --- 2) Relative like "3 days ago", "2 hours ago", "15 minutes ago" ---
    m = re.fullmatch(r"(\d+)\s*(day|days|hour|hours|minute|minutes)\s*ago", s)
    if m:
        n = int(m.group(1))
        unit = m.group(2)
        if "day" in unit:
            dt = now - timedelta(days=n)
        elif "hour" in unit:
            dt = now - timedelta(hours=n)
        else:
            dt = now - timedelta(minutes=n)
        return dt.isoformat(timespec="seconds")

    # --- 3) Day word prefix: today/yesterday/<weekday> ---
    m = re.fullmatch(r"([a-z]+)\s+(.+)", s)
    if m and _day_offset(m.group(1), now) is not None:
        base = now - timedelta(days=_day_offset(m.group(1), now))
        return _parse_time_only(m.group(2).strip(), base).isoformat(timespec="seconds")

    # --- 4) Date + time formats ---
    dt_formats = [
        "%Y-%m-%d %I:%M%p",
        "%Y-%m-%d %I:%M %p",
        "%Y-%m-%d %I%p",
        "%Y-%m-%d %H:%M",
        "%Y/%m/%d %I:%M%p",
        "%Y/%m/%d %I:%M %p",
        "%Y/%m/%d %H:%M",
    ]
    for fmt in dt_formats:
        try:
            dt = datetime.strptime(value.strip(), fmt)
            return dt.replace(tzinfo=now.tzinfo).isoformat(timespec="seconds")
        except ValueError:
            continue

    # --- 5) Time-only formats (assume today) ---
    try:
        return _parse_time_only(value.strip(), now).isoformat(timespec="seconds")
    except ValueError:
        pass

    raise ValueError(
        f"Could not parse time {value!r}. Try ISO like '2026-02-25T07:34:00-05:00' "
        f"or '2026-02-25 7:34am' or '7:34am' or 'yesterday 9am' or '3 days ago'."
    )


def parse_day(value: str | None, now: datetime | None = None) -> date:
    """Parse a calendar day: ISO date, today/yesterday, a weekday name, or any parse_ts input."""
    now = now or _now_local()
    if not value or not value.strip():
        return now.date()
    s = value.strip().lower()
    offset = _day_offset(s, now)
    if offset is not None:
        return (now - timedelta(days=offset)).date()
    try:
        return date.fromisoformat(s)
    except ValueError:
        pass
    return datetime.fromisoformat(parse_ts(value, now)).date()


def _day_offset(word: str, now: datetime) -> int | None:
    """Days back from ``now`` for a day word, or None if it isn't one."""
    if word == "today":
        return 0
    if word == "yesterday":
        return 1
    if word in WEEKDAYS:
        return (now.weekday() - WEEKDAYS.index(word)) % 7
    return None


def _parse_time_only(time_str: str, base_dt: datetime) -> datetime:
    """
    Parse a time like '9am', '7:34am', '14:30' and apply it to base_dt's date.
    Returns timezone-aware datetime (base_dt tz).
    """
    s = time_str.strip().lower()

    t_formats = [
        "%I:%M%p",
        "%I:%M %p",
        "%I%p",
        "%H:%M",
    ]
    for fmt in t_formats:
        try:
            t = datetime.strptime(s, fmt)
            return base_dt.replace(hour=t.hour, minute=t.minute, second=0, microsecond=0)
        except ValueError:
            continue

    raise ValueError(f"Could not parse time-only value: {time_str!r}")
