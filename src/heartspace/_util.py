"""Shared low-level helpers used across the heartspace modules."""

from __future__ import annotations

import uuid
from datetime import date, datetime


def _now_local() -> datetime:
    return datetime.now().astimezone()


def _fmt_time(dt: datetime) -> str:
    # Windows-safe formatting
    try:
        return dt.strftime("%-I:%M %p")
    except ValueError:
        return dt.strftime("%I:%M %p").lstrip("0")


def _dt_from_entry_ts(ts: str) -> datetime | None:
    try:
        dt = datetime.fromisoformat(ts)
        if dt.tzinfo is None:
            dt = dt.replace(tzinfo=_now_local().tzinfo)
        return dt.astimezone()
    except (TypeError, ValueError):
        return None


def _entry_date(entry: dict) -> date | None:
    dt = _dt_from_entry_ts(str(entry.get("ts", "")))
    return dt.date() if dt else None


def _new_id() -> str:
    return uuid.uuid4().hex[:12]
