"""Mood types and journal entry operations.

Entries are plain dicts as stored in the journal file::

    {"id": "3f2a9c0d1b7e", "ts": "2026-10-18T09:30:00+02:00", "mood": "calm",
     "location": "park", "activity": "walking", "note": "...", "tags": ["outside"]}
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import Enum
from typing import Any

from ._util import _dt_from_entry_ts, _new_id, _now_local

log = logging.getLogger(__name__)

MAX_TAGS = 5
DEFAULT_LOCATION = "somewhere"
DEFAULT_ACTIVITY = "daydreaming"
HEALING_LOOKBACK_DAYS = 7


class MoodType(str, Enum):
    HAPPY = "happy"
    CALM = "calm"
    NEUTRAL = "neutral"
    TIRED = "tired"
    SAD = "sad"
    ANNOYED = "annoyed"


@dataclass(frozen=True)
class MoodConfig:
    label: str
    score: int
    emoji: str


MOOD_CONFIGS: dict[MoodType, MoodConfig] = {
    MoodType.HAPPY: MoodConfig("Happy", 5, "😄"),
    MoodType.CALM: MoodConfig("Calm", 4, "🌇"),
    MoodType.NEUTRAL: MoodConfig("Neutral", 3, "😐"),
    MoodType.TIRED: MoodConfig("Tired", 2, "🪫"),
    MoodType.SAD: MoodConfig("Sad", 1, "😢"),
    MoodType.ANNOYED: MoodConfig("Annoyed", 1, "⚡"),
}

NEGATIVE_MOODS = frozenset({MoodType.TIRED, MoodType.SAD, MoodType.ANNOYED})
POSITIVE_MOODS = frozenset({MoodType.HAPPY, MoodType.CALM})


def parse_mood(value: str | MoodType) -> MoodType:
    if isinstance(value, MoodType):
        return value
    s = str(value).strip().lower()
    for mood, cfg in MOOD_CONFIGS.items():
        if s in (mood.value, cfg.label.lower()):
            return mood
    choices = ", ".join(m.value for m in MoodType)
    raise ValueError(f"Unknown mood {value!r}; choose one of: {choices}")


def entry_mood(entry: dict[str, Any]) -> MoodType | None:
    try:
        return MoodType(entry.get("mood"))
    except ValueError:
        return None


def mood_score(entry: dict[str, Any]) -> int | None:
    mood = entry_mood(entry)
    return MOOD_CONFIGS[mood].score if mood else None


def normalize_tags(raw: str | list[str] | None) -> list[str]:
    """Split, trim and case-insensitively dedupe tags (first spelling wins)."""
    if not raw:
        return []
    chunks = raw if isinstance(raw, list) else [raw]
    parts: list[str] = []
    for chunk in chunks:
        parts.extend(str(chunk).replace(",", " ").split())

    seen = set()
    out: list[str] = []
    for p in parts:
        key = p.lower()
        if key in seen:
            continue
        seen.add(key)
        out.append(p)

    if len(out) > MAX_TAGS:
        raise ValueError(f"At most {MAX_TAGS} tags per entry (got {len(out)}: {', '.join(out)})")
    return out


def new_entry(
    mood: str | MoodType,
    location: str | None = None,
    activity: str | None = None,
    note: str | None = None,
    photo: str | None = None,
    tags: str | list[str] | None = None,
    ts: str | None = None,
) -> dict[str, Any]:
    entry: dict[str, Any] = {
        "id": _new_id(),
        "ts": ts or _now_local().isoformat(timespec="seconds"),
        "mood": parse_mood(mood).value,
        "location": (location or "").strip() or DEFAULT_LOCATION,
        "activity": (activity or "").strip() or DEFAULT_ACTIVITY,
    }
    if note and note.strip():
        entry["note"] = note.strip()
    if photo and photo.strip():
        entry["photo"] = photo.strip()
    tag_list = normalize_tags(tags)
    if tag_list:
        entry["tags"] = tag_list
    return entry


def purge_expired(
    moods: list[dict[str, Any]], now: datetime, retention_days: int
) -> list[dict[str, Any]]:
    cutoff = now - timedelta(days=retention_days)
    kept = []
    for m in moods:
        dt = _dt_from_entry_ts(str(m.get("ts", "")))
        if dt is not None and dt < cutoff:
            continue
        kept.append(m)
    return kept


def add_mood(
    data: dict[str, Any],
    entry: dict[str, Any],
    now: datetime | None = None,
    retention_days: int = 180,
) -> int:
    """Append ``entry`` after dropping entries older than the retention window.

    Returns how many old entries were purged.
    """
    now = now or _now_local()
    moods = data.setdefault("moods", [])
    kept = purge_expired(moods, now, retention_days)
    purged = len(moods) - len(kept)
    if purged:
        log.info("purged %d entries older than %d days", purged, retention_days)

    kept.append(entry)
    data["moods"] = kept
    log.debug("added mood %s (%s)", entry.get("id"), entry.get("mood"))
    return purged


def find_healing_suggestion(
    moods: list[dict[str, Any]], entry: dict[str, Any], now: datetime | None = None
) -> dict[str, Any] | None:
    """Pick a recent positive moment to show after a negative entry.

    Prefers a positive entry with a similar activity or location; falls back to
    the oldest positive entry of the last week.
    """
    if entry_mood(entry) not in NEGATIVE_MOODS:
        return None

    now = now or _now_local()
    cutoff = now - timedelta(days=HEALING_LOOKBACK_DAYS)
    candidates = []
    for m in moods:
        if m.get("id") == entry.get("id") or entry_mood(m) not in POSITIVE_MOODS:
            continue
        dt = _dt_from_entry_ts(str(m.get("ts", "")))
        if dt and dt > cutoff:
            candidates.append(m)

    if not candidates:
        return None

    activity = str(entry.get("activity", ""))
    location = str(entry.get("location", ""))
    for c in candidates:
        c_activity = str(c.get("activity", ""))
        if activity in c_activity or c_activity in activity or location in str(c.get("location", "")):
            return c
    return candidates[0]


def _sort_key(entry: dict[str, Any]) -> float:
    dt = _dt_from_entry_ts(str(entry.get("ts", "")))
    return dt.timestamp() if dt else float("-inf")


def sorted_moods(moods: list[dict[str, Any]]) -> list[dict[str, Any]]:
    """Newest first; unparseable timestamps sink to the end."""
    return sorted(moods, key=_sort_key, reverse=True)


def filter_moods(
    moods: list[dict[str, Any]],
    mood: str | MoodType | None = None,
    tag: str | None = None,
    since: datetime | None = None,
) -> list[dict[str, Any]]:
    want_mood = parse_mood(mood).value if mood else None
    want_tag = tag.strip().lower() if tag else None

    out = []
    for m in moods:
        if want_mood and m.get("mood") != want_mood:
            continue
        if want_tag and want_tag not in (str(t).lower() for t in m.get("tags") or []):
            continue
        if since:
            dt = _dt_from_entry_ts(str(m.get("ts", "")))
            if not dt or dt < since:
                continue
        out.append(m)
    return out


def find_mood(moods: list[dict[str, Any]], ref: str) -> dict[str, Any]:
    """Look up an entry by id or unique id prefix."""
    ref = ref.strip()
    if not ref:
        raise KeyError("empty entry id")
    for m in moods:
        if m.get("id") == ref:
            return m
    matches = [m for m in moods if str(m.get("id", "")).startswith(ref)]
    if not matches:
        raise KeyError(f"No mood entry with id {ref!r}")
    if len(matches) > 1:
        raise ValueError(f"Entry id {ref!r} is ambiguous ({len(matches)} matches)")
    return matches[0]


def delete_mood(data: dict[str, Any], ref: str) -> dict[str, Any]:
    moods = data.get("moods", [])
    entry = find_mood(moods, ref)
    data["moods"] = [m for m in moods if m is not entry]
    log.info("deleted mood %s", entry.get("id"))
    return entry


def clear_moods(data: dict[str, Any]) -> int:
    count = len(data.get("moods", []))
    data["moods"] = []
    log.info("cleared %d mood entries", count)
    return count
