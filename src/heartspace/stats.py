from __future__ import annotations

from datetime import date, timedelta
from typing import Any

from ._util import _entry_date, _now_local
from .moods import MoodType, entry_mood, mood_score

SPARK_BLOCKS = "▁▂▃▄▅▆▇█"
TAG_MIN_SIZE = 12
TAG_MAX_SIZE = 24


def tag_counts(moods: list[dict[str, Any]]) -> dict[str, int]:
    counts: dict[str, int] = {}
    for m in moods:
        for t in m.get("tags") or []:
            tag = str(t).strip()
            if tag:
                counts[tag] = counts.get(tag, 0) + 1
    return counts


def all_tags(moods: list[dict[str, Any]]) -> list[str]:
    counts = tag_counts(moods)
    return sorted(counts, key=lambda t: (-counts[t], t.lower()))


def tag_cloud(moods: list[dict[str, Any]]) -> list[dict[str, Any]]:
    """Tags with a display size (12-24) and a heat tier scaled to the most used tag."""
    counts = tag_counts(moods)
    if not counts:
        return []
    max_count = max(counts.values())

    cloud = []
    for tag in all_tags(moods):
        intensity = counts[tag] / max_count
        if intensity > 0.7:
            tier = "hot"
        elif intensity > 0.4:
            tier = "warm"
        else:
            tier = "cool"
        cloud.append(
            {
                "tag": tag,
                "count": counts[tag],
                "size": round(TAG_MIN_SIZE + intensity * (TAG_MAX_SIZE - TAG_MIN_SIZE), 1),
                "tier": tier,
            }
        )
    return cloud


def mood_counts(moods: list[dict[str, Any]]) -> dict[str, int]:
    counts = {m.value: 0 for m in MoodType}
    for m in moods:
        mood = entry_mood(m)
        if mood:
            counts[mood.value] += 1
    return counts


def activity_counts(moods: list[dict[str, Any]]) -> dict[str, int]:
    counts: dict[str, int] = {}
    for m in moods:
        activity = str(m.get("activity", "")).strip()
        if activity:
            counts[activity] = counts.get(activity, 0) + 1
    return counts


def average_score(moods: list[dict[str, Any]]) -> float:
    scores = [s for s in (mood_score(m) for m in moods) if s is not None]
    if not scores:
        return 0.0
    return round(sum(scores) / len(scores), 1)


def daily_series(
    moods: list[dict[str, Any]], days: int = 30, today: date | None = None
) -> list[dict[str, Any]]:
    """One point per day (oldest first, ending today): rounded average score or None, and count."""
    if days < 1:
        raise ValueError(f"days must be at least 1 (got {days})")
    today = today or _now_local().date()
    first = today - timedelta(days=days - 1)

    by_day: dict[date, list[int]] = {}
    for m in moods:
        d = _entry_date(m)
        s = mood_score(m)
        if d is None or s is None or not (first <= d <= today):
            continue
        by_day.setdefault(d, []).append(s)

    series = []
    for i in range(days):
        d = first + timedelta(days=i)
        scores = by_day.get(d, [])
        series.append(
            {
                "date": d.isoformat(),
                "score": round(sum(scores) / len(scores), 1) if scores else None,
                "count": len(scores),
            }
        )
    return series


def profile_stats(moods: list[dict[str, Any]]) -> dict[str, int]:
    days = {d for d in (_entry_date(m) for m in moods) if d is not None}
    happy = sum(1 for m in moods if entry_mood(m) is MoodType.HAPPY)
    return {"total_days": len(days), "happy_count": happy, "total": len(moods)}


def linear_regression_slope(xs: list[float], ys: list[float]) -> float:
    n = len(xs)
    if n < 2:
        return 0.0
    x_mean = sum(xs) / n
    y_mean = sum(ys) / n
    num = sum((x - x_mean) * (y - y_mean) for x, y in zip(xs, ys))
    den = sum((x - x_mean) ** 2 for x in xs)
    return (num / den) if den else 0.0


def trend_label(slope: float, stable_band: float = 0.05) -> str:
    if slope > stable_band:
        return "↑ rising"
    if slope < -stable_band:
        return "↓ falling"
    return "→ steady"


def sparkline(values: list[float | None], vmin: float = 1.0, vmax: float = 5.0) -> str:
    if not values:
        return ""
    span = max(1e-9, vmax - vmin)
    out = []
    for v in values:
        if v is None:
            out.append(" ")
            continue
        x = (v - vmin) / span
        idx = int(round(x * (len(SPARK_BLOCKS) - 1)))
        idx = max(0, min(len(SPARK_BLOCKS) - 1, idx))
        out.append(SPARK_BLOCKS[idx])
    return "".join(out)
