"""Weekly and monthly mood reports.

A period (Monday-Sunday week, or calendar month) becomes due at
``report_hour`` on its last day. ``generate_due_reports`` walks every period
from the oldest entry up to now and stores a report for each due period that
has entries and no report yet, so it can be re-run on a timer and catches up
after the program was not running. Reports are keyed by ``(type, start)``;
deleting a report dismisses its period so catch-up does not bring it back.
"""

from __future__ import annotations

import logging
from datetime import date, datetime, timedelta
from typing import Any

from ._util import _entry_date, _new_id, _now_local
from .moods import MOOD_CONFIGS, MoodType, mood_score
from .stats import activity_counts, linear_regression_slope, mood_counts, trend_label
from .storage import ensure_schema

log = logging.getLogger(__name__)

WEEKLY = "weekly"
MONTHLY = "monthly"
REPORT_TYPES = (WEEKLY, MONTHLY)
_PERIOD_NOUN = {WEEKLY: "week", MONTHLY: "month"}


def _check_kind(kind: str) -> str:
    if kind not in REPORT_TYPES:
        raise ValueError(f"Unknown report type {kind!r}; choose weekly or monthly")
    return kind


def period_bounds(kind: str, day: date) -> tuple[date, date]:
    """First and last day of the week (Mon-Sun) or month containing ``day``."""
    _check_kind(kind)
    if kind == WEEKLY:
        start = day - timedelta(days=day.weekday())
        return start, start + timedelta(days=6)
    start = day.replace(day=1)
    return start, next_period_start(MONTHLY, start) - timedelta(days=1)


def next_period_start(kind: str, start: date) -> date:
    if kind == WEEKLY:
        return start + timedelta(days=7)
    return (start.replace(day=28) + timedelta(days=4)).replace(day=1)


def period_ready(kind: str, start: date, now: datetime, report_hour: int = 12) -> bool:
    _, end = period_bounds(kind, start)
    today = now.date()
    return today > end or (today == end and now.hour >= report_hour)


def period_key(kind: str, start: date | str) -> str:
    if isinstance(start, date):
        start = start.isoformat()
    return f"{kind}:{start}"


def _report_key(report: dict[str, Any]) -> str:
    return period_key(str(report.get("type")), str(report.get("start")))


def entries_in_period(
    moods: list[dict[str, Any]], start: date, end: date
) -> list[dict[str, Any]]:
    """Entries whose local date falls in [start, end], oldest first."""
    found = []
    for m in moods:
        d = _entry_date(m)
        if d is not None and start <= d <= end and mood_score(m) is not None:
            found.append((d, str(m.get("ts", "")), m))
    found.sort(key=lambda x: (x[0], x[1]))
    return [m for _, _, m in found]


def _top_mood(counts: dict[str, int]) -> str | None:
    best = max(counts.values(), default=0)
    if best == 0:
        return None
    for mood in MoodType:
        if counts.get(mood.value, 0) == best:
            return mood.value
    return None


def _trend_summary(entries: list[dict[str, Any]], start: date, noun: str) -> str:
    by_day: dict[date, list[int]] = {}
    for m in entries:
        by_day.setdefault(_entry_date(m), []).append(mood_score(m))
    days = sorted(by_day)
    avgs = [sum(by_day[d]) / len(by_day[d]) for d in days]

    if len(days) < 2:
        return f"Only one day recorded this {noun}; average mood {avgs[0]:.1f}/5."

    slope = linear_regression_slope([float((d - start).days) for d in days], avgs)
    label = trend_label(slope)
    if label.endswith("rising"):
        return f"Mood trended upward over the {noun} ({avgs[0]:.1f} → {avgs[-1]:.1f})."
    if label.endswith("falling"):
        return f"Mood trended downward over the {noun} ({avgs[0]:.1f} → {avgs[-1]:.1f})."
    return f"Mood held steady around {sum(avgs) / len(avgs):.1f}/5 this {noun}."


def _frequent_activity(activities: dict[str, int], total: int) -> tuple[str | None, str]:
    if not activities:
        return None, "No activities recorded."
    top = max(activities, key=lambda a: activities[a])
    return top, f"Most frequent activity: {top} ({activities[top]} of {total} entries)."


def _mood_distribution(counts: dict[str, int], total: int) -> str:
    order = [m.value for m in MoodType]
    present = sorted(
        (k for k, c in counts.items() if c),
        key=lambda k: (-counts[k], order.index(k)),
    )
    return ", ".join(f"{k} {round(100 * counts[k] / total)}%" for k in present)


def build_report(
    kind: str,
    start: date,
    moods: list[dict[str, Any]],
    now: datetime | None = None,
) -> dict[str, Any] | None:
    """Aggregate the period containing ``start``. None when it has no entries."""
    start, end = period_bounds(kind, start)
    entries = entries_in_period(moods, start, end)
    if not entries:
        return None

    now = now or _now_local()
    noun = _PERIOD_NOUN[kind]
    scores = [mood_score(m) for m in entries]
    total = len(entries)
    avg = round(sum(scores) / total, 1)
    counts = mood_counts(entries)
    top = _top_mood(counts)
    top_activity, activity_text = _frequent_activity(activity_counts(entries), total)
    days = len({_entry_date(m) for m in entries})

    content = (
        f"This {noun} you logged {total} mood{'s' if total != 1 else ''} "
        f"across {days} day{'s' if days != 1 else ''}. "
        f"Average mood was {avg:.1f}/5 (low {min(scores)}, high {max(scores)})"
    )
    if top:
        content += f", and you most often felt {MOOD_CONFIGS[MoodType(top)].label.lower()}"
    content += "."

    return {
        "id": _new_id(),
        "type": kind,
        "start": start.isoformat(),
        "end": end.isoformat(),
        "min_score": float(min(scores)),
        "max_score": float(max(scores)),
        "avg_score": avg,
        "total_entries": total,
        "top_mood": top,
        "mood_counts": counts,
        "top_activity": top_activity,
        "insights": {
            "trend_summary": _trend_summary(entries, start, noun),
            "frequent_activity": activity_text,
            "mood_distribution": _mood_distribution(counts, total),
        },
        "content": content,
        "created_at": now.isoformat(timespec="seconds"),
    }


def preview_report(
    kind: str, day: date, moods: list[dict[str, Any]], now: datetime | None = None
) -> dict[str, Any] | None:
    return build_report(kind, period_bounds(kind, day)[0], moods, now)


def due_periods(
    data: dict[str, Any], now: datetime, report_hour: int = 12
) -> list[tuple[str, date]]:
    """Ready periods since the oldest entry that have no report and were not dismissed."""
    ensure_schema(data)
    dates = [d for d in (_entry_date(m) for m in data["moods"]) if d is not None]
    if not dates:
        return []

    taken = {_report_key(r) for kind in REPORT_TYPES for r in data["reports"][kind]}
    taken.update(data["dismissed_reports"])
    oldest = min(dates)

    due = []
    for kind in REPORT_TYPES:
        start, _ = period_bounds(kind, oldest)
        current, _ = period_bounds(kind, now.date())
        while start <= current:
            if period_ready(kind, start, now, report_hour) and period_key(kind, start) not in taken:
                due.append((kind, start))
            start = next_period_start(kind, start)
    return due


def generate_due_reports(
    data: dict[str, Any], now: datetime | None = None, report_hour: int = 12
) -> list[dict[str, Any]]:
    """Store a report for every due, non-empty period. Returns the new reports."""
    now = now or _now_local()
    created = []
    for kind, start in due_periods(data, now, report_hour):
        report = build_report(kind, start, data["moods"], now)
        if report is None:
            continue
        data["reports"][kind].append(report)
        created.append(report)
        log.info(
            "generated %s report %s..%s (%d entries)",
            kind, report["start"], report["end"], report["total_entries"],
        )
    return created


def list_reports(data: dict[str, Any], kind: str | None = None) -> list[dict[str, Any]]:
    """Reports newest period first."""
    ensure_schema(data)
    kinds = (_check_kind(kind),) if kind else REPORT_TYPES
    reports = [r for k in kinds for r in data["reports"][k]]
    return sorted(reports, key=lambda r: (str(r.get("start", "")), str(r.get("type", ""))), reverse=True)


def find_report(data: dict[str, Any], ref: str) -> dict[str, Any]:
    ref = ref.strip()
    reports = list_reports(data)
    for r in reports:
        if r.get("id") == ref:
            return r
    matches = [r for r in reports if ref and str(r.get("id", "")).startswith(ref)]
    if not matches:
        raise KeyError(f"No report with id {ref!r}")
    if len(matches) > 1:
        raise ValueError(f"Report id {ref!r} is ambiguous ({len(matches)} matches)")
    return matches[0]


def delete_report(data: dict[str, Any], ref: str) -> dict[str, Any]:
    """Remove a report and dismiss its period so it is not regenerated."""
    report = find_report(data, ref)
    kind = report["type"]
    data["reports"][kind] = [r for r in data["reports"][kind] if r is not report]
    key = _report_key(report)
    if key not in data["dismissed_reports"]:
        data["dismissed_reports"].append(key)
    log.info("deleted %s report %s (period %s dismissed)", kind, report.get("id"), key)
    return report


def restore_period(data: dict[str, Any], kind: str, day: date) -> bool:
    """Allow a dismissed period to be generated again. False if it wasn't dismissed."""
    ensure_schema(data)
    key = period_key(kind, period_bounds(kind, day)[0])
    if key not in data["dismissed_reports"]:
        return False
    data["dismissed_reports"].remove(key)
    log.info("restored report period %s", key)
    return True


def report_title(report: dict[str, Any]) -> str:
    if report.get("type") == MONTHLY:
        try:
            return "Monthly report · " + date.fromisoformat(str(report.get("start"))).strftime("%B %Y")
        except ValueError:
            pass
    return f"{str(report.get('type', '')).capitalize()} report · {report.get('start')} → {report.get('end')}"
