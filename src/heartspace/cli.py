from __future__ import annotations

import argparse
import csv
import json
import os
import stat
from datetime import datetime, timedelta
from pathlib import Path
from typing import Any

from . import courier, kit, lucky
from ._util import _dt_from_entry_ts, _fmt_time, _now_local
from .config import Settings
from .logger import setup_logger
from .moods import (
    MOOD_CONFIGS,
    MoodType,
    add_mood,
    clear_moods,
    delete_mood,
    entry_mood,
    filter_moods,
    find_healing_suggestion,
    find_mood,
    new_entry,
    sorted_moods,
)
from .paths import ENV_DATA, default_log_path, resolve_data_path
from .reports import (
    REPORT_TYPES,
    delete_report,
    find_report,
    generate_due_reports,
    list_reports,
    period_key,
    preview_report,
    report_title,
    restore_period,
)
from .safety import assert_safe_data_path
from .scheduler import watch
from .stats import (
    activity_counts,
    average_score,
    daily_series,
    linear_regression_slope,
    profile_stats,
    sparkline,
    tag_cloud,
    tag_counts,
    trend_label,
)
from .storage import JournalStore
from .timeparse import parse_day, parse_ts


# -------------------------
# Time helpers
# -------------------------

def _window_cutoff(window: str) -> tuple[datetime | None, str]:
    if window == "all":
        return None, "all time"
    days = int(window)
    return _days_cutoff(days), f"last {days} days"


def _days_cutoff(days: int) -> datetime:
    if days < 1:
        raise ValueError(f"--days must be at least 1 (got {days})")
    now = _now_local()
    return now.replace(hour=0, minute=0, second=0, microsecond=0) - timedelta(days=days - 1)


# -------------------------
# Formatting helpers
# -------------------------

def _mood_badge(entry: dict[str, Any]) -> str:
    mood = entry_mood(entry)
    if not mood:
        return f"? {entry.get('mood', 'unknown')}"
    cfg = MOOD_CONFIGS[mood]
    return f"{cfg.emoji} {cfg.label} ({cfg.score}/5)"


def _entry_line(entry: dict[str, Any]) -> str:
    line = (
        f"{entry.get('ts', '')} — {_mood_badge(entry)} "
        f"@ {entry.get('location', '')} · {entry.get('activity', '')}"
    )
    tags = entry.get("tags") or []
    if tags:
        line += f" [{', '.join(tags)}]"
    if entry.get("note"):
        line += f" ({entry['note']})"
    return f"{line}  #{entry.get('id', '')}"


def _print_mood_block(entry: dict[str, Any]) -> None:
    dt = _dt_from_entry_ts(str(entry.get("ts", "")))
    if dt:
        d = dt.date().isoformat()
        t = _fmt_time(dt)
    else:
        d = "unknown-date"
        t = "unknown-time"

    print("```")
    print("📒 Mood Entry")
    print(f"- 🆔 Id: {entry.get('id', '')}")
    print(f"- 📅 Date: {d}")
    print(f"- 🕒 Time: {t}")
    print(f"- 🙂 Mood: {_mood_badge(entry)}")
    print(f"- 📍 Location: {entry.get('location', '')}")
    print(f"- 🏃 Activity: {entry.get('activity', '')}")
    tags = entry.get("tags") or []
    if tags:
        print(f"- 🏷️ Tags: {', '.join(tags)}")
    if entry.get("photo"):
        print(f"- 📷 Photo: {entry['photo']}")
    if entry.get("note"):
        print(f"- 📝 Note: {entry['note']}")
    print("```")


def _print_report(report: dict[str, Any]) -> None:
    print(f"=== {report_title(report)} ===")
    print(f"- id: {report.get('id', '')}")
    print(f"- entries: {report.get('total_entries', 0)}")
    print(f"- average: {report.get('avg_score')}/5 "
          f"(min {report.get('min_score')}, max {report.get('max_score')})")
    top = report.get("top_mood")
    if top:
        print(f"- top mood: {_mood_badge({'mood': top})}")
    print(f"\n{report.get('content', '')}")

    insights = report.get("insights") or {}
    if insights:
        print("\n[Insights]")
        for key in ("trend_summary", "frequent_activity", "mood_distribution"):
            if insights.get(key):
                print(f"- {insights[key]}")

    counts = report.get("mood_counts") or {}
    if counts:
        print("\n[Mood counts]")
        for mood in MoodType:
            c = int(counts.get(mood.value, 0))
            print(f"{mood.value:>8}: {c:>3} {'▇' * min(c, 30)}")


def _announce_reports(reports: list[dict[str, Any]]) -> None:
    for r in reports:
        print(f"📊 New {r['type']} report: {r['start']} → {r['end']} (avg {r['avg_score']}/5)  #{r['id']}")


# -------------------------
# CSV helpers
# -------------------------

MOOD_CSV_FIELDS = [
    "id",
    "ts",
    "date",
    "time",
    "weekday",
    "mood",
    "score",
    "location",
    "activity",
    "tags",
    "note",
    "photo",
]


def _write_csv(out_path: Path, fieldnames: list[str], rows: list[dict[str, Any]]) -> None:
    out_path.parent.mkdir(parents=True, exist_ok=True)
    with out_path.open("w", newline="", encoding="utf-8") as f:
        w = csv.DictWriter(f, fieldnames=fieldnames, quoting=csv.QUOTE_MINIMAL)
        w.writeheader()
        if rows:
            w.writerows(rows)


# -------------------------
# MOOD commands
# -------------------------

def cmd_mood_add(args: argparse.Namespace) -> None:
    store = JournalStore(args.data_path)
    data = store.load()
    now = _now_local()

    entry = new_entry(
        args.mood,
        location=args.location,
        activity=args.activity,
        note=args.note,
        photo=args.photo,
        tags=args.tags,
        ts=parse_ts(args.time, now),
    )
    purged = add_mood(data, entry, now, args.settings.retention_days)
    suggestion = find_healing_suggestion(data["moods"], entry, now)
    created = generate_due_reports(data, now, args.settings.report_hour)
    store.save(data)

    if args.format == "block":
        _print_mood_block(entry)
    else:
        print(f"🙂 Logged {_mood_badge(entry)} @ {entry['ts']}  #{entry['id']}")

    if purged:
        print(f"🧹 Removed {purged} entries older than {args.settings.retention_days} days.")

    if suggestion:
        dt = _dt_from_entry_ts(str(suggestion.get("ts", "")))
        when = dt.strftime("%a %b %d") if dt else "recently"
        print("\n💛 A brighter moment from this week:")
        print(f"   {when}: {_mood_badge(suggestion)} while {suggestion.get('activity', '')} "
              f"@ {suggestion.get('location', '')}")
        if suggestion.get("note"):
            print(f"   “{suggestion['note']}”")

    _announce_reports(created)


def cmd_mood_list(args: argparse.Namespace) -> None:
    data = JournalStore(args.data_path).load()
    moods = data["moods"]

    if not moods:
        print("No mood entries yet.")
        return

    since = _days_cutoff(args.days) if args.days is not None else None
    found = sorted_moods(filter_moods(moods, mood=args.mood, tag=args.tag, since=since))
    if not found:
        print("No mood entries match those filters.")
        return

    if args.format == "block":
        for m in found[: args.limit]:
            _print_mood_block(m)
        return

    print(f"=== Mood Journal (newest first, {len(found)} entries) ===")
    for m in found[: args.limit]:
        print(_entry_line(m))


def cmd_mood_show(args: argparse.Namespace) -> None:
    data = JournalStore(args.data_path).load()
    _print_mood_block(find_mood(data["moods"], args.id))


def cmd_mood_delete(args: argparse.Namespace) -> None:
    store = JournalStore(args.data_path)
    data = store.load()
    entry = delete_mood(data, args.id)
    store.save(data)
    print(f"🗑️ Deleted {_mood_badge(entry)} @ {entry.get('ts', '')}")


def cmd_mood_clear(args: argparse.Namespace) -> None:
    if not args.yes:
        raise SystemExit("Refusing to clear without --yes (this deletes every mood entry).")

    store = JournalStore(args.data_path)
    data = store.load()
    count = clear_moods(data)
    store.save(data)
    print(f"🧹 Cleared {count} mood entries.")


def cmd_mood_export(args: argparse.Namespace) -> None:
    data = JournalStore(args.data_path).load()
    cutoff, label = _window_cutoff(args.window)

    rows: list[dict[str, Any]] = []
    for m in sorted_moods(data["moods"]):
        dt = _dt_from_entry_ts(str(m.get("ts", "")))
        if not dt or (cutoff and dt < cutoff):
            continue
        mood = entry_mood(m)
        rows.append(
            {
                "id": m.get("id", ""),
                "ts": m.get("ts", ""),
                "date": dt.date().isoformat(),
                "time": dt.strftime("%H:%M"),
                "weekday": dt.strftime("%a"),
                "mood": m.get("mood", ""),
                "score": MOOD_CONFIGS[mood].score if mood else "",
                "location": m.get("location", ""),
                "activity": m.get("activity", ""),
                "tags": ", ".join(m.get("tags") or []),
                "note": m.get("note", ""),
                "photo": m.get("photo", ""),
            }
        )

    out_path = Path(args.csv).expanduser().resolve()
    _write_csv(out_path, MOOD_CSV_FIELDS, rows)

    if rows:
        print(f"📄 Exported {len(rows)} mood rows ({label}) → {out_path}")
    else:
        print(f"📄 Exported header-only mood CSV (no rows for {label}) → {out_path}")


def cmd_mood_backup(args: argparse.Namespace) -> None:
    data = JournalStore(args.data_path).load()
    moods = data["moods"]
    if not moods:
        print("No mood entries to back up.")
        return

    name = f"heartspace_backup_{_now_local().strftime('%Y%m%d')}.json"
    out_path = Path(args.out).expanduser().resolve() if args.out else Path.cwd() / name
    if out_path.is_dir():
        out_path = out_path / name
    out_path.parent.mkdir(parents=True, exist_ok=True)
    out_path.write_text(json.dumps(sorted_moods(moods), indent=2, ensure_ascii=False) + "\n", encoding="utf-8")
    print(f"💾 Backed up {len(moods)} entries → {out_path}")


# -------------------------
# Stats commands
# -------------------------

def cmd_tags(args: argparse.Namespace) -> None:
    moods = JournalStore(args.data_path).load()["moods"]
    counts = tag_counts(moods)
    if not counts:
        print("No tags yet. Add some with `hs mood add --tags ...`.")
        return

    if args.cloud:
        marks = {"hot": "🔥", "warm": "✨", "cool": "·"}
        print("=== Tag Cloud ===")
        for t in tag_cloud(moods)[: args.limit]:
            print(f"{marks[t['tier']]} {t['tag']} ×{t['count']} (size {t['size']:g})")
        return

    print("=== Tags (most used first) ===")
    for tag, c in sorted(counts.items(), key=lambda x: (-x[1], x[0].lower()))[: args.limit]:
        print(f"- {tag}: {c}")


def cmd_trends(args: argparse.Namespace) -> None:
    moods = JournalStore(args.data_path).load()["moods"]
    if not moods:
        print("No mood entries yet.")
        return

    series = daily_series(moods, days=args.days)
    scores = [p["score"] for p in series]
    counts = [p["count"] for p in series]
    recorded = [(i, s) for i, s in enumerate(scores) if s is not None]

    print(f"=== Mood Trends (last {args.days} days) ===")
    print(f"- entries in window: {sum(counts)}")
    print(f"- average mood (all time): {average_score(moods)}/5.0")
    if recorded:
        slope = linear_regression_slope([float(i) for i, _ in recorded], [s for _, s in recorded])
        print(f"- trend: {trend_label(slope)} ({slope:+.3f}/day)")

    print(f"\n[Mood]     {series[0]['date'][5:]} {sparkline(scores)} {series[-1]['date'][5:]}")
    print(f"[Activity] {series[0]['date'][5:]} "
          f"{sparkline([float(c) for c in counts], vmin=0.0, vmax=float(max(counts) or 1))} "
          f"{series[-1]['date'][5:]}")

    if args.daily:
        print("\n[Daily averages]")
        for p in series:
            if p["score"] is not None:
                print(f"- {p['date']}: {p['score']}/5 ({p['count']} entries)")

    activities = activity_counts(filter_moods(moods, since=_days_cutoff(args.days)))
    if activities:
        print("\n[Top activities]")
        for a, c in sorted(activities.items(), key=lambda x: -x[1])[:5]:
            print(f"- {a}: {c}")


def cmd_profile(args: argparse.Namespace) -> None:
    moods = JournalStore(args.data_path).load()["moods"]
    s = profile_stats(moods)
    print(f"=== Profile: {args.profile or 'default'} ===")
    print(f"- 📅 days recorded: {s['total_days']}")
    print(f"- 😄 happy moments: {s['happy_count']}")
    print(f"- 📒 total entries: {s['total']}")


# -------------------------
# Report commands
# -------------------------

def cmd_reports_list(args: argparse.Namespace) -> None:
    data = JournalStore(args.data_path).load()
    reports = list_reports(data, args.type)
    if not reports:
        print("No reports yet. Weekly reports arrive Sunday afternoon, monthly on the last day.")
        return

    print("=== Reports (newest first) ===")
    for r in reports:
        top = f", mostly {r['top_mood']}" if r.get("top_mood") else ""
        print(f"{r['start']} → {r['end']} {r['type']:<7} avg {r['avg_score']}/5 "
              f"({r['total_entries']} entries{top})  #{r['id']}")


def cmd_reports_show(args: argparse.Namespace) -> None:
    _print_report(find_report(JournalStore(args.data_path).load(), args.id))


def cmd_reports_delete(args: argparse.Namespace) -> None:
    store = JournalStore(args.data_path)
    data = store.load()
    report = delete_report(data, args.id)
    store.save(data)
    key = period_key(report["type"], report["start"])
    print(f"🗑️ Deleted {report_title(report)} (it won't be regenerated; undo with `hs reports restore {key}`).")


def cmd_reports_generate(args: argparse.Namespace) -> None:
    store = JournalStore(args.data_path)
    data = store.load()
    created = generate_due_reports(data, _now_local(), args.settings.report_hour)
    if not created:
        print("✅ Reports are up to date.")
        return
    store.save(data)
    _announce_reports(created)


def cmd_reports_preview(args: argparse.Namespace) -> None:
    data = JournalStore(args.data_path).load()
    day = parse_day(args.on)
    report = preview_report(args.type, day, data["moods"])
    if report is None:
        print(f"No entries in the {args.type} period containing {day.isoformat()}.")
        return
    _print_report(report)


def cmd_reports_restore(args: argparse.Namespace) -> None:
    if args.period:
        kind, _, day = args.period.partition(":")
        if kind not in REPORT_TYPES or not day:
            raise ValueError(f"Period key must look like weekly:2026-10-12 (got {args.period!r})")
    elif args.type and args.on:
        kind, day = args.type, args.on
    else:
        raise ValueError("Give a period key like weekly:2026-10-12, or both --type and --on")

    store = JournalStore(args.data_path)
    data = store.load()
    if not restore_period(data, kind, parse_day(day)):
        print("Nothing to restore: that period was not dismissed.")
        return
    created = generate_due_reports(data, _now_local(), args.settings.report_hour)
    store.save(data)
    print("♻️ Period restored.")
    _announce_reports(created)


def cmd_reports_watch(args: argparse.Namespace) -> None:
    print(f"⏰ Checking for due reports every {args.settings.check_interval_minutes} min "
          f"(Ctrl-C to stop) — {args.data_path}")
    watch(args.data_path, args.settings)


# -------------------------
# Extras
# -------------------------

def cmd_lucky(args: argparse.Namespace) -> None:
    store = JournalStore(args.data_path)
    data = store.load()
    note, fresh = lucky.draw(data, _now_local().date())
    if fresh:
        store.save(data)
        print("🎁 You opened today's lucky box:")
    else:
        print("🎁 Today's lucky note (come back tomorrow for a new one):")
    print(f"   {note}")


def cmd_courier_send(args: argparse.Namespace) -> None:
    store = JournalStore(args.data_path)
    data = store.load()
    pkg = courier.send(data, args.content, args.size)
    store.save(data)
    print(f"📦 Sent a {args.size} package; it arrives in {pkg['delivery_days']} days.  #{pkg['id']}")


def cmd_courier_list(args: argparse.Namespace) -> None:
    data = JournalStore(args.data_path).load()
    now = _now_local()

    packages = data["courier"]
    if not packages:
        print("The courier station is empty. Send one with `hs courier send`.")
        return

    print("=== Time Courier ===")
    for pkg in packages:
        state = courier.status(pkg, now)
        if state == "shipping":
            detail = f"🚚 shipping, {courier.days_remaining(pkg, now)} day(s) to go"
        elif state == "arrived":
            detail = "📬 arrived, ready to receive"
        else:
            detail = f"✅ received: “{pkg['content']}” (destroyed in {courier.days_until_destroyed(pkg, now)} day(s))"
        print(f"- {pkg['size']:<6} {detail}  #{pkg['id']}")


def cmd_courier_receive(args: argparse.Namespace) -> None:
    store = JournalStore(args.data_path)
    data = store.load()
    pkg = courier.receive(data, args.id)
    store.save(data)
    sent = _dt_from_entry_ts(str(pkg.get("created_at", "")))
    print(f"📬 A package from {sent.date().isoformat() if sent else 'the past'}:")
    print(f"   “{pkg['content']}”")


def cmd_kit_list(args: argparse.Namespace) -> None:
    data = JournalStore(args.data_path).load()
    items = kit.list_items(data, args.category)
    print("=== Emotional First-Aid Kit ===")
    for item in items:
        label = kit.CATEGORIES[item["category"]]
        print(f"- [{label}] {item['title']} ({item.get('duration', 3)} min): {item['description']}  #{item['id']}")


def cmd_kit_add(args: argparse.Namespace) -> None:
    store = JournalStore(args.data_path)
    data = store.load()
    item = kit.add_item(data, args.title, args.description, args.duration)
    store.save(data)
    print(f"🧰 Added {item['title']!r} to your kit.  #{item['id']}")


def cmd_kit_delete(args: argparse.Namespace) -> None:
    store = JournalStore(args.data_path)
    data = store.load()
    item = kit.delete_item(data, args.id)
    store.save(data)
    print(f"🗑️ Removed {item['title']!r} from your kit.")


# -------------------------
# Core commands
# -------------------------

def cmd_init(args: argparse.Namespace) -> None:
    store = JournalStore(args.data_path)
    store.save(store.load())
    print(f"✅ Initialized journal: {args.data_path}")


def cmd_where(args: argparse.Namespace) -> None:
    env = os.environ.get(ENV_DATA)
    if args.data_arg:
        reason = "because you passed --data"
    elif env:
        reason = f"because {ENV_DATA} is set"
    elif args.profile:
        reason = f"because you used --profile {args.profile!r}"
    else:
        reason = "default XDG config location"

    print(args.data_path)
    print(f"↳ using {reason}")


def cmd_doctor(args: argparse.Namespace) -> None:
    print("=== HeartSpace Doctor ===")

    assert_safe_data_path(args.data_path, args.allow_repo_data_path)
    print("✅ Data path safety guard: OK")

    data = JournalStore(args.data_path).load()
    print(f"✅ Journal readable: {len(data['moods'])} entries, "
          f"{sum(len(v) for v in data['reports'].values())} reports")

    try:
        perms = stat.S_IMODE(args.data_path.stat().st_mode)
        print(f"🔐 File permissions: {oct(perms)} (target 0o600)")
    except FileNotFoundError:
        print("⚠️ Journal file missing (run `hs init`)")

    s = args.settings
    print(f"⚙️ retention={s.retention_days}d report_hour={s.report_hour}:00 "
          f"check_every={s.check_interval_minutes}min log_level={s.log_level}")
    print(f"🪵 Log file: {s.log_file or default_log_path(args.data_path)}")
    print("=== Done ===")


def cmd_summary(args: argparse.Namespace) -> None:
    data = JournalStore(args.data_path).load()
    moods = data["moods"]

    print("==================")
    print("HeartSpace Summary")
    print("==================\n")

    print("[DATA PATH]")
    print(args.data_path, "\n")

    print("[MOOD – last 7 days]")
    recent = [p for p in daily_series(moods, days=7) if p["score"] is not None]
    if recent:
        for p in recent:
            print(f"- {p['date']}: {p['score']}/5 ({p['count']} entries)")
    else:
        print("No mood entries this week.")

    print("\n[LATEST REPORT]")
    reports = list_reports(data)
    if reports:
        r = reports[0]
        print(f"{report_title(r)}: avg {r['avg_score']}/5, {r['total_entries']} entries")
    else:
        print("No reports yet.")


def main(argv=None) -> None:
    p = argparse.ArgumentParser(prog="hs", description="HeartSpace mood journal")
    p.add_argument("--data", default=None, help="Path to journal JSON (overrides env/default)")
    p.add_argument("--profile", default=None, help="Profile name (one journal per person)")
    p.add_argument("--allow-repo-data-path", action="store_true", help="Override safety guard (not recommended)")
    p.add_argument("-v", "--verbose", action="store_true", help="Also log debug output to stderr")

    sub = p.add_subparsers(dest="cmd", required=True)
    sub.add_parser("init", help="Initialize journal safely").set_defaults(func=cmd_init)
    sub.add_parser("summary", help="Show summary dashboard").set_defaults(func=cmd_summary)
    sub.add_parser("where", help="Show which journal file is active and why").set_defaults(func=cmd_where)
    sub.add_parser("doctor", help="Run safety + health checks").set_defaults(func=cmd_doctor)
    sub.add_parser("profile", help="Days recorded, happy moments, total entries").set_defaults(func=cmd_profile)

    # ---- mood ----
    mood = sub.add_parser("mood", help="Mood journaling")
    mood_sub = mood.add_subparsers(dest="mood_cmd", required=True)
    mood_names = [m.value for m in MoodType]

    mood_add = mood_sub.add_parser("add", help="Log how you feel right now")
    mood_add.add_argument("--mood", required=True, help=f"One of: {', '.join(mood_names)}")
    mood_add.add_argument("--location", default=None, help="Where you are")
    mood_add.add_argument("--activity", default=None, help="What you're doing")
    mood_add.add_argument("--note", default=None)
    mood_add.add_argument("--photo", default=None, help="Path or URL of a photo")
    mood_add.add_argument("--tags", default=None, help="Comma or space-separated tags (max 5)")
    mood_add.add_argument("--time", default=None, help="ISO, human, or relative (e.g. yesterday 9am, 3 days ago)")
    mood_add.add_argument("--format", choices=["line", "block"], default="line")
    mood_add.set_defaults(func=cmd_mood_add)

    mood_list = mood_sub.add_parser("list", help="Browse entries")
    mood_list.add_argument("--limit", type=int, default=50)
    mood_list.add_argument("--mood", default=None, help="Only this mood type")
    mood_list.add_argument("--tag", default=None, help="Only entries with this tag")
    mood_list.add_argument("--days", type=int, default=None, help="Only the last N days")
    mood_list.add_argument("--format", choices=["line", "block"], default="line")
    mood_list.set_defaults(func=cmd_mood_list)

    mood_show = mood_sub.add_parser("show", help="Show one entry")
    mood_show.add_argument("id", help="Entry id (or unique prefix)")
    mood_show.set_defaults(func=cmd_mood_show)

    mood_delete = mood_sub.add_parser("delete", help="Delete one entry")
    mood_delete.add_argument("id", help="Entry id (or unique prefix)")
    mood_delete.set_defaults(func=cmd_mood_delete)

    mood_clear = mood_sub.add_parser("clear", help="Delete ALL entries of this profile (requires --yes)")
    mood_clear.add_argument("--yes", action="store_true", help="Confirm destructive clear")
    mood_clear.set_defaults(func=cmd_mood_clear)

    mood_export = mood_sub.add_parser("export", help="Export entries to CSV")
    mood_export.add_argument("--csv", required=True, help="Output CSV path (e.g. ~/moods.csv)")
    mood_export.add_argument("--window", choices=["7", "30", "all"], default="all",
                             help="Time window for export: 7, 30, or all (default all)")
    mood_export.set_defaults(func=cmd_mood_export)

    mood_backup = mood_sub.add_parser("backup", help="Write a JSON backup of all entries")
    mood_backup.add_argument("--out", default=None,
                             help="File or directory (default ./heartspace_backup_YYYYMMDD.json)")
    mood_backup.set_defaults(func=cmd_mood_backup)

    # ---- stats ----
    tags = sub.add_parser("tags", help="Tag usage")
    tags.add_argument("--cloud", action="store_true", help="Show as a weighted tag cloud")
    tags.add_argument("--limit", type=int, default=30)
    tags.set_defaults(func=cmd_tags)

    trends = sub.add_parser("trends", help="Mood curve + activity over recent days")
    trends.add_argument("--days", type=int, default=30)
    trends.add_argument("--daily", action="store_true", help="Also list each day's average")
    trends.set_defaults(func=cmd_trends)

    # ---- reports ----
    rep = sub.add_parser("reports", help="Weekly/monthly mood reports")
    rep_sub = rep.add_subparsers(dest="reports_cmd", required=True)

    rep_list = rep_sub.add_parser("list", help="List reports")
    rep_list.add_argument("--type", choices=REPORT_TYPES, default=None)
    rep_list.set_defaults(func=cmd_reports_list)

    rep_show = rep_sub.add_parser("show", help="Show one report")
    rep_show.add_argument("id")
    rep_show.set_defaults(func=cmd_reports_show)

    rep_delete = rep_sub.add_parser("delete", help="Delete a report (its period is not regenerated)")
    rep_delete.add_argument("id")
    rep_delete.set_defaults(func=cmd_reports_delete)

    rep_sub.add_parser("generate", help="Generate any due reports now").set_defaults(func=cmd_reports_generate)

    rep_preview = rep_sub.add_parser("preview", help="Build a report for any period without saving it")
    rep_preview.add_argument("--type", choices=REPORT_TYPES, default="weekly")
    rep_preview.add_argument("--on", default=None, help="Any day inside the period (default today)")
    rep_preview.set_defaults(func=cmd_reports_preview)

    rep_restore = rep_sub.add_parser("restore", help="Allow a deleted report's period to be generated again")
    rep_restore.add_argument("period", nargs="?", default=None,
                             help="Dismissed period key as printed by `reports delete`, e.g. weekly:2026-10-12")
    rep_restore.add_argument("--type", choices=REPORT_TYPES, default=None)
    rep_restore.add_argument("--on", default=None, help="Any day inside the period")
    rep_restore.set_defaults(func=cmd_reports_restore)

    rep_sub.add_parser("watch", help="Keep running and generate reports as they come due") \
        .set_defaults(func=cmd_reports_watch)

    # ---- extras ----
    sub.add_parser("lucky", help="Open today's lucky box").set_defaults(func=cmd_lucky)

    cour = sub.add_parser("courier", help="Letters to your future self")
    cour_sub = cour.add_subparsers(dest="courier_cmd", required=True)
    cour_send = cour_sub.add_parser("send", help="Send a package")
    cour_send.add_argument("content")
    cour_send.add_argument("--size", choices=list(courier.PACKAGE_SIZES), default="small",
                           help="small: 15 chars/7 days, medium: 30/15, large: 50/30")
    cour_send.set_defaults(func=cmd_courier_send)
    cour_sub.add_parser("list", help="List packages").set_defaults(func=cmd_courier_list)
    cour_recv = cour_sub.add_parser("receive", help="Sign for an arrived package")
    cour_recv.add_argument("id")
    cour_recv.set_defaults(func=cmd_courier_receive)

    kit_p = sub.add_parser("kit", help="Emotional first-aid kit")
    kit_sub = kit_p.add_subparsers(dest="kit_cmd", required=True)
    kit_list = kit_sub.add_parser("list", help="List exercises")
    kit_list.add_argument("--category", choices=list(kit.CATEGORIES), default=None)
    kit_list.set_defaults(func=cmd_kit_list)
    kit_add = kit_sub.add_parser("add", help="Add your own exercise")
    kit_add.add_argument("--title", required=True)
    kit_add.add_argument("--description", required=True)
    kit_add.add_argument("--duration", type=int, default=3, help="Minutes (default 3)")
    kit_add.set_defaults(func=cmd_kit_add)
    kit_delete = kit_sub.add_parser("delete", help="Remove one of your own exercises")
    kit_delete.add_argument("id")
    kit_delete.set_defaults(func=cmd_kit_delete)

    args = p.parse_args(argv)
    args.data_arg = args.data
    args.data_path = resolve_data_path(args.data, args.profile)

    try:
        args.settings = Settings.from_env()
    except ValueError as e:
        raise SystemExit(f"Config error: {e}") from e

    assert_safe_data_path(args.data_path, args.allow_repo_data_path)
    setup_logger(
        args.settings.log_file or default_log_path(args.data_path),
        args.settings.log_level,
        verbose=args.verbose,
    )

    try:
        args.func(args)
    except KeyError as e:
        raise SystemExit(e.args[0] if e.args else "Not found") from e
    except ValueError as e:
        raise SystemExit(str(e)) from e
