from __future__ import annotations

import logging
from datetime import datetime
from pathlib import Path
from typing import Any

from apscheduler.schedulers.blocking import BlockingScheduler

from ._util import _now_local
from .config import Settings
from .reports import generate_due_reports
from .storage import JournalStore

log = logging.getLogger(__name__)

JOB_ID = "heartspace-report-check"


def run_report_check(
    data_path: Path, settings: Settings, now: datetime | None = None
) -> list[dict[str, Any]]:
    """One catch-up pass over the journal; only writes when something was generated."""
    store = JournalStore(data_path)
    data = store.load()
    created = generate_due_reports(data, now or _now_local(), settings.report_hour)
    if created:
        store.save(data)
        log.info("report check: %d new report(s) in %s", len(created), data_path)
    else:
        log.debug("report check: nothing due in %s", data_path)
    return created


def _tick(data_path: Path, settings: Settings) -> None:
    for report in run_report_check(data_path, settings):
        print(f"📊 New {report['type']} report: {report['start']} → {report['end']} "
              f"(avg {report['avg_score']}/5)")


def build_scheduler(data_path: Path, settings: Settings) -> BlockingScheduler:
    scheduler = BlockingScheduler()
    scheduler.add_job(
        _tick,
        "interval",
        minutes=settings.check_interval_minutes,
        args=[data_path, settings],
        id=JOB_ID,
        next_run_time=datetime.now().astimezone(),
        coalesce=True,
        max_instances=1,
    )
    return scheduler


def watch(data_path: Path, settings: Settings) -> None:
    scheduler = build_scheduler(data_path, settings)
    log.info("report scheduler started (every %d min) for %s",
             settings.check_interval_minutes, data_path)
    try:
        scheduler.start()
    except (KeyboardInterrupt, SystemExit):
        scheduler.shutdown(wait=False)
        log.info("report scheduler stopped")
