from __future__ import annotations

import logging
from datetime import datetime

import pytest


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for key in (
        "HEARTSPACE_DATA",
        "HEARTSPACE_RETENTION_DAYS",
        "HEARTSPACE_REPORT_HOUR",
        "HEARTSPACE_CHECK_INTERVAL_MINUTES",
        "HEARTSPACE_LOG_LEVEL",
        "HEARTSPACE_LOG_FILE",
    ):
        monkeypatch.delenv(key, raising=False)
    yield
    logger = logging.getLogger("heartspace")
    for h in list(logger.handlers):
        logger.removeHandler(h)
        h.close()
    logger.propagate = True
    logger.setLevel(logging.NOTSET)


def local(y: int, mo: int, d: int, h: int = 12, mi: int = 0) -> datetime:
    return datetime(y, mo, d, h, mi).astimezone()


def entry(mood: str, when: datetime, activity: str = "reading", location: str = "home", **extra) -> dict:
    e = {
        "id": extra.pop("id", f"{mood}-{when:%m%d%H%M}"),
        "ts": when.isoformat(timespec="seconds"),
        "mood": mood,
        "location": location,
        "activity": activity,
    }
    e.update(extra)
    return e
