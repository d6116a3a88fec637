"""
Runtime settings for heartspace, read from environment variables.

    HEARTSPACE_RETENTION_DAYS          days of entries kept on each add (180)
    HEARTSPACE_REPORT_HOUR             local hour a period's report is due (12)
    HEARTSPACE_CHECK_INTERVAL_MINUTES  report scheduler tick (60)
    HEARTSPACE_LOG_LEVEL               DEBUG/INFO/WARNING/ERROR/CRITICAL (INFO)
    HEARTSPACE_LOG_FILE                log path (defaults next to the data file)
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass
class Settings:
    retention_days: int = 180
    report_hour: int = 12
    check_interval_minutes: int = 60
    log_level: str = "INFO"
    log_file: Path | None = None

    @classmethod
    def from_env(cls) -> "Settings":
        log_file = os.getenv("HEARTSPACE_LOG_FILE")
        settings = cls(
            retention_days=_get_int("HEARTSPACE_RETENTION_DAYS", 180),
            report_hour=_get_int("HEARTSPACE_REPORT_HOUR", 12),
            check_interval_minutes=_get_int("HEARTSPACE_CHECK_INTERVAL_MINUTES", 60),
            log_level=os.getenv("HEARTSPACE_LOG_LEVEL", "INFO").strip().upper(),
            log_file=Path(log_file).expanduser() if log_file else None,
        )
        settings.validate()
        return settings

    def validate(self) -> None:
        errors = []
        if self.retention_days < 1:
            errors.append("HEARTSPACE_RETENTION_DAYS must be at least 1")
        if not 0 <= self.report_hour <= 23:
            errors.append("HEARTSPACE_REPORT_HOUR must be between 0 and 23")
        if self.check_interval_minutes < 1:
            errors.append("HEARTSPACE_CHECK_INTERVAL_MINUTES must be at least 1")
        if self.log_level not in LOG_LEVELS:
            errors.append(f"HEARTSPACE_LOG_LEVEL must be one of {', '.join(LOG_LEVELS)}")
        if errors:
            raise ValueError("; ".join(errors))


def _get_int(key: str, default: int) -> int:
    raw = os.getenv(key)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{key} must be an integer (got {raw!r})") from None
