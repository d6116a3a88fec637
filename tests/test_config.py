from __future__ import annotations

from pathlib import Path

import pytest

from heartspace.config import Settings


def test_defaults():
    s = Settings.from_env()
    assert (s.retention_days, s.report_hour, s.check_interval_minutes) == (180, 12, 60)
    assert s.log_level == "INFO"
    assert s.log_file is None


def test_reads_environment(monkeypatch, tmp_path):
    monkeypatch.setenv("HEARTSPACE_RETENTION_DAYS", "30")
    monkeypatch.setenv("HEARTSPACE_REPORT_HOUR", "20")
    monkeypatch.setenv("HEARTSPACE_CHECK_INTERVAL_MINUTES", "5")
    monkeypatch.setenv("HEARTSPACE_LOG_LEVEL", "debug")
    monkeypatch.setenv("HEARTSPACE_LOG_FILE", str(tmp_path / "hs.log"))

    s = Settings.from_env()
    assert (s.retention_days, s.report_hour, s.check_interval_minutes) == (30, 20, 5)
    assert s.log_level == "DEBUG"
    assert s.log_file == Path(tmp_path / "hs.log")


def test_blank_values_fall_back_to_defaults(monkeypatch):
    monkeypatch.setenv("HEARTSPACE_REPORT_HOUR", "  ")
    assert Settings.from_env().report_hour == 12


def test_non_integer_rejected(monkeypatch):
    monkeypatch.setenv("HEARTSPACE_RETENTION_DAYS", "half a year")
    with pytest.raises(ValueError, match="HEARTSPACE_RETENTION_DAYS must be an integer"):
        Settings.from_env()


def test_validation_collects_every_problem():
    with pytest.raises(ValueError) as exc:
        Settings(retention_days=0, report_hour=24, check_interval_minutes=0, log_level="LOUD").validate()
    msg = str(exc.value)
    assert "HEARTSPACE_RETENTION_DAYS" in msg
    assert "HEARTSPACE_REPORT_HOUR" in msg
    assert "HEARTSPACE_CHECK_INTERVAL_MINUTES" in msg
    assert "HEARTSPACE_LOG_LEVEL" in msg
