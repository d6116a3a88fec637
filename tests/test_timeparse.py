"""Tests for timeparse.parse_ts and timeparse.parse_day."""

from __future__ import annotations

import re
from datetime import date, datetime, timedelta

import pytest

from heartspace.timeparse import parse_day, parse_ts


def _is_iso(s: str) -> bool:
    return bool(re.match(r"\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}[+-]\d{2}:\d{2}", s))


def _parse(s, now=None) -> datetime:
    return datetime.fromisoformat(parse_ts(s, now))


# Sunday afternoon
NOW = datetime(2026, 10, 18, 15, 30).astimezone()


# ---- None / blank / now ----


def test_none_returns_now():
    before = datetime.now().astimezone().replace(microsecond=0)
    result = _parse(None)
    after = datetime.now().astimezone().replace(microsecond=0)
    assert before <= result <= after


def test_blank_and_now_keyword_use_given_now():
    assert _parse("  ", NOW) == NOW.replace(microsecond=0)
    assert _parse("now", NOW) == NOW.replace(microsecond=0)


# ---- ISO 8601 ----


def test_iso_with_timezone():
    assert parse_ts("2026-02-25T07:34:00-05:00").startswith("2026-02-25T07:34:00")


def test_iso_naive_assumed_local():
    result = _parse("2026-02-25T07:34:00")
    assert (result.year, result.month, result.day, result.hour, result.minute) == (2026, 2, 25, 7, 34)
    assert result.tzinfo is not None


# ---- Relative ----


def test_relative_days_ago():
    assert _parse("3 days ago", NOW) == (NOW - timedelta(days=3)).replace(microsecond=0)


def test_relative_hours_and_minutes_ago():
    assert _parse("2 hours ago", NOW) == (NOW - timedelta(hours=2)).replace(microsecond=0)
    assert _parse("15 minutes ago", NOW) == (NOW - timedelta(minutes=15)).replace(microsecond=0)


# ---- Day words ----


def test_today_with_time():
    result = _parse("today 9am", NOW)
    assert result.date() == NOW.date()
    assert (result.hour, result.minute) == (9, 0)


def test_yesterday_with_time():
    result = _parse("yesterday 9:15pm", NOW)
    assert result.date() == date(2026, 10, 17)
    assert (result.hour, result.minute) == (21, 15)


def test_weekday_means_most_recent():
    assert _parse("monday 8am", NOW).date() == date(2026, 10, 12)
    assert _parse("saturday 8am", NOW).date() == date(2026, 10, 17)


def test_weekday_today_is_today():
    assert _parse("sunday 10:00", NOW).date() == NOW.date()


# ---- Time-only / date + time ----


def test_time_only_24h():
    result = _parse("14:30", NOW)
    assert result.date() == NOW.date()
    assert (result.hour, result.minute) == (14, 30)


def test_date_plus_time_ampm():
    result = _parse("2026-02-25 7:34am")
    assert (result.month, result.day, result.hour, result.minute) == (2, 25, 7, 34)


def test_returns_iso_string_with_tz():
    assert _is_iso(parse_ts("7am", NOW))


def test_invalid_raises_value_error():
    with pytest.raises(ValueError):
        parse_ts("not a time at all blah blah")


def test_tomorrow_is_not_accepted():
    with pytest.raises(ValueError):
        parse_ts("tomorrow 7pm", NOW)


# ---- parse_day ----


def test_parse_day_variants():
    assert parse_day(None, NOW) == NOW.date()
    assert parse_day("yesterday", NOW) == date(2026, 10, 17)
    assert parse_day("wednesday", NOW) == date(2026, 10, 14)
    assert parse_day("2026-09-30", NOW) == date(2026, 9, 30)
    assert parse_day("3 days ago", NOW) == date(2026, 10, 15)


def test_parse_day_invalid():
    with pytest.raises(ValueError):
        parse_day("someday", NOW)
