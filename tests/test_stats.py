"""Tests for tag and mood statistics."""

from __future__ import annotations

from datetime import date, timedelta

import pytest

from conftest import entry, local
from heartspace.stats import (
    activity_counts,
    all_tags,
    average_score,
    daily_series,
    linear_regression_slope,
    mood_counts,
    profile_stats,
    sparkline,
    tag_cloud,
    tag_counts,
    trend_label,
)

NOW = local(2026, 10, 18, 15)


def _moods():
    return [
        entry("happy", NOW - timedelta(days=2), tags=["work", "sun"], id="a"),
        entry("sad", NOW - timedelta(days=2, hours=3), tags=["work"], activity="meeting", id="b"),
        entry("calm", NOW, tags=["Work", "rain"], id="c"),
        entry("happy", NOW - timedelta(hours=1), id="d"),
    ]


# ---- tags ----


def test_tag_counts_are_exact_strings():
    assert tag_counts(_moods()) == {"work": 2, "sun": 1, "Work": 1, "rain": 1}


def test_all_tags_ordered_by_count_then_name():
    assert all_tags(_moods()) == ["work", "rain", "sun", "Work"]


def test_tag_cloud_sizes_and_tiers():
    moods = (
        [entry("calm", NOW, tags=["a"], id=f"a{i}") for i in range(10)]
        + [entry("calm", NOW, tags=["b"], id=f"b{i}") for i in range(5)]
        + [entry("calm", NOW, tags=["c"], id="c0")]
    )
    cloud = {t["tag"]: t for t in tag_cloud(moods)}
    assert cloud["a"]["size"] == 24 and cloud["a"]["tier"] == "hot"
    assert cloud["b"]["size"] == 18 and cloud["b"]["tier"] == "warm"
    assert cloud["c"]["tier"] == "cool"
    assert cloud["c"]["size"] == 13.2


def test_tag_cloud_empty():
    assert tag_cloud([]) == []


# ---- counts / averages ----


def test_mood_counts_zero_filled():
    assert mood_counts(_moods()) == {"happy": 2, "calm": 1, "neutral": 0, "tired": 0, "sad": 1, "annoyed": 0}


def test_activity_counts():
    assert activity_counts(_moods()) == {"reading": 3, "meeting": 1}


def test_average_score_rounded():
    assert average_score(_moods()) == 3.8  # (5 + 1 + 4 + 5) / 4 = 3.75
    assert average_score([]) == 0.0


def test_profile_stats():
    assert profile_stats(_moods()) == {"total_days": 2, "happy_count": 2, "total": 4}


# ---- daily series ----


def test_daily_series_shape_and_gaps():
    series = daily_series(_moods(), days=30, today=NOW.date())
    assert len(series) == 30
    assert series[0]["date"] == (NOW.date() - timedelta(days=29)).isoformat()
    assert series[-1]["date"] == NOW.date().isoformat()
    assert series[-1] == {"date": "2026-10-18", "score": 4.5, "count": 2}
    assert series[-3] == {"date": "2026-10-16", "score": 3.0, "count": 2}
    assert series[-2]["score"] is None and series[-2]["count"] == 0


def test_daily_series_ignores_entries_outside_window():
    old = entry("sad", NOW - timedelta(days=40))
    assert all(p["count"] == 0 for p in daily_series([old], days=30, today=date(2026, 10, 18)))


# ---- trend + sparkline ----


def test_slope_and_label():
    assert linear_regression_slope([0, 1, 2], [1.0, 2.0, 3.0]) == 1.0
    assert linear_regression_slope([0], [3.0]) == 0.0
    assert trend_label(0.5).endswith("rising")
    assert trend_label(-0.5).endswith("falling")
    assert trend_label(0.01).endswith("steady")


def test_sparkline_bounds_and_gaps():
    assert sparkline([]) == ""
    assert sparkline([1.0, None, 5.0]) == "▁ █"
    assert len(sparkline([1.0, 2.0, 3.0])) == 3


def test_daily_series_rejects_empty_window():
    with pytest.raises(ValueError, match="at least 1"):
        daily_series([], days=0)
    with pytest.raises(ValueError):
        daily_series([], days=-2)
