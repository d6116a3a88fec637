"""Tests for the lucky note, time courier and emergency kit."""

from __future__ import annotations

import random
from datetime import date, timedelta

import pytest

from conftest import local
from heartspace import courier, kit, lucky

NOW = local(2026, 10, 18, 15)


# ---- lucky ----


def test_lucky_draw_once_per_day():
    data = {}
    note, fresh = lucky.draw(data, date(2026, 10, 18), rng=random.Random(1))
    assert fresh
    assert note in lucky.LUCKY_NOTES

    again, fresh = lucky.draw(data, date(2026, 10, 18), rng=random.Random(99))
    assert (again, fresh) == (note, False)

    _, fresh = lucky.draw(data, date(2026, 10, 19), rng=random.Random(1))
    assert fresh
    assert data["lucky"]["date"] == "2026-10-19"


# ---- courier ----


def test_send_checks_size_limits():
    data = {}
    pkg = courier.send(data, "  hello future  ", "small", now=NOW)
    assert pkg["content"] == "hello future"
    assert pkg["delivery_days"] == 7
    assert data["courier"] == [pkg]

    with pytest.raises(ValueError, match="at most 15"):
        courier.send(data, "x" * 16, "small", now=NOW)
    with pytest.raises(ValueError, match="Unknown package size"):
        courier.send(data, "hi", "huge", now=NOW)
    with pytest.raises(ValueError):
        courier.send(data, "   ", "large", now=NOW)


def test_package_lifecycle():
    data = {}
    pkg = courier.send(data, "see you soon", "medium", now=NOW)

    assert courier.status(pkg, NOW) == "shipping"
    assert courier.days_remaining(pkg, NOW) == 15
    assert courier.days_remaining(pkg, NOW + timedelta(days=14, hours=1)) == 1
    with pytest.raises(ValueError, match="still on its way"):
        courier.receive(data, pkg["id"], now=NOW)

    arrived = NOW + timedelta(days=15)
    assert courier.status(pkg, arrived) == "arrived"
    courier.receive(data, pkg["id"][:6], now=arrived)
    assert courier.status(pkg, arrived) == "received"
    assert courier.days_until_destroyed(pkg, arrived + timedelta(days=1)) == 2

    assert courier.purge_received(data, arrived + timedelta(days=2)) == 0
    assert courier.purge_received(data, arrived + timedelta(days=3)) == 1
    assert data["courier"] == []


def test_find_package_missing():
    with pytest.raises(KeyError):
        courier.find_package({"courier": []}, "abc")


# ---- kit ----


def test_kit_lists_builtins_and_filters():
    items = kit.list_items({})
    assert len(items) == len(kit.DEFAULT_KIT_ITEMS) == 8
    assert {i["category"] for i in kit.list_items({}, "breathing")} == {"breathing"}
    with pytest.raises(ValueError):
        kit.list_items({}, "dancing")


def test_kit_custom_items():
    data = {}
    item = kit.add_item(data, "Stretch", "Reach for the ceiling", duration=2)
    assert item["id"].startswith("custom-")
    assert item["category"] == "custom"

    custom = kit.list_items(data, "custom")
    assert [i["title"] for i in custom] == ["Stretch"]
    assert custom[0]["custom"] is True

    assert kit.delete_item(data, item["id"]) is item
    assert data["kit"] == []
    with pytest.raises(KeyError):
        kit.delete_item(data, item["id"])


def test_kit_rejects_bad_input():
    with pytest.raises(ValueError, match="built-in"):
        kit.delete_item({}, "breathing-1")
    with pytest.raises(ValueError):
        kit.add_item({}, "", "desc")
    with pytest.raises(ValueError):
        kit.add_item({}, "t", "d", duration=0)
