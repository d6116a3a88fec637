"""Time courier: short letters to your future self, delivered after a delay.

Packages are stored under ``data["courier"]``. A package is ``shipping`` until
its delivery date, then ``arrived`` until signed for, then ``received``.
Received packages are destroyed three days after receipt.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any

from ._util import _dt_from_entry_ts, _new_id, _now_local

log = logging.getLogger(__name__)

KEEP_AFTER_RECEIPT = timedelta(days=3)


@dataclass(frozen=True)
class PackageSize:
    label: str
    limit: int
    days: int


PACKAGE_SIZES: dict[str, PackageSize] = {
    "small": PackageSize("Small parcel", 15, 7),
    "medium": PackageSize("Medium parcel", 30, 15),
    "large": PackageSize("Large parcel", 50, 30),
}


def _ts(value: Any) -> datetime | None:
    return _dt_from_entry_ts(str(value)) if value else None


def arrival_time(pkg: dict[str, Any]) -> datetime:
    return _ts(pkg["created_at"]) + timedelta(days=int(pkg["delivery_days"]))


def send(data: dict[str, Any], content: str, size: str = "small", now: datetime | None = None) -> dict[str, Any]:
    if size not in PACKAGE_SIZES:
        raise ValueError(f"Unknown package size {size!r}; choose {', '.join(PACKAGE_SIZES)}")
    text = (content or "").strip()
    if not text:
        raise ValueError("A package needs some content")
    parcel = PACKAGE_SIZES[size]
    if len(text) > parcel.limit:
        raise ValueError(f"{parcel.label} holds at most {parcel.limit} characters (got {len(text)})")

    now = now or _now_local()
    pkg = {
        "id": _new_id(),
        "content": text,
        "size": size,
        "delivery_days": parcel.days,
        "created_at": now.isoformat(timespec="seconds"),
    }
    data.setdefault("courier", []).append(pkg)
    log.info("courier package %s sent (%s, %d days)", pkg["id"], size, parcel.days)
    return pkg


def status(pkg: dict[str, Any], now: datetime | None = None) -> str:
    if pkg.get("received_at"):
        return "received"
    now = now or _now_local()
    return "arrived" if now >= arrival_time(pkg) else "shipping"


def days_remaining(pkg: dict[str, Any], now: datetime | None = None) -> int:
    now = now or _now_local()
    return math.ceil((arrival_time(pkg) - now) / timedelta(days=1))


def days_until_destroyed(pkg: dict[str, Any], now: datetime | None = None) -> int:
    received = _ts(pkg.get("received_at"))
    if not received:
        return 0
    now = now or _now_local()
    return math.ceil((received + KEEP_AFTER_RECEIPT - now) / timedelta(days=1))


def purge_received(data: dict[str, Any], now: datetime | None = None) -> int:
    now = now or _now_local()
    packages = data.setdefault("courier", [])
    kept = []
    for pkg in packages:
        received = _ts(pkg.get("received_at"))
        if received and now - received >= KEEP_AFTER_RECEIPT:
            continue
        kept.append(pkg)
    removed = len(packages) - len(kept)
    if removed:
        data["courier"] = kept
        log.info("destroyed %d received courier package(s)", removed)
    return removed


def find_package(data: dict[str, Any], ref: str) -> dict[str, Any]:
    matches = [p for p in data.get("courier", []) if ref and str(p.get("id", "")).startswith(ref)]
    exact = [p for p in matches if p.get("id") == ref]
    if exact:
        return exact[0]
    if not matches:
        raise KeyError(f"No courier package with id {ref!r}")
    if len(matches) > 1:
        raise ValueError(f"Package id {ref!r} is ambiguous ({len(matches)} matches)")
    return matches[0]


def receive(data: dict[str, Any], ref: str, now: datetime | None = None) -> dict[str, Any]:
    now = now or _now_local()
    pkg = find_package(data, ref)
    state = status(pkg, now)
    if state == "shipping":
        raise ValueError(f"Package {pkg['id']} is still on its way ({days_remaining(pkg, now)} day(s) left)")
    if state == "arrived":
        pkg["received_at"] = now.isoformat(timespec="seconds")
        log.info("courier package %s received", pkg["id"])
    return pkg
