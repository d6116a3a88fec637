from __future__ import annotations

import json
import logging
import os
import time
from pathlib import Path
from typing import Any

from .courier import purge_received

log = logging.getLogger(__name__)

# Top-level sections of a journal file and the empty value each starts with.
SCHEMA: dict[str, Any] = {
    "moods": list,
    "reports": lambda: {"weekly": [], "monthly": []},
    "dismissed_reports": list,
    "lucky": dict,
    "courier": list,
    "kit": list,
}


def _ensure_parent(path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)


def load_json(path: Path) -> dict[str, Any]:
    """
    Safe load:
    - creates parent dirs
    - if missing/empty -> writes {}
    - if corrupt -> backs up raw text then resets to {}
    Always returns a dict.
    """
    path = Path(path)
    _ensure_parent(path)

    if not path.exists():
        save_json(path, {})
        return {}

    txt = path.read_text(encoding="utf-8").strip()
    if not txt:
        save_json(path, {})
        return {}

    try:
        data = json.loads(txt)
    except json.JSONDecodeError as e:
        backup = path.with_suffix(f".corrupt-{int(time.time())}.json")
        backup.write_text(txt, encoding="utf-8")
        log.warning("corrupt journal %s (%s); raw text saved to %s", path, e, backup)
        save_json(path, {})
        return {}

    if not isinstance(data, dict):
        log.warning("journal %s is not a JSON object; ignoring contents", path)
        return {}
    return data


def save_json(path: Path, data: Any) -> None:
    """
    Atomic-ish save:
    - write to temp file in same directory
    - flush + fsync
    - os.replace to target
    - chmod 0600 best-effort
    """
    path = Path(path)
    _ensure_parent(path)

    tmp = path.with_name(path.name + ".tmp")

    payload = json.dumps(
        data,
        indent=2,
        sort_keys=True,
        ensure_ascii=False,
    ) + "\n"

    with open(tmp, "w", encoding="utf-8") as f:
        f.write(payload)
        f.flush()
        os.fsync(f.fileno())

    os.replace(tmp, path)

    try:
        os.chmod(path, 0o600)
    except OSError:
        log.debug("could not chmod %s", path)


def ensure_schema(data: dict[str, Any]) -> dict[str, Any]:
    """Fill in any missing journal sections in place and return ``data``."""
    for key, factory in SCHEMA.items():
        if not isinstance(data.get(key), type(factory())):
            data[key] = factory()
    reports = data["reports"]
    for kind in ("weekly", "monthly"):
        if not isinstance(reports.get(kind), list):
            reports[kind] = []
    return data


class JournalStore:
    def __init__(self, data_path: Path):
        self.data_path = Path(data_path)

    def load(self) -> dict[str, Any]:
        """Read the journal, destroying courier packages whose keep window has passed."""
        data = ensure_schema(load_json(self.data_path))
        if purge_received(data):
            self.save(data)
        return data

    def save(self, data: dict[str, Any]) -> None:
        save_json(self.data_path, data)
