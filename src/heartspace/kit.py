from __future__ import annotations

import logging
from typing import Any

from ._util import _new_id

log = logging.getLogger(__name__)

CATEGORIES = {
    "breathing": "Breathing",
    "movement": "Body release",
    "mindfulness": "Mindfulness",
    "self-care": "Self-care",
    "custom": "Custom",
}

DEFAULT_KIT_ITEMS: list[dict[str, Any]] = [
    {"id": "breathing-1", "title": "4-7-8 breathing", "category": "breathing", "duration": 2,
     "description": "Inhale for 4s, hold for 7s, exhale for 8s; repeat 3-4 times"},
    {"id": "breathing-2", "title": "Box breathing", "category": "breathing", "duration": 3,
     "description": "Inhale 4s, hold 4s, exhale 4s, hold 4s"},
    {"id": "movement-1", "title": "Neck and shoulder release", "category": "movement", "duration": 5,
     "description": "Roll your neck slowly and shrug to let the tension go"},
    {"id": "movement-2", "title": "Finger exercises", "category": "movement", "duration": 3,
     "description": "Make fists, open wide, interlace fingers to wake up your hands"},
    {"id": "mindfulness-1", "title": "Five senses check-in", "category": "mindfulness", "duration": 4,
     "description": "Notice 5 things you see, 4 sounds you hear, 3 things you can touch"},
    {"id": "mindfulness-2", "title": "Gratitude list", "category": "mindfulness", "duration": 5,
     "description": "Write down 3 small things from today you are grateful for"},
    {"id": "self-care-1", "title": "Warm water face wash", "category": "self-care", "duration": 3,
     "description": "Wash your face gently with warm water and feel the calm it brings"},
    {"id": "self-care-2", "title": "Imagined aroma", "category": "self-care", "duration": 4,
     "description": "Breathe deeply and imagine a favourite scent filling the room"},
]


def list_items(data: dict[str, Any], category: str | None = None) -> list[dict[str, Any]]:
    if category and category not in CATEGORIES:
        raise ValueError(f"Unknown category {category!r}; choose {', '.join(CATEGORIES)}")
    items = DEFAULT_KIT_ITEMS + [dict(i, custom=True) for i in data.get("kit", [])]
    if category:
        items = [i for i in items if i["category"] == category]
    return items


def add_item(data: dict[str, Any], title: str, description: str, duration: int = 3) -> dict[str, Any]:
    title = (title or "").strip()
    description = (description or "").strip()
    if not title or not description:
        raise ValueError("A kit item needs both a title and a description")
    if duration < 1:
        raise ValueError("Duration must be at least 1 minute")

    item = {
        "id": f"custom-{_new_id()}",
        "title": title,
        "description": description,
        "category": "custom",
        "duration": int(duration),
    }
    data.setdefault("kit", []).append(item)
    log.info("added kit item %s", item["id"])
    return item


def delete_item(data: dict[str, Any], item_id: str) -> dict[str, Any]:
    if any(i["id"] == item_id for i in DEFAULT_KIT_ITEMS):
        raise ValueError(f"{item_id!r} is a built-in item and can't be deleted")
    custom = data.get("kit", [])
    for item in custom:
        if item.get("id") == item_id:
            data["kit"] = [i for i in custom if i is not item]
            log.info("deleted kit item %s", item_id)
            return item
    raise KeyError(f"No custom kit item with id {item_id!r}")
