from __future__ import annotations

import random
from datetime import date
from typing import Any

LUCKY_NOTES = [
    "Life can feel stale, but start running and there is wind.",
    "Keep what you love close and go meet the mountains and the sea.",
    "You passed yesterday's test; today's prize is a whole good day.",
    "Don't panic, the moon is lost somewhere over the ocean too.",
    "Let things happen; life has its own arrangements.",
    "Understand the world slowly, update yourself slowly.",
    "Look at the far-off view, and at the road under your feet.",
    "Good luck is on its way. Keep expecting it.",
    "Today you are a little better than yesterday.",
    "Remember to add some sugar to your days.",
    "Everything has a crack; that's how the light gets in.",
    "On this planet you matter. Lend me some of your light.",
    "May your eyes hold light and your heart hold love.",
    "Rather than being someone's world, be your own universe.",
    "Every day without a dance is a day wasted.",
    "Half an ounce of gentleness, a lifetime of calm.",
    "Everything lost comes back in another form.",
    "You walked in against the light; you deserve every good thing.",
    "Love outlasts the long years.",
    "With warmth inside, why fear a cold road?",
]


def draw(data: dict[str, Any], today: date, rng: random.Random | None = None) -> tuple[str, bool]:
    """Return today's note and whether it was freshly drawn.

    One draw per calendar day; later calls on the same day return the stored note.
    """
    lucky = data.setdefault("lucky", {})
    if lucky.get("date") == today.isoformat() and lucky.get("note"):
        return str(lucky["note"]), False

    note = (rng or random).choice(LUCKY_NOTES)
    lucky["date"] = today.isoformat()
    lucky["note"] = note
    return note, True
