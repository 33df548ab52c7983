from __future__ import annotations

import re

from heroledger.models.abilities import calculate_modifier

__all__ = ["calculate_modifier", "calculate_proficiency_bonus", "parse_armor_ac", "armor_category"]

_LEADING_INT = re.compile(r"^\s*\+?(\d+)")


def calculate_proficiency_bonus(level: int) -> int:
    # 5e scaling: 1–4:+2, 5–8:+3, 9–12:+4, 13–16:+5, 17–20:+6
    if level <= 0:
        return 2
    return 2 + (level - 1) // 4


def parse_armor_ac(ac: str | int | None) -> int:
    """Base AC from an item's AC text: "14 + Dex (max 2)" -> 14, "+2" -> 2. Defaults to 10."""
    if isinstance(ac, int):
        return ac
    m = _LEADING_INT.match(ac or "")
    return int(m.group(1)) if m else 10


def armor_category(subcategory: str | None) -> str | None:
    key = (subcategory or "").lower()
    for cat in ("light", "medium", "heavy"):
        if cat in key:
            return cat
    return None
