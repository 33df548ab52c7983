"""Per-class, per-level use counts for features that don't follow a simple formula."""

from __future__ import annotations

from typing import Dict, Optional, Tuple

from heroledger.models.character import RestType

# (class level, uses) thresholds; the highest threshold reached wins, below the first is 0
FEATURE_SCALING: Dict[str, Dict[str, Tuple[Tuple[int, int], ...]]] = {
    "Barbarian": {
        "Rage": ((1, 2), (3, 3), (6, 4), (12, 5), (17, 6), (20, 999)),
    },
    "Fighter": {
        "Action Surge": ((2, 1), (17, 2)),
        "Second Wind": ((1, 1),),
        "Indomitable": ((9, 1), (13, 2), (17, 3)),
    },
    "Bard": {
        "Bardic Inspiration": ((2, 3), (9, 4), (13, 5), (17, 6)),
    },
    "Druid": {
        "Wild Shape": ((2, 2),),
    },
    "Cleric": {
        "Channel Divinity": ((2, 1), (6, 2), (18, 3)),
    },
    "Paladin": {
        "Channel Divinity": ((3, 1),),
    },
    "Wizard": {
        "Arcane Recovery": ((1, 1),),
    },
}

# uses equal to class level times a factor, starting at a minimum level
PER_LEVEL_SCALING: Dict[str, Dict[str, Tuple[int, int]]] = {
    "Monk": {"Ki": (2, 1), "Focus Points": (2, 1)},
    "Sorcerer": {"Sorcery Points": (2, 1)},
    # a healing pool rather than uses
    "Paladin": {"Lay on Hands": (1, 5)},
}


def has_scaling(class_name: str, feature_name: str) -> bool:
    cls = class_name.title()
    return feature_name in FEATURE_SCALING.get(cls, {}) or feature_name in PER_LEVEL_SCALING.get(cls, {})


def scaled_uses(class_name: str, feature_name: str, level: int) -> int:
    """Uses of ``feature_name`` at ``level`` in ``class_name``; 0 when not in the table."""
    cls = class_name.title()
    per_level = PER_LEVEL_SCALING.get(cls, {}).get(feature_name)
    if per_level is not None:
        start, factor = per_level
        return level * factor if level >= start else 0
    uses = 0
    for threshold, count in FEATURE_SCALING.get(cls, {}).get(feature_name, ()):
        if level >= threshold:
            uses = count
    return uses


def rest_type_for(class_name: str, feature_name: str, level: int) -> Optional[RestType]:
    """Rest type overrides for features that change recharge with level; None defers to the definition."""
    if class_name.title() == "Bard" and feature_name == "Bardic Inspiration":
        return RestType.SHORT if level >= 5 else RestType.LONG
    return None
