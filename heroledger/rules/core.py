from __future__ import annotations

from typing import Dict, Tuple

from heroledger.models.abilities import Ability

A = Ability

HIT_DIE = {
    "Barbarian": 12,
    "Fighter": 10,
    "Paladin": 10,
    "Ranger": 10,
    "Bard": 8,
    "Cleric": 8,
    "Druid": 8,
    "Monk": 8,
    "Rogue": 8,
    "Warlock": 8,
    "Sorcerer": 6,
    "Wizard": 6,
}

# (abilities, needs_all). Fighter takes either score; the two-ability classes need both.
MULTICLASS_PREREQUISITES: Dict[str, Tuple[Tuple[Ability, ...], bool]] = {
    "Barbarian": ((A.STRENGTH,), True),
    "Bard": ((A.CHARISMA,), True),
    "Cleric": ((A.WISDOM,), True),
    "Druid": ((A.WISDOM,), True),
    "Fighter": ((A.STRENGTH, A.DEXTERITY), False),
    "Monk": ((A.DEXTERITY, A.WISDOM), True),
    "Paladin": ((A.STRENGTH, A.CHARISMA), True),
    "Ranger": ((A.DEXTERITY, A.WISDOM), True),
    "Rogue": ((A.DEXTERITY,), True),
    "Sorcerer": ((A.CHARISMA,), True),
    "Warlock": ((A.CHARISMA,), True),
    "Wizard": ((A.INTELLIGENCE,), True),
}
MULTICLASS_MINIMUM = 13

_MARTIAL = ("Light Armor", "Medium Armor", "Shields", "Simple Weapons", "Martial Weapons")
_SKILLED = (
    "Light Armor",
    "Simple Weapons",
    "Hand Crossbows",
    "Longswords",
    "Rapiers",
    "Shortswords",
)

MULTICLASS_PROFICIENCIES: Dict[str, Tuple[str, ...]] = {
    "Barbarian": _MARTIAL,
    "Bard": _SKILLED,
    "Cleric": ("Light Armor", "Medium Armor", "Shields"),
    "Druid": ("Light Armor", "Medium Armor", "Shields"),
    "Fighter": ("Light Armor", "Medium Armor", "Heavy Armor", "Shields", "Simple Weapons", "Martial Weapons"),
    "Monk": ("Simple Weapons", "Shortswords"),
    "Paladin": ("Light Armor", "Medium Armor", "Heavy Armor", "Shields", "Simple Weapons", "Martial Weapons"),
    "Ranger": _MARTIAL,
    "Rogue": _SKILLED,
    "Sorcerer": (),
    "Warlock": ("Light Armor", "Simple Weapons"),
    "Wizard": (),
}

SUBCLASS_LEVEL = {
    "Cleric": 1,
    "Sorcerer": 1,
    "Warlock": 1,
    "Druid": 2,
    "Wizard": 2,
    "Barbarian": 3,
    "Bard": 3,
    "Fighter": 3,
    "Monk": 3,
    "Paladin": 3,
    "Ranger": 3,
    "Rogue": 3,
}

# level_progression entries that only announce the subclass pick
SUBCLASS_CHOICE_FEATURES = frozenset(
    {
        "Divine Domain",
        "Sorcerous Origin",
        "Otherworldly Patron",
        "Monastic Tradition",
        "Martial Archetype",
        "Primal Path",
        "Bard College",
        "Druid Circle",
        "Arcane Tradition",
        "Sacred Oath",
        "Ranger Archetype",
        "Roguish Archetype",
        "Subclass",
    }
)

# features whose level_progression entry rescales an existing feature
IMPROVEMENT_FEATURES = {
    "Ki Improvement": "Ki",
    "Focus Point Improvement": "Focus Points",
}

ASI_LEVELS = (4, 8, 12, 16)
EXTRA_ASI_LEVELS = {"Fighter": (6, 14), "Rogue": (10,)}

XP_THRESHOLDS = {
    1: 0,
    2: 300,
    3: 900,
    4: 2700,
    5: 6500,
    6: 14000,
    7: 23000,
    8: 34000,
    9: 48000,
    10: 64000,
    11: 85000,
    12: 100000,
    13: 120000,
    14: 140000,
    15: 165000,
    16: 195000,
    17: 225000,
    18: 265000,
    19: 305000,
    20: 355000,
}
MAX_LEVEL = 20
MAX_ABILITY_SCORE = 20

# Monk level -> unarmored movement bonus (feet); highest threshold reached wins
MONK_MOVEMENT = ((18, 30), (14, 25), (10, 20), (6, 15), (2, 10))

# Conditional AC sources evaluated on every recompute
DUAL_WIELDER_FEAT = "Dual Wielder"
DUAL_WIELDER_AC = 1
UNARMORED_DEFENSE = "Unarmored Defense"
UNARMORED_MOVEMENT = "Unarmored Movement"
SHIELD_AC = 2
# ledger target for AC that only applies while armored
ARMORED_AC = "armored_ac"
# ledger marker for HP that grows with every character level; the value is the rate
HP_PER_LEVEL = "max_hp_per_level"
# ledger target for granted gold, recorded in copper pieces
GOLD_CP = "gold_cp"

PASSIVE_SKILLS = ("Perception", "Investigation", "Insight")
