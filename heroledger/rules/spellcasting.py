from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterable, Optional, Tuple

from heroledger.models.abilities import Ability
from heroledger.models.character import ClassLevel, PactMagic, SpellSlots


class CasterType(str, Enum):
    NONE = "none"
    FULL = "full"
    HALF = "half"
    THIRD = "third"
    PACT = "pact"


class SpellMethod(str, Enum):
    KNOWN = "known"
    PREPARED = "prepared"
    SPELLBOOK = "spellbook"


@dataclass(frozen=True)
class CasterInfo:
    caster_type: CasterType
    method: SpellMethod
    ability: Ability
    ritual_casting: bool = False
    preparation_formula: str = ""
    # (class level, cantrips known) thresholds, highest reached wins
    cantrips: Tuple[Tuple[int, int], ...] = ()
    # spells known at class level 1..20 (known casters only)
    spells_known: Tuple[int, ...] = field(default=())


CASTER_INFO: Dict[str, CasterInfo] = {
    "Bard": CasterInfo(
        CasterType.FULL,
        SpellMethod.KNOWN,
        Ability.CHARISMA,
        ritual_casting=True,
        cantrips=((1, 2), (4, 3), (10, 4)),
        spells_known=(4, 5, 6, 7, 8, 9, 10, 11, 12, 14, 15, 15, 16, 18, 19, 19, 20, 22, 22, 22),
    ),
    "Cleric": CasterInfo(
        CasterType.FULL,
        SpellMethod.PREPARED,
        Ability.WISDOM,
        ritual_casting=True,
        preparation_formula="wisdom+level",
        cantrips=((1, 3), (4, 4), (10, 5)),
    ),
    "Druid": CasterInfo(
        CasterType.FULL,
        SpellMethod.PREPARED,
        Ability.WISDOM,
        ritual_casting=True,
        preparation_formula="wisdom+level",
        cantrips=((1, 2), (4, 3), (10, 4)),
    ),
    "Sorcerer": CasterInfo(
        CasterType.FULL,
        SpellMethod.KNOWN,
        Ability.CHARISMA,
        cantrips=((1, 4), (4, 5), (10, 6)),
        spells_known=(2, 3, 4, 5, 6, 7, 8, 9, 10, 11, 12, 12, 13, 13, 14, 14, 15, 15, 15, 15),
    ),
    "Wizard": CasterInfo(
        CasterType.FULL,
        SpellMethod.SPELLBOOK,
        Ability.INTELLIGENCE,
        ritual_casting=True,
        preparation_formula="intelligence+level",
        cantrips=((1, 3), (4, 4), (10, 5)),
    ),
    "Warlock": CasterInfo(
        CasterType.PACT,
        SpellMethod.KNOWN,
        Ability.CHARISMA,
        cantrips=((1, 2), (4, 3), (10, 4)),
        spells_known=(2, 3, 4, 5, 6, 7, 8, 9, 10, 10, 11, 11, 12, 12, 13, 13, 14, 14, 15, 15),
    ),
    "Paladin": CasterInfo(
        CasterType.HALF,
        SpellMethod.PREPARED,
        Ability.CHARISMA,
        preparation_formula="charisma+(level/2)",
    ),
    "Ranger": CasterInfo(
        CasterType.HALF,
        SpellMethod.KNOWN,
        Ability.WISDOM,
        spells_known=(0, 2, 3, 3, 4, 4, 5, 5, 6, 6, 7, 7, 8, 8, 9, 9, 10, 10, 11, 11),
    ),
}

# Third casters come from a subclass, not the base class.
THIRD_CASTER_SUBCLASSES: Dict[str, Tuple[str, Ability]] = {
    "Fighter": ("Eldritch Knight", Ability.INTELLIGENCE),
    "Rogue": ("Arcane Trickster", Ability.INTELLIGENCE),
}

# Standard caster slots (L1–L9) – tuple per effective caster level
FULL_CASTER_SLOTS = {
    1: (2, 0, 0, 0, 0, 0, 0, 0, 0),
    2: (3, 0, 0, 0, 0, 0, 0, 0, 0),
    3: (4, 2, 0, 0, 0, 0, 0, 0, 0),
    4: (4, 3, 0, 0, 0, 0, 0, 0, 0),
    5: (4, 3, 2, 0, 0, 0, 0, 0, 0),
    6: (4, 3, 3, 0, 0, 0, 0, 0, 0),
    7: (4, 3, 3, 1, 0, 0, 0, 0, 0),
    8: (4, 3, 3, 2, 0, 0, 0, 0, 0),
    9: (4, 3, 3, 3, 1, 0, 0, 0, 0),
    10: (4, 3, 3, 3, 2, 0, 0, 0, 0),
    11: (4, 3, 3, 3, 2, 1, 0, 0, 0),
    12: (4, 3, 3, 3, 2, 1, 0, 0, 0),
    13: (4, 3, 3, 3, 2, 1, 1, 0, 0),
    14: (4, 3, 3, 3, 2, 1, 1, 0, 0),
    15: (4, 3, 3, 3, 2, 1, 1, 1, 0),
    16: (4, 3, 3, 3, 2, 1, 1, 1, 0),
    17: (4, 3, 3, 3, 2, 1, 1, 1, 1),
    18: (4, 3, 3, 3, 3, 1, 1, 1, 1),
    19: (4, 3, 3, 3, 3, 2, 1, 1, 1),
    20: (4, 3, 3, 3, 3, 2, 2, 1, 1),
}

# Pact magic (Warlock) – warlock level -> (#slots, slot level)
PACT_MAGIC = {
    1: (1, 1),
    2: (2, 1),
    3: (2, 2),
    4: (2, 2),
    5: (2, 3),
    6: (2, 3),
    7: (2, 4),
    8: (2, 4),
    9: (2, 5),
    10: (2, 5),
    11: (3, 5),
    12: (3, 5),
    13: (3, 5),
    14: (3, 5),
    15: (3, 5),
    16: (3, 5),
    17: (4, 5),
    18: (4, 5),
    19: (4, 5),
    20: (4, 5),
}


def caster_info(class_name: str) -> Optional[CasterInfo]:
    return CASTER_INFO.get(class_name.title())


def caster_type(class_name: str, subclass: Optional[str] = None) -> CasterType:
    info = caster_info(class_name)
    if info is not None:
        return info.caster_type
    third = THIRD_CASTER_SUBCLASSES.get(class_name.title())
    if third and subclass and subclass.lower() == third[0].lower():
        return CasterType.THIRD
    return CasterType.NONE


def casting_ability(class_name: str, subclass: Optional[str] = None) -> Optional[Ability]:
    info = caster_info(class_name)
    if info is not None:
        return info.ability
    if caster_type(class_name, subclass) is CasterType.THIRD:
        return THIRD_CASTER_SUBCLASSES[class_name.title()][1]
    return None


def is_spellcaster(classes: Iterable[ClassLevel]) -> bool:
    return any(caster_type(cl.class_name, cl.subclass) is not CasterType.NONE for cl in classes)


def effective_caster_level(classes: Iterable[ClassLevel]) -> int:
    """Full casters count in full, half casters floor(level/2), third casters floor(level/3).

    Pact casters do not contribute; their slots are a separate pool.
    """
    total = 0
    for cl in classes:
        kind = caster_type(cl.class_name, cl.subclass)
        if kind is CasterType.FULL:
            total += cl.level
        elif kind is CasterType.HALF:
            total += cl.level // 2
        elif kind is CasterType.THIRD:
            total += cl.level // 3
    return min(total, 20)


def spell_slots_for_level(caster_level: int) -> SpellSlots:
    counts = FULL_CASTER_SLOTS.get(caster_level)
    if not counts:
        return SpellSlots()
    return SpellSlots.from_counts(counts)


def multiclass_spell_slots(classes: Iterable[ClassLevel]) -> SpellSlots:
    return spell_slots_for_level(effective_caster_level(classes))


def pact_magic_for(warlock_level: int) -> PactMagic:
    if warlock_level <= 0:
        return PactMagic()
    slots, slot_level = PACT_MAGIC[min(warlock_level, 20)]
    return PactMagic(slots=slots, slot_level=slot_level, current=slots)


def cantrips_known(class_name: str, level: int) -> int:
    info = caster_info(class_name)
    if info is None or level <= 0:
        return 0
    known = 0
    for threshold, count in info.cantrips:
        if level >= threshold:
            known = count
    return known


def max_cantrips_known(classes: Iterable[ClassLevel]) -> int:
    return sum(cantrips_known(cl.class_name, cl.level) for cl in classes)


def spells_known(class_name: str, level: int) -> int:
    info = caster_info(class_name)
    if info is None or not info.spells_known or level <= 0:
        return 0
    return info.spells_known[min(level, 20) - 1]


def can_cast_rituals(classes: Iterable[ClassLevel]) -> bool:
    for cl in classes:
        info = caster_info(cl.class_name)
        if info is not None and info.ritual_casting:
            return True
    return False
