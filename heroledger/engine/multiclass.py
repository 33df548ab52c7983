from __future__ import annotations

from typing import List, Tuple

from heroledger.models.character import Character
from heroledger.rules.core import MULTICLASS_MINIMUM, MULTICLASS_PREREQUISITES, MULTICLASS_PROFICIENCIES
from heroledger.rules.tables import ClassDefinition, RuleTables


def _canonical(class_name: str) -> str:
    return class_name.strip().title()


def prerequisite_text(class_name: str) -> str:
    req = MULTICLASS_PREREQUISITES.get(_canonical(class_name))
    if req is None:
        return ""
    abilities, needs_all = req
    joiner = " and " if needs_all else " or "
    return joiner.join(f"{a.value} {MULTICLASS_MINIMUM}" for a in abilities)


def can_multiclass_into(character: Character, class_name: str) -> Tuple[bool, str]:
    """(allowed, reason). Fighter accepts either score; Monk, Paladin and Ranger need both."""
    req = MULTICLASS_PREREQUISITES.get(_canonical(class_name))
    if req is None:
        return False, f"Unknown class: {class_name}"
    abilities, needs_all = req
    scores = character.ability_scores
    met = [scores.get(a) >= MULTICLASS_MINIMUM for a in abilities]
    if all(met) if needs_all else any(met):
        return True, ""
    return False, f"Requires {prerequisite_text(class_name)}"


def meets_prerequisites(character: Character, class_name: str) -> bool:
    return can_multiclass_into(character, class_name)[0]


def available_multiclass_options(character: Character, tables: RuleTables) -> List[ClassDefinition]:
    """Classes the character could add; classes already held are excluded."""
    return [
        cls
        for cls in tables.classes.get_all()
        if character.get_class(cls.name) is None and meets_prerequisites(character, cls.name)
    ]


def multiclass_proficiencies(class_name: str) -> List[str]:
    return list(MULTICLASS_PROFICIENCIES.get(_canonical(class_name), ()))
