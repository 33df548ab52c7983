from __future__ import annotations

from typing import Optional

from heroledger.errors import ValidationError
from heroledger.models.benefits import BenefitSource
from heroledger.models.character import Character
from heroledger.rules.tables import RuleTables

from .applier import BenefitApplier
from .derived import update_derived_stats
from .remover import BenefitRemover

FIGHTING_STYLE = "fighting_style"


def has_fighting_style(character: Character, style_name: str) -> bool:
    if character.fighting_style == style_name:
        return True
    return any(cl.fighting_style == style_name for cl in character.classes)


def apply_fighting_style(
    character: Character,
    tables: RuleTables,
    style_name: str,
    class_name: Optional[str] = None,
) -> None:
    style = tables.require_fighting_style(style_name)
    cl = character.get_class(class_name) if class_name else None
    if class_name and cl is None:
        raise ValidationError("class", f"character does not have {class_name} levels")
    if has_fighting_style(character, style.name):
        raise ValidationError("fighting_style", f"already has {style.name}")

    source = BenefitSource(type=FIGHTING_STYLE, name=style.name)
    applier = BenefitApplier(character, tables)
    b = style.benefits
    ac = int(b.get("ac_bonus", 0))
    if ac:
        if b.get("requires_armor", False):
            applier.add_armored_ac_bonus(source, ac)
        else:
            applier.add_ac_bonus(source, ac)
    if b.get("initiative_bonus"):
        applier.add_initiative(source, int(b["initiative_bonus"]))
    if b.get("speed_bonus"):
        applier.add_speed(source, int(b["speed_bonus"]))
    for skill in b.get("skill_proficiencies", []):
        applier.add_skill_proficiency(source, skill)

    character.fighting_style = style.name
    if cl is not None:
        cl.fighting_style = style.name
    update_derived_stats(character)


def remove_fighting_style(character: Character, style_name: str) -> bool:
    removed = BenefitRemover(character).remove_all_benefits(FIGHTING_STYLE, style_name)
    held = False
    for cl in character.classes:
        if cl.fighting_style == style_name:
            cl.fighting_style = None
            held = True
    if character.fighting_style == style_name:
        character.fighting_style = next((cl.fighting_style for cl in character.classes if cl.fighting_style), None)
        held = True
    if held:
        update_derived_stats(character)
    return held or bool(removed)
