from __future__ import annotations

from typing import Dict, Optional

from heroledger.models.abilities import Ability
from heroledger.models.character import Character
from heroledger.rules.spellcasting import (
    CasterType,
    SpellMethod,
    caster_info,
    caster_type,
    casting_ability,
    can_cast_rituals,
    effective_caster_level,
    is_spellcaster,
    max_cantrips_known,
    multiclass_spell_slots,
    pact_magic_for,
)
from heroledger.rules.tables import ClassDefinition


def class_casts(class_def: ClassDefinition, subclass: Optional[str] = None) -> bool:
    return class_def.spellcasting is not None or caster_type(class_def.name, subclass) is not CasterType.NONE


def update_spell_slots(character: Character) -> None:
    """Replace slot state wholesale from all classes; current uses are reset to the maximum."""
    book = character.spellbook
    book.slots = multiclass_spell_slots(character.classes)
    book.pact_magic = pact_magic_for(character.class_level("Warlock"))
    book.cantrips_known = max_cantrips_known(character.classes)


def update_spellcasting(character: Character, class_def: ClassDefinition) -> bool:
    """Refresh the spellbook after a level in ``class_def``; True when the player must pick spells."""
    cl = character.get_class(class_def.name)
    subclass = cl.subclass if cl else None
    book = character.spellbook
    update_spell_slots(character)

    if book.spellcasting_ability is None:
        ability = casting_ability(class_def.name, subclass)
        if ability is None and class_def.spellcasting is not None:
            ability = Ability.parse(class_def.spellcasting.ability)
        book.spellcasting_ability = ability

    info = caster_info(class_def.name)
    if info is None:
        # third casters learn their spells
        book.requires_spell_selection = caster_type(class_def.name, subclass) is CasterType.THIRD
        return book.requires_spell_selection
    if info.method is SpellMethod.PREPARED:
        book.is_prepared_caster = True
        if not book.preparation_formula:
            book.preparation_formula = info.preparation_formula
        book.requires_spell_selection = False
        return False
    book.requires_spell_selection = True
    return True


def spellcasting_summary(character: Character) -> Dict[str, object]:
    book = character.spellbook
    if character.get_class("Wizard"):
        method = SpellMethod.SPELLBOOK
    elif any(character.get_class(n) for n in ("Cleric", "Druid", "Paladin")):
        method = SpellMethod.PREPARED
    else:
        method = SpellMethod.KNOWN
    return {
        "is_spellcaster": is_spellcaster(character.classes),
        "ability": book.spellcasting_ability.value if book.spellcasting_ability else None,
        "rituals": can_cast_rituals(character.classes),
        "max_cantrips": book.cantrips_known,
        "caster_level": effective_caster_level(character.classes),
        "slots": book.slots.maximums(),
        "pact_slots": book.pact_magic.slots,
        "pact_slot_level": book.pact_magic.slot_level,
        "method": method.value,
    }
