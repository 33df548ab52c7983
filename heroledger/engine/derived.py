"""Recompute every derived statistic from the character's stored state.

``update_derived_stats`` is idempotent: transient bonuses (Monk movement,
conditional AC) are rebuilt from stored fields on every call and never
written back into them.
"""

from __future__ import annotations

from typing import Dict, List

from heroledger.models.abilities import Ability
from heroledger.models.character import Character
from heroledger.rules.calculations import calculate_modifier, calculate_proficiency_bonus
from heroledger.rules.core import (
    DUAL_WIELDER_AC,
    DUAL_WIELDER_FEAT,
    MONK_MOVEMENT,
    SHIELD_AC,
    UNARMORED_DEFENSE,
    UNARMORED_MOVEMENT,
)


def class_display(character: Character) -> str:
    if not character.classes:
        return ""
    if len(character.classes) == 1:
        cl = character.classes[0]
        if cl.subclass:
            return f"{cl.class_name} ({cl.subclass}) {cl.level}"
        return f"{cl.class_name} {cl.level}"
    return " / ".join(f"{cl.class_name} {cl.level}" for cl in character.classes)


def evaluate_preparation_formula(formula: str, character: Character) -> int:
    """Sum of "+"-separated terms: ``level``, ``level/2``, ability names, integers."""
    total = 0
    for raw in formula.lower().split("+"):
        term = raw.strip().strip("()").strip()
        if not term:
            continue
        if term == "level":
            total += character.total_level
        elif term == "level/2":
            total += character.total_level // 2
        elif term.lstrip("-").isdigit():
            total += int(term)
        else:
            try:
                total += character.ability_mod(Ability.parse(term))
            except ValueError:
                continue
    return total


def monk_movement_bonus(monk_level: int) -> int:
    for threshold, bonus in MONK_MOVEMENT:
        if monk_level >= threshold:
            return bonus
    return 0


def _armor_proficient(character: Character, category: str) -> bool:
    wanted = f"{category} armor"
    return any(p.lower() in (wanted, "all armor") for p in character.armor_proficiencies)


def calculate_armor_class(character: Character) -> Dict[str, object]:
    pieces: List[str] = []
    notes: List[str] = []

    dex = character.ability_mod(Ability.DEXTERITY)
    armor = character.equipped_armor()
    shield = character.equipped_shield()

    if armor is not None:
        category = armor.armor_category or "light"
        if category == "heavy":
            dex_part = 0
        elif category == "medium":
            dex_part = min(dex, 2)
        else:
            dex_part = dex
        ac = armor.base_ac + dex_part
        pieces.append(f"{armor.name} {armor.base_ac}")
        pieces.append(f"Dex {dex_part:+d}")
        if character.armor_proficiencies and not _armor_proficient(character, category):
            notes.append(f"not proficient with {category} armor")
    elif character.class_level("Monk") and character.has_feature(UNARMORED_DEFENSE):
        wis = character.ability_mod(Ability.WISDOM)
        ac = 10 + dex + wis
        pieces += ["unarmored 10", f"Dex {dex:+d}", f"Wis {wis:+d}"]
    elif character.class_level("Barbarian") and character.has_feature(UNARMORED_DEFENSE):
        con = character.ability_mod(Ability.CONSTITUTION)
        ac = 10 + dex + con
        pieces += ["unarmored 10", f"Dex {dex:+d}", f"Con {con:+d}"]
    else:
        ac = 10 + dex
        pieces += ["unarmored 10", f"Dex {dex:+d}"]

    if shield is not None:
        ac += SHIELD_AC
        pieces.append(f"shield +{SHIELD_AC}")
    if character.ac_bonus:
        ac += character.ac_bonus
        pieces.append(f"bonus {character.ac_bonus:+d}")
    if character.style_ac_bonus and armor is not None:
        ac += character.style_ac_bonus
        pieces.append(f"{character.fighting_style or 'style'} {character.style_ac_bonus:+d}")
    if DUAL_WIELDER_FEAT in character.feats and shield is None:
        melee = [it for it in character.inventory.equipped() if it.is_melee_weapon]
        if len(melee) == 2:
            ac += DUAL_WIELDER_AC
            pieces.append(f"{DUAL_WIELDER_FEAT} {DUAL_WIELDER_AC:+d}")

    return {"ac": ac, "components": pieces, "notes": notes}


def update_derived_stats(character: Character) -> Character:
    c = character

    if c.classes:
        c.level = sum(cl.level for cl in c.classes)
    c.class_summary = class_display(c)

    c.initiative = c.ability_mod(Ability.DEXTERITY) + c.initiative_bonus
    c.inventory.carry_capacity = c.ability_scores.strength * 15
    c.proficiency_bonus = calculate_proficiency_bonus(c.level)

    book = c.spellbook
    if book.spellcasting_ability is not None:
        mod = calculate_modifier(c.ability_scores.get(book.spellcasting_ability))
        book.spell_save_dc = 8 + c.proficiency_bonus + mod
        book.spell_attack_bonus = c.proficiency_bonus + mod
        if book.is_prepared_caster:
            book.max_prepared_spells = max(1, evaluate_preparation_formula(book.preparation_formula, c))

    c.armor_class = calculate_armor_class(c)["ac"]

    c.current_speed = c.speed
    monk_level = c.class_level("Monk")
    if (
        monk_level
        and c.has_feature(UNARMORED_MOVEMENT)
        and c.equipped_armor() is None
        and c.equipped_shield() is None
    ):
        c.current_speed += monk_movement_bonus(monk_level)

    if c.current_hp > c.max_hp:
        c.current_hp = c.max_hp
    return c
