from __future__ import annotations

import re
from typing import List, Optional, Tuple

from heroledger.errors import ValidationError
from heroledger.logging import get_logger
from heroledger.models.abilities import Ability
from heroledger.models.benefits import BenefitSource
from heroledger.models.character import Character
from heroledger.rules.tables import AbilityIncrease, FeatDefinition, RuleTables

from .applier import BenefitApplier
from .derived import update_derived_stats
from .remover import BenefitRemover

log = get_logger(__name__)

_ABILITY_REQ = re.compile(
    r"\b(strength|dexterity|constitution|intelligence|wisdom|charisma|str|dex|con|int|wis|cha)\s+(\d+)",
    re.IGNORECASE,
)
_LEVEL_REQ = re.compile(r"(?:level\s+(\d+)|(\d+)(?:st|nd|rd|th)?\s*[-\s]?level)", re.IGNORECASE)


def feat_source(feat_name: str) -> BenefitSource:
    return BenefitSource(type="feat", name=feat_name)


def has_feat(character: Character, feat_name: str) -> bool:
    key = feat_name.lower()
    return any(f.lower() == key for f in character.feats)


def parse_prerequisite(text: str) -> Tuple[List[Tuple[Ability, int]], bool, int]:
    """(ability minimums, any-of, minimum character level) from prerequisite text."""
    abilities = [(Ability.parse(name), int(score)) for name, score in _ABILITY_REQ.findall(text or "")]
    any_of = " or " in (text or "").lower()
    m = _LEVEL_REQ.search(text or "")
    level = int(m.group(1) or m.group(2)) if m else 0
    return abilities, any_of, level


def can_take_feat(character: Character, feat: FeatDefinition) -> Tuple[bool, str]:
    if has_feat(character, feat.name) and not feat.repeatable:
        return False, f"already has {feat.name}"
    abilities, any_of, level = parse_prerequisite(feat.prerequisite)
    if level and character.total_level < level:
        return False, f"requires level {level}"
    if abilities:
        met = [character.ability_scores.get(a) >= n for a, n in abilities]
        if not (any(met) if any_of else all(met)):
            return False, f"requires {feat.prerequisite}"
    return True, ""


def resolve_ability_choice(increase: Optional[AbilityIncrease], chosen: Optional[Ability | str]) -> Optional[Ability]:
    """The ability an increase applies to; raises when a required choice is missing or invalid."""
    if increase is None:
        return None
    if increase.choices:
        if chosen is None:
            raise ValidationError("ability", f"choose one of {', '.join(increase.choices)}")
        ability = Ability.parse(chosen)
        allowed = {Ability.parse(c) for c in increase.choices}
        if ability not in allowed:
            raise ValidationError("ability", f"{ability.value} is not one of {', '.join(increase.choices)}")
        return ability
    if increase.ability:
        return Ability.parse(increase.ability)
    return None


def grant_feat_benefits(
    character: Character,
    feat: FeatDefinition,
    source: Optional[BenefitSource] = None,
    chosen_ability: Optional[Ability | str] = None,
    tables: Optional[RuleTables] = None,
) -> BenefitSource:
    """Apply a feat's mechanical benefits under ``source`` without any re-take guard."""
    source = source or feat_source(feat.name)
    ability = resolve_ability_choice(feat.ability_increases, chosen_ability)
    applier = BenefitApplier(character, tables)

    if ability is not None:
        applier.add_ability_score(source, ability, feat.ability_increases.amount)
    for skill in feat.skill_proficiencies:
        applier.add_skill_proficiency(source, skill)
    for tool in feat.tool_proficiencies:
        applier.add_tool_proficiency(source, tool)
    for lang in feat.languages:
        applier.add_language(source, lang)
    for res in feat.resistances:
        applier.add_resistance(source, res)
    for spell in feat.grants_spells:
        applier.add_spell(source, spell)
    if feat.speed_bonus:
        applier.add_speed(source, feat.speed_bonus)
    if feat.hp_per_level:
        applier.add_hp_per_level(source, feat.hp_per_level)
    if feat.initiative_bonus:
        applier.add_initiative(source, feat.initiative_bonus)
    if feat.ac_bonus:
        applier.add_ac_bonus(source, feat.ac_bonus)
    for skill, bonus in feat.passive_bonuses.items():
        applier.add_passive_bonus(source, skill, bonus)
    if feat.darkvision:
        applier.add_darkvision(source, feat.darkvision)
    for fd in feat.features:
        applier.add_feature(source, fd)
    log.debug("granted feat %s under %s", feat.name, source.tag)
    return source


def apply_feat(
    character: Character,
    tables: RuleTables,
    feat_name: str,
    chosen_ability: Optional[Ability | str] = None,
    source: Optional[BenefitSource] = None,
) -> FeatDefinition:
    feat = tables.require_feat(feat_name)
    ok, reason = can_take_feat(character, feat)
    if not ok:
        raise ValidationError("feat", reason)
    grant_feat_benefits(character, feat, source, chosen_ability, tables)
    character.feats.append(feat.name)
    update_derived_stats(character)
    return feat


def remove_feat(character: Character, feat_name: str, source: Optional[BenefitSource] = None) -> bool:
    """Drop a feat and reverse its benefits; False when the character never had it."""
    source = source or feat_source(feat_name)
    held = has_feat(character, feat_name)
    if held:
        for i, f in enumerate(character.feats):
            if f.lower() == feat_name.lower():
                del character.feats[i]
                break
    removed = BenefitRemover(character).remove_all_benefits(source.type, source.name)
    return held or bool(removed)
