from __future__ import annotations

from typing import Optional

from heroledger.errors import ValidationError
from heroledger.models.abilities import Ability
from heroledger.models.character import Character, Feature, RestType
from heroledger.rules.scaling import rest_type_for, scaled_uses
from heroledger.rules.tables import FeatureDefinition


def _ability_term(term: str) -> Optional[Ability]:
    key = term.replace("_modifier", "").replace("_mod", "")
    try:
        ability = Ability.parse(key)
    except ValidationError:
        return None
    # only whole names or abbreviations count as ability keywords
    return ability if key in (ability.field_name, ability.abbr) else None


def evaluate_uses(definition: FeatureDefinition, character: Character, class_name: Optional[str] = None) -> int:
    """Max uses for a feature definition evaluated against a character.

    Formulas: an integer, ``proficiency``, ``level``, ``level/2``, an ability
    keyword (modifier, minimum 1), ``scaling`` (class scaling table at the
    character's level in ``class_name``), or empty to fall back on
    ``max_uses`` and then 1.
    """
    formula = definition.uses_formula.strip().lower()
    if not formula:
        try:
            return int(definition.max_uses)
        except ValueError:
            return 1
    if formula == "proficiency":
        return character.proficiency_bonus
    if formula == "level":
        return character.total_level
    if formula == "level/2":
        return character.total_level // 2
    if formula == "class_level" and class_name:
        return character.class_level(class_name)
    if formula == "scaling":
        if not class_name:
            return 0
        return scaled_uses(class_name, definition.name, character.class_level(class_name))
    ability = _ability_term(formula)
    if ability is not None:
        return max(1, character.ability_mod(ability))
    try:
        return int(formula)
    except ValueError:
        return 1


def build_feature(
    definition: FeatureDefinition,
    character: Character,
    source_tag: str,
    class_name: Optional[str] = None,
) -> Feature:
    max_uses = evaluate_uses(definition, character, class_name)
    rest = definition.rest_type
    if class_name:
        rest = rest_type_for(class_name, definition.name, character.class_level(class_name)) or rest
    return Feature(
        name=definition.name,
        description=definition.description,
        max_uses=max_uses,
        current_uses=max_uses if max_uses > 0 else 0,
        rest_type=rest,
        source=source_tag,
        uses_formula=definition.uses_formula,
    )


def rescale_feature(feature: Feature, new_max: int) -> None:
    """Move a feature to a new maximum; gained uses are added to the current pool."""
    diff = new_max - feature.max_uses
    feature.max_uses = new_max
    if diff > 0:
        feature.current_uses += diff
    feature.current_uses = max(0, min(feature.current_uses, feature.max_uses))

