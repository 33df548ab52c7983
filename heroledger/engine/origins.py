from __future__ import annotations

from typing import Optional

from heroledger.errors import ValidationError
from heroledger.logging import get_logger
from heroledger.models.abilities import Ability
from heroledger.models.benefits import BenefitSource
from heroledger.models.character import Character
from heroledger.rules.tables import RuleTables

from .applier import BenefitApplier
from .derived import update_derived_stats
from .feats import grant_feat_benefits, has_feat, resolve_ability_choice
from .remover import BenefitRemover

log = get_logger(__name__)

ORIGIN = "origin"


def apply_origin(
    character: Character,
    tables: RuleTables,
    origin_name: str,
    chosen_ability: Optional[Ability | str] = None,
    feat_ability: Optional[Ability | str] = None,
) -> None:
    """Apply an origin (background); a previously applied origin is removed first."""
    origin = tables.require_origin(origin_name)
    ability = resolve_ability_choice(origin.ability_increases, chosen_ability)

    feat = tables.feats.get_by_name(origin.feat) if origin.feat else None
    if origin.feat and feat is None:
        log.warning("origin %s grants unknown feat %s", origin.name, origin.feat)
    grant_feat = feat is not None and not has_feat(character, feat.name)
    if grant_feat:
        resolve_ability_choice(feat.ability_increases, feat_ability)

    if character.origin:
        remove_origin(character)

    source = BenefitSource(type=ORIGIN, name=origin.name)
    applier = BenefitApplier(character, tables)
    if ability is not None:
        applier.add_ability_score(source, ability, origin.ability_increases.amount)
    for skill in origin.skill_proficiencies:
        applier.add_skill_proficiency(source, skill)
    for tool in origin.tool_proficiencies:
        applier.add_tool_proficiency(source, tool)
    for lang in origin.languages:
        applier.add_language(source, lang)
    for entry in origin.equipment:
        applier.add_item(source, entry)
    if grant_feat:
        # the marker lets removal of the origin take the feat with it
        applier.add_feat_marker(source, feat.name)
        grant_feat_benefits(character, feat, source.granted_feat(), feat_ability, tables)

    character.origin = origin.name
    character.background = origin.name
    update_derived_stats(character)


def remove_origin(character: Character) -> bool:
    if not character.origin:
        return False
    name = character.origin
    character.origin = None
    character.background = None
    BenefitRemover(character).remove_all_benefits(ORIGIN, name)
    return True
