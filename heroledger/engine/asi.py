from __future__ import annotations

from typing import Dict, List

from heroledger.errors import ValidationError
from heroledger.logging import get_logger
from heroledger.models.abilities import Ability
from heroledger.models.benefits import BenefitSource
from heroledger.models.character import AbilityBoost, ASIChoice, Character
from heroledger.rules.core import ASI_LEVELS, EXTRA_ASI_LEVELS, MAX_ABILITY_SCORE
from heroledger.rules.tables import RuleTables

from .applier import BenefitApplier
from .derived import update_derived_stats
from .feats import can_take_feat, grant_feat_benefits, resolve_ability_choice
from .remover import BenefitRemover

log = get_logger(__name__)


def check_asi_available(class_name: str, level: int) -> bool:
    """Ability Score Improvement at 4/8/12/16, plus 6 and 14 for Fighters and 10 for Rogues."""
    return level in ASI_LEVELS or level in EXTRA_ASI_LEVELS.get(class_name.title(), ())


def asi_source(class_name: str, level: int, feat: bool = False) -> BenefitSource:
    return BenefitSource(type="ASI Feat" if feat else "ASI", name=f"{class_name} Level {level}")


def validate_ability_boosts(character: Character, boosts: List[AbilityBoost]) -> None:
    if not boosts:
        raise ValidationError("ability_boosts", "no ability boosts specified")
    totals: Dict[Ability, int] = {}
    for b in boosts:
        if b.amount < 1:
            raise ValidationError("ability_boosts", "ability boost amount must be positive")
        totals[b.ability] = totals.get(b.ability, 0) + b.amount
    if sum(totals.values()) != 2:
        raise ValidationError("ability_boosts", f"boosts must total +2, got +{sum(totals.values())}")
    for ability, amount in totals.items():
        if amount > 2:
            raise ValidationError("ability_boosts", f"cannot raise {ability.value} by more than +2")
        if character.ability_scores.get(ability) + amount > MAX_ABILITY_SCORE:
            raise ValidationError("ability_boosts", f"{ability.value} would exceed {MAX_ABILITY_SCORE}")


def apply_asi_choice(
    character: Character,
    tables: RuleTables,
    class_name: str,
    level: int,
    choice: ASIChoice,
) -> None:
    cl = character.get_class(class_name)
    if cl is None:
        raise ValidationError("class", f"character does not have {class_name} levels")
    if level in cl.asi_choices:
        raise ValidationError("asi", f"{cl.class_name} level {level} improvement already chosen")

    if choice.type == "ability":
        validate_ability_boosts(character, choice.ability_boosts)
        source = asi_source(cl.class_name, level)
        applier = BenefitApplier(character, tables)
        for b in choice.ability_boosts:
            applier.add_ability_score(source, b.ability, b.amount)
    elif choice.type == "feat":
        if not choice.feat_name:
            raise ValidationError("feat", "no feat chosen")
        feat = tables.require_feat(choice.feat_name)
        ok, reason = can_take_feat(character, feat)
        if not ok:
            raise ValidationError("feat", reason)
        resolve_ability_choice(feat.ability_increases, choice.chosen_ability)
        grant_feat_benefits(character, feat, asi_source(cl.class_name, level, feat=True), choice.chosen_ability, tables)
        character.feats.append(feat.name)
    else:
        raise ValidationError("asi", f"invalid ASI choice type: {choice.type}")

    cl.asi_choices[level] = choice
    log.debug("ASI %s level %d: %s", cl.class_name, level, choice.type)
    update_derived_stats(character)


def remove_asi_choice(character: Character, class_name: str, level: int) -> bool:
    cl = character.get_class(class_name)
    if cl is None:
        raise ValidationError("class", f"character does not have {class_name} levels")
    choice = cl.asi_choices.get(level)
    if choice is None:
        return False
    if choice.type == "feat" and choice.feat_name in character.feats:
        character.feats.remove(choice.feat_name)
    source = asi_source(cl.class_name, level, feat=choice.type == "feat")
    BenefitRemover(character).remove_all_benefits(source.type, source.name)
    del cl.asi_choices[level]
    return True
