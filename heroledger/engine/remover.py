from __future__ import annotations

from typing import List, Optional

from heroledger.logging import get_logger
from heroledger.models.abilities import ProficiencyLevel
from heroledger.models.benefits import BenefitSource, BenefitType, GrantedBenefit
from heroledger.models.character import Character
from heroledger.rules.core import ARMORED_AC, GOLD_CP, HP_PER_LEVEL
from heroledger.rules.tables import RuleTables

from .derived import update_derived_stats

log = get_logger(__name__)


def _drop_first(values: List[str], name: str) -> None:
    key = name.lower()
    for i, v in enumerate(values):
        if v.lower() == key:
            del values[i]
            return


class BenefitRemover:
    """Reverse everything one source granted, using the ledger as the record."""

    def __init__(self, character: Character, tables: Optional[RuleTables] = None):
        self.character = character
        self.tables = tables

    def remove_all_benefits(self, source_type: str, source_name: str) -> List[GrantedBenefit]:
        removed = self._remove_source(source_type, source_name)
        update_derived_stats(self.character)
        return removed

    def remove_source(self, source: BenefitSource) -> List[GrantedBenefit]:
        return self.remove_all_benefits(source.type, source.name)

    def _remove_source(self, source_type: str, source_name: str) -> List[GrantedBenefit]:
        removed = self.character.benefits.remove_benefits_by_source(source_type, source_name)
        if not removed:
            log.debug("nothing granted by %s: %s", source_type, source_name)
        for entry in removed:
            self._reverse(entry)
        return removed

    def _still_granted(self, entry: GrantedBenefit) -> bool:
        return self.character.benefits.count_target(entry.benefit_type, entry.target) > 0

    def _reverse(self, entry: GrantedBenefit) -> None:
        c = self.character
        kind = entry.benefit_type
        log.debug("%s reverting %s %s (%s)", entry.source.tag, kind.value, entry.target, entry.value)

        if kind == BenefitType.ABILITY_SCORE:
            scores = c.ability_scores
            scores.set(entry.target, max(1, scores.get(entry.target) - entry.value))
        elif kind == BenefitType.SKILL:
            c.skills.set(entry.target, ProficiencyLevel(entry.value))
        elif kind in (BenefitType.LANGUAGE, BenefitType.RESISTANCE, BenefitType.TOOL):
            if not self._still_granted(entry):
                values = {
                    BenefitType.LANGUAGE: c.languages,
                    BenefitType.RESISTANCE: c.resistances,
                    BenefitType.TOOL: c.tool_proficiencies,
                }[kind]
                _drop_first(values, entry.target)
        elif kind == BenefitType.SPELL:
            if not self._still_granted(entry):
                _drop_first(c.species_spells, entry.target)
                _drop_first(c.spellbook.spells, entry.target)
        elif kind == BenefitType.SPEED:
            c.speed = max(0, c.speed - entry.value)
        elif kind == BenefitType.HP and entry.target == HP_PER_LEVEL:
            # the marker itself changed nothing; the max_hp entries carry the HP
            pass
        elif kind == BenefitType.HP:
            c.max_hp = max(1, c.max_hp - entry.value)
            c.current_hp = min(c.current_hp, c.max_hp)
        elif kind == BenefitType.INITIATIVE:
            c.initiative_bonus = max(0, c.initiative_bonus - entry.value)
        elif kind == BenefitType.AC and entry.target == ARMORED_AC:
            c.style_ac_bonus = max(0, c.style_ac_bonus - entry.value)
        elif kind == BenefitType.AC:
            c.ac_bonus = max(0, c.ac_bonus - entry.value)
        elif kind == BenefitType.PASSIVE:
            left = max(0, c.passive_bonuses.get(entry.target, 0) - entry.value)
            if left:
                c.passive_bonuses[entry.target] = left
            else:
                c.passive_bonuses.pop(entry.target, None)
        elif kind == BenefitType.DARKVISION:
            c.darkvision = max(0, c.darkvision - entry.value)
        elif kind == BenefitType.FEATURE:
            tag = entry.source.tag
            for i in range(len(c.features) - 1, -1, -1):
                f = c.features[i]
                if f.name == entry.target and f.source == tag:
                    del c.features[i]
                    break
        elif kind == BenefitType.ITEM:
            self._remove_item(entry)
        elif kind == BenefitType.FEAT:
            if entry.target in c.feats:
                c.feats.remove(entry.target)
            self._remove_source(entry.source.granted_feat().type, entry.source.name)

    def _remove_item(self, entry: GrantedBenefit) -> None:
        inv = self.character.inventory
        if entry.target == GOLD_CP:
            inv.gold = round(max(0.0, inv.gold - entry.value / 100), 2)
            return
        # saves written before gold was kept in copper
        if entry.target == "gold":
            inv.gold = max(0.0, inv.gold - entry.value)
            return
        item = inv.find(entry.target)
        if item is None:
            return
        item.quantity -= entry.value
        if item.quantity <= 0:
            inv.items = [it for it in inv.items if it is not item]
