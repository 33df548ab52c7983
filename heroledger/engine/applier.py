from __future__ import annotations

import re
from typing import List, Optional

from heroledger.errors import ValidationError
from heroledger.logging import get_logger
from heroledger.models.abilities import Ability, Skill
from heroledger.models.benefits import BenefitSource, BenefitType, GrantedBenefit
from heroledger.models.character import Character, Feature, Item
from heroledger.rules.core import ARMORED_AC, GOLD_CP, HP_PER_LEVEL, MAX_ABILITY_SCORE, PASSIVE_SKILLS
from heroledger.rules.tables import FeatureDefinition, RuleTables

from .features import build_feature

log = get_logger(__name__)

_GOLD = re.compile(r"^\s*(\d+(?:\.\d+)?)\s*gp\s*$", re.IGNORECASE)


class BenefitApplier:
    """Grant mechanical effects to a character and record each one in its ledger.

    Every call appends a ledger entry, including re-grants whose effect is a
    no-op. Guarding against applying the same source twice is left to callers.
    """

    def __init__(self, character: Character, tables: Optional[RuleTables] = None):
        self.character = character
        self.tables = tables

    def _record(
        self,
        source: BenefitSource,
        kind: BenefitType,
        target: str,
        value: int,
        description: str,
    ) -> None:
        self.character.benefits.add_benefit(
            GrantedBenefit(
                source=source,
                benefit_type=kind,
                target=target,
                value=value,
                description=description,
            )
        )
        log.debug("%s granted %s %s (%s)", source.tag, kind.value, target, value)

    # --- Abilities & skills ---

    def add_ability_score(self, source: BenefitSource, ability: Ability | str, increase: int) -> int:
        ability = Ability.parse(ability)
        scores = self.character.ability_scores
        new_value = min(scores.get(ability) + increase, MAX_ABILITY_SCORE)
        scores.set(ability, new_value)
        # the requested increase is what removal subtracts, even when capped
        self._record(source, BenefitType.ABILITY_SCORE, ability.value, increase, f"+{increase} {ability.value}")
        return new_value

    def add_skill_proficiency(self, source: BenefitSource, skill: Skill | str) -> None:
        skill = Skill.parse(skill)
        skills = self.character.skills
        prior = skills.get(skill)
        skills.set(skill, prior.upgraded())
        self._record(source, BenefitType.SKILL, skill.value, int(prior), f"{skill.value} proficiency")

    # --- Shared list grants ---

    def _add_to_list(self, source: BenefitSource, kind: BenefitType, values: List[str], name: str) -> None:
        if not any(v.lower() == name.lower() for v in values):
            values.append(name)
        self._record(source, kind, name, 1, f"{kind.value}: {name}")

    def add_language(self, source: BenefitSource, language: str) -> None:
        self._add_to_list(source, BenefitType.LANGUAGE, self.character.languages, language)

    def add_resistance(self, source: BenefitSource, damage_type: str) -> None:
        self._add_to_list(source, BenefitType.RESISTANCE, self.character.resistances, damage_type)

    def add_tool_proficiency(self, source: BenefitSource, tool: str) -> None:
        self._add_to_list(source, BenefitType.TOOL, self.character.tool_proficiencies, tool)

    def add_spell(self, source: BenefitSource, spell: str) -> None:
        self._add_to_list(source, BenefitType.SPELL, self.character.species_spells, spell)

    # --- Additive grants ---

    def add_speed(self, source: BenefitSource, amount: int) -> None:
        self.character.speed += amount
        self._record(source, BenefitType.SPEED, "speed", amount, f"{amount:+d} ft speed")

    def add_hp(self, source: BenefitSource, amount: int, heal: bool = True) -> None:
        c = self.character
        c.max_hp += amount
        c.current_hp = c.max_hp if heal else min(c.current_hp + amount, c.max_hp)
        self._record(source, BenefitType.HP, "max_hp", amount, f"{amount:+d} max HP")

    def add_hp_per_level(self, source: BenefitSource, per_level: int) -> int:
        """HP for every character level so far; level_up tops it up under the same source."""
        self._record(source, BenefitType.HP, HP_PER_LEVEL, per_level, f"{per_level:+d} max HP per level")
        total = per_level * self.character.total_level
        self.add_hp(source, total)
        return total

    def add_initiative(self, source: BenefitSource, amount: int) -> None:
        self.character.initiative_bonus += amount
        self._record(source, BenefitType.INITIATIVE, "initiative", amount, f"{amount:+d} initiative")

    def add_ac_bonus(self, source: BenefitSource, amount: int) -> None:
        self.character.ac_bonus += amount
        self._record(source, BenefitType.AC, "ac", amount, f"{amount:+d} AC")

    def add_armored_ac_bonus(self, source: BenefitSource, amount: int) -> None:
        """AC that only counts while wearing armor (the Defense fighting style)."""
        self.character.style_ac_bonus += amount
        self._record(source, BenefitType.AC, ARMORED_AC, amount, f"{amount:+d} AC in armor")

    def add_passive_bonus(self, source: BenefitSource, skill: Skill | str, amount: int) -> None:
        skill = Skill.parse(skill)
        if skill.value not in PASSIVE_SKILLS:
            raise ValidationError("skill", f"no passive score for {skill.value}")
        bonuses = self.character.passive_bonuses
        bonuses[skill.value] = bonuses.get(skill.value, 0) + amount
        self._record(source, BenefitType.PASSIVE, skill.value, amount, f"{amount:+d} passive {skill.value}")

    def add_darkvision(self, source: BenefitSource, feet: int) -> None:
        self.character.darkvision += feet
        self._record(source, BenefitType.DARKVISION, "darkvision", feet, f"darkvision {feet} ft")

    # --- Features, feats & items ---

    def add_feature(
        self,
        source: BenefitSource,
        definition: FeatureDefinition,
        class_name: Optional[str] = None,
    ) -> Feature:
        feature = build_feature(definition, self.character, source.tag, class_name)
        self.character.features.append(feature)
        self._record(source, BenefitType.FEATURE, feature.name, feature.max_uses, definition.description)
        self.add_feature_benefits(source, definition)
        return feature

    def add_feature_benefits(self, source: BenefitSource, definition: FeatureDefinition) -> None:
        """Ledger the fixed grants a feature carries (Shadow Arts darkvision, say)."""
        for skill in definition.skill_proficiencies:
            self.add_skill_proficiency(source, skill)
        for tool in definition.tool_proficiencies:
            self.add_tool_proficiency(source, tool)
        for lang in definition.languages:
            self.add_language(source, lang)
        for res in definition.resistances:
            self.add_resistance(source, res)
        for spell in definition.spells:
            self.add_spell(source, spell)
        if definition.darkvision:
            self.add_darkvision(source, definition.darkvision)
        if definition.speed_bonus:
            self.add_speed(source, definition.speed_bonus)

    def add_feat_marker(self, source: BenefitSource, feat_name: str) -> None:
        """Add a feat to the feat list on behalf of another source (an origin, say)."""
        self.character.feats.append(feat_name)
        self._record(source, BenefitType.FEAT, feat_name, 1, f"feat: {feat_name}")

    def add_item(self, source: BenefitSource, name: str, quantity: int = 1) -> Optional[Item]:
        inv = self.character.inventory
        m = _GOLD.match(name)
        if m:
            amount = float(m.group(1))
            inv.gold += amount
            self._record(source, BenefitType.ITEM, GOLD_CP, round(amount * 100), f"{name} to purse")
            return None

        existing = inv.find(name)
        if existing is not None:
            existing.quantity += quantity
            item = existing
        else:
            template = self.tables.items.get_by_name(name) if self.tables else None
            item = template.to_item(quantity) if template else Item(name=name, quantity=quantity)
            inv.items.append(item)
        self._record(source, BenefitType.ITEM, item.name, quantity, f"{quantity} x {item.name}")
        return item
