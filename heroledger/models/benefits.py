from __future__ import annotations

from enum import Enum
from typing import List

from pydantic import BaseModel, Field


class BenefitType(str, Enum):
    ABILITY_SCORE = "ability_score"
    SKILL = "skill"
    LANGUAGE = "language"
    RESISTANCE = "resistance"
    TOOL = "tool"
    SPEED = "speed"
    HP = "hp"
    INITIATIVE = "initiative"
    AC = "ac"
    PASSIVE = "passive"
    DARKVISION = "darkvision"
    SPELL = "spell"
    FEATURE = "feature"
    ITEM = "item"
    FEAT = "feat"


# list-valued grants; removal only drops the list entry once no source holds it
REFERENCE_COUNTED = frozenset(
    {BenefitType.LANGUAGE, BenefitType.RESISTANCE, BenefitType.TOOL, BenefitType.SPELL}
)


class BenefitSource(BaseModel):
    type: str
    name: str

    @property
    def tag(self) -> str:
        return f"{self.type}: {self.name}"

    def matches(self, source_type: str, source_name: str) -> bool:
        return self.type == source_type and self.name == source_name

    def granted_feat(self) -> "BenefitSource":
        """Source for the benefits of a feat this source grants (an origin's feat, say)."""
        return BenefitSource(type=f"{self.type} feat", name=self.name)


class GrantedBenefit(BaseModel):
    """One mechanical effect and the source that granted it.

    ``value`` is the applied delta for additive grants, the prior proficiency
    level for skills, and a marker of 1 for list-valued grants.
    """

    source: BenefitSource
    benefit_type: BenefitType
    target: str
    value: int = 0
    description: str = ""


class BenefitLedger(BaseModel):
    entries: List[GrantedBenefit] = Field(default_factory=list)

    def add_benefit(self, entry: GrantedBenefit) -> None:
        self.entries.append(entry)

    def get_benefits_by_source(self, source_type: str, source_name: str) -> List[GrantedBenefit]:
        return [e for e in self.entries if e.source.matches(source_type, source_name)]

    def get_benefits_by_type(self, benefit_type: BenefitType) -> List[GrantedBenefit]:
        return [e for e in self.entries if e.benefit_type == benefit_type]

    def remove_benefits_by_source(self, source_type: str, source_name: str) -> List[GrantedBenefit]:
        removed: List[GrantedBenefit] = []
        kept: List[GrantedBenefit] = []
        for e in self.entries:
            (removed if e.source.matches(source_type, source_name) else kept).append(e)
        self.entries = kept
        return removed

    def count_target(self, benefit_type: BenefitType, target: str) -> int:
        key = target.lower()
        return sum(
            1
            for e in self.entries
            if e.benefit_type == benefit_type and e.target.lower() == key
        )

    def sources(self) -> List[BenefitSource]:
        seen: List[BenefitSource] = []
        for e in self.entries:
            if e.source not in seen:
                seen.append(e.source)
        return seen

    def __len__(self) -> int:
        return len(self.entries)
