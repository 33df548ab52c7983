from __future__ import annotations

from enum import Enum, IntEnum
from typing import List

from pydantic import BaseModel, Field

from heroledger.errors import ValidationError


class Ability(str, Enum):
    STRENGTH = "Strength"
    DEXTERITY = "Dexterity"
    CONSTITUTION = "Constitution"
    INTELLIGENCE = "Intelligence"
    WISDOM = "Wisdom"
    CHARISMA = "Charisma"

    @property
    def abbr(self) -> str:
        return self.value[:3].lower()

    @property
    def field_name(self) -> str:
        return self.value.lower()

    @classmethod
    def parse(cls, text: "str | Ability") -> "Ability":
        """Resolve free-form input ("STR", "dexterity", "Wisdom score") to an ability."""
        if isinstance(text, Ability):
            return text
        key = (text or "").strip().lower()
        if key:
            for a in cls:
                if key in (a.field_name, a.abbr):
                    return a
            for a in cls:
                if a.abbr in key:
                    return a
        raise ValidationError("ability", f"unknown ability '{text}'")


ABILITY_ORDER = tuple(Ability)


class ProficiencyLevel(IntEnum):
    NONE = 0
    PROFICIENT = 1
    EXPERTISE = 2

    def upgraded(self) -> "ProficiencyLevel":
        if self is ProficiencyLevel.EXPERTISE:
            return self
        return ProficiencyLevel(self + 1)


class Skill(str, Enum):
    ACROBATICS = "Acrobatics"
    ANIMAL_HANDLING = "Animal Handling"
    ARCANA = "Arcana"
    ATHLETICS = "Athletics"
    DECEPTION = "Deception"
    HISTORY = "History"
    INSIGHT = "Insight"
    INTIMIDATION = "Intimidation"
    INVESTIGATION = "Investigation"
    MEDICINE = "Medicine"
    NATURE = "Nature"
    PERCEPTION = "Perception"
    PERFORMANCE = "Performance"
    PERSUASION = "Persuasion"
    RELIGION = "Religion"
    SLEIGHT_OF_HAND = "Sleight of Hand"
    STEALTH = "Stealth"
    SURVIVAL = "Survival"

    @property
    def ability(self) -> Ability:
        return SKILL_ABILITIES[self]

    @classmethod
    def parse(cls, text: "str | Skill") -> "Skill":
        if isinstance(text, Skill):
            return text
        key = (text or "").strip().lower().replace("_", " ").replace("-", " ")
        for s in cls:
            if s.value.lower() == key:
                return s
        raise ValidationError("skill", f"unknown skill '{text}'")


SKILL_ABILITIES = {
    Skill.ATHLETICS: Ability.STRENGTH,
    Skill.ACROBATICS: Ability.DEXTERITY,
    Skill.SLEIGHT_OF_HAND: Ability.DEXTERITY,
    Skill.STEALTH: Ability.DEXTERITY,
    Skill.ARCANA: Ability.INTELLIGENCE,
    Skill.HISTORY: Ability.INTELLIGENCE,
    Skill.INVESTIGATION: Ability.INTELLIGENCE,
    Skill.NATURE: Ability.INTELLIGENCE,
    Skill.RELIGION: Ability.INTELLIGENCE,
    Skill.ANIMAL_HANDLING: Ability.WISDOM,
    Skill.INSIGHT: Ability.WISDOM,
    Skill.MEDICINE: Ability.WISDOM,
    Skill.PERCEPTION: Ability.WISDOM,
    Skill.SURVIVAL: Ability.WISDOM,
    Skill.DECEPTION: Ability.CHARISMA,
    Skill.INTIMIDATION: Ability.CHARISMA,
    Skill.PERFORMANCE: Ability.CHARISMA,
    Skill.PERSUASION: Ability.CHARISMA,
}


def calculate_modifier(score: int) -> int:
    return (score - 10) // 2


class AbilityScores(BaseModel):
    strength: int = 10
    dexterity: int = 10
    constitution: int = 10
    intelligence: int = 10
    wisdom: int = 10
    charisma: int = 10

    def get(self, ability: Ability | str) -> int:
        return getattr(self, Ability.parse(ability).field_name)

    def set(self, ability: Ability | str, value: int) -> None:
        setattr(self, Ability.parse(ability).field_name, value)

    def modifier(self, ability: Ability | str) -> int:
        return calculate_modifier(self.get(ability))


class SkillEntry(BaseModel):
    skill: Skill
    proficiency: ProficiencyLevel = ProficiencyLevel.NONE


def _all_skills() -> List[SkillEntry]:
    return [SkillEntry(skill=s) for s in Skill]


class Skills(BaseModel):
    entries: List[SkillEntry] = Field(default_factory=_all_skills)

    def _entry(self, skill: Skill | str) -> SkillEntry:
        skill = Skill.parse(skill)
        for e in self.entries:
            if e.skill is skill:
                return e
        # older saves may be missing a skill row
        e = SkillEntry(skill=skill)
        self.entries.append(e)
        return e

    def get(self, skill: Skill | str) -> ProficiencyLevel:
        return self._entry(skill).proficiency

    def set(self, skill: Skill | str, level: ProficiencyLevel) -> None:
        self._entry(skill).proficiency = ProficiencyLevel(level)

    def proficient(self) -> List[Skill]:
        return [e.skill for e in self.entries if e.proficiency > ProficiencyLevel.NONE]
