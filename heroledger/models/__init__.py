from .abilities import Ability, AbilityScores, ProficiencyLevel, Skill, SkillEntry, Skills
from .benefits import BenefitLedger, BenefitSource, BenefitType, GrantedBenefit
from .character import (
    AbilityBoost,
    ASIChoice,
    Character,
    ClassLevel,
    Feature,
    Inventory,
    Item,
    ItemType,
    PactMagic,
    RestType,
    SlotPool,
    SpellBook,
    SpellSlots,
)

__all__ = [
    "AbilityBoost",
    "ASIChoice",
    "Ability",
    "AbilityScores",
    "BenefitLedger",
    "BenefitSource",
    "BenefitType",
    "Character",
    "ClassLevel",
    "Feature",
    "GrantedBenefit",
    "Inventory",
    "Item",
    "ItemType",
    "PactMagic",
    "ProficiencyLevel",
    "RestType",
    "Skill",
    "SkillEntry",
    "Skills",
    "SlotPool",
    "SpellBook",
    "SpellSlots",
]
