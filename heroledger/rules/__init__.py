from .calculations import calculate_modifier, calculate_proficiency_bonus, parse_armor_ac
from .tables import (
    ClassDefinition,
    FeatDefinition,
    FeatureDefinition,
    FightingStyleDefinition,
    ItemDefinition,
    OriginDefinition,
    RuleTables,
    SpeciesDefinition,
    Table,
)

__all__ = [
    "ClassDefinition",
    "FeatDefinition",
    "FeatureDefinition",
    "FightingStyleDefinition",
    "ItemDefinition",
    "OriginDefinition",
    "RuleTables",
    "SpeciesDefinition",
    "Table",
    "calculate_modifier",
    "calculate_proficiency_bonus",
    "parse_armor_ac",
]
