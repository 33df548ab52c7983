from __future__ import annotations

from heroledger.models.benefits import BenefitSource
from heroledger.models.character import Character
from heroledger.rules.tables import RuleTables

from .applier import BenefitApplier
from .derived import update_derived_stats
from .remover import BenefitRemover

SPECIES = "species"
BASE_SPEED = 30


def apply_species(character: Character, tables: RuleTables, species_name: str) -> None:
    """Apply a species' traits as ledger grants; swapping species reverses the old one first."""
    sp = tables.require_species(species_name)
    if character.species:
        remove_species(character)

    source = BenefitSource(type=SPECIES, name=sp.name)
    applier = BenefitApplier(character, tables)
    if sp.speed != BASE_SPEED:
        applier.add_speed(source, sp.speed - BASE_SPEED)
    if sp.darkvision:
        applier.add_darkvision(source, sp.darkvision)
    for lang in sp.languages:
        applier.add_language(source, lang)
    for res in sp.resistances:
        applier.add_resistance(source, res)
    for skill in sp.skill_proficiencies:
        applier.add_skill_proficiency(source, skill)
    for spell in sp.spells:
        applier.add_spell(source, spell)
    if sp.hp_per_level:
        applier.add_hp_per_level(source, sp.hp_per_level)
    for fd in sp.features:
        applier.add_feature(source, fd)

    character.species = sp.name
    update_derived_stats(character)


def remove_species(character: Character) -> bool:
    if not character.species:
        return False
    name = character.species
    character.species = None
    BenefitRemover(character).remove_all_benefits(SPECIES, name)
    return True
