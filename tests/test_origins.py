import pytest

from heroledger.engine import apply_feat, apply_origin, remove_origin
from heroledger.errors import NotFoundError, ValidationError
from heroledger.models import BenefitType, ProficiencyLevel, Skill


def test_soldier_grants_everything(tables, build):
    c = build("Fighter", str=15)
    apply_origin(c, tables, "Soldier", chosen_ability="Strength")
    assert c.ability_scores.strength == 17
    assert c.skills.get(Skill.ATHLETICS) == ProficiencyLevel.PROFICIENT
    assert c.skills.get(Skill.INTIMIDATION) == ProficiencyLevel.PROFICIENT
    assert c.tool_proficiencies == ["Gaming Set"]
    assert [it.name for it in c.inventory.items] == ["Spear", "Shortbow", "Healer's Kit"]
    assert c.inventory.gold == 14
    assert c.feats == ["Savage Attacker"]
    assert (c.origin, c.background) == ("Soldier", "Soldier")


def test_remove_origin_takes_its_feat_along(tables, build):
    c = build("Fighter", str=15)
    apply_origin(c, tables, "Soldier", chosen_ability="Strength")
    assert remove_origin(c)
    assert c.ability_scores.strength == 15
    assert c.skills.get(Skill.ATHLETICS) == ProficiencyLevel.NONE
    assert c.tool_proficiencies == []
    assert c.inventory.items == [] and c.inventory.gold == 0
    assert c.feats == []
    assert c.origin is None
    assert not c.benefits.get_benefits_by_source("feat", "Savage Attacker")
    assert not remove_origin(c)


def test_swapping_origins(tables, build):
    c = build("Rogue", dex=14)
    apply_origin(c, tables, "Soldier", chosen_ability="Dexterity")
    apply_origin(c, tables, "Criminal", chosen_ability="Dexterity")
    assert c.origin == "Criminal"
    assert c.ability_scores.dexterity == 16
    assert c.feats == ["Alert"]
    assert c.inventory.find("Spear") is None
    assert c.inventory.find("Dagger").quantity == 2
    assert "Thieves' Cant" in c.languages
    assert c.initiative == 3 + 5


def test_missing_choice_mutates_nothing(tables, build):
    c = build("Fighter")
    before = c.model_dump()
    with pytest.raises(ValidationError):
        apply_origin(c, tables, "Soldier")
    with pytest.raises(ValidationError):
        apply_origin(c, tables, "Soldier", chosen_ability="Charisma")
    assert c.model_dump() == before


def test_origin_feat_already_held(tables, build):
    c = build("Rogue")
    apply_feat(c, tables, "Alert")
    apply_origin(c, tables, "Criminal", chosen_ability="Dexterity")
    assert c.feats == ["Alert"]
    assert not c.benefits.get_benefits_by_type(BenefitType.FEAT)
    remove_origin(c)
    # the feat was taken on its own, so it stays
    assert c.feats == ["Alert"]
    assert c.initiative_bonus == 5


def test_sage_spells_and_gold(tables, build):
    c = build("Wizard")
    apply_origin(c, tables, "Sage", chosen_ability="Intelligence")
    assert c.inventory.gold == 50
    assert "Light" in c.species_spells
    remove_origin(c)
    assert c.species_spells == []


def test_unknown_origin(tables, build):
    with pytest.raises(NotFoundError):
        apply_origin(build("Fighter"), tables, "Astronaut")


def test_origin_feat_is_kept_apart_from_a_feat_taken_later(tables, build):
    c = build("Cleric", wis=15)
    apply_origin(c, tables, "Acolyte", chosen_ability="Wisdom")
    apply_feat(c, tables, "Magic Initiate")
    assert c.feats == ["Magic Initiate", "Magic Initiate"]
    assert c.benefits.get_benefits_by_source("origin feat", "Acolyte")

    assert remove_origin(c)
    assert c.feats == ["Magic Initiate"]
    assert c.find_feature("Magic Initiate Spell").source == "feat: Magic Initiate"
    assert "Cure Wounds" in c.species_spells
    assert not c.benefits.get_benefits_by_source("origin feat", "Acolyte")
