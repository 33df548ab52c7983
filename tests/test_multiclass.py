import pytest

from heroledger.engine import can_multiclass_into, level_up, multiclass_proficiencies
from heroledger.engine.multiclass import available_multiclass_options, prerequisite_text
from heroledger.errors import ValidationError
from heroledger.models import Ability, AbilityScores, Character


def test_fighter_takes_either_score():
    c = Character(ability_scores=AbilityScores(strength=10, dexterity=13))
    assert can_multiclass_into(c, "Fighter") == (True, "")


def test_monk_needs_both_scores():
    c = Character(ability_scores=AbilityScores(dexterity=13, wisdom=12))
    ok, reason = can_multiclass_into(c, "monk")
    assert not ok
    assert reason == "Requires Dexterity 13 and Wisdom 13"


def test_unknown_class():
    ok, reason = can_multiclass_into(Character(), "Astronaut")
    assert not ok and "Unknown class" in reason


def test_prerequisite_text():
    assert prerequisite_text("Fighter") == "Strength 13 or Dexterity 13"
    assert prerequisite_text("Wizard") == "Intelligence 13"


def test_options_exclude_held_classes(tables, build):
    c = build("Fighter", str=13, int=13)
    names = [cls.name for cls in available_multiclass_options(c, tables)]
    assert "Wizard" in names and "Barbarian" in names
    assert "Fighter" not in names and "Monk" not in names


def test_failed_prerequisite_mutates_nothing(tables, build):
    c = build("Fighter", str=15)
    before = c.model_dump()
    with pytest.raises(ValidationError):
        level_up(c, tables, "Wizard")
    assert c.model_dump() == before


def test_multiclass_grants_reduced_proficiencies(tables, build):
    c = build("Wizard", str=13, con=12)
    res = level_up(c, tables, "Fighter")
    assert res.is_new_class
    assert res.hp_gained == 7
    assert c.class_summary == "Wizard 1 / Fighter 1"
    assert c.total_level == 2
    assert "Shields" in c.armor_proficiencies
    assert "Martial Weapons" in c.weapon_proficiencies
    # saving throws only come from the first class
    assert c.saving_throws == [Ability.INTELLIGENCE, Ability.WISDOM]
    # no class skill picks when multiclassing
    assert not res.requires_skills


def test_multiclass_proficiency_table():
    assert multiclass_proficiencies("rogue")[0] == "Light Armor"
    assert multiclass_proficiencies("Wizard") == []
