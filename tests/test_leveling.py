import json

import pytest

from helpers import SequenceRoller

from heroledger.engine import (
    BenefitRemover,
    LevelUpOptions,
    apply_species,
    create_character,
    level_up,
    level_up_preview,
    roll_hp,
)
from heroledger.engine.leveling import can_level_up, level_for_xp, xp_for_level
from heroledger.errors import NotFoundError, ValidationError
from heroledger.models import Ability, AbilityScores, Character, ProficiencyLevel, RestType, Skill
from heroledger.rules.tables import RuleTables


def test_roll_hp_average_never_below_one():
    assert roll_hp(6, -5, True) == 1
    assert roll_hp(10, 2, True) == 8
    assert roll_hp(8, 0, True) == 5


def test_roll_hp_uses_the_roller():
    r = SequenceRoller([3])
    assert roll_hp(8, 1, False, r) == 4
    assert r.calls == [8]
    assert roll_hp(8, -3, False, SequenceRoller([1])) == 1


def test_create_fighter(tables):
    c = create_character(
        tables,
        "Brom",
        "Fighter",
        {"str": 16, "dex": 12, "con": 14},
        options=LevelUpOptions(selected_skills=["Athletics", "Perception"]),
    )
    assert c.level == 1 and c.class_summary == "Fighter 1"
    assert c.max_hp == 12 and c.current_hp == 12
    assert c.saving_throws == [Ability.STRENGTH, Ability.CONSTITUTION]
    assert "Heavy Armor" in c.armor_proficiencies
    sw = c.find_feature("Second Wind")
    assert (sw.max_uses, sw.rest_type, sw.source) == (1, RestType.SHORT, "Class: Fighter")
    assert c.skills.get(Skill.ATHLETICS) == ProficiencyLevel.PROFICIENT
    assert len(c.benefits.get_benefits_by_source("Class", "Fighter")) == 4


def test_level_up_adds_hp_features_and_flags(tables, build):
    c = build("Fighter", con=14)
    res = level_up(c, tables, "Fighter")
    assert res.hp_gained == 8
    assert c.max_hp == 20
    assert "Action Surge" in res.features_gained
    assert not res.requires_asi

    res = level_up(c, tables, "Fighter")
    assert res.requires_subclass
    res = level_up(c, tables, "Fighter")
    assert res.requires_asi
    assert c.experience == xp_for_level(4)


def test_subclass_features_granted(tables, build):
    c = build("Fighter", 2)
    res = level_up(c, tables, "Fighter", LevelUpOptions(subclass="Champion"))
    assert c.classes[0].subclass == "Champion"
    assert "Improved Critical" in res.features_gained
    assert c.find_feature("Improved Critical").source == "Subclass: Champion"
    assert c.class_summary == "Fighter (Champion) 3"


def test_scaling_features_refresh(tables, build):
    c = build("Barbarian", 2)
    assert c.find_feature("Rage").max_uses == 2
    level_up(c, tables, "Barbarian")
    rage = c.find_feature("Rage")
    assert rage.max_uses == 3 and rage.current_uses == 3


def test_features_are_not_granted_twice(tables, build):
    c = build("Monk", 3)
    names = [f.name for f in c.features]
    assert len(names) == len(set(names))
    assert c.find_feature("Focus Points").max_uses == 3


def test_unknown_class_leaves_character_untouched(tables, build):
    c = build("Wizard")
    before = c.model_dump()
    with pytest.raises(NotFoundError):
        level_up(c, tables, "Astronaut")
    assert c.model_dump() == before


def test_bad_skill_choice_rejected(tables):
    with pytest.raises(ValidationError):
        create_character(tables, "X", "Wizard", {}, options=LevelUpOptions(selected_skills=["Athletics"]))


def test_too_many_skill_choices_rejected(tables):
    opts = LevelUpOptions(selected_skills=["Arcana", "History", "Insight"])
    with pytest.raises(ValidationError):
        create_character(tables, "X", "Wizard", {}, options=opts)


def test_max_level(tables, build):
    c = build("Rogue", 20)
    assert c.total_level == 20
    with pytest.raises(ValidationError):
        level_up(c, tables, "Rogue")


def test_xp_helpers():
    assert xp_for_level(5) == 6500
    assert level_for_xp(6499) == 4
    assert level_for_xp(400000) == 20


def test_can_level_up_until_the_cap(build):
    assert can_level_up(build("Bard"))
    assert not can_level_up(build("Bard", 20))


def test_create_with_species_and_origin(tables):
    c = create_character(
        tables,
        "Ari",
        "Wizard",
        {"int": 15, "con": 12},
        species="Dwarf",
        origin="Sage",
        origin_ability="Intelligence",
    )
    assert c.ability_scores.intelligence == 17
    assert c.max_hp == 6 + 1 + 1
    assert c.species == "Dwarf" and c.origin == "Sage"
    assert "Magic Initiate" in c.feats


def test_first_level_reports_the_full_hit_die(tables):
    c = Character(name="New", ability_scores=AbilityScores(constitution=14))
    res = level_up(c, tables, "Fighter")
    assert res.hp_gained == 12
    assert c.max_hp == 12 and c.current_hp == 12


def test_first_level_keeps_hp_granted_before_any_class(tables):
    c = Character(name="New", ability_scores=AbilityScores(constitution=10))
    apply_species(c, tables, "Dwarf")
    level_up(c, tables, "Wizard")
    assert c.max_hp == 6 + 1


def test_shadow_arts_grants_darkvision_and_spells(tables, build):
    c = build("Monk", 3, subclass="Warrior of Shadow")
    assert c.darkvision == 60
    assert "Darkness" in c.species_spells and "Minor Illusion" in c.species_spells
    BenefitRemover(c).remove_all_benefits("Subclass", "Warrior of Shadow")
    assert c.darkvision == 0
    assert c.species_spells == []
    assert c.find_feature("Shadow Arts") is None


def test_implements_of_mercy_grants_proficiencies(tables, build):
    c = build("Monk", 3, subclass="Warrior of Mercy")
    assert c.skills.get(Skill.MEDICINE) == ProficiencyLevel.PROFICIENT
    assert c.skills.get(Skill.INSIGHT) == ProficiencyLevel.PROFICIENT
    assert "Herbalism Kit" in c.tool_proficiencies
    BenefitRemover(c).remove_all_benefits("Subclass", "Warrior of Mercy")
    assert c.skills.get(Skill.MEDICINE) == ProficiencyLevel.NONE
    assert "Herbalism Kit" not in c.tool_proficiencies


def test_preview_leaves_the_character_alone(tables, build):
    c = build("Fighter", 2, con=14)
    before = c.model_dump()
    res = level_up_preview(c, tables, "Fighter")
    assert (res.new_class_level, res.new_total_level) == (3, 3)
    assert res.hp_gained == 8
    assert res.requires_subclass
    assert c.model_dump() == before


def test_class_without_subclasses_never_asks_for_one(tmp_path):
    (tmp_path / "classes").mkdir()
    (tmp_path / "classes" / "commoner.json").write_text(
        json.dumps({"name": "Commoner", "hit_die": 6}), encoding="utf-8"
    )
    tables = RuleTables(tmp_path)
    c = create_character(tables, "Pat", "Commoner", {})
    for _ in range(3):
        res = level_up(c, tables, "Commoner")
        assert not res.requires_subclass
