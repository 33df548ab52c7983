import pytest

from heroledger.engine import BenefitApplier
from heroledger.errors import ValidationError
from heroledger.models import Ability, BenefitSource, BenefitType, ProficiencyLevel, Skill
from heroledger.rules.tables import FeatureDefinition

SRC = BenefitSource(type="feat", name="Test")


def test_ability_score_is_capped_but_records_requested_increase(character):
    character.ability_scores.strength = 19
    BenefitApplier(character).add_ability_score(SRC, "Strength", 2)
    assert character.ability_scores.strength == 20
    (e,) = character.benefits.get_benefits_by_type(BenefitType.ABILITY_SCORE)
    assert e.value == 2 and e.target == "Strength"


def test_unknown_ability_fails_without_ledger_entry(character):
    with pytest.raises(ValidationError):
        BenefitApplier(character).add_ability_score(SRC, "Luck", 1)
    assert len(character.benefits) == 0


def test_skill_records_prior_level_and_upgrades_one_step(character):
    a = BenefitApplier(character)
    a.add_skill_proficiency(SRC, "perception")
    a.add_skill_proficiency(SRC, Skill.PERCEPTION)
    a.add_skill_proficiency(SRC, Skill.PERCEPTION)
    assert character.skills.get(Skill.PERCEPTION) == ProficiencyLevel.EXPERTISE
    values = [e.value for e in character.benefits.get_benefits_by_type(BenefitType.SKILL)]
    assert values == [0, 1, 2]


def test_unknown_skill_raises(character):
    with pytest.raises(ValidationError):
        BenefitApplier(character).add_skill_proficiency(SRC, "Basket Weaving")


def test_list_grants_never_duplicate_but_always_log(character):
    a = BenefitApplier(character)
    a.add_language(SRC, "Elvish")
    a.add_language(SRC, "Elvish")
    a.add_resistance(SRC, "Fire")
    a.add_tool_proficiency(SRC, "Thieves' Tools")
    assert character.languages == ["Common", "Elvish"]
    assert character.benefits.count_target(BenefitType.LANGUAGE, "Elvish") == 2
    assert character.resistances == ["Fire"]
    assert character.tool_proficiencies == ["Thieves' Tools"]


def test_additive_grants(character):
    a = BenefitApplier(character)
    a.add_speed(SRC, 10)
    a.add_initiative(SRC, 5)
    a.add_ac_bonus(SRC, 1)
    a.add_darkvision(SRC, 60)
    assert character.speed == 40
    assert character.initiative_bonus == 5
    assert character.ac_bonus == 1
    assert character.darkvision == 60


def test_hp_grant_heals_to_new_max(character):
    character.current_hp = 3
    BenefitApplier(character).add_hp(SRC, 4)
    assert character.max_hp == 14
    assert character.current_hp == 14


def test_passive_bonus_only_for_passive_skills(character):
    a = BenefitApplier(character)
    a.add_passive_bonus(SRC, "Perception", 5)
    assert character.passive_bonuses == {"Perception": 5}
    assert character.passive_score("Perception") == 15
    with pytest.raises(ValidationError):
        a.add_passive_bonus(SRC, "Athletics", 5)


def test_feature_uses_formula(character):
    fd = FeatureDefinition(name="Luck Points", uses_formula="proficiency", rest_type="Long Rest")
    f = BenefitApplier(character).add_feature(SRC, fd)
    assert (f.max_uses, f.current_uses, f.source) == (2, 2, "feat: Test")
    assert character.benefits.entries[-1].value == 2


def test_passive_feature_starts_at_zero(character):
    f = BenefitApplier(character).add_feature(SRC, FeatureDefinition(name="Darkvision", max_uses=0))
    assert f.max_uses == 0 and f.current_uses == 0


def test_items_and_gold(character, tables):
    a = BenefitApplier(character, tables)
    a.add_item(SRC, "50 GP")
    a.add_item(SRC, "Dagger")
    a.add_item(SRC, "Dagger")
    a.add_item(SRC, "Lucky Coin")
    assert character.inventory.gold == 50
    dagger = character.inventory.find("Dagger")
    assert dagger.quantity == 2 and dagger.weight == 1
    assert character.inventory.find("Lucky Coin") is not None
    gold = [e for e in character.benefits.entries if e.target == "gold_cp"]
    assert gold[0].value == 5000


def test_ability_enum_accepts_abbreviations():
    assert Ability.parse("DEX") is Ability.DEXTERITY
    assert Ability.parse("wisdom") is Ability.WISDOM


def test_feature_grants_are_ledgered_under_the_feature_source(character):
    shadow = FeatureDefinition(name="Shadow Arts", darkvision=60, spells=["Darkness"], skill_proficiencies=["Stealth"])
    BenefitApplier(character).add_feature(SRC, shadow)
    assert character.darkvision == 60
    assert character.species_spells == ["Darkness"]
    assert character.skills.get(Skill.STEALTH) == ProficiencyLevel.PROFICIENT
    kinds = [e.benefit_type for e in character.benefits.get_benefits_by_source(SRC.type, SRC.name)]
    assert kinds == [BenefitType.FEATURE, BenefitType.SKILL, BenefitType.SPELL, BenefitType.DARKVISION]


def test_per_level_hp_marks_the_rate(character):
    character.level = 3
    assert BenefitApplier(character).add_hp_per_level(SRC, 2) == 6
    assert character.max_hp == 16
    marker, hp = character.benefits.get_benefits_by_type(BenefitType.HP)
    assert (marker.target, marker.value) == ("max_hp_per_level", 2)
    assert (hp.target, hp.value) == ("max_hp", 6)
