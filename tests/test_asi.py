import pytest

from heroledger.engine import apply_asi_choice, check_asi_available, remove_asi_choice
from heroledger.errors import ValidationError
from heroledger.models import Ability, AbilityBoost, ASIChoice


def boosts(*pairs):
    return ASIChoice(type="ability", ability_boosts=[AbilityBoost(ability=a, amount=n) for a, n in pairs])


def test_asi_levels():
    assert check_asi_available("Wizard", 4)
    assert not check_asi_available("Wizard", 6)
    assert check_asi_available("Fighter", 6)
    assert check_asi_available("Fighter", 14)
    assert check_asi_available("Rogue", 10)
    assert not check_asi_available("Rogue", 14)


def test_ability_boost_and_single_use(tables, build):
    c = build("Fighter", 4, str=16)
    apply_asi_choice(c, tables, "Fighter", 4, boosts((Ability.STRENGTH, 2)))
    assert c.ability_scores.strength == 18
    assert 4 in c.classes[0].asi_choices
    with pytest.raises(ValidationError):
        apply_asi_choice(c, tables, "Fighter", 4, boosts((Ability.DEXTERITY, 2)))


def test_split_boost(tables, build):
    c = build("Fighter", 4, str=15, con=13)
    apply_asi_choice(c, tables, "Fighter", 4, boosts((Ability.STRENGTH, 1), (Ability.CONSTITUTION, 1)))
    assert (c.ability_scores.strength, c.ability_scores.constitution) == (16, 14)


@pytest.mark.parametrize(
    "choice",
    [
        boosts((Ability.STRENGTH, 1)),
        boosts((Ability.STRENGTH, 2), (Ability.DEXTERITY, 1)),
        boosts(),
    ],
)
def test_boosts_must_total_two(tables, build, choice):
    c = build("Fighter", 4)
    with pytest.raises(ValidationError):
        apply_asi_choice(c, tables, "Fighter", 4, choice)
    assert c.classes[0].asi_choices == {}


def test_boost_cannot_pass_twenty(tables, build):
    c = build("Fighter", 4, str=19)
    with pytest.raises(ValidationError, match="exceed"):
        apply_asi_choice(c, tables, "Fighter", 4, boosts((Ability.STRENGTH, 2)))
    assert c.ability_scores.strength == 19


def test_feat_instead_of_boost(tables, build):
    c = build("Fighter", 4, dex=12)
    apply_asi_choice(c, tables, "Fighter", 4, ASIChoice(type="feat", feat_name="Alert"))
    assert c.feats == ["Alert"]
    assert c.initiative == 6
    assert c.benefits.get_benefits_by_source("ASI Feat", "Fighter Level 4")
    assert remove_asi_choice(c, "Fighter", 4)
    assert c.feats == [] and c.initiative == 1
    assert not remove_asi_choice(c, "Fighter", 4)


def test_remove_ability_boost(tables, build):
    c = build("Fighter", 4, str=16)
    apply_asi_choice(c, tables, "Fighter", 4, boosts((Ability.STRENGTH, 2)))
    remove_asi_choice(c, "Fighter", 4)
    assert c.ability_scores.strength == 16
    assert c.classes[0].asi_choices == {}


def test_asi_needs_the_class(tables, build):
    with pytest.raises(ValidationError):
        apply_asi_choice(build("Fighter", 4), tables, "Wizard", 4, boosts((Ability.STRENGTH, 2)))
