import pytest

from heroledger.engine import LevelUpOptions, apply_fighting_style, create_character, equip_item, remove_fighting_style
from heroledger.errors import NotFoundError, ValidationError


def defender(tables):
    c = create_character(tables, "Ser", "Fighter", {"str": 15}, options=LevelUpOptions(fighting_style="Defense"))
    c.inventory.items.append(tables.items.get_by_name("Chain Mail").to_item())
    return c


def test_defense_only_counts_in_armor(tables):
    c = defender(tables)
    assert c.fighting_style == "Defense"
    assert c.classes[0].fighting_style == "Defense"
    assert c.armor_class == 10
    equip_item(c, "Chain Mail")
    assert c.armor_class == 17


def test_style_cannot_be_taken_twice(tables):
    c = defender(tables)
    with pytest.raises(ValidationError):
        apply_fighting_style(c, tables, "Defense", class_name="Fighter")


def test_remove_defense(tables):
    c = defender(tables)
    equip_item(c, "Chain Mail")
    assert remove_fighting_style(c, "Defense")
    assert c.armor_class == 16
    assert c.style_ac_bonus == 0
    assert c.fighting_style is None and c.classes[0].fighting_style is None
    assert not remove_fighting_style(c, "Defense")


def test_style_without_sheet_effect_is_still_tracked(tables, build):
    c = build("Ranger")
    apply_fighting_style(c, tables, "Archery", class_name="Ranger")
    assert c.fighting_style == "Archery"
    with pytest.raises(ValidationError):
        apply_fighting_style(c, tables, "Archery")


def test_style_needs_class_levels(tables, build):
    with pytest.raises(ValidationError):
        apply_fighting_style(build("Wizard"), tables, "Defense", class_name="Fighter")


def test_unknown_style(tables, build):
    with pytest.raises(NotFoundError):
        apply_fighting_style(build("Fighter"), tables, "Interpretive Dance")
