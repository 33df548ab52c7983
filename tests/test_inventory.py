import pytest

from heroledger.engine import equip_item, remove_item, unequip_item
from heroledger.engine.inventory import format_inventory
from heroledger.errors import NotFoundError


def stock(c, tables, *names):
    for n in names:
        c.inventory.items.append(tables.items.get_by_name(n).to_item())


def test_one_suit_of_armor_at_a_time(tables, character):
    stock(character, tables, "Leather Armor", "Chain Mail", "Shield")
    equip_item(character, "Leather Armor")
    equip_item(character, "Shield")
    equip_item(character, "Chain Mail")
    assert [it.name for it in character.inventory.equipped()] == ["Chain Mail", "Shield"]
    assert character.armor_class == 18


def test_unequip(tables, character):
    stock(character, tables, "Shield")
    assert not unequip_item(character, "Shield")
    equip_item(character, "Shield")
    assert unequip_item(character, "Shield")
    assert character.armor_class == 12


def test_equip_missing_item(character):
    with pytest.raises(NotFoundError):
        equip_item(character, "Plate Armor")


def test_remove_item(tables, character):
    stock(character, tables, "Dagger")
    character.inventory.items[0].quantity = 2
    assert not remove_item(character, "Dagger", 3)
    assert remove_item(character, "Dagger")
    assert remove_item(character, "Dagger")
    assert character.inventory.items == []
    assert not remove_item(character, "Dagger")


def test_format_inventory(tables, character):
    assert format_inventory(character) == "(empty)"
    stock(character, tables, "Shield")
    equip_item(character, "Shield")
    character.inventory.gold = 12
    assert format_inventory(character) == "Shield x1 [E]; 12 gp"


def test_weight(tables, character):
    stock(character, tables, "Chain Mail", "Longsword")
    assert character.inventory.total_weight == 58
