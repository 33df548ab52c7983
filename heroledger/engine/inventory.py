from __future__ import annotations

from typing import Optional

from heroledger.errors import NotFoundError
from heroledger.models.character import Character, Item

from .derived import update_derived_stats


def _find(character: Character, name: str) -> Item:
    item = character.inventory.find(name)
    if item is None:
        raise NotFoundError("item", name)
    return item


def unequip_other_armor(character: Character, item: Item) -> None:
    """Only one suit of armor and one shield may be worn at a time."""
    for other in character.inventory.items:
        if other is item or not other.equipped:
            continue
        if item.is_armor and other.is_armor or item.is_shield and other.is_shield:
            other.equipped = False


def equip_item(character: Character, name: str) -> Item:
    item = _find(character, name)
    unequip_other_armor(character, item)
    item.equipped = True
    update_derived_stats(character)
    return item


def unequip_item(character: Character, name: str) -> bool:
    item = character.inventory.find(name)
    if item is None or not item.equipped:
        return False
    item.equipped = False
    update_derived_stats(character)
    return True


def remove_item(character: Character, name: str, qty: int = 1) -> bool:
    item: Optional[Item] = character.inventory.find(name)
    if item is None or item.quantity < qty:
        return False
    item.quantity -= qty
    if item.quantity == 0:
        character.inventory.items = [it for it in character.inventory.items if it is not item]
        if item.equipped:
            update_derived_stats(character)
    return True


def format_inventory(character: Character) -> str:
    items = character.inventory.items
    if not items:
        return "(empty)"
    parts = [f"{it.name} x{it.quantity}" + (" [E]" if it.equipped else "") for it in items]
    return ", ".join(parts) + f"; {character.inventory.gold:g} gp"
