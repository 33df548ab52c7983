from heroledger.models import Item, ItemType


class SequenceRoller:
    """Returns queued values in order; records the die sizes asked for."""

    def __init__(self, values):
        self.values = list(values)
        self.calls = []

    def roll(self, sides):
        self.calls.append(sides)
        return self.values.pop(0)

    def roll_multiple(self, count, sides):
        return [self.roll(sides) for _ in range(count)]


def equip(c, tables, name):
    item = tables.items.get_by_name(name).to_item()
    item.equipped = True
    c.inventory.items.append(item)
    return item


def weapon(name, equipped=True):
    return Item(name=name, item_type=ItemType.WEAPON, equipped=equipped)
