import random
from dataclasses import dataclass, field
from typing import List, Optional, Protocol


class DiceRoller(Protocol):
    def roll(self, sides: int) -> int: ...

    def roll_multiple(self, count: int, sides: int) -> List[int]: ...


@dataclass
class SeededDiceRoller:
    seed: Optional[int] = None
    _r: random.Random = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._r = random.Random(self.seed)

    def roll(self, sides: int) -> int:
        if sides <= 0:
            return 0
        return self._r.randint(1, sides)

    def roll_multiple(self, count: int, sides: int) -> List[int]:
        return [self.roll(sides) for _ in range(max(0, count))]

    def roll_expression(self, dice: str) -> int:
        # naive parser for 'XdY+Z'
        expr = dice.lower().replace(" ", "")
        if "+" in expr:
            dice_part, mod_part = expr.split("+", 1)
            mod = int(mod_part)
        else:
            dice_part, mod = expr, 0
        count, sides = dice_part.split("d", 1)
        return sum(self.roll_multiple(int(count or 1), int(sides))) + mod


_default_roller: DiceRoller = SeededDiceRoller()


def get_default_roller() -> DiceRoller:
    return _default_roller


def set_default_roller(roller: DiceRoller) -> DiceRoller:
    """Swap the process-wide roller; returns the previous one so tests can restore it."""
    global _default_roller
    previous = _default_roller
    _default_roller = roller
    return previous
