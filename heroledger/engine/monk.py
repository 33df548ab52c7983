from __future__ import annotations

from typing import Optional, Tuple

from heroledger.models.character import Character, Feature
from heroledger.rng import DiceRoller, get_default_roller

FOCUS_FEATURES = ("Focus Points", "Ki")


def martial_arts_die(monk_level: int) -> str:
    if monk_level >= 17:
        return "1d12"
    if monk_level >= 10:
        return "1d10"
    if monk_level >= 4:
        return "1d8"
    return "1d6"


def _focus(character: Character) -> Optional[Feature]:
    for name in FOCUS_FEATURES:
        f = character.find_feature(name)
        if f is not None:
            return f
    return None


def focus_points(character: Character) -> Tuple[int, int]:
    """(current, max) focus points; (0, 0) without the feature."""
    f = _focus(character)
    return (f.current_uses, f.max_uses) if f else (0, 0)


def spend_focus_points(character: Character, count: int = 1) -> bool:
    f = _focus(character)
    if f is None or f.current_uses < count:
        return False
    f.current_uses -= count
    return True


def restore_focus_points(character: Character, count: int = 1) -> bool:
    f = _focus(character)
    if f is None:
        return False
    return f.restore(count)


def uncanny_metabolism(character: Character, roller: Optional[DiceRoller] = None) -> Tuple[int, int, bool]:
    """Regain all focus points and heal monk level + a Martial Arts die. (hp, focus, used)."""
    feature = character.find_feature("Uncanny Metabolism")
    if feature is None or not feature.use():
        return 0, 0, False
    roller = roller or get_default_roller()
    fp = 0
    focus = _focus(character)
    if focus is not None:
        fp = focus.max_uses - focus.current_uses
        focus.restore_all()
    level = character.class_level("Monk")
    sides = int(martial_arts_die(level).split("d", 1)[1])
    hp = level + roller.roll(sides)
    character.current_hp = min(character.max_hp, character.current_hp + hp)
    return hp, fp, True
