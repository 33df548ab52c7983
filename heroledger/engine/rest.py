from __future__ import annotations

from typing import Dict, List

from heroledger.logging import get_logger
from heroledger.models.character import Character, RestType

log = get_logger(__name__)

SHORT_REST_RECHARGE = (RestType.SHORT, RestType.DAILY)


def use_feature(character: Character, name: str) -> bool:
    feature = character.find_feature(name)
    if feature is None:
        return False
    return feature.use()


def restore_feature(character: Character, name: str, amount: int = 1) -> bool:
    feature = character.find_feature(name)
    if feature is None:
        return False
    return feature.restore(amount)


def use_spell_slot(character: Character, level: int) -> bool:
    """Spend a slot of ``level``, falling back to a pact slot of the same level."""
    book = character.spellbook
    if 1 <= level <= 9:
        pool = book.slots.pool(level)
        if pool.current > 0:
            pool.current -= 1
            return True
    pact = book.pact_magic
    if pact.slot_level == level and pact.current > 0:
        pact.current -= 1
        return True
    return False


def short_rest(character: Character) -> Dict[str, object]:
    restored: List[str] = []
    for f in character.features:
        if f.rest_type in SHORT_REST_RECHARGE and f.current_uses < f.max_uses:
            f.restore_all()
            restored.append(f.name)
    pact = character.spellbook.pact_magic
    pact_restored = pact.slots - pact.current
    pact.current = pact.slots
    log.debug("short rest: %s, %d pact slots", restored, pact_restored)
    return {"features": restored, "pact_slots": pact_restored}


def long_rest(character: Character) -> Dict[str, object]:
    healed = character.max_hp - character.current_hp
    character.current_hp = character.max_hp
    character.temp_hp = 0
    restored: List[str] = []
    for f in character.features:
        if f.rest_type != RestType.NONE and f.current_uses < f.max_uses:
            f.restore_all()
            restored.append(f.name)
    book = character.spellbook
    book.slots.restore_all()
    book.pact_magic.current = book.pact_magic.slots
    log.debug("long rest: healed %d, features %s", healed, restored)
    return {"healed": healed, "features": restored}
