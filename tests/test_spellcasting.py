from heroledger.engine import LevelUpOptions, level_up
from heroledger.engine.spellcasting import spellcasting_summary
from heroledger.models import Ability, ClassLevel
from heroledger.rules.spellcasting import (
    CasterType,
    caster_type,
    effective_caster_level,
    multiclass_spell_slots,
    pact_magic_for,
    spells_known,
)


def levels(*pairs):
    return [ClassLevel(class_name=n, level=lv, subclass=sc) for n, lv, sc in pairs]


def test_fighter_wizard_counts_only_the_wizard():
    slots = multiclass_spell_slots(levels(("Fighter", 3, None), ("Wizard", 3, None)))
    assert slots.maximums()[:3] == [4, 2, 0]


def test_third_caster_subclass_counts_a_third():
    classes = levels(("Fighter", 3, "Eldritch Knight"), ("Wizard", 3, None))
    assert effective_caster_level(classes) == 4
    assert multiclass_spell_slots(classes).maximums()[:2] == [4, 3]


def test_half_caster_rounds_down():
    assert multiclass_spell_slots(levels(("Paladin", 2, None))).maximums()[:2] == [2, 0]
    assert multiclass_spell_slots(levels(("Paladin", 1, None))).maximums() == [0] * 9


def test_caster_level_is_capped():
    assert effective_caster_level(levels(("Wizard", 20, None), ("Cleric", 20, None))) == 20


def test_pact_magic_is_separate():
    classes = levels(("Warlock", 3, None))
    assert multiclass_spell_slots(classes).maximums() == [0] * 9
    pact = pact_magic_for(3)
    assert (pact.slots, pact.slot_level, pact.current) == (2, 2, 2)
    assert pact_magic_for(0).slots == 0


def test_caster_types():
    assert caster_type("Ranger") is CasterType.HALF
    assert caster_type("Rogue") is CasterType.NONE
    assert caster_type("Rogue", "Arcane Trickster") is CasterType.THIRD
    assert spells_known("Sorcerer", 1) == 2


def test_prepared_caster_on_level_up(build):
    c = build("Cleric", wis=16)
    book = c.spellbook
    assert book.spellcasting_ability is Ability.WISDOM
    assert book.is_prepared_caster and not book.requires_spell_selection
    assert book.max_prepared_spells == 4
    assert book.spell_save_dc == 13
    assert book.cantrips_known == 3
    assert book.slots.level1.maximum == 2


def test_known_caster_needs_picks(tables, build):
    c = build("Sorcerer", cha=16)
    assert c.spellbook.requires_spell_selection
    res = level_up(c, tables, "Sorcerer")
    assert res.requires_spells
    assert c.spellbook.slots.level1.maximum == 3


def test_warlock_gets_pact_pool_only(build):
    c = build("Warlock", cha=16)
    assert c.spellbook.pact_magic.slots == 1
    assert c.spellbook.slots.maximums() == [0] * 9
    assert c.spellbook.spellcasting_ability is Ability.CHARISMA


def test_eldritch_knight_starts_casting_at_three(tables, build):
    c = build("Fighter", 2, int=14)
    assert c.spellbook.spellcasting_ability is None
    res = level_up(c, tables, "Fighter", LevelUpOptions(subclass="Eldritch Knight"))
    assert res.requires_spells
    assert c.spellbook.spellcasting_ability is Ability.INTELLIGENCE
    assert c.spellbook.slots.level1.maximum == 2


def test_slots_recomputed_across_classes(tables, build):
    c = build("Fighter", 3, int=13)
    for _ in range(3):
        level_up(c, tables, "Wizard")
    assert c.spellbook.slots.maximums()[:2] == [4, 2]
    summary = spellcasting_summary(c)
    assert summary["caster_level"] == 3
    assert summary["method"] == "spellbook"
    assert summary["rituals"]
