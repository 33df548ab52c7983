"""Class advancement: one level in one class per call.

``level_up`` validates everything first and only then mutates, so a failed
call leaves the character untouched.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional

from heroledger.errors import NotFoundError, ValidationError
from heroledger.logging import get_logger
from heroledger.models.abilities import Ability, AbilityScores, Skill
from heroledger.models.benefits import BenefitSource, BenefitType
from heroledger.models.character import Character, ClassLevel
from heroledger.rng import DiceRoller, get_default_roller
from heroledger.rules.calculations import calculate_proficiency_bonus
from heroledger.rules.core import (
    HIT_DIE,
    HP_PER_LEVEL,
    IMPROVEMENT_FEATURES,
    MAX_LEVEL,
    SUBCLASS_CHOICE_FEATURES,
    SUBCLASS_LEVEL,
    XP_THRESHOLDS,
)
from heroledger.rules.scaling import has_scaling, rest_type_for, scaled_uses
from heroledger.rules.tables import ClassDefinition, RuleTables, SubclassDefinition

from .applier import BenefitApplier
from .asi import check_asi_available
from .derived import update_derived_stats
from .features import evaluate_uses, rescale_feature
from .fighting_styles import apply_fighting_style, has_fighting_style
from .multiclass import can_multiclass_into, multiclass_proficiencies
from .origins import apply_origin
from .species import apply_species
from .spellcasting import class_casts, update_spellcasting

log = get_logger(__name__)


@dataclass
class LevelUpOptions:
    take_average: bool = True
    selected_skills: List[str] = field(default_factory=list)
    subclass: Optional[str] = None
    fighting_style: Optional[str] = None


@dataclass
class LevelUpResult:
    class_name: str
    new_class_level: int
    new_total_level: int
    hp_gained: int = 0
    features_gained: List[str] = field(default_factory=list)
    proficiencies_gained: List[str] = field(default_factory=list)
    is_new_class: bool = False
    requires_subclass: bool = False
    requires_skills: bool = False
    requires_spells: bool = False
    requires_asi: bool = False


def class_source(class_name: str) -> BenefitSource:
    return BenefitSource(type="Class", name=class_name)


def subclass_source(subclass_name: str) -> BenefitSource:
    return BenefitSource(type="Subclass", name=subclass_name)


def roll_hp(hit_die: int, con_mod: int, take_average: bool, roller: Optional[DiceRoller] = None) -> int:
    """Hit points for one level: a die roll or the rounded-up average, plus Con, minimum 1."""
    if take_average:
        gained = hit_die // 2 + 1 + con_mod
    else:
        gained = (roller or get_default_roller()).roll(hit_die) + con_mod
    return max(1, gained)


def xp_for_level(level: int) -> int:
    return XP_THRESHOLDS.get(max(1, min(level, MAX_LEVEL)), 0)


def level_for_xp(experience: int) -> int:
    level = 1
    for lvl, xp in sorted(XP_THRESHOLDS.items()):
        if experience >= xp:
            level = lvl
    return level


def can_level_up(character: Character) -> bool:
    return character.total_level < MAX_LEVEL or not character.classes


def subclass_level_for(class_name: str) -> int:
    return SUBCLASS_LEVEL.get(class_name.title(), 3)


def _validate(
    character: Character,
    tables: RuleTables,
    class_name: str,
    options: LevelUpOptions,
) -> ClassDefinition:
    class_def = tables.require_class(class_name)
    existing = character.get_class(class_def.name)

    if character.classes and character.total_level >= MAX_LEVEL:
        raise ValidationError("level", f"already at level {MAX_LEVEL}")
    if existing is None and character.classes:
        ok, reason = can_multiclass_into(character, class_def.name)
        if not ok:
            raise ValidationError("class", f"cannot multiclass into {class_def.name}: {reason}")

    if options.selected_skills:
        choices = class_def.skill_choices
        if existing is not None or character.classes or choices is None:
            raise ValidationError("selected_skills", f"no skill choices available for {class_def.name}")
        picked = [Skill.parse(s) for s in options.selected_skills]
        allowed = {Skill.parse(s) for s in choices.from_}
        bad = [s.value for s in picked if s not in allowed]
        if bad:
            raise ValidationError("selected_skills", f"not a {class_def.name} skill: {', '.join(bad)}")
        if len(set(picked)) > choices.choose:
            raise ValidationError("selected_skills", f"choose at most {choices.choose} skills")

    if options.subclass and class_def.subclasses and class_def.subclass(options.subclass) is None:
        raise NotFoundError("subclass", options.subclass)
    if options.fighting_style:
        style = tables.fighting_styles.get_by_name(options.fighting_style)
        if style is None:
            raise NotFoundError("fighting style", options.fighting_style)
        if has_fighting_style(character, style.name):
            raise ValidationError("fighting_style", f"already has {style.name}")
    return class_def


def _grant_proficiencies(
    character: Character,
    class_def: ClassDefinition,
    first_class: bool,
    applier: BenefitApplier,
) -> List[str]:
    gained: List[str] = []

    def add(values: List[str], name: str) -> None:
        if not any(v.lower() == name.lower() for v in values):
            values.append(name)
            gained.append(name)

    if first_class:
        for p in class_def.armor_proficiencies:
            add(character.armor_proficiencies, p)
        for p in class_def.weapon_proficiencies:
            add(character.weapon_proficiencies, p)
        # tools can overlap with origin and feat grants
        for p in class_def.tool_proficiencies:
            if not any(t.lower() == p.lower() for t in character.tool_proficiencies):
                gained.append(p)
            applier.add_tool_proficiency(class_source(class_def.name), p)
        for s in class_def.saving_throws:
            ability = Ability.parse(s)
            if ability not in character.saving_throws:
                character.saving_throws.append(ability)
                gained.append(f"{ability.value} saving throws")
        return gained

    for p in multiclass_proficiencies(class_def.name):
        if "armor" in p.lower() or p.lower() == "shields":
            add(character.armor_proficiencies, p)
        else:
            add(character.weapon_proficiencies, p)
    return gained


def _grant_class_features(
    character: Character,
    class_def: ClassDefinition,
    level: int,
    applier: BenefitApplier,
) -> List[str]:
    source = class_source(class_def.name)
    gained: List[str] = []
    for fd in class_def.features_at(level):
        if fd.name in SUBCLASS_CHOICE_FEATURES:
            continue
        improved = IMPROVEMENT_FEATURES.get(fd.name)
        if improved is not None:
            target = character.find_feature(improved)
            if target is not None:
                if has_scaling(class_def.name, improved):
                    new_max = scaled_uses(class_def.name, improved, level)
                else:
                    new_max = evaluate_uses(fd, character, class_def.name)
                rescale_feature(target, new_max)
                gained.append(fd.name)
            continue
        if any(f.name == fd.name and f.source == source.tag for f in character.features):
            continue
        applier.add_feature(source, fd, class_name=class_def.name)
        gained.append(fd.name)

    # features already held whose uses scale with class level
    for f in character.features:
        if f.source == source.tag and has_scaling(class_def.name, f.name):
            new_max = scaled_uses(class_def.name, f.name, level)
            if new_max != f.max_uses:
                rescale_feature(f, new_max)
            f.rest_type = rest_type_for(class_def.name, f.name, level) or f.rest_type
    return gained


def _grant_subclass_features(
    character: Character,
    subclass: SubclassDefinition,
    class_name: str,
    level: int,
    applier: BenefitApplier,
) -> List[str]:
    source = subclass_source(subclass.name)
    gained: List[str] = []
    for at_level in sorted(subclass.features_by_level):
        if at_level > level:
            break
        for fd in subclass.features_by_level[at_level]:
            if any(f.name == fd.name and f.source == source.tag for f in character.features):
                continue
            applier.add_feature(source, fd, class_name=class_name)
            gained.append(fd.name)
    return gained


def _granted_hp(character: Character) -> int:
    """Max HP held by ledger entries rather than by hit dice."""
    return sum(
        e.value for e in character.benefits.get_benefits_by_type(BenefitType.HP) if e.target != HP_PER_LEVEL
    )


def _grow_per_level_hp(character: Character, applier: BenefitApplier) -> int:
    gained = 0
    for marker in character.benefits.get_benefits_by_type(BenefitType.HP):
        if marker.target == HP_PER_LEVEL:
            applier.add_hp(marker.source, marker.value, heal=False)
            gained += marker.value
    return gained


def level_up(
    character: Character,
    tables: RuleTables,
    class_name: str,
    options: Optional[LevelUpOptions] = None,
    roller: Optional[DiceRoller] = None,
) -> LevelUpResult:
    options = options or LevelUpOptions()
    class_def = _validate(character, tables, class_name, options)
    name = class_def.name

    first_class = not character.classes
    cl = character.get_class(name)
    is_new_class = cl is None
    if cl is None:
        cl = ClassLevel(class_name=name, level=1)
        character.classes.append(cl)
    else:
        cl.level += 1
    character.level = character.total_level
    character.proficiency_bonus = calculate_proficiency_bonus(character.level)
    result = LevelUpResult(
        class_name=name,
        new_class_level=cl.level,
        new_total_level=character.level,
        is_new_class=is_new_class,
    )

    applier = BenefitApplier(character, tables)
    hit_die = class_def.hit_die or HIT_DIE.get(name, 8)
    con_mod = character.ability_mod(Ability.CONSTITUTION)
    if first_class:
        # the full hit die; HP already granted by a species or feat stays on top
        result.hp_gained = max(1, hit_die + con_mod)
        character.max_hp = result.hp_gained + _granted_hp(character)
        character.current_hp = character.max_hp
    else:
        result.hp_gained = roll_hp(hit_die, con_mod, options.take_average, roller)
        character.max_hp += result.hp_gained
        character.current_hp += result.hp_gained
        result.hp_gained += _grow_per_level_hp(character, applier)

    if is_new_class:
        result.proficiencies_gained = _grant_proficiencies(character, class_def, first_class, applier)

    result.features_gained = _grant_class_features(character, class_def, cl.level, applier)

    if options.subclass:
        chosen = class_def.subclass(options.subclass)
        cl.subclass = chosen.name if chosen else options.subclass
    if cl.subclass:
        sc = class_def.subclass(cl.subclass)
        if sc is not None:
            result.features_gained += _grant_subclass_features(character, sc, name, cl.level, applier)

    if first_class and class_def.skill_choices and class_def.skill_choices.choose > 0:
        if options.selected_skills:
            source = class_source(name)
            for s in dict.fromkeys(Skill.parse(s) for s in options.selected_skills):
                applier.add_skill_proficiency(source, s)
                result.proficiencies_gained.append(s.value)
        else:
            result.requires_skills = True

    if options.fighting_style:
        apply_fighting_style(character, tables, options.fighting_style, class_name=name)

    if class_casts(class_def, cl.subclass):
        result.requires_spells = update_spellcasting(character, class_def)

    result.requires_subclass = bool(class_def.subclasses) and cl.level == subclass_level_for(name) and not cl.subclass
    result.requires_asi = check_asi_available(name, cl.level)

    character.experience = max(character.experience, xp_for_level(character.level))
    update_derived_stats(character)
    log.debug(
        "%s leveled %s to %d (total %d, +%d HP, features %s)",
        character.name,
        name,
        cl.level,
        character.level,
        result.hp_gained,
        result.features_gained,
    )
    return result


def level_up_preview(character: Character, tables: RuleTables, class_name: str) -> LevelUpResult:
    """What the next level in ``class_name`` would bring, taking average HP.

    Works on a copy; ``character`` is never touched.
    """
    return level_up(character.model_copy(deep=True), tables, class_name, LevelUpOptions())


def create_character(
    tables: RuleTables,
    name: str,
    class_name: str,
    abilities: Dict[str, int],
    options: Optional[LevelUpOptions] = None,
    species: Optional[str] = None,
    origin: Optional[str] = None,
    origin_ability: Optional[str] = None,
) -> Character:
    """A level-1 character with the first level's maximum hit points."""
    scores = AbilityScores(**{Ability.parse(k).field_name: v for k, v in abilities.items()})
    character = Character(name=name, ability_scores=scores)
    level_up(character, tables, class_name, options)
    if species:
        apply_species(character, tables, species)
    if origin:
        apply_origin(character, tables, origin, chosen_ability=origin_ability)
    update_derived_stats(character)
    return character
