from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, Generic, Iterable, List, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field, ValidationError as PydanticValidationError, field_validator

from heroledger.config import resolve_data_dir
from heroledger.errors import NotFoundError
from heroledger.logging import get_logger
from heroledger.models.character import Item, ItemType, RestType

from .calculations import armor_category, parse_armor_ac

log = get_logger(__name__)


class FeatureDefinition(BaseModel):
    name: str
    description: str = ""
    max_uses: str = ""
    rest_type: RestType = RestType.NONE
    uses_formula: str = ""
    effect_formula: str = ""
    # fixed grants ledgered under whatever source grants the feature
    skill_proficiencies: List[str] = Field(default_factory=list)
    tool_proficiencies: List[str] = Field(default_factory=list)
    languages: List[str] = Field(default_factory=list)
    resistances: List[str] = Field(default_factory=list)
    spells: List[str] = Field(default_factory=list)
    darkvision: int = 0
    speed_bonus: int = 0

    @field_validator("max_uses", "uses_formula", mode="before")
    @classmethod
    def _stringify(cls, v: Any) -> str:
        return "" if v is None else str(v)

    @field_validator("rest_type", mode="before")
    @classmethod
    def _rest(cls, v: Any) -> RestType:
        return RestType.parse(v)


class SkillChoices(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    choose: int = 0
    from_: List[str] = Field(default_factory=list, alias="from")


class SpellcastingDefinition(BaseModel):
    ability: str
    ritual_casting: bool = False
    preparation_formula: str = ""
    spells_known_formula: str = ""


class LevelFeatures(BaseModel):
    level: int
    features: List[FeatureDefinition] = Field(default_factory=list)


class SubclassDefinition(BaseModel):
    name: str
    description: str = ""
    subclass_level: Optional[int] = None
    features_by_level: Dict[int, List[FeatureDefinition]] = Field(default_factory=dict)
    expanded_spells: List[str] = Field(default_factory=list)


class ClassDefinition(BaseModel):
    name: str
    description: str = ""
    hit_die: int = 8
    primary_ability: str = ""
    saving_throws: List[str] = Field(default_factory=list)
    armor_proficiencies: List[str] = Field(default_factory=list)
    weapon_proficiencies: List[str] = Field(default_factory=list)
    tool_proficiencies: List[str] = Field(default_factory=list)
    skill_choices: Optional[SkillChoices] = None
    starting_equipment: List[str] = Field(default_factory=list)
    spellcasting: Optional[SpellcastingDefinition] = None
    level_1_features: List[FeatureDefinition] = Field(default_factory=list)
    level_progression: List[LevelFeatures] = Field(default_factory=list)
    subclasses: List[SubclassDefinition] = Field(default_factory=list)

    def features_at(self, level: int) -> List[FeatureDefinition]:
        for entry in self.level_progression:
            if entry.level == level:
                return list(entry.features)
        if level == 1:
            return list(self.level_1_features)
        return []

    def subclass(self, name: str) -> Optional[SubclassDefinition]:
        key = name.lower()
        for sc in self.subclasses:
            if sc.name.lower() == key:
                return sc
        return None


class AbilityIncrease(BaseModel):
    ability: Optional[str] = None
    choices: List[str] = Field(default_factory=list)
    amount: int = 1


class FeatDefinition(BaseModel):
    name: str
    category: str = ""
    prerequisite: str = ""
    repeatable: bool = False
    benefits: List[str] = Field(default_factory=list)
    description: str = ""
    ability_increases: Optional[AbilityIncrease] = None
    grants_spells: List[str] = Field(default_factory=list)
    skill_proficiencies: List[str] = Field(default_factory=list)
    tool_proficiencies: List[str] = Field(default_factory=list)
    languages: List[str] = Field(default_factory=list)
    resistances: List[str] = Field(default_factory=list)
    speed_bonus: int = 0
    hp_per_level: int = 0
    initiative_bonus: int = 0
    ac_bonus: int = 0
    passive_bonuses: Dict[str, int] = Field(default_factory=dict)
    darkvision: int = 0
    features: List[FeatureDefinition] = Field(default_factory=list)


class SpeciesTrait(BaseModel):
    name: str
    description: str = ""


class SpeciesDefinition(BaseModel):
    name: str
    size: str = "Medium"
    speed: int = 30
    description: str = ""
    traits: List[SpeciesTrait] = Field(default_factory=list)
    languages: List[str] = Field(default_factory=list)
    resistances: List[str] = Field(default_factory=list)
    darkvision: int = 0
    skill_proficiencies: List[str] = Field(default_factory=list)
    spells: List[str] = Field(default_factory=list)
    features: List[FeatureDefinition] = Field(default_factory=list)
    hp_per_level: int = 0


class OriginDefinition(BaseModel):
    name: str
    description: str = ""
    ability_increases: Optional[AbilityIncrease] = None
    feat: str = ""
    skill_proficiencies: List[str] = Field(default_factory=list)
    tool_proficiencies: List[str] = Field(default_factory=list)
    languages: List[str] = Field(default_factory=list)
    equipment: List[str] = Field(default_factory=list)


class ItemDefinition(BaseModel):
    name: str
    category: str = ""
    subcategory: str = ""
    weight: float = 0.0
    price_gp: float = 0.0
    description: str = ""
    damage: str = ""
    damage_type: str = ""
    ac: str = ""
    range: str = ""
    properties: List[str] = Field(default_factory=list)
    stealth_disadvantage: bool = False
    strength_req: int = 0
    equippable: bool = False

    def item_type(self) -> ItemType:
        cat = self.category.lower()
        sub = self.subcategory.lower()
        if cat.startswith("weapon"):
            return ItemType.WEAPON
        if cat == "armor":
            return ItemType.SHIELD if "shield" in sub or "shield" in self.name.lower() else ItemType.ARMOR
        if cat.startswith("potion"):
            return ItemType.POTION
        if cat.startswith("magic"):
            return ItemType.MAGIC
        if cat.startswith("ammunition"):
            return ItemType.AMMUNITION
        if cat.startswith("adventuring") or cat == "gear":
            return ItemType.GEAR
        return ItemType.OTHER

    def to_item(self, quantity: int = 1) -> Item:
        kind = self.item_type()
        return Item(
            name=self.name,
            item_type=kind,
            quantity=quantity,
            weight=self.weight,
            value_gp=self.price_gp,
            armor_category=armor_category(self.subcategory) if kind == ItemType.ARMOR else None,
            base_ac=parse_armor_ac(self.ac) if kind in (ItemType.ARMOR, ItemType.SHIELD) else 0,
            properties=list(self.properties),
            description=self.description,
        )


class FightingStyleDefinition(BaseModel):
    name: str
    description: str = ""
    requirements: List[str] = Field(default_factory=list)
    benefits: Dict[str, Any] = Field(default_factory=dict)


T = TypeVar("T", bound=BaseModel)


class Table(Generic[T]):
    """Read-only, name-keyed view over one kind of rule definition."""

    def __init__(self, rows: Iterable[T] = ()):
        self._rows: List[T] = list(rows)
        self._by_name: Dict[str, T] = {r.name.lower(): r for r in self._rows}

    def get_by_name(self, name: str) -> Optional[T]:
        return self._by_name.get((name or "").lower())

    def get_all(self) -> List[T]:
        return list(self._rows)

    def names(self) -> List[str]:
        return [r.name for r in self._rows]

    def __contains__(self, name: str) -> bool:
        return self.get_by_name(name) is not None

    def __len__(self) -> int:
        return len(self._rows)


def _read_json(path: Path) -> Any:
    return json.loads(path.read_text(encoding="utf-8"))


def _load_rows(path: Path, key: str, model: type[T]) -> List[T]:
    """Rows under ``key`` in a JSON file; a missing or broken file is an empty table."""
    try:
        raw = _read_json(path)
    except FileNotFoundError:
        log.warning("rule table missing: %s", path)
        return []
    except (OSError, ValueError) as e:
        log.warning("rule table unreadable: %s (%s)", path, e)
        return []
    rows = raw.get(key, []) if isinstance(raw, dict) else raw
    out: List[T] = []
    for r in rows:
        try:
            out.append(model.model_validate(r))
        except PydanticValidationError as e:
            log.warning("skipping bad %s row in %s: %s", key, path.name, e.errors(include_url=False))
    return out


def _load_classes(directory: Path) -> List[ClassDefinition]:
    if not directory.is_dir():
        log.warning("class directory missing: %s", directory)
        return []
    out: List[ClassDefinition] = []
    for path in sorted(directory.glob("*.json")):
        try:
            out.append(ClassDefinition.model_validate(_read_json(path)))
        except (OSError, ValueError) as e:
            log.warning("skipping class file %s: %s", path.name, e)
    return out


def _load_items(path: Path) -> List[ItemDefinition]:
    try:
        raw = _read_json(path)
    except (OSError, ValueError) as e:
        log.warning("item table unavailable: %s (%s)", path, e)
        return []
    if not isinstance(raw, dict):
        log.warning("item table %s is not grouped by category", path)
        return []
    out: List[ItemDefinition] = []
    for group, rows in raw.items():
        for r in rows:
            r = {"category": group, **r}
            try:
                out.append(ItemDefinition.model_validate(r))
            except PydanticValidationError as e:
                log.warning("skipping bad item in %s: %s", group, e.errors(include_url=False))
    return out


class RuleTables:
    """All rule lookup tables, loaded once from a data directory.

    Pass one instance to whatever needs rule data; call ``reload()`` to pick up
    edits on disk.
    """

    def __init__(self, data_dir: Optional[Path] = None):
        self.data_dir = resolve_data_dir(data_dir)
        self.reload()

    def reload(self) -> None:
        d = self.data_dir
        self.classes: Table[ClassDefinition] = Table(_load_classes(d / "classes"))
        self.feats: Table[FeatDefinition] = Table(_load_rows(d / "feats.json", "feats", FeatDefinition))
        self.species: Table[SpeciesDefinition] = Table(_load_rows(d / "species.json", "species", SpeciesDefinition))
        self.origins: Table[OriginDefinition] = Table(_load_rows(d / "origins.json", "origins", OriginDefinition))
        self.items: Table[ItemDefinition] = Table(_load_items(d / "items.json"))
        self.fighting_styles: Table[FightingStyleDefinition] = Table(
            _load_rows(d / "fighting_styles.json", "fighting_styles", FightingStyleDefinition)
        )
        log.debug(
            "loaded rule tables from %s: %d classes, %d feats, %d species, %d origins, %d items",
            d,
            len(self.classes),
            len(self.feats),
            len(self.species),
            len(self.origins),
            len(self.items),
        )

    @classmethod
    def empty(cls) -> "RuleTables":
        tables = cls.__new__(cls)
        tables.data_dir = None
        tables.classes = Table()
        tables.feats = Table()
        tables.species = Table()
        tables.origins = Table()
        tables.items = Table()
        tables.fighting_styles = Table()
        return tables

    def require_class(self, name: str) -> ClassDefinition:
        found = self.classes.get_by_name(name)
        if found is None:
            raise NotFoundError("class", name)
        return found

    def require_feat(self, name: str) -> FeatDefinition:
        found = self.feats.get_by_name(name)
        if found is None:
            raise NotFoundError("feat", name)
        return found

    def require_species(self, name: str) -> SpeciesDefinition:
        found = self.species.get_by_name(name)
        if found is None:
            raise NotFoundError("species", name)
        return found

    def require_origin(self, name: str) -> OriginDefinition:
        found = self.origins.get_by_name(name)
        if found is None:
            raise NotFoundError("origin", name)
        return found

    def require_fighting_style(self, name: str) -> FightingStyleDefinition:
        found = self.fighting_styles.get_by_name(name)
        if found is None:
            raise NotFoundError("fighting style", name)
        return found
