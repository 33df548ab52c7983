from __future__ import annotations

from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from .abilities import Ability, AbilityScores, ProficiencyLevel, Skill, Skills
from .benefits import BenefitLedger


class RestType(str, Enum):
    SHORT = "Short Rest"
    LONG = "Long Rest"
    DAILY = "Daily"
    NONE = "None"

    @classmethod
    def parse(cls, text: "str | RestType | None") -> "RestType":
        if isinstance(text, RestType):
            return text
        key = (text or "").strip().lower()
        for r in cls:
            if key in (r.value.lower(), r.name.lower()):
                return r
        if "short" in key:
            return cls.SHORT
        if "long" in key:
            return cls.LONG
        return cls.NONE


class ItemType(str, Enum):
    WEAPON = "weapon"
    ARMOR = "armor"
    SHIELD = "shield"
    GEAR = "gear"
    POTION = "potion"
    MAGIC = "magic"
    AMMUNITION = "ammunition"
    OTHER = "other"


class AbilityBoost(BaseModel):
    ability: Ability
    amount: int = 1


class ASIChoice(BaseModel):
    type: str = "ability"  # ability | feat
    ability_boosts: List[AbilityBoost] = Field(default_factory=list)
    feat_name: Optional[str] = None
    chosen_ability: Optional[Ability] = None


class ClassLevel(BaseModel):
    class_name: str
    level: int = 1
    subclass: Optional[str] = None
    fighting_style: Optional[str] = None
    asi_choices: Dict[int, ASIChoice] = Field(default_factory=dict)


class Feature(BaseModel):
    name: str
    description: str = ""
    max_uses: int = 0
    current_uses: int = 0
    rest_type: RestType = RestType.NONE
    source: str = ""
    uses_formula: str = ""

    def use(self) -> bool:
        if self.current_uses <= 0:
            return False
        self.current_uses -= 1
        return True

    def restore(self, amount: int = 1) -> bool:
        if self.current_uses >= self.max_uses:
            return False
        self.current_uses = min(self.max_uses, self.current_uses + amount)
        return True

    def restore_all(self) -> None:
        self.current_uses = self.max_uses


class Item(BaseModel):
    name: str
    item_type: ItemType = ItemType.OTHER
    quantity: int = 1
    weight: float = 0.0
    value_gp: float = 0.0
    equipped: bool = False
    armor_category: Optional[str] = None  # light | medium | heavy
    base_ac: int = 0
    properties: List[str] = Field(default_factory=list)
    description: str = ""

    @property
    def is_armor(self) -> bool:
        return self.item_type == ItemType.ARMOR

    @property
    def is_shield(self) -> bool:
        return self.item_type == ItemType.SHIELD

    @property
    def is_melee_weapon(self) -> bool:
        if self.item_type != ItemType.WEAPON:
            return False
        return not any(p.lower().startswith(("ammunition", "range")) for p in self.properties)


class Inventory(BaseModel):
    items: List[Item] = Field(default_factory=list)
    gold: float = 0.0
    carry_capacity: int = 150

    def find(self, name: str) -> Optional[Item]:
        for it in self.items:
            if it.name == name:
                return it
        return None

    def equipped(self) -> List[Item]:
        return [it for it in self.items if it.equipped]

    @property
    def total_weight(self) -> float:
        return sum(it.weight * it.quantity for it in self.items)


class SlotPool(BaseModel):
    maximum: int = 0
    current: int = 0


class SpellSlots(BaseModel):
    level1: SlotPool = Field(default_factory=SlotPool)
    level2: SlotPool = Field(default_factory=SlotPool)
    level3: SlotPool = Field(default_factory=SlotPool)
    level4: SlotPool = Field(default_factory=SlotPool)
    level5: SlotPool = Field(default_factory=SlotPool)
    level6: SlotPool = Field(default_factory=SlotPool)
    level7: SlotPool = Field(default_factory=SlotPool)
    level8: SlotPool = Field(default_factory=SlotPool)
    level9: SlotPool = Field(default_factory=SlotPool)

    @classmethod
    def from_counts(cls, counts: "tuple[int, ...] | List[int]") -> "SpellSlots":
        slots = cls()
        for i, n in enumerate(counts, start=1):
            setattr(slots, f"level{i}", SlotPool(maximum=n, current=n))
        return slots

    def pool(self, level: int) -> SlotPool:
        if not 1 <= level <= 9:
            raise ValueError(f"spell slot level out of range: {level}")
        return getattr(self, f"level{level}")

    def maximums(self) -> List[int]:
        return [self.pool(i).maximum for i in range(1, 10)]

    def restore_all(self) -> None:
        for i in range(1, 10):
            p = self.pool(i)
            p.current = p.maximum


class PactMagic(BaseModel):
    slots: int = 0
    slot_level: int = 0
    current: int = 0


class SpellBook(BaseModel):
    spells: List[str] = Field(default_factory=list)
    cantrips: List[str] = Field(default_factory=list)
    slots: SpellSlots = Field(default_factory=SpellSlots)
    pact_magic: PactMagic = Field(default_factory=PactMagic)
    spellcasting_ability: Optional[Ability] = None
    spell_save_dc: int = 0
    spell_attack_bonus: int = 0
    is_prepared_caster: bool = False
    preparation_formula: str = ""
    max_prepared_spells: int = 0
    cantrips_known: int = 0
    requires_spell_selection: bool = False


class Character(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: str = "New Character"
    species: Optional[str] = None
    background: Optional[str] = None
    origin: Optional[str] = None
    alignment: Optional[str] = None

    classes: List[ClassLevel] = Field(default_factory=list)
    level: int = 1
    class_summary: str = ""
    experience: int = 0

    ability_scores: AbilityScores = Field(default_factory=AbilityScores)
    saving_throws: List[Ability] = Field(default_factory=list)
    skills: Skills = Field(default_factory=Skills)

    max_hp: int = 10
    current_hp: int = 10
    temp_hp: int = 0

    # base speed; current_speed adds transient bonuses on every recompute
    speed: int = 30
    current_speed: int = 30
    armor_class: int = 10
    ac_bonus: int = 0
    style_ac_bonus: int = 0
    initiative: int = 0
    initiative_bonus: int = 0
    proficiency_bonus: int = 2
    passive_bonuses: Dict[str, int] = Field(default_factory=dict)
    darkvision: int = 0

    languages: List[str] = Field(default_factory=lambda: ["Common"])
    resistances: List[str] = Field(default_factory=list)
    tool_proficiencies: List[str] = Field(default_factory=list)
    armor_proficiencies: List[str] = Field(default_factory=list)
    weapon_proficiencies: List[str] = Field(default_factory=list)

    feats: List[str] = Field(default_factory=list)
    fighting_style: Optional[str] = None
    species_spells: List[str] = Field(default_factory=list)
    features: List[Feature] = Field(default_factory=list)

    inventory: Inventory = Field(default_factory=Inventory)
    spellbook: SpellBook = Field(default_factory=SpellBook)
    benefits: BenefitLedger = Field(default_factory=BenefitLedger)

    # --- Lookups ---
    def ability_mod(self, ability: Ability | str) -> int:
        return self.ability_scores.modifier(ability)

    def get_class(self, class_name: str) -> Optional[ClassLevel]:
        key = class_name.lower()
        for cl in self.classes:
            if cl.class_name.lower() == key:
                return cl
        return None

    def class_level(self, class_name: str) -> int:
        cl = self.get_class(class_name)
        return cl.level if cl else 0

    @property
    def total_level(self) -> int:
        if self.classes:
            return sum(cl.level for cl in self.classes)
        return self.level

    def find_feature(self, name: str) -> Optional[Feature]:
        for f in self.features:
            if f.name == name:
                return f
        return None

    def has_feature(self, name: str) -> bool:
        return self.find_feature(name) is not None

    def has_feat(self, name: str) -> bool:
        return name in self.feats

    def passive_score(self, skill_name: str) -> int:
        skill = Skill.parse(skill_name)
        score = 10 + self.ability_mod(skill.ability)
        prof = self.skills.get(skill)
        if prof == ProficiencyLevel.PROFICIENT:
            score += self.proficiency_bonus
        elif prof == ProficiencyLevel.EXPERTISE:
            score += 2 * self.proficiency_bonus
        return score + self.passive_bonuses.get(skill.value, 0)

    def equipped_armor(self) -> Optional[Item]:
        for it in self.inventory.items:
            if it.equipped and it.is_armor:
                return it
        return None

    def equipped_shield(self) -> Optional[Item]:
        for it in self.inventory.items:
            if it.equipped and it.is_shield:
                return it
        return None
