from .applier import BenefitApplier
from .asi import apply_asi_choice, check_asi_available, remove_asi_choice, validate_ability_boosts
from .derived import calculate_armor_class, update_derived_stats
from .feats import apply_feat, can_take_feat, grant_feat_benefits, has_feat, remove_feat
from .fighting_styles import apply_fighting_style, remove_fighting_style
from .inventory import equip_item, remove_item, unequip_item
from .leveling import LevelUpOptions, LevelUpResult, create_character, level_up, level_up_preview, roll_hp
from .multiclass import can_multiclass_into, multiclass_proficiencies
from .origins import apply_origin, remove_origin
from .remover import BenefitRemover
from .rest import long_rest, short_rest, use_feature, restore_feature, use_spell_slot
from .species import apply_species, remove_species

__all__ = [
    "BenefitApplier",
    "BenefitRemover",
    "LevelUpOptions",
    "LevelUpResult",
    "apply_asi_choice",
    "apply_feat",
    "apply_fighting_style",
    "apply_origin",
    "apply_species",
    "calculate_armor_class",
    "can_multiclass_into",
    "can_take_feat",
    "check_asi_available",
    "create_character",
    "equip_item",
    "grant_feat_benefits",
    "has_feat",
    "level_up",
    "level_up_preview",
    "long_rest",
    "multiclass_proficiencies",
    "remove_asi_choice",
    "remove_feat",
    "remove_fighting_style",
    "remove_item",
    "remove_origin",
    "remove_species",
    "restore_feature",
    "roll_hp",
    "short_rest",
    "unequip_item",
    "update_derived_stats",
    "use_feature",
    "use_spell_slot",
    "validate_ability_boosts",
]
