"""Catalog definition exports."""

from .armor_def import ArmorDef
from .body_part_type_def import BodyPartTypeDef
from .mutation_def import (
    AddPartModification,
    ArmorGrantDef,
    BodyModification,
    MutationDef,
    NaturalWeaponDef,
    ReplacePartModification,
    ResourceDef,
)
from .weapon_def import WeaponDef

__all__ = [
    "AddPartModification",
    "ArmorDef",
    "ArmorGrantDef",
    "BodyModification",
    "BodyPartTypeDef",
    "MutationDef",
    "NaturalWeaponDef",
    "ReplacePartModification",
    "ResourceDef",
    "WeaponDef",
]
