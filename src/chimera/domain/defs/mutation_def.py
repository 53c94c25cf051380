"""Mutation definition structures."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Literal, Tuple, Union

from chimera.domain.formulas import BonusFormula, DamageTier, LevelFormula, ScaledDice, damage_for_level

MutationCategory = Literal["physical", "mental"]
StatBonusKey = Literal["carry_capacity", "movement_speed", "quickness"]

STAT_BONUS_KEYS: tuple[StatBonusKey, ...] = ("carry_capacity", "movement_speed", "quickness")

RANDOM = "random"
ROOT = "root"


@dataclass(frozen=True, slots=True)
class AddPartModification:
    """Grow a new part (optionally with children) under a selected parent.

    ``parent`` is ``root``, ``random`` or a body-part type name, in which case
    the first part of that type in display order is used. ``part_type`` may be
    ``random`` to roll on the chimera growth table.
    """

    part_type: str
    parent: str = ROOT
    variant: str | None = None
    laterality: str = ""
    with_children: Tuple[str, ...] = ()
    chimera_origin: bool = False


@dataclass(frozen=True, slots=True)
class ReplacePartModification:
    """Retype every part of ``target_type`` in place."""

    target_type: str
    new_type: str
    preserve_equipment: bool = True
    parent_scope_type: str | None = None


BodyModification = Union[AddPartModification, ReplacePartModification]


@dataclass(frozen=True, slots=True)
class NaturalWeaponDef:
    """Implicit weapon granted to every part of the listed types."""

    body_part_types: Tuple[str, ...]
    damage_tiers: Tuple[DamageTier, ...] = ()
    scaled_damage: ScaledDice | None = None
    fallback_damage: str = "1d4"
    pv_formula: LevelFormula | None = None
    pv: int = 0
    attack_chance: int = 0
    weapon_class: str = ""

    def damage_for_level(self, level: int) -> str:
        return damage_for_level(self.damage_tiers, self.scaled_damage, self.fallback_damage, level)

    def pv_for_level(self, level: int) -> int:
        if self.pv_formula is not None:
            return self.pv_formula.evaluate(level)
        return self.pv


@dataclass(frozen=True, slots=True)
class ArmorGrantDef:
    """Natural armor written onto every part of ``body_part_type``."""

    body_part_type: str
    av_formula: LevelFormula


@dataclass(frozen=True, slots=True)
class ResourceDef:
    """A per-mutation resource pool (e.g. quills) whose maximum scales with level."""

    name: str
    max_formula: LevelFormula


@dataclass(frozen=True, slots=True)
class MutationDef:
    """Catalog entry describing everything a mutation does while active."""

    id: str
    name: str
    category: MutationCategory = "physical"
    description: str = ""
    body_modifications: Tuple[BodyModification, ...] = ()
    stat_bonuses: Dict[str, BonusFormula] = field(default_factory=dict)
    natural_weapon: NaturalWeaponDef | None = None
    armor_grant: ArmorGrantDef | None = None
    flight_part_type: str | None = None
    blocked_equipment: Dict[str, Tuple[str, ...]] = field(default_factory=dict)
    resource: ResourceDef | None = None

    @property
    def is_mental(self) -> bool:
        return self.category == "mental"

    @property
    def has_replacements(self) -> bool:
        return any(isinstance(mod, ReplacePartModification) for mod in self.body_modifications)
