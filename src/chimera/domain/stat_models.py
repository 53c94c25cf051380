"""Derived statistic models produced by the stat pipeline."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Tuple

from chimera.domain.body import NaturalArmor
from chimera.domain.health import HpLedgerEntry


@dataclass(frozen=True, slots=True)
class CombatProfile:
    """Combat numbers read by the attack orchestrator."""

    dv: int
    pv: int
    ma: int
    av: int
    main_hand_id: str | None
    offhand_chances: Dict[str, int] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class CarryCapacity:
    maximum: int
    carried: int

    @property
    def remaining(self) -> int:
        return self.maximum - self.carried

    @property
    def overburdened(self) -> bool:
        return self.carried > self.maximum


@dataclass(frozen=True, slots=True)
class SkillPoints:
    total: int
    spent: int

    @property
    def available(self) -> int:
        return self.total - self.spent


@dataclass(frozen=True, slots=True)
class CooldownReduction:
    reduction_percent: int
    minimum_cooldown: int


@dataclass(frozen=True, slots=True)
class GmAdjustment:
    """Values before npc GM modifiers were added, plus the modifiers themselves."""

    base_dv: int
    base_pv: int
    base_ma: int
    base_av: int
    base_hp_max: int
    modifiers: Dict[str, int] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class DerivedStats:
    """Everything recomputed from attributes, body, items and active mutations."""

    modifiers: Dict[str, int]
    combat: CombatProfile
    hp_max: int
    hp_ledger: Tuple[HpLedgerEntry, ...]
    carry: CarryCapacity
    skill_points: SkillPoints
    regen_rate: float
    cooldown: CooldownReduction
    movement_speed_bonus: int
    quickness_bonus: int
    natural_armor: Dict[str, NaturalArmor]
    flight_part_ids: Tuple[str, ...]
    resource_maximums: Dict[str, int]
    gm_adjustment: GmAdjustment | None = None
