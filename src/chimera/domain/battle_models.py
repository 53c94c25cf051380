"""Attack result models carrying every roll for audit and display."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Tuple

from chimera.core.dice import DiceRoll
from chimera.domain.penetration import PenetrationResult
from chimera.domain.weapons import WeaponProfile


@dataclass(slots=True)
class HandAttackResult:
    """One weapon-bearing part's to-hit, penetration and damage rolls."""

    part_id: str
    part_name: str
    weapon: WeaponProfile
    to_hit: DiceRoll
    to_hit_total: int
    target_dv: int
    hit: bool
    attacker_pv: int = 0
    target_av: int = 0
    penetration: PenetrationResult | None = None
    damage_rolls: List[DiceRoll] = field(default_factory=list)
    total_damage: int = 0

    @property
    def penetrated(self) -> bool:
        return self.penetration is not None and self.penetration.total_penetrations > 0


@dataclass(slots=True)
class OffhandAttackResult:
    """Trigger check for an offhand part, and its attack when it fired."""

    part_id: str
    part_name: str
    chance: int
    roll: int
    triggered: bool
    attack: HandAttackResult | None = None


@dataclass(slots=True)
class AttackResult:
    attacker_id: str
    attacker_name: str
    target_id: str
    target_name: str
    main_hand: HandAttackResult
    offhands: List[OffhandAttackResult] = field(default_factory=list)
    total_damage: int = 0
    target_hp_before: int = 0
    target_hp_after: int = 0

    @property
    def hands(self) -> Tuple[HandAttackResult, ...]:
        """Every hand that actually attacked, main hand first."""
        attacks = [self.main_hand]
        attacks.extend(offhand.attack for offhand in self.offhands if offhand.attack is not None)
        return tuple(attacks)

    @property
    def target_defeated(self) -> bool:
        return self.target_hp_after <= 0
