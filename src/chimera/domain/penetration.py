"""Exploding-die penetration rolls: singlets, triplets and full sequences."""
from __future__ import annotations

from dataclasses import dataclass
from typing import List, Sequence, Tuple

from chimera.core.config import DEFAULT_RULES, RulesConfig
from chimera.core.rng import RNG


@dataclass(frozen=True, slots=True)
class SingletRoll:
    """One exploding ``1d10-2`` roll.

    ``rolls`` holds ``(raw, modified)`` pairs in roll order; every pair but
    the last hit the explosion threshold.
    """

    rolls: Tuple[Tuple[int, int], ...]
    total: int

    @property
    def exploded(self) -> bool:
        return len(self.rolls) > 1

    @property
    def explosion_chain(self) -> Tuple[int, ...]:
        return tuple(raw for raw, _ in self.rolls)


@dataclass(frozen=True, slots=True)
class TripletRoll:
    singlets: Tuple[SingletRoll, ...]
    attacker_pv: int
    defender_av: int
    singlet_passes: Tuple[bool, ...]

    @property
    def singlets_passed(self) -> int:
        return sum(1 for passed in self.singlet_passes if passed)

    @property
    def penetrations(self) -> int:
        return 1 if self.singlets_passed > 0 else 0

    @property
    def all_passed(self) -> bool:
        return len(self.singlet_passes) > 0 and all(self.singlet_passes)


@dataclass(frozen=True, slots=True)
class PenetrationResult:
    triplets: Tuple[TripletRoll, ...]
    total_penetrations: int
    initial_pv: int
    final_pv: int


def roll_singlet(rng: RNG, rules: RulesConfig = DEFAULT_RULES) -> SingletRoll:
    """Roll, subtract the die modifier, and keep rolling while the threshold comes up.

    There is no upper bound on the number of explosions.
    """
    rolls: List[Tuple[int, int]] = []
    total = 0
    while True:
        raw = rng.roll_die(rules.penetration_die)
        modified = raw - rules.penetration_die_modifier
        rolls.append((raw, modified))
        total += modified
        if modified != rules.penetration_explode_on:
            break
    return SingletRoll(rolls=tuple(rolls), total=total)


def evaluate_triplet(singlets: Sequence[SingletRoll], attacker_pv: int, defender_av: int) -> TripletRoll:
    """Score already-rolled singlets: each passes when ``pv + total >= av``."""
    passes = tuple(attacker_pv + singlet.total >= defender_av for singlet in singlets)
    return TripletRoll(
        singlets=tuple(singlets),
        attacker_pv=attacker_pv,
        defender_av=defender_av,
        singlet_passes=passes,
    )


def roll_triplet(rng: RNG, attacker_pv: int, defender_av: int, rules: RulesConfig = DEFAULT_RULES) -> TripletRoll:
    singlets = [roll_singlet(rng, rules) for _ in range(3)]
    return evaluate_triplet(singlets, attacker_pv, defender_av)


def resolve_penetration(
    rng: RNG,
    attacker_pv: int,
    defender_av: int,
    rules: RulesConfig = DEFAULT_RULES,
) -> PenetrationResult:
    """Roll triplets until one does not fully pass or PV drops to zero.

    Each fully passing triplet lowers PV by ``penetration_pv_decrement`` for
    the next triplet. A PV of zero or less rolls nothing.
    """
    current_pv = attacker_pv
    triplets: List[TripletRoll] = []
    total = 0
    while current_pv > 0:
        triplet = roll_triplet(rng, current_pv, defender_av, rules)
        triplets.append(triplet)
        total += triplet.penetrations
        if not triplet.all_passed:
            break
        current_pv -= rules.penetration_pv_decrement
    return PenetrationResult(
        triplets=tuple(triplets),
        total_penetrations=total,
        initial_pv=attacker_pv,
        final_pv=current_pv,
    )
