"""Step-by-step breakdowns of derived stats for GM inspection."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, List, Literal, Tuple

from chimera.core.config import DEFAULT_RULES, RulesConfig
from chimera.domain.entities import Creature
from chimera.domain.stat_derivation import (
    compute_derived_stats,
    compute_equipment_bonuses,
    compute_natural_armor,
)
from chimera.domain.stat_models import DerivedStats

BreakdownStat = Literal["hp", "dv", "pv", "ma", "av", "carry_capacity", "skill_points"]


@dataclass(frozen=True, slots=True)
class BreakdownStep:
    label: str
    value: int


@dataclass(frozen=True, slots=True)
class StatBreakdown:
    stat: str
    steps: Tuple[BreakdownStep, ...]
    final: int

    @property
    def contributions_total(self) -> int:
        return sum(step.value for step in self.steps)


def _gm(derived: DerivedStats, key: str) -> List[BreakdownStep]:
    if derived.gm_adjustment is None:
        return []
    value = derived.gm_adjustment.modifiers.get(key, 0)
    return [BreakdownStep("GM modifier", value)] if value else []


def _hp_steps(creature: Creature, derived: DerivedStats, rules: RulesConfig) -> Tuple[List[BreakdownStep], int]:
    steps: List[BreakdownStep] = []
    for entry in derived.hp_ledger:
        if entry.level > creature.level:
            continue
        if entry.level <= 1:
            steps.append(BreakdownStep("Level 1 (toughness)", entry.total))
        else:
            steps.append(BreakdownStep(f"Level {entry.level} (roll {entry.roll} + mod {entry.modifier})", entry.total))
    steps.extend(_gm(derived, "hp"))
    return steps, derived.hp_max


def _dv_steps(creature: Creature, derived: DerivedStats, rules: RulesConfig) -> Tuple[List[BreakdownStep], int]:
    natural, _ = compute_natural_armor(creature)
    _, equipment_dv = compute_equipment_bonuses(creature, natural)
    steps = [
        BreakdownStep("Base", rules.dv_base),
        BreakdownStep("Agility modifier", derived.modifiers["agility"]),
    ]
    if equipment_dv:
        steps.append(BreakdownStep("Armor (averaged by part type)", equipment_dv))
    steps.extend(_gm(derived, "dv"))
    return steps, derived.combat.dv


def _pv_steps(creature: Creature, derived: DerivedStats, rules: RulesConfig) -> Tuple[List[BreakdownStep], int]:
    steps = [
        BreakdownStep("Base", rules.pv_base),
        BreakdownStep("Strength modifier", derived.modifiers["strength"]),
    ]
    steps.extend(_gm(derived, "pv"))
    return steps, derived.combat.pv


def _ma_steps(creature: Creature, derived: DerivedStats, rules: RulesConfig) -> Tuple[List[BreakdownStep], int]:
    steps = [
        BreakdownStep("Base", rules.ma_base),
        BreakdownStep("Willpower modifier", derived.modifiers["willpower"]),
    ]
    steps.extend(_gm(derived, "ma"))
    return steps, derived.combat.ma


def _av_steps(creature: Creature, derived: DerivedStats, rules: RulesConfig) -> Tuple[List[BreakdownStep], int]:
    base_av = derived.gm_adjustment.base_av if derived.gm_adjustment else derived.combat.av
    steps = [BreakdownStep("Armor and natural armor (averaged by part type)", base_av)]
    steps.extend(_gm(derived, "av"))
    return steps, derived.combat.av


def _carry_steps(creature: Creature, derived: DerivedStats, rules: RulesConfig) -> Tuple[List[BreakdownStep], int]:
    base = rules.carry_capacity_multiplier * creature.attributes.strength
    steps = [BreakdownStep(f"Strength x {rules.carry_capacity_multiplier}", base)]
    bonus = derived.carry.maximum - base
    if bonus:
        steps.append(BreakdownStep("Mutations", bonus))
    return steps, derived.carry.maximum


def _skill_steps(creature: Creature, derived: DerivedStats, rules: RulesConfig) -> Tuple[List[BreakdownStep], int]:
    steps = [
        BreakdownStep(f"Total over {creature.level} level(s)", derived.skill_points.total),
        BreakdownStep("Spent", -derived.skill_points.spent),
    ]
    return steps, derived.skill_points.available


_BUILDERS: Dict[str, Callable[[Creature, DerivedStats, RulesConfig], Tuple[List[BreakdownStep], int]]] = {
    "hp": _hp_steps,
    "dv": _dv_steps,
    "pv": _pv_steps,
    "ma": _ma_steps,
    "av": _av_steps,
    "carry_capacity": _carry_steps,
    "skill_points": _skill_steps,
}


def build_stat_breakdown(creature: Creature, stat: BreakdownStat, rules: RulesConfig = DEFAULT_RULES) -> StatBreakdown:
    builder = _BUILDERS.get(stat)
    if builder is None:
        raise ValueError(f"No breakdown available for '{stat}'.")
    derived = compute_derived_stats(creature, rules)
    steps, final = builder(creature, derived, rules)
    return StatBreakdown(stat=stat, steps=tuple(steps), final=final)
