"""Closed set of level-scaled formula shapes used by mutation content.

Content authors pick one of these shapes instead of writing free-text
expressions, so nothing is ever evaluated at runtime.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

from chimera.core.types import BonusKind


@dataclass(frozen=True, slots=True)
class LevelFormula:
    """``base + ((level - level_offset) // divisor) * per_level``."""

    base: int = 0
    per_level: int = 1
    divisor: int = 1
    level_offset: int = 0

    def evaluate(self, level: int) -> int:
        return self.base + ((level - self.level_offset) // self.divisor) * self.per_level


@dataclass(frozen=True, slots=True)
class BonusFormula:
    """A stat bonus: a flat amount, a percentage, or a level formula."""

    kind: BonusKind
    value: int = 0
    formula: LevelFormula | None = None

    def amount(self, level: int) -> int:
        """Return the flat amount (or the percentage for ``percent`` bonuses)."""
        if self.kind == "formula":
            return self.formula.evaluate(level) if self.formula else 0
        return self.value

    def is_zero(self) -> bool:
        if self.kind == "formula":
            return self.formula is None
        return self.value == 0


@dataclass(frozen=True, slots=True)
class DamageTier:
    """Damage expression used while the mutation level is within the range."""

    min_level: int
    max_level: int
    damage: str


@dataclass(frozen=True, slots=True)
class ScaledDice:
    """``{count}d({level // level_divisor + base_sides})``."""

    count: int
    base_sides: int
    level_divisor: int = 1

    def expression(self, level: int) -> str:
        return f"{self.count}d{level // self.level_divisor + self.base_sides}"


def damage_for_level(
    tiers: Tuple[DamageTier, ...],
    scaled: ScaledDice | None,
    fallback: str,
    level: int,
) -> str:
    """Pick the damage expression for a natural weapon at ``level``."""
    if tiers:
        for tier in tiers:
            if tier.min_level <= level <= tier.max_level:
                return tier.damage
        return tiers[-1].damage
    if scaled is not None:
        return scaled.expression(level)
    return fallback
