"""Hit-point ledger, damage and regeneration helpers."""
from __future__ import annotations

from dataclasses import dataclass, replace
from typing import List, Sequence, Tuple


@dataclass(frozen=True, slots=True)
class HpLedgerEntry:
    """HP gained at one level.

    ``roll`` is immutable once recorded; ``modifier`` and ``total`` are
    rewritten from the current toughness modifier on every recomputation.
    The level 1 entry stores the toughness value as its roll.
    """

    level: int
    roll: int
    modifier: int
    total: int


def start_ledger(toughness_value: int, toughness_modifier: int) -> List[HpLedgerEntry]:
    return [HpLedgerEntry(level=1, roll=toughness_value, modifier=toughness_modifier, total=toughness_value)]


def level_entry(level: int, roll: int, toughness_modifier: int) -> HpLedgerEntry:
    return HpLedgerEntry(level=level, roll=roll, modifier=toughness_modifier, total=roll + toughness_modifier)


def recompute_ledger(
    ledger: Sequence[HpLedgerEntry],
    *,
    toughness_value: int,
    toughness_modifier: int,
    level: int,
) -> Tuple[List[HpLedgerEntry], int]:
    """Rewrite every entry from the current toughness and return ``(ledger, max_hp)``.

    Level 1 HP always equals the current toughness value; later levels add
    their stored roll plus the current modifier. Entries above ``level`` are
    ignored for the maximum but kept.
    """
    rewritten: List[HpLedgerEntry] = []
    max_hp = toughness_value
    for entry in ledger:
        if entry.level <= 1:
            rewritten.append(replace(entry, modifier=toughness_modifier, total=toughness_value))
            continue
        updated = replace(entry, modifier=toughness_modifier, total=entry.roll + toughness_modifier)
        rewritten.append(updated)
        if updated.level <= level:
            max_hp += updated.total
    if not rewritten:
        rewritten = start_ledger(toughness_value, toughness_modifier)
    return rewritten, max_hp


def clamp_hp(current: int, maximum: int) -> int:
    return min(current, maximum)


def hp_after_damage(current: int, amount: int) -> int:
    """Subtract damage, never going below zero."""
    return max(0, current - max(0, amount))


def regeneration_rate(
    willpower_modifier: int,
    toughness_modifier: int,
    *,
    base: int = 20,
    multiplier: int = 2,
) -> float:
    """HP regenerated per turn: ``(base + multiplier * (wil mod + tou mod)) / 100``."""
    return (base + multiplier * (willpower_modifier + toughness_modifier)) / 100


def regeneration_interrupted(last_damage_turn: int | None, current_turn: int, interrupt_turns: int) -> bool:
    """Regeneration pauses for ``interrupt_turns`` turns after taking damage."""
    if last_damage_turn is None:
        return False
    return current_turn - last_damage_turn < interrupt_turns
