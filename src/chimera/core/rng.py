"""Seeded die source built on top of random.Random."""
from __future__ import annotations

from random import Random
from typing import Sequence, TypeVar

T_co = TypeVar("T_co")


class RNG:
    """Wrapper around random.Random used for every die the engine rolls.

    All randomness flows through this class so callers can seed it for
    reproducible fights or substitute a scripted source in tests.
    """

    def __init__(self, seed: int | None = None) -> None:
        self._random = Random(seed)

    def randint(self, a: int, b: int) -> int:
        """Return a random integer N such that a <= N <= b."""
        return self._random.randint(a, b)

    def roll_die(self, sides: int) -> int:
        """Roll one die with the given number of sides (1-indexed)."""
        if sides < 1:
            raise ValueError(f"A die needs at least one side, got {sides}.")
        return self.randint(1, sides)

    def choice(self, seq: Sequence[T_co]) -> T_co:
        """Return a random element from the non-empty sequence."""
        if not seq:
            raise ValueError("Cannot choose from an empty sequence.")
        return seq[self.randint(0, len(seq) - 1)]

    def weighted_choice(self, weights: Sequence[tuple[T_co, int]]) -> T_co:
        """Pick an option from ``(option, weight)`` pairs proportionally to weight."""
        total = sum(weight for _, weight in weights)
        if total <= 0:
            raise ValueError("Weighted choice requires a positive total weight.")
        roll = self.randint(1, total)
        for option, weight in weights:
            roll -= weight
            if roll <= 0:
                return option
        return weights[-1][0]
