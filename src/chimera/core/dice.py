"""Dice-expression parsing and rolling (``1d4``, ``2d6+3``, ``1d2-1``)."""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Tuple

from chimera.core.rng import RNG

_EXPRESSION = re.compile(r"^\s*(\d*)\s*d\s*(\d+)\s*(?:([+-])\s*(\d+))?\s*$", re.IGNORECASE)
_FLAT = re.compile(r"^\s*([+-]?\d+)\s*$")


class InvalidDiceExpression(ValueError):
    """Raised when a dice expression cannot be parsed."""


@dataclass(frozen=True, slots=True)
class DiceExpression:
    """Structured ``NdM+K`` expression."""

    count: int
    sides: int
    modifier: int = 0

    @classmethod
    def parse(cls, text: str) -> "DiceExpression":
        match = _EXPRESSION.match(text)
        if match:
            count = int(match.group(1)) if match.group(1) else 1
            sides = int(match.group(2))
            modifier = int(match.group(4)) if match.group(4) else 0
            if match.group(3) == "-":
                modifier = -modifier
            if count < 1 or sides < 1:
                raise InvalidDiceExpression(f"Dice expression '{text}' needs at least one die with one side.")
            return cls(count=count, sides=sides, modifier=modifier)
        flat = _FLAT.match(text)
        if flat:
            return cls(count=0, sides=1, modifier=int(flat.group(1)))
        raise InvalidDiceExpression(f"Invalid dice expression: '{text}'")

    def roll(self, rng: RNG) -> "DiceRoll":
        faces = tuple(rng.roll_die(self.sides) for _ in range(self.count))
        return DiceRoll(expression=str(self), faces=faces, modifier=self.modifier)

    def __str__(self) -> str:
        if self.count == 0:
            return str(self.modifier)
        text = f"{self.count}d{self.sides}"
        if self.modifier > 0:
            text += f"+{self.modifier}"
        elif self.modifier < 0:
            text += str(self.modifier)
        return text


@dataclass(frozen=True, slots=True)
class DiceRoll:
    """Audit record for one rolled expression."""

    expression: str
    faces: Tuple[int, ...]
    modifier: int

    @property
    def total(self) -> int:
        return sum(self.faces) + self.modifier


def roll_expression(text: str, rng: RNG) -> DiceRoll:
    """Parse and roll ``text`` in one step."""
    return DiceExpression.parse(text).roll(rng)
