"""Attribute scores and their derived modifiers."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict

from chimera.core.types import ATTRIBUTE_NAMES, AttributeName

ATTRIBUTE_BASE = 16


def attribute_modifier(value: int, base: int = ATTRIBUTE_BASE) -> int:
    """Return ``floor((value - base) / 2)``."""
    return (value - base) // 2


@dataclass(slots=True)
class Attributes:
    """Raw attribute scores. Modifiers are always recomputed from these."""

    strength: int = 16
    agility: int = 16
    toughness: int = 16
    intelligence: int = 16
    willpower: int = 16
    ego: int = 16

    def value(self, name: AttributeName) -> int:
        if name not in ATTRIBUTE_NAMES:
            raise KeyError(name)
        return getattr(self, name)

    def set_value(self, name: AttributeName, value: int) -> None:
        if name not in ATTRIBUTE_NAMES:
            raise KeyError(name)
        setattr(self, name, value)

    def modifier(self, name: AttributeName, base: int = ATTRIBUTE_BASE) -> int:
        return attribute_modifier(self.value(name), base)

    def modifiers(self, base: int = ATTRIBUTE_BASE) -> Dict[str, int]:
        return {name: attribute_modifier(getattr(self, name), base) for name in ATTRIBUTE_NAMES}
