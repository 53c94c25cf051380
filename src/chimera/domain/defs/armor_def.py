"""Armor definition structures."""
from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class ArmorDef:
    """Wearable armor bound to one body-part slot type."""

    id: str
    name: str
    slot: str
    av: int
    dv_modifier: int = 0
    weight: int = 0
    value: int = 0
