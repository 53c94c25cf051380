"""Weapon definition structures."""
from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class WeaponDef:
    """Melee weapon with a damage expression and a penetration bonus."""

    id: str
    name: str
    damage: str
    pv: int = 0
    weight: int = 0
    value: int = 0
    weapon_class: str = ""
    tags: tuple[str, ...] = ()
