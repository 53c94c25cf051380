"""Runtime item instances carried by a creature."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from chimera.core.types import ItemKind
from chimera.domain.defs import ArmorDef, WeaponDef

ItemDef = Union[WeaponDef, ArmorDef]


@dataclass(slots=True)
class Item:
    """A weapon or armor instance.

    ``equipped`` mirrors whether any body part references this instance and is
    resynchronized by the equipment and mutation services.
    """

    id: str
    definition: ItemDef
    quantity: int = 1
    equipped: bool = False

    @property
    def kind(self) -> ItemKind:
        return "weapon" if isinstance(self.definition, WeaponDef) else "armor"

    @property
    def name(self) -> str:
        return self.definition.name

    @property
    def total_weight(self) -> int:
        return self.definition.weight * self.quantity
