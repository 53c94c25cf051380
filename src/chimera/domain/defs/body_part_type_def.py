"""Body-part type catalog entries."""
from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class BodyPartTypeDef:
    """Fixed capabilities shared by every body part of one type.

    Instances never override these; they only differ in which item occupies
    the slot.
    """

    id: str
    name: str
    can_equip: bool
    can_wield: bool
    slot_type: str
    variants: tuple[str, ...]
    mortal: bool = False
    appendage: bool = False
    mobility: int = 0
    usually_on: str | None = None
    attack_chance: int | None = None

    @property
    def default_variant(self) -> str:
        return self.variants[0] if self.variants else self.name
