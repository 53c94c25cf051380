"""Creature runtime model."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List

from chimera.core.types import CreatureKind, Lineage
from chimera.domain.body import BodyHierarchy
from chimera.domain.health import HpLedgerEntry
from chimera.domain.stat_models import DerivedStats

from .attributes import Attributes
from .item import Item
from .mutation import Mutation


@dataclass(slots=True)
class Creature:
    """A character or npc with a mutable body.

    ``derived`` is never authoritative; it is rebuilt wholesale by
    ``refresh_derived_stats`` after every change to the fields above it.
    """

    id: str
    name: str
    body: BodyHierarchy
    attributes: Attributes = field(default_factory=Attributes)
    kind: CreatureKind = "character"
    lineage: Lineage = "mutant"
    level: int = 1
    hp: int = 0
    hp_ledger: List[HpLedgerEntry] = field(default_factory=list)
    items: Dict[str, Item] = field(default_factory=dict)
    mutations: Dict[str, Mutation] = field(default_factory=dict)
    skill_points_spent: int = 0
    multiweapon_tier: int = 0
    main_hand_id: str | None = None
    stat_modifiers: Dict[str, int] = field(default_factory=dict)
    last_damage_turn: int | None = None
    derived: DerivedStats | None = None

    @property
    def is_alive(self) -> bool:
        return self.hp > 0

    def active_mutations(self) -> List[Mutation]:
        return [mutation for mutation in self.mutations.values() if mutation.active]

    def get_item(self, item_id: str | None) -> Item | None:
        if item_id is None:
            return None
        return self.items.get(item_id)

    def sync_equipped_flags(self) -> List[str]:
        """Make every item's ``equipped`` flag match the body references.

        Returns the ids of items that went from equipped to unequipped.
        """
        referenced = self.body.equipped_item_ids()
        released: List[str] = []
        for item in self.items.values():
            now_equipped = item.id in referenced
            if item.equipped and not now_equipped:
                released.append(item.id)
            item.equipped = now_equipped
        return released
