"""Equipment and body-part orchestration services."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, List, Sequence

from chimera.core.config import DEFAULT_RULES, RulesConfig
from chimera.core.types import ItemKind
from chimera.domain.defs import ArmorDef, WeaponDef
from chimera.domain.entities import Creature, Item
from chimera.domain.stat_derivation import refresh_derived_stats
from chimera.domain.weapons import is_equipment_blocked, weapon_for_part

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class EquipmentEvent:
    """Base class for equipment and body-part events."""


@dataclass(slots=True)
class ItemEquippedEvent(EquipmentEvent):
    creature_id: str
    item_id: str
    item_name: str
    part_id: str
    part_name: str
    category: ItemKind


@dataclass(slots=True)
class ItemUnequippedEvent(EquipmentEvent):
    creature_id: str
    item_id: str
    item_name: str
    part_id: str
    part_name: str
    category: ItemKind


@dataclass(slots=True)
class EquipFailedEvent(EquipmentEvent):
    creature_id: str
    reason: str
    message: str


@dataclass(slots=True)
class BodyPartAddedEvent(EquipmentEvent):
    creature_id: str
    part_ids: List[str]
    parent_id: str


@dataclass(slots=True)
class BodyPartRemovedEvent(EquipmentEvent):
    creature_id: str
    part_id: str
    removed_ids: List[str]
    released_item_ids: List[str]


def forget_removed_parts(creature: Creature, removed_ids: Iterable[str]) -> List[str]:
    """Drop references to parts that no longer exist.

    Clears a removed main hand, prunes mutation tracking, and resynchronizes
    item ``equipped`` flags. Returns the ids of items that were released.
    """
    removed = set(removed_ids)
    if creature.main_hand_id in removed:
        creature.main_hand_id = None
    for mutation in creature.mutations.values():
        mutation.added_part_ids = [pid for pid in mutation.added_part_ids if pid not in removed]
        mutation.replaced_parts = [change for change in mutation.replaced_parts if change.part_id not in removed]
    return creature.sync_equipped_flags()


class EquipmentService:
    """Equips items onto body parts and edits the body outside of mutations."""

    def __init__(self, rules: RulesConfig = DEFAULT_RULES) -> None:
        self._rules = rules

    # ----------------------------------------------------------- Inventory
    def pick_up(self, creature: Creature, item: Item) -> None:
        creature.items[item.id] = item
        item.equipped = False
        refresh_derived_stats(creature, self._rules)

    def drop(self, creature: Creature, item_id: str) -> List[EquipmentEvent]:
        """Remove a carried item, clearing every part that referenced it."""
        if item_id not in creature.items:
            return [self._failed(creature, "unknown_item", f"Item '{item_id}' is not carried.")]
        events: List[EquipmentEvent] = []
        for holder in creature.body.parts_holding(item_id):
            events.extend(self._clear_part(creature, holder.id))
        del creature.items[item_id]
        self._release_stale_main_hand(creature)
        refresh_derived_stats(creature, self._rules)
        return events

    # ----------------------------------------------------------- Equipment
    def equip(self, creature: Creature, item_id: str, part_id: str) -> List[EquipmentEvent]:
        item = creature.get_item(item_id)
        if item is None:
            return [self._failed(creature, "unknown_item", f"Item '{item_id}' is not carried.")]
        part = creature.body.get(part_id)
        if part is None:
            return [self._failed(creature, "unknown_part", f"Body part '{part_id}' does not exist.")]
        if not creature.body.can_equip(part):
            return [self._failed(creature, "cannot_equip", f"{part.display_name} cannot hold equipment.")]

        definition = item.definition
        if isinstance(definition, ArmorDef):
            slot_type = creature.body.type_def(part.type).slot_type
            if definition.slot != slot_type:
                return [
                    self._failed(
                        creature,
                        "wrong_slot",
                        f"{item.name} is worn on the {definition.slot}, not the {slot_type}.",
                    )
                ]
        elif isinstance(definition, WeaponDef) and not creature.body.can_wield(part):
            return [self._failed(creature, "cannot_wield", f"{part.display_name} cannot wield weapons.")]

        if is_equipment_blocked(creature, part, item.kind):
            return [
                self._failed(
                    creature,
                    "blocked",
                    f"Cannot equip {item.kind} on {part.type}: blocked by an active mutation.",
                )
            ]

        events: List[EquipmentEvent] = []
        if part.equipment is not None and part.equipment != item_id:
            events.extend(self._clear_part(creature, part_id))
        for holder in creature.body.parts_holding(item_id):
            if holder.id != part_id:
                events.extend(self._clear_part(creature, holder.id))

        part.equipment = item_id
        creature.sync_equipped_flags()
        self._release_stale_main_hand(creature)
        events.append(
            ItemEquippedEvent(
                creature_id=creature.id,
                item_id=item.id,
                item_name=item.name,
                part_id=part.id,
                part_name=part.display_name,
                category=item.kind,
            )
        )
        logger.info("%s equipped %s on %s", creature.name, item.name, part.display_name)
        refresh_derived_stats(creature, self._rules)
        return events

    def unequip(self, creature: Creature, part_id: str) -> List[EquipmentEvent]:
        part = creature.body.get(part_id)
        if part is None:
            return [self._failed(creature, "unknown_part", f"Body part '{part_id}' does not exist.")]
        if part.equipment is None:
            return [self._failed(creature, "slot_empty", f"{part.display_name} holds nothing.")]
        events = self._clear_part(creature, part_id)
        self._release_stale_main_hand(creature)
        refresh_derived_stats(creature, self._rules)
        return events

    # ----------------------------------------------------------- Body edits
    def add_body_part(
        self,
        creature: Creature,
        part_type: str,
        parent_id: str,
        *,
        variant: str | None = None,
        laterality: str = "",
        with_children: Sequence[str] = (),
    ) -> List[EquipmentEvent]:
        """GM edit: grow a part (and children) outside of any mutation."""
        added = creature.body.add_part_with_children(part_type, parent_id, with_children, variant, laterality)
        logger.info("Added %s to %s under %s", part_type, creature.name, parent_id)
        refresh_derived_stats(creature, self._rules)
        return [BodyPartAddedEvent(creature_id=creature.id, part_ids=added, parent_id=parent_id)]

    def remove_body_part(self, creature: Creature, part_id: str) -> List[EquipmentEvent]:
        """Remove a part and its descendants, unequipping anything they held."""
        if part_id not in creature.body:
            return []
        doomed = [creature.body.require(pid) for pid in (part_id, *creature.body.descendants(part_id))]
        held = {part.id: part.equipment for part in doomed if part.equipment is not None}
        names = {pid: creature.body.display_name(pid) for pid in held}
        removed = creature.body.remove_part(part_id)
        released = forget_removed_parts(creature, removed)

        events: List[EquipmentEvent] = []
        for holder_id, item_id in held.items():
            item = creature.get_item(item_id)
            if item is None or item_id not in released:
                continue
            events.append(
                ItemUnequippedEvent(
                    creature_id=creature.id,
                    item_id=item.id,
                    item_name=item.name,
                    part_id=holder_id,
                    part_name=names[holder_id],
                    category=item.kind,
                )
            )
        events.append(
            BodyPartRemovedEvent(
                creature_id=creature.id,
                part_id=part_id,
                removed_ids=removed,
                released_item_ids=released,
            )
        )
        logger.info("Removed %d body part(s) from %s", len(removed), creature.name)
        refresh_derived_stats(creature, self._rules)
        return events

    # ----------------------------------------------------------- Internals
    @staticmethod
    def _release_stale_main_hand(creature: Creature) -> None:
        main_id = creature.main_hand_id
        if main_id is not None and weapon_for_part(creature, main_id) is None:
            logger.info("%s no longer has a weapon in the main hand", creature.name)
            creature.main_hand_id = None

    def _clear_part(self, creature: Creature, part_id: str) -> List[EquipmentEvent]:
        part = creature.body.require(part_id)
        item = creature.get_item(part.equipment)
        part.equipment = None
        creature.sync_equipped_flags()
        if item is None:
            return []
        logger.info("%s unequipped %s from %s", creature.name, item.name, part.display_name)
        return [
            ItemUnequippedEvent(
                creature_id=creature.id,
                item_id=item.id,
                item_name=item.name,
                part_id=part.id,
                part_name=part.display_name,
                category=item.kind,
            )
        ]

    @staticmethod
    def _failed(creature: Creature, reason: str, message: str) -> EquipFailedEvent:
        logger.debug("Equip failed for %s: %s", creature.id, message)
        return EquipFailedEvent(creature_id=creature.id, reason=reason, message=message)
