"""Resolving which weapon, if any, a body part attacks with."""
from __future__ import annotations

from dataclasses import dataclass
from typing import List

from chimera.core.types import ItemKind
from chimera.domain.body import BodyPart
from chimera.domain.defs import WeaponDef
from chimera.domain.entities import Creature, Mutation


@dataclass(frozen=True, slots=True)
class WeaponProfile:
    """The attack-relevant view of an equipped or natural weapon."""

    id: str
    name: str
    damage: str
    pv: int
    natural: bool = False
    weapon_class: str = ""


def mutation_level(creature: Creature, mutation: Mutation) -> int:
    return mutation.effective_level(creature.attributes.modifier("ego"))


def natural_weapon_for_part(creature: Creature, part_id: str) -> WeaponProfile | None:
    """Return the natural weapon an active mutation grants this part.

    Anything equipped on the part overrides natural weapons.
    """
    part = creature.body.get(part_id)
    if part is None or part.equipment is not None:
        return None
    for mutation in creature.active_mutations():
        natural = mutation.definition.natural_weapon
        if natural is None or part.type not in natural.body_part_types:
            continue
        level = mutation_level(creature, mutation)
        return WeaponProfile(
            id=f"natural-{mutation.id}-{part_id}",
            name=mutation.name,
            damage=natural.damage_for_level(level),
            pv=natural.pv_for_level(level),
            natural=True,
            weapon_class=natural.weapon_class,
        )
    return None


def weapon_for_part(creature: Creature, part_id: str) -> WeaponProfile | None:
    """Equipped weapon first, then a natural weapon, else ``None``."""
    part = creature.body.get(part_id)
    if part is None:
        return None
    item = creature.get_item(part.equipment)
    if item is not None and isinstance(item.definition, WeaponDef):
        return WeaponProfile(
            id=item.id,
            name=item.name,
            damage=item.definition.damage,
            pv=item.definition.pv,
            weapon_class=item.definition.weapon_class,
        )
    return natural_weapon_for_part(creature, part_id)


def weapon_bearing_parts(creature: Creature) -> List[BodyPart]:
    """Parts with an equipped or natural weapon, in display order."""
    return [part for part in creature.body.parts() if weapon_for_part(creature, part.id) is not None]


def natural_attack_chance(creature: Creature, part: BodyPart) -> int | None:
    """Attack chance of the first active natural weapon covering this part type."""
    for mutation in creature.active_mutations():
        natural = mutation.definition.natural_weapon
        if natural is not None and part.type in natural.body_part_types:
            return natural.attack_chance
    return None


def is_equipment_blocked(creature: Creature, part: BodyPart, item_kind: ItemKind) -> bool:
    """True when an active mutation forbids ``item_kind`` on this part type."""
    for mutation in creature.active_mutations():
        blocked = mutation.definition.blocked_equipment.get(part.type, ())
        if item_kind in blocked:
            return True
    return False
