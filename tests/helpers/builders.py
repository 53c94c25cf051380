from __future__ import annotations

from chimera.core.rng import RNG
from chimera.data.repositories import (
    ArmorRepository,
    BodyPartTypesRepository,
    MutationsRepository,
    WeaponsRepository,
)
from chimera.domain.entities import Attributes, Creature, Item
from chimera.services.factories import create_creature, create_item_from_id

body_part_types_repo = BodyPartTypesRepository()
weapons_repo = WeaponsRepository()
armor_repo = ArmorRepository()
mutations_repo = MutationsRepository(body_part_types_repo=body_part_types_repo)


def make_creature(name: str = "Mehmet", rng: RNG | None = None, **kwargs) -> Creature:
    return create_creature(name, body_part_types_repo, rng or RNG(7), **kwargs)


def make_item(item_id: str, rng: RNG | None = None, quantity: int = 1) -> Item:
    return create_item_from_id(item_id, weapons_repo, armor_repo, rng or RNG(11), quantity)


def part_of(creature: Creature, type_name: str, laterality: str = ""):
    for part in creature.body.parts():
        if part.type == type_name and (not laterality or part.laterality == laterality):
            return part
    raise AssertionError(f"No {laterality} {type_name} on {creature.name}")


def attributes(**overrides: int) -> Attributes:
    return Attributes(**overrides)
