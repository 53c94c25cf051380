"""Factory for item instances."""
from __future__ import annotations

from chimera.core.rng import RNG
from chimera.data.repositories import ArmorRepository, WeaponsRepository
from chimera.domain.entities import Item, ItemDef
from chimera.services.errors import FactoryError

from .id_factory import make_instance_id


def create_item(definition: ItemDef, rng: RNG, quantity: int = 1) -> Item:
    if quantity < 1:
        raise FactoryError(f"Cannot create {quantity} of '{definition.id}'.")
    return Item(id=make_instance_id("item", rng), definition=definition, quantity=quantity)


def create_item_from_id(
    item_id: str,
    weapons_repo: WeaponsRepository,
    armor_repo: ArmorRepository,
    rng: RNG,
    quantity: int = 1,
) -> Item:
    """Look the id up as a weapon, then as armor."""
    if weapons_repo.has(item_id):
        return create_item(weapons_repo.get(item_id), rng, quantity)
    if armor_repo.has(item_id):
        return create_item(armor_repo.get(item_id), rng, quantity)
    raise FactoryError(f"Item '{item_id}' not found.")
