"""Factory helpers for runtime entities."""

from .creature_factory import create_creature
from .id_factory import make_instance_id, make_part_id
from .item_factory import create_item, create_item_from_id

__all__ = [
    "create_creature",
    "create_item",
    "create_item_from_id",
    "make_instance_id",
    "make_part_id",
]
