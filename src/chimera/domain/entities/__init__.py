"""Runtime entity exports."""

from .attributes import Attributes, attribute_modifier
from .creature import Creature
from .item import Item, ItemDef
from .mutation import Mutation

__all__ = [
    "Attributes",
    "Creature",
    "Item",
    "ItemDef",
    "Mutation",
    "attribute_modifier",
]
