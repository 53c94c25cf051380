"""Shared type aliases for the core and domain layers."""
from typing import Literal

AttributeName = Literal["strength", "agility", "toughness", "intelligence", "willpower", "ego"]
ItemKind = Literal["weapon", "armor"]
CreatureKind = Literal["character", "npc"]
Lineage = Literal["true_kin", "mutant"]
BonusKind = Literal["flat", "percent", "formula"]

ATTRIBUTE_NAMES: tuple[AttributeName, ...] = (
    "strength",
    "agility",
    "toughness",
    "intelligence",
    "willpower",
    "ego",
)
ITEM_KINDS: tuple[ItemKind, ...] = ("weapon", "armor")

__all__ = [
    "ATTRIBUTE_NAMES",
    "AttributeName",
    "BonusKind",
    "CreatureKind",
    "ITEM_KINDS",
    "ItemKind",
    "Lineage",
]
