"""Repository exports."""

from .armor_repo import ArmorRepository
from .body_part_types_repo import BodyPartTypesRepository
from .mutations_repo import MutationsRepository
from .weapons_repo import WeaponsRepository

__all__ = [
    "ArmorRepository",
    "BodyPartTypesRepository",
    "MutationsRepository",
    "WeaponsRepository",
]
