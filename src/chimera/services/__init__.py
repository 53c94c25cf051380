"""Service layer exports."""

from .errors import FactoryError, ProgressionError
from .equipment_service import (
    BodyPartAddedEvent,
    BodyPartRemovedEvent,
    EquipFailedEvent,
    EquipmentEvent,
    EquipmentService,
    ItemEquippedEvent,
    ItemUnequippedEvent,
)
from .mutation_service import MutationChange, MutationService
from .progression_service import LevelUpResult, ProgressionService
from .attack_service import AttackService

__all__ = [
    "AttackService",
    "BodyPartAddedEvent",
    "BodyPartRemovedEvent",
    "EquipFailedEvent",
    "EquipmentEvent",
    "EquipmentService",
    "FactoryError",
    "ItemEquippedEvent",
    "ItemUnequippedEvent",
    "LevelUpResult",
    "MutationChange",
    "MutationService",
    "ProgressionError",
    "ProgressionService",
]
