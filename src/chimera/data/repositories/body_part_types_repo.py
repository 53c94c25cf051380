"""Body-part type repository."""
from __future__ import annotations

from typing import Dict

from chimera.data.errors import DataReferenceError, DataValidationError
from chimera.data.repositories.base import RepositoryBase
from chimera.domain.defs import BodyPartTypeDef


class BodyPartTypesRepository(RepositoryBase[BodyPartTypeDef]):
    """Loads and validates the body-part type catalog."""

    def __init__(self, base_path=None) -> None:
        super().__init__("body_part_types.json", base_path)

    def _build(self, raw: dict[str, object]) -> Dict[str, BodyPartTypeDef]:
        types: Dict[str, BodyPartTypeDef] = {}
        for raw_id, payload in raw.items():
            context = f"body part type '{raw_id}'"
            data = self._require_mapping(payload, context)
            self._assert_exact_fields(
                data,
                {"name", "can_equip", "can_wield", "slot_type", "variants"},
                context,
                optional_fields={"mortal", "appendage", "mobility", "usually_on", "attack_chance"},
            )
            variants = self._require_str_list(data["variants"], f"{context} variants")
            if not variants:
                raise DataValidationError(f"{context} needs at least one variant.")
            usually_on = data.get("usually_on")
            if usually_on is not None:
                usually_on = self._require_str(usually_on, f"{context} usually_on")
            attack_chance = data.get("attack_chance")
            if attack_chance is not None:
                attack_chance = self._require_int(attack_chance, f"{context} attack_chance")

            types[raw_id] = BodyPartTypeDef(
                id=raw_id,
                name=self._require_str(data["name"], f"{context} name"),
                can_equip=self._require_bool(data["can_equip"], f"{context} can_equip"),
                can_wield=self._require_bool(data["can_wield"], f"{context} can_wield"),
                slot_type=self._require_str(data["slot_type"], f"{context} slot_type"),
                variants=variants,
                mortal=self._require_bool(data.get("mortal", False), f"{context} mortal"),
                appendage=self._require_bool(data.get("appendage", False), f"{context} appendage"),
                mobility=self._require_int(data.get("mobility", 0), f"{context} mobility"),
                usually_on=usually_on,
                attack_chance=attack_chance,
            )

        for type_def in types.values():
            if type_def.usually_on is not None and type_def.usually_on not in types:
                raise DataReferenceError(
                    f"body part type '{type_def.id}' is usually on unknown type '{type_def.usually_on}'."
                )
        return types
