"""Armor repository."""
from __future__ import annotations

from typing import Dict

from chimera.data.repositories.base import RepositoryBase
from chimera.domain.defs import ArmorDef


class ArmorRepository(RepositoryBase[ArmorDef]):
    """Loads and validates armor definitions."""

    def __init__(self, base_path=None) -> None:
        super().__init__("armor.json", base_path)

    def _build(self, raw: dict[str, object]) -> Dict[str, ArmorDef]:
        armor: Dict[str, ArmorDef] = {}
        for raw_id, payload in raw.items():
            context = f"armor '{raw_id}'"
            data = self._require_mapping(payload, context)
            self._assert_exact_fields(
                data,
                {"name", "slot", "av"},
                context,
                optional_fields={"dv_modifier", "weight", "value"},
            )
            armor[raw_id] = ArmorDef(
                id=raw_id,
                name=self._require_str(data["name"], f"{context} name"),
                slot=self._require_str(data["slot"], f"{context} slot"),
                av=self._require_int(data["av"], f"{context} av"),
                dv_modifier=self._require_int(data.get("dv_modifier", 0), f"{context} dv_modifier"),
                weight=self._require_int(data.get("weight", 0), f"{context} weight"),
                value=self._require_int(data.get("value", 0), f"{context} value"),
            )
        return armor
