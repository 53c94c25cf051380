"""Weapons repository."""
from __future__ import annotations

from typing import Dict

from chimera.core.dice import DiceExpression, InvalidDiceExpression
from chimera.data.errors import DataValidationError
from chimera.data.repositories.base import RepositoryBase
from chimera.domain.defs import WeaponDef


class WeaponsRepository(RepositoryBase[WeaponDef]):
    """Loads and validates weapon definitions."""

    def __init__(self, base_path=None) -> None:
        super().__init__("weapons.json", base_path)

    def _build(self, raw: dict[str, object]) -> Dict[str, WeaponDef]:
        weapons: Dict[str, WeaponDef] = {}
        for raw_id, payload in raw.items():
            context = f"weapon '{raw_id}'"
            weapon_data = self._require_mapping(payload, context)
            self._assert_exact_fields(
                weapon_data,
                {"name", "damage"},
                context,
                optional_fields={"pv", "weight", "value", "weapon_class", "tags"},
            )
            damage = self._require_str(weapon_data["damage"], f"{context} damage")
            try:
                DiceExpression.parse(damage)
            except InvalidDiceExpression as exc:
                raise DataValidationError(f"{context} damage: {exc}") from exc

            weapons[raw_id] = WeaponDef(
                id=raw_id,
                name=self._require_str(weapon_data["name"], f"{context} name"),
                damage=damage,
                pv=self._require_int(weapon_data.get("pv", 0), f"{context} pv"),
                weight=self._require_int(weapon_data.get("weight", 0), f"{context} weight"),
                value=self._require_int(weapon_data.get("value", 0), f"{context} value"),
                weapon_class=self._require_str(weapon_data.get("weapon_class", ""), f"{context} weapon_class"),
                tags=self._require_str_list(weapon_data.get("tags", []), f"{context} tags"),
            )
        return weapons
