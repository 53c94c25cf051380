"""Mutations repository."""
from __future__ import annotations

from typing import Dict, List, Set, Tuple

from chimera.core.dice import DiceExpression, InvalidDiceExpression
from chimera.core.types import ITEM_KINDS
from chimera.data.errors import DataReferenceError, DataValidationError
from chimera.data.repositories.base import RepositoryBase
from chimera.data.repositories.body_part_types_repo import BodyPartTypesRepository
from chimera.domain.defs import (
    AddPartModification,
    ArmorGrantDef,
    BodyModification,
    MutationDef,
    NaturalWeaponDef,
    ReplacePartModification,
    ResourceDef,
)
from chimera.domain.defs.mutation_def import RANDOM, ROOT, STAT_BONUS_KEYS
from chimera.domain.formulas import BonusFormula, DamageTier, LevelFormula, ScaledDice

_BONUS_KINDS = {"flat", "percent", "formula"}
_CATEGORIES = {"physical", "mental"}


class MutationsRepository(RepositoryBase[MutationDef]):
    """Loads mutation definitions and checks every body-part type they name."""

    def __init__(
        self,
        base_path=None,
        body_part_types_repo: BodyPartTypesRepository | None = None,
    ) -> None:
        super().__init__("mutations.json", base_path)
        self._body_part_types_repo = body_part_types_repo or BodyPartTypesRepository(base_path=base_path)

    def _build(self, raw: dict[str, object]) -> Dict[str, MutationDef]:
        known_types = {type_def.id for type_def in self._body_part_types_repo.all()}
        mutations: Dict[str, MutationDef] = {}
        for raw_id, payload in raw.items():
            context = f"mutation '{raw_id}'"
            data = self._require_mapping(payload, context)
            self._assert_exact_fields(
                data,
                {"name"},
                context,
                optional_fields={
                    "category",
                    "description",
                    "body_modifications",
                    "stat_bonuses",
                    "natural_weapon",
                    "armor_grant",
                    "flight_part_type",
                    "blocked_equipment",
                    "resource",
                },
            )
            category = self._require_str(data.get("category", "physical"), f"{context} category")
            if category not in _CATEGORIES:
                raise DataValidationError(f"{context} category must be one of {sorted(_CATEGORIES)}.")

            referenced: Set[str] = set()
            modifications = self._parse_modifications(data.get("body_modifications", []), context, referenced)
            natural_weapon = None
            if data.get("natural_weapon") is not None:
                natural_weapon = self._parse_natural_weapon(data["natural_weapon"], f"{context} natural_weapon")
                referenced.update(natural_weapon.body_part_types)
            armor_grant = None
            if data.get("armor_grant") is not None:
                armor_grant = self._parse_armor_grant(data["armor_grant"], f"{context} armor_grant")
                referenced.add(armor_grant.body_part_type)
            flight_part_type = data.get("flight_part_type")
            if flight_part_type is not None:
                flight_part_type = self._require_str(flight_part_type, f"{context} flight_part_type")
                referenced.add(flight_part_type)
            blocked = self._parse_blocked(data.get("blocked_equipment", {}), f"{context} blocked_equipment")
            referenced.update(blocked)
            resource = None
            if data.get("resource") is not None:
                resource = self._parse_resource(data["resource"], f"{context} resource")

            unknown = sorted(referenced - known_types)
            if unknown:
                raise DataReferenceError(f"{context} references unknown body part types {unknown}.")

            mutations[raw_id] = MutationDef(
                id=raw_id,
                name=self._require_str(data["name"], f"{context} name"),
                category=category,  # type: ignore[arg-type]
                description=self._require_str(data.get("description", ""), f"{context} description"),
                body_modifications=modifications,
                stat_bonuses=self._parse_bonuses(data.get("stat_bonuses", {}), f"{context} stat_bonuses"),
                natural_weapon=natural_weapon,
                armor_grant=armor_grant,
                flight_part_type=flight_part_type,
                blocked_equipment=blocked,
                resource=resource,
            )
        return mutations

    def _parse_modifications(
        self, value: object, context: str, referenced: Set[str]
    ) -> Tuple[BodyModification, ...]:
        if not isinstance(value, list):
            raise DataValidationError(f"{context} body_modifications must be a list.")
        modifications: List[BodyModification] = []
        for index, entry in enumerate(value):
            entry_context = f"{context} body_modifications[{index}]"
            data = self._require_mapping(entry, entry_context)
            action = data.get("action")
            if action == "add":
                self._assert_exact_fields(
                    data,
                    {"action", "part_type"},
                    entry_context,
                    optional_fields={"parent", "variant", "laterality", "with_children", "chimera_origin"},
                )
                part_type = self._require_str(data["part_type"], f"{entry_context} part_type")
                parent = self._require_str(data.get("parent", ROOT), f"{entry_context} parent")
                variant = data.get("variant")
                if variant is not None:
                    variant = self._require_str(variant, f"{entry_context} variant")
                children = self._require_str_list(data.get("with_children", []), f"{entry_context} with_children")
                if part_type != RANDOM:
                    referenced.add(part_type)
                if parent not in (ROOT, RANDOM):
                    referenced.add(parent)
                referenced.update(children)
                modifications.append(
                    AddPartModification(
                        part_type=part_type,
                        parent=parent,
                        variant=variant,
                        laterality=self._require_str(data.get("laterality", ""), f"{entry_context} laterality"),
                        with_children=children,
                        chimera_origin=self._require_bool(
                            data.get("chimera_origin", False), f"{entry_context} chimera_origin"
                        ),
                    )
                )
            elif action == "replace":
                self._assert_exact_fields(
                    data,
                    {"action", "target_type", "new_type"},
                    entry_context,
                    optional_fields={"preserve_equipment", "parent_scope_type"},
                )
                target = self._require_str(data["target_type"], f"{entry_context} target_type")
                new_type = self._require_str(data["new_type"], f"{entry_context} new_type")
                scope = data.get("parent_scope_type")
                if scope is not None:
                    scope = self._require_str(scope, f"{entry_context} parent_scope_type")
                    referenced.add(scope)
                referenced.update((target, new_type))
                modifications.append(
                    ReplacePartModification(
                        target_type=target,
                        new_type=new_type,
                        preserve_equipment=self._require_bool(
                            data.get("preserve_equipment", True), f"{entry_context} preserve_equipment"
                        ),
                        parent_scope_type=scope,
                    )
                )
            else:
                raise DataValidationError(f"{entry_context} action must be 'add' or 'replace'.")
        return tuple(modifications)

    def _parse_formula(self, value: object, context: str) -> LevelFormula:
        data = self._require_mapping(value, context)
        self._assert_exact_fields(
            data, set(), context, optional_fields={"base", "per_level", "divisor", "level_offset"}
        )
        divisor = self._require_int(data.get("divisor", 1), f"{context} divisor")
        if divisor < 1:
            raise DataValidationError(f"{context} divisor must be at least 1.")
        return LevelFormula(
            base=self._require_int(data.get("base", 0), f"{context} base"),
            per_level=self._require_int(data.get("per_level", 1), f"{context} per_level"),
            divisor=divisor,
            level_offset=self._require_int(data.get("level_offset", 0), f"{context} level_offset"),
        )

    def _parse_bonuses(self, value: object, context: str) -> Dict[str, BonusFormula]:
        data = self._require_mapping(value, context)
        bonuses: Dict[str, BonusFormula] = {}
        for key, payload in data.items():
            if key not in STAT_BONUS_KEYS:
                raise DataValidationError(f"{context} has unknown stat '{key}'.")
            bonus = self._require_mapping(payload, f"{context} {key}")
            self._assert_exact_fields(bonus, {"kind"}, f"{context} {key}", optional_fields={"value", "formula"})
            kind = self._require_str(bonus["kind"], f"{context} {key} kind")
            if kind not in _BONUS_KINDS:
                raise DataValidationError(f"{context} {key} kind must be one of {sorted(_BONUS_KINDS)}.")
            formula = None
            if kind == "formula":
                if "formula" not in bonus:
                    raise DataValidationError(f"{context} {key} needs a formula.")
                formula = self._parse_formula(bonus["formula"], f"{context} {key} formula")
            bonuses[key] = BonusFormula(
                kind=kind,  # type: ignore[arg-type]
                value=self._require_int(bonus.get("value", 0), f"{context} {key} value"),
                formula=formula,
            )
        return bonuses

    def _parse_natural_weapon(self, value: object, context: str) -> NaturalWeaponDef:
        data = self._require_mapping(value, context)
        self._assert_exact_fields(
            data,
            {"body_part_types"},
            context,
            optional_fields={
                "damage_tiers",
                "scaled_damage",
                "fallback_damage",
                "pv_formula",
                "pv",
                "attack_chance",
                "weapon_class",
            },
        )
        tiers: List[DamageTier] = []
        raw_tiers = data.get("damage_tiers", [])
        if not isinstance(raw_tiers, list):
            raise DataValidationError(f"{context} damage_tiers must be a list.")
        for index, raw_tier in enumerate(raw_tiers):
            tier_context = f"{context} damage_tiers[{index}]"
            tier = self._require_mapping(raw_tier, tier_context)
            self._assert_exact_fields(tier, {"min_level", "max_level", "damage"}, tier_context)
            tiers.append(
                DamageTier(
                    min_level=self._require_int(tier["min_level"], f"{tier_context} min_level"),
                    max_level=self._require_int(tier["max_level"], f"{tier_context} max_level"),
                    damage=self._require_dice(tier["damage"], f"{tier_context} damage"),
                )
            )
        scaled = None
        if data.get("scaled_damage") is not None:
            scaled_context = f"{context} scaled_damage"
            scaled_data = self._require_mapping(data["scaled_damage"], scaled_context)
            self._assert_exact_fields(
                scaled_data, {"count", "base_sides"}, scaled_context, optional_fields={"level_divisor"}
            )
            scaled = ScaledDice(
                count=self._require_int(scaled_data["count"], f"{scaled_context} count"),
                base_sides=self._require_int(scaled_data["base_sides"], f"{scaled_context} base_sides"),
                level_divisor=self._require_int(scaled_data.get("level_divisor", 1), f"{scaled_context} level_divisor"),
            )
        pv_formula = None
        if data.get("pv_formula") is not None:
            pv_formula = self._parse_formula(data["pv_formula"], f"{context} pv_formula")
        return NaturalWeaponDef(
            body_part_types=self._require_str_list(data["body_part_types"], f"{context} body_part_types"),
            damage_tiers=tuple(tiers),
            scaled_damage=scaled,
            fallback_damage=self._require_dice(data.get("fallback_damage", "1d4"), f"{context} fallback_damage"),
            pv_formula=pv_formula,
            pv=self._require_int(data.get("pv", 0), f"{context} pv"),
            attack_chance=self._require_int(data.get("attack_chance", 0), f"{context} attack_chance"),
            weapon_class=self._require_str(data.get("weapon_class", ""), f"{context} weapon_class"),
        )

    def _parse_armor_grant(self, value: object, context: str) -> ArmorGrantDef:
        data = self._require_mapping(value, context)
        self._assert_exact_fields(data, {"body_part_type", "av_formula"}, context)
        return ArmorGrantDef(
            body_part_type=self._require_str(data["body_part_type"], f"{context} body_part_type"),
            av_formula=self._parse_formula(data["av_formula"], f"{context} av_formula"),
        )

    def _parse_blocked(self, value: object, context: str) -> Dict[str, Tuple[str, ...]]:
        data = self._require_mapping(value, context)
        blocked: Dict[str, Tuple[str, ...]] = {}
        for part_type, kinds in data.items():
            entries = self._require_str_list(kinds, f"{context} {part_type}")
            for kind in entries:
                if kind not in ITEM_KINDS:
                    raise DataValidationError(f"{context} {part_type} has unknown item kind '{kind}'.")
            blocked[part_type] = entries
        return blocked

    def _parse_resource(self, value: object, context: str) -> ResourceDef:
        data = self._require_mapping(value, context)
        self._assert_exact_fields(data, {"name", "max_formula"}, context)
        return ResourceDef(
            name=self._require_str(data["name"], f"{context} name"),
            max_formula=self._parse_formula(data["max_formula"], f"{context} max_formula"),
        )

    def _require_dice(self, value: object, context: str) -> str:
        text = self._require_str(value, context)
        try:
            DiceExpression.parse(text)
        except InvalidDiceExpression as exc:
            raise DataValidationError(f"{context}: {exc}") from exc
        return text
