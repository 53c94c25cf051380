"""Factory for creating creatures with a default body."""
from __future__ import annotations

from typing import Dict, Mapping

from chimera.core.config import DEFAULT_RULES, RulesConfig
from chimera.core.rng import RNG
from chimera.core.types import CreatureKind, Lineage
from chimera.data.repositories import BodyPartTypesRepository
from chimera.domain.body import create_default_hierarchy
from chimera.domain.entities import Attributes, Creature
from chimera.domain.errors import InvalidBodyPartType
from chimera.domain.health import start_ledger
from chimera.domain.stat_derivation import refresh_derived_stats
from chimera.services.errors import FactoryError

from .id_factory import make_instance_id


def create_creature(
    name: str,
    body_part_types_repo: BodyPartTypesRepository,
    rng: RNG,
    *,
    kind: CreatureKind = "character",
    lineage: Lineage = "mutant",
    attributes: Attributes | None = None,
    stat_modifiers: Mapping[str, int] | None = None,
    rules: RulesConfig = DEFAULT_RULES,
) -> Creature:
    """Build a level 1 creature with the humanoid body and full hit points."""
    if kind not in ("character", "npc"):
        raise FactoryError(f"Unknown creature kind '{kind}'.")
    if lineage not in ("true_kin", "mutant"):
        raise FactoryError(f"Unknown lineage '{lineage}'.")
    types = {type_def.id: type_def for type_def in body_part_types_repo.all()}
    try:
        body = create_default_hierarchy(types)
    except InvalidBodyPartType as exc:
        raise FactoryError(f"Body part catalog is incomplete: {exc}") from exc

    attributes = attributes or Attributes()
    modifiers: Dict[str, int] = {}
    if kind == "npc" and stat_modifiers:
        modifiers = dict(stat_modifiers)
    creature = Creature(
        id=make_instance_id(kind, rng),
        name=name,
        body=body,
        attributes=attributes,
        kind=kind,
        lineage=lineage,
        hp_ledger=start_ledger(attributes.toughness, attributes.modifier("toughness", rules.attribute_base)),
        stat_modifiers=modifiers,
    )
    derived = refresh_derived_stats(creature, rules)
    creature.hp = derived.hp_max
    return creature
