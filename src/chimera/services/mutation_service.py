"""Mutation lifecycle: granting, applying and removing mutations."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List

from chimera.core.config import DEFAULT_RULES, RulesConfig
from chimera.core.rng import RNG
from chimera.data.repositories import MutationsRepository
from chimera.domain.body import CHIMERA_DEFAULT_CHILDREN, CHIMERA_GROWTH_WEIGHTS
from chimera.domain.defs import AddPartModification, ReplacePartModification
from chimera.domain.defs.mutation_def import RANDOM, ROOT
from chimera.domain.entities import Creature, Mutation
from chimera.domain.errors import InvalidBodyPartType
from chimera.domain.stat_derivation import refresh_derived_stats
from chimera.services.equipment_service import forget_removed_parts
from chimera.services.errors import FactoryError
from chimera.services.factories import make_instance_id

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class MutationChange:
    """Structural effects of one apply or remove call."""

    mutation_id: str
    mutation_name: str
    added_part_ids: List[str] = field(default_factory=list)
    replaced_part_ids: List[str] = field(default_factory=list)
    restored_part_ids: List[str] = field(default_factory=list)
    removed_part_ids: List[str] = field(default_factory=list)
    unequipped_item_ids: List[str] = field(default_factory=list)
    skipped: bool = False

    @property
    def changed_part_ids(self) -> List[str]:
        seen: List[str] = []
        for part_id in (
            *self.added_part_ids,
            *self.replaced_part_ids,
            *self.restored_part_ids,
            *self.removed_part_ids,
        ):
            if part_id not in seen:
                seen.append(part_id)
        return seen


class MutationService:
    """Applies mutation effects to a creature's body and stats."""

    def __init__(
        self,
        mutations_repo: MutationsRepository,
        rng: RNG,
        rules: RulesConfig = DEFAULT_RULES,
    ) -> None:
        self._mutations_repo = mutations_repo
        self._rng = rng
        self._rules = rules

    def grant_mutation(self, creature: Creature, mutation_id: str, level: int = 1) -> Mutation:
        """Give the creature an inactive instance of a catalog mutation."""
        try:
            definition = self._mutations_repo.get(mutation_id)
        except KeyError as exc:
            raise FactoryError(f"Mutation '{mutation_id}' not found.") from exc
        mutation = Mutation(id=make_instance_id("mutation", self._rng), definition=definition, level=max(1, level))
        creature.mutations[mutation.id] = mutation
        logger.info("Granted %s (level %d) to %s", definition.name, mutation.level, creature.name)
        return mutation

    def set_level(self, creature: Creature, mutation_id: str, level: int) -> Mutation:
        mutation = self._require(creature, mutation_id)
        mutation.level = max(1, level)
        refresh_derived_stats(creature, self._rules)
        return mutation

    def apply_mutation(self, creature: Creature, mutation_id: str) -> MutationChange:
        """Activate a mutation and perform its body modifications in order.

        Applying an already active mutation changes nothing.
        """
        mutation = self._require(creature, mutation_id)
        change = MutationChange(mutation_id=mutation.id, mutation_name=mutation.name)
        if mutation.active:
            logger.warning("%s is already active on %s; nothing to apply", mutation.name, creature.name)
            change.skipped = True
            return change

        try:
            for modification in mutation.definition.body_modifications:
                if isinstance(modification, ReplacePartModification):
                    self._apply_replace(creature, mutation, modification, change)
                elif isinstance(modification, AddPartModification):
                    self._apply_add(creature, mutation, modification, change)
        except InvalidBodyPartType:
            logger.warning("Applying %s to %s failed; rolling back its body edits", mutation.name, creature.name)
            self._undo_body_edits(creature, mutation, MutationChange(mutation.id, mutation.name))
            refresh_derived_stats(creature, self._rules)
            raise

        mutation.active = True
        change.unequipped_item_ids.extend(creature.sync_equipped_flags())
        refresh_derived_stats(creature, self._rules)
        logger.info(
            "Applied %s to %s (%d part(s) added, %d retyped)",
            mutation.name,
            creature.name,
            len(change.added_part_ids),
            len(change.replaced_part_ids),
        )
        return change

    def remove_mutation(self, creature: Creature, mutation_id: str) -> MutationChange:
        """Deactivate a mutation and reverse its structural edits.

        Replaced parts get their original types back on the same ids; added
        parts are deleted together with their descendants, releasing any
        equipment they held.
        """
        mutation = self._require(creature, mutation_id)
        change = MutationChange(mutation_id=mutation.id, mutation_name=mutation.name)
        if not mutation.active:
            logger.warning("%s is not active on %s; nothing to remove", mutation.name, creature.name)
            change.skipped = True
            return change

        self._undo_body_edits(creature, mutation, change)
        mutation.resource_current = None
        mutation.active = False
        refresh_derived_stats(creature, self._rules)
        logger.info(
            "Removed %s from %s (%d part(s) restored, %d removed)",
            mutation.name,
            creature.name,
            len(change.restored_part_ids),
            len(change.removed_part_ids),
        )
        return change

    def revoke_mutation(self, creature: Creature, mutation_id: str) -> MutationChange:
        """Remove a mutation's effects and drop it from the creature entirely."""
        change = self.remove_mutation(creature, mutation_id)
        creature.mutations.pop(mutation_id, None)
        return change

    # ----------------------------------------------------------- Internals
    @staticmethod
    def _undo_body_edits(creature: Creature, mutation: Mutation, change: MutationChange) -> None:
        for type_change in reversed(mutation.replaced_parts):
            if creature.body.restore_type(type_change):
                change.restored_part_ids.append(type_change.part_id)

        removed: List[str] = []
        for part_id in reversed(mutation.added_part_ids):
            removed.extend(creature.body.remove_part(part_id))
        change.removed_part_ids = removed
        change.unequipped_item_ids = forget_removed_parts(creature, removed)

        mutation.added_part_ids = []
        mutation.replaced_parts = []

    def _apply_replace(
        self,
        creature: Creature,
        mutation: Mutation,
        modification: ReplacePartModification,
        change: MutationChange,
    ) -> None:
        scope_id = None
        if modification.parent_scope_type is not None:
            scope = creature.body.first_of_type(modification.parent_scope_type)
            if scope is None:
                logger.warning(
                    "%s: no %s part to scope the replacement to", mutation.name, modification.parent_scope_type
                )
                return
            scope_id = scope.id
        type_changes = creature.body.replace_type(
            modification.target_type,
            modification.new_type,
            scope_id,
            preserve_equipment=modification.preserve_equipment,
        )
        mutation.replaced_parts.extend(type_changes)
        change.replaced_part_ids.extend(type_change.part_id for type_change in type_changes)

    def _apply_add(
        self,
        creature: Creature,
        mutation: Mutation,
        modification: AddPartModification,
        change: MutationChange,
    ) -> None:
        body = creature.body
        part_type = modification.part_type
        if part_type == RANDOM:
            part_type = self._rng.weighted_choice(CHIMERA_GROWTH_WEIGHTS)

        if modification.parent == ROOT:
            parent_id = body.root_id
        elif modification.parent == RANDOM:
            parts = body.parts()
            parent_id = self._rng.choice(parts).id if parts else None
        else:
            parent = body.first_of_type(modification.parent)
            parent_id = parent.id if parent is not None else None
        if parent_id is None:
            logger.warning("%s: no %s part to grow a %s from", mutation.name, modification.parent, part_type)
            return

        children = modification.with_children
        if not children and modification.chimera_origin:
            children = CHIMERA_DEFAULT_CHILDREN.get(part_type, ())

        try:
            added = body.add_part_with_children(
                part_type,
                parent_id,
                children,
                modification.variant,
                modification.laterality,
                chimera_origin=modification.chimera_origin,
            )
        except InvalidBodyPartType as exc:
            mutation.added_part_ids.extend(exc.added_ids)
            change.added_part_ids.extend(exc.added_ids)
            raise
        mutation.added_part_ids.extend(added)
        change.added_part_ids.extend(added)
        if modification.chimera_origin:
            logger.info(
                "A %s grows out of %s's %s",
                body.display_name(added[0]).lower(),
                creature.name,
                body.display_name(parent_id).lower(),
            )

    @staticmethod
    def _require(creature: Creature, mutation_id: str) -> Mutation:
        try:
            return creature.mutations[mutation_id]
        except KeyError as exc:
            raise FactoryError(f"{creature.name} has no mutation '{mutation_id}'.") from exc
