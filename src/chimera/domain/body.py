"""Body-part hierarchy stored as an arena of parts addressed by id."""
from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from typing import Callable, Dict, Iterator, List, Mapping, Sequence

from chimera.domain.defs import BodyPartTypeDef
from chimera.domain.errors import InvalidBodyPart, InvalidBodyPartType, InvalidParent

ROOT_TYPE = "Body"

# Weighted growth table for chimeric limbs.
CHIMERA_GROWTH_WEIGHTS: tuple[tuple[str, int], ...] = (
    ("Hand", 3),
    ("Arm", 3),
    ("Head", 3),
    ("Face", 3),
    ("Feet", 3),
    ("Fin", 1),
    ("Tail", 1),
    ("Roots", 1),
    ("FungalOutcrop", 1),
)

# Children grown automatically with a chimeric part when none are listed.
CHIMERA_DEFAULT_CHILDREN: Mapping[str, tuple[str, ...]] = {
    "Arm": ("Hand",),
    "Head": ("Face",),
}


def make_part_id() -> str:
    """Return a new globally unique body-part id."""
    return f"bp_{uuid.uuid4().hex[:12]}"


@dataclass(slots=True)
class NaturalArmor:
    av: int = 0
    source: str = ""


@dataclass(slots=True)
class BodyPart:
    """One node of the body tree."""

    id: str
    type: str
    variant: str
    laterality: str = ""
    parent_id: str | None = None
    children: List[str] = field(default_factory=list)
    equipment: str | None = None
    natural_armor: NaturalArmor = field(default_factory=NaturalArmor)
    can_fly: bool = False
    chimera_origin: bool = False

    @property
    def display_name(self) -> str:
        if self.laterality:
            return f"{self.laterality} {self.variant}"
        return self.variant


@dataclass(frozen=True, slots=True)
class FlatPart:
    """A part together with its depth, as produced by ``BodyHierarchy.flatten``."""

    part: BodyPart
    depth: int
    has_children: bool


@dataclass(frozen=True, slots=True)
class TypeChange:
    """Record of an in-place retype, kept so it can be reversed."""

    part_id: str
    original_type: str
    new_type: str
    cleared_equipment: str | None = None


class BodyHierarchy:
    """Rooted tree of body parts with structural edits and capability queries."""

    def __init__(
        self,
        types: Mapping[str, BodyPartTypeDef],
        *,
        id_factory: Callable[[], str] = make_part_id,
    ) -> None:
        self._types: Dict[str, BodyPartTypeDef] = dict(types)
        self._id_factory = id_factory
        self._parts: Dict[str, BodyPart] = {}
        self._root_id: str | None = None

    # ------------------------------------------------------------------ Types
    @property
    def types(self) -> Mapping[str, BodyPartTypeDef]:
        return self._types

    def type_def(self, type_name: str) -> BodyPartTypeDef:
        try:
            return self._types[type_name]
        except KeyError as exc:
            raise InvalidBodyPartType(f"Unknown body part type '{type_name}'.") from exc

    def can_equip(self, part: BodyPart) -> bool:
        type_def = self._types.get(part.type)
        return type_def.can_equip if type_def else False

    def can_wield(self, part: BodyPart) -> bool:
        type_def = self._types.get(part.type)
        return type_def.can_wield if type_def else False

    # ------------------------------------------------------------------ Access
    @property
    def root_id(self) -> str | None:
        return self._root_id

    def __contains__(self, part_id: object) -> bool:
        return part_id in self._parts

    def __len__(self) -> int:
        return len(self._parts)

    def __iter__(self) -> Iterator[BodyPart]:
        return iter(self.parts())

    def get(self, part_id: str) -> BodyPart | None:
        return self._parts.get(part_id)

    def require(self, part_id: str) -> BodyPart:
        part = self._parts.get(part_id)
        if part is None:
            raise InvalidBodyPart(f"Body part '{part_id}' does not exist.")
        return part

    def parts(self) -> List[BodyPart]:
        """Return every part in display order."""
        return [entry.part for entry in self.flatten()]

    def display_name(self, part_id: str) -> str:
        return self.require(part_id).display_name

    # ------------------------------------------------------------------ Edits
    def create_root(self, type_name: str = ROOT_TYPE, variant: str | None = None) -> str:
        if self._root_id is not None:
            raise InvalidParent(f"Hierarchy already has a root '{self._root_id}'.")
        part = self._new_part(type_name, variant=variant, laterality="", parent_id=None)
        self._root_id = part.id
        return part.id

    def add_part(
        self,
        type_name: str,
        parent_id: str,
        variant: str | None = None,
        laterality: str = "",
        *,
        chimera_origin: bool = False,
    ) -> str:
        """Attach a new leaf under ``parent_id`` and return its id."""
        parent = self._parts.get(parent_id)
        if parent is None:
            raise InvalidParent(f"Parent body part '{parent_id}' does not exist.")
        part = self._new_part(type_name, variant=variant, laterality=laterality, parent_id=parent_id)
        part.chimera_origin = chimera_origin
        parent.children.append(part.id)
        return part.id

    def add_part_with_children(
        self,
        type_name: str,
        parent_id: str,
        child_types: Sequence[str],
        variant: str | None = None,
        laterality: str = "",
        *,
        chimera_origin: bool = False,
    ) -> List[str]:
        """Add a part and then one child per entry of ``child_types``, in order.

        Children share the parent's laterality. If a child type is unknown the
        parts added so far stay in place and are reported on the raised error.
        """
        added = [self.add_part(type_name, parent_id, variant, laterality, chimera_origin=chimera_origin)]
        for child_type in child_types:
            try:
                added.append(self.add_part(child_type, added[0], None, laterality, chimera_origin=chimera_origin))
            except InvalidBodyPartType as exc:
                raise InvalidBodyPartType(str(exc), added_ids=added) from exc
        return added

    def remove_part(self, part_id: str) -> List[str]:
        """Remove a part and all of its descendants.

        Returns the removed ids (the part first, then its descendants depth
        first). Removing an unknown id is a no-op that returns an empty list.
        """
        part = self._parts.get(part_id)
        if part is None:
            return []
        removed = [part_id, *self.descendants(part_id)]
        if part.parent_id is not None:
            parent = self._parts.get(part.parent_id)
            if parent is not None:
                parent.children = [child for child in parent.children if child != part_id]
        for removed_id in removed:
            self._parts.pop(removed_id, None)
        if part_id == self._root_id:
            self._root_id = None
        return removed

    def replace_type(
        self,
        target_type: str,
        new_type: str,
        parent_scope: str | None = None,
        *,
        preserve_equipment: bool = True,
    ) -> List[TypeChange]:
        """Retype every part of ``target_type`` in place, keeping ids and children.

        With ``parent_scope`` only descendants of that part are affected.
        """
        self.type_def(new_type)
        if parent_scope is not None:
            if parent_scope not in self._parts:
                return []
            candidates = [self._parts[pid] for pid in self.descendants(parent_scope)]
        else:
            candidates = self.parts()

        changes: List[TypeChange] = []
        for part in candidates:
            if part.type != target_type:
                continue
            cleared = None
            if not preserve_equipment and part.equipment is not None:
                cleared = part.equipment
                part.equipment = None
            part.type = new_type
            changes.append(TypeChange(part.id, target_type, new_type, cleared))
        return changes

    def restore_type(self, change: TypeChange) -> bool:
        """Undo a retype if the part still exists and still has the new type."""
        part = self._parts.get(change.part_id)
        if part is None or part.type != change.new_type:
            return False
        part.type = change.original_type
        return True

    # ------------------------------------------------------------------ Queries
    def descendants(self, part_id: str) -> List[str]:
        """Collect descendant ids depth first, parents before children."""
        collected: List[str] = []
        part = self._parts.get(part_id)
        if part is None:
            return collected
        stack = list(reversed(part.children))
        while stack:
            current_id = stack.pop()
            current = self._parts.get(current_id)
            if current is None:
                continue
            collected.append(current_id)
            stack.extend(reversed(current.children))
        return collected

    def parts_of_type(self, type_name: str) -> List[BodyPart]:
        return [part for part in self.parts() if part.type == type_name]

    def first_of_type(self, type_name: str) -> BodyPart | None:
        for part in self.parts():
            if part.type == type_name:
                return part
        return None

    def equippable_parts(self) -> List[BodyPart]:
        return [part for part in self.parts() if self.can_equip(part)]

    def wielding_parts(self) -> List[BodyPart]:
        return [part for part in self.parts() if self.can_wield(part)]

    def parts_holding(self, item_id: str) -> List[BodyPart]:
        return [part for part in self._parts.values() if part.equipment == item_id]

    def equipped_item_ids(self) -> set[str]:
        return {part.equipment for part in self._parts.values() if part.equipment is not None}

    def groups_by_type(self) -> Dict[str, List[BodyPart]]:
        """Group parts by type (laterality ignored), in display order."""
        groups: Dict[str, List[BodyPart]] = {}
        for part in self.parts():
            groups.setdefault(part.type, []).append(part)
        return groups

    def flatten(self) -> List[FlatPart]:
        """Depth-first listing for display: parents first, siblings in insertion order."""
        if self._root_id is None or self._root_id not in self._parts:
            return []
        flat: List[FlatPart] = []
        stack: List[tuple[str, int]] = [(self._root_id, 0)]
        while stack:
            part_id, depth = stack.pop()
            part = self._parts.get(part_id)
            if part is None:
                continue
            flat.append(FlatPart(part=part, depth=depth, has_children=bool(part.children)))
            for child_id in reversed(part.children):
                stack.append((child_id, depth + 1))
        return flat

    # ------------------------------------------------------------------ Internals
    def _new_part(
        self,
        type_name: str,
        *,
        variant: str | None,
        laterality: str,
        parent_id: str | None,
    ) -> BodyPart:
        type_def = self.type_def(type_name)
        part = BodyPart(
            id=self._id_factory(),
            type=type_name,
            variant=variant or type_def.default_variant,
            laterality=laterality,
            parent_id=parent_id,
        )
        self._parts[part.id] = part
        return part


def create_default_hierarchy(
    types: Mapping[str, BodyPartTypeDef],
    *,
    id_factory: Callable[[], str] = make_part_id,
) -> BodyHierarchy:
    """Build the standard humanoid layout with fresh ids.

    Body is the root with Head (and Face), Back, Left and Right Arm (each with
    a Hand), Feet and a Floating Nearby utility slot.
    """
    body = BodyHierarchy(types, id_factory=id_factory)
    root_id = body.create_root(ROOT_TYPE)
    body.add_part_with_children("Head", root_id, ["Face"])
    body.add_part("Back", root_id)
    body.add_part_with_children("Arm", root_id, ["Hand"], laterality="Left")
    body.add_part_with_children("Arm", root_id, ["Hand"], laterality="Right")
    body.add_part("Feet", root_id)
    body.add_part("FloatingNearby", root_id)
    return body
