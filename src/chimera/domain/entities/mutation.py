"""Runtime mutation instances."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import List

from chimera.domain.body import TypeChange
from chimera.domain.defs import MutationDef


@dataclass(slots=True)
class Mutation:
    """A mutation owned by a creature, with the structural edits it made."""

    id: str
    definition: MutationDef
    level: int = 1
    active: bool = False
    added_part_ids: List[str] = field(default_factory=list)
    replaced_parts: List[TypeChange] = field(default_factory=list)
    resource_current: int | None = None

    @property
    def name(self) -> str:
        return self.definition.name

    def effective_level(self, ego_modifier: int) -> int:
        """Mental mutations gain (or lose) levels from the ego modifier."""
        if self.definition.is_mental:
            return max(1, self.level + ego_modifier)
        return self.level
