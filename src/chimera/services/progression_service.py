"""Levelling, attribute edits, skill points and hit-point bookkeeping."""
from __future__ import annotations

import logging
from dataclasses import dataclass

from chimera.core.config import DEFAULT_RULES, RulesConfig
from chimera.core.rng import RNG
from chimera.core.types import ATTRIBUTE_NAMES, AttributeName
from chimera.domain.entities import Creature
from chimera.domain.health import hp_after_damage, level_entry, regeneration_interrupted
from chimera.domain.stat_derivation import refresh_derived_stats
from chimera.domain.stat_models import DerivedStats
from chimera.services.errors import ProgressionError

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class LevelUpResult:
    creature_id: str
    new_level: int
    roll: int
    hp_gained: int
    hp_max: int


class ProgressionService:
    """Mutates the ground-truth fields that the stat pipeline reads."""

    def __init__(self, rules: RulesConfig = DEFAULT_RULES) -> None:
        self._rules = rules

    def level_up(self, creature: Creature, rng: RNG) -> LevelUpResult:
        """Roll the level-up hit die and record it in the HP ledger.

        The roll is stored permanently; the toughness modifier added to it is
        recomputed whenever toughness changes. Current HP is left as is.
        """
        roll = rng.roll_die(self._rules.level_up_hp_die)
        new_level = creature.level + 1
        modifier = creature.attributes.modifier("toughness", self._rules.attribute_base)
        entry = level_entry(new_level, roll, modifier)
        creature.hp_ledger.append(entry)
        creature.level = new_level
        derived = refresh_derived_stats(creature, self._rules)
        logger.info("%s reached level %d (rolled %d, +%d HP)", creature.name, new_level, roll, entry.total)
        return LevelUpResult(
            creature_id=creature.id,
            new_level=new_level,
            roll=roll,
            hp_gained=entry.total,
            hp_max=derived.hp_max,
        )

    def set_attribute(self, creature: Creature, name: AttributeName, value: int) -> DerivedStats:
        if name not in ATTRIBUTE_NAMES:
            raise ProgressionError(f"Unknown attribute '{name}'.")
        creature.attributes.set_value(name, value)
        logger.debug("%s %s set to %d", creature.name, name, value)
        return refresh_derived_stats(creature, self._rules)

    def set_multiweapon_tier(self, creature: Creature, tier: int) -> DerivedStats:
        if not 0 <= tier < len(self._rules.multiweapon_bonuses):
            raise ProgressionError(f"Multiweapon fighting tier must be 0-{len(self._rules.multiweapon_bonuses) - 1}.")
        creature.multiweapon_tier = tier
        return refresh_derived_stats(creature, self._rules)

    def spend_skill_points(self, creature: Creature, amount: int) -> DerivedStats:
        if amount < 0:
            raise ProgressionError("Cannot spend a negative number of skill points.")
        derived = creature.derived or refresh_derived_stats(creature, self._rules)
        available = derived.skill_points.available
        if amount > available:
            raise ProgressionError(f"{creature.name} has only {available} skill points available.")
        creature.skill_points_spent += amount
        return refresh_derived_stats(creature, self._rules)

    def apply_damage(self, creature: Creature, amount: int, current_turn: int = 0) -> int:
        """Reduce current HP (never below zero) and note when damage was taken."""
        creature.hp = hp_after_damage(creature.hp, amount)
        creature.last_damage_turn = current_turn
        logger.debug("%s took %d damage on turn %d (%d HP left)", creature.name, amount, current_turn, creature.hp)
        return creature.hp

    def heal(self, creature: Creature, amount: int) -> int:
        derived = creature.derived or refresh_derived_stats(creature, self._rules)
        creature.hp = min(derived.hp_max, creature.hp + max(0, amount))
        return creature.hp

    def can_regenerate(self, creature: Creature, current_turn: int) -> bool:
        return not regeneration_interrupted(
            creature.last_damage_turn, current_turn, self._rules.regen_interrupt_turns
        )
