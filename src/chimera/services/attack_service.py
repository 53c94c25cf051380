"""Melee attack orchestration: to-hit, penetration and damage for every hand."""
from __future__ import annotations

import logging
from typing import List

from chimera.core.config import DEFAULT_RULES, RulesConfig
from chimera.core.dice import DiceExpression, DiceRoll
from chimera.core.rng import RNG
from chimera.domain.battle_models import AttackResult, HandAttackResult, OffhandAttackResult
from chimera.domain.body import BodyPart
from chimera.domain.entities import Creature
from chimera.domain.errors import InvalidBodyPart, InvalidTarget, NoMainHandDesignated, NoWeapon
from chimera.domain.health import hp_after_damage
from chimera.domain.penetration import resolve_penetration
from chimera.domain.stat_derivation import compute_derived_stats, refresh_derived_stats
from chimera.domain.stat_models import DerivedStats
from chimera.domain.weapons import WeaponProfile, weapon_bearing_parts, weapon_for_part

logger = logging.getLogger(__name__)


class AttackService:
    """Resolves one full attack exchange between two creatures."""

    def __init__(self, rng: RNG, rules: RulesConfig = DEFAULT_RULES) -> None:
        self._rng = rng
        self._rules = rules

    def set_main_hand(self, creature: Creature, part_id: str) -> None:
        part = creature.body.get(part_id)
        if part is None:
            raise InvalidBodyPart(f"Body part '{part_id}' does not exist.")
        if weapon_for_part(creature, part_id) is None:
            raise NoWeapon(f"{part.display_name} has no weapon to attack with.")
        creature.main_hand_id = part_id
        refresh_derived_stats(creature, self._rules)

    def validate_attacker(self, creature: Creature) -> BodyPart:
        """Return the main-hand part, designating it when there is only one choice."""
        bearing = weapon_bearing_parts(creature)
        if not bearing:
            raise NoWeapon(f"{creature.name} has no equipped or natural weapon.")
        if creature.main_hand_id is not None:
            for part in bearing:
                if part.id == creature.main_hand_id:
                    return part
            raise NoMainHandDesignated(
                f"{creature.name}'s designated main hand is missing or holds no weapon."
            )
        if len(bearing) > 1:
            raise NoMainHandDesignated(
                f"{creature.name} has {len(bearing)} weapon-bearing parts and no main hand designated."
            )
        main = bearing[0]
        creature.main_hand_id = main.id
        refresh_derived_stats(creature, self._rules)
        logger.debug("Auto-designated %s as %s's main hand", main.display_name, creature.name)
        return main

    def execute_attack(
        self,
        attacker: Creature,
        target: Creature | None,
        *,
        current_turn: int | None = None,
    ) -> AttackResult:
        """Run the main hand, then each offhand in display order, then apply damage once."""
        if target is None:
            raise InvalidTarget("No target selected.")
        if target is attacker or target.id == attacker.id:
            raise InvalidTarget(f"{attacker.name} cannot attack itself.")
        main = self.validate_attacker(attacker)

        attacker_stats = self._stats(attacker)
        target_stats = self._stats(target)

        main_weapon = weapon_for_part(attacker, main.id)
        assert main_weapon is not None
        main_result = self._attack_with(attacker, attacker_stats, target_stats, main, main_weapon)

        offhands: List[OffhandAttackResult] = []
        for part in weapon_bearing_parts(attacker):
            if part.id == main.id:
                continue
            weapon = weapon_for_part(attacker, part.id)
            if weapon is None:
                continue
            chance = attacker_stats.combat.offhand_chances.get(part.id, 0)
            roll = self._rng.roll_die(self._rules.offhand_die)
            triggered = roll <= chance
            offhand = OffhandAttackResult(
                part_id=part.id,
                part_name=part.display_name,
                chance=chance,
                roll=roll,
                triggered=triggered,
            )
            if triggered:
                offhand.attack = self._attack_with(attacker, attacker_stats, target_stats, part, weapon)
            offhands.append(offhand)

        total = main_result.total_damage + sum(
            offhand.attack.total_damage for offhand in offhands if offhand.attack is not None
        )
        hp_before = target.hp
        target.hp = hp_after_damage(hp_before, total)
        if total > 0 and current_turn is not None:
            target.last_damage_turn = current_turn
        logger.info(
            "%s attacked %s for %d damage (%d -> %d HP)",
            attacker.name,
            target.name,
            total,
            hp_before,
            target.hp,
        )
        return AttackResult(
            attacker_id=attacker.id,
            attacker_name=attacker.name,
            target_id=target.id,
            target_name=target.name,
            main_hand=main_result,
            offhands=offhands,
            total_damage=total,
            target_hp_before=hp_before,
            target_hp_after=target.hp,
        )

    # ----------------------------------------------------------- Internals
    def _stats(self, creature: Creature) -> DerivedStats:
        return creature.derived or compute_derived_stats(creature, self._rules)

    def _attack_with(
        self,
        attacker: Creature,
        attacker_stats: DerivedStats,
        target_stats: DerivedStats,
        part: BodyPart,
        weapon: WeaponProfile,
    ) -> HandAttackResult:
        to_hit = DiceExpression(1, self._rules.to_hit_die, attacker_stats.modifiers["agility"]).roll(self._rng)
        target_dv = target_stats.combat.dv
        result = HandAttackResult(
            part_id=part.id,
            part_name=part.display_name,
            weapon=weapon,
            to_hit=to_hit,
            to_hit_total=to_hit.total,
            target_dv=target_dv,
            hit=to_hit.total >= target_dv,
        )
        if not result.hit:
            logger.debug("%s missed with %s (%d vs DV %d)", attacker.name, weapon.name, to_hit.total, target_dv)
            return result

        result.attacker_pv = attacker_stats.combat.pv + weapon.pv
        result.target_av = target_stats.combat.av
        result.penetration = resolve_penetration(self._rng, result.attacker_pv, result.target_av, self._rules)
        damage = DiceExpression.parse(weapon.damage)
        rolls: List[DiceRoll] = [damage.roll(self._rng) for _ in range(result.penetration.total_penetrations)]
        result.damage_rolls = rolls
        result.total_damage = sum(max(0, roll.total) for roll in rolls)
        logger.debug(
            "%s hit with %s: %d penetration(s), %d damage",
            attacker.name,
            weapon.name,
            result.penetration.total_penetrations,
            result.total_damage,
        )
        return result
