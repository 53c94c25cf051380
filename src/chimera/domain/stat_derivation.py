"""Derived-stat pipeline.

``compute_derived_stats`` is a pure function of a creature's attributes, body,
items and active mutations. ``refresh_derived_stats`` stores its result and
writes the per-part values (natural armor, flight flags), the rewritten HP
ledger and the clamped current HP back onto the creature. The steps run in a
fixed order because later steps read earlier results: natural armor feeds
armor value, and mutation bonuses stack on top of the base carry capacity.
"""
from __future__ import annotations

import logging
import math
from fractions import Fraction
from typing import Dict, List, Tuple

from chimera.core.config import DEFAULT_RULES, RulesConfig
from chimera.domain.body import NaturalArmor
from chimera.domain.defs import ArmorDef
from chimera.domain.entities import Creature
from chimera.domain.health import clamp_hp, recompute_ledger, regeneration_rate
from chimera.domain.stat_models import (
    CarryCapacity,
    CombatProfile,
    CooldownReduction,
    DerivedStats,
    GmAdjustment,
    SkillPoints,
)
from chimera.domain.weapons import mutation_level, natural_attack_chance

logger = logging.getLogger(__name__)

GM_MODIFIER_KEYS = ("dv", "pv", "ma", "av", "hp")


def compute_attribute_modifiers(creature: Creature, rules: RulesConfig = DEFAULT_RULES) -> Dict[str, int]:
    return creature.attributes.modifiers(rules.attribute_base)


def compute_natural_armor(creature: Creature) -> Tuple[Dict[str, NaturalArmor], Tuple[str, ...]]:
    """Start every part from zero, then apply armor grants and flight grants."""
    natural: Dict[str, NaturalArmor] = {part.id: NaturalArmor() for part in creature.body.parts()}
    flight: List[str] = []
    active = creature.active_mutations()

    for mutation in active:
        grant = mutation.definition.armor_grant
        if grant is None:
            continue
        av = grant.av_formula.evaluate(mutation_level(creature, mutation))
        for part in creature.body.parts_of_type(grant.body_part_type):
            natural[part.id] = NaturalArmor(av=av, source=mutation.name)

    for mutation in active:
        flight_type = mutation.definition.flight_part_type
        if flight_type is None:
            continue
        for part in creature.body.parts_of_type(flight_type):
            if part.id not in flight:
                flight.append(part.id)
    return natural, tuple(flight)


def compute_equipment_bonuses(creature: Creature, natural: Dict[str, NaturalArmor]) -> Tuple[int, int]:
    """Return ``(armor value, dodge bonus)`` using per-type averaging.

    Parts are grouped by type regardless of laterality. Within a group each
    part contributes its armor's AV plus its natural AV, and its armor's DV
    modifier; each group contributes the mean of those lists. Group means are
    summed and rounded down once at the end, so gearing only one of two arms
    yields half the benefit.
    """
    total_av = Fraction(0)
    total_dv = Fraction(0)
    for parts in creature.body.groups_by_type().values():
        av_values: List[int] = []
        dv_values: List[int] = []
        for part in parts:
            part_av = 0
            part_dv = 0
            item = creature.get_item(part.equipment)
            if item is not None and isinstance(item.definition, ArmorDef):
                part_av = item.definition.av
                part_dv = item.definition.dv_modifier
            armor = natural.get(part.id)
            if armor is not None:
                part_av += armor.av
            av_values.append(part_av)
            dv_values.append(part_dv)
        total_av += Fraction(sum(av_values), len(av_values))
        total_dv += Fraction(sum(dv_values), len(dv_values))
    return math.floor(total_av), math.floor(total_dv)


def compute_carried_weight(creature: Creature) -> int:
    return sum(item.total_weight for item in creature.items.values())


def compute_skill_points_total(creature: Creature, rules: RulesConfig = DEFAULT_RULES) -> int:
    base = rules.skill_points_true_kin if creature.lineage == "true_kin" else rules.skill_points_mutant
    per_level = base + (creature.attributes.intelligence - rules.skill_points_int_baseline) * rules.skill_points_per_int
    return per_level * creature.level


def compute_cooldown_reduction(willpower: int, rules: RulesConfig = DEFAULT_RULES) -> CooldownReduction:
    reduction = max(0, (willpower - rules.attribute_base) * rules.cooldown_reduction_percent)
    return CooldownReduction(
        reduction_percent=min(rules.cooldown_reduction_max, reduction),
        minimum_cooldown=rules.cooldown_minimum,
    )


def effective_cooldown(base_cooldown: int, reduction_percent: int, minimum: int = DEFAULT_RULES.cooldown_minimum) -> int:
    """Apply a percentage reduction, rounding half up, never below ``minimum``."""
    reduced = Fraction(base_cooldown) * (100 - reduction_percent) / 100
    return max(minimum, math.floor(reduced + Fraction(1, 2)))


def compute_mutation_bonuses(creature: Creature, carry_max: int) -> Tuple[int, int, int]:
    """Stack active mutation bonuses; returns ``(carry max, movement, quickness)``."""
    movement = 0
    quickness = 0
    for mutation in creature.active_mutations():
        level = mutation_level(creature, mutation)
        bonuses = mutation.definition.stat_bonuses
        carry = bonuses.get("carry_capacity")
        if carry is not None and not carry.is_zero():
            if carry.kind == "percent":
                carry_max += (carry_max * carry.value) // 100
            else:
                carry_max += carry.amount(level)
        speed = bonuses.get("movement_speed")
        if speed is not None and not speed.is_zero():
            movement += speed.amount(level)
        quick = bonuses.get("quickness")
        if quick is not None and not quick.is_zero():
            quickness += quick.amount(level)
    return carry_max, movement, quickness


def compute_offhand_chances(creature: Creature, rules: RulesConfig = DEFAULT_RULES) -> Dict[str, int]:
    """Chance per weapon-capable part to join an attack as an offhand.

    Wielding parts use ``base + per_level * (level of the mutation that grew
    the part) + multiweapon bonus``; other parts use the attack chance of a
    natural weapon that covers them.
    """
    grown_by: Dict[str, int] = {}
    for mutation in creature.active_mutations():
        for part_id in mutation.added_part_ids:
            grown_by.setdefault(part_id, mutation_level(creature, mutation))

    skill_bonus = rules.multiweapon_bonus(creature.multiweapon_tier)
    chances: Dict[str, int] = {}
    for part in creature.body.parts():
        if creature.body.can_wield(part):
            chance = rules.offhand_base_chance + grown_by.get(part.id, 0) * rules.offhand_chance_per_level + skill_bonus
            chances[part.id] = min(rules.offhand_chance_cap, chance)
            continue
        natural = natural_attack_chance(creature, part)
        if natural is not None:
            chances[part.id] = natural
    return chances


def compute_resource_maximums(creature: Creature) -> Dict[str, int]:
    maximums: Dict[str, int] = {}
    for mutation in creature.active_mutations():
        resource = mutation.definition.resource
        if resource is not None:
            maximums[mutation.id] = resource.max_formula.evaluate(mutation_level(creature, mutation))
    return maximums


def compute_derived_stats(creature: Creature, rules: RulesConfig = DEFAULT_RULES) -> DerivedStats:
    """Run the full pipeline without touching the creature."""
    # 1. attribute modifiers
    modifiers = compute_attribute_modifiers(creature, rules)

    # 2. natural armor and flight flags
    natural, flight = compute_natural_armor(creature)

    # 3. combat stats, equipment averaging, HP ledger
    dv = rules.dv_base + modifiers["agility"]
    pv = rules.pv_base + modifiers["strength"]
    ma = rules.ma_base + modifiers["willpower"]
    ledger, hp_max = recompute_ledger(
        creature.hp_ledger,
        toughness_value=creature.attributes.toughness,
        toughness_modifier=modifiers["toughness"],
        level=creature.level,
    )
    av, dv_bonus = compute_equipment_bonuses(creature, natural)
    dv += dv_bonus

    # 4. carry capacity
    carry_max = rules.carry_capacity_multiplier * creature.attributes.strength
    carried = compute_carried_weight(creature)

    # 5. skill points
    skill_points = SkillPoints(total=compute_skill_points_total(creature, rules), spent=creature.skill_points_spent)

    # 6. regeneration and cooldowns
    regen = regeneration_rate(
        modifiers["willpower"],
        modifiers["toughness"],
        base=rules.hp_regen_base,
        multiplier=rules.hp_regen_multiplier,
    )
    cooldown = compute_cooldown_reduction(creature.attributes.willpower, rules)

    # 7. mutation bonuses
    carry_max, movement, quickness = compute_mutation_bonuses(creature, carry_max)

    # 8. offhand chances
    offhand = compute_offhand_chances(creature, rules)

    gm_adjustment = None
    if creature.kind == "npc" and creature.stat_modifiers:
        gm = {key: creature.stat_modifiers.get(key, 0) for key in GM_MODIFIER_KEYS}
        gm_adjustment = GmAdjustment(
            base_dv=dv, base_pv=pv, base_ma=ma, base_av=av, base_hp_max=hp_max, modifiers=gm
        )
        dv += gm["dv"]
        pv += gm["pv"]
        ma += gm["ma"]
        av += gm["av"]
        hp_max += gm["hp"]

    return DerivedStats(
        modifiers=modifiers,
        combat=CombatProfile(
            dv=dv,
            pv=pv,
            ma=ma,
            av=av,
            main_hand_id=creature.main_hand_id,
            offhand_chances=offhand,
        ),
        hp_max=hp_max,
        hp_ledger=tuple(ledger),
        carry=CarryCapacity(maximum=carry_max, carried=carried),
        skill_points=skill_points,
        regen_rate=regen,
        cooldown=cooldown,
        movement_speed_bonus=movement,
        quickness_bonus=quickness,
        natural_armor=natural,
        flight_part_ids=flight,
        resource_maximums=compute_resource_maximums(creature),
        gm_adjustment=gm_adjustment,
    )


def refresh_derived_stats(creature: Creature, rules: RulesConfig = DEFAULT_RULES) -> DerivedStats:
    """Recompute and store derived stats, writing per-part values back."""
    derived = compute_derived_stats(creature, rules)
    flight = set(derived.flight_part_ids)
    for part in creature.body.parts():
        armor = derived.natural_armor.get(part.id, NaturalArmor())
        part.natural_armor = NaturalArmor(av=armor.av, source=armor.source)
        part.can_fly = part.id in flight
    creature.hp_ledger = list(derived.hp_ledger)
    creature.hp = clamp_hp(creature.hp, derived.hp_max)
    for mutation in creature.active_mutations():
        maximum = derived.resource_maximums.get(mutation.id)
        if maximum is None:
            continue
        if mutation.resource_current is None:
            mutation.resource_current = maximum
        else:
            mutation.resource_current = min(mutation.resource_current, maximum)
    creature.derived = derived
    logger.debug(
        "Derived stats for %s: DV %s PV %s MA %s AV %s HP %s/%s",
        creature.id,
        derived.combat.dv,
        derived.combat.pv,
        derived.combat.ma,
        derived.combat.av,
        creature.hp,
        derived.hp_max,
    )
    return derived
