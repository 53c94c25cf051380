import pytest

from chimera.core.rng import RNG
from chimera.domain.entities import Attributes
from chimera.domain.stat_breakdown import build_stat_breakdown
from chimera.domain.stat_derivation import compute_derived_stats, effective_cooldown, refresh_derived_stats
from chimera.services import EquipmentService, MutationService, ProgressionService
from tests.helpers.builders import make_creature, make_item, mutations_repo, part_of
from tests.helpers.scripted_rng import ScriptedRNG


def _wear(creature, item_id: str, type_name: str, laterality: str = "") -> None:
    service = EquipmentService()
    item = make_item(item_id, RNG(len(creature.items) + 1))
    service.pick_up(creature, item)
    service.equip(creature, item.id, part_of(creature, type_name, laterality).id)


def _mutate(creature, mutation_id: str, level: int = 1):
    service = MutationService(mutations_repo, RNG(17 + len(creature.mutations)))
    mutation = service.grant_mutation(creature, mutation_id, level)
    service.apply_mutation(creature, mutation.id)
    return mutation


def test_baseline_creature_stats() -> None:
    creature = make_creature()
    derived = creature.derived

    assert (derived.combat.dv, derived.combat.pv, derived.combat.ma, derived.combat.av) == (6, 4, 4, 0)
    assert derived.hp_max == 16
    assert creature.hp == 16
    assert derived.carry.maximum == 240
    assert derived.skill_points.total == 74
    assert derived.regen_rate == pytest.approx(0.2)
    assert derived.cooldown.reduction_percent == 0
    assert derived.cooldown.minimum_cooldown == 5


def test_attribute_modifiers_feed_combat_stats() -> None:
    creature = make_creature(attributes=Attributes(strength=20, agility=12, willpower=19))
    combat = creature.derived.combat

    assert combat.dv == 4
    assert combat.pv == 6
    assert combat.ma == 5


def test_armor_is_averaged_within_each_part_type() -> None:
    creature = make_creature()
    _wear(creature, "leather_bracer", "Arm", "Left")

    assert creature.derived.combat.av == 2

    _wear(creature, "leather_armor", "Body")

    assert creature.derived.combat.av == 5


def test_fractional_group_averages_are_summed_before_flooring() -> None:
    creature = make_creature()
    _wear(creature, "leather_gloves", "Hand", "Left")
    _wear(creature, "buckler", "Arm", "Right")

    # hands 1/2, arms 1/2 -> 1; dv modifier 1/2 floors to 0
    assert creature.derived.combat.av == 1
    assert creature.derived.combat.dv == 6


def test_armor_dodge_modifier_applies_after_averaging() -> None:
    creature = make_creature()
    _wear(creature, "chain_mail", "Body")

    assert creature.derived.combat.av == 5
    assert creature.derived.combat.dv == 4


def test_hp_ledger_retroactively_follows_toughness() -> None:
    creature = make_creature()
    progression = ProgressionService()
    progression.level_up(creature, ScriptedRNG([3]))

    assert creature.derived.hp_max == 19

    progression.set_attribute(creature, "toughness", 20)

    assert creature.derived.hp_max == 25
    assert [entry.total for entry in creature.hp_ledger] == [20, 5]
    assert creature.hp_ledger[1].roll == 3
    assert creature.hp_ledger[1].modifier == 2


def test_lowering_toughness_clamps_current_hp() -> None:
    creature = make_creature()

    ProgressionService().set_attribute(creature, "toughness", 12)

    assert creature.derived.hp_max == 12
    assert creature.hp == 12


def test_recomputation_is_idempotent() -> None:
    creature = make_creature()
    _wear(creature, "leather_bracer", "Arm", "Left")
    _mutate(creature, "horns", 4)

    first = compute_derived_stats(creature)
    second = compute_derived_stats(creature)

    assert first == second
    assert refresh_derived_stats(creature) == first


def test_compute_does_not_touch_the_creature() -> None:
    creature = make_creature()
    _mutate(creature, "quills", 3)
    body = part_of(creature, "Body")
    body.natural_armor.av = 0

    compute_derived_stats(creature)

    assert body.natural_armor.av == 0


def test_cooldown_reduction_caps_at_eighty_percent() -> None:
    assert make_creature(attributes=Attributes(willpower=20)).derived.cooldown.reduction_percent == 20
    assert make_creature(attributes=Attributes(willpower=40)).derived.cooldown.reduction_percent == 80
    assert make_creature(attributes=Attributes(willpower=10)).derived.cooldown.reduction_percent == 0


@pytest.mark.parametrize(
    ("base", "reduction", "expected"),
    [(100, 80, 20), (10, 80, 5), (15, 10, 14), (50, 0, 50), (4, 0, 5)],
)
def test_effective_cooldown_rounds_and_floors(base: int, reduction: int, expected: int) -> None:
    assert effective_cooldown(base, reduction) == expected


def test_regeneration_rate_uses_willpower_and_toughness() -> None:
    creature = make_creature(attributes=Attributes(willpower=20, toughness=18))

    assert creature.derived.regen_rate == pytest.approx(0.26)


def test_skill_points_depend_on_lineage_and_intelligence() -> None:
    true_kin = make_creature(lineage="true_kin", attributes=Attributes(intelligence=12))
    mutant = make_creature(attributes=Attributes(intelligence=8))

    assert true_kin.derived.skill_points.total == 78
    assert mutant.derived.skill_points.total == 42

    ProgressionService().spend_skill_points(mutant, 40)

    assert mutant.derived.skill_points.available == 2


def test_carry_capacity_and_overburdened_flag() -> None:
    creature = make_creature(attributes=Attributes(strength=10))
    EquipmentService().pick_up(creature, make_item("chain_mail", quantity=7))

    assert creature.derived.carry.maximum == 150
    assert creature.derived.carry.carried == 175
    assert creature.derived.carry.remaining == -25
    assert creature.derived.carry.overburdened


def test_percent_carry_bonus_is_evaluated_against_final_capacity() -> None:
    creature = make_creature(attributes=Attributes(strength=10))
    EquipmentService().pick_up(creature, make_item("chain_mail", quantity=7))

    _mutate(creature, "multiple_legs")

    assert creature.derived.carry.maximum == 180
    assert not creature.derived.carry.overburdened


def test_mental_mutation_level_scales_with_ego() -> None:
    creature = make_creature(attributes=Attributes(ego=20))

    _mutate(creature, "telekinesis", 2)

    assert creature.derived.carry.maximum == 240 + 40


def test_mental_mutation_effective_level_never_below_one() -> None:
    creature = make_creature(attributes=Attributes(ego=6))

    _mutate(creature, "telekinesis", 2)

    assert creature.derived.carry.maximum == 240 + 10


def test_movement_and_quickness_bonuses() -> None:
    creature = make_creature()
    _mutate(creature, "wings", 3)
    _mutate(creature, "heightened_quickness", 2)

    assert creature.derived.movement_speed_bonus == 30
    assert creature.derived.quickness_bonus == 5


def test_armor_grant_and_flight_are_written_to_parts() -> None:
    creature = make_creature()
    _mutate(creature, "horns", 4)
    _mutate(creature, "wings")

    head = part_of(creature, "Head")
    back = part_of(creature, "Back")
    assert head.natural_armor.av == 2
    assert head.natural_armor.source == "Horns"
    assert back.can_fly
    assert creature.derived.flight_part_ids == (back.id,)
    assert creature.derived.combat.av == 2


def test_resource_maximum_initialises_current_pool() -> None:
    creature = make_creature()

    mutation = _mutate(creature, "quills", 2)

    assert creature.derived.resource_maximums[mutation.id] == 400
    assert mutation.resource_current == 400
    assert part_of(creature, "Body").natural_armor.av == 2


def test_offhand_chances_for_hands_and_grown_limbs() -> None:
    creature = make_creature()
    left, right = creature.body.parts_of_type("Hand")

    assert creature.derived.combat.offhand_chances == {left.id: 7, right.id: 7}

    mutation = _mutate(creature, "multiple_arms", 3)
    grown_hand = creature.body.require(mutation.added_part_ids[1])
    ProgressionService().set_multiweapon_tier(creature, 2)

    chances = creature.derived.combat.offhand_chances
    assert chances[left.id] == 42
    assert chances[grown_hand.id] == 7 + 9 + 35


def test_offhand_chance_is_capped() -> None:
    creature = make_creature()
    mutation = _mutate(creature, "multiple_arms", 40)
    ProgressionService().set_multiweapon_tier(creature, 3)

    assert creature.derived.combat.offhand_chances[mutation.added_part_ids[1]] == 100


def test_natural_weapon_parts_use_mutation_attack_chance() -> None:
    creature = make_creature()
    _mutate(creature, "horns")

    assert creature.derived.combat.offhand_chances[part_of(creature, "Head").id] == 20


def test_npc_gm_modifiers_keep_base_values() -> None:
    npc = make_creature("Snapjaw", kind="npc", stat_modifiers={"dv": 2, "av": 1, "hp": 5})
    derived = npc.derived

    assert derived.combat.dv == 8
    assert derived.combat.av == 1
    assert derived.hp_max == 21
    assert npc.hp == 21
    assert derived.gm_adjustment.base_dv == 6
    assert derived.gm_adjustment.base_hp_max == 16


def test_gm_modifiers_ignored_for_characters() -> None:
    creature = make_creature(stat_modifiers={"dv": 4})

    assert creature.derived.combat.dv == 6
    assert creature.derived.gm_adjustment is None


def test_stat_breakdown_steps_sum_to_final_value() -> None:
    creature = make_creature(attributes=Attributes(agility=18))
    _wear(creature, "chain_mail", "Body")

    breakdown = build_stat_breakdown(creature, "dv")

    assert breakdown.final == 5
    assert breakdown.contributions_total == breakdown.final
    assert [step.value for step in breakdown.steps] == [6, 1, -2]


def test_hp_breakdown_lists_each_level() -> None:
    creature = make_creature()
    ProgressionService().level_up(creature, ScriptedRNG([4]))

    breakdown = build_stat_breakdown(creature, "hp")

    assert [step.value for step in breakdown.steps] == [16, 4]
    assert breakdown.final == 20


def test_unknown_breakdown_stat_is_rejected() -> None:
    with pytest.raises(ValueError):
        build_stat_breakdown(make_creature(), "luck")  # type: ignore[arg-type]
