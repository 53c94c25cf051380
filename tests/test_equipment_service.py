from chimera.core.rng import RNG
from chimera.services import (
    BodyPartAddedEvent,
    BodyPartRemovedEvent,
    EquipFailedEvent,
    EquipmentService,
    ItemEquippedEvent,
    ItemUnequippedEvent,
    MutationService,
)
from tests.helpers.builders import make_creature, make_item, mutations_repo, part_of


def _carry(creature, service: EquipmentService, item_id: str, seed: int = 1):
    item = make_item(item_id, RNG(seed))
    service.pick_up(creature, item)
    return item


def test_equip_weapon_in_hand() -> None:
    creature = make_creature()
    service = EquipmentService()
    dagger = _carry(creature, service, "bronze_dagger")
    hand = part_of(creature, "Hand", "Left")

    events = service.equip(creature, dagger.id, hand.id)

    assert len(events) == 1
    event = events[0]
    assert isinstance(event, ItemEquippedEvent)
    assert event.part_name == "Left Hand"
    assert event.category == "weapon"
    assert hand.equipment == dagger.id
    assert dagger.equipped


def test_weapons_need_a_wielding_part() -> None:
    creature = make_creature()
    service = EquipmentService()
    dagger = _carry(creature, service, "bronze_dagger")

    events = service.equip(creature, dagger.id, part_of(creature, "Arm", "Left").id)

    assert isinstance(events[0], EquipFailedEvent)
    assert events[0].reason == "cannot_wield"
    assert not dagger.equipped


def test_armor_must_match_the_slot_type() -> None:
    creature = make_creature()
    service = EquipmentService()
    cap = _carry(creature, service, "leather_cap")

    failed = service.equip(creature, cap.id, part_of(creature, "Body").id)
    worn = service.equip(creature, cap.id, part_of(creature, "Head").id)

    assert failed[0].reason == "wrong_slot"
    assert isinstance(worn[0], ItemEquippedEvent)


def test_parts_that_cannot_equip_reject_everything() -> None:
    creature = make_creature()
    service = EquipmentService()
    service.add_body_part(creature, "Tail", creature.body.root_id)
    cloak = _carry(creature, service, "cloak")

    events = service.equip(creature, cloak.id, part_of(creature, "Tail").id)

    assert events[0].reason == "cannot_equip"


def test_unknown_item_and_part_fail_without_changes() -> None:
    creature = make_creature()
    service = EquipmentService()
    dagger = _carry(creature, service, "bronze_dagger")

    missing_item = service.equip(creature, "item_000000", part_of(creature, "Hand", "Left").id)
    missing_part = service.equip(creature, dagger.id, "bp_missing")

    assert missing_item[0].reason == "unknown_item"
    assert missing_part[0].reason == "unknown_part"
    assert creature.body.equipped_item_ids() == set()


def test_active_mutation_blocks_equipment_on_its_part_type() -> None:
    creature = make_creature()
    mutations = MutationService(mutations_repo, RNG(5))
    horns = mutations.grant_mutation(creature, "horns")
    mutations.apply_mutation(creature, horns.id)
    service = EquipmentService()
    cap = _carry(creature, service, "leather_cap")

    events = service.equip(creature, cap.id, part_of(creature, "Head").id)

    assert isinstance(events[0], EquipFailedEvent)
    assert events[0].reason == "blocked"
    assert "blocked by an active mutation" in events[0].message


def test_equipping_into_an_occupied_slot_swaps_items() -> None:
    creature = make_creature()
    service = EquipmentService()
    leather = _carry(creature, service, "leather_armor", seed=1)
    chain = _carry(creature, service, "chain_mail", seed=2)
    body = part_of(creature, "Body")
    service.equip(creature, leather.id, body.id)

    events = service.equip(creature, chain.id, body.id)

    assert [type(event) for event in events] == [ItemUnequippedEvent, ItemEquippedEvent]
    assert events[0].item_id == leather.id
    assert body.equipment == chain.id
    assert not leather.equipped
    assert chain.equipped
    assert creature.derived.combat.av == 5


def test_moving_an_item_clears_its_previous_part() -> None:
    creature = make_creature()
    service = EquipmentService()
    dagger = _carry(creature, service, "bronze_dagger")
    left = part_of(creature, "Hand", "Left")
    right = part_of(creature, "Hand", "Right")
    service.equip(creature, dagger.id, left.id)

    service.equip(creature, dagger.id, right.id)

    assert left.equipment is None
    assert right.equipment == dagger.id
    assert creature.body.parts_holding(dagger.id) == [right]


def test_unequip_releases_item_and_reports_empty_slots() -> None:
    creature = make_creature()
    service = EquipmentService()
    bracer = _carry(creature, service, "leather_bracer")
    arm = part_of(creature, "Arm", "Right")
    service.equip(creature, bracer.id, arm.id)

    events = service.unequip(creature, arm.id)
    again = service.unequip(creature, arm.id)

    assert isinstance(events[0], ItemUnequippedEvent)
    assert events[0].part_name == "Right Arm"
    assert not bracer.equipped
    assert creature.derived.combat.av == 0
    assert again[0].reason == "slot_empty"
    assert service.unequip(creature, "bp_missing")[0].reason == "unknown_part"


def test_removing_a_limb_unequips_everything_below_it() -> None:
    creature = make_creature()
    service = EquipmentService()
    dagger = _carry(creature, service, "bronze_dagger", seed=1)
    bracer = _carry(creature, service, "leather_bracer", seed=2)
    arm = part_of(creature, "Arm", "Left")
    hand = part_of(creature, "Hand", "Left")
    service.equip(creature, dagger.id, hand.id)
    service.equip(creature, bracer.id, arm.id)

    events = service.remove_body_part(creature, arm.id)

    unequipped = [event for event in events if isinstance(event, ItemUnequippedEvent)]
    removed = events[-1]
    assert {event.item_id for event in unequipped} == {dagger.id, bracer.id}
    assert {event.part_name for event in unequipped} == {"Left Arm", "Left Hand"}
    assert isinstance(removed, BodyPartRemovedEvent)
    assert removed.removed_ids == [arm.id, hand.id]
    assert set(removed.released_item_ids) == {dagger.id, bracer.id}
    assert dagger.id in creature.items
    assert not dagger.equipped and not bracer.equipped
    assert arm.id not in creature.body and hand.id not in creature.body


def test_removing_the_main_hand_clears_the_designation() -> None:
    creature = make_creature()
    service = EquipmentService()
    dagger = _carry(creature, service, "bronze_dagger")
    hand = part_of(creature, "Hand", "Right")
    service.equip(creature, dagger.id, hand.id)
    creature.main_hand_id = hand.id

    service.remove_body_part(creature, hand.id)

    assert creature.main_hand_id is None
    assert creature.derived.combat.main_hand_id is None


def test_moving_the_main_hand_weapon_releases_the_designation() -> None:
    creature = make_creature()
    service = EquipmentService()
    dagger = _carry(creature, service, "bronze_dagger")
    right = part_of(creature, "Hand", "Right")
    service.equip(creature, dagger.id, right.id)
    creature.main_hand_id = right.id

    service.equip(creature, dagger.id, part_of(creature, "Hand", "Left").id)

    assert right.equipment is None
    assert creature.main_hand_id is None
    assert creature.derived.combat.main_hand_id is None


def test_swapping_weapons_in_the_main_hand_keeps_the_designation() -> None:
    creature = make_creature()
    service = EquipmentService()
    dagger = _carry(creature, service, "bronze_dagger", seed=1)
    sword = _carry(creature, service, "iron_long_sword", seed=2)
    right = part_of(creature, "Hand", "Right")
    service.equip(creature, dagger.id, right.id)
    creature.main_hand_id = right.id

    service.equip(creature, sword.id, right.id)

    assert right.equipment == sword.id
    assert creature.main_hand_id == right.id


def test_removing_a_missing_part_is_a_no_op() -> None:
    creature = make_creature()
    before = len(creature.body)

    assert EquipmentService().remove_body_part(creature, "bp_missing") == []
    assert len(creature.body) == before


def test_add_body_part_with_children() -> None:
    creature = make_creature()
    service = EquipmentService()
    root_id = creature.body.root_id

    events = service.add_body_part(creature, "Arm", root_id, laterality="Upper", with_children=["Hand"])

    event = events[0]
    assert isinstance(event, BodyPartAddedEvent)
    assert event.parent_id == root_id
    arm_id, hand_id = event.part_ids
    assert creature.body.display_name(hand_id) == "Upper Hand"
    assert creature.body.require(hand_id).parent_id == arm_id
    assert hand_id in creature.derived.combat.offhand_chances


def test_drop_clears_equipment_and_weight() -> None:
    creature = make_creature()
    service = EquipmentService()
    chain = _carry(creature, service, "chain_mail")
    service.equip(creature, chain.id, part_of(creature, "Body").id)

    events = service.drop(creature, chain.id)

    assert isinstance(events[0], ItemUnequippedEvent)
    assert chain.id not in creature.items
    assert part_of(creature, "Body").equipment is None
    assert creature.derived.carry.carried == 0
    assert service.drop(creature, chain.id)[0].reason == "unknown_item"


def test_pick_up_adds_weight() -> None:
    creature = make_creature()
    service = EquipmentService()

    _carry(creature, service, "battle_axe")

    assert creature.derived.carry.carried == 10
