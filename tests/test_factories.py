import pytest

from chimera.core.rng import RNG
from chimera.domain.entities import Attributes
from chimera.services.errors import FactoryError
from chimera.services.factories import create_creature, create_item, create_item_from_id, make_instance_id
from tests.helpers.builders import armor_repo, body_part_types_repo, make_creature, weapons_repo


def test_make_instance_id_is_seeded() -> None:
    assert make_instance_id("item", RNG(5)) == make_instance_id("item", RNG(5))
    assert make_instance_id("npc", RNG(5)).startswith("npc_")


def test_create_creature_defaults() -> None:
    creature = create_creature("Mehmet", body_part_types_repo, RNG(1))

    assert creature.id.startswith("character_")
    assert creature.kind == "character"
    assert creature.lineage == "mutant"
    assert creature.level == 1
    assert len(creature.body) == 10
    assert creature.hp == creature.derived.hp_max == 16
    assert [(entry.level, entry.roll) for entry in creature.hp_ledger] == [(1, 16)]
    assert creature.main_hand_id is None


def test_create_creature_uses_given_attributes() -> None:
    creature = make_creature(attributes=Attributes(toughness=22, strength=12))

    assert creature.hp == 22
    assert creature.derived.carry.maximum == 180


def test_creatures_get_distinct_part_ids() -> None:
    first = make_creature(rng=RNG(1))
    second = make_creature(rng=RNG(2))

    assert not {part.id for part in first.body} & {part.id for part in second.body}


def test_npc_keeps_stat_modifiers() -> None:
    npc = make_creature("Snapjaw", kind="npc", stat_modifiers={"pv": 1})

    assert npc.id.startswith("npc_")
    assert npc.stat_modifiers == {"pv": 1}
    assert npc.derived.combat.pv == 5


@pytest.mark.parametrize(("kind", "lineage"), [("monster", "mutant"), ("character", "robot")])
def test_create_creature_rejects_unknown_kind_or_lineage(kind: str, lineage: str) -> None:
    with pytest.raises(FactoryError):
        create_creature("X", body_part_types_repo, RNG(1), kind=kind, lineage=lineage)  # type: ignore[arg-type]


def test_create_item_from_id_looks_up_weapons_then_armor() -> None:
    dagger = create_item_from_id("bronze_dagger", weapons_repo, armor_repo, RNG(3))
    cap = create_item_from_id("leather_cap", weapons_repo, armor_repo, RNG(3), quantity=2)

    assert dagger.kind == "weapon"
    assert dagger.id.startswith("item_")
    assert cap.kind == "armor"
    assert cap.total_weight == 2
    assert not cap.equipped


def test_create_item_rejects_unknown_id_and_bad_quantity() -> None:
    with pytest.raises(FactoryError):
        create_item_from_id("plasma_rifle", weapons_repo, armor_repo, RNG(3))
    with pytest.raises(FactoryError):
        create_item(weapons_repo.get("bronze_dagger"), RNG(3), quantity=0)
