import pytest

from chimera.services import ProgressionError, ProgressionService
from tests.helpers.builders import make_creature
from tests.helpers.scripted_rng import ScriptedRNG


def test_level_up_records_roll_and_raises_max_hp() -> None:
    creature = make_creature()
    creature.hp = 10
    rng = ScriptedRNG([2])

    result = ProgressionService().level_up(creature, rng)

    assert rng.calls == [(1, 4, 2)]
    assert result.new_level == 2
    assert result.roll == 2
    assert result.hp_gained == 2
    assert result.hp_max == 18
    assert creature.level == 2
    assert creature.hp == 10
    assert creature.derived.skill_points.total == 148


def test_set_attribute_rejects_unknown_names() -> None:
    with pytest.raises(ProgressionError):
        ProgressionService().set_attribute(make_creature(), "charisma", 18)  # type: ignore[arg-type]


def test_multiweapon_tier_bounds() -> None:
    service = ProgressionService()
    creature = make_creature()

    service.set_multiweapon_tier(creature, 3)

    assert creature.multiweapon_tier == 3
    with pytest.raises(ProgressionError):
        service.set_multiweapon_tier(creature, 4)


def test_spending_skill_points() -> None:
    service = ProgressionService()
    creature = make_creature()

    service.spend_skill_points(creature, 70)

    assert creature.derived.skill_points.available == 4
    with pytest.raises(ProgressionError):
        service.spend_skill_points(creature, 5)
    with pytest.raises(ProgressionError):
        service.spend_skill_points(creature, -1)


def test_damage_never_drops_hp_below_zero() -> None:
    service = ProgressionService()
    creature = make_creature()

    assert service.apply_damage(creature, 10, current_turn=3) == 6
    assert service.apply_damage(creature, 50, current_turn=4) == 0
    assert not creature.is_alive
    assert creature.last_damage_turn == 4


def test_heal_is_capped_at_max_hp() -> None:
    service = ProgressionService()
    creature = make_creature()
    service.apply_damage(creature, 5)

    assert service.heal(creature, 3) == 14
    assert service.heal(creature, 30) == 16
    assert service.heal(creature, -4) == 16


def test_regeneration_pauses_after_damage() -> None:
    service = ProgressionService()
    creature = make_creature()

    assert service.can_regenerate(creature, current_turn=0)

    service.apply_damage(creature, 1, current_turn=10)

    assert not service.can_regenerate(creature, current_turn=14)
    assert service.can_regenerate(creature, current_turn=15)
