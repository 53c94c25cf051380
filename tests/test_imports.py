def test_import_chimera_package() -> None:
    import importlib

    module = importlib.import_module("chimera")
    assert module.__version__


def test_import_rng_no_side_effects() -> None:
    from chimera.core.rng import RNG

    rng = RNG(42)
    value = rng.randint(0, 1)
    assert value in (0, 1)


def test_import_service_layer() -> None:
    from chimera.services import AttackService, EquipmentService, MutationService, ProgressionService

    assert AttackService and EquipmentService and MutationService and ProgressionService
