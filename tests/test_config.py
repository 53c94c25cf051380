import json
import logging
from pathlib import Path

from chimera.core.config import DEFAULT_RULES, RulesConfig, load_rules_config, save_rules_config


def test_defaults_match_published_rules() -> None:
    rules = RulesConfig()

    assert rules.attribute_base == 16
    assert (rules.dv_base, rules.pv_base, rules.ma_base) == (6, 4, 4)
    assert rules.penetration_die == 10
    assert rules.penetration_explode_on == 8
    assert rules.multiweapon_bonuses == (0, 20, 35, 50)


def test_multiweapon_bonus_out_of_range_is_zero() -> None:
    assert DEFAULT_RULES.multiweapon_bonus(2) == 35
    assert DEFAULT_RULES.multiweapon_bonus(7) == 0
    assert DEFAULT_RULES.multiweapon_bonus(-1) == 0


def test_load_missing_file_returns_defaults(tmp_path: Path) -> None:
    assert load_rules_config(tmp_path / "nope.json") is DEFAULT_RULES
    assert load_rules_config(None) is DEFAULT_RULES


def test_load_applies_overrides_and_skips_bad_keys(tmp_path: Path, caplog) -> None:
    path = tmp_path / "rules.json"
    path.write_text(
        json.dumps({"dv_base": 8, "mystery": 1, "pv_base": "high", "multiweapon_bonuses": [0, 10]}),
        encoding="utf-8",
    )

    with caplog.at_level(logging.WARNING, logger="chimera.core.config"):
        rules = load_rules_config(path)

    assert rules.dv_base == 8
    assert rules.pv_base == DEFAULT_RULES.pv_base
    assert rules.multiweapon_bonuses == (0, 10)
    assert "mystery" in caplog.text
    assert "pv_base" in caplog.text


def test_load_invalid_json_falls_back(tmp_path: Path) -> None:
    path = tmp_path / "rules.json"
    path.write_text("{not json", encoding="utf-8")

    assert load_rules_config(path) == DEFAULT_RULES


def test_save_then_load_preserves_changes(tmp_path: Path) -> None:
    path = tmp_path / "nested" / "rules.json"
    custom = RulesConfig(carry_capacity_multiplier=20, multiweapon_bonuses=(0, 5, 10, 15))

    save_rules_config(custom, path)

    assert load_rules_config(path) == custom
