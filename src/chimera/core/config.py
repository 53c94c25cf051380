"""Rule constants and helpers for loading overrides from disk."""
from __future__ import annotations

import json
import logging
from dataclasses import asdict, dataclass, fields, replace
from pathlib import Path
from typing import Dict, Tuple

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class RulesConfig:
    """Every tunable constant used by the stat pipeline and the dice engine."""

    attribute_base: int = 16
    dv_base: int = 6
    pv_base: int = 4
    ma_base: int = 4
    carry_capacity_multiplier: int = 15
    skill_points_true_kin: int = 70
    skill_points_mutant: int = 50
    skill_points_per_int: int = 4
    skill_points_int_baseline: int = 10
    hp_regen_base: int = 20
    hp_regen_multiplier: int = 2
    cooldown_reduction_percent: int = 5
    cooldown_reduction_max: int = 80
    cooldown_minimum: int = 5
    regen_interrupt_turns: int = 5
    level_up_hp_die: int = 4
    penetration_die: int = 10
    penetration_die_modifier: int = 2
    penetration_explode_on: int = 8
    penetration_pv_decrement: int = 2
    to_hit_die: int = 20
    offhand_die: int = 100
    offhand_base_chance: int = 7
    offhand_chance_per_level: int = 3
    offhand_chance_cap: int = 100
    multiweapon_bonuses: Tuple[int, ...] = (0, 20, 35, 50)

    def multiweapon_bonus(self, tier: int) -> int:
        if 0 <= tier < len(self.multiweapon_bonuses):
            return self.multiweapon_bonuses[tier]
        return 0


DEFAULT_RULES = RulesConfig()


def load_rules_config(path: Path | None) -> RulesConfig:
    """Load rule overrides from a JSON object, falling back to defaults."""
    if path is None:
        return DEFAULT_RULES
    try:
        raw = json.loads(Path(path).read_text(encoding="utf-8"))
    except FileNotFoundError:
        return DEFAULT_RULES
    except (OSError, json.JSONDecodeError) as exc:
        logger.warning("Ignoring unreadable rules config %s: %s", path, exc)
        return DEFAULT_RULES
    if not isinstance(raw, dict):
        logger.warning("Ignoring rules config %s: expected a JSON object", path)
        return DEFAULT_RULES

    known = {field.name: field for field in fields(RulesConfig)}
    overrides: Dict[str, object] = {}
    for key, value in raw.items():
        if key not in known:
            logger.warning("Ignoring unknown rules config key '%s'", key)
            continue
        if key == "multiweapon_bonuses":
            if isinstance(value, list) and all(isinstance(item, int) for item in value):
                overrides[key] = tuple(value)
                continue
        elif isinstance(value, int) and not isinstance(value, bool):
            overrides[key] = value
            continue
        logger.warning("Ignoring invalid value for rules config key '%s'", key)
    return replace(DEFAULT_RULES, **overrides)


def save_rules_config(config: RulesConfig, path: Path) -> None:
    """Persist a rules config as JSON."""
    path.parent.mkdir(parents=True, exist_ok=True)
    payload = asdict(config)
    payload["multiweapon_bonuses"] = list(config.multiweapon_bonuses)
    path.write_text(json.dumps(payload, indent=2, sort_keys=True), encoding="utf-8")
