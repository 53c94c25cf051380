"""Utilities for creating deterministic instance identifiers."""
from __future__ import annotations

from chimera.core.rng import RNG
from chimera.domain.body import make_part_id

__all__ = ["make_instance_id", "make_part_id"]


def make_instance_id(prefix: str, rng: RNG) -> str:
    """Generate a seeded identifier such as ``item_123456``."""
    suffix = rng.randint(100000, 999999)
    return f"{prefix}_{suffix}"
