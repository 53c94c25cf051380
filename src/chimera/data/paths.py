"""Helpers for resolving catalog definition locations."""
from __future__ import annotations

import os
from pathlib import Path

DEFINITIONS_ENV_VAR = "CHIMERA_DEFINITIONS_PATH"


def get_repo_root() -> Path:
    """Return the repository root (``src/chimera/data`` is three levels down)."""
    return Path(__file__).resolve().parents[3]


def get_definitions_path(base_path: Path | str | None = None) -> Path:
    """Return the directory holding the catalog JSON files.

    An explicit ``base_path`` wins, then the ``CHIMERA_DEFINITIONS_PATH``
    environment variable, then ``data/definitions`` in the checkout.
    """
    if base_path is not None:
        return Path(base_path)
    override = os.environ.get(DEFINITIONS_ENV_VAR)
    if override:
        return Path(override)
    return get_repo_root() / "data" / "definitions"
