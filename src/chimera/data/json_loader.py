"""Low-level JSON helpers for catalog repositories."""
from __future__ import annotations

import json
from pathlib import Path
from typing import Dict

from .errors import DataLoadError, DataValidationError


def load_json(path: Path) -> object:
    """Load a catalog file, wrapping I/O and decode failures in DataLoadError."""
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError as exc:
        raise DataLoadError(f"Catalog file not found: {path}") from exc
    except OSError as exc:
        raise DataLoadError(f"Unable to read catalog file: {path}") from exc

    try:
        return json.loads(text)
    except json.JSONDecodeError as exc:
        raise DataLoadError(f"Invalid JSON in {path}: {exc}") from exc


def load_catalog(path: Path) -> Dict[str, object]:
    """Load a catalog file whose top level maps string ids to entries."""
    raw = load_json(path)
    if not isinstance(raw, dict):
        raise DataValidationError(f"Expected top-level object in {path}")
    for key in raw:
        if not key.strip():
            raise DataValidationError(f"Blank definition id in {path}")
    return raw
