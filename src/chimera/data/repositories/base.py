"""Base repository implementation for JSON catalog data."""
from __future__ import annotations

from pathlib import Path
from typing import Dict, Generic, TypeVar

from chimera.data import paths
from chimera.data.errors import DataValidationError
from chimera.data.json_loader import load_catalog

T = TypeVar("T")


class RepositoryBase(Generic[T]):
    """Lazy loading, caching and field validation shared by every catalog."""

    def __init__(self, filename: str, base_path: Path | str | None = None) -> None:
        self._filename = filename
        self._base_path = Path(base_path) if base_path is not None else None
        self._definitions: Dict[str, T] | None = None

    def _get_file_path(self) -> Path:
        return paths.get_definitions_path(self._base_path) / self._filename

    def _build(self, raw: dict[str, object]) -> Dict[str, T]:
        """Convert the raw catalog mapping into typed definitions."""
        raise NotImplementedError

    def _ensure_loaded(self) -> Dict[str, T]:
        if self._definitions is None:
            self._definitions = self._build(load_catalog(self._get_file_path()))
        return self._definitions

    def get(self, def_id: str) -> T:
        """Return a definition by id."""
        definitions = self._ensure_loaded()
        try:
            return definitions[def_id]
        except KeyError as exc:
            raise KeyError(def_id) from exc

    def has(self, def_id: str) -> bool:
        return def_id in self._ensure_loaded()

    def all(self) -> list[T]:
        """Return all definitions sorted deterministically by id."""
        definitions = self._ensure_loaded()
        return [definitions[key] for key in sorted(definitions)]

    def as_mapping(self) -> Dict[str, T]:
        return dict(self._ensure_loaded())

    @staticmethod
    def _require_mapping(value: object, context: str) -> dict[str, object]:
        if not isinstance(value, dict):
            raise DataValidationError(f"{context} must be an object/dict.")
        return value

    @staticmethod
    def _require_str(value: object, context: str) -> str:
        if not isinstance(value, str):
            raise DataValidationError(f"{context} must be a string.")
        return value

    @staticmethod
    def _require_int(value: object, context: str) -> int:
        if not isinstance(value, int) or isinstance(value, bool):
            raise DataValidationError(f"{context} must be an integer.")
        return value

    @staticmethod
    def _require_bool(value: object, context: str) -> bool:
        if not isinstance(value, bool):
            raise DataValidationError(f"{context} must be a boolean.")
        return value

    @classmethod
    def _require_str_list(cls, value: object, context: str) -> tuple[str, ...]:
        if not isinstance(value, list):
            raise DataValidationError(f"{context} must be a list of strings.")
        return tuple(cls._require_str(item, f"{context} entry") for item in value)

    @staticmethod
    def _assert_exact_fields(
        payload: dict[str, object],
        expected_keys: set[str],
        context: str,
        *,
        optional_fields: set[str] | None = None,
    ) -> None:
        actual_keys = set(payload.keys())
        optional = optional_fields or set()
        missing = expected_keys - actual_keys
        unknown = actual_keys - expected_keys - optional
        if missing or unknown:
            msg_parts = []
            if missing:
                msg_parts.append(f"missing fields: {sorted(missing)}")
            if unknown:
                msg_parts.append(f"unknown fields: {sorted(unknown)}")
            raise DataValidationError(f"{context} has schema issues ({'; '.join(msg_parts)}).")
