from pathlib import Path

from chimera.data import paths


def test_get_definitions_path_base_path(tmp_path: Path) -> None:
    assert paths.get_definitions_path(tmp_path) == tmp_path


def test_get_definitions_path_source_repo_exists() -> None:
    definitions_path = paths.get_definitions_path()
    assert definitions_path.name == "definitions"
    assert definitions_path.exists()
    assert (definitions_path / "body_part_types.json").exists()


def test_get_definitions_path_env_override(monkeypatch, tmp_path: Path) -> None:
    monkeypatch.setenv(paths.DEFINITIONS_ENV_VAR, str(tmp_path))
    assert paths.get_definitions_path() == tmp_path


def test_explicit_base_path_beats_env_override(monkeypatch, tmp_path: Path) -> None:
    other = tmp_path / "other"
    monkeypatch.setenv(paths.DEFINITIONS_ENV_VAR, str(tmp_path))
    assert paths.get_definitions_path(other) == other
