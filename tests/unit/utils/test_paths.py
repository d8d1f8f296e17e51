from __future__ import annotations

from pathlib import Path

import pytest

from docfold.core.exceptions import ConfigError
from docfold.core.utils.paths import expand_project_path, find_manifest, resolve_project_root
from helpers.files import write


def test_find_manifest_prefers_yaml(tmp_path: Path) -> None:
    write(tmp_path / "docfold.yml", "layers: []\n")
    assert find_manifest(tmp_path).name == "docfold.yml"
    write(tmp_path / "docfold.yaml", "layers: []\n")
    assert find_manifest(tmp_path).name == "docfold.yaml"


def test_resolve_walks_up_to_manifest(tmp_path: Path) -> None:
    write(tmp_path / "docfold.yaml", "layers: []\n")
    nested = tmp_path / "content" / "1.guide"
    nested.mkdir(parents=True)
    assert resolve_project_root(nested) == tmp_path.resolve()


def test_resolve_falls_back_to_start(tmp_path: Path) -> None:
    assert resolve_project_root(tmp_path) == tmp_path.resolve()


def test_env_root_must_exist(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("DOCFOLD_PROJECT_ROOT", str(tmp_path / "missing"))
    with pytest.raises(ConfigError):
        resolve_project_root()


def test_expand_project_path(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("THEME_DIR", "themes/docus")
    assert expand_project_path("$THEME_DIR/app.config.yaml", repo_root=tmp_path) == (
        tmp_path / "themes" / "docus" / "app.config.yaml"
    ).resolve()
    assert expand_project_path(str(tmp_path / "abs.yaml"), repo_root=Path("/elsewhere")) == (
        tmp_path / "abs.yaml"
    ).resolve()
