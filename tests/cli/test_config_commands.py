from __future__ import annotations

import json
from pathlib import Path

import pytest
import yaml

from docfold.cli._dispatcher import main
from helpers.files import write


def _run(capsys: pytest.CaptureFixture[str], *argv: str) -> tuple[int, str, str]:
    code = main(list(argv))
    out, err = capsys.readouterr()
    return code, out, err


def test_show_json(site_project: Path, capsys: pytest.CaptureFixture[str]) -> None:
    code, out, _ = _run(capsys, "config", "show", "--json", "--repo-root", str(site_project))
    assert code == 0
    cfg = json.loads(out)
    assert cfg["docus"]["title"] == "Vekos"
    assert cfg["docus"]["aside"]["exclude"] == []


def test_show_yaml_key(site_project: Path, capsys: pytest.CaptureFixture[str]) -> None:
    code, out, _ = _run(
        capsys, "config", "show", "docus.github", "--format", "yaml", "--repo-root", str(site_project)
    )
    assert code == 0
    assert yaml.safe_load(out)["docus"]["github"]["repo"] == "vekos"


def test_show_table_scalar_key(site_project: Path, capsys: pytest.CaptureFixture[str]) -> None:
    code, out, _ = _run(capsys, "config", "show", "docus.title", "--repo-root", str(site_project))
    assert code == 0
    assert out.strip() == "docus.title: Vekos"


def test_show_table_full(site_project: Path, capsys: pytest.CaptureFixture[str]) -> None:
    code, out, _ = _run(capsys, "config", "show", "--repo-root", str(site_project))
    assert code == 0
    assert "Site Configuration" in out
    assert "[docus]" in out
    assert "title: Vekos" in out


def test_show_missing_key(site_project: Path, capsys: pytest.CaptureFixture[str]) -> None:
    code, _, err = _run(capsys, "config", "show", "docus.nope", "--repo-root", str(site_project))
    assert code == 1
    assert "Key not found: docus.nope" in err


def test_show_reads_env_overrides(
    site_project: Path, capsys: pytest.CaptureFixture[str], monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setenv("DOCFOLD_docus__title", "From env")
    code, out, _ = _run(capsys, "config", "show", "docus.title", "--json", "--repo-root", str(site_project))
    assert code == 0
    assert json.loads(out) == {"docus.title": "From env"}


def test_show_validate_fails_on_invalid_config(
    site_project: Path, capsys: pytest.CaptureFixture[str], monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setenv("DOCFOLD_docus__layout", "wide")
    code, _, err = _run(capsys, "config", "show", "--validate", "--json", "--repo-root", str(site_project))
    assert code == 1
    payload = json.loads(err[err.index("{"):])
    assert payload["error"] == "config_show_error"
    assert any(e.startswith("docus.layout:") for e in payload["context"]["errors"])


def test_layers_json(site_project: Path, capsys: pytest.CaptureFixture[str]) -> None:
    code, out, _ = _run(capsys, "config", "layers", "--json", "--repo-root", str(site_project))
    assert code == 0
    data = json.loads(out)
    assert [row["name"] for row in data["layers"]] == ["schema-defaults", "typography", "docus", "site"]
    assert data["layers"][3]["keys"] == ["docus"]


def test_layers_text(site_project: Path, capsys: pytest.CaptureFixture[str]) -> None:
    code, out, _ = _run(capsys, "config", "layers", "--repo-root", str(site_project))
    assert code == 0
    assert out.splitlines()[0] == "Layers (lowest precedence first):"
    assert "3. site" in out


def test_explain_json_filters_by_prefix(site_project: Path, capsys: pytest.CaptureFixture[str]) -> None:
    code, out, _ = _run(capsys, "config", "explain", "docus.aside", "--json", "--repo-root", str(site_project))
    assert code == 0
    data = json.loads(out)
    assert set(data["provenance"]) == {"docus.aside.level", "docus.aside.collapsed", "docus.aside.exclude"}
    assert data["provenance"]["docus.aside.exclude"] == "site"
    assert [d["kind"] for d in data["diagnostics"]] == ["sequence_discarded"]


def test_explain_text(site_project: Path, capsys: pytest.CaptureFixture[str]) -> None:
    code, out, _ = _run(capsys, "config", "explain", "docus.title", "--repo-root", str(site_project))
    assert code == 0
    assert "docus.title = 'Vekos'  <- site" in out
    assert "Layers: schema-defaults < typography < docus < site" in out


def test_validate_ok(site_project: Path, capsys: pytest.CaptureFixture[str]) -> None:
    code, out, _ = _run(capsys, "config", "validate", "--repo-root", str(site_project))
    assert code == 0
    assert "matches schema 'app-config'" in out


def test_validate_reports_errors(
    site_project: Path, capsys: pytest.CaptureFixture[str], monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setenv("DOCFOLD_docus__aside__level", "-1")
    code, out, _ = _run(capsys, "config", "validate", "--json", "--repo-root", str(site_project))
    assert code == 1
    data = json.loads(out)
    assert data["valid"] is False
    assert data["errors"][0].startswith("docus.aside.level:")


def test_validate_against_explicit_schema(site_project: Path, capsys: pytest.CaptureFixture[str]) -> None:
    write(site_project / "strict.yaml", "type: object\nrequired: [analytics]\n")
    code, out, _ = _run(
        capsys, "config", "validate", "--schema", "strict.yaml", "--repo-root", str(site_project)
    )
    assert code == 1
    assert "'analytics' is a required property" in out


def test_validate_without_schema(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    write(tmp_path / "docfold.yaml", "layers: []\n")
    code, out, _ = _run(capsys, "config", "validate", "--repo-root", str(tmp_path))
    assert code == 0
    assert "No schema configured" in out


def test_malformed_manifest_reports_error(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    write(tmp_path / "docfold.yaml", "layers: [missing.yaml]\n")
    code, _, err = _run(capsys, "config", "show", "--repo-root", str(tmp_path))
    assert code == 1
    assert "Layer 'missing' not found" in err


def test_profile_summary_goes_to_stderr(site_project: Path, capsys: pytest.CaptureFixture[str]) -> None:
    code, out, err = _run(capsys, "--profile", "config", "show", "--json", "--repo-root", str(site_project))
    assert code == 0
    json.loads(out)
    assert "[docfold][profile]" in err


def test_no_arguments_prints_help(capsys: pytest.CaptureFixture[str]) -> None:
    code, out, _ = _run(capsys)
    assert code == 0
    assert "usage: docfold" in out
