"""Tests for topodeploy cfg (programmatic config editor)."""

from pathlib import Path

import pytest
import tomlkit
import typer
from typer.testing import CliRunner

from topodeploy.cfg import _coerce, _load_toml, _save_toml, app
from topodeploy.config import load_config
from topodeploy.platform import Platform

runner = CliRunner()

SAMPLE_TOML = """\
# Project config
[deploy]
namespace = "rte-ns"
verbose = 1

# Cluster access
[cluster]
kubectl = "kubectl"
"""


def _make_project(tmp_path: Path, toml_content: str = SAMPLE_TOML) -> Path:
    (tmp_path / "topodeploy.toml").write_text(toml_content, encoding="utf-8")
    return tmp_path


# ---------------------------------------------------------------------------
# _load_toml / _save_toml / _coerce
# ---------------------------------------------------------------------------


class TestLoadSave:
    def test_round_trip_preserves_comments(self, tmp_path: Path) -> None:
        root = _make_project(tmp_path)
        doc, path = _load_toml(root)
        _save_toml(doc, path)
        result = path.read_text(encoding="utf-8")
        assert "# Project config" in result
        assert "# Cluster access" in result

    def test_load_nonexistent_raises(self, tmp_path: Path) -> None:
        with pytest.raises(typer.Exit):
            _load_toml(tmp_path)


class TestCoerce:
    @pytest.mark.parametrize(
        ("raw", "expected"),
        [("true", True), ("False", False), ("3", 3), ("2.5", 2.5), ("30s", "30s")],
    )
    def test_values(self, raw: str, expected: object) -> None:
        assert _coerce(raw) == expected
        assert type(_coerce(raw)) is type(expected)


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


class TestCommands:
    def test_init_writes_loadable_file(self, tmp_path: Path) -> None:
        result = runner.invoke(app, ["init", str(tmp_path)])
        assert result.exit_code == 0, result.output
        cfg = load_config(tmp_path)
        assert cfg.platform is Platform.KUBERNETES
        assert cfg.name == "rte"

    def test_init_refuses_overwrite(self, tmp_path: Path) -> None:
        _make_project(tmp_path)
        result = runner.invoke(app, ["init", str(tmp_path)])
        assert result.exit_code == 1
        assert "rte-ns" in (tmp_path / "topodeploy.toml").read_text()

    def test_init_force(self, tmp_path: Path) -> None:
        _make_project(tmp_path)
        result = runner.invoke(app, ["init", str(tmp_path), "--force"])
        assert result.exit_code == 0

    def test_show_key(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.chdir(_make_project(tmp_path))
        result = runner.invoke(app, ["show", "deploy.namespace"])
        assert result.exit_code == 0
        assert result.output.strip() == "rte-ns"

    def test_show_missing_key(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.chdir(_make_project(tmp_path))
        result = runner.invoke(app, ["show", "deploy.nope"])
        assert result.exit_code == 1

    def test_set_creates_and_coerces(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.chdir(_make_project(tmp_path))
        assert runner.invoke(app, ["set", "deploy.verbose", "3"]).exit_code == 0
        assert runner.invoke(app, ["set", "wait.timeout", "60"]).exit_code == 0
        doc = tomlkit.parse((tmp_path / "topodeploy.toml").read_text())
        assert doc["deploy"]["verbose"] == 3
        assert doc["wait"]["timeout"] == 60
        assert "# Project config" in tomlkit.dumps(doc)

    def test_set_platform_normalised(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.chdir(_make_project(tmp_path))
        assert runner.invoke(app, ["set", "deploy.platform", "OpenShift"]).exit_code == 0
        assert load_config(tmp_path).platform is Platform.OPENSHIFT

    def test_set_platform_rejects_unknown(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.chdir(_make_project(tmp_path))
        result = runner.invoke(app, ["set", "deploy.platform", "nomad"])
        assert result.exit_code == 1
