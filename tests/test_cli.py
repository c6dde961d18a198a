"""Tests for the shared CLI helpers in topodeploy.cli."""

import json
import os
from pathlib import Path

import pytest
import typer

from topodeploy.cli import (
    apply_overrides,
    error_exit,
    get_config,
    json_print,
    make_client,
    parse_assignment,
)
from topodeploy.config import DeployConfig
from topodeploy.platform import Platform

# ---------------------------------------------------------------------------
# error_exit()
# ---------------------------------------------------------------------------


class TestErrorExit:
    def test_plain_stderr_and_exit(self, capsys: pytest.CaptureFixture[str]) -> None:
        with pytest.raises(typer.Exit) as exc_info:
            error_exit("something broke")
        assert exc_info.value.exit_code == 1
        captured = capsys.readouterr()
        assert "something broke" in captured.err
        assert captured.out == ""

    def test_custom_exit_code(self) -> None:
        with pytest.raises(typer.Exit) as exc_info:
            error_exit("fatal", code=2)
        assert exc_info.value.exit_code == 2

    def test_json_mode_stdout(self, capsys: pytest.CaptureFixture[str]) -> None:
        with pytest.raises(typer.Exit):
            error_exit("bad input", json_mode=True)
        captured = capsys.readouterr()
        assert json.loads(captured.out) == {"error": "bad input"}
        assert captured.err == ""


# ---------------------------------------------------------------------------
# json_print()
# ---------------------------------------------------------------------------


class TestJsonPrint:
    def test_list_output(self, capsys: pytest.CaptureFixture[str]) -> None:
        json_print(["/bin/rte", "--v=2"])
        assert json.loads(capsys.readouterr().out) == ["/bin/rte", "--v=2"]

    def test_pretty_printed(self, capsys: pytest.CaptureFixture[str]) -> None:
        json_print({"a": 1})
        assert "\n" in capsys.readouterr().out


# ---------------------------------------------------------------------------
# parse_assignment()
# ---------------------------------------------------------------------------


class TestParseAssignment:
    def test_simple(self) -> None:
        assert parse_assignment("--v=2") == ("--v", "2")

    def test_value_with_equals(self) -> None:
        assert parse_assignment("--label=a=b") == ("--label", "a=b")

    def test_empty_value(self) -> None:
        assert parse_assignment("--x=") == ("--x", "")

    def test_missing_equals_exits(self, capsys: pytest.CaptureFixture[str]) -> None:
        with pytest.raises(typer.Exit):
            parse_assignment("--v")
        assert "--v" in capsys.readouterr().err

    def test_missing_name_exits(self) -> None:
        with pytest.raises(typer.Exit):
            parse_assignment("=2")


# ---------------------------------------------------------------------------
# get_config() / apply_overrides()
# ---------------------------------------------------------------------------


class TestGetConfig:
    def test_defaults_without_file(self, tmp_path: Path) -> None:
        old_cwd = os.getcwd()
        try:
            os.chdir(tmp_path)
            cfg = get_config()
        finally:
            os.chdir(old_cwd)
        assert cfg.platform is Platform.KUBERNETES

    def test_explicit_dir_without_file_exits(self, tmp_path: Path) -> None:
        with pytest.raises(typer.Exit):
            get_config(str(tmp_path))

    def test_explicit_dir(self, tmp_path: Path) -> None:
        (tmp_path / "topodeploy.toml").write_text('[deploy]\nnamespace = "x"\n')
        assert get_config(str(tmp_path)).namespace == "x"

    def test_bad_platform_exits(self, tmp_path: Path) -> None:
        (tmp_path / "topodeploy.toml").write_text('[deploy]\nplatform = "nomad"\n')
        with pytest.raises(typer.Exit):
            get_config(str(tmp_path))


class TestApplyOverrides:
    def test_overrides(self, tmp_path: Path) -> None:
        cfg = apply_overrides(
            DeployConfig(root=tmp_path), platform="openshift", namespace="ns", name="n"
        )
        assert (cfg.platform, cfg.namespace, cfg.name) == (Platform.OPENSHIFT, "ns", "n")

    def test_none_keeps_config(self, tmp_path: Path) -> None:
        cfg = apply_overrides(DeployConfig(root=tmp_path, namespace="keep"))
        assert cfg.namespace == "keep"

    def test_bad_platform_exits(self, tmp_path: Path) -> None:
        with pytest.raises(typer.Exit):
            apply_overrides(DeployConfig(root=tmp_path), platform="nomad")

    def test_make_client(self, tmp_path: Path) -> None:
        client = make_client(DeployConfig(root=tmp_path, kubeconfig="/kc", kubectl="oc"))
        assert (client.kubeconfig, client.kubectl) == ("/kc", "oc")
