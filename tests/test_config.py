"""Tests for the topodeploy.toml loader."""

import os
from pathlib import Path

import pytest

from topodeploy.config import DeployConfig, _find_root, _resolve, load_config
from topodeploy.manifests.objects import DEFAULT_NAMESPACE
from topodeploy.platform import Platform
from topodeploy.wait import DEFAULT_POLL_INTERVAL, DEFAULT_POLL_TIMEOUT

# ---------------------------------------------------------------------------
# Helper: create a temp topodeploy.toml and return the root dir
# ---------------------------------------------------------------------------

def _make_project(tmp_path: Path, toml_content: str) -> Path:
    """Write a topodeploy.toml and return the directory."""
    (tmp_path / "topodeploy.toml").write_text(toml_content)
    return tmp_path


FULL_TOML = """\
[deploy]
name = "rte-test"
namespace = "rte-ns"
platform = "OpenShift"
image = "quay.io/me/rte:dev"
pull_if_not_present = true
verbose = 4
pods_fingerprint = true
notification = true
update_interval = "30s"
config_file = "conf/rte.yaml"

[deploy.machine_config_pool_selector]
"pools.operator.machineconfiguration.openshift.io/worker" = ""

[cluster]
kubeconfig = "/etc/kube/config"
kubectl = "oc"

[wait]
interval = 1
timeout = 30.5
"""


# ---------------------------------------------------------------------------
# _resolve() / _find_root()
# ---------------------------------------------------------------------------

class TestResolve:
    def test_relative_path(self, tmp_path: Path):
        assert _resolve(tmp_path, "conf/rte.yaml") == tmp_path / "conf" / "rte.yaml"

    def test_absolute_path(self, tmp_path: Path):
        assert _resolve(tmp_path, "/abs/rte.yaml") == Path("/abs/rte.yaml")

    def test_none_returns_none(self, tmp_path: Path):
        assert _resolve(tmp_path, None) is None


class TestFindRoot:
    def test_explicit_root(self, tmp_path: Path):
        assert _find_root(tmp_path) == tmp_path

    def test_auto_detect_from_subdirectory(self, tmp_path: Path):
        _make_project(tmp_path, "[deploy]\n")
        sub = tmp_path / "a" / "b"
        sub.mkdir(parents=True)
        old_cwd = os.getcwd()
        try:
            os.chdir(sub)
            assert _find_root() == tmp_path.resolve()
        finally:
            os.chdir(old_cwd)


# ---------------------------------------------------------------------------
# load_config()
# ---------------------------------------------------------------------------

class TestLoadConfig:
    def test_full_file(self, tmp_path: Path):
        cfg = load_config(_make_project(tmp_path, FULL_TOML))
        assert cfg.root == tmp_path
        assert cfg.name == "rte-test"
        assert cfg.namespace == "rte-ns"
        assert cfg.platform is Platform.OPENSHIFT
        assert cfg.image == "quay.io/me/rte:dev"
        assert cfg.pull_if_not_present is True
        assert cfg.verbose == 4
        assert cfg.pods_fingerprint is True
        assert cfg.notification is True
        assert cfg.update_interval == "30s"
        assert cfg.config_file == tmp_path / "conf" / "rte.yaml"
        assert cfg.machine_config_pool_selector == {
            "pools.operator.machineconfiguration.openshift.io/worker": ""
        }
        assert cfg.kubeconfig == "/etc/kube/config"
        assert cfg.kubectl == "oc"
        assert cfg.wait_interval == 1.0
        assert cfg.wait_timeout == 30.5

    def test_empty_file_uses_defaults(self, tmp_path: Path):
        cfg = load_config(_make_project(tmp_path, ""))
        assert cfg.namespace == DEFAULT_NAMESPACE
        assert cfg.platform is Platform.KUBERNETES
        assert cfg.config_file is None
        assert cfg.kubectl == "kubectl"
        assert cfg.wait_interval == DEFAULT_POLL_INTERVAL
        assert cfg.wait_timeout == DEFAULT_POLL_TIMEOUT

    def test_missing_file(self, tmp_path: Path):
        with pytest.raises(FileNotFoundError):
            load_config(tmp_path)

    def test_unknown_platform(self, tmp_path: Path):
        _make_project(tmp_path, '[deploy]\nplatform = "nomad"\n')
        with pytest.raises(ValueError, match="nomad"):
            load_config(tmp_path)

    def test_non_string_platform(self, tmp_path: Path):
        _make_project(tmp_path, "[deploy]\nplatform = 1\n")
        with pytest.raises(ValueError, match="1"):
            load_config(tmp_path)


# ---------------------------------------------------------------------------
# DeployConfig -> RenderOptions
# ---------------------------------------------------------------------------

class TestRenderOptions:
    def test_maps_fields(self, tmp_path: Path):
        _make_project(tmp_path, FULL_TOML)
        (tmp_path / "conf").mkdir()
        (tmp_path / "conf" / "rte.yaml").write_text("x: 1\n")
        opts = load_config(tmp_path).render_options()
        assert opts.name == "rte-test"
        assert opts.namespace == "rte-ns"
        assert opts.config_data == "x: 1\n"
        assert opts.daemon_set.verbose == 4
        assert opts.daemon_set.update_interval == "30s"
        assert opts.daemon_set.pull_if_not_present is True
        assert opts.machine_config_pool_selector is not None

    def test_no_config_file(self, tmp_path: Path):
        opts = DeployConfig(root=tmp_path).render_options()
        assert opts.config_data == ""
        assert opts.daemon_set.pods_fingerprint is False

    def test_missing_config_file_raises(self, tmp_path: Path):
        cfg = DeployConfig(root=tmp_path, config_file=tmp_path / "nope.yaml")
        with pytest.raises(FileNotFoundError):
            cfg.render_options()


class TestPlatform:
    @pytest.mark.parametrize("text", ["kubernetes", "Kubernetes", " KUBERNETES "])
    def test_parse_case_insensitive(self, text: str):
        assert Platform.parse(text) is Platform.KUBERNETES

    def test_parse_unknown_lists_choices(self):
        with pytest.raises(ValueError, match="openshift"):
            Platform.parse("swarm")

    def test_str(self):
        assert str(Platform.OPENSHIFT) == "openshift"
