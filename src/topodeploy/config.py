"""Project configuration loader for topodeploy.

Reads ``topodeploy.toml`` from the project root and exposes every setting
as a plain attribute, so commands do not hardcode names, namespaces or
cluster access details.

Example file::

    [deploy]
    name = "rte"
    namespace = "tas-topology-updater"
    platform = "kubernetes"
    verbose = 2
    pods_fingerprint = true
    config_file = "rte-config.yaml"

    [cluster]
    kubeconfig = "~/.kube/config"

    [wait]
    interval = 2
    timeout = 120

Usage::

    from topodeploy.config import load_config
    cfg = load_config()
    options = cfg.render_options()
"""

from __future__ import annotations

import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from topodeploy.manifests import DaemonSetOptions, RenderOptions
from topodeploy.manifests.objects import DEFAULT_NAMESPACE
from topodeploy.platform import Platform
from topodeploy.wait import DEFAULT_POLL_INTERVAL, DEFAULT_POLL_TIMEOUT

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

CONFIG_FILENAME = "topodeploy.toml"


@dataclass
class DeployConfig:
    """Parsed project configuration with computed paths."""

    # Directory holding topodeploy.toml (cwd when running on defaults)
    root: Path

    # --- [deploy] ---
    name: str = ""
    namespace: str = DEFAULT_NAMESPACE
    platform: Platform = Platform.KUBERNETES
    image: str = ""
    pull_if_not_present: bool = False
    verbose: int = 0
    pods_fingerprint: bool = False
    notification: bool = False
    update_interval: str = ""
    config_file: Optional[Path] = None
    machine_config_pool_selector: Optional[dict[str, str]] = None

    # --- [cluster] ---
    kubeconfig: Optional[str] = None
    kubectl: str = "kubectl"

    # --- [wait] ---
    wait_interval: float = DEFAULT_POLL_INTERVAL
    wait_timeout: float = DEFAULT_POLL_TIMEOUT

    def daemon_set_options(self) -> DaemonSetOptions:
        return DaemonSetOptions(
            image=self.image,
            pull_if_not_present=self.pull_if_not_present,
            pods_fingerprint=self.pods_fingerprint,
            notification=self.notification,
            update_interval=self.update_interval,
            verbose=self.verbose,
        )

    def render_options(self) -> RenderOptions:
        """Build manifest render options, reading ``config_file`` if set."""
        config_data = ""
        if self.config_file is not None:
            config_data = self.config_file.read_text(encoding="utf-8")
        return RenderOptions(
            daemon_set=self.daemon_set_options(),
            machine_config_pool_selector=self.machine_config_pool_selector,
            config_data=config_data,
            namespace=self.namespace,
            name=self.name,
        )


def _resolve(root: Path, rel: Optional[str]) -> Optional[Path]:
    """Resolve a path relative to project root."""
    if rel is None:
        return None
    p = Path(rel).expanduser()
    if p.is_absolute():
        return p
    return root / p


def _find_root(start: Optional[Path] = None) -> Path:
    """Walk up from *start* (or cwd) to find topodeploy.toml."""
    if start is not None:
        return start
    candidate = Path.cwd().resolve()
    while candidate != candidate.parent:
        if (candidate / CONFIG_FILENAME).exists():
            return candidate
        candidate = candidate.parent
    raise FileNotFoundError(
        f"Could not find {CONFIG_FILENAME} in any parent of the current directory."
    )


def load_config(root: Optional[Path] = None) -> DeployConfig:
    """Load topodeploy.toml.

    Args:
        root: Directory containing the file.  Auto-detected if ``None``.

    Raises:
        FileNotFoundError: no config file could be found.
        ValueError: the file names an unknown platform.
    """
    root = _find_root(root)
    toml_path = root / CONFIG_FILENAME
    if not toml_path.exists():
        raise FileNotFoundError(f"Config not found: {toml_path}")

    with open(toml_path, "rb") as f:
        raw = tomllib.load(f)

    deploy = raw.get("deploy", {})
    cluster = raw.get("cluster", {})
    wait = raw.get("wait", {})

    selector = deploy.get("machine_config_pool_selector")

    return DeployConfig(
        root=root,
        name=deploy.get("name", ""),
        namespace=deploy.get("namespace", DEFAULT_NAMESPACE),
        platform=Platform.parse(str(deploy.get("platform", "kubernetes"))),
        image=deploy.get("image", ""),
        pull_if_not_present=bool(deploy.get("pull_if_not_present", False)),
        verbose=int(deploy.get("verbose", 0)),
        pods_fingerprint=bool(deploy.get("pods_fingerprint", False)),
        notification=bool(deploy.get("notification", False)),
        update_interval=str(deploy.get("update_interval", "")),
        config_file=_resolve(root, deploy.get("config_file")),
        machine_config_pool_selector=dict(selector) if selector is not None else None,
        kubeconfig=cluster.get("kubeconfig"),
        kubectl=cluster.get("kubectl", "kubectl"),
        wait_interval=float(wait.get("interval", DEFAULT_POLL_INTERVAL)),
        wait_timeout=float(wait.get("timeout", DEFAULT_POLL_TIMEOUT)),
    )
