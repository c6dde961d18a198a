"""Shared CLI utilities for topodeploy commands.

Provides common Typer options, config-loading helpers, and standardised
output / error helpers so every command gets the same ``--config-dir``
support, error reporting and JSON output without boilerplate.

Usage in a command module::

    import typer
    from topodeploy.cli import ConfigDirOption, get_config, error_exit, json_print

    app = typer.Typer()

    @app.command()
    def main(config_dir: str | None = ConfigDirOption) -> None:
        cfg = get_config(config_dir)
        ...
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, NoReturn

import typer
from rich.console import Console

from topodeploy.config import DeployConfig, load_config
from topodeploy.kubectl import KubectlClient
from topodeploy.platform import Platform

ConfigDirOption: str | None = typer.Option(
    None,
    "--config-dir",
    "-C",
    help="Directory containing topodeploy.toml (default: search upward from cwd).",
)

PlatformOption: str | None = typer.Option(
    None, "--platform", "-p", help="Target platform: kubernetes or openshift."
)
NamespaceOption: str | None = typer.Option(
    None, "--namespace", "-n", help="Namespace for the exporter objects."
)
NameOption: str | None = typer.Option(None, "--name", help="Name override for the objects.")


def get_config(config_dir: str | None = None, *, json_mode: bool = False) -> DeployConfig:
    """Load the project config, falling back to defaults when none exists.

    An explicit *config_dir* without a config file is an error.
    """
    try:
        return load_config(Path(config_dir) if config_dir else None)
    except FileNotFoundError as exc:
        if config_dir:
            error_exit(str(exc), json_mode=json_mode)
        return DeployConfig(root=Path.cwd())
    except ValueError as exc:
        error_exit(str(exc), json_mode=json_mode)


def apply_overrides(
    cfg: DeployConfig,
    *,
    platform: str | None = None,
    namespace: str | None = None,
    name: str | None = None,
    json_mode: bool = False,
) -> DeployConfig:
    """Apply command-line overrides on top of the loaded config."""
    if platform:
        try:
            cfg.platform = Platform.parse(platform)
        except ValueError as exc:
            error_exit(str(exc), json_mode=json_mode)
    if namespace:
        cfg.namespace = namespace
    if name:
        cfg.name = name
    return cfg


def make_client(cfg: DeployConfig) -> KubectlClient:
    return KubectlClient(kubeconfig=cfg.kubeconfig, kubectl=cfg.kubectl)


# ---------------------------------------------------------------------------
# Standardised output helpers
# ---------------------------------------------------------------------------

_err_console = Console(stderr=True)


def error_exit(msg: str, *, json_mode: bool = False, code: int = 1) -> NoReturn:
    """Print *msg* as an error and ``raise typer.Exit(code)``."""
    if json_mode:
        print(json.dumps({"error": msg}, indent=2))
    else:
        _err_console.print(f"[red bold]error:[/red bold] {msg}")
    raise typer.Exit(code=code)


def json_print(data: dict[str, Any] | list[Any]) -> None:
    """Print *data* as pretty-printed JSON to stdout."""
    print(json.dumps(data, indent=2))


def parse_assignment(text: str, *, json_mode: bool = False) -> tuple[str, str]:
    """Split ``NAME=VALUE`` on the first ``=``, exiting when there is none."""
    name, sep, value = text.partition("=")
    if not sep or not name:
        error_exit(f"Expected NAME=VALUE, got {text!r}", json_mode=json_mode)
    return name, value
