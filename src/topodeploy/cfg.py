"""topodeploy cfg: Programmatic editor for topodeploy.toml.

Uses tomlkit for format-preserving round-trip editing (comments,
ordering, and whitespace are retained).

Usage::

    topodeploy cfg init
    topodeploy cfg show [KEY]
    topodeploy cfg set deploy.verbose 2
    topodeploy cfg set deploy.platform openshift
"""

import contextlib
from pathlib import Path

import tomlkit
import typer

from topodeploy.config import CONFIG_FILENAME
from topodeploy.manifests.objects import DEFAULT_NAME, DEFAULT_NAMESPACE
from topodeploy.platform import Platform
from topodeploy.wait import DEFAULT_POLL_INTERVAL, DEFAULT_POLL_TIMEOUT

_DEFAULT_TOML = f"""\
# topodeploy project settings

[deploy]
name = "{DEFAULT_NAME}"
namespace = "{DEFAULT_NAMESPACE}"
platform = "{Platform.KUBERNETES}"
verbose = 0
pods_fingerprint = false
notification = false
# config_file = "rte-config.yaml"

[cluster]
kubectl = "kubectl"
# kubeconfig = "~/.kube/config"

[wait]
interval = {DEFAULT_POLL_INTERVAL:g}
timeout = {DEFAULT_POLL_TIMEOUT:g}
"""

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _find_root() -> Path:
    """Walk up from cwd to find topodeploy.toml."""
    candidate = Path.cwd().resolve()
    while candidate != candidate.parent:
        if (candidate / CONFIG_FILENAME).exists():
            return candidate
        candidate = candidate.parent
    typer.secho(
        f"Error: Could not find {CONFIG_FILENAME} in any parent directory.\n"
        "Run 'topodeploy cfg init' to create one.",
        fg=typer.colors.RED,
        err=True,
    )
    raise typer.Exit(code=1)


def _load_toml(root: Path | None = None) -> tuple[tomlkit.TOMLDocument, Path]:
    """Load topodeploy.toml as a tomlkit document, preserving formatting."""
    if root is None:
        root = _find_root()
    toml_path = root / CONFIG_FILENAME
    if not toml_path.exists():
        typer.secho(f"Error: {toml_path} not found.", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)
    doc = tomlkit.parse(toml_path.read_text(encoding="utf-8"))
    return doc, toml_path


def _save_toml(doc: tomlkit.TOMLDocument, path: Path) -> None:
    """Write tomlkit document back, preserving formatting."""
    path.write_text(tomlkit.dumps(doc), encoding="utf-8")


def _coerce(value: str) -> str | int | float | bool:
    """Turn a command-line string into a bool/int/float when it parses as one."""
    if value.lower() in ("true", "false"):
        return value.lower() == "true"
    with contextlib.suppress(ValueError):
        return int(value)
    with contextlib.suppress(ValueError):
        return float(value)
    return value


# ---------------------------------------------------------------------------
# Typer app
# ---------------------------------------------------------------------------

app = typer.Typer(
    help="Read and edit topodeploy.toml programmatically.",
    rich_markup_mode="rich",
    epilog="""\
[bold]Examples:[/bold]
  topodeploy cfg init                         Write a default topodeploy.toml
  topodeploy cfg show deploy.namespace        Read a config value
  topodeploy cfg set deploy.verbose 2         Set a config value

[dim]Supports dotted key paths for nested TOML tables.[/dim]""",
)


@app.command("init")
def init(
    directory: Path = typer.Argument(Path("."), help="Directory to write the file into."),
    force: bool = typer.Option(False, "--force", help="Overwrite an existing file."),
) -> None:
    """Write a default topodeploy.toml."""
    path = directory / CONFIG_FILENAME
    if path.exists() and not force:
        typer.secho(f"Error: {path} already exists (use --force).", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)
    directory.mkdir(parents=True, exist_ok=True)
    path.write_text(_DEFAULT_TOML, encoding="utf-8")
    typer.secho(f"Wrote {path}", fg=typer.colors.GREEN)


@app.command("show")
def show(
    key: str | None = typer.Argument(
        None, help="Dot-separated key to show, e.g. 'deploy.namespace'"
    ),
) -> None:
    """Show the current config, or a specific key."""
    doc, _ = _load_toml()

    if key is None:
        typer.echo(tomlkit.dumps(doc))
        return

    current = doc
    for part in key.split("."):
        if isinstance(current, dict) and part in current:
            current = current[part]
        else:
            typer.secho(f"Key '{key}' not found.", fg=typer.colors.RED, err=True)
            raise typer.Exit(code=1)

    if isinstance(current, dict):
        typer.echo(tomlkit.dumps(current))
    else:
        typer.echo(str(current))


@app.command("set")
def set_value(
    key: str = typer.Argument(..., help="Dot-separated key, e.g. 'deploy.verbose'."),
    value: str = typer.Argument(..., help="Value to set."),
) -> None:
    """Set a scalar config key."""
    doc, toml_path = _load_toml()

    parts = key.split(".")
    current = doc
    for part in parts[:-1]:
        if part not in current:
            current[part] = tomlkit.table()
        current = current[part]

    if key == "deploy.platform":
        try:
            value = str(Platform.parse(value))
        except ValueError as exc:
            typer.secho(f"Error: {exc}", fg=typer.colors.RED, err=True)
            raise typer.Exit(code=1) from None

    parsed_value = _coerce(value)
    current[parts[-1]] = parsed_value
    _save_toml(doc, toml_path)
    typer.secho(f"Set {key} = {parsed_value!r}", fg=typer.colors.GREEN)


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------


def main_entry() -> None:
    app()


if __name__ == "__main__":
    main_entry()
