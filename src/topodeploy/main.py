"""main.py – Umbrella CLI entry point for topodeploy.

Lazily imports and registers all subcommand typer apps so that a broken
optional import doesn't prevent the entire CLI from loading.

Single-command modules are registered as flat ``app.command()`` entries;
only true multi-command modules (currently only ``cfg``) use
``add_typer()``.
"""

import importlib
from collections.abc import Callable

import typer

from topodeploy.cli import error_exit

app = typer.Typer(
    help="Deployment helper for the resource-topology-exporter.",
    rich_markup_mode="rich",
    epilog="""\
[bold]Typical workflow:[/bold]
  topodeploy cfg init              Create topodeploy.toml
  topodeploy render                Inspect the manifests
  topodeploy deploy                Create the objects on the cluster
  topodeploy remove --wait         Delete them and wait for the namespace

[dim]All subcommands read settings from topodeploy.toml when present.
Run 'topodeploy <cmd> --help' for details.[/dim]""",
)

# ---------------------------------------------------------------------------
# Subcommand registry
# ---------------------------------------------------------------------------

# (name, module, help, is_group).  Groups are mounted with add_typer(); the
# rest expose their callback as a flat command.
_COMMANDS: list[tuple[str, str, str, bool]] = [
    ("render", "topodeploy.render", "Render the resource-topology-exporter manifests.", False),
    ("deploy", "topodeploy.deploy", "Create the exporter objects on the cluster.", False),
    ("remove", "topodeploy.remove", "Delete the exporter objects from the cluster.", False),
    ("argv", "topodeploy.argv", "Parse, edit and re-serialize a command line.", False),
    ("cfg", "topodeploy.cfg", "Read and edit topodeploy.toml programmatically.", True),
]


def _unavailable(module: str, err: ImportError) -> Callable[[], None]:
    def _report() -> None:
        error_exit(f"could not load {module!r}: {err}")

    return _report


def _register(name: str, module: str, help_text: str, is_group: bool) -> None:
    try:
        mod = importlib.import_module(module)
    except ImportError as exc:
        report = _unavailable(module, exc)
        if is_group:
            stub = typer.Typer()
            stub.callback(invoke_without_command=True)(report)
            app.add_typer(stub, name=name, help=f"[unavailable] {help_text}")
        else:
            app.command(name=name, help=f"[unavailable] {help_text}")(report)
        return

    if is_group:
        app.add_typer(mod.app, name=name, help=help_text)
        return
    epilog = mod.app.info.epilog
    app.command(
        name=name,
        help=help_text,
        epilog=epilog if isinstance(epilog, str) else None,
    )(mod.main)


for _entry in _COMMANDS:
    _register(*_entry)


def main() -> None:
    app()


if __name__ == "__main__":
    main()
