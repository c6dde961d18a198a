"""render.py – Print the rendered exporter manifests.

Usage:
    topodeploy render
    topodeploy render --platform openshift --name rte-test
    topodeploy render --json
"""

import typer

from topodeploy.cli import (
    ConfigDirOption,
    NameOption,
    NamespaceOption,
    PlatformOption,
    apply_overrides,
    error_exit,
    get_config,
    json_print,
)
from topodeploy.config import DeployConfig
from topodeploy.manifests import Manifests, dump_yaml, get_manifests

_EPILOG = """\
[bold]Examples:[/bold]

topodeploy render                                  YAML stream for kubectl apply -f -

topodeploy render --platform openshift             Include MachineConfig and SCC

topodeploy render --set-image quay.io/me/rte:dev   Override the exporter image

topodeploy render --json                           JSON list of objects

[dim]Settings come from topodeploy.toml when present; options override them.[/dim]"""

app = typer.Typer(
    help="Render the resource-topology-exporter manifests.",
    rich_markup_mode="rich",
    epilog=_EPILOG,
)


def render_manifests(cfg: DeployConfig) -> Manifests:
    """Build and render the manifest bundle described by *cfg*."""
    return get_manifests(cfg.platform, cfg.namespace).render(cfg.render_options())


@app.callback(invoke_without_command=True)
def main(
    json_output: bool = typer.Option(False, "--json", help="Output objects as a JSON list"),
    platform: str | None = PlatformOption,
    namespace: str | None = NamespaceOption,
    name: str | None = NameOption,
    image: str | None = typer.Option(None, "--set-image", help="Exporter container image"),
    verbose: int | None = typer.Option(None, "--verbose", "-v", help="Exporter log level"),
    config_dir: str | None = ConfigDirOption,
) -> None:
    """Render the resource-topology-exporter manifests."""
    cfg = get_config(config_dir, json_mode=json_output)
    apply_overrides(cfg, platform=platform, namespace=namespace, name=name, json_mode=json_output)
    if image:
        cfg.image = image
    if verbose is not None:
        cfg.verbose = verbose

    try:
        objs = render_manifests(cfg).to_objects()
    except OSError as exc:
        error_exit(f"Cannot read exporter config: {exc}", json_mode=json_output)
    if json_output:
        json_print(objs)
    else:
        typer.echo(dump_yaml(objs), nl=False)


def main_entry() -> None:
    """Run the render CLI app."""
    app()


if __name__ == "__main__":
    main_entry()
