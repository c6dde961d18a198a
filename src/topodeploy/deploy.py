"""deploy.py – Create the rendered exporter objects on the cluster.

Usage:
    topodeploy deploy
    topodeploy deploy --platform openshift --namespace rte
"""

from typing import Any

import typer
from rich.console import Console

from topodeploy.cli import (
    ConfigDirOption,
    NameOption,
    NamespaceOption,
    PlatformOption,
    apply_overrides,
    error_exit,
    get_config,
    json_print,
    make_client,
)
from topodeploy.kubectl import Helper, KubectlError
from topodeploy.manifests import object_label
from topodeploy.render import render_manifests

app = typer.Typer(
    help="Create the resource-topology-exporter objects on the cluster.",
    rich_markup_mode="rich",
)

console = Console(stderr=True)


@app.callback(invoke_without_command=True)
def main(
    json_output: bool = typer.Option(False, "--json", help="Output created objects as JSON"),
    platform: str | None = PlatformOption,
    namespace: str | None = NamespaceOption,
    name: str | None = NameOption,
    config_dir: str | None = ConfigDirOption,
) -> None:
    """Create the resource-topology-exporter objects on the cluster."""
    cfg = get_config(config_dir, json_mode=json_output)
    apply_overrides(cfg, platform=platform, namespace=namespace, name=name, json_mode=json_output)

    try:
        objs = render_manifests(cfg).to_objects()
    except OSError as exc:
        error_exit(f"Cannot read exporter config: {exc}", json_mode=json_output)

    out = Console(stderr=True, quiet=True) if json_output else console
    helper = Helper("RTE", make_client(cfg), console=out)
    created: list[dict[str, Any]] = []
    for obj in objs:
        try:
            helper.create_object(obj)
        except KubectlError as exc:
            error_exit(
                f"creating {object_label(obj)} {obj['metadata']['name']!r}: {exc}",
                json_mode=json_output,
            )
        created.append({"object": object_label(obj), "name": obj["metadata"]["name"]})

    if json_output:
        json_print({"platform": str(cfg.platform), "namespace": cfg.namespace, "created": created})
    else:
        console.print(f"[green]Deployed {len(created)} objects on {cfg.platform}[/green]")


def main_entry() -> None:
    """Run the deploy CLI app."""
    app()


if __name__ == "__main__":
    main_entry()
