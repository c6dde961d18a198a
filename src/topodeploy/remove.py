"""remove.py – Delete the exporter objects and optionally wait for teardown.

Objects are deleted in reverse creation order.  Objects that are already
gone are reported as skipped rather than failing the run.

Usage:
    topodeploy remove
    topodeploy remove --wait --timeout 300
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
from topodeploy.platform import Platform
from topodeploy.render import render_manifests
from topodeploy.wait import Waiter, WaitTimeoutError

app = typer.Typer(
    help="Delete the resource-topology-exporter objects from the cluster.",
    rich_markup_mode="rich",
)

console = Console(stderr=True)


@app.callback(invoke_without_command=True)
def main(
    wait: bool = typer.Option(False, "--wait", help="Wait for the namespace to be deleted"),
    timeout: float | None = typer.Option(None, "--timeout", help="Wait timeout in seconds"),
    json_output: bool = typer.Option(False, "--json", help="Output results as JSON"),
    platform: str | None = PlatformOption,
    namespace: str | None = NamespaceOption,
    name: str | None = NameOption,
    config_dir: str | None = ConfigDirOption,
) -> None:
    """Delete the resource-topology-exporter objects from the cluster."""
    cfg = get_config(config_dir, json_mode=json_output)
    apply_overrides(cfg, platform=platform, namespace=namespace, name=name, json_mode=json_output)

    try:
        objs = render_manifests(cfg).to_objects()
    except OSError as exc:
        error_exit(f"Cannot read exporter config: {exc}", json_mode=json_output)

    client = make_client(cfg)
    out = Console(stderr=True, quiet=True) if json_output else console
    helper = Helper("RTE", client, console=out)
    results: list[dict[str, Any]] = []
    for obj in reversed(objs):
        entry = {"object": object_label(obj), "name": obj["metadata"]["name"]}
        try:
            helper.delete_object(obj)
            entry["action"] = "deleted"
        except KubectlError as exc:
            if not exc.not_found:
                error_exit(
                    f"deleting {entry['object']} {entry['name']!r}: {exc}",
                    json_mode=json_output,
                )
            entry["action"] = "skipped"
        results.append(entry)

    waited = False
    if wait:
        if cfg.platform is Platform.KUBERNETES:
            waiter = Waiter(client, console=None if json_output else console)
            waiter = waiter.interval(cfg.wait_interval).timeout(
                timeout if timeout is not None else cfg.wait_timeout
            )
            try:
                waiter.for_namespace_deleted(cfg.namespace)
            except (WaitTimeoutError, KubectlError) as exc:
                error_exit(str(exc), json_mode=json_output)
            waited = True
        elif not json_output:
            console.print("[yellow]Namespace is not managed on OpenShift; not waiting.[/yellow]")

    if json_output:
        json_print({"namespace": cfg.namespace, "waited": waited, "results": results})
    else:
        deleted = sum(1 for r in results if r["action"] == "deleted")
        skipped = len(results) - deleted
        console.print(f"Removal complete: {deleted} deleted, {skipped} skipped")


def main_entry() -> None:
    """Run the remove CLI app."""
    app()


if __name__ == "__main__":
    main_entry()
