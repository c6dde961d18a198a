"""Cluster object operations through ``kubectl``.

``KubectlClient`` is a thin subprocess wrapper; ``Helper`` adds the
one-line ``+<tag>> created ...`` progress reports used by deploy/remove.
"""

from __future__ import annotations

import json
import subprocess
from typing import Any

from rich.console import Console

from topodeploy.manifests.objects import Obj, dump_yaml, object_label


class KubectlError(RuntimeError):
    """A kubectl invocation exited non-zero."""

    def __init__(self, args: list[str], stderr: str) -> None:
        self.args_list = args
        self.stderr = stderr
        super().__init__(stderr or f"kubectl command failed: {' '.join(args)}")

    @property
    def not_found(self) -> bool:
        return "NotFound" in self.stderr or "not found" in self.stderr


class KubectlClient:
    """Create, delete and read objects via the kubectl binary."""

    def __init__(self, kubeconfig: str | None = None, kubectl: str = "kubectl") -> None:
        self.kubeconfig = kubeconfig
        self.kubectl = kubectl

    def create(self, obj: Obj) -> str:
        return self._run(["create", "-f", "-"], input_data=dump_yaml([obj]))

    def delete(self, obj: Obj) -> str:
        meta = obj.get("metadata", {})
        args = ["delete", obj["kind"].lower(), meta["name"]]
        if meta.get("namespace"):
            args.extend(["-n", meta["namespace"]])
        return self._run(args)

    def get(self, kind: str, name: str, namespace: str | None = None) -> dict[str, Any] | None:
        """Return the object as a dict, or ``None`` if it does not exist."""
        args = ["get", kind, name, "-o", "json"]
        if namespace:
            args.extend(["-n", namespace])
        try:
            output = self._run(args)
        except KubectlError as exc:
            if exc.not_found:
                return None
            raise
        return json.loads(output) if output else {}

    def _command(self, args: list[str]) -> list[str]:
        command = [self.kubectl]
        if self.kubeconfig:
            command.append(f"--kubeconfig={self.kubeconfig}")
        return [*command, *args]

    def _run(self, args: list[str], input_data: str | None = None) -> str:
        command = self._command(args)
        try:
            result = subprocess.run(
                command,
                input=input_data,
                text=True,
                capture_output=True,
                check=False,
            )
        except OSError as exc:
            raise KubectlError(command, str(exc)) from exc
        if result.returncode != 0:
            raise KubectlError(command, result.stderr.strip())
        return result.stdout.strip()


class Helper:
    """Create/delete objects and report each one on the console."""

    def __init__(self, tag: str, client: KubectlClient, console: Console | None = None) -> None:
        self.tag = tag
        self.client = client
        self.console = console or Console(stderr=True)

    def create_object(self, obj: Obj) -> None:
        self.client.create(obj)
        self._report("created", obj)

    def delete_object(self, obj: Obj) -> None:
        self.client.delete(obj)
        self._report("deleted", obj)

    def _report(self, verb: str, obj: Obj) -> None:
        name = obj.get("metadata", {}).get("name", "")
        self.console.print(f'+{self.tag}> {verb} {object_label(obj)} "{name}"', highlight=False)
