"""Polling waits on cluster state.

Usage::

    Waiter(client).interval(1).timeout(30).for_namespace_deleted("tas-topology-updater")
"""

from __future__ import annotations

import time
from collections.abc import Callable
from dataclasses import dataclass, replace
from typing import Any, Protocol

from rich.console import Console

DEFAULT_POLL_INTERVAL = 2.0
DEFAULT_POLL_TIMEOUT = 120.0


class WaitTimeoutError(TimeoutError):
    """The awaited condition did not hold before the deadline."""


class ObjectGetter(Protocol):
    def get(self, kind: str, name: str, namespace: str | None = None) -> dict[str, Any] | None: ...


@dataclass(frozen=True)
class Waiter:
    client: ObjectGetter
    poll_interval: float = DEFAULT_POLL_INTERVAL
    poll_timeout: float = DEFAULT_POLL_TIMEOUT
    console: Console | None = None
    clock: Callable[[], float] = time.monotonic
    sleep: Callable[[float], None] = time.sleep

    def interval(self, seconds: float) -> Waiter:
        return replace(self, poll_interval=seconds)

    def timeout(self, seconds: float) -> Waiter:
        return replace(self, poll_timeout=seconds)

    def until(self, condition: Callable[[], bool], what: str) -> None:
        """Poll *condition* until it returns True or the timeout expires."""
        deadline = self.clock() + self.poll_timeout
        while True:
            if condition():
                return
            now = self.clock()
            if now >= deadline:
                raise WaitTimeoutError(
                    f"timed out after {self.poll_timeout:g}s waiting for {what}"
                )
            self.sleep(min(self.poll_interval, deadline - now))

    def for_namespace_deleted(self, name: str) -> None:
        def _gone() -> bool:
            ns = self.client.get("namespace", name)
            if ns is None:
                return True
            if self.console is not None:
                phase = ns.get("status", {}).get("phase", "?")
                self.console.print(f"[dim]namespace {name!r} still present ({phase})[/dim]")
            return False

        self.until(_gone, f"namespace {name!r} to be deleted")
