"""Argv flag codec: parse, edit and re-serialize a process command line.

ValueFlag:  ``--name=value``
ToggleFlag: ``--name`` (no value)

A :class:`FlagList` keeps the optional command token apart from the flag
entries, so name-based edits never touch the command.  Entries are keyed
by their full name (marker included): an ordered list holds the entries and
a name -> position index makes lookups O(1) without disturbing order.

Usage::

    fl = parse_argv("/bin/resource-topology-exporter", ["--sleep-interval=10s"])
    fl.set_option("--v", "2")
    fl.delete("--pods-fingerprint")
    container["command"] = fl.argv()
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass


@dataclass(frozen=True)
class ValueFlag:
    """A flag carrying a value, rendered as ``name=value``."""

    name: str
    value: str

    def __str__(self) -> str:
        return f"{self.name}={self.value}"


@dataclass(frozen=True)
class ToggleFlag:
    """A bare flag, rendered as ``name``."""

    name: str

    def __str__(self) -> str:
        return self.name


Flag = ValueFlag | ToggleFlag


def parse_flag(token: str) -> Flag:
    """Classify a single token by its first ``=``.

    Tokens without any marker prefix are accepted verbatim.
    """
    name, sep, value = token.partition("=")
    if not sep:
        return ToggleFlag(token)
    return ValueFlag(name, value)


class FlagList:
    """Ordered, mutable list of flags with an optional leading command."""

    def __init__(self, command: str = "", flags: Iterable[Flag] = ()) -> None:
        self.command = command
        self._flags: list[Flag] = list(flags)
        self._index: dict[str, int] = {}
        self._reindex()

    def _reindex(self) -> None:
        # Maps each name to its first position; later repeats are shadowed.
        self._index = {}
        for pos, flag in enumerate(self._flags):
            self._index.setdefault(flag.name, pos)

    def _put(self, flag: Flag) -> None:
        pos = self._index.get(flag.name)
        if pos is None:
            self._index[flag.name] = len(self._flags)
            self._flags.append(flag)
            return
        self._flags[pos] = flag
        tail = self._flags[pos + 1 :]
        if any(other.name == flag.name for other in tail):
            self._flags[pos + 1 :] = [other for other in tail if other.name != flag.name]
            self._reindex()

    # -- mutation -----------------------------------------------------------

    def set_option(self, name: str, value: str) -> None:
        """Set ``name=value``, in place if present, appended otherwise.

        Later entries repeating *name* are dropped, so the name is unique
        afterwards.
        """
        self._put(ValueFlag(name, value))

    def set_toggle(self, name: str) -> None:
        """Set bare ``name``, with the same placement rules as :meth:`set_option`."""
        self._put(ToggleFlag(name))

    def delete(self, name: str) -> None:
        """Remove the first entry named ``name``. Missing names are ignored."""
        pos = self._index.get(name)
        if pos is None:
            return
        del self._flags[pos]
        self._reindex()

    # -- inspection ---------------------------------------------------------

    def get(self, name: str) -> Flag | None:
        pos = self._index.get(name)
        return None if pos is None else self._flags[pos]

    def __contains__(self, name: object) -> bool:
        return name in self._index

    def __len__(self) -> int:
        return len(self._flags)

    def __iter__(self) -> Iterator[Flag]:
        return iter(self._flags)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, FlagList):
            return NotImplemented
        return self.argv() == other.argv()

    def __repr__(self) -> str:
        return f"FlagList(command={self.command!r}, args={self.args()!r})"

    def copy(self) -> FlagList:
        return FlagList(self.command, self._flags)

    # -- serialization ------------------------------------------------------

    def args(self) -> list[str]:
        """Return the rendered flags, without the command."""
        return [str(flag) for flag in self._flags]

    def argv(self) -> list[str]:
        """Return the full token list: command (if any) followed by flags."""
        if self.command:
            return [self.command, *self.args()]
        return self.args()


def parse_argv(command: str, args: Iterable[str] | None) -> FlagList:
    """Build a :class:`FlagList` from a command and already-split tokens.

    Never fails.  An empty *command* is left out of :meth:`FlagList.argv`.
    Every token is kept, repeated names included, so ``argv()`` reproduces
    the input exactly.
    """
    return FlagList(command, (parse_flag(token) for token in args or ()))


def parse_command_line(argv: Iterable[str] | None) -> FlagList:
    """Like :func:`parse_argv`, taking the command from ``argv[0]``."""
    tokens = list(argv or ())
    if not tokens:
        return FlagList()
    return parse_argv(tokens[0], tokens[1:])
