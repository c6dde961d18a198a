"""argv.py – Edit a command line with the flag codec.

The first positional token is the command; the rest are flags.  Put the
command line after ``--`` so its flags are not read as options.

Usage:
    topodeploy argv --set --v=2 -- /bin/resource-topology-exporter --sleep-interval=10s
    topodeploy argv --delete --pods-fingerprint --json -- /bin/rte --pods-fingerprint
"""

import typer

from topodeploy.cli import error_exit, json_print, parse_assignment
from topodeploy.flagcodec import FlagList, parse_command_line

_EPILOG = """\
[bold]Examples:[/bold]

topodeploy argv --set=--v=2 -- /bin/rte --sysfs=/host-sys        Append --v=2

topodeploy argv --toggle=--pods-fingerprint -- /bin/rte          Add a bare flag

topodeploy argv --delete=--pods-fingerprint -- /bin/rte --pods-fingerprint

[dim]Edits apply in this order: every --set (in the order given), then every
--toggle, then every --delete.  Existing flags keep their position; new
ones are appended.[/dim]"""

app = typer.Typer(
    help="Parse, edit and re-serialize a command line.",
    rich_markup_mode="rich",
    epilog=_EPILOG,
)


def edit_command_line(
    tokens: list[str],
    sets: list[tuple[str, str]],
    toggles: list[str],
    deletes: list[str],
) -> FlagList:
    flags = parse_command_line(tokens)
    for name, value in sets:
        flags.set_option(name, value)
    for name in toggles:
        flags.set_toggle(name)
    for name in deletes:
        flags.delete(name)
    return flags


@app.callback(invoke_without_command=True)
def main(
    tokens: list[str] | None = typer.Argument(None, help="COMMAND [ARGS]... (after --)"),
    set_opts: list[str] | None = typer.Option(
        None, "--set", "-s", help="Set NAME=VALUE (repeatable)"
    ),
    toggles: list[str] | None = typer.Option(
        None, "--toggle", help="Set a bare flag NAME (repeatable)"
    ),
    deletes: list[str] | None = typer.Option(
        None, "--delete", "-d", help="Remove flag NAME (repeatable)"
    ),
    no_command: bool = typer.Option(
        False, "--no-command", help="Treat every token as a flag (no leading command)"
    ),
    json_output: bool = typer.Option(False, "--json", help="Output the argv as a JSON list"),
) -> None:
    """Parse, edit and re-serialize a command line."""
    if not tokens and not (set_opts or toggles):
        error_exit("nothing to do: pass a command line after --", json_mode=json_output)

    sets = [parse_assignment(item, json_mode=json_output) for item in set_opts or []]
    if no_command:
        tokens = ["", *(tokens or [])]
    flags = edit_command_line(tokens or [], sets, toggles or [], deletes or [])

    if json_output:
        json_print(flags.argv())
    else:
        for token in flags.argv():
            typer.echo(token)


def main_entry() -> None:
    """Run the argv CLI app."""
    app()


if __name__ == "__main__":
    main_entry()
