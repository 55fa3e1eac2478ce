"""``toolgate commands`` — show what the shell analyzer sees in a command."""

from __future__ import annotations

import click

from toolgate.cli_commands._output import console, print_commands


@click.command()
@click.argument("command")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON.")
def commands(command: str, as_json: bool) -> None:
    """List the simple commands found in COMMAND."""
    from toolgate.shell.analyzer import parse_commands

    parsed = parse_commands(command)
    if as_json:
        console.print_json(
            data={
                "names": list(parsed.names),
                "fallback": parsed.fallback,
            }
        )
        return
    if not parsed.commands and not parsed.fallback:
        console.print("[yellow]No commands found.[/yellow]")
        return
    print_commands(parsed)
