"""``toolgate check`` — evaluate one tool call against the effective policy."""

from __future__ import annotations

import asyncio
import sys

import click

from toolgate.cli_commands._loader import load_config
from toolgate.cli_commands._output import print_decision, print_warnings


@click.command()
@click.argument("tool")
@click.option("--command", "-c", "command", default=None, help="Shell command (for the bash tool).")
@click.option("--path", "-p", "path", default=None, help="File path the tool would touch.")
@click.option("--yes", "answer", flag_value="allow", default=None, help="Answer confirmations with allow.")
@click.option("--no", "answer", flag_value="deny", help="Answer confirmations with deny.")
@click.pass_context
def check(
    ctx: click.Context,
    tool: str,
    command: str | None,
    path: str | None,
    answer: str | None,
) -> None:
    """Check whether calling TOOL would be allowed.

    Exits 0 when the call is allowed and 1 when it is blocked.
    """
    from toolgate.runtime.confirmation import (
        ConfirmationOutcome,
        Confirmer,
        StaticConfirmer,
        TerminalConfirmer,
    )
    from toolgate.runtime.extension import GuardrailsExtension
    from toolgate.runtime.models import ToolCallEvent

    loader = load_config(ctx)

    confirmer: Confirmer
    if answer is None:
        confirmer = TerminalConfirmer()
    else:
        confirmer = StaticConfirmer(ConfirmationOutcome(answer))

    tool_input: dict[str, str] = {}
    if command is not None:
        tool_input["command"] = command
    if path is not None:
        tool_input["path"] = path

    extension = GuardrailsExtension(loader, confirmer=confirmer)
    decision = asyncio.run(extension.evaluator.evaluate(ToolCallEvent(tool_name=tool, input=tool_input)))

    print_warnings(loader.sink.drain())
    print_decision(decision)
    if decision.blocked:
        sys.exit(1)
