"""Shared CLI output formatters."""

from __future__ import annotations

import json
from collections.abc import Sequence
from typing import Any

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from toolgate.config.models import EffectivePolicy, Feature, PatternConfig  # noqa: TC001
from toolgate.runtime.models import Decision  # noqa: TC001
from toolgate.shell.analyzer import ParsedCommands  # noqa: TC001

console = Console()


def print_warnings(messages: Sequence[str]) -> None:
    for message in messages:
        console.print(f"[yellow]Warning:[/yellow] {escape(message)}")


def print_document(document: dict[str, Any]) -> None:
    console.print_json(json.dumps(document))


def print_policy(policy: EffectivePolicy) -> None:
    """Pretty-print the effective policy."""
    status = "[green]enabled[/green]" if policy.enabled else "[red]disabled[/red]"
    console.print(f"\n[bold]Guardrails[/bold] {status} (version {policy.version})")

    table = Table(title="Features")
    table.add_column("Feature", style="cyan")
    table.add_column("Enabled")
    for feature in Feature:
        table.add_row(feature.value, "yes" if policy.features.is_enabled(feature) else "no")
    console.print(table)

    console.print(f"  Package manager: {policy.package_manager.selected}")
    env = policy.env_files
    console.print(f"  Protected tools: {', '.join(env.protected_tools) or '-'}")
    console.print(f"  Only block if exists: {'yes' if env.only_block_if_exists else 'no'}")
    gate = policy.permission_gate
    console.print(f"  Require confirmation: {'yes' if gate.require_confirmation else 'no'}")
    console.print(f"  Built-in matchers: {'yes' if gate.use_builtin_matchers else 'no'}")

    print_patterns_table("Protected files", env.protected_patterns)
    print_patterns_table("Allowed files", env.allowed_patterns)
    print_patterns_table("Protected directories", env.protected_directories)
    print_patterns_table("Dangerous commands", gate.patterns)
    print_patterns_table("Allowed commands", gate.allowed_patterns)
    print_patterns_table("Auto-deny commands", gate.auto_deny_patterns)


def print_patterns_table(title: str, patterns: Sequence[PatternConfig]) -> None:
    if not patterns:
        console.print(f"  {title}: (none)")
        return
    table = Table(title=title)
    table.add_column("Pattern", style="cyan")
    table.add_column("Regex")
    table.add_column("Description")
    for pattern in patterns:
        table.add_row(
            escape(pattern.pattern),
            "yes" if pattern.regex else "no",
            escape(_truncate(getattr(pattern, "description", "") or "")),
        )
    console.print(table)


def print_decision(decision: Decision) -> None:
    if decision.blocked:
        console.print(f"[red]BLOCK[/red] ({decision.feature}): {escape(decision.reason)}")
    else:
        console.print("[green]ALLOW[/green]")


def print_commands(parsed: ParsedCommands) -> None:
    table = Table(title="Commands")
    table.add_column("#")
    table.add_column("Name", style="cyan")
    table.add_column("Arguments")
    for index, command in enumerate(parsed.commands, start=1):
        table.add_row(str(index), escape(command.name or "(dynamic)"), escape(_truncate(" ".join(command.args))))
    console.print(table)
    if parsed.fallback:
        console.print("[yellow]Parsing failed; regex fallback in use.[/yellow]")


def _truncate(text: str, max_len: int = 80) -> str:
    if len(text) <= max_len:
        return text
    return text[: max_len - 3] + "..."
