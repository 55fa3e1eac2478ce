"""``toolgate config`` — view and edit the scoped guardrails documents.

Every edit reads the whole scope document, applies one named setter and
writes the whole document back through :meth:`ConfigLoader.save`.
"""

from __future__ import annotations

import sys
from collections.abc import Callable
from typing import Any

import click
from rich.markup import escape

from toolgate.cli_commands._loader import load_config
from toolgate.cli_commands._output import console, print_document, print_policy
from toolgate.config.editing import PACKAGE_MANAGERS, PatternList
from toolgate.config.models import Feature, Scope

_SCOPE_OPTION = click.option(
    "--scope",
    type=click.Choice([s.value for s in Scope]),
    default=Scope.PROJECT.value,
    show_default=True,
    help="Which config document to edit.",
)
_ON_OFF = click.Choice(["on", "off"])


def _edit(ctx: click.Context, scope: str, edit: Callable[[dict[str, Any], Any], dict[str, Any]]) -> None:
    """Apply *edit* to the *scope* document and save it."""
    from toolgate.config.errors import ConfigError

    loader = load_config(ctx)
    target = Scope(scope)
    try:
        updated = edit(loader.get_document(target), loader.policy)
        loader.save(target, updated)
    except (ConfigError, ValueError) as exc:
        console.print(f"[red]Error:[/red] {escape(str(exc))}")
        sys.exit(1)
    console.print(f"[green]Saved[/green] {loader.path_for(target)}")


@click.group()
def config() -> None:
    """Show and edit guardrails configuration."""


@config.command("show")
@click.option(
    "--scope",
    type=click.Choice(["effective", *(s.value for s in Scope)]),
    default="effective",
    show_default=True,
    help="Effective (merged) policy or one raw scope document.",
)
@click.option("--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def show(ctx: click.Context, scope: str, as_json: bool) -> None:
    """Show the effective policy or a scope document."""
    loader = load_config(ctx)

    if scope == "effective":
        if as_json:
            print_document(loader.policy.to_document())
        else:
            print_policy(loader.policy)
        return

    target = Scope(scope)
    if not loader.has_document(target):
        console.print(f"[yellow]No {scope} config at {loader.path_for(target)}[/yellow]")
        return
    if not as_json:
        console.print(f"[bold]{scope} config[/bold] ({loader.path_for(target)})")
    print_document(loader.get_document(target))


@config.command("set-enabled")
@click.argument("value", type=_ON_OFF)
@_SCOPE_OPTION
@click.pass_context
def set_enabled_cmd(ctx: click.Context, value: str, scope: str) -> None:
    """Turn all guardrails on or off."""
    from toolgate.config.editing import set_enabled

    _edit(ctx, scope, lambda doc, _policy: set_enabled(doc, value == "on"))


@config.command("set-feature")
@click.argument("feature", type=click.Choice([f.value for f in Feature]))
@click.argument("value", type=_ON_OFF)
@_SCOPE_OPTION
@click.pass_context
def set_feature_cmd(ctx: click.Context, feature: str, value: str, scope: str) -> None:
    """Turn one guardrail FEATURE on or off."""
    from toolgate.config.editing import set_feature

    _edit(ctx, scope, lambda doc, _policy: set_feature(doc, Feature(feature), value == "on"))


@config.command("set-package-manager")
@click.argument("name", type=click.Choice(list(PACKAGE_MANAGERS)))
@_SCOPE_OPTION
@click.pass_context
def set_package_manager_cmd(ctx: click.Context, name: str, scope: str) -> None:
    """Select the package manager the project uses."""
    from toolgate.config.editing import set_package_manager

    _edit(ctx, scope, lambda doc, _policy: set_package_manager(doc, name))


@config.command("set-require-confirmation")
@click.argument("value", type=_ON_OFF)
@_SCOPE_OPTION
@click.pass_context
def set_require_confirmation_cmd(ctx: click.Context, value: str, scope: str) -> None:
    """Prompt (on) or only warn (off) for dangerous commands."""
    from toolgate.config.editing import set_require_confirmation

    _edit(ctx, scope, lambda doc, _policy: set_require_confirmation(doc, value == "on"))


@config.command("set-only-block-if-exists")
@click.argument("value", type=_ON_OFF)
@_SCOPE_OPTION
@click.pass_context
def set_only_block_if_exists_cmd(ctx: click.Context, value: str, scope: str) -> None:
    """Block protected files only when they exist on disk (on) or always (off)."""
    from toolgate.config.editing import set_only_block_if_exists

    _edit(ctx, scope, lambda doc, _policy: set_only_block_if_exists(doc, value == "on"))


@config.command("add-pattern")
@click.argument("which", metavar="LIST", type=click.Choice([p.value for p in PatternList]))
@click.argument("pattern")
@click.option("--regex", is_flag=True, help="Treat PATTERN as a regular expression.")
@click.option("--description", "-d", default=None, help="Description (dangerous-command lists).")
@_SCOPE_OPTION
@click.pass_context
def add_pattern_cmd(
    ctx: click.Context,
    which: str,
    pattern: str,
    regex: bool,
    description: str | None,
    scope: str,
) -> None:
    """Add PATTERN to the pattern LIST."""
    from toolgate.config.editing import add_pattern
    from toolgate.config.models import DangerousPattern, PatternConfig

    target = PatternList(which)
    entry: PatternConfig
    if target.holds_dangerous_patterns:
        entry = DangerousPattern(pattern=pattern, regex=regex, description=description or pattern)
    else:
        entry = PatternConfig(pattern=pattern, regex=regex)

    _edit(ctx, scope, lambda doc, policy: add_pattern(doc, target, entry, policy=policy))


@config.command("remove-pattern")
@click.argument("which", metavar="LIST", type=click.Choice([p.value for p in PatternList]))
@click.argument("pattern")
@_SCOPE_OPTION
@click.pass_context
def remove_pattern_cmd(ctx: click.Context, which: str, pattern: str, scope: str) -> None:
    """Remove PATTERN from the pattern LIST."""
    from toolgate.config.editing import remove_pattern

    _edit(ctx, scope, lambda doc, policy: remove_pattern(doc, PatternList(which), pattern, policy=policy))
