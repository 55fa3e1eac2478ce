"""Shell command analysis on top of ``bashlex``.

A command string is parsed into a bash AST and walked depth-first.  Every
simple command found (inside lists, pipelines, subshells, compound commands,
command and process substitutions) contributes its leading word.  Matching on
leading words instead of raw text keeps ``npm`` inside
``https://npm.pkg.github.com`` or inside a quoted string from counting as a
command.

Parsing never executes anything.  When ``bashlex`` cannot parse the input the
result is flagged ``fallback=True`` and callers must use
:func:`contains_command_token` on the raw string instead.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from typing import Any

import bashlex
import bashlex.ast

logger = logging.getLogger(__name__)

# Shells whose ``-c`` script argument is parsed as a nested command line.
_WRAPPING_SHELLS = frozenset({"sh", "bash", "zsh", "dash", "ksh"})
_MAX_DEPTH = 3

# Word parts that make a token non-literal.
_EXPANSION_KINDS = frozenset({"parameter", "commandsubstitution", "processsubstitution", "tilde"})


@dataclass(frozen=True)
class SimpleCommand:
    """One simple command: its literal leading word (if any) and the rest."""

    name: str | None
    args: tuple[str, ...] = ()


@dataclass(frozen=True)
class ParsedCommands:
    commands: tuple[SimpleCommand, ...]
    fallback: bool

    @property
    def names(self) -> tuple[str, ...]:
        return tuple(c.name for c in self.commands if c.name is not None)


@dataclass(frozen=True)
class CommandNames:
    names: tuple[str, ...]
    fallback: bool


def parse_commands(raw: str) -> ParsedCommands:
    """Parse *raw* into its simple commands.

    Empty input yields no commands and no fallback.
    """
    return _parse(raw, depth=0)


def extract_command_names(raw: str) -> CommandNames:
    """Leading command names of every simple command in *raw*."""
    parsed = parse_commands(raw)
    return CommandNames(names=parsed.names, fallback=parsed.fallback)


def contains_command_token(raw: str, name: str) -> bool:
    """Whole-string check for *name* bounded by non-word characters.

    This is the conservative path used when parsing failed.
    """
    return re.search(rf"(?<!\w){re.escape(name)}(?!\w)", raw) is not None


def match_command_names(raw: str, wanted: Iterable[str]) -> list[str]:
    """Which of *wanted* appear as commands in *raw*.

    Structural matches come back in the order they occur in the command;
    on parse failure the regex fallback reports them in *wanted* order.
    """
    targets = list(dict.fromkeys(wanted))
    parsed = parse_commands(raw)
    if parsed.fallback:
        return [name for name in targets if contains_command_token(raw, name)]
    found: list[str] = []
    for name in parsed.names:
        if name in targets and name not in found:
            found.append(name)
    return found


def has_command(raw: str, names: Iterable[str]) -> bool:
    """True when any of *names* is a command in *raw*."""
    return bool(match_command_names(raw, names))


# ---------------------------------------------------------------------------
# AST walk
# ---------------------------------------------------------------------------


def _parse(raw: str, *, depth: int) -> ParsedCommands:
    if not raw.strip():
        return ParsedCommands(commands=(), fallback=False)

    try:
        trees = bashlex.parse(raw)
    except Exception as exc:  # bashlex raises assorted error types on unsupported syntax
        logger.debug("bashlex could not parse %r (%s); using regex fallback", raw, exc)
        return ParsedCommands(commands=(), fallback=True)

    commands: list[SimpleCommand] = []
    fallback = False
    seen: set[int] = set()
    for tree in trees:
        for node in _walk(tree, seen):
            if node.kind != "command":
                continue
            command = _simple_command(node)
            if command is None:
                continue
            commands.append(command)
            script = _wrapped_script(command)
            if script is not None and depth < _MAX_DEPTH:
                nested = _parse(script, depth=depth + 1)
                commands.extend(nested.commands)
                fallback = fallback or nested.fallback

    return ParsedCommands(commands=tuple(commands), fallback=fallback)


def _walk(node: Any, seen: set[int]) -> Iterator[Any]:
    """Depth-first pre-order traversal over every reachable AST node."""
    if id(node) in seen:
        return
    seen.add(id(node))
    yield node
    for child in _children(node):
        yield from _walk(child, seen)


def _children(node: Any) -> Iterator[Any]:
    for attr in ("parts", "list", "redirects"):
        for child in getattr(node, attr, None) or ():
            if isinstance(child, bashlex.ast.node):
                yield child
    for attr in ("command", "output", "body"):
        child = getattr(node, attr, None)
        if isinstance(child, bashlex.ast.node):
            yield child


def _simple_command(node: Any) -> SimpleCommand | None:
    words = [part for part in node.parts if part.kind == "word"]
    if not words:
        return None
    first = words[0]
    literal = not any(part.kind in _EXPANSION_KINDS for part in getattr(first, "parts", ()) or ())
    return SimpleCommand(
        name=first.word if literal else None,
        args=tuple(w.word for w in words[1:]),
    )


def _wrapped_script(command: SimpleCommand) -> str | None:
    """The script of ``bash -c 'script'`` style invocations."""
    if command.name not in _WRAPPING_SHELLS:
        return None
    args = command.args
    for index, arg in enumerate(args):
        if arg == "--":
            return None
        if arg.startswith("-") and not arg.startswith("--") and "c" in arg[1:]:
            return args[index + 1] if index + 1 < len(args) else None
        if not arg.startswith("-"):
            return None
    return None
