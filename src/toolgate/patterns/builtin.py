"""Structural matchers for the built-in dangerous-command patterns.

The default permission-gate patterns (``rm -rf``, ``sudo`` and friends) would
misfire as plain substrings: ``sudo`` hides in ``pseudo``, and ``rm -fr``
slips past ``rm -rf``.  While ``useBuiltinMatchers`` is on, each default
pattern is matched against the parsed simple commands instead, and against a
regex when the command cannot be parsed.

Each simple command is widened before matching: the leading word is reduced
to its basename (``/bin/rm`` is ``rm``), wrappers such as ``env``, ``nohup``
or ``xargs`` contribute the command they run, and ``find -exec`` contributes
its action.
"""

from __future__ import annotations

import posixpath
import re
from collections.abc import Callable, Iterator
from dataclasses import dataclass

from toolgate.shell.analyzer import ParsedCommands, SimpleCommand

_MAX_UNWRAP = 8

# Wrapper commands mapped to their options that consume the next word.
_WRAPPERS: dict[str, frozenset[str]] = {
    "env": frozenset({"-u", "--unset", "-C", "--chdir"}),
    "nohup": frozenset(),
    "command": frozenset(),
    "exec": frozenset({"-a"}),
    "xargs": frozenset({"-a", "-d", "-E", "-I", "-L", "-n", "-P", "-s"}),
    "nice": frozenset({"-n", "--adjustment"}),
    "timeout": frozenset({"-s", "--signal", "-k", "--kill-after"}),
    "sudo": frozenset(
        {
            "-u", "--user", "-g", "--group", "-C", "--close-from", "-D", "--chdir",
            "-p", "--prompt", "-r", "--role", "-t", "--type", "-U", "--other-user",
            "-T", "--command-timeout",
        }
    ),
}
# Wrappers that accept NAME=value assignments before the command.
_ASSIGNING_WRAPPERS = frozenset({"env", "sudo"})
# Wrappers with positional operands before the command (``timeout DURATION``).
_LEADING_OPERANDS = {"timeout": 1}

_FIND_ACTIONS = frozenset({"-exec", "-execdir", "-ok", "-okdir"})
_FIND_TERMINATORS = frozenset({";", "\\;", "+"})


def _unwrap(command: SimpleCommand) -> SimpleCommand | None:
    """The command a wrapper runs, or None when *command* wraps nothing."""
    valued = _WRAPPERS.get(command.name or "")
    if valued is None:
        return None
    operands = _LEADING_OPERANDS.get(command.name or "", 0)
    args = command.args
    index = 0
    while index < len(args):
        arg = args[index]
        if arg == "--":
            index += 1
            break
        if arg.startswith("-") and len(arg) > 1:
            index += 2 if arg in valued else 1
            continue
        if command.name in _ASSIGNING_WRAPPERS and re.match(r"[A-Za-z_][A-Za-z0-9_]*=", arg):
            index += 1
            continue
        break
    index += operands
    if index >= len(args):
        return None
    return SimpleCommand(name=args[index], args=args[index + 1 :])


def _find_actions(command: SimpleCommand) -> Iterator[SimpleCommand]:
    if command.name != "find":
        return
    args = command.args
    index = 0
    while index < len(args):
        if args[index] in _FIND_ACTIONS:
            end = index + 1
            while end < len(args) and args[end] not in _FIND_TERMINATORS:
                end += 1
            if end > index + 1:
                yield SimpleCommand(name=args[index + 1], args=args[index + 2 : end])
            index = end
        index += 1


def expand_command(command: SimpleCommand, depth: int = 0) -> Iterator[SimpleCommand]:
    """*command* with its name reduced to a basename, then everything it runs."""
    name = posixpath.basename(command.name) if command.name is not None else None
    current = SimpleCommand(name=name, args=command.args)
    yield current
    if name is None or depth >= _MAX_UNWRAP:
        return
    inner = _unwrap(current)
    if inner is not None:
        yield from expand_command(inner, depth + 1)
    for action in _find_actions(current):
        yield from expand_command(action, depth + 1)


def _short_flags(args: tuple[str, ...]) -> set[str]:
    letters: set[str] = set()
    for arg in args:
        if arg.startswith("-") and not arg.startswith("--") and len(arg) > 1:
            letters.update(arg[1:])
    return letters


def _has_recursive(args: tuple[str, ...]) -> bool:
    return bool(_short_flags(args) & {"r", "R"}) or "--recursive" in args


def _is_rm_rf(command: SimpleCommand) -> bool:
    if command.name != "rm":
        return False
    forced = "f" in _short_flags(command.args) or "--force" in command.args
    return forced and _has_recursive(command.args)


def _is_sudo(command: SimpleCommand) -> bool:
    return command.name == "sudo"


def _is_dd_if(command: SimpleCommand) -> bool:
    return command.name == "dd" and any(arg.startswith("if=") for arg in command.args)


def _is_mkfs(command: SimpleCommand) -> bool:
    name = command.name or ""
    return name == "mkfs" or name.startswith("mkfs.")


def _is_chmod_777(command: SimpleCommand) -> bool:
    if command.name != "chmod":
        return False
    return _has_recursive(command.args) and any(arg in ("777", "0777") for arg in command.args)


def _is_chown_recursive(command: SimpleCommand) -> bool:
    return command.name == "chown" and _has_recursive(command.args)


@dataclass(frozen=True)
class BuiltinMatcher:
    structural: Callable[[SimpleCommand], bool]
    fallback: re.Pattern[str]

    def matches(self, command: str, parsed: ParsedCommands) -> bool:
        if parsed.fallback:
            return self.fallback.search(command) is not None
        return any(
            self.structural(expanded)
            for c in parsed.commands
            for expanded in expand_command(c)
        )


BUILTIN_MATCHERS: dict[str, BuiltinMatcher] = {
    "rm -rf": BuiltinMatcher(
        _is_rm_rf,
        re.compile(r"\brm\s+(?:-\w+\s+)*-(?:[a-zA-Z]*[rR][a-zA-Z]*f|[a-zA-Z]*f[a-zA-Z]*[rR])"),
    ),
    "sudo": BuiltinMatcher(_is_sudo, re.compile(r"(?<!\w)sudo(?!\w)")),
    "dd if=": BuiltinMatcher(_is_dd_if, re.compile(r"\bdd\b.*\bif=")),
    "mkfs.": BuiltinMatcher(_is_mkfs, re.compile(r"\bmkfs(?:\.\w+)?\b")),
    "chmod -R 777": BuiltinMatcher(_is_chmod_777, re.compile(r"\bchmod\s+-\w*R\w*\s+0?777\b")),
    "chown -R": BuiltinMatcher(_is_chown_recursive, re.compile(r"\bchown\s+-\w*R")),
}


def builtin_matcher(pattern: str) -> BuiltinMatcher | None:
    return BUILTIN_MATCHERS.get(pattern)
