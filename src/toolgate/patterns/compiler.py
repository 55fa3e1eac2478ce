"""Compile user-supplied :class:`PatternConfig` entries into matchers.

How a non-regex pattern matches depends on what it is matched against:

- ``COMMAND`` — plain substring of the raw command string;
- ``FILE`` — case-insensitive glob on the path's basename, or on the trailing
  path components when the glob itself contains ``/``;
- ``DIRECTORY`` — glob against every directory component of the path (or
  every leading path prefix when the glob contains ``/``).

Regex patterns are searched anywhere in the target.  A regex that fails to
compile is reported and dropped; it never becomes a match-everything rule.
"""

from __future__ import annotations

import fnmatch
import logging
import posixpath
import re
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from enum import Enum

from toolgate.config.models import PatternConfig
from toolgate.config.warning_sink import WarningSink

logger = logging.getLogger(__name__)


class PatternKind(str, Enum):
    COMMAND = "command"
    FILE = "file"
    DIRECTORY = "directory"


@dataclass(frozen=True)
class CompiledPattern:
    source: PatternConfig
    kind: PatternKind
    _matcher: Callable[[str], bool] = field(repr=False, compare=False)

    @property
    def pattern(self) -> str:
        return self.source.pattern

    @property
    def description(self) -> str | None:
        return getattr(self.source, "description", None)

    def matches(self, target: str) -> bool:
        return self._matcher(target)


def normalize_path(target: str) -> str:
    """Collapse ``./``, duplicate separators and backslashes.

    >>> normalize_path("./config//.env")
    'config/.env'
    """
    if not target:
        return ""
    return posixpath.normpath(target.replace("\\", "/"))


def compile_pattern(
    config: PatternConfig,
    kind: PatternKind,
    *,
    sink: WarningSink | None = None,
) -> CompiledPattern | None:
    """Compile *config*; ``None`` if it is an invalid regex."""
    if config.regex:
        try:
            regex = re.compile(config.pattern)
        except re.error as exc:
            message = f"guardrails: ignoring invalid regex {config.pattern!r} ({exc})"
            if sink is not None:
                sink.add(message)
            else:
                logger.warning(message)
            return None
        if kind is PatternKind.COMMAND:
            return CompiledPattern(config, kind, lambda t: regex.search(t) is not None)
        return CompiledPattern(config, kind, lambda t: regex.search(normalize_path(t)) is not None)

    if kind is PatternKind.COMMAND:
        text = config.pattern
        return CompiledPattern(config, kind, lambda t: text in t)
    if kind is PatternKind.FILE:
        return CompiledPattern(config, kind, _file_glob(config.pattern))
    return CompiledPattern(config, kind, _directory_glob(config.pattern))


def compile_patterns(
    configs: Iterable[PatternConfig],
    kind: PatternKind,
    *,
    sink: WarningSink | None = None,
) -> tuple[CompiledPattern, ...]:
    """Compile every entry of *configs*, dropping the invalid ones."""
    compiled = (compile_pattern(c, kind, sink=sink) for c in configs)
    return tuple(c for c in compiled if c is not None)


def first_match(patterns: Iterable[CompiledPattern], target: str) -> CompiledPattern | None:
    for pattern in patterns:
        if pattern.matches(target):
            return pattern
    return None


# ---------------------------------------------------------------------------
# Glob helpers
# ---------------------------------------------------------------------------


def _components(target: str) -> list[str]:
    return [part for part in normalize_path(target).split("/") if part not in ("", ".")]


def _file_glob(pattern: str) -> Callable[[str], bool]:
    glob = pattern.lower().strip("/")
    depth = glob.count("/") + 1

    def matcher(target: str) -> bool:
        parts = [p.lower() for p in _components(target)]
        if not parts:
            return False
        if depth == 1:
            return fnmatch.fnmatchcase(parts[-1], glob)
        return fnmatch.fnmatchcase("/".join(parts[-depth:]), glob)

    return matcher


def _directory_glob(pattern: str) -> Callable[[str], bool]:
    glob = pattern.lower().strip("/")
    nested = "/" in glob

    def matcher(target: str) -> bool:
        parts = [p.lower() for p in _components(target)]
        if nested:
            return any(
                fnmatch.fnmatchcase("/".join(parts[start:end]), glob)
                for start in range(len(parts))
                for end in range(start + 1, len(parts) + 1)
            )
        return any(fnmatch.fnmatchcase(part, glob) for part in parts)

    return matcher
