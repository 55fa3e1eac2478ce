"""Protection of secret files (``.env`` and friends)."""

from __future__ import annotations

import logging
from pathlib import Path

from toolgate.config.models import EnvFilesPolicy, Feature
from toolgate.config.warning_sink import WarningSink
from toolgate.patterns.compiler import PatternKind, compile_patterns, first_match
from toolgate.runtime.guards.base import EvaluationContext
from toolgate.runtime.models import Decision, ToolCallEvent
from toolgate.shell.paths import extract_path_references

logger = logging.getLogger(__name__)

BASH_TOOL = "bash"


class EnvFilesGuard:
    """Blocks tool calls that touch protected files or directories.

    A candidate path is skipped when it matches an allowed pattern.  A match
    on a protected directory blocks outright; a match on a protected file
    pattern blocks only when the file exists, unless ``onlyBlockIfExists`` is
    off.
    """

    feature = Feature.PROTECT_ENV_FILES

    def __init__(
        self,
        policy: EnvFilesPolicy,
        *,
        cwd: Path | None = None,
        sink: WarningSink | None = None,
    ) -> None:
        self._policy = policy
        self._cwd = cwd or Path.cwd()
        self._protected = compile_patterns(policy.protected_patterns, PatternKind.FILE, sink=sink)
        self._allowed = compile_patterns(policy.allowed_patterns, PatternKind.FILE, sink=sink)
        self._directories = compile_patterns(
            policy.protected_directories, PatternKind.DIRECTORY, sink=sink
        )

    def applies_to(self, tool_name: str) -> bool:
        return tool_name in self._policy.protected_tools

    def candidates(self, event: ToolCallEvent) -> list[str]:
        """Paths the call may touch, in the order they appear."""
        if event.tool_name == BASH_TOOL:
            return extract_path_references(event.text("command"))
        target = event.text("file_path", "path")
        return [target] if target else []

    def is_protected(self, target: str) -> bool:
        if first_match(self._allowed, target) is not None:
            return False
        if first_match(self._directories, target) is not None:
            return True
        if first_match(self._protected, target) is None:
            return False
        return not self._policy.only_block_if_exists or self._exists(target)

    async def check(self, event: ToolCallEvent, context: EvaluationContext) -> Decision | None:
        for target in self.candidates(event):
            if self.is_protected(target):
                return context.block(
                    event,
                    self.feature,
                    self._policy.format_block_message(target),
                    notice=f"Blocked access to protected file: {target}",
                )
        return None

    def _exists(self, target: str) -> bool:
        if "$" in target or "`" in target:
            # Unexpanded shell parameters; the real path is unknown.
            return True
        path = Path(target).expanduser()
        if not path.is_absolute():
            path = self._cwd / path
        try:
            path.stat()
        except (FileNotFoundError, NotADirectoryError):
            return False
        except (OSError, ValueError) as exc:
            # Unknown is treated as present.
            logger.debug("Could not stat %s (%s); treating as existing", path, exc)
            return True
        return True
