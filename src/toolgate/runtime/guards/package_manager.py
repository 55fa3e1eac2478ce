"""Enforcement of the project's selected JavaScript package manager."""

from __future__ import annotations

from typing import NamedTuple

from toolgate.config.models import Feature, PackageManagerPolicy
from toolgate.runtime.guards.base import EvaluationContext
from toolgate.runtime.models import Decision, ToolCallEvent
from toolgate.shell.analyzer import match_command_names

BASH_TOOL = "bash"


class ManagerInfo(NamedTuple):
    install_cmd: str
    add_cmd: str
    run_cmd: str


MANAGERS: dict[str, ManagerInfo] = {
    "bun": ManagerInfo("bun install", "bun add <package>", "bun run <script>"),
    "pnpm": ManagerInfo("pnpm install", "pnpm add <package>", "pnpm run <script>"),
    "npm": ManagerInfo("npm install", "npm install <package>", "npm run <script>"),
}


def guidance(selected: str, used: str) -> str:
    info = MANAGERS[selected]
    return (
        f"This project uses {selected} as its package manager. "
        f"Use {selected} instead of {used}. "
        f"Run `{info.install_cmd}` to install dependencies, `{info.add_cmd}` to add packages, "
        f"and `{info.run_cmd}` to run scripts."
    )


class PackageManagerGuard:
    """Blocks bash commands that invoke a package manager other than the selected one."""

    feature = Feature.ENFORCE_PACKAGE_MANAGER

    def __init__(self, policy: PackageManagerPolicy) -> None:
        self._selected = policy.selected
        self._others = tuple(name for name in MANAGERS if name != policy.selected)

    def applies_to(self, tool_name: str) -> bool:
        return tool_name == BASH_TOOL

    async def check(self, event: ToolCallEvent, context: EvaluationContext) -> Decision | None:
        command = event.text("command")
        if not command:
            return None
        for used in match_command_names(command, self._others):
            return context.block(
                event,
                self.feature,
                guidance(self._selected, used),
                notice=f"Blocked {used} command. Use {self._selected} instead.",
            )
        return None
