"""Permission gate for dangerous shell commands."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass

from toolgate.config.models import DangerousPattern, Feature, PermissionGatePolicy
from toolgate.config.warning_sink import WarningSink
from toolgate.patterns.builtin import builtin_matcher
from toolgate.patterns.compiler import PatternKind, compile_pattern, compile_patterns, first_match
from toolgate.runtime.confirmation.models import ConfirmationOutcome, ConfirmationRequest
from toolgate.runtime.errors import ConfirmationUnavailableError
from toolgate.runtime.events import DangerousCommandEvent
from toolgate.runtime.guards.base import EvaluationContext
from toolgate.runtime.models import Decision, Severity, ToolCallEvent
from toolgate.shell.analyzer import ParsedCommands, parse_commands

logger = logging.getLogger(__name__)

BASH_TOOL = "bash"
USER_DENIED_REASON = "User denied dangerous command"


@dataclass(frozen=True)
class DangerousRule:
    """A dangerous pattern and how it is matched."""

    source: DangerousPattern
    matches: Callable[[str, ParsedCommands], bool]


class PermissionGateGuard:
    """Allow, auto-deny, then confirm, in that order.

    ``allowedPatterns`` exempt the command entirely; ``autoDenyPatterns``
    block with no prompt; the first matching dangerous pattern raises a
    ``dangerous`` event and either asks for confirmation or, with
    ``requireConfirmation`` off, only warns.
    """

    feature = Feature.PERMISSION_GATE

    def __init__(self, policy: PermissionGatePolicy, *, sink: WarningSink | None = None) -> None:
        self._policy = policy
        self._allowed = compile_patterns(policy.allowed_patterns, PatternKind.COMMAND, sink=sink)
        self._auto_deny = compile_patterns(policy.auto_deny_patterns, PatternKind.COMMAND, sink=sink)
        self._rules = self._build_rules(policy, sink)

    @property
    def rules(self) -> tuple[DangerousRule, ...]:
        return self._rules

    def applies_to(self, tool_name: str) -> bool:
        return tool_name == BASH_TOOL

    def find_dangerous(self, command: str) -> DangerousPattern | None:
        parsed = parse_commands(command)
        for rule in self._rules:
            if rule.matches(command, parsed):
                return rule.source
        return None

    async def check(self, event: ToolCallEvent, context: EvaluationContext) -> Decision | None:
        command = event.text("command")
        if not command:
            return None

        if first_match(self._allowed, command) is not None:
            return None

        denied = first_match(self._auto_deny, command)
        if denied is not None:
            return context.block(
                event,
                self.feature,
                f"Command matches auto-deny pattern: {denied.pattern}",
                notice=f"Blocked command matching auto-deny pattern: {denied.pattern}",
            )

        dangerous = self.find_dangerous(command)
        if dangerous is None:
            return None

        context.notifier.emit_dangerous(
            DangerousCommandEvent(
                feature=self.feature.value,
                tool_name=event.tool_name,
                command=command,
                pattern=dangerous.pattern,
                description=dangerous.description,
            )
        )

        if not self._policy.require_confirmation:
            context.notify(f"Dangerous command detected: {dangerous.description}", Severity.WARNING)
            return None

        request = ConfirmationRequest(
            tool_name=event.tool_name,
            command=command,
            description=dangerous.description,
            pattern=dangerous.pattern,
        )
        try:
            outcome = await context.confirmation.confirm(request, prompter=context.prompter)
        except ConfirmationUnavailableError:
            return context.block(
                event,
                self.feature,
                f"Dangerous command ({dangerous.description}) requires confirmation, "
                "but no interactive confirmation is available",
            )

        if outcome == ConfirmationOutcome.ALLOW:
            logger.info("User allowed dangerous command (%s)", dangerous.description)
            return None
        return context.block(event, self.feature, USER_DENIED_REASON, user_denied=True)

    @staticmethod
    def _build_rules(
        policy: PermissionGatePolicy, sink: WarningSink | None
    ) -> tuple[DangerousRule, ...]:
        rules: list[DangerousRule] = []
        for pattern in policy.patterns:
            builtin = builtin_matcher(pattern.pattern) if not pattern.regex else None
            if policy.use_builtin_matchers and builtin is not None:
                rules.append(DangerousRule(pattern, builtin.matches))
                continue
            compiled = compile_pattern(pattern, PatternKind.COMMAND, sink=sink)
            if compiled is not None:
                rules.append(DangerousRule(pattern, lambda command, _parsed, c=compiled: c.matches(command)))
        return tuple(rules)
