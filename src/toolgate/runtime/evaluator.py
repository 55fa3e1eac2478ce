"""PolicyEvaluator — walks a tool call through the enabled guards.

Guards run in feature order (env files, permission gate, package manager) and
the first blocking decision wins; later guards are not consulted.  A guard
that raises is logged and treated as inactive for that call.

The evaluator holds its policy copy-on-write: :meth:`update_policy` swaps in
a freshly compiled guard set, and an evaluation already in flight keeps
reading the snapshot it started with.
"""

from __future__ import annotations

import logging
from pathlib import Path

from toolgate.config.models import EffectivePolicy
from toolgate.config.warning_sink import WarningSink
from toolgate.runtime.confirmation.controller import ConfirmationController
from toolgate.runtime.events import EventNotifier
from toolgate.runtime.guards import Guard, build_guards
from toolgate.runtime.guards.base import EvaluationContext
from toolgate.runtime.host import HostContext
from toolgate.runtime.models import Decision, ToolCallEvent
from toolgate.utils.telemetry import (
    ATTR_DECISION,
    ATTR_FEATURE,
    ATTR_TOOL_NAME,
    get_tracer,
)

logger = logging.getLogger(__name__)

_tracer = get_tracer(__name__)


class PolicyEvaluator:
    """Decide allow/block for tool calls under one :class:`EffectivePolicy`."""

    def __init__(
        self,
        policy: EffectivePolicy,
        *,
        confirmation: ConfirmationController | None = None,
        notifier: EventNotifier | None = None,
        sink: WarningSink | None = None,
        cwd: Path | None = None,
    ) -> None:
        self._confirmation = confirmation or ConfirmationController()
        self._notifier = notifier or EventNotifier()
        self._sink = sink
        self._cwd = cwd
        self._snapshot = self._compile(policy)

    @property
    def policy(self) -> EffectivePolicy:
        return self._snapshot[0]

    @property
    def guards(self) -> tuple[Guard, ...]:
        return self._snapshot[1]

    @property
    def notifier(self) -> EventNotifier:
        return self._notifier

    @property
    def confirmation(self) -> ConfirmationController:
        return self._confirmation

    def update_policy(self, policy: EffectivePolicy) -> None:
        """Replace the policy; evaluations already running are unaffected."""
        self._snapshot = self._compile(policy)
        logger.debug("Policy updated (%d guards active)", len(self._snapshot[1]))

    async def evaluate(self, event: ToolCallEvent, host: HostContext | None = None) -> Decision:
        policy, guards = self._snapshot

        with _tracer.start_as_current_span("toolgate.evaluate") as span:
            span.set_attribute(ATTR_TOOL_NAME, event.tool_name)

            if not policy.enabled:
                span.set_attribute(ATTR_DECISION, "allow")
                return Decision.allow()

            context = EvaluationContext(
                notifier=self._notifier,
                confirmation=self._confirmation,
                host=host,
            )
            for guard in guards:
                if not guard.applies_to(event.tool_name):
                    continue
                try:
                    decision = await guard.check(event, context)
                except Exception:
                    logger.exception(
                        "Guard %s failed on %s; skipping it", guard.feature.value, event.tool_name
                    )
                    continue
                if decision is not None and decision.blocked:
                    span.set_attribute(ATTR_DECISION, "block")
                    span.set_attribute(ATTR_FEATURE, guard.feature.value)
                    logger.info(
                        "Blocked %s (%s): %s", event.tool_name, guard.feature.value, decision.reason
                    )
                    return decision

            span.set_attribute(ATTR_DECISION, "allow")
            return Decision.allow()

    def _compile(self, policy: EffectivePolicy) -> tuple[EffectivePolicy, tuple[Guard, ...]]:
        return policy, build_guards(policy, sink=self._sink, cwd=self._cwd)
