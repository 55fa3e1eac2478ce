"""GuardrailsExtension — wires the evaluator into an agent host.

Typical usage::

    extension = create_extension(confirmer=TerminalConfirmer())
    extension.register(host)

The host calls ``on_tool_call`` for every tool invocation; a returned
:class:`Decision` blocks the call, ``None`` lets it run.
Without a configured confirmer, dangerous commands are put to the host's
own prompt when its per-call context is a
:class:`~toolgate.runtime.host.ConfirmingHostContext`.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from toolgate.config.loader import ConfigLoader
from toolgate.runtime.confirmation.confirmer import Confirmer
from toolgate.runtime.confirmation.controller import ConfirmationController
from toolgate.runtime.evaluator import PolicyEvaluator
from toolgate.runtime.events import EventNotifier
from toolgate.runtime.host import SESSION_START_EVENT, TOOL_CALL_EVENT, Host, HostContext
from toolgate.runtime.models import Decision, Severity, ToolCallEvent

logger = logging.getLogger(__name__)


class GuardrailsExtension:
    """Host-facing adapter around :class:`PolicyEvaluator`."""

    def __init__(
        self,
        loader: ConfigLoader,
        *,
        confirmer: Confirmer | None = None,
        notifier: EventNotifier | None = None,
    ) -> None:
        self._loader = loader
        self._evaluator = PolicyEvaluator(
            loader.policy,
            confirmation=ConfirmationController(confirmer),
            notifier=notifier,
            sink=loader.sink,
            cwd=loader.cwd,
        )
        loader.add_listener(self._evaluator.update_policy)

    @property
    def loader(self) -> ConfigLoader:
        return self._loader

    @property
    def evaluator(self) -> PolicyEvaluator:
        return self._evaluator

    def register(self, host: Host) -> None:
        """Subscribe to the host's session-start and tool-call events."""
        host.on(SESSION_START_EVENT, self.on_session_start)
        host.on(TOOL_CALL_EVENT, self.on_tool_call)
        if not self._loader.policy.enabled:
            logger.info("Guardrails are disabled; tool calls pass through until re-enabled")

    async def on_tool_call(
        self,
        event: ToolCallEvent | Mapping[str, Any],
        ctx: HostContext | None = None,
    ) -> Decision | None:
        if not isinstance(event, ToolCallEvent):
            event = ToolCallEvent.from_host(event)
        decision = await self._evaluator.evaluate(event, ctx)
        return decision if decision.blocked else None

    async def on_session_start(self, ctx: HostContext | None = None, *_: Any) -> None:
        """Show warnings queued while the configuration was loaded."""
        for message in self._loader.sink.drain():
            if ctx is None:
                logger.warning("%s", message)
                continue
            try:
                ctx.notify(message, Severity.WARNING)
            except Exception:
                logger.exception("Host notification failed: %s", message)


def create_extension(
    *,
    cwd: Path | None = None,
    global_path: Path | None = None,
    project_path: Path | None = None,
    confirmer: Confirmer | None = None,
    notifier: EventNotifier | None = None,
) -> GuardrailsExtension:
    """Build a loader for the standard config locations and an extension over it."""
    loader = ConfigLoader(global_path, project_path, cwd=cwd)
    loader.load()
    return GuardrailsExtension(loader, confirmer=confirmer, notifier=notifier)
