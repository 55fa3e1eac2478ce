"""Guard protocol and the per-evaluation context shared by all guards."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Protocol, runtime_checkable

from toolgate.config.models import Feature
from toolgate.runtime.confirmation.controller import ConfirmationController
from toolgate.runtime.events import BlockedEvent, EventNotifier
from toolgate.runtime.confirmation.confirmer import Confirmer
from toolgate.runtime.host import ConfirmingHostContext, HostContext
from toolgate.runtime.models import Decision, Severity, ToolCallEvent

logger = logging.getLogger(__name__)


@runtime_checkable
class Guard(Protocol):
    """One guardrail feature's rule set, compiled from the effective policy."""

    feature: Feature

    def applies_to(self, tool_name: str) -> bool:
        """Whether calls to *tool_name* are in this guard's scope."""
        ...

    async def check(self, event: ToolCallEvent, context: EvaluationContext) -> Decision | None:
        """Return a blocking :class:`Decision`, or ``None`` to let the call through."""
        ...


@dataclass
class EvaluationContext:
    """Collaborators available to guards while one tool call is evaluated."""

    notifier: EventNotifier
    confirmation: ConfirmationController
    host: HostContext | None = None

    @property
    def prompter(self) -> Confirmer | None:
        """The host's own confirmation prompt, when it offers one."""
        return self.host if isinstance(self.host, ConfirmingHostContext) else None

    def notify(self, message: str, severity: Severity) -> None:
        """Forward *message* to the host UI; never raises."""
        if self.host is None:
            logger.log(_LOG_LEVELS[severity], "%s", message)
            return
        try:
            self.host.notify(message, severity)
        except Exception:
            logger.exception("Host notification failed: %s", message)

    def block(
        self,
        event: ToolCallEvent,
        feature: Feature,
        reason: str,
        *,
        notice: str | None = None,
        user_denied: bool = False,
    ) -> Decision:
        """Notify, emit a ``blocked`` event and build the blocking decision."""
        if notice:
            self.notify(notice, Severity.WARNING)
        self.notifier.emit_blocked(
            BlockedEvent(
                feature=feature.value,
                tool_name=event.tool_name,
                input=event.input,
                reason=reason,
                user_denied=user_denied,
            )
        )
        return Decision.block(reason, feature=feature.value, user_denied=user_denied)


_LOG_LEVELS: dict[Severity, int] = {
    Severity.INFO: logging.INFO,
    Severity.WARNING: logging.WARNING,
    Severity.ERROR: logging.ERROR,
}
