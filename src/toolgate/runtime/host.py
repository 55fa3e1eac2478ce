"""Protocols describing the agent host that dispatches tool calls."""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from typing import Any, Protocol, runtime_checkable

from toolgate.runtime.confirmation.models import ConfirmationOutcome, ConfirmationRequest
from toolgate.runtime.models import Severity

TOOL_CALL_EVENT = "tool_call"
SESSION_START_EVENT = "session_start"


@runtime_checkable
class HostContext(Protocol):
    """Per-call UI channel offered by the host."""

    def notify(self, message: str, severity: Severity) -> None:
        """Show *message* to the user (fire-and-forget)."""
        ...


@runtime_checkable
class ConfirmingHostContext(HostContext, Protocol):
    """A host context that can also ask the user to approve a command.

    Used for confirmation whenever the extension was built without its own
    :class:`~toolgate.runtime.confirmation.confirmer.Confirmer`.
    """

    async def confirm(self, request: ConfirmationRequest) -> ConfirmationOutcome:
        """Suspend until the user answers *request*."""
        ...


@runtime_checkable
class Host(Protocol):
    """Event registry of the agent runtime."""

    def on(self, event_name: str, handler: Callable[..., Awaitable[Any]]) -> None:
        """Register *handler* for *event_name*."""
        ...
