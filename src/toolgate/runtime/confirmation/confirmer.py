"""Confirmer protocol and implementations.

- ``Confirmer`` — runtime-checkable protocol for a human decision.
- ``TerminalConfirmer`` — prompts at the terminal through ``rich``.
- ``StaticConfirmer`` — always returns one outcome (for tests/CI).
"""

from __future__ import annotations

import asyncio
import logging
from typing import Protocol, runtime_checkable

from rich.console import Console
from rich.panel import Panel
from rich.text import Text

from toolgate.runtime.confirmation.models import ConfirmationOutcome, ConfirmationRequest
from toolgate.runtime.errors import ConfirmationAbortedError

logger = logging.getLogger(__name__)

_ACCEPT = frozenset({"", "y", "yes"})
_REJECT = frozenset({"n", "no", "\x1b"})


@runtime_checkable
class Confirmer(Protocol):
    """Asks a human whether a dangerous command may run."""

    async def confirm(self, request: ConfirmationRequest) -> ConfirmationOutcome:
        """Block until the human answers; return the answer."""
        ...


class StaticConfirmer:
    """Always answers *outcome* and remembers what it was asked.

    Satisfies the :class:`Confirmer` protocol.
    """

    def __init__(self, outcome: ConfirmationOutcome) -> None:
        self.outcome = outcome
        self.requests: list[ConfirmationRequest] = []

    async def confirm(self, request: ConfirmationRequest) -> ConfirmationOutcome:
        logger.debug("StaticConfirmer: answering %s for %s", self.outcome.value, request.tool_name)
        self.requests.append(request)
        return self.outcome


class TerminalConfirmer:
    """Prompts the user at the terminal.

    Satisfies the :class:`Confirmer` protocol.

    Uses ``loop.run_in_executor(None, ...)`` to read stdin without blocking the
    event loop.  There is no timeout: the prompt waits until answered.  Enter,
    ``y`` or ``yes`` allow; ``n``, ``no`` or ESC deny; anything else asks
    again.  End of input aborts the prompt.
    """

    def __init__(self, console: Console | None = None) -> None:
        self._console = console or Console(stderr=True)

    async def confirm(self, request: ConfirmationRequest) -> ConfirmationOutcome:
        self._print_summary(request)

        loop = asyncio.get_running_loop()
        while True:
            try:
                answer: str = await loop.run_in_executor(None, self._read_input)
            except EOFError as exc:
                raise ConfirmationAbortedError(request.tool_name, "end of input") from exc

            choice = answer.strip().lower()
            if choice in _ACCEPT:
                return ConfirmationOutcome.ALLOW
            if choice in _REJECT:
                return ConfirmationOutcome.DENY
            self._console.print("  Please answer [bold]y[/bold] or [bold]n[/bold].")

    def _print_summary(self, request: ConfirmationRequest) -> None:
        body = Text()
        body.append(request.description, style="bold yellow")
        body.append("\n\n")
        body.append(request.command, style="cyan")
        body.append("\n\nAllow? [Y/n] (Esc or n to deny)", style="dim")
        self._console.print(
            Panel(body, title="Dangerous Command Detected", border_style="red", expand=False)
        )

    @staticmethod
    def _read_input() -> str:
        """Blocking read from stdin (run in executor)."""
        return input()
