"""ConfirmationController — the single suspension point of an evaluation."""

from __future__ import annotations

import asyncio
import logging

from toolgate.runtime.confirmation.confirmer import Confirmer
from toolgate.runtime.confirmation.models import (
    ConfirmationOutcome,
    ConfirmationRequest,
    ConfirmationState,
)
from toolgate.runtime.errors import ConfirmationAbortedError, ConfirmationUnavailableError

logger = logging.getLogger(__name__)


class ConfirmationController:
    """Runs one prompt at a time: ``IDLE -> PROMPTING -> RESOLVED``.

    Overlapping requests wait on a lock and are prompted in arrival order.
    Anything other than an explicit allow resolves to deny, including a
    confirmer that raises.
    """

    def __init__(self, confirmer: Confirmer | None = None) -> None:
        self._confirmer = confirmer
        self._lock = asyncio.Lock()
        self._state = ConfirmationState.IDLE
        self._outcome: ConfirmationOutcome | None = None

    @property
    def state(self) -> ConfirmationState:
        return self._state

    @property
    def outcome(self) -> ConfirmationOutcome | None:
        """Outcome of the most recent prompt, if any."""
        return self._outcome

    @property
    def available(self) -> bool:
        return self._confirmer is not None

    async def confirm(
        self,
        request: ConfirmationRequest,
        prompter: Confirmer | None = None,
    ) -> ConfirmationOutcome:
        """Ask the human about *request* and wait for the answer.

        The configured confirmer wins; *prompter* (usually the host's own
        prompt) is used only when none was configured.

        Raises:
            ConfirmationUnavailableError: If neither is available.
        """
        confirmer = self._confirmer if self._confirmer is not None else prompter
        if confirmer is None:
            raise ConfirmationUnavailableError(request.tool_name)

        async with self._lock:
            self._state = ConfirmationState.PROMPTING
            self._outcome = None
            try:
                answer = await confirmer.confirm(request)
            except ConfirmationAbortedError as exc:
                logger.info("Confirmation aborted, denying: %s", exc)
                answer = ConfirmationOutcome.DENY
            except Exception:
                logger.exception("Confirmer failed for %s, denying", request.tool_name)
                answer = ConfirmationOutcome.DENY
            except BaseException:
                self._state = ConfirmationState.IDLE
                raise

            outcome = ConfirmationOutcome.ALLOW if answer == ConfirmationOutcome.ALLOW else ConfirmationOutcome.DENY
            self._outcome = outcome
            self._state = ConfirmationState.RESOLVED
            return outcome
