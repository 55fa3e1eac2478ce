"""Confirmation subsystem — human-in-the-loop approval of dangerous commands."""

from toolgate.runtime.confirmation.confirmer import (
    Confirmer,
    StaticConfirmer,
    TerminalConfirmer,
)
from toolgate.runtime.confirmation.controller import ConfirmationController
from toolgate.runtime.confirmation.models import (
    ConfirmationOutcome,
    ConfirmationRequest,
    ConfirmationState,
)

__all__ = [
    "ConfirmationController",
    "ConfirmationOutcome",
    "ConfirmationRequest",
    "ConfirmationState",
    "Confirmer",
    "StaticConfirmer",
    "TerminalConfirmer",
]
