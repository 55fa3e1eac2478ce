"""Runtime — tool-call evaluation, confirmation and host integration."""

from toolgate.runtime.confirmation import (
    ConfirmationController,
    ConfirmationOutcome,
    ConfirmationRequest,
    ConfirmationState,
    Confirmer,
    StaticConfirmer,
    TerminalConfirmer,
)
from toolgate.runtime.errors import (
    ConfirmationAbortedError,
    ConfirmationUnavailableError,
    GuardrailsRuntimeError,
)
from toolgate.runtime.evaluator import PolicyEvaluator
from toolgate.runtime.events import (
    BlockedEvent,
    DangerousCommandEvent,
    EventKind,
    EventNotifier,
)
from toolgate.runtime.extension import GuardrailsExtension, create_extension
from toolgate.runtime.guards import (
    EnvFilesGuard,
    EvaluationContext,
    Guard,
    PackageManagerGuard,
    PermissionGateGuard,
    build_guards,
)
from toolgate.runtime.host import ConfirmingHostContext, Host, HostContext
from toolgate.runtime.models import Decision, DecisionAction, Severity, ToolCallEvent

__all__ = [
    "BlockedEvent",
    "ConfirmationAbortedError",
    "ConfirmationController",
    "ConfirmationOutcome",
    "ConfirmationRequest",
    "ConfirmationState",
    "ConfirmationUnavailableError",
    "Confirmer",
    "ConfirmingHostContext",
    "DangerousCommandEvent",
    "Decision",
    "DecisionAction",
    "EnvFilesGuard",
    "EvaluationContext",
    "EventKind",
    "EventNotifier",
    "Guard",
    "GuardrailsExtension",
    "GuardrailsRuntimeError",
    "Host",
    "HostContext",
    "PackageManagerGuard",
    "PermissionGateGuard",
    "PolicyEvaluator",
    "Severity",
    "StaticConfirmer",
    "TerminalConfirmer",
    "ToolCallEvent",
    "build_guards",
    "create_extension",
]
