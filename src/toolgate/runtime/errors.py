"""Shared error types for the tool-call runtime."""


class GuardrailsRuntimeError(Exception):
    """Base error for all runtime failures."""


class ConfirmationUnavailableError(GuardrailsRuntimeError):
    """A rule asked for confirmation but no confirmer is configured."""

    def __init__(self, tool_name: str) -> None:
        self.tool_name = tool_name
        super().__init__(f"No interactive confirmation available for tool: {tool_name}")


class ConfirmationAbortedError(GuardrailsRuntimeError):
    """The confirmation prompt was closed without an answer."""

    def __init__(self, tool_name: str, detail: str = "") -> None:
        self.tool_name = tool_name
        self.detail = detail
        msg = f"Confirmation aborted for tool: {tool_name}"
        if detail:
            msg += f" ({detail})"
        super().__init__(msg)
