"""Data models for tool-call evaluation."""

from __future__ import annotations

from collections.abc import Mapping
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class Severity(str, Enum):
    """Severity of a host notification."""

    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class DecisionAction(str, Enum):
    ALLOW = "allow"
    BLOCK = "block"


class ToolCallEvent(BaseModel):
    """One tool invocation issued by the agent.  Never mutated."""

    model_config = ConfigDict(frozen=True)

    tool_name: str
    input: dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def from_host(cls, payload: Mapping[str, Any]) -> ToolCallEvent:
        """Build from a host payload using either ``toolName`` or ``tool_name``."""
        name = payload.get("toolName", payload.get("tool_name", ""))
        raw_input = payload.get("input")
        return cls(
            tool_name=str(name or ""),
            input=dict(raw_input) if isinstance(raw_input, Mapping) else {},
        )

    def text(self, *fields: str) -> str:
        """The first of *fields* present in the input, as a string (``""`` if none)."""
        for name in fields:
            value = self.input.get(name)
            if value is not None and value != "":
                return str(value)
        return ""


class Decision(BaseModel):
    """The outcome of evaluating one tool call."""

    model_config = ConfigDict(frozen=True)

    action: DecisionAction
    reason: str = ""
    feature: str | None = Field(default=None, description="Guardrail feature that blocked.")
    user_denied: bool = Field(default=False, description="Blocked by a human rather than a rule.")

    @classmethod
    def allow(cls) -> Decision:
        return cls(action=DecisionAction.ALLOW)

    @classmethod
    def block(cls, reason: str, *, feature: str | None = None, user_denied: bool = False) -> Decision:
        return cls(action=DecisionAction.BLOCK, reason=reason, feature=feature, user_denied=user_denied)

    @property
    def blocked(self) -> bool:
        return self.action == DecisionAction.BLOCK
