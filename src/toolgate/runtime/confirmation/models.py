"""Data models for the confirmation subsystem."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field


class ConfirmationOutcome(str, Enum):
    """Terminal answer to a prompt.  There is no third outcome."""

    ALLOW = "allow"
    DENY = "deny"


class ConfirmationState(str, Enum):
    IDLE = "idle"
    PROMPTING = "prompting"
    RESOLVED = "resolved"


class ConfirmationRequest(BaseModel):
    """What the human is asked to approve."""

    tool_name: str
    command: str = Field(..., description="Full original command text.")
    description: str = Field(..., description="Description of the matched dangerous pattern.")
    pattern: str = ""
