"""EventNotifier — side-channel events raised during evaluation.

Subscribers (telemetry, sound cues, audit logs) hear about dangerous commands
and blocked calls.  They never influence the decision: a failing subscriber
is logged and skipped.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field

from toolgate.utils.telemetry import (
    ATTR_DESCRIPTION,
    ATTR_FEATURE,
    ATTR_PATTERN,
    ATTR_REASON,
    ATTR_TOOL_NAME,
    ATTR_USER_DENIED,
    EVENT_BLOCKED,
    EVENT_DANGEROUS,
    record_event,
)

logger = logging.getLogger(__name__)


class EventKind(str, Enum):
    DANGEROUS = "dangerous"
    BLOCKED = "blocked"


class DangerousCommandEvent(BaseModel):
    """A dangerous pattern matched (raised before any confirmation)."""

    feature: str
    tool_name: str
    command: str
    pattern: str
    description: str


class BlockedEvent(BaseModel):
    """A tool call was blocked."""

    feature: str
    tool_name: str
    input: dict[str, Any] = Field(default_factory=dict)
    reason: str
    user_denied: bool = Field(default=False, description="True when a human denied the prompt.")


Subscriber = Callable[[Any], None]


class EventNotifier:
    """Fan-out of evaluation events to subscribers."""

    def __init__(self) -> None:
        self._subscribers: dict[EventKind, list[Subscriber]] = {kind: [] for kind in EventKind}

    def subscribe(self, kind: EventKind, handler: Subscriber) -> None:
        self._subscribers[kind].append(handler)

    def emit_dangerous(self, event: DangerousCommandEvent) -> None:
        record_event(
            EVENT_DANGEROUS,
            {
                ATTR_FEATURE: event.feature,
                ATTR_TOOL_NAME: event.tool_name,
                ATTR_PATTERN: event.pattern,
                ATTR_DESCRIPTION: event.description,
            },
        )
        self._dispatch(EventKind.DANGEROUS, event)

    def emit_blocked(self, event: BlockedEvent) -> None:
        record_event(
            EVENT_BLOCKED,
            {
                ATTR_FEATURE: event.feature,
                ATTR_TOOL_NAME: event.tool_name,
                ATTR_REASON: event.reason,
                ATTR_USER_DENIED: event.user_denied,
            },
        )
        self._dispatch(EventKind.BLOCKED, event)

    def _dispatch(self, kind: EventKind, event: BaseModel) -> None:
        for handler in list(self._subscribers[kind]):
            try:
                handler(event)
            except Exception:
                logger.exception("Subscriber for %s event failed", kind.value)
