"""WarningSink — collects warnings raised before any UI channel exists.

Config loading and migration run at startup, before the host has opened a
session.  Messages produced there are logged immediately and also queued here;
the session-start handler drains the queue and shows them to the user.
"""

from __future__ import annotations

import logging

logger = logging.getLogger(__name__)


class WarningSink:
    """An explicit, per-loader queue of pending user-facing warnings."""

    def __init__(self) -> None:
        self._pending: list[str] = []

    def add(self, message: str) -> None:
        """Log *message* and queue it for the next session start."""
        logger.warning(message)
        self._pending.append(message)

    def drain(self) -> list[str]:
        """Return all pending warnings and clear the queue."""
        drained = self._pending
        self._pending = []
        return drained

    @property
    def pending(self) -> tuple[str, ...]:
        return tuple(self._pending)

    def __len__(self) -> int:
        return len(self._pending)
