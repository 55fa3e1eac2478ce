"""Tests for EventNotifier."""

from __future__ import annotations

import logging
from unittest.mock import MagicMock, patch

import pytest

from toolgate.runtime.events import BlockedEvent, DangerousCommandEvent, EventKind, EventNotifier
from toolgate.utils.telemetry import EVENT_BLOCKED, EVENT_DANGEROUS


def _dangerous() -> DangerousCommandEvent:
    return DangerousCommandEvent(
        feature="permissionGate",
        tool_name="bash",
        command="sudo rm x",
        pattern="sudo",
        description="superuser command",
    )


class TestEventNotifier:
    def test_dangerous_subscribers(self) -> None:
        notifier = EventNotifier()
        handler = MagicMock()
        notifier.subscribe(EventKind.DANGEROUS, handler)
        event = _dangerous()
        notifier.emit_dangerous(event)
        handler.assert_called_once_with(event)

    def test_kinds_are_separate(self) -> None:
        notifier = EventNotifier()
        handler = MagicMock()
        notifier.subscribe(EventKind.BLOCKED, handler)
        notifier.emit_dangerous(_dangerous())
        handler.assert_not_called()

    def test_blocked_event(self) -> None:
        notifier = EventNotifier()
        seen: list[BlockedEvent] = []
        notifier.subscribe(EventKind.BLOCKED, seen.append)
        notifier.emit_blocked(
            BlockedEvent(feature="permissionGate", tool_name="bash", reason="r", user_denied=True)
        )
        assert seen[0].user_denied is True
        assert seen[0].input == {}

    def test_failing_subscriber_does_not_propagate(self, caplog: pytest.LogCaptureFixture) -> None:
        notifier = EventNotifier()
        after = MagicMock()
        notifier.subscribe(EventKind.DANGEROUS, MagicMock(side_effect=RuntimeError("boom")))
        notifier.subscribe(EventKind.DANGEROUS, after)
        with caplog.at_level(logging.ERROR):
            notifier.emit_dangerous(_dangerous())
        after.assert_called_once()
        assert "dangerous" in caplog.text

    def test_records_span_events(self) -> None:
        notifier = EventNotifier()
        with patch("toolgate.runtime.events.record_event") as record:
            notifier.emit_dangerous(_dangerous())
            notifier.emit_blocked(BlockedEvent(feature="f", tool_name="bash", reason="r"))
        names = [c.args[0] for c in record.call_args_list]
        assert names == [EVENT_DANGEROUS, EVENT_BLOCKED]
