"""Tests for Confirmer implementations."""

from __future__ import annotations

import io
from unittest.mock import patch

import pytest
from rich.console import Console

from toolgate.runtime.confirmation.confirmer import Confirmer, StaticConfirmer, TerminalConfirmer
from toolgate.runtime.confirmation.models import ConfirmationOutcome, ConfirmationRequest
from toolgate.runtime.errors import ConfirmationAbortedError


def _request() -> ConfirmationRequest:
    return ConfirmationRequest(
        tool_name="bash",
        command="rm -rf build",
        description="recursive force delete",
        pattern="rm -rf",
    )


def _terminal() -> TerminalConfirmer:
    return TerminalConfirmer(Console(file=io.StringIO(), width=100))


class TestConfirmerProtocol:
    def test_static_satisfies_protocol(self) -> None:
        assert isinstance(StaticConfirmer(ConfirmationOutcome.ALLOW), Confirmer)

    def test_terminal_satisfies_protocol(self) -> None:
        assert isinstance(_terminal(), Confirmer)


class TestStaticConfirmer:
    async def test_answers_and_records(self) -> None:
        confirmer = StaticConfirmer(ConfirmationOutcome.DENY)
        assert await confirmer.confirm(_request()) == ConfirmationOutcome.DENY
        assert confirmer.requests == [_request()]


class TestTerminalConfirmer:
    @pytest.mark.parametrize("answer", ["", "y", "YES", " yes "])
    async def test_accepts(self, answer: str) -> None:
        with patch.object(TerminalConfirmer, "_read_input", return_value=answer):
            assert await _terminal().confirm(_request()) == ConfirmationOutcome.ALLOW

    @pytest.mark.parametrize("answer", ["n", "No", "\x1b"])
    async def test_rejects(self, answer: str) -> None:
        with patch.object(TerminalConfirmer, "_read_input", return_value=answer):
            assert await _terminal().confirm(_request()) == ConfirmationOutcome.DENY

    async def test_reprompts_on_other_input(self) -> None:
        with patch.object(TerminalConfirmer, "_read_input", side_effect=["maybe", "later", "n"]) as read:
            assert await _terminal().confirm(_request()) == ConfirmationOutcome.DENY
        assert read.call_count == 3

    async def test_eof_aborts(self) -> None:
        with patch.object(TerminalConfirmer, "_read_input", side_effect=EOFError):
            with pytest.raises(ConfirmationAbortedError):
                await _terminal().confirm(_request())

    async def test_summary_shows_command_and_description(self) -> None:
        out = io.StringIO()
        confirmer = TerminalConfirmer(Console(file=out, width=100))
        with patch.object(TerminalConfirmer, "_read_input", return_value="y"):
            await confirmer.confirm(_request())
        text = out.getvalue()
        assert "Dangerous Command Detected" in text
        assert "rm -rf build" in text
        assert "recursive force delete" in text
