"""Tests for GuardrailsExtension host integration."""

from __future__ import annotations

import json
from collections.abc import Awaitable, Callable
from pathlib import Path
from typing import Any
from unittest.mock import MagicMock

from toolgate.config.defaults import CURRENT_VERSION
from toolgate.config.editing import set_feature
from toolgate.config.loader import ConfigLoader
from toolgate.config.models import Feature, Scope
from toolgate.runtime.confirmation.confirmer import StaticConfirmer
from toolgate.runtime.confirmation.models import ConfirmationOutcome, ConfirmationRequest
from toolgate.runtime.extension import GuardrailsExtension, create_extension
from toolgate.runtime.host import SESSION_START_EVENT, TOOL_CALL_EVENT, ConfirmingHostContext, Host
from toolgate.runtime.models import Severity, ToolCallEvent


class FakeHost:
    def __init__(self) -> None:
        self.handlers: dict[str, Callable[..., Awaitable[Any]]] = {}

    def on(self, event_name: str, handler: Callable[..., Awaitable[Any]]) -> None:
        self.handlers[event_name] = handler


class PromptingContext:
    def __init__(self, outcome: ConfirmationOutcome) -> None:
        self.outcome = outcome
        self.requests: list[ConfirmationRequest] = []
        self.notices: list[tuple[str, Severity]] = []

    def notify(self, message: str, severity: Severity) -> None:
        self.notices.append((message, severity))

    async def confirm(self, request: ConfirmationRequest) -> ConfirmationOutcome:
        self.requests.append(request)
        return self.outcome


def _loader(tmp_path: Path, project: dict[str, Any] | None = None) -> ConfigLoader:
    project_path = tmp_path / ".pi" / "extensions" / "guardrails.json"
    if project is not None:
        project_path.parent.mkdir(parents=True)
        project_path.write_text(json.dumps({"version": CURRENT_VERSION, **project}))
    loader = ConfigLoader(tmp_path / "global.json", project_path, cwd=tmp_path)
    loader.load()
    return loader


class TestRegister:
    def test_fake_host_satisfies_protocol(self) -> None:
        assert isinstance(FakeHost(), Host)

    def test_registers_both_hooks(self, tmp_path: Path) -> None:
        host = FakeHost()
        extension = GuardrailsExtension(_loader(tmp_path))
        extension.register(host)
        assert host.handlers[TOOL_CALL_EVENT] == extension.on_tool_call
        assert host.handlers[SESSION_START_EVENT] == extension.on_session_start

    def test_registers_when_disabled(self, tmp_path: Path) -> None:
        host = FakeHost()
        GuardrailsExtension(_loader(tmp_path, {"enabled": False})).register(host)
        assert TOOL_CALL_EVENT in host.handlers


class TestOnToolCall:
    async def test_allow_returns_none(self, tmp_path: Path) -> None:
        extension = GuardrailsExtension(_loader(tmp_path))
        assert await extension.on_tool_call({"toolName": "bash", "input": {"command": "ls"}}, MagicMock()) is None

    async def test_block_returns_decision(self, tmp_path: Path) -> None:
        loader = _loader(
            tmp_path,
            {"features": {"enforcePackageManager": True}, "packageManager": {"selected": "pnpm"}},
        )
        extension = GuardrailsExtension(loader)
        ctx = MagicMock()
        decision = await extension.on_tool_call(
            {"toolName": "bash", "input": {"command": "npm install left-pad"}}, ctx
        )
        assert decision is not None
        assert "pnpm install" in decision.reason
        ctx.notify.assert_called_once()

    async def test_confirmer_used(self, tmp_path: Path) -> None:
        confirmer = StaticConfirmer(ConfirmationOutcome.ALLOW)
        extension = GuardrailsExtension(_loader(tmp_path), confirmer=confirmer)
        event = ToolCallEvent(tool_name="bash", input={"command": "sudo reboot"})
        assert await extension.on_tool_call(event) is None
        assert len(confirmer.requests) == 1

    def test_prompting_context_satisfies_protocol(self) -> None:
        assert isinstance(PromptingContext(ConfirmationOutcome.ALLOW), ConfirmingHostContext)

    async def test_host_prompt_allows_without_confirmer(self, tmp_path: Path) -> None:
        extension = create_extension(cwd=tmp_path, global_path=tmp_path / "g.json", project_path=tmp_path / "p.json")
        ctx = PromptingContext(ConfirmationOutcome.ALLOW)
        event = {"toolName": "bash", "input": {"command": "sudo ls"}}
        assert await extension.on_tool_call(event, ctx) is None
        assert [r.command for r in ctx.requests] == ["sudo ls"]

    async def test_host_prompt_denies_without_confirmer(self, tmp_path: Path) -> None:
        extension = GuardrailsExtension(_loader(tmp_path))
        ctx = PromptingContext(ConfirmationOutcome.DENY)
        decision = await extension.on_tool_call(ToolCallEvent(tool_name="bash", input={"command": "sudo ls"}), ctx)
        assert decision is not None
        assert decision.user_denied is True

    async def test_save_reloads_evaluator(self, tmp_path: Path) -> None:
        loader = _loader(tmp_path)
        extension = GuardrailsExtension(loader)
        event = ToolCallEvent(tool_name="bash", input={"command": "sudo reboot"})
        assert await extension.on_tool_call(event) is not None

        loader.save(Scope.PROJECT, set_feature(loader.get_document(Scope.PROJECT), Feature.PERMISSION_GATE, False))

        assert await extension.on_tool_call(event) is None


class TestOnSessionStart:
    async def test_flushes_pending_warnings(self, tmp_path: Path) -> None:
        project_path = tmp_path / ".pi" / "extensions" / "guardrails.json"
        project_path.parent.mkdir(parents=True)
        project_path.write_text("{broken")
        loader = ConfigLoader(tmp_path / "global.json", project_path, cwd=tmp_path)
        extension = GuardrailsExtension(loader)
        ctx = MagicMock()

        await extension.on_session_start(ctx)
        ctx.notify.assert_called_once()
        assert ctx.notify.call_args.args[1] == Severity.WARNING

        ctx.reset_mock()
        await extension.on_session_start(ctx)
        ctx.notify.assert_not_called()


class TestCreateExtension:
    async def test_uses_given_paths(self, tmp_path: Path) -> None:
        project_path = tmp_path / "project.json"
        project_path.write_text(json.dumps({"version": CURRENT_VERSION, "enabled": False}))
        extension = create_extension(cwd=tmp_path, global_path=tmp_path / "g.json", project_path=project_path)
        assert extension.loader.policy.enabled is False
        assert await extension.on_tool_call({"toolName": "bash", "input": {"command": "sudo rm -rf /"}}) is None
