"""Tests for PolicyEvaluator."""

from __future__ import annotations

from pathlib import Path
from typing import Any
from unittest.mock import AsyncMock, MagicMock, patch

from toolgate.config.models import Feature
from toolgate.config.resolver import resolve
from toolgate.runtime.confirmation.confirmer import StaticConfirmer
from toolgate.runtime.confirmation.controller import ConfirmationController
from toolgate.runtime.confirmation.models import ConfirmationOutcome
from toolgate.runtime.evaluator import PolicyEvaluator
from toolgate.runtime.guards import build_guards
from toolgate.runtime.guards.permission_gate import PermissionGateGuard
from toolgate.runtime.models import DecisionAction, ToolCallEvent


def _evaluator(
    tmp_path: Path,
    document: dict[str, Any] | None = None,
    outcome: ConfirmationOutcome | None = ConfirmationOutcome.DENY,
) -> tuple[PolicyEvaluator, StaticConfirmer | None]:
    confirmer = StaticConfirmer(outcome) if outcome is not None else None
    evaluator = PolicyEvaluator(
        resolve(document),
        confirmation=ConfirmationController(confirmer),
        cwd=tmp_path,
    )
    return evaluator, confirmer


def _bash(command: str) -> ToolCallEvent:
    return ToolCallEvent(tool_name="bash", input={"command": command})


class TestBuildGuards:
    def test_feature_order(self) -> None:
        guards = build_guards(resolve({"features": {"enforcePackageManager": True}}))
        assert [g.feature for g in guards] == [
            Feature.PROTECT_ENV_FILES,
            Feature.PERMISSION_GATE,
            Feature.ENFORCE_PACKAGE_MANAGER,
        ]

    def test_disabled_features_skipped(self) -> None:
        guards = build_guards(resolve({"features": {"protectEnvFiles": False}}))
        assert [g.feature for g in guards] == [Feature.PERMISSION_GATE]


class TestPolicyEvaluator:
    async def test_safe_call_allowed(self, tmp_path: Path) -> None:
        evaluator, _ = _evaluator(tmp_path)
        decision = await evaluator.evaluate(_bash("ls"))
        assert decision.action == DecisionAction.ALLOW

    async def test_disabled_policy_allows_everything(self, tmp_path: Path) -> None:
        evaluator, confirmer = _evaluator(tmp_path, {"enabled": False})
        assert not (await evaluator.evaluate(_bash("sudo rm -rf /"))).blocked
        assert confirmer is not None
        assert confirmer.requests == []

    async def test_env_files_checked_before_permission_gate(self, tmp_path: Path) -> None:
        (tmp_path / ".env").write_text("KEY=1")
        evaluator, confirmer = _evaluator(tmp_path, outcome=ConfirmationOutcome.ALLOW)
        decision = await evaluator.evaluate(_bash("sudo cat .env"))
        assert decision.blocked
        assert decision.feature == Feature.PROTECT_ENV_FILES.value
        assert confirmer is not None
        assert confirmer.requests == []

    async def test_first_block_short_circuits(self, tmp_path: Path) -> None:
        evaluator, _ = _evaluator(
            tmp_path,
            {
                "features": {"enforcePackageManager": True},
                "packageManager": {"selected": "pnpm"},
            },
        )
        decision = await evaluator.evaluate(_bash("sudo ls && npm install -g x"))
        assert decision.feature == Feature.PERMISSION_GATE.value
        assert decision.user_denied

    async def test_allowed_after_confirmation_continues_to_next_guard(self, tmp_path: Path) -> None:
        evaluator, _ = _evaluator(
            tmp_path,
            {
                "features": {"enforcePackageManager": True},
                "packageManager": {"selected": "pnpm"},
            },
            outcome=ConfirmationOutcome.ALLOW,
        )
        decision = await evaluator.evaluate(_bash("sudo ls && npm install -g x"))
        assert decision.feature == Feature.ENFORCE_PACKAGE_MANAGER.value

    async def test_package_manager_off_by_default(self, tmp_path: Path) -> None:
        evaluator, _ = _evaluator(tmp_path, {"packageManager": {"selected": "pnpm"}})
        assert not (await evaluator.evaluate(_bash("npm install"))).blocked

    async def test_crashing_guard_is_skipped(self, tmp_path: Path) -> None:
        evaluator, _ = _evaluator(tmp_path)
        with patch.object(PermissionGateGuard, "check", AsyncMock(side_effect=RuntimeError("boom"))):
            decision = await evaluator.evaluate(_bash("sudo reboot"))
        assert not decision.blocked

    async def test_update_policy(self, tmp_path: Path) -> None:
        evaluator, _ = _evaluator(tmp_path)
        assert (await evaluator.evaluate(_bash("sudo reboot"))).blocked
        evaluator.update_policy(resolve({"features": {"permissionGate": False}}))
        assert evaluator.policy.features.permission_gate is False
        assert not (await evaluator.evaluate(_bash("sudo reboot"))).blocked

    async def test_host_receives_notifications(self, tmp_path: Path) -> None:
        (tmp_path / ".env").write_text("KEY=1")
        evaluator, _ = _evaluator(tmp_path)
        host = MagicMock()
        await evaluator.evaluate(ToolCallEvent(tool_name="read", input={"file_path": ".env"}), host)
        host.notify.assert_called_once()

    async def test_tools_outside_any_guard(self, tmp_path: Path) -> None:
        evaluator, _ = _evaluator(tmp_path, {"envFiles": {"onlyBlockIfExists": False}})
        assert not (await evaluator.evaluate(ToolCallEvent(tool_name="webfetch", input={"path": ".env"}))).blocked
