"""Guards — one compiled rule set per guardrail feature."""

from __future__ import annotations

from pathlib import Path

from toolgate.config.models import EffectivePolicy, Feature
from toolgate.config.warning_sink import WarningSink
from toolgate.runtime.guards.base import EvaluationContext, Guard
from toolgate.runtime.guards.env_files import EnvFilesGuard
from toolgate.runtime.guards.package_manager import MANAGERS, PackageManagerGuard
from toolgate.runtime.guards.permission_gate import USER_DENIED_REASON, PermissionGateGuard


def build_guards(
    policy: EffectivePolicy,
    *,
    sink: WarningSink | None = None,
    cwd: Path | None = None,
) -> tuple[Guard, ...]:
    """Guards for every enabled feature, in evaluation order."""
    guards: list[Guard] = []
    for feature in Feature:
        if not policy.features.is_enabled(feature):
            continue
        if feature is Feature.PROTECT_ENV_FILES:
            guards.append(EnvFilesGuard(policy.env_files, cwd=cwd, sink=sink))
        elif feature is Feature.PERMISSION_GATE:
            guards.append(PermissionGateGuard(policy.permission_gate, sink=sink))
        elif feature is Feature.ENFORCE_PACKAGE_MANAGER:
            guards.append(PackageManagerGuard(policy.package_manager))
    return tuple(guards)


__all__ = [
    "MANAGERS",
    "USER_DENIED_REASON",
    "EnvFilesGuard",
    "EvaluationContext",
    "Guard",
    "PackageManagerGuard",
    "PermissionGateGuard",
    "build_guards",
]
