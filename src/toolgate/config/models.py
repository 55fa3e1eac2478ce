"""Pydantic models for guardrails configuration documents and the effective policy.

Two families of models live here:

- ``*Document`` models describe what a user (or the settings editor) writes to
  disk.  Every field is optional; they exist to validate a scope document
  before it takes part in a merge.
- The resolved models (``EffectivePolicy`` and its sections) are frozen and
  fully populated.  One instance is built per load and shared read-only.

Documents on disk use camelCase keys; the models accept both camelCase and
snake_case and dump camelCase via ``by_alias=True``.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

PackageManagerName = Literal["bun", "pnpm", "npm"]


class Scope(str, Enum):
    """Which on-disk document a read or write targets."""

    GLOBAL = "global"
    PROJECT = "project"


class Feature(str, Enum):
    """Independently toggleable guardrail features, in evaluation order."""

    PROTECT_ENV_FILES = "protectEnvFiles"
    PERMISSION_GATE = "permissionGate"
    ENFORCE_PACKAGE_MANAGER = "enforcePackageManager"


# ---------------------------------------------------------------------------
# Patterns
# ---------------------------------------------------------------------------


class PatternConfig(BaseModel):
    """A user-authored pattern.

    ``regex=False`` means literal matching: substring for commands, glob for
    file paths.  ``regex=True`` means a Python regular expression searched
    anywhere in the target.
    """

    model_config = ConfigDict(frozen=True)

    pattern: str = Field(..., min_length=1)
    regex: bool = False


class DangerousPattern(PatternConfig):
    """A permission-gate pattern with the description shown in the prompt."""

    description: str


# ---------------------------------------------------------------------------
# Raw (partial) documents
# ---------------------------------------------------------------------------


class _DocumentSection(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="allow",
    )


class FeaturesDocument(_DocumentSection):
    protect_env_files: bool | None = None
    permission_gate: bool | None = None
    enforce_package_manager: bool | None = None


class PackageManagerDocument(_DocumentSection):
    selected: PackageManagerName | None = None


class EnvFilesDocument(_DocumentSection):
    protected_patterns: list[PatternConfig] | None = None
    allowed_patterns: list[PatternConfig] | None = None
    protected_directories: list[PatternConfig] | None = None
    protected_tools: list[str] | None = None
    only_block_if_exists: bool | None = None
    block_message: str | None = None


class PermissionGateDocument(_DocumentSection):
    patterns: list[DangerousPattern] | None = None
    custom_patterns: list[DangerousPattern] | None = Field(
        default=None,
        description="If set, replaces the assembled patterns and disables built-in matchers.",
    )
    require_confirmation: bool | None = None
    allowed_patterns: list[PatternConfig] | None = None
    auto_deny_patterns: list[PatternConfig] | None = None


class GuardrailsDocument(_DocumentSection):
    """Schema of one scope document (global or project) as stored on disk."""

    version: str | None = None
    enabled: bool | None = None
    features: FeaturesDocument | None = None
    package_manager: PackageManagerDocument | None = None
    env_files: EnvFilesDocument | None = None
    permission_gate: PermissionGateDocument | None = None


# ---------------------------------------------------------------------------
# Resolved policy
# ---------------------------------------------------------------------------


class _PolicySection(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        extra="ignore",
    )


class FeatureToggles(_PolicySection):
    protect_env_files: bool
    permission_gate: bool
    enforce_package_manager: bool

    def is_enabled(self, feature: Feature) -> bool:
        return bool(getattr(self, _FEATURE_ATTRS[feature]))


_FEATURE_ATTRS: dict[Feature, str] = {
    Feature.PROTECT_ENV_FILES: "protect_env_files",
    Feature.PERMISSION_GATE: "permission_gate",
    Feature.ENFORCE_PACKAGE_MANAGER: "enforce_package_manager",
}


class PackageManagerPolicy(_PolicySection):
    selected: PackageManagerName


class EnvFilesPolicy(_PolicySection):
    protected_patterns: tuple[PatternConfig, ...]
    allowed_patterns: tuple[PatternConfig, ...]
    protected_directories: tuple[PatternConfig, ...]
    protected_tools: tuple[str, ...]
    only_block_if_exists: bool
    block_message: str

    def format_block_message(self, file: str) -> str:
        """Substitute the literal *file* for every ``{file}`` placeholder."""
        return self.block_message.replace("{file}", file)


class PermissionGatePolicy(_PolicySection):
    patterns: tuple[DangerousPattern, ...]
    use_builtin_matchers: bool = Field(
        default=True,
        description="Structural matchers for the built-in patterns; off once customPatterns is set.",
    )
    require_confirmation: bool
    allowed_patterns: tuple[PatternConfig, ...]
    auto_deny_patterns: tuple[PatternConfig, ...]


class EffectivePolicy(_PolicySection):
    """The fully merged, migrated, immutable configuration for one session."""

    version: str
    enabled: bool
    features: FeatureToggles
    package_manager: PackageManagerPolicy
    env_files: EnvFilesPolicy
    permission_gate: PermissionGatePolicy

    def to_document(self) -> dict[str, Any]:
        """Dump as a camelCase, JSON-compatible document."""
        return self.model_dump(by_alias=True, mode="json")
