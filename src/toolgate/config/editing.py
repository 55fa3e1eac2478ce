"""Named setters for scope documents.

Each setter takes a document and returns an edited deep copy; the input is
never mutated.  Callers persist the result with :meth:`ConfigLoader.save`,
which always writes the whole document.
"""

from __future__ import annotations

import copy
from collections.abc import Mapping, Sequence
from enum import Enum
from typing import Any, get_args

from toolgate.config.models import (
    DangerousPattern,
    EffectivePolicy,
    Feature,
    PackageManagerName,
    PatternConfig,
)

Document = dict[str, Any]


class PatternList(str, Enum):
    """The pattern arrays a document can carry."""

    ENV_PROTECTED = "env-protected"
    ENV_ALLOWED = "env-allowed"
    ENV_DIRECTORIES = "env-directories"
    GATE_DANGEROUS = "gate-dangerous"
    GATE_CUSTOM = "gate-custom"
    GATE_ALLOWED = "gate-allowed"
    GATE_AUTO_DENY = "gate-auto-deny"

    @property
    def holds_dangerous_patterns(self) -> bool:
        return self in (PatternList.GATE_DANGEROUS, PatternList.GATE_CUSTOM)


_LOCATIONS: dict[PatternList, tuple[str, str]] = {
    PatternList.ENV_PROTECTED: ("envFiles", "protectedPatterns"),
    PatternList.ENV_ALLOWED: ("envFiles", "allowedPatterns"),
    PatternList.ENV_DIRECTORIES: ("envFiles", "protectedDirectories"),
    PatternList.GATE_DANGEROUS: ("permissionGate", "patterns"),
    PatternList.GATE_CUSTOM: ("permissionGate", "customPatterns"),
    PatternList.GATE_ALLOWED: ("permissionGate", "allowedPatterns"),
    PatternList.GATE_AUTO_DENY: ("permissionGate", "autoDenyPatterns"),
}

PACKAGE_MANAGERS: tuple[str, ...] = get_args(PackageManagerName)


def _with_value(document: Mapping[str, Any], section: str, key: str, value: Any) -> Document:
    updated: Document = copy.deepcopy(dict(document))
    block = updated.get(section)
    if not isinstance(block, dict):
        block = {}
        updated[section] = block
    block[key] = value
    return updated


def set_enabled(document: Mapping[str, Any], enabled: bool) -> Document:
    updated: Document = copy.deepcopy(dict(document))
    updated["enabled"] = enabled
    return updated


def set_feature(document: Mapping[str, Any], feature: Feature, enabled: bool) -> Document:
    return _with_value(document, "features", feature.value, enabled)


def set_package_manager(document: Mapping[str, Any], name: str) -> Document:
    if name not in PACKAGE_MANAGERS:
        msg = f"Unknown package manager {name!r}; expected one of {', '.join(PACKAGE_MANAGERS)}"
        raise ValueError(msg)
    return _with_value(document, "packageManager", "selected", name)


def set_only_block_if_exists(document: Mapping[str, Any], value: bool) -> Document:
    return _with_value(document, "envFiles", "onlyBlockIfExists", value)


def set_block_message(document: Mapping[str, Any], message: str) -> Document:
    return _with_value(document, "envFiles", "blockMessage", message)


def set_protected_tools(document: Mapping[str, Any], tools: Sequence[str]) -> Document:
    return _with_value(document, "envFiles", "protectedTools", list(tools))


def set_require_confirmation(document: Mapping[str, Any], value: bool) -> Document:
    return _with_value(document, "permissionGate", "requireConfirmation", value)


# ---------------------------------------------------------------------------
# Pattern lists
# ---------------------------------------------------------------------------


def _pattern_model(which: PatternList) -> type[PatternConfig]:
    return DangerousPattern if which.holds_dangerous_patterns else PatternConfig


def get_pattern_list(
    document: Mapping[str, Any],
    which: PatternList,
    *,
    policy: EffectivePolicy | None = None,
) -> list[PatternConfig]:
    """The *which* list as set in *document*, else as resolved in *policy*.

    Falling back to the resolved list lets an editor start a scope's list from
    what is currently in effect instead of from nothing.
    """
    section, key = _LOCATIONS[which]
    block = document.get(section)
    items = block.get(key) if isinstance(block, Mapping) else None
    model = _pattern_model(which)
    if items is not None:
        return [model.model_validate(item) for item in items]
    if policy is None or which is PatternList.GATE_CUSTOM:
        return []
    resolved = policy.to_document()[section][key]
    return [model.model_validate(item) for item in resolved]


def set_pattern_list(
    document: Mapping[str, Any],
    which: PatternList,
    patterns: Sequence[PatternConfig],
) -> Document:
    section, key = _LOCATIONS[which]
    model = _pattern_model(which)
    items = [model.model_validate(p.model_dump()).model_dump(exclude_defaults=True) for p in patterns]
    return _with_value(document, section, key, items)


def add_pattern(
    document: Mapping[str, Any],
    which: PatternList,
    pattern: PatternConfig,
    *,
    policy: EffectivePolicy | None = None,
) -> Document:
    """Append *pattern* to the *which* list unless an identical entry exists."""
    current = get_pattern_list(document, which, policy=policy)
    if any(p.pattern == pattern.pattern and p.regex == pattern.regex for p in current):
        return copy.deepcopy(dict(document))
    return set_pattern_list(document, which, [*current, pattern])


def remove_pattern(
    document: Mapping[str, Any],
    which: PatternList,
    pattern: str,
    *,
    policy: EffectivePolicy | None = None,
) -> Document:
    """Drop every entry of the *which* list whose text equals *pattern*.

    Raises:
        ValueError: If no entry matches.
    """
    current = get_pattern_list(document, which, policy=policy)
    remaining = [p for p in current if p.pattern != pattern]
    if len(remaining) == len(current):
        msg = f"Pattern {pattern!r} not found in {which.value}"
        raise ValueError(msg)
    return set_pattern_list(document, which, remaining)
