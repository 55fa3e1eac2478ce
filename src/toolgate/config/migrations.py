"""Schema migrations for scope documents.

A document is migrated when it predates :data:`CURRENT_VERSION` or when any
migration's ``should_run`` predicate holds for it.  Each applicable migration
runs in declaration order, then the current version is stamped.  The loader
owns the file side (backup, persist, re-read); everything here is pure.
"""

from __future__ import annotations

import copy
import logging
import re
import shutil
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Any

from toolgate.config.defaults import CURRENT_VERSION
from toolgate.config.errors import ConfigWriteError
from toolgate.config.warning_sink import WarningSink

logger = logging.getLogger(__name__)

TOOLCHAIN_MIGRATION_VERSION = "0.7.0-20260204"

REMOVED_FEATURE_KEYS = ("preventBrew", "preventPython", "enforcePackageManager")

TOOLCHAIN_WARNING = (
    "guardrails: preventBrew, preventPython, enforcePackageManager and packageManager "
    "settings from before version {version} were removed from {path}. "
    "Re-enable package manager enforcement explicitly if you still want it."
)

_PATTERN_LISTS: tuple[tuple[str, str], ...] = (
    ("envFiles", "protectedPatterns"),
    ("envFiles", "allowedPatterns"),
    ("envFiles", "protectedDirectories"),
    ("permissionGate", "allowedPatterns"),
    ("permissionGate", "autoDenyPatterns"),
)
_DANGEROUS_LISTS: tuple[tuple[str, str], ...] = (
    ("permissionGate", "patterns"),
    ("permissionGate", "customPatterns"),
)

Document = dict[str, Any]


@dataclass(frozen=True)
class MigrationContext:
    """What a migration may know about the document it is upgrading."""

    source: str
    sink: WarningSink


@dataclass(frozen=True)
class Migration:
    name: str
    should_run: Callable[[Document], bool]
    run: Callable[[Document, MigrationContext], Document]


# ---------------------------------------------------------------------------
# Version helpers
# ---------------------------------------------------------------------------


def version_key(version: object) -> tuple[int, ...]:
    """Numeric components of *version*; a missing version sorts first.

    >>> version_key("0.7.0-20260204")
    (0, 7, 0, 20260204)
    >>> version_key(None)
    ()
    """
    if version is None or version == "":
        return ()
    return tuple(int(part) for part in re.findall(r"\d+", str(version)))


def predates(version: object, reference: str) -> bool:
    return version_key(version) < version_key(reference)


def needs_upgrade(doc: Document) -> bool:
    """True when *doc* was written by an older schema version."""
    return predates(doc.get("version"), CURRENT_VERSION)


def needs_migration(doc: Document, migrations: tuple[Migration, ...] | None = None) -> bool:
    """True when *doc* is older than this schema or any migration applies to it.

    A current-version document edited by hand can still carry an old format.
    Documents from a newer schema are left alone.
    """
    if needs_upgrade(doc):
        return True
    if predates(CURRENT_VERSION, str(doc.get("version"))):
        return False
    return any(m.should_run(doc) for m in (MIGRATIONS if migrations is None else migrations))


# ---------------------------------------------------------------------------
# v0-format-upgrade
# ---------------------------------------------------------------------------


def _section_list(doc: Document, section: str, key: str) -> list[Any] | None:
    block = doc.get(section)
    if not isinstance(block, dict):
        return None
    value = block.get(key)
    return value if isinstance(value, list) else None


def _has_bare_string_patterns(doc: Document) -> bool:
    for section, key in _PATTERN_LISTS + _DANGEROUS_LISTS:
        items = _section_list(doc, section, key)
        if items and any(isinstance(item, str) for item in items):
            return True
    return False


def _upgrade_v0(doc: Document, ctx: MigrationContext) -> Document:
    # v0 stored every pattern as a regular expression string.
    upgraded = copy.deepcopy(doc)
    for section, key in _PATTERN_LISTS:
        items = _section_list(upgraded, section, key)
        if items is None:
            continue
        upgraded[section][key] = [
            {"pattern": item, "regex": True} if isinstance(item, str) else item
            for item in items
        ]
    for section, key in _DANGEROUS_LISTS:
        items = _section_list(upgraded, section, key)
        if items is None:
            continue
        converted: list[Any] = []
        for item in items:
            if isinstance(item, str):
                converted.append({"pattern": item, "description": item, "regex": True})
            elif isinstance(item, dict) and "regex" not in item:
                converted.append({**item, "regex": True})
            else:
                converted.append(item)
        upgraded[section][key] = converted
    logger.info("Upgraded v0 pattern format in %s", ctx.source)
    return upgraded


# ---------------------------------------------------------------------------
# strip-toolchain-fields
# ---------------------------------------------------------------------------


def _has_removed_fields(doc: Document) -> bool:
    features = doc.get("features")
    if isinstance(features, dict) and any(key in features for key in REMOVED_FEATURE_KEYS):
        return True
    return "packageManager" in doc


def _should_strip_toolchain(doc: Document) -> bool:
    return predates(doc.get("version"), TOOLCHAIN_MIGRATION_VERSION) and _has_removed_fields(doc)


def _strip_toolchain_fields(doc: Document, ctx: MigrationContext) -> Document:
    ctx.sink.add(TOOLCHAIN_WARNING.format(version=TOOLCHAIN_MIGRATION_VERSION, path=ctx.source))
    cleaned = copy.deepcopy(doc)
    features = cleaned.get("features")
    if isinstance(features, dict):
        for key in REMOVED_FEATURE_KEYS:
            features.pop(key, None)
    cleaned.pop("packageManager", None)
    cleaned["version"] = TOOLCHAIN_MIGRATION_VERSION
    return cleaned


MIGRATIONS: tuple[Migration, ...] = (
    Migration("v0-format-upgrade", _has_bare_string_patterns, _upgrade_v0),
    Migration("strip-toolchain-fields", _should_strip_toolchain, _strip_toolchain_fields),
)


def apply_migrations(
    doc: Document,
    ctx: MigrationContext,
    migrations: tuple[Migration, ...] = MIGRATIONS,
) -> tuple[Document, list[str]]:
    """Run every applicable migration over *doc*.

    Returns the migrated copy and the names of the migrations that ran.  The
    result always carries :data:`CURRENT_VERSION`.
    """
    migrated = copy.deepcopy(doc)
    applied: list[str] = []
    for migration in migrations:
        if migration.should_run(migrated):
            logger.debug("Running migration %s on %s", migration.name, ctx.source)
            migrated = migration.run(migrated, ctx)
            applied.append(migration.name)
    migrated["version"] = CURRENT_VERSION
    return migrated, applied


def backup_file(path: Path, *, now: datetime | None = None) -> Path:
    """Copy *path* to ``<name>.<timestamp>.bak`` beside it.

    Raises:
        ConfigWriteError: If the copy fails.
    """
    stamp = (now or datetime.now()).strftime("%Y%m%dT%H%M%S")
    target = path.with_name(f"{path.name}.{stamp}.bak")
    try:
        shutil.copy2(path, target)
    except OSError as exc:
        raise ConfigWriteError(target, str(exc)) from exc
    return target
