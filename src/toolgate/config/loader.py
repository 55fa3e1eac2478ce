"""ConfigLoader — reads, migrates and resolves the global and project documents.

Typical usage::

    loader = ConfigLoader(cwd=Path.cwd())
    policy = loader.load()

    doc = loader.get_document(Scope.PROJECT)
    loader.save(Scope.PROJECT, set_feature(doc, Feature.PERMISSION_GATE, False))

Either document may be missing.  Unreadable or invalid documents are treated as
absent and reported through the :class:`WarningSink`; loading never fails.
"""

from __future__ import annotations

import copy
import json
import logging
import os
import tempfile
from collections.abc import Callable, Mapping
from pathlib import Path
from typing import Any

from toolgate.config.defaults import CURRENT_VERSION
from toolgate.config.errors import ConfigReadError, ConfigValidationError, ConfigWriteError
from toolgate.config.migrations import MigrationContext, apply_migrations, backup_file, needs_migration
from toolgate.config.models import EffectivePolicy, Scope
from toolgate.config.resolver import resolve, validate_document
from toolgate.config.warning_sink import WarningSink

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "guardrails.json"
PROJECT_CONFIG_DIR = Path(".pi") / "extensions"

PolicyListener = Callable[[EffectivePolicy], None]


def default_global_path() -> Path:
    return Path.home() / ".pi" / "agent" / "extensions" / CONFIG_FILENAME


def read_document(path: Path) -> dict[str, Any] | None:
    """Read a JSON document, returning ``None`` if the file does not exist.

    Raises:
        ConfigReadError: If the file exists but cannot be read or decoded.
    """
    if not path.is_file():
        return None
    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigReadError(path, str(exc)) from exc
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise ConfigReadError(path, f"invalid JSON: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigReadError(path, "top-level value must be an object")
    return data


def write_document(path: Path, document: Mapping[str, Any]) -> None:
    """Replace *path* with *document* in one step (temp file + rename).

    Raises:
        ConfigWriteError: If the directory or file cannot be written.
    """
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", dir=path.parent)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                json.dump(document, handle, indent=2)
                handle.write("\n")
            os.replace(tmp_name, path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise
    except OSError as exc:
        raise ConfigWriteError(path, str(exc)) from exc


class ConfigLoader:
    """Owns the two scope documents and the policy resolved from them."""

    def __init__(
        self,
        global_path: Path | None = None,
        project_path: Path | None = None,
        *,
        cwd: Path | None = None,
        sink: WarningSink | None = None,
    ) -> None:
        self._cwd = cwd or Path.cwd()
        self._paths: dict[Scope, Path] = {
            Scope.GLOBAL: global_path or default_global_path(),
            Scope.PROJECT: project_path or self._cwd / PROJECT_CONFIG_DIR / CONFIG_FILENAME,
        }
        self._documents: dict[Scope, dict[str, Any] | None] = {
            Scope.GLOBAL: None,
            Scope.PROJECT: None,
        }
        self._policy: EffectivePolicy | None = None
        self._listeners: list[PolicyListener] = []
        self.sink = sink or WarningSink()

    @property
    def cwd(self) -> Path:
        return self._cwd

    @property
    def policy(self) -> EffectivePolicy:
        """The current effective policy, loading on first access."""
        if self._policy is None:
            return self.load()
        return self._policy

    def path_for(self, scope: Scope) -> Path:
        return self._paths[scope]

    def has_document(self, scope: Scope) -> bool:
        return self._documents[scope] is not None

    def get_document(self, scope: Scope) -> dict[str, Any]:
        """A private copy of the *scope* document (``{}`` when absent), for editing."""
        return copy.deepcopy(self._documents[scope] or {})

    def add_listener(self, listener: PolicyListener) -> None:
        """Call *listener* with every policy built by :meth:`load`."""
        self._listeners.append(listener)

    # -- load / save -------------------------------------------------------

    def load(self) -> EffectivePolicy:
        """Re-read both documents and build a fresh :class:`EffectivePolicy`."""
        for scope in Scope:
            self._documents[scope] = self._load_scope(scope)

        try:
            policy = resolve(self._documents[Scope.GLOBAL], self._documents[Scope.PROJECT])
        except ConfigValidationError as exc:
            self.sink.add(f"guardrails: merged config is invalid, using defaults ({exc.detail})")
            policy = resolve()

        self._policy = policy
        for listener in list(self._listeners):
            listener(policy)
        return policy

    def save(self, scope: Scope, document: Mapping[str, Any]) -> EffectivePolicy:
        """Replace the *scope* document on disk and reload.

        The document is written whole; there is no partial update.

        Raises:
            ConfigValidationError: If *document* does not match the schema.
            ConfigWriteError: If the file cannot be written.
        """
        validate_document(document)
        to_write = dict(document)
        if not to_write.get("version"):
            to_write["version"] = CURRENT_VERSION
        write_document(self._paths[scope], to_write)
        logger.info("Saved %s guardrails config to %s", scope.value, self._paths[scope])
        return self.load()

    # -- internals ---------------------------------------------------------

    def _load_scope(self, scope: Scope) -> dict[str, Any] | None:
        path = self._paths[scope]
        try:
            document = read_document(path)
        except ConfigReadError as exc:
            self.sink.add(f"guardrails: ignoring {scope.value} config: {exc}")
            return None
        if document is None:
            return None

        if needs_migration(document):
            document = self._migrate(path, document)

        try:
            validate_document(document)
        except ConfigValidationError as exc:
            self.sink.add(f"guardrails: ignoring {scope.value} config {path}: {exc.detail}")
            return None
        return document

    def _migrate(self, path: Path, document: dict[str, Any]) -> dict[str, Any]:
        """Back up, migrate, persist and re-read *document*.

        Any write failure leaves the file untouched and returns the migrated
        value for in-memory use this session.
        """
        backed_up = True
        try:
            backup = backup_file(path)
            logger.info("Backed up %s to %s before migration", path, backup)
        except ConfigWriteError as exc:
            self.sink.add(
                f"guardrails: could not back up {path} before migrating ({exc.detail}); "
                "migrated settings apply to this session only"
            )
            backed_up = False

        migrated, applied = apply_migrations(document, MigrationContext(source=str(path), sink=self.sink))
        logger.info("Migrated %s (%s)", path, ", ".join(applied) or "version stamp")
        if not backed_up:
            return migrated

        try:
            write_document(path, migrated)
        except ConfigWriteError as exc:
            self.sink.add(
                f"guardrails: could not save migrated config {path} ({exc.detail}); "
                "migrated settings apply to this session only"
            )
            return migrated

        try:
            confirmed = read_document(path)
        except ConfigReadError:
            confirmed = None
        if confirmed != migrated:
            logger.warning("Re-read of migrated %s did not match; using in-memory result", path)
        return migrated
