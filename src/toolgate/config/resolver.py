"""Resolve scope documents into one :class:`EffectivePolicy`."""

from __future__ import annotations

import copy
from collections.abc import Mapping
from typing import Any

from pydantic import ValidationError

from toolgate.config.defaults import DEFAULT_DOCUMENT
from toolgate.config.errors import ConfigValidationError
from toolgate.config.merge import merge_all
from toolgate.config.models import EffectivePolicy, GuardrailsDocument


def validate_document(document: Mapping[str, Any]) -> GuardrailsDocument:
    """Check *document* against the partial on-disk schema.

    Raises:
        ConfigValidationError: If any field has the wrong shape.
    """
    try:
        return GuardrailsDocument.model_validate(dict(document))
    except ValidationError as exc:
        raise ConfigValidationError(str(exc)) from exc


def resolve(*documents: Mapping[str, Any] | None) -> EffectivePolicy:
    """Merge *documents* (lowest precedence first) over the built-in defaults.

    ``permissionGate.customPatterns`` is applied after the merge: the
    highest-precedence document that sets it replaces the dangerous-pattern
    list outright and switches off the built-in structural matchers.

    Raises:
        ConfigValidationError: If the merged result is not a valid policy.
    """
    merged = merge_all(DEFAULT_DOCUMENT, *documents)

    custom: Any = None
    for document in documents:
        gate = document.get("permissionGate") if document else None
        if isinstance(gate, Mapping) and gate.get("customPatterns") is not None:
            custom = gate["customPatterns"]

    if custom is not None:
        merged["permissionGate"]["patterns"] = copy.deepcopy(custom)
        merged["permissionGate"]["useBuiltinMatchers"] = False

    try:
        return EffectivePolicy.model_validate(merged)
    except ValidationError as exc:
        raise ConfigValidationError(str(exc)) from exc
