"""Deep merge of configuration documents.

Rules, applied left to right (defaults, then global, then project):

- nested mappings merge key by key;
- ``None`` never overwrites anything;
- every other value, lists included, replaces the lower layer wholesale.

Lists are never merged element-wise: pattern lists are authored as complete
sets, and a project must be able to drop a default pattern.
"""

from __future__ import annotations

import copy
from collections.abc import Mapping
from typing import Any


def deep_merge(base: Mapping[str, Any], override: Mapping[str, Any] | None) -> dict[str, Any]:
    """Return a new dict with *override* layered over *base*.

    Neither argument is mutated.

    >>> deep_merge({"a": {"x": 1, "y": [1, 2]}}, {"a": {"y": [3], "x": None}})
    {'a': {'x': 1, 'y': [3]}}
    """
    result: dict[str, Any] = copy.deepcopy(dict(base))
    if not override:
        return result

    for key, value in override.items():
        if value is None:
            continue
        current = result.get(key)
        if isinstance(value, Mapping) and isinstance(current, Mapping):
            result[key] = deep_merge(current, value)
        elif isinstance(value, Mapping):
            result[key] = deep_merge({}, value)
        else:
            result[key] = copy.deepcopy(value)
    return result


def merge_all(*layers: Mapping[str, Any] | None) -> dict[str, Any]:
    """Fold :func:`deep_merge` over *layers*, skipping missing ones."""
    result: dict[str, Any] = {}
    for layer in layers:
        result = deep_merge(result, layer)
    return result
