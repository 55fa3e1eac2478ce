"""toolgate — command-safety policy engine for agent tool calls."""

from __future__ import annotations

from typing import TYPE_CHECKING

__version__ = "0.1.0"

if TYPE_CHECKING:
    from toolgate.config.loader import ConfigLoader as ConfigLoader
    from toolgate.runtime.evaluator import PolicyEvaluator as PolicyEvaluator
    from toolgate.runtime.extension import GuardrailsExtension as GuardrailsExtension
    from toolgate.runtime.extension import create_extension as create_extension

_LAZY_EXPORTS = {
    "ConfigLoader": "toolgate.config.loader",
    "PolicyEvaluator": "toolgate.runtime.evaluator",
    "GuardrailsExtension": "toolgate.runtime.extension",
    "create_extension": "toolgate.runtime.extension",
}


def __getattr__(name: str) -> object:
    module_path = _LAZY_EXPORTS.get(name)
    if module_path is not None:
        import importlib

        mod = importlib.import_module(module_path)
        return getattr(mod, name)
    raise AttributeError(f"module 'toolgate' has no attribute {name!r}")
