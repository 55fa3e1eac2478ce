"""Configuration layer — scope documents, migrations and the effective policy."""

from toolgate.config.defaults import CURRENT_VERSION, DEFAULT_DOCUMENT
from toolgate.config.errors import (
    ConfigError,
    ConfigReadError,
    ConfigValidationError,
    ConfigWriteError,
)
from toolgate.config.loader import ConfigLoader
from toolgate.config.models import (
    DangerousPattern,
    EffectivePolicy,
    Feature,
    PatternConfig,
    Scope,
)
from toolgate.config.resolver import resolve, validate_document
from toolgate.config.warning_sink import WarningSink

__all__ = [
    "CURRENT_VERSION",
    "DEFAULT_DOCUMENT",
    "ConfigError",
    "ConfigLoader",
    "ConfigReadError",
    "ConfigValidationError",
    "ConfigWriteError",
    "DangerousPattern",
    "EffectivePolicy",
    "Feature",
    "PatternConfig",
    "Scope",
    "WarningSink",
    "resolve",
    "validate_document",
]
