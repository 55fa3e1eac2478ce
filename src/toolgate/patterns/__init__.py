"""Pattern compilation — literal, glob and regex matchers for rule sets."""

from toolgate.patterns.builtin import BUILTIN_MATCHERS, BuiltinMatcher, builtin_matcher, expand_command
from toolgate.patterns.compiler import (
    CompiledPattern,
    PatternKind,
    compile_pattern,
    compile_patterns,
    first_match,
    normalize_path,
)

__all__ = [
    "BUILTIN_MATCHERS",
    "BuiltinMatcher",
    "CompiledPattern",
    "PatternKind",
    "builtin_matcher",
    "compile_pattern",
    "compile_patterns",
    "expand_command",
    "first_match",
    "normalize_path",
]
