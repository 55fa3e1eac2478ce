"""Shell command analysis — structural command lookup with a regex fallback."""

from toolgate.shell.analyzer import (
    CommandNames,
    ParsedCommands,
    SimpleCommand,
    contains_command_token,
    extract_command_names,
    has_command,
    match_command_names,
    parse_commands,
)
from toolgate.shell.paths import extract_path_references

__all__ = [
    "CommandNames",
    "ParsedCommands",
    "SimpleCommand",
    "contains_command_token",
    "extract_command_names",
    "extract_path_references",
    "has_command",
    "match_command_names",
    "parse_commands",
]
