"""Shared config loading for CLI commands."""

from __future__ import annotations

import click

from toolgate.cli_commands._output import print_warnings
from toolgate.config.loader import ConfigLoader


def load_config(ctx: click.Context) -> ConfigLoader:
    """Build a loader from the group options, load it and show queued warnings."""
    obj = ctx.find_root().obj or {}
    loader = ConfigLoader(obj.get("global_config"), obj.get("project_config"))
    loader.load()
    print_warnings(loader.sink.drain())
    return loader
