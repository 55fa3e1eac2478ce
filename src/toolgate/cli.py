"""toolgate CLI entrypoint."""

from __future__ import annotations

import logging
from pathlib import Path

import click

from toolgate import __version__


@click.group()
@click.version_option(version=__version__, prog_name="toolgate")
@click.option(
    "--global-config",
    type=click.Path(dir_okay=False, path_type=Path),
    envvar="TOOLGATE_GLOBAL_CONFIG",
    default=None,
    help="Global config file (default: ~/.pi/agent/extensions/guardrails.json).",
)
@click.option(
    "--project-config",
    type=click.Path(dir_okay=False, path_type=Path),
    envvar="TOOLGATE_PROJECT_CONFIG",
    default=None,
    help="Project config file (default: ./.pi/extensions/guardrails.json).",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose logging.")
@click.option(
    "--otlp-endpoint",
    envvar="TOOLGATE_OTLP_ENDPOINT",
    default=None,
    help="Export evaluation spans to this OTLP/gRPC endpoint (needs toolgate[otel]).",
)
@click.pass_context
def main(
    ctx: click.Context,
    global_config: Path | None,
    project_config: Path | None,
    verbose: bool,
    otlp_endpoint: str | None,
) -> None:
    """toolgate: guardrails for agent tool calls."""
    if verbose:
        from rich.logging import RichHandler

        logging.basicConfig(
            level=logging.DEBUG,
            format="%(message)s",
            handlers=[RichHandler(show_path=False)],
        )
    if otlp_endpoint:
        from toolgate.utils.telemetry import configure_telemetry

        try:
            configure_telemetry(export_to_console=False, otlp_endpoint=otlp_endpoint)
        except ImportError as exc:
            raise click.UsageError(str(exc)) from exc
    ctx.ensure_object(dict)
    ctx.obj["global_config"] = global_config
    ctx.obj["project_config"] = project_config


# Register subcommands
from toolgate.cli_commands import register_commands  # noqa: E402

register_commands(main)

if __name__ == "__main__":
    main()
