"""CLI entry point for revsync.

Commands:
  sync   — reconcile a pull request's comment thread with a violation report
  clean  — delete this tool's summary comments from a pull request
"""

from __future__ import annotations

import importlib.metadata
import logging

import click
from rich.console import Console
from rich.logging import RichHandler

from revsync_cli.commands.clean import clean_cmd
from revsync_cli.commands.sync import sync_cmd


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
    )
    # PyGithub logs every request at DEBUG.
    logging.getLogger("github").setLevel(logging.WARNING)


@click.group()
@click.version_option(
    version=importlib.metadata.version("revsync"),
    prog_name="revsync",
)
@click.option(
    "--config",
    "config_path",
    default=".revsync.yml",
    show_default=True,
    help="Path to the configuration file.",
    envvar="REVSYNC_CONFIG",
)
@click.option("--verbose", "-v", is_flag=True, help="Log every decision the reconciler makes.")
@click.pass_context
def main(ctx: click.Context, config_path: str, verbose: bool):
    """Keep a pull request's review comments in sync with your linters' findings."""
    from revsync_cli.auth import resolve_github_token
    from revsync_core.config import load_config

    _configure_logging(verbose)
    ctx.ensure_object(dict)

    config = load_config(config_path)

    # Resolve the token once so every subcommand sees the same one.
    token = resolve_github_token(config.get("github_api_url"))
    if token:
        config["github_token"] = token

    ctx.obj["config"] = config


main.add_command(sync_cmd)
main.add_command(clean_cmd)
