"""clean command — delete this tool's summary comments from a pull request."""

from __future__ import annotations

import click
from rich.console import Console

from revsync_cli.commands.common import open_gateway
from revsync_core.errors import GatewayError
from revsync_core.reconciler import Reconciler

console = Console()


@click.command("clean")
@click.option("--repo", required=True, help="GitHub repository in owner/name format.")
@click.option("--pr", "pr_number", type=int, required=True, help="Pull request number.")
@click.option("--danger-id", default=None, help="Identifier of this tool's comments. Overrides config file.")
@click.option("--except", "except_id", type=int, default=None, help="Comment id to keep.")
@click.option("--shadow", "-s", is_flag=True, help="Dry-run mode: print the deletions without performing them.")
@click.pass_context
def clean_cmd(ctx, repo: str, pr_number: int, danger_id: str | None, except_id: int | None, shadow: bool):
    """Delete every summary comment this tool posted on a pull request.

    Inline comments are left alone. Failed deletions are skipped.
    """
    config = ctx.obj["config"]
    gateway = open_gateway(config, repo, pr_number, shadow=shadow)

    try:
        deleted = Reconciler(gateway).delete_all_tool_comments(
            except_id=except_id, danger_id=danger_id or config["danger_id"]
        )
    except GatewayError as e:
        raise click.ClickException(f"Could not list comments on {repo}#{pr_number}: {e}")

    console.print(f"[green]{deleted} comment(s) {'would be ' if shadow else ''}deleted.[/green]")
