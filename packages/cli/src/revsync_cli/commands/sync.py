"""sync command — reconcile a pull request's comments with a violation report."""

from __future__ import annotations

import click
from rich.console import Console

from revsync_cli.commands.common import open_gateway
from revsync_core.errors import GatewayError, ReportError
from revsync_core.models import ERROR, MARKDOWN, MESSAGE, WARNING, ReconcileSummary
from revsync_core.reconciler import Reconciler
from revsync_core.report import load_report
from revsync_core.utils.ignore import filter_ignored, ignored_violations

console = Console()


def _print_summary(summary: ReconcileSummary, shadow: bool) -> None:
    mode = "inline + summary" if summary.inline_supported else "summary only"
    verb = "would be" if shadow else "were"
    if not summary.changed:
        console.print(f"[green]Comments already up to date ({mode}).[/green]")
        return
    console.print(
        f"[green]{len(summary.created)} created, {len(summary.updated)} updated, "
        f"{len(summary.resolved)} resolved, {len(summary.deleted)} deleted ({mode}); "
        f"these changes {verb} applied.[/green]"
    )
    if summary.kept:
        console.print(f"[dim]{len(summary.kept)} outdated comment(s) kept because someone replied.[/dim]")
    if summary.failed:
        console.print(f"[yellow]{len(summary.failed)} inline comment(s) failed and went to the summary.[/yellow]")


@click.command("sync")
@click.option("--repo", required=True, help="GitHub repository in owner/name format.")
@click.option("--pr", "pr_number", type=int, required=True, help="Pull request number.")
@click.option(
    "--report",
    "report_path",
    required=True,
    help="YAML or JSON file with warnings, errors, messages and markdowns.",
)
@click.option("--danger-id", default=None, help="Identifier of this tool's comments. Overrides config file.")
@click.option("--new-comment", is_flag=True, help="Post a new summary comment instead of editing the last one.")
@click.option(
    "--remove-previous-comments",
    is_flag=True,
    help=(
        "Delete this tool's summary comments. With inline comments available, "
        "remaining findings are posted in a new summary comment at the end of the thread."
    ),
)
@click.option("--shadow", "-s", is_flag=True, help="Dry-run mode: print the changes without posting to GitHub.")
@click.pass_context
def sync_cmd(
    ctx,
    repo: str,
    pr_number: int,
    report_path: str,
    danger_id: str | None,
    new_comment: bool,
    remove_previous_comments: bool,
    shadow: bool,
):
    """Create, update, resolve and delete review comments so the pull request
    shows exactly the findings in REPORT.

    \b
    Required environment variables:
      GITHUB_TOKEN      GitHub personal access token (or use gh CLI)
    Optional:
      GITHUB_API_URL    API base URL for GitHub Enterprise
    """
    config = dict(ctx.obj["config"])
    for key, value in {
        "danger_id": danger_id,
        "new_comment": new_comment or None,
        "remove_previous_comments": remove_previous_comments or None,
    }.items():
        if value is not None:
            config[key] = value

    # Validate everything local before touching the network.
    try:
        groups = load_report(report_path)
    except ReportError as e:
        raise click.UsageError(str(e))

    gateway = open_gateway(config, repo, pr_number, shadow=shadow)

    if config.get("honor_ignore_directives", True):
        ignored = ignored_violations(gateway.description())
        if ignored:
            console.print(f"[dim]Ignoring {len(ignored)} finding(s) listed in the PR description.[/dim]")
            groups = filter_ignored(groups, ignored)

    try:
        summary = Reconciler(gateway).update(
            warnings=groups[WARNING],
            errors=groups[ERROR],
            messages=groups[MESSAGE],
            markdowns=groups[MARKDOWN],
            danger_id=config["danger_id"],
            new_comment=bool(config.get("new_comment")),
            remove_previous_comments=bool(config.get("remove_previous_comments")),
        )
    except GatewayError as e:
        raise click.ClickException(f"Could not synchronise the summary comment on {repo}#{pr_number}: {e}")

    _print_summary(summary, shadow)
