"""Helpers shared by the sync and clean commands."""

from __future__ import annotations

import click
from github import GithubException

from revsync_core.gh.gateway import GitHubGateway
from revsync_core.gh.pull_request import get_pull, get_repo
from revsync_core.shadow import ShadowGateway


def open_gateway(config: dict, repo: str, pr_number: int, shadow: bool = False):
    """Build the gateway for one pull request, failing fast on misconfiguration."""
    token = config.get("github_token")
    if not token:
        raise click.UsageError(
            "No GitHub token found. Set GITHUB_TOKEN or run `gh auth login` first.\n"
            "Create a token at https://github.com/settings/tokens"
        )

    try:
        this_repo = get_repo(repo, token=token, base_url=config.get("github_api_url"))
        this_pr = get_pull(this_repo, pr_number)
    except GithubException as e:
        raise click.ClickException(f"PR #{pr_number} not found in {repo} ({e.status}).")

    gateway = GitHubGateway(this_repo, this_pr)
    return ShadowGateway(gateway) if shadow else gateway
