from __future__ import annotations

from github import Auth, Github

DEFAULT_API_URL = "https://api.github.com"


def get_repo(repo_name: str, token: str, base_url: str | None = None):
    """Open ``owner/name`` on github.com or on a GitHub Enterprise ``base_url``."""
    return Github(auth=Auth.Token(token), base_url=base_url or DEFAULT_API_URL).get_repo(repo_name)


def get_pull(repo, pr_number: int):
    return repo.get_pull(pr_number)
