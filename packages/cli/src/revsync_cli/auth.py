"""GitHub token resolution with gh CLI fallback.

Resolution order (stops at first success):
  1. GITHUB_TOKEN environment variable (CI / explicit override)
  2. `gh auth token` for the API host (GitHub CLI session after `gh auth login`)
"""

from __future__ import annotations

import logging
import os
import subprocess
from urllib.parse import urlparse

logger = logging.getLogger(__name__)


def _gh_hostname(api_url: str | None) -> str | None:
    """GitHub Enterprise hostname for `gh --hostname`, or None for github.com."""
    if not api_url:
        return None
    host = urlparse(api_url).hostname
    if not host or host in ("api.github.com", "github.com"):
        return None
    return host


def resolve_github_token(api_url: str | None = None) -> str | None:
    """Return a GitHub token or None if no valid source is available.

    Never raises — callers should check for None and emit a UsageError.
    """
    token = os.environ.get("GITHUB_TOKEN")
    if token:
        return token

    cmd = ["gh", "auth", "token"]
    hostname = _gh_hostname(api_url)
    if hostname:
        cmd += ["--hostname", hostname]

    try:
        result = subprocess.run(cmd, capture_output=True, text=True, timeout=5)
    except (FileNotFoundError, subprocess.TimeoutExpired):
        return None

    if result.returncode == 0 and result.stdout.strip():
        logger.debug("Resolved GitHub token via gh CLI session%s.", f" for {hostname}" if hostname else "")
        return result.stdout.strip()
    return None
