from __future__ import annotations

import os
from pathlib import Path

import yaml

DEFAULT_CONFIG: dict = {
    "danger_id": "danger",  # marker identifying this tool's comments; one thread per id
    "new_comment": False,  # post a fresh summary comment instead of editing the last one
    "remove_previous_comments": False,
    "honor_ignore_directives": True,  # respect `> Danger: Ignore "..."` lines in the PR description
}


def _read_file(path: Path) -> dict:
    with open(path) as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ValueError(f"{path} must contain a mapping, got {type(data).__name__}")
    return data


def load_config(config_path: str = ".revsync.yml", cli_overrides: dict | None = None) -> dict:
    """Settings for one run.

    Later sources win: DEFAULT_CONFIG, then ``config_path`` if it exists, then
    any non-None ``cli_overrides``. The GitHub token and API URL are never
    read from the file, only from GITHUB_TOKEN and GITHUB_API_URL.
    """
    path = Path(config_path)
    file_config = _read_file(path) if path.exists() else {}
    overrides = {k: v for k, v in (cli_overrides or {}).items() if v is not None}

    config = {**DEFAULT_CONFIG, **file_config, **overrides}
    config["github_token"] = os.environ.get("GITHUB_TOKEN")
    config["github_api_url"] = os.environ.get("GITHUB_API_URL")
    return config
