"""GitHub Actions event context."""

from __future__ import annotations

import json
import os
from pathlib import Path


def load_pr_context() -> tuple[str, int] | None:
    """Return ``(owner/repo, pr_number)`` for the running workflow.

    Reads GITHUB_REPOSITORY and the event payload at GITHUB_EVENT_PATH
    (available in GitHub Actions). Returns None outside a pull request
    event.
    """
    repo = os.environ.get("GITHUB_REPOSITORY", "")
    event_path = os.environ.get("GITHUB_EVENT_PATH")
    if not repo or not event_path or not Path(event_path).exists():
        return None

    with open(event_path) as f:
        event = json.load(f)

    # pull_request and pull_request_review_comment events both carry it
    pr_number = event.get("pull_request", {}).get("number")
    if not pr_number:
        return None
    return repo, int(pr_number)
