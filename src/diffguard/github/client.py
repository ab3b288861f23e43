"""Thin GitHub REST client built on the ``gh`` CLI.

Every request goes through ``gh api`` so authentication is whatever ``gh``
already uses (GH_TOKEN / GITHUB_TOKEN in Actions).
"""

from __future__ import annotations

import base64
import json
import logging
import os
import subprocess
from collections.abc import Callable
from typing import Any
from urllib.parse import quote

from diffguard.diff.addressing import LineNumberScheme
from diffguard.exceptions import GitHubError
from diffguard.github.models import PRDetails, PullRequestFile, ReviewCommentData

logger = logging.getLogger("diffguard.github")

PER_PAGE = 100


class GitHubClient:
    """Pull request operations for a single ``owner/repo``."""

    def __init__(
        self,
        repo: str,
        token: str | None = None,
        runner: Callable[..., subprocess.CompletedProcess] = subprocess.run,
        timeout: int = 30,
    ) -> None:
        if "/" not in repo:
            raise GitHubError(f"Repository must look like 'owner/name', got '{repo}'")
        self.repo = repo
        self.token = token
        self._run = runner
        self.timeout = timeout

    # ------------------------------------------------------------------
    # Transport
    # ------------------------------------------------------------------

    def _api(self, endpoint: str, method: str = "GET", payload: dict | None = None) -> Any:
        args = ["gh", "api", endpoint, "--method", method]
        if payload is not None:
            args += ["--input", "-"]

        env = None
        if self.token:
            env = {**os.environ, "GH_TOKEN": self.token}

        try:
            result = self._run(
                args,
                input=json.dumps(payload) if payload is not None else None,
                capture_output=True,
                text=True,
                timeout=self.timeout,
                env=env,
            )
        except FileNotFoundError as e:
            raise GitHubError("The 'gh' CLI is not installed or not on PATH") from e
        except subprocess.TimeoutExpired as e:
            raise GitHubError(f"{method} {endpoint} timed out after {self.timeout}s") from e

        if result.returncode != 0:
            raise GitHubError(f"{method} {endpoint} failed: {result.stderr.strip()}")

        out = result.stdout.strip()
        if not out:
            return None
        try:
            return json.loads(out)
        except json.JSONDecodeError as e:
            raise GitHubError(f"{method} {endpoint} returned invalid JSON") from e

    def _get_all(self, endpoint: str) -> list[dict]:
        """GET every page of a list endpoint."""
        items: list[dict] = []
        page = 1
        while True:
            batch = self._api(f"{endpoint}?per_page={PER_PAGE}&page={page}") or []
            items.extend(batch)
            if len(batch) < PER_PAGE:
                return items
            page += 1

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def get_pr_details(self, pr_number: int) -> PRDetails:
        base = f"repos/{self.repo}/pulls/{pr_number}"
        pr = self._api(base)
        commits = self._get_all(f"{base}/commits")
        files = self._get_all(f"{base}/files")

        return PRDetails(
            number=pr_number,
            title=pr.get("title") or "",
            description=pr.get("body") or "",
            author=(pr.get("user") or {}).get("login", ""),
            commit_id=pr["head"]["sha"],
            branch_name=pr["head"].get("ref", ""),
            base_ref=(pr.get("base") or {}).get("ref", ""),
            commit_messages=[c["commit"]["message"] for c in commits],
            files=[
                PullRequestFile(
                    filename=f["filename"],
                    status=f.get("status", "modified"),
                    patch=f.get("patch"),
                    additions=f.get("additions", 0),
                    deletions=f.get("deletions", 0),
                    previous_filename=f.get("previous_filename"),
                )
                for f in files
            ],
        )

    def get_file_content(self, path: str, ref: str) -> str | None:
        """Fetch a file's text at ``ref``, or None if it can't be read."""
        endpoint = f"repos/{self.repo}/contents/{quote(path)}?ref={quote(ref)}"
        try:
            data = self._api(endpoint)
        except GitHubError as e:
            logger.warning(f"Could not fetch {path}@{ref}: {e}")
            return None

        if not isinstance(data, dict) or data.get("encoding") != "base64":
            return None
        try:
            return base64.b64decode(data.get("content", "")).decode("utf-8")
        except (ValueError, UnicodeDecodeError):
            logger.debug(f"{path} is not UTF-8 text, skipping full content")
            return None

    def list_review_comments(self, pr_number: int) -> list[ReviewCommentData]:
        raw = self._get_all(f"repos/{self.repo}/pulls/{pr_number}/comments")
        return [
            ReviewCommentData(
                id=c["id"],
                body=c.get("body") or "",
                path=c.get("path") or "",
                user_login=(c.get("user") or {}).get("login", ""),
                in_reply_to_id=c.get("in_reply_to_id"),
                line=c.get("line"),
                position=c.get("position"),
                created_at=c.get("created_at") or "",
            )
            for c in raw
        ]

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def create_review_comment(
        self,
        pr_number: int,
        commit_id: str,
        path: str,
        body: str,
        address: int,
        scheme: str = LineNumberScheme.name,
    ) -> None:
        """Comment on a changed line.

        ``address`` is interpreted according to the addressing scheme the
        file was parsed with: a new-file line number for ``line``, a diff
        position for ``position``.
        """
        payload: dict[str, Any] = {"body": body, "commit_id": commit_id, "path": path}
        if scheme == LineNumberScheme.name:
            payload.update(line=address, side="RIGHT")
        else:
            payload["position"] = address

        self._api(f"repos/{self.repo}/pulls/{pr_number}/comments", "POST", payload)

    def create_pr_comment(self, pr_number: int, body: str) -> None:
        self._api(f"repos/{self.repo}/issues/{pr_number}/comments", "POST", {"body": body})

    def reply_to_comment(self, pr_number: int, comment_id: int, body: str) -> None:
        self._api(
            f"repos/{self.repo}/pulls/{pr_number}/comments/{comment_id}/replies",
            "POST",
            {"body": body},
        )
