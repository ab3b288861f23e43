"""Tests for the gh-backed GitHub client and Actions context."""

from __future__ import annotations

import base64
import json
import subprocess
from pathlib import Path

import pytest

from diffguard.exceptions import GitHubError
from diffguard.github.client import GitHubClient
from diffguard.github.event import load_pr_context

PR = "repos/acme/app/pulls/7"


def _pr_responses(patch: str) -> dict:
    return {
        ("GET", PR): {
            "title": "Add caching",
            "body": None,
            "user": {"login": "octocat"},
            "head": {"sha": "abc123", "ref": "feat/APP-1-cache"},
            "base": {"ref": "main"},
        },
        ("GET", f"{PR}/commits?per_page=100&page=1"): [
            {"commit": {"message": "APP-1 add cache"}},
        ],
        ("GET", f"{PR}/files?per_page=100&page=1"): [
            {"filename": "app.py", "status": "modified", "patch": patch, "additions": 3},
            {"filename": "logo.png", "status": "added"},
        ],
    }


class TestClient:
    def test_rejects_bad_repo(self):
        with pytest.raises(GitHubError):
            GitHubClient("not-a-repo")

    def test_get_pr_details(self, gh, sample_patch: str):
        gh.responses.update(_pr_responses(sample_patch))
        details = GitHubClient("acme/app", runner=gh).get_pr_details(7)

        assert details.commit_id == "abc123"
        assert details.branch_name == "feat/APP-1-cache"
        assert details.description == ""
        assert details.author == "octocat"
        assert details.commit_messages == ["APP-1 add cache"]
        assert [f.filename for f in details.files] == ["app.py", "logo.png"]
        assert details.files[0].patch == sample_patch
        assert details.files[1].patch is None

    def test_pagination(self, gh):
        page1 = [{"id": i, "user": {"login": "u"}} for i in range(100)]
        page2 = [{"id": 100, "user": {"login": "u"}}]
        gh.responses.update({
            ("GET", f"{PR}/comments?per_page=100&page=1"): page1,
            ("GET", f"{PR}/comments?per_page=100&page=2"): page2,
        })
        comments = GitHubClient("acme/app", runner=gh).list_review_comments(7)
        assert len(comments) == 101
        assert len(gh.calls) == 2

    def test_review_comment_line_scheme(self, gh):
        GitHubClient("acme/app", runner=gh).create_review_comment(
            7, "abc123", "app.py", "Unused", 12, "line"
        )
        call = gh.posted()[0]
        assert call["endpoint"] == f"{PR}/comments"
        assert call["payload"] == {
            "body": "Unused",
            "commit_id": "abc123",
            "path": "app.py",
            "line": 12,
            "side": "RIGHT",
        }

    def test_review_comment_position_scheme(self, gh):
        GitHubClient("acme/app", runner=gh).create_review_comment(
            7, "abc123", "app.py", "Unused", 8, "position"
        )
        payload = gh.posted()[0]["payload"]
        assert payload["position"] == 8
        assert "line" not in payload
        assert "side" not in payload

    def test_pr_comment_and_reply(self, gh):
        client = GitHubClient("acme/app", runner=gh)
        client.create_pr_comment(7, "Looks good")
        client.reply_to_comment(7, 55, "@octocat thanks")

        posted = gh.posted()
        assert posted[0]["endpoint"] == "repos/acme/app/issues/7/comments"
        assert posted[1]["endpoint"] == f"{PR}/comments/55/replies"
        assert posted[1]["payload"] == {"body": "@octocat thanks"}

    def test_failed_request_raises(self, gh):
        gh.responses.update({("POST", "repos/acme/app/issues/7/comments"): 1})
        with pytest.raises(GitHubError, match="HTTP 422"):
            GitHubClient("acme/app", runner=gh).create_pr_comment(7, "x")

    def test_missing_gh_binary(self):
        def runner(*args, **kwargs):
            raise FileNotFoundError("gh")

        with pytest.raises(GitHubError, match="not installed"):
            GitHubClient("acme/app", runner=runner).create_pr_comment(7, "x")

    def test_timeout(self):
        def runner(args, **kwargs):
            raise subprocess.TimeoutExpired(args, 30)

        with pytest.raises(GitHubError, match="timed out"):
            GitHubClient("acme/app", runner=runner).get_pr_details(7)

    def test_token_passed_as_env(self, gh):
        GitHubClient("acme/app", token="ghs_x", runner=gh).create_pr_comment(7, "x")
        assert gh.calls[0]["env"]["GH_TOKEN"] == "ghs_x"

    def test_get_file_content(self, gh):
        encoded = base64.b64encode(b"import os\n").decode()
        gh.responses.update({
            ("GET", "repos/acme/app/contents/src/app.py?ref=abc123"): {
                "encoding": "base64",
                "content": encoded,
            },
        })
        content = GitHubClient("acme/app", runner=gh).get_file_content("src/app.py", "abc123")
        assert content == "import os\n"

    def test_get_file_content_missing(self, gh):
        gh.responses.update({("GET", "repos/acme/app/contents/gone.py?ref=abc123"): 1})
        assert GitHubClient("acme/app", runner=gh).get_file_content("gone.py", "abc123") is None


class TestEventContext:
    def test_pull_request_event(self, tmp_path: Path, monkeypatch):
        event = tmp_path / "event.json"
        event.write_text(json.dumps({"pull_request": {"number": 42}}))
        monkeypatch.setenv("GITHUB_REPOSITORY", "acme/app")
        monkeypatch.setenv("GITHUB_EVENT_PATH", str(event))
        assert load_pr_context() == ("acme/app", 42)

    def test_not_a_pull_request(self, tmp_path: Path, monkeypatch):
        event = tmp_path / "event.json"
        event.write_text(json.dumps({"ref": "refs/heads/main"}))
        monkeypatch.setenv("GITHUB_REPOSITORY", "acme/app")
        monkeypatch.setenv("GITHUB_EVENT_PATH", str(event))
        assert load_pr_context() is None

    def test_outside_actions(self, monkeypatch):
        monkeypatch.delenv("GITHUB_REPOSITORY", raising=False)
        monkeypatch.delenv("GITHUB_EVENT_PATH", raising=False)
        assert load_pr_context() is None
