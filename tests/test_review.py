"""Tests for review prompts, response parsing and the Reviewer."""

from __future__ import annotations

from pathlib import Path

import pytest

from diffguard.diff import process_file_change
from diffguard.github.models import CommentThread, PRDetails, PullRequestFile
from diffguard.review import ReviewComment, Reviewer, describe_changes, parse_review_response
from diffguard.review.project_prompts import read_project_prompts
from diffguard.review.prompts import get_reply_prompt, get_review_prompt


class TestDescribeChanges:
    def test_deletions_then_additions(self, sample_patch: str):
        fc = process_file_change("main.py", sample_patch, "line")
        assert describe_changes(fc) == "\n".join([
            "-[2] import sys",
            "+[2] import sys, json",
            "+[3] import re",
            "+[12]     y = 2",
        ])

    def test_position_addresses(self, sample_patch: str):
        fc = process_file_change("main.py", sample_patch, "position")
        assert describe_changes(fc).splitlines()[0] == "-[2] import sys"
        assert describe_changes(fc).splitlines()[-1] == "+[8]     y = 2"

    def test_empty(self):
        assert describe_changes(process_file_change("img.png", None)) == ""


class TestParseReviewResponse:
    def test_keeps_only_added_lines(self, sample_patch: str):
        fc = process_file_change("main.py", sample_patch, "line")
        text = "\n".join([
            "[2]: Split these imports",
            "[5]: Comment on a context line",
            "[99]: Hallucinated line",
            "Some chatter from the model",
            "[12]: `y` is never used",
        ])
        assert parse_review_response(text, fc) == [
            ReviewComment(address=2, body="Split these imports"),
            ReviewComment(address=12, body="`y` is never used"),
        ]

    def test_deletion_address_rejected(self, sample_patch: str):
        fc = process_file_change("main.py", sample_patch, "position")
        assert parse_review_response("[2]: removed line", fc) == []

    def test_requires_space_after_colon(self, sample_patch: str):
        fc = process_file_change("main.py", sample_patch, "line")
        assert parse_review_response("[3]:no space", fc) == []

    def test_indented_lines_accepted(self, sample_patch: str):
        fc = process_file_change("main.py", sample_patch, "line")
        assert parse_review_response("   [3]: Unused import", fc) == [
            ReviewComment(address=3, body="Unused import")
        ]

    def test_empty_answer(self, sample_patch: str):
        fc = process_file_change("main.py", sample_patch)
        assert parse_review_response("", fc) == []


class TestProjectPrompts:
    def test_reads_files_in_name_order(self, prompts_dir: Path):
        text = read_project_prompts(prompts_dir, "webapp")
        assert text == (
            "a_style.md:\nKeep functions short.\n\n"
            "b_naming.md:\nUse snake_case for functions."
        )

    def test_missing_project(self, prompts_dir: Path):
        assert read_project_prompts(prompts_dir, "other") == ""

    def test_missing_directory(self, tmp_path: Path):
        assert read_project_prompts(tmp_path / "nope", "webapp") == ""


class TestPrompts:
    def test_review_prompt_embeds_guidelines(self):
        prompt = get_review_prompt("Use snake_case.", "line")
        assert "Use snake_case." in prompt
        assert "[N]: Comment text" in prompt
        assert "line number" in prompt

    def test_review_prompt_position_scheme(self):
        assert "position number" in get_review_prompt("", "position")

    def test_reply_prompt(self):
        prompt = get_reply_prompt("Rename this", "octocat", "x = 1", "+x = 1", "Be nice.")
        assert "@octocat" in prompt
        assert "x = 1" in prompt
        assert "Be nice." in prompt


class TestReviewer:
    @pytest.mark.asyncio
    async def test_review_file(self, fake_llm, sample_patch: str):
        fake_llm.answers = ["[3]: Unused import ❌\n[1]: context line"]
        fc = process_file_change("main.py", sample_patch, "line")

        comments = await Reviewer(fake_llm).review_file(fc, "Use snake_case.")

        assert comments == [ReviewComment(address=3, body="Unused import ❌")]
        system, user = fake_llm.requests[0]
        assert system.role == "system"
        assert "Use snake_case." in system.content
        assert user.content.startswith("File: main.py\n\n")
        assert "Changes:\n-[2] import sys" in user.content
        assert "Full file content" not in user.content

    @pytest.mark.asyncio
    async def test_review_file_with_full_content(self, fake_llm, sample_patch: str):
        fc = process_file_change("main.py", sample_patch).with_full_content("import os\n")
        await Reviewer(fake_llm).review_file(fc)
        assert "Full file content:\nimport os\n" in fake_llm.requests[0][1].content

    @pytest.mark.asyncio
    async def test_review_pr_info(self, fake_llm):
        fake_llm.answers = ["⚠️ Branch name does not follow the convention"]
        details = PRDetails(
            number=7,
            commit_id="abc",
            description="Adds caching",
            branch_name="caching",
            commit_messages=["add cache", "fix tests"],
            files=[PullRequestFile(filename="a.py"), PullRequestFile(filename="b.py")],
        )

        answer = await Reviewer(fake_llm).review_pr_info(details)

        assert answer.startswith("⚠️")
        user = fake_llm.requests[0][1].content
        assert "Number of files changed: 2" in user
        assert "Commit messages: add cache, fix tests" in user

    @pytest.mark.asyncio
    async def test_reply(self, fake_llm):
        fake_llm.answers = ["Good point, keep it."]
        thread = CommentThread(
            root_id=1,
            path="main.py",
            original_comment="Unused import",
            reply="It is used in a later commit",
            user_login="octocat",
            is_pr_author=True,
            line_content="import re",
            diff_context="+import re",
        )

        answer = await Reviewer(fake_llm).reply(thread)

        assert answer == "Good point, keep it."
        system, user = fake_llm.requests[0]
        assert "import re" in system.content
        assert "the PR author" in user.content
        assert "It is used in a later commit" in user.content
