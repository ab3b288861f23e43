"""Review bot pipeline.

``run_review``:
1. Fetches the PR and its changed files
2. Parses each file's patch with the configured addressing scheme
3. Asks the model for comments and drops any that miss an added line
4. Posts the survivors as review comments (plus an optional PR-level note)

``run_replies`` answers users who replied to one of the bot's comments.
"""

from __future__ import annotations

import fnmatch
import logging
from collections import defaultdict
from dataclasses import dataclass, field
from pathlib import Path

from diffguard.config import ProjectConfig
from diffguard.diff.addressing import LineNumberScheme
from diffguard.diff.models import FileChange
from diffguard.diff.parser import process_file_change
from diffguard.exceptions import GitHubError
from diffguard.github.client import GitHubClient
from diffguard.github.models import CommentThread, PullRequestFile, ReviewCommentData
from diffguard.review.project_prompts import read_project_prompts
from diffguard.review.reviewer import ReviewComment, Reviewer

logger = logging.getLogger("diffguard.review")


@dataclass
class ReviewResult:
    """Outcome of one review run."""

    pr_number: int
    scheme: str
    comments: dict[str, list[ReviewComment]] = field(default_factory=dict)
    skipped: list[str] = field(default_factory=list)
    posted: int = 0
    failed: int = 0
    pr_info: str = ""

    @property
    def total_comments(self) -> int:
        return sum(len(c) for c in self.comments.values())

    def to_dict(self) -> dict:
        return {
            "pr_number": self.pr_number,
            "scheme": self.scheme,
            "comments": {
                path: [{"address": c.address, "body": c.body} for c in comments]
                for path, comments in self.comments.items()
            },
            "skipped": self.skipped,
            "posted": self.posted,
            "failed": self.failed,
            "pr_info": self.pr_info,
        }


def select_files(
    files: list[PullRequestFile], config: ProjectConfig
) -> tuple[list[PullRequestFile], list[str]]:
    """Split PR files into those worth reviewing and the names of the rest."""
    selected: list[PullRequestFile] = []
    skipped: list[str] = []

    for f in files:
        if f.status == "removed" or not f.patch:
            skipped.append(f.filename)
        elif any(fnmatch.fnmatch(f.filename, p) for p in config.review.exclude_patterns):
            skipped.append(f.filename)
        elif len(selected) >= config.review.max_files:
            skipped.append(f.filename)
        else:
            selected.append(f)

    return selected, skipped


async def run_review(
    client: GitHubClient,
    reviewer: Reviewer,
    config: ProjectConfig,
    pr_number: int,
    root: Path,
    dry_run: bool = False,
) -> ReviewResult:
    """Review every eligible file of a pull request."""
    scheme = config.review.scheme
    details = client.get_pr_details(pr_number)
    prompts = read_project_prompts(root / config.review.prompts_dir, config.review.project_name)
    result = ReviewResult(pr_number=pr_number, scheme=scheme)

    if config.review.review_pr_info:
        result.pr_info = await reviewer.review_pr_info(details)
        if result.pr_info and not dry_run:
            client.create_pr_comment(pr_number, result.pr_info)

    files, result.skipped = select_files(details.files, config)
    logger.info(f"Reviewing {len(files)} file(s), skipping {len(result.skipped)}")

    for f in files:
        file_change = process_file_change(f.filename, f.patch, scheme)
        if not file_change.additions:
            result.skipped.append(f.filename)
            continue

        if config.github.fetch_full_content:
            file_change = file_change.with_full_content(
                client.get_file_content(f.filename, details.commit_id)
            )

        comments = await reviewer.review_file(file_change, prompts)
        if not comments:
            continue
        result.comments[f.filename] = comments

        if dry_run:
            continue
        for comment in comments:
            try:
                client.create_review_comment(
                    pr_number,
                    details.commit_id,
                    f.filename,
                    comment.body,
                    comment.address,
                    scheme,
                )
                result.posted += 1
            except GitHubError as e:
                logger.warning(
                    f"Failed to create review comment at {f.filename}:{comment.address}: {e}"
                )
                result.failed += 1

    return result


def collect_threads(
    comments: list[ReviewCommentData],
    bot_login: str,
    pr_author: str,
    file_changes: dict[str, FileChange],
) -> list[CommentThread]:
    """Find bot comment threads whose latest message is a user reply."""
    groups: dict[int, list[ReviewCommentData]] = defaultdict(list)
    for c in comments:
        groups[c.in_reply_to_id or c.id].append(c)

    threads: list[CommentThread] = []
    for root_id, group in groups.items():
        group.sort(key=lambda c: (c.created_at, c.id))
        root = group[0]
        if root.id != root_id or root.user_login != bot_login or len(group) < 2:
            continue
        last = group[-1]
        if last.user_login == bot_login:
            continue

        line_content = ""
        diff_context = ""
        file_change = file_changes.get(root.path)
        if file_change is not None:
            address = root.line if file_change.scheme == LineNumberScheme.name else root.position
            if address is not None:
                line_content = file_change.line_at(address) or ""
                hunk = file_change.hunk_for_address(address)
                diff_context = hunk.content if hunk else ""

        threads.append(
            CommentThread(
                root_id=root.id,
                path=root.path,
                original_comment=root.body,
                reply=last.body,
                user_login=last.user_login,
                is_pr_author=last.user_login == pr_author,
                line_content=line_content,
                diff_context=diff_context,
            )
        )

    return threads


async def run_replies(
    client: GitHubClient,
    reviewer: Reviewer,
    config: ProjectConfig,
    pr_number: int,
    root: Path,
    dry_run: bool = False,
) -> list[tuple[CommentThread, str]]:
    """Answer every pending reply to the bot's review comments."""
    details = client.get_pr_details(pr_number)
    file_changes = {
        f.filename: process_file_change(f.filename, f.patch, config.review.scheme)
        for f in details.files
    }
    threads = collect_threads(
        client.list_review_comments(pr_number),
        config.github.bot_login,
        details.author,
        file_changes,
    )
    prompts = read_project_prompts(root / config.review.prompts_dir, config.review.project_name)
    logger.info(f"Found {len(threads)} thread(s) awaiting a reply")

    answered: list[tuple[CommentThread, str]] = []
    for thread in threads:
        answer = await reviewer.reply(thread, prompts)
        if not answer:
            continue
        answered.append((thread, answer))
        if not dry_run:
            client.reply_to_comment(pr_number, thread.root_id, f"@{thread.user_login} {answer}")

    return answered
