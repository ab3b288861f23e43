"""Ask the model to review file changes and keep only comments it may post."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass

from diffguard.diff.models import FileChange
from diffguard.github.models import CommentThread, PRDetails
from diffguard.llm.base import LLMProvider, Message
from diffguard.review.prompts import get_pr_info_prompt, get_reply_prompt, get_review_prompt

logger = logging.getLogger("diffguard.review")

# [42]: comment text
COMMENT_RE = re.compile(r"^\[(\d+)\]:\s(.+)$")


@dataclass(frozen=True)
class ReviewComment:
    """A model comment that targets a real addition."""

    address: int
    body: str


def describe_changes(file_change: FileChange) -> str:
    """Render deletions then additions as ``-[addr] text`` / ``+[addr] text``."""
    lines = [f"-[{d.address}] {d.content}" for d in file_change.deletions]
    lines += [f"+[{a.address}] {a.content}" for a in file_change.additions]
    return "\n".join(lines)


def parse_review_response(text: str, file_change: FileChange) -> list[ReviewComment]:
    """Extract ``[N]: comment`` lines whose N is an addition in ``file_change``.

    Anything else, including comments aimed at deleted, context or
    non-existent lines, is dropped.
    """
    comments: list[ReviewComment] = []
    for line in text.splitlines():
        match = COMMENT_RE.match(line.strip())
        if not match:
            continue
        address = int(match.group(1))
        if not file_change.is_valid_address(address):
            logger.debug(f"Dropping comment on {file_change.filename}:{address}, not an added line")
            continue
        comments.append(ReviewComment(address=address, body=match.group(2)))
    return comments


class Reviewer:
    """Runs the review, PR-info and reply conversations against an LLM."""

    def __init__(self, llm: LLMProvider, temperature: float = 0.0, max_tokens: int = 4096) -> None:
        self.llm = llm
        self.temperature = temperature
        self.max_tokens = max_tokens

    async def _ask(self, system: str, user: str) -> str:
        response = await self.llm.complete(
            [Message(role="system", content=system), Message(role="user", content=user)],
            temperature=self.temperature,
            max_tokens=self.max_tokens,
        )
        return response.content

    async def review_file(self, file_change: FileChange, project_prompts: str = "") -> list[ReviewComment]:
        diff_description = describe_changes(file_change)
        logger.info(f"Analyzing file: {file_change.filename}")
        logger.debug(f"Changes:\n{diff_description}")

        user = f"File: {file_change.filename}\n\n"
        if file_change.full_content:
            user += f"Full file content:\n{file_change.full_content}\n\n"
        user += f"Changes:\n{diff_description}"

        answer = await self._ask(get_review_prompt(project_prompts, file_change.scheme), user)
        return parse_review_response(answer, file_change)

    async def review_pr_info(self, details: PRDetails) -> str:
        user = (
            f"PR Description:\n{details.description}\n"
            f"Number of files changed: {len(details.files)}\n"
            f"Branch name: {details.branch_name}\n"
            f"Commit messages: {', '.join(details.commit_messages)}"
        )
        return await self._ask(get_pr_info_prompt(), user)

    async def reply(self, thread: CommentThread, project_prompts: str = "") -> str:
        system = get_reply_prompt(
            thread.original_comment,
            thread.user_login,
            thread.line_content,
            thread.diff_context,
            project_prompts,
        )
        role = "the PR author" if thread.is_pr_author else "a reviewer"
        user = (
            f"Original comment: {thread.original_comment}\n"
            f"Reply from @{thread.user_login} ({role}): {thread.reply}"
        )
        return await self._ask(system, user)
