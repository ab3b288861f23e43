"""Pull request data as returned by the GitHub REST API."""

from __future__ import annotations

from pydantic import BaseModel, Field


class PullRequestFile(BaseModel):
    """One entry of ``GET /pulls/{n}/files``."""

    filename: str
    status: str = "modified"  # added, removed, modified, renamed, ...
    patch: str | None = None  # absent for binary files and oversized diffs
    additions: int = 0
    deletions: int = 0
    previous_filename: str | None = None


class PRDetails(BaseModel):
    """Everything the reviewer needs to know about a pull request."""

    number: int
    title: str = ""
    description: str = ""
    author: str = ""
    commit_id: str
    branch_name: str = ""
    base_ref: str = ""
    commit_messages: list[str] = Field(default_factory=list)
    files: list[PullRequestFile] = Field(default_factory=list)


class ReviewCommentData(BaseModel):
    """One entry of ``GET /pulls/{n}/comments``."""

    id: int
    body: str = ""
    path: str = ""
    user_login: str = ""
    in_reply_to_id: int | None = None
    line: int | None = None
    position: int | None = None
    created_at: str = ""


class CommentThread(BaseModel):
    """A bot review comment and the user reply that awaits an answer."""

    root_id: int
    path: str
    original_comment: str
    reply: str
    user_login: str
    is_pr_author: bool = False
    line_content: str = ""
    diff_context: str = ""
