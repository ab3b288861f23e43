"""LLM-backed review of parsed file changes."""

from diffguard.review.reviewer import ReviewComment, Reviewer, describe_changes, parse_review_response

__all__ = [
    "ReviewComment",
    "Reviewer",
    "describe_changes",
    "parse_review_response",
]
