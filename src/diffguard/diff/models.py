"""Data models for parsed patches.

Every type here is a frozen dataclass holding tuples, so a parsed
``FileChange`` cannot be mutated after the parser returns it.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import Any

# Addressing scheme names; the strategies live in diffguard.diff.addressing.
LINE_SCHEME = "line"
POSITION_SCHEME = "position"


class ChangeType(str, Enum):
    """Kinds of hunk body lines."""

    ADDITION = "add"
    DELETION = "del"
    CONTEXT = "context"


@dataclass(frozen=True)
class HunkHeader:
    """Decoded ``@@ -a,b +c,d @@`` line."""

    old_start: int
    old_lines: int
    new_start: int
    new_lines: int


@dataclass(frozen=True)
class Change:
    """A single classified body line."""

    type: ChangeType
    content: str
    address: int


@dataclass(frozen=True)
class ChangedLine:
    """An addition or deletion as exposed on ``FileChange``."""

    content: str
    address: int


@dataclass(frozen=True)
class Hunk:
    """A contiguous block of a patch."""

    old_start: int
    old_lines: int
    new_start: int
    new_lines: int
    content: str = ""
    changes: tuple[Change, ...] = ()

    @property
    def header(self) -> HunkHeader:
        return HunkHeader(self.old_start, self.old_lines, self.new_start, self.new_lines)

    @property
    def additions(self) -> tuple[Change, ...]:
        return tuple(c for c in self.changes if c.type == ChangeType.ADDITION)

    @property
    def deletions(self) -> tuple[Change, ...]:
        return tuple(c for c in self.changes if c.type == ChangeType.DELETION)

    @property
    def context(self) -> tuple[Change, ...]:
        return tuple(c for c in self.changes if c.type == ChangeType.CONTEXT)

    def contains_address(self, address: int) -> bool:
        """True if a non-deletion change in this hunk sits at ``address``."""
        return any(
            c.address == address and c.type != ChangeType.DELETION
            for c in self.changes
        )


@dataclass(frozen=True)
class FileChange:
    """All hunks of one file's patch plus flattened additions/deletions."""

    filename: str
    patch: str = ""
    hunks: tuple[Hunk, ...] = ()
    additions: tuple[ChangedLine, ...] = ()
    deletions: tuple[ChangedLine, ...] = ()
    scheme: str = LINE_SCHEME
    full_content: str | None = None

    def is_valid_address(self, address: int) -> bool:
        """Does ``address`` correspond to an actual addition in this file?"""
        return any(a.address == address for a in self.additions)

    def hunk_for_address(self, address: int) -> Hunk | None:
        for hunk in self.hunks:
            if hunk.contains_address(address):
                return hunk
        return None

    def line_at(self, address: int) -> str | None:
        for hunk in self.hunks:
            for change in hunk.changes:
                if change.address == address and change.type != ChangeType.DELETION:
                    return change.content
        return None

    def with_full_content(self, content: str | None) -> FileChange:
        """Return a copy carrying the file's full post-change content."""
        return replace(self, full_content=content)

    def summary(self) -> dict[str, Any]:
        return {
            "filename": self.filename,
            "scheme": self.scheme,
            "hunks": len(self.hunks),
            "additions": len(self.additions),
            "deletions": len(self.deletions),
        }
