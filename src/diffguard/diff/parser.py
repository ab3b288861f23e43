"""Unified diff patch parser.

Turns the per-file ``patch`` text returned by the hosting provider into a
``FileChange``: ordered hunks, each with classified and addressed changes,
plus flattened addition/deletion lists.

Parsing never raises on malformed input. Bad hunk headers, body lines that
appear before the first header, "no newline" markers and empty lines are
dropped and parsing continues.
"""

from __future__ import annotations

import logging
import re

from diffguard.diff.addressing import DEFAULT_SCHEME, AddressingScheme, get_scheme
from diffguard.diff.models import (
    Change,
    ChangedLine,
    ChangeType,
    FileChange,
    Hunk,
    HunkHeader,
)

logger = logging.getLogger("diffguard.diff")

# @@ -old_start[,old_lines] +new_start[,new_lines] @@ [section heading]
HUNK_HEADER_RE = re.compile(r"^@@ -(\d+)(?:,(\d+))? \+(\d+)(?:,(\d+))? @@")

NO_NEWLINE_MARKER = "\\"


def parse_hunk_header(line: str) -> HunkHeader | None:
    """Decode a hunk header line, or return None if it doesn't match."""
    match = HUNK_HEADER_RE.match(line)
    if not match:
        return None
    return HunkHeader(
        old_start=int(match.group(1)),
        old_lines=int(match.group(2) or "1"),
        new_start=int(match.group(3)),
        new_lines=int(match.group(4) or "1"),
    )


def classify_line(line: str) -> tuple[ChangeType, str] | None:
    """Classify a hunk body line and strip its one-character marker.

    Returns None for lines that are dropped: "no newline at end of file"
    markers and zero-length lines. Any other unmarked line is context.
    """
    if line.startswith("+"):
        return ChangeType.ADDITION, line[1:]
    if line.startswith("-"):
        return ChangeType.DELETION, line[1:]
    if line.startswith(NO_NEWLINE_MARKER):
        return None
    if line:
        return ChangeType.CONTEXT, line[1:]
    return None


def split_hunks(patch: str) -> list[tuple[HunkHeader, list[str]]]:
    """Group patch lines under the hunk header that precedes them."""
    blocks: list[tuple[HunkHeader, list[str]]] = []

    for line in patch.split("\n"):
        if line.startswith("@@"):
            header = parse_hunk_header(line)
            if header is None:
                logger.debug(f"Ignoring malformed hunk header: {line!r}")
                continue
            blocks.append((header, []))
        elif blocks:
            blocks[-1][1].append(line)

    return blocks


def build_hunk(
    header: HunkHeader,
    body: list[str],
    scheme: AddressingScheme,
    position: int = 0,
) -> tuple[Hunk, int]:
    """Classify and address one hunk's body lines.

    ``position`` is the diff position reached before this hunk. The
    position after its last classified line is returned with the hunk, so
    callers thread it into the next hunk.
    """
    changes: list[Change] = []
    raw_lines: list[str] = []

    for line in body:
        classified = classify_line(line)
        if classified is None:
            continue
        change_type, content = classified
        position += 1
        address = scheme.address(header, changes, change_type, position)
        changes.append(Change(type=change_type, content=content, address=address))
        raw_lines.append(line)

    hunk = Hunk(
        old_start=header.old_start,
        old_lines=header.old_lines,
        new_start=header.new_start,
        new_lines=header.new_lines,
        content="\n".join(raw_lines),
        changes=tuple(changes),
    )
    return hunk, position


def parse_patch(
    patch: str | None, scheme: str | AddressingScheme = DEFAULT_SCHEME
) -> tuple[Hunk, ...]:
    """Parse a single file's patch into hunks."""
    if not patch:
        return ()

    strategy = get_scheme(scheme)
    hunks: list[Hunk] = []
    position = 0
    for header, body in split_hunks(patch):
        hunk, position = build_hunk(header, body, strategy, position)
        hunks.append(hunk)
    return tuple(hunks)


def process_file_change(
    filename: str,
    patch: str | None,
    scheme: str | AddressingScheme = DEFAULT_SCHEME,
) -> FileChange:
    """Parse a file's patch and collect its additions and deletions.

    An empty or missing patch (binary files, pure renames, patches dropped
    by the provider's size limit) yields a FileChange with no hunks.
    """
    strategy = get_scheme(scheme)
    hunks = parse_patch(patch, strategy)

    additions: list[ChangedLine] = []
    deletions: list[ChangedLine] = []
    for hunk in hunks:
        for change in hunk.changes:
            if change.type == ChangeType.ADDITION:
                additions.append(ChangedLine(content=change.content, address=change.address))
            elif change.type == ChangeType.DELETION:
                deletions.append(ChangedLine(content=change.content, address=change.address))

    return FileChange(
        filename=filename,
        patch=patch or "",
        hunks=hunks,
        additions=tuple(additions),
        deletions=tuple(deletions),
        scheme=strategy.name,
    )


def is_valid_address(file_change: FileChange, address: int) -> bool:
    """Check that a proposed comment address targets a real addition."""
    return file_change.is_valid_address(address)
