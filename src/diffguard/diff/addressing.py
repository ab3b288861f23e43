"""Addressing schemes for hunk body lines.

Review comments can target a change in two incompatible ways:

- ``line``: the absolute line number in the new file (additions and context)
  or the old file (deletions), as used by comments created with ``line`` +
  ``side``.
- ``position``: a 1-based counter over every classified body line of the
  whole patch, as used by the legacy ``position`` comment parameter.

A parse uses exactly one scheme, chosen by the caller.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence

from diffguard.diff.models import LINE_SCHEME, POSITION_SCHEME, Change, ChangeType, HunkHeader
from diffguard.exceptions import DiffError


class AddressingScheme(ABC):
    """Computes the address of a change at the moment it is recorded."""

    name: str = ""

    @abstractmethod
    def address(
        self,
        header: HunkHeader,
        recorded: Sequence[Change],
        change_type: ChangeType,
        position: int,
    ) -> int:
        """Address for the next change of a hunk.

        Args:
            header: Header of the hunk being filled.
            recorded: Changes already appended to this hunk.
            change_type: Type of the change being appended.
            position: Cumulative 1-based position of this line in the patch.
        """
        ...

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


class LineNumberScheme(AddressingScheme):
    """File line numbers, derived from the hunk start plus same-side lines seen."""

    name = LINE_SCHEME

    def address(
        self,
        header: HunkHeader,
        recorded: Sequence[Change],
        change_type: ChangeType,
        position: int,
    ) -> int:
        if change_type == ChangeType.DELETION:
            seen = sum(1 for c in recorded if c.type != ChangeType.ADDITION)
            return header.old_start + seen
        seen = sum(1 for c in recorded if c.type != ChangeType.DELETION)
        return header.new_start + seen


class DiffPositionScheme(AddressingScheme):
    """Cumulative diff position, not reset between hunks."""

    name = POSITION_SCHEME

    def address(
        self,
        header: HunkHeader,
        recorded: Sequence[Change],
        change_type: ChangeType,
        position: int,
    ) -> int:
        return position


SCHEMES: dict[str, AddressingScheme] = {
    LineNumberScheme.name: LineNumberScheme(),
    DiffPositionScheme.name: DiffPositionScheme(),
}

DEFAULT_SCHEME = LineNumberScheme.name


def get_scheme(scheme: str | AddressingScheme) -> AddressingScheme:
    """Resolve a scheme name ("line" or "position") to its strategy."""
    if isinstance(scheme, AddressingScheme):
        return scheme
    try:
        return SCHEMES[scheme.strip().lower()]
    except KeyError:
        raise DiffError(
            f"Unknown addressing scheme: '{scheme}'. "
            f"Supported schemes: {', '.join(SCHEMES)}"
        ) from None
