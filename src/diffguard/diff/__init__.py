"""Unified diff parsing and change addressing."""

from diffguard.diff.addressing import (
    DEFAULT_SCHEME,
    AddressingScheme,
    DiffPositionScheme,
    LineNumberScheme,
    get_scheme,
)
from diffguard.diff.models import (
    LINE_SCHEME,
    POSITION_SCHEME,
    Change,
    ChangedLine,
    ChangeType,
    FileChange,
    Hunk,
    HunkHeader,
)
from diffguard.diff.parser import (
    classify_line,
    is_valid_address,
    parse_hunk_header,
    parse_patch,
    process_file_change,
)

__all__ = [
    "DEFAULT_SCHEME",
    "LINE_SCHEME",
    "POSITION_SCHEME",
    "AddressingScheme",
    "Change",
    "ChangedLine",
    "ChangeType",
    "DiffPositionScheme",
    "FileChange",
    "Hunk",
    "HunkHeader",
    "LineNumberScheme",
    "classify_line",
    "get_scheme",
    "is_valid_address",
    "parse_hunk_header",
    "parse_patch",
    "process_file_change",
]
