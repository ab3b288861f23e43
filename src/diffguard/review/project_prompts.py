"""Project-specific review guidelines loaded from disk."""

from __future__ import annotations

import logging
from pathlib import Path

logger = logging.getLogger("diffguard.review")


def read_project_prompts(prompts_dir: Path | str, project_name: str) -> str:
    """Concatenate every guideline file under ``<prompts_dir>/<project_name>``.

    Files are read in name order and rendered as ``"<file>:\\n<content>"``
    blocks separated by a blank line. A missing directory means no
    guidelines.
    """
    project_dir = Path(prompts_dir) / project_name if project_name else Path(prompts_dir)
    logger.debug(f"Reading prompts from: {project_dir}")

    if not project_dir.is_dir():
        return ""

    blocks = []
    for path in sorted(project_dir.iterdir()):
        if not path.is_file():
            continue
        blocks.append(f"{path.name}:\n{path.read_text(encoding='utf-8')}")

    return "\n\n".join(blocks).strip()
