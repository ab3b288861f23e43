"""Shared test fixtures for diffguard."""

from __future__ import annotations

import json
import subprocess
from pathlib import Path

import pytest

from diffguard.llm.base import LLMProvider, LLMResponse, Message

# Two hunks: a modified import block and an added line near the end of
# the file, followed by a "no newline" marker.
SAMPLE_PATCH = "\n".join([
    "@@ -1,4 +1,5 @@",
    " import os",
    "-import sys",
    "+import sys, json",
    "+import re",
    " ",
    " def main():",
    "@@ -10,3 +11,4 @@ def main():",
    "     x = 1",
    "+    y = 2",
    "     return x",
    "\\ No newline at end of file",
])

NEW_FILE_PATCH = "\n".join([
    "@@ -0,0 +1,3 @@",
    "+\"\"\"A new module.\"\"\"",
    "+",
    "+VALUE = 1",
])


@pytest.fixture
def sample_patch() -> str:
    return SAMPLE_PATCH


@pytest.fixture
def new_file_patch() -> str:
    return NEW_FILE_PATCH


class FakeLLM(LLMProvider):
    """Returns canned answers in order and records every request."""

    def __init__(self, answers: list[str] | None = None) -> None:
        super().__init__(model="fake")
        self.answers = list(answers or [])
        self.requests: list[list[Message]] = []

    async def complete(
        self,
        messages: list[Message],
        temperature: float = 0.0,
        max_tokens: int = 4096,
    ) -> LLMResponse:
        self.requests.append(messages)
        content = self.answers.pop(0) if self.answers else ""
        return LLMResponse(content=content, finish_reason="stop")


@pytest.fixture
def fake_llm() -> FakeLLM:
    return FakeLLM()


class FakeGh:
    """Stands in for ``subprocess.run`` when the client shells out to ``gh api``.

    ``responses`` maps ``(method, endpoint)`` to the JSON-serializable body
    to print, or to an ``int`` exit code to simulate a failure.
    """

    def __init__(self, responses: dict[tuple[str, str], object] | None = None) -> None:
        self.responses = dict(responses or {})
        self.calls: list[dict] = []

    def __call__(self, args, input=None, **kwargs) -> subprocess.CompletedProcess:
        endpoint = args[2]
        method = args[args.index("--method") + 1]
        self.calls.append({
            "method": method,
            "endpoint": endpoint,
            "payload": json.loads(input) if input else None,
            "env": kwargs.get("env"),
        })

        response = self.responses.get((method, endpoint), {} if method == "POST" else [])
        if isinstance(response, int):
            return subprocess.CompletedProcess(args, response, stdout="", stderr="HTTP 422")
        return subprocess.CompletedProcess(args, 0, stdout=json.dumps(response), stderr="")

    def posted(self) -> list[dict]:
        return [c for c in self.calls if c["method"] == "POST"]


@pytest.fixture
def gh() -> FakeGh:
    return FakeGh()


@pytest.fixture
def prompts_dir(tmp_path: Path) -> Path:
    """A prompts/<project>/ directory with two guideline files."""
    project = tmp_path / "prompts" / "webapp"
    project.mkdir(parents=True)
    (project / "b_naming.md").write_text("Use snake_case for functions.")
    (project / "a_style.md").write_text("Keep functions short.")
    return tmp_path / "prompts"
