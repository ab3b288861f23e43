"""Command-line interface for diffguard."""

from __future__ import annotations

import asyncio
import json
import logging
import sys
from pathlib import Path

import click

from diffguard import __version__
from diffguard.config import (
    ProjectConfig,
    find_project_root,
    load_config,
    save_config,
    set_config_value,
)
from diffguard.diff.addressing import DEFAULT_SCHEME, SCHEMES
from diffguard.exceptions import DiffguardError
from diffguard.ui.console import Console

console = Console()


def _get_project_root(path: str | None = None) -> Path:
    """Find the project root, falling back to the current directory."""
    if path:
        root = Path(path).resolve()
        if not root.exists():
            console.error(f"Path does not exist: {path}")
            sys.exit(1)
        return root
    return find_project_root() or Path.cwd()


def _load(path: str | None) -> tuple[Path, ProjectConfig]:
    root = _get_project_root(path)
    try:
        return root, load_config(root)
    except DiffguardError as e:
        console.error(str(e))
        sys.exit(1)


def _resolve_pr(repo: str | None, pr_number: int | None) -> tuple[str, int]:
    """Use explicit --repo/--pr, or the Actions event context."""
    if repo and pr_number:
        return repo, pr_number

    from diffguard.github.event import load_pr_context

    context = load_pr_context()
    if context is None:
        console.error(
            "No pull request context. Pass --repo and --pr, "
            "or run inside a GitHub Actions pull_request workflow."
        )
        sys.exit(1)
    return repo or context[0], pr_number or context[1]


def _make_services(config: ProjectConfig, repo: str):
    """Create the GitHub client and reviewer, or exit with an error."""
    from diffguard.github.client import GitHubClient
    from diffguard.llm.factory import create_provider
    from diffguard.review.reviewer import Reviewer

    llm_config = config.llm
    if not llm_config.api_key and llm_config.provider not in ("local",):
        provider = llm_config.provider
        env_var = {"openai": "OPENAI_API_KEY", "anthropic": "ANTHROPIC_API_KEY"}.get(
            provider, f"{provider.upper()}_API_KEY"
        )
        console.error(
            f"No API key found for {provider}. "
            f"Set the {env_var} environment variable or configure it with:\n"
            f"  diffguard config set llm.api_key_env {env_var}"
        )
        sys.exit(1)

    try:
        llm = create_provider(llm_config)
        client = GitHubClient(repo, token=config.github.token)
    except DiffguardError as e:
        console.error(str(e))
        sys.exit(1)

    reviewer = Reviewer(llm, temperature=llm_config.temperature, max_tokens=llm_config.max_tokens)
    return client, reviewer


@click.group()
@click.version_option(version=__version__, prog_name="diffguard")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging.")
def main(verbose: bool):
    """diffguard - review pull requests with an LLM, one added line at a time."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )


@main.command()
@click.option("--path", "-p", default=None, help="Path to the project root.")
@click.option("--provider", default=None, help="LLM provider (openai, anthropic, local).")
@click.option("--model", default=None, help="LLM model name.")
@click.option(
    "--scheme",
    type=click.Choice(list(SCHEMES)),
    default=None,
    help="How review comments address lines.",
)
def init(path: str | None, provider: str | None, model: str | None, scheme: str | None):
    """Create .diffguard/config.json for a repository."""
    root = Path(path or ".").resolve()
    if not root.exists():
        console.error(f"Path does not exist: {root}")
        sys.exit(1)

    console.banner()
    console.info(f"Initializing diffguard for: {root}")

    _, config = _load(str(root))
    config.name = root.name
    config.root_path = str(root)

    if provider:
        config.llm.provider = provider
    if model:
        config.llm.model = model
    if scheme:
        config.review.scheme = scheme

    save_config(root, config)
    console.success("Configuration saved to .diffguard/config.json")


# =========================================================================
# Patch inspection
# =========================================================================

@main.command()
@click.argument("patch_file", type=click.File("r"))
@click.option(
    "--scheme", "-s",
    type=click.Choice(list(SCHEMES)),
    default=DEFAULT_SCHEME,
    help="Addressing scheme (default: line).",
)
@click.option("--filename", "-f", default=None, help="File name to report (default: patch file name).")
@click.option(
    "--format", "output_format",
    type=click.Choice(["table", "json"]),
    default="table",
    help="Output format.",
)
def parse(patch_file, scheme: str, filename: str | None, output_format: str):
    """Parse a single-file patch and show its hunks and change addresses.

    PATCH_FILE is the per-file patch text (use - for stdin).

    Examples:

        diffguard parse changes.patch

        gh api repos/o/r/pulls/1/files --jq '.[0].patch' | diffguard parse - -s position
    """
    from diffguard.diff.parser import process_file_change

    text = patch_file.read()
    name = filename or getattr(patch_file, "name", "<stdin>")
    file_change = process_file_change(name, text, scheme)

    if output_format == "json":
        data = file_change.summary()
        data["hunks"] = [
            {
                "old_start": h.old_start,
                "old_lines": h.old_lines,
                "new_start": h.new_start,
                "new_lines": h.new_lines,
                "changes": [
                    {"type": c.type.value, "address": c.address, "content": c.content}
                    for c in h.changes
                ],
            }
            for h in file_change.hunks
        ]
        data["additions"] = [{"address": a.address, "content": a.content} for a in file_change.additions]
        data["deletions"] = [{"address": d.address, "content": d.content} for d in file_change.deletions]
        click.echo(json.dumps(data, indent=2))
    else:
        console.show_file_change(file_change)


# =========================================================================
# Review bot
# =========================================================================

@main.command()
@click.option("--path", "-p", default=None, help="Path to the project root.")
@click.option("--repo", "-r", default=None, help="Repository as owner/name.")
@click.option("--pr", "pr_number", type=int, default=None, help="Pull request number.")
@click.option("--dry-run", is_flag=True, help="Show comments without posting them.")
@click.option("--json", "as_json", is_flag=True, help="Print the result as JSON.")
def review(path: str | None, repo: str | None, pr_number: int | None, dry_run: bool, as_json: bool):
    """Review a pull request and post comments on added lines.

    Usage in CI:

        diffguard review

    Local usage:

        diffguard review --repo owner/name --pr 42 --dry-run
    """
    root, config = _load(path)
    repo, pr_number = _resolve_pr(repo, pr_number)
    client, reviewer = _make_services(config, repo)

    from diffguard.review.pipeline import run_review

    try:
        result = asyncio.run(run_review(client, reviewer, config, pr_number, root, dry_run=dry_run))
    except DiffguardError as e:
        console.error(str(e))
        sys.exit(1)

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        return

    console.show_review_result(result)
    if not dry_run:
        console.success(f"Posted {result.posted} comment(s)")
        if result.failed:
            console.warning(f"{result.failed} comment(s) could not be posted")


@main.command()
@click.option("--path", "-p", default=None, help="Path to the project root.")
@click.option("--repo", "-r", default=None, help="Repository as owner/name.")
@click.option("--pr", "pr_number", type=int, default=None, help="Pull request number.")
@click.option("--dry-run", is_flag=True, help="Show answers without posting them.")
def reply(path: str | None, repo: str | None, pr_number: int | None, dry_run: bool):
    """Answer users who replied to the bot's review comments."""
    root, config = _load(path)
    repo, pr_number = _resolve_pr(repo, pr_number)
    client, reviewer = _make_services(config, repo)

    from diffguard.review.pipeline import run_replies

    try:
        replies = asyncio.run(run_replies(client, reviewer, config, pr_number, root, dry_run=dry_run))
    except DiffguardError as e:
        console.error(str(e))
        sys.exit(1)

    if not replies:
        console.info("No replies awaiting an answer")
        return
    console.show_replies(replies)


# =========================================================================
# Config Management
# =========================================================================

@main.command("config")
@click.argument("action", type=click.Choice(["set", "get", "show"]))
@click.argument("key", required=False)
@click.argument("value", required=False)
@click.option("--path", "-p", default=None, help="Path to the project root.")
def config_cmd(action: str, key: str | None, value: str | None, path: str | None):
    """Manage diffguard configuration."""
    root, config = _load(path)

    if action == "show":
        console.console.print_json(json.dumps(config.model_dump(), indent=2))
    elif action == "get":
        if not key:
            console.error("Usage: diffguard config get <key>")
            sys.exit(1)
        data = config.model_dump()
        for part in key.split("."):
            if isinstance(data, dict) and part in data:
                data = data[part]
            else:
                console.error(f"Unknown key: {key}")
                sys.exit(1)
        click.echo(f"{key} = {data}")
    elif action == "set":
        if not key or value is None:
            console.error("Usage: diffguard config set <key> <value>")
            sys.exit(1)
        # Try to parse as JSON for non-string values
        try:
            parsed_value = json.loads(value)
        except json.JSONDecodeError:
            parsed_value = value

        try:
            config = set_config_value(config, key, parsed_value)
        except KeyError:
            console.error(f"Unknown config key: {key}")
            sys.exit(1)
        except DiffguardError as e:
            console.error(str(e))
            sys.exit(1)
        save_config(root, config)
        console.success(f"Set {key} = {parsed_value}")


if __name__ == "__main__":
    main()
