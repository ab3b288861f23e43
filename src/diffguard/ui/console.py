"""Rich-powered console output for diffguard."""

from __future__ import annotations

from rich.console import Console as RichConsole
from rich.markdown import Markdown
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from diffguard import __version__
from diffguard.diff.models import ChangeType, FileChange
from diffguard.github.models import CommentThread
from diffguard.review.pipeline import ReviewResult

CHANGE_STYLES = {
    ChangeType.ADDITION: ("+", "green"),
    ChangeType.DELETION: ("-", "red"),
    ChangeType.CONTEXT: (" ", "dim"),
}


class Console:
    """Terminal output for diffguard using Rich."""

    def __init__(self, console: RichConsole | None = None) -> None:
        self.console = console or RichConsole()

    def banner(self) -> None:
        """Show the diffguard banner."""
        self.console.print(
            Panel(
                f"[bold cyan]diffguard[/bold cyan] [dim]v{__version__}[/dim]\n"
                "[dim]LLM pull request reviewer[/dim]",
                border_style="cyan",
                padding=(1, 2),
            )
        )

    def success(self, message: str) -> None:
        self.console.print(f"[green]✓[/green] {escape(message)}")

    def error(self, message: str) -> None:
        self.console.print(f"[red]✗[/red] {escape(message)}")

    def warning(self, message: str) -> None:
        self.console.print(f"[yellow]![/yellow] {escape(message)}")

    def info(self, message: str) -> None:
        self.console.print(f"[blue]i[/blue] {escape(message)}")

    def markdown(self, text: str) -> None:
        """Render markdown text."""
        self.console.print(Markdown(text))

    def show_file_change(self, file_change: FileChange) -> None:
        """Display every hunk of a parsed patch with its addresses."""
        self.console.print(
            f"[bold]{escape(file_change.filename)}[/bold] "
            f"[dim]({file_change.scheme} addressing)[/dim] "
            f"[green]+{len(file_change.additions)}[/green] "
            f"[red]-{len(file_change.deletions)}[/red]"
        )
        if not file_change.hunks:
            self.warning("No hunks (empty, binary or rename-only patch)")
            return

        for hunk in file_change.hunks:
            table = Table(
                title=(
                    f"@@ -{hunk.old_start},{hunk.old_lines} "
                    f"+{hunk.new_start},{hunk.new_lines} @@"
                ),
                border_style="cyan",
                show_edge=False,
            )
            table.add_column("Addr", justify="right", style="cyan")
            table.add_column("", width=1)
            table.add_column("Content", overflow="fold")

            for change in hunk.changes:
                marker, style = CHANGE_STYLES[change.type]
                table.add_row(
                    str(change.address),
                    f"[{style}]{marker}[/{style}]",
                    f"[{style}]{escape(change.content)}[/{style}]",
                )
            self.console.print(table)

    def show_review_result(self, result: ReviewResult) -> None:
        """Display review comments grouped by file."""
        if result.pr_info:
            self.console.print(
                Panel(
                    Markdown(result.pr_info),
                    title="[bold]Pull Request[/bold]",
                    border_style="blue",
                )
            )

        table = Table(title=f"Review of PR #{result.pr_number}", border_style="cyan")
        table.add_column("File", style="bold")
        table.add_column(result.scheme.capitalize(), justify="right", style="cyan")
        table.add_column("Comment")

        for path, comments in result.comments.items():
            for comment in comments:
                table.add_row(escape(path), str(comment.address), escape(comment.body))

        if result.total_comments:
            self.console.print(table)
        else:
            self.success("No comments on added lines")

        if result.skipped:
            self.console.print(f"[dim]Skipped: {escape(', '.join(result.skipped))}[/dim]")

    def show_replies(self, replies: list[tuple[CommentThread, str]]) -> None:
        for thread, answer in replies:
            self.console.print(
                Panel(
                    Markdown(answer),
                    title=f"[bold]{escape(thread.path)}[/bold] reply to @{escape(thread.user_login)}",
                    border_style="green",
                )
            )
