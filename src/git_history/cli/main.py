"""Main CLI interface for Git History."""

import logging
import sys
from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.progress import BarColumn, MofNCompleteColumn, Progress, TextColumn
from rich.table import Table

from git_history import __version__
from git_history.config import DEFAULT_OUTPUT_DB, AnalysisConfig
from git_history.core.analyzer import Analyzer, ProgressReporter
from git_history.errors import GitHistoryError
from git_history.models.commit import Commit
from git_history.models.result import AnalysisResult

console = Console()
err_console = Console(stderr=True)


class ConsoleReporter(ProgressReporter):
    """Prints analysis progress to a rich console.

    Normal mode shows a single progress line; verbose mode prints one line
    per batch and one line per commit instead.
    """

    def __init__(self, out: Console, verbose: bool = False):
        self.out = out
        self.verbose = verbose
        self._progress: Optional[Progress] = None
        self._task = None

    def on_repository_opened(self, path: Path) -> None:
        self.out.print("[green]✓[/green] Repository opened successfully")

    def on_database_ready(self, path: Path) -> None:
        self.out.print(f"[green]✓[/green] Database initialized: {path}", highlight=False)

    def on_commits_found(self, total: int, skipped: int) -> None:
        self.out.print(f"[green]✓[/green] Found {total} commits")
        if skipped:
            self.out.print(f"  Skipping {skipped} commits already in the database")

        if not self.verbose and total:
            self._progress = Progress(
                TextColumn("  Processing:"),
                BarColumn(),
                MofNCompleteColumn(),
                TextColumn("commits"),
                console=self.out,
            )
            self._task = self._progress.add_task("commits", total=total)
            self._progress.start()

    def on_batch(self, start: int, end: int, total: int) -> None:
        if self.verbose:
            self.out.print(f"  Processing commits {start}-{end}/{total}")

    def on_commit(self, commit: Commit) -> None:
        if self.verbose:
            self.out.print(
                f"    [{commit.short_hash}] {commit.summary}",
                markup=False,
                highlight=False,
            )
        elif self._progress is not None:
            self._progress.advance(self._task)

    def on_complete(self, result: AnalysisResult) -> None:
        self.close()
        self.out.print("[green]✓[/green] All commits processed")

    def close(self) -> None:
        """Stop the progress display if it is running."""
        if self._progress is not None:
            self._progress.stop()
            self._progress = None


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.INFO if verbose else logging.WARNING,
        format="%(levelname)s:%(name)s:%(message)s",
    )
    # GitPython logs every git invocation
    logging.getLogger("git").setLevel(logging.WARNING)


def _print_summary(result: AnalysisResult, output_db: Path) -> None:
    table = Table(title="📊 Analysis complete!")
    table.add_column("Metric", style="cyan", no_wrap=True)
    table.add_column("Value", style="green")

    table.add_row("Total commits", str(result.total_commits))
    table.add_row("Total files", str(result.total_files))
    table.add_row("Processed commits", str(result.processed_commits))
    if result.skipped_commits:
        table.add_row("Skipped commits", str(result.skipped_commits))
    table.add_row("Processing time", f"{result.processing_time:.2f}s")
    table.add_row("Database", str(output_db))

    console.print(table)


@click.group()
@click.version_option(version=__version__, prog_name="git-history")
def main():
    """Git History - repository history analyzer with DuckDB."""


@main.command()
@click.option(
    "--repo",
    "-r",
    type=click.Path(path_type=Path),
    default=".",
    show_default=True,
    help="Repository path",
)
@click.option(
    "--output",
    "-o",
    type=click.Path(dir_okay=False, path_type=Path),
    default=DEFAULT_OUTPUT_DB,
    show_default=True,
    help="Output database path",
)
@click.option("--branch", "-b", help="Target branch (default: traverse from HEAD)")
@click.option(
    "--incremental",
    "-i",
    is_flag=True,
    help="Skip commits already stored in the database",
)
@click.option("--verbose", "-v", is_flag=True, help="Show one line per commit")
@click.option("--limit", "-l", type=int, help="Limit number of commits to analyze")
def analyze(
    repo: Path,
    output: Path,
    branch: Optional[str],
    incremental: bool,
    verbose: bool,
    limit: Optional[int],
):
    """Analyze a git repository and store its history in DuckDB."""
    _configure_logging(verbose)
    reporter = ConsoleReporter(console, verbose=verbose)

    try:
        config = AnalysisConfig.build(
            repo_path=repo,
            output_db=output,
            branch=branch,
            incremental=incremental,
            verbose=verbose,
            limit=limit,
        )
        console.print(f"🔍 Analyzing repository: {config.repo_path}", highlight=False)
        result = Analyzer(config, reporter).analyze()
    except GitHistoryError as e:
        reporter.close()
        err_console.print(
            f"\n❌ Error: {e}", markup=False, highlight=False, soft_wrap=True
        )
        sys.exit(1)

    _print_summary(result, config.output_db)
    console.print("\n[bold green]✨ Success![/bold green]")
    if result.is_empty:
        console.print("[yellow]⚠️  No commits found in the repository.[/yellow]")


if __name__ == "__main__":
    main()
