"""Branchsweep CLI - delete local branches whose work already landed on trunk."""

from pathlib import Path
from typing import NoReturn, Optional

import typer
from rich.console import Console

from . import __version__
from .cleanup import BranchSweeper
from .config import (
    DEFAULT_DIFF_TOOL,
    DEFAULT_MIN_DIFF_SCORE,
    DEFAULT_MIN_DIFF_SIZE,
    DEFAULT_MIN_SUBJECT_SCORE,
    TRUNK_BRANCHES,
    SweepConfig,
    is_trunk_branch,
)
from .git_basic import GitBasicInterface, GitError
from .report import FORMATS, print_document, print_outcome

app = typer.Typer(
    name="branchsweep",
    help="Delete local branches that were merged, rebased or squash-merged into trunk",
    add_completion=False,
)

console = Console()
err_console = Console(stderr=True)


def version_callback(value: bool) -> None:
    """Print the version and exit."""
    if value:
        console.print(f"branchsweep {__version__}", highlight=False)
        raise typer.Exit()


def fail(message: str) -> NoReturn:
    """Print an error on stderr and exit with status 1."""
    err_console.print(f"[red]Error: {message}[/red]")
    raise typer.Exit(1)


@app.command()
def sweep(
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Show git commands and per-branch scores on stderr"
    ),
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        "-V",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit",
    ),
    perfect: bool = typer.Option(
        False, "--perfect", help="Only act on exact and perfect matches, hide potential merges"
    ),
    min_subject_score: float = typer.Option(
        DEFAULT_MIN_SUBJECT_SCORE,
        "--min-subject-score",
        help="Subject similarity a match must exceed",
    ),
    min_diff_score: float = typer.Option(
        DEFAULT_MIN_DIFF_SCORE, "--min-diff-score", help="Diff similarity a match must exceed"
    ),
    min_diff_size: int = typer.Option(
        DEFAULT_MIN_DIFF_SIZE,
        "--min-diff-size",
        help="Diff size in characters a perfect match must exceed before it is deleted",
    ),
    dry_run: bool = typer.Option(
        False, "--dry-run", help="Print the delete commands instead of running them"
    ),
    diff_tool: str = typer.Option(
        DEFAULT_DIFF_TOOL, "--diff-tool", help="Program used in the suggested compare commands"
    ),
    format_type: str = typer.Option("text", "--format", help="Output format: text, json or yaml"),
    repo: Optional[Path] = typer.Option(
        None, "--repo", help="Repository to sweep (defaults to the current directory)"
    ),
) -> None:
    """Check every local branch against the current trunk branch."""
    if format_type not in FORMATS:
        fail(f"Unknown format '{format_type}', expected one of: {', '.join(FORMATS)}")

    try:
        config = SweepConfig(
            min_subject_score=min_subject_score,
            min_diff_score=min_diff_score,
            min_diff_size=min_diff_size,
            perfect_only=perfect,
            dry_run=dry_run,
            diff_tool=diff_tool,
            verbose=verbose,
        )
    except ValueError as e:
        fail(str(e))

    try:
        git = GitBasicInterface(repo_path=repo, console=err_console, verbose=verbose)
        trunk = git.get_current_branch()
    except GitError as e:
        fail(str(e))

    if not is_trunk_branch(trunk):
        fail(
            f"Current branch '{trunk}' is not a trunk branch "
            f"(expected one of: {', '.join(TRUNK_BRANCHES)})"
        )

    sweeper = BranchSweeper(
        git,
        config,
        console=err_console,
        on_outcome=(lambda outcome: print_outcome(outcome, console))
        if format_type == "text"
        else None,
    )

    try:
        outcomes = sweeper.sweep(trunk)
    except GitError as e:
        fail(str(e))

    if format_type != "text":
        print_document(trunk, outcomes, format_type, console)


def main() -> None:
    """Main entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
