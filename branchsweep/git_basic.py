"""Core git operations interface."""

import subprocess
from pathlib import Path
from typing import List, Optional

from rich.console import Console

BRANCH_PREFIX = "refs/heads/"


def branch_ref(name: str) -> str:
    """Full ref of a local branch, so a tag of the same name never shadows it."""
    return f"{BRANCH_PREFIX}{name}"


class GitError(Exception):
    """Custom exception for git operation errors."""

    pass


class GitCommandFailed(GitError):
    """A git command exited with a nonzero status."""

    def __init__(self, command: List[str], exit_status: int, stderr: str):
        self.command = command
        self.exit_status = exit_status
        self.stderr = stderr
        super().__init__(
            f"Git command failed: git {' '.join(command)} (exit {exit_status})\n"
            f"Error: {stderr.strip()}"
        )


class NotOnBranch(GitError):
    """HEAD is detached, so there is no current branch."""

    pass


class NoCommonAncestor(GitError):
    """Two refs share no history."""

    pass


class GitBasicInterface:
    """
    Core git operations interface for branch sweeping.

    Every query shells out to the git CLI in the repository directory. The
    only mutating operation is delete_branch.
    """

    def __init__(
        self,
        repo_path: Optional[Path] = None,
        console: Optional[Console] = None,
        verbose: bool = False,
    ):
        """Initialize GitBasicInterface with repository path and console."""
        self.repo_path = repo_path or Path.cwd()
        self.console = console or Console(stderr=True)
        self.verbose = verbose

        # Ensure repo_path is a Path object
        if isinstance(self.repo_path, str):
            self.repo_path = Path(self.repo_path)

        # Check if it's a git repository (worktrees and subdirectories included)
        try:
            self.run_command(["rev-parse", "--is-inside-work-tree"])
        except GitError as e:
            raise GitError(f"Not a git repository: {self.repo_path}") from e

    def run_command(self, args: List[str]) -> str:
        """Execute git command and return stdout."""
        if self.verbose:
            self.console.print(f"[dim cyan]Running: git {' '.join(args)}[/dim cyan]")
        try:
            result = subprocess.run(
                ["git"] + args, cwd=self.repo_path, capture_output=True, text=True, check=True
            )
            return result.stdout.strip()
        except subprocess.CalledProcessError as e:
            raise GitCommandFailed(args, e.returncode, e.stderr or "") from e
        except OSError as e:
            raise GitError(f"Could not run git in {self.repo_path}: {e}") from e

    def run_command_raw(self, args: List[str]) -> str:
        """Execute git command and return stdout untouched, decoding undecodable bytes."""
        if self.verbose:
            self.console.print(f"[dim cyan]Running: git {' '.join(args)}[/dim cyan]")
        try:
            result = subprocess.run(["git"] + args, cwd=self.repo_path, capture_output=True)
        except OSError as e:
            raise GitError(f"Could not run git in {self.repo_path}: {e}") from e

        if result.returncode != 0:
            stderr = result.stderr.decode("utf-8", errors="replace") if result.stderr else ""
            raise GitCommandFailed(args, result.returncode, stderr)

        # Diffs of binary-ish or mis-encoded files still compare fine as replaced text
        return result.stdout.decode("utf-8", errors="replace")

    # Branch Management Operations
    def list_local_branches(self) -> List[str]:
        """Get all local branch names in ref store order."""
        output = self.run_command(["for-each-ref", "--format=%(refname)", BRANCH_PREFIX])

        branches = []
        for line in output.split("\n"):
            line = line.strip()
            if line.startswith(BRANCH_PREFIX):
                line = line[len(BRANCH_PREFIX) :]
            if line:
                branches.append(line)
        return branches

    def get_current_branch(self) -> str:
        """Get the name of the current branch."""
        try:
            branch = self.run_command(["rev-parse", "--abbrev-ref", "HEAD"])
        except GitError as e:
            raise GitError(f"Failed to get current branch: {e}") from e

        if branch == "HEAD":
            raise NotOnBranch("HEAD is detached, check out a trunk branch first")
        return branch

    def get_merge_base(self, a: str, b: str) -> str:
        """Get the merge-base SHA of two refs."""
        try:
            sha = self.run_command(["merge-base", a, b])
        except GitCommandFailed as e:
            # merge-base exits 1 without output when the histories are unrelated
            if e.exit_status == 1 and not e.stderr.strip():
                raise NoCommonAncestor(f"{a} and {b} have no common ancestor") from e
            raise
        if not sha:
            raise NoCommonAncestor(f"{a} and {b} have no common ancestor")
        return sha

    def rev_parse(self, ref: str) -> str:
        """Resolve a ref to a full commit SHA."""
        return self.run_command(["rev-parse", "--verify", f"{ref}^{{commit}}"])

    def get_commits_between(self, start: str, end: str) -> List[str]:
        """Get commits reachable from end but not from start, newest first."""
        output = self.run_command(["log", "--format=%H", f"{start}..{end}", "--"])
        return [line.strip() for line in output.split("\n") if line.strip()]

    def get_commit_subject(self, sha: str) -> str:
        """Get the first line of a commit message."""
        return self.run_command(["log", "-1", "--format=%s", sha, "--"])

    def get_commit_show(self, sha: str) -> str:
        """Get the full git show rendering of one commit."""
        return self.run_command_raw(
            ["--no-pager", "show", "--no-color", "--no-ext-diff", sha, "--"]
        )

    def get_combined_diff(self, start: str, end: str) -> str:
        """Get the cumulative diff from start to end."""
        return self.run_command_raw(
            ["--no-pager", "diff", "--no-color", "--no-ext-diff", start, end, "--"]
        )

    def delete_branch(self, name: str) -> None:
        """Force-delete a local branch."""
        try:
            self.run_command(["branch", "-D", name])
        except GitError as e:
            raise GitError(f"Failed to delete branch {name}: {e}") from e
