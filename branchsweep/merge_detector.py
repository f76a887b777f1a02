"""Detection of branches whose changes already landed on trunk."""

import shlex
from dataclasses import asdict, dataclass
from typing import Any, Dict, List, Optional, Tuple

from rich.console import Console
from rich.markup import escape

from .config import DEFAULT_DIFF_TOOL
from .fingerprint import CommitFingerprint, FingerprintCache
from .formatting import format_score, format_short_sha, format_size
from .git_basic import GitBasicInterface, branch_ref
from .similarity import jaro_winkler


@dataclass(frozen=True)
class MergeVerdict:
    """
    Evidence that a branch has been merged into trunk.

    An exact verdict means the branch tip is itself part of trunk's history.
    Otherwise trunk_sha names the trunk commit that looks most like the
    branch, and the two similarity scores say how much.
    """

    branch: str
    base_sha: str
    trunk_sha: Optional[str]
    exact: bool
    subject_similarity: float
    diff_similarity: float
    diff_size: int
    commit_count: int
    # Display only, nothing parses it
    compare_command: str

    @property
    def short_trunk_sha(self) -> str:
        return format_short_sha(self.trunk_sha or "")

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON/YAML output."""
        return asdict(self)

    def __str__(self) -> str:
        if self.exact:
            return f"{self.branch}: contained in trunk"
        return (
            f"{self.branch}: matches {self.short_trunk_sha} "
            f"(subject {format_score(self.subject_similarity)}, "
            f"diff {format_score(self.diff_similarity)} over {format_size(self.diff_size)}, "
            f"{self.commit_count} commits)"
        )


class MergeDetector:
    """
    Decides whether a candidate branch already landed on trunk.

    Rebased and squash-merged branches leave no shared SHA behind, so the
    detector compares content instead: it picks the trunk commit whose subject
    is closest to the branch's, then scores how close their diffs are. Only one
    diff comparison happens per branch.
    """

    def __init__(
        self,
        git: GitBasicInterface,
        cache: Optional[FingerprintCache] = None,
        diff_tool: str = DEFAULT_DIFF_TOOL,
        console: Optional[Console] = None,
        verbose: bool = False,
    ):
        """Initialize with a git interface and an optional shared fingerprint cache."""
        self.git = git
        self.cache = cache if cache is not None else FingerprintCache(git)
        self.diff_tool = diff_tool
        self.console = console or Console(stderr=True)
        self.verbose = verbose

    def detect_merge(self, trunk: str, candidate: str) -> Optional[MergeVerdict]:
        """
        Compare a candidate branch against trunk.

        The branch is represented by its earliest new commit, the one whose
        subject usually names the change. Both names are resolved under
        refs/heads/ so a tag of the same name is never compared instead.

        Args:
            trunk: Trunk branch name (e.g., "main")
            candidate: Branch to check

        Returns:
            A MergeVerdict, or None when trunk has no commits since the merge
            base to compare against

        Raises:
            GitError: If any git query for this pair fails
        """
        trunk_ref = branch_ref(trunk)
        candidate_ref = branch_ref(candidate)
        base = self.git.get_merge_base(trunk_ref, candidate_ref)
        tip = self.git.rev_parse(candidate_ref)

        if tip == base:
            return MergeVerdict(
                branch=candidate,
                base_sha=base,
                trunk_sha=None,
                exact=True,
                subject_similarity=1.0,
                diff_similarity=1.0,
                diff_size=0,
                commit_count=0,
                compare_command=f"git log --oneline {shlex.quote(f'{trunk}..{candidate}')}",
            )

        branch_commits = self.git.get_commits_between(base, candidate_ref)
        if not branch_commits:
            raise AssertionError(
                f"{candidate} tip {tip} differs from merge base {base} but has no new commits"
            )

        # History order is newest first; the earliest commit carries the headline subject
        representative = self.cache.fingerprint_of(branch_commits[-1])

        candidate_diff = representative.normalized_diff
        if len(branch_commits) > 1:
            candidate_diff = self.cache.range_diff(base, candidate_ref)

        trunk_commits = self.git.get_commits_between(base, trunk_ref)
        best = self._best_subject_match(representative, trunk_commits)
        if best is None:
            if self.verbose:
                self.console.print(f"[dim]{candidate}: no trunk commits since {base[:8]}[/dim]")
            return None

        best_match, subject_similarity = best
        if self.verbose:
            match = escape(f"{candidate}: {representative} -> {best_match}")
            self.console.print(f"[dim]{match}[/dim]")
        if len(branch_commits) > 1:
            trunk_diff = self.cache.range_diff(f"{best_match.sha}^", best_match.sha)
            compare_command = (
                f"{self.diff_tool} <(git diff {shlex.quote(f'{base}..{candidate}')}) "
                f"<(git diff {best_match.sha}^..{best_match.sha})"
            )
        else:
            trunk_diff = best_match.normalized_diff
            compare_command = (
                f"{self.diff_tool} <(git show {representative.sha}) <(git show {best_match.sha})"
            )

        diff_similarity = jaro_winkler(candidate_diff, trunk_diff)

        verdict = MergeVerdict(
            branch=candidate,
            base_sha=base,
            trunk_sha=best_match.sha,
            exact=False,
            subject_similarity=subject_similarity,
            diff_similarity=diff_similarity,
            diff_size=len(candidate_diff),
            commit_count=len(branch_commits),
            compare_command=compare_command,
        )

        if self.verbose:
            self.console.print(f"[dim]{verdict}[/dim]")

        return verdict

    def _best_subject_match(
        self, representative: CommitFingerprint, trunk_commits: List[str]
    ) -> Optional[Tuple[CommitFingerprint, float]]:
        """Find the trunk commit whose subject is closest; ties keep the first seen."""
        best: Optional[CommitFingerprint] = None
        best_score = -1.0

        for sha in trunk_commits:
            fingerprint = self.cache.fingerprint_of(sha)
            score = jaro_winkler(representative.subject, fingerprint.subject)
            if score > best_score:
                best, best_score = fingerprint, score

        if best is None:
            return None
        return best, best_score
