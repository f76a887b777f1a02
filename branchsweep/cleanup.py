"""Sweep of all local branches against trunk."""

from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional

from rich.console import Console

from .config import SweepConfig
from .fingerprint import FingerprintCache
from .git_basic import GitBasicInterface, GitError
from .merge_detector import MergeDetector, MergeVerdict

# Actions
SKIPPED = "skipped"
DELETED = "deleted"
SUGGESTED = "suggested"
POTENTIAL = "potential"
ERROR = "error"

# Reasons
CLEANLY_MERGED = "cleanly merged"
MERGED = "merged"
POTENTIALLY_MERGED = "potentially merged"

REPORTED_ACTIONS = (DELETED, SUGGESTED, POTENTIAL, ERROR)


@dataclass
class SweepOutcome:
    """What the sweep did with one branch, and why."""

    branch: str
    action: str
    reason: str
    verdict: Optional[MergeVerdict] = None

    @property
    def is_reported(self) -> bool:
        return self.action in REPORTED_ACTIONS

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON/YAML output."""
        return {
            "branch": self.branch,
            "action": self.action,
            "reason": self.reason,
            "verdict": self.verdict.to_dict() if self.verdict else None,
        }


class BranchSweeper:
    """
    Walks every local branch and acts on its merge verdict.

    Exact and perfect matches are deleted (or only suggested in dry-run mode).
    Fuzzy matches above both thresholds are reported as potentially merged so a
    human can diff them. Anything else is left alone.
    """

    def __init__(
        self,
        git: GitBasicInterface,
        config: Optional[SweepConfig] = None,
        detector: Optional[MergeDetector] = None,
        console: Optional[Console] = None,
        on_outcome: Optional[Callable[[SweepOutcome], None]] = None,
    ):
        """Initialize with a git interface, run configuration and optional outcome callback."""
        self.git = git
        self.config = config or SweepConfig()
        self.console = console or Console(stderr=True)
        self.detector = detector or MergeDetector(
            git,
            cache=FingerprintCache(git),
            diff_tool=self.config.diff_tool,
            console=self.console,
            verbose=self.config.verbose,
        )
        self.on_outcome = on_outcome

    def sweep(self, trunk: str) -> List[SweepOutcome]:
        """
        Check every local branch against trunk, one at a time.

        Raises:
            GitError: If branches cannot be listed or an automatic deletion fails
        """
        branches = self.git.list_local_branches()
        if self.config.verbose:
            self.console.print(f"[dim]Checking {len(branches)} branches against {trunk}[/dim]")

        outcomes = []
        for branch in branches:
            outcome = self.process_branch(trunk, branch)
            outcomes.append(outcome)
            if self.on_outcome:
                self.on_outcome(outcome)

        if self.config.verbose:
            self._print_summary(outcomes)

        return outcomes

    def process_branch(self, trunk: str, branch: str) -> SweepOutcome:
        """Detect, classify and act on a single branch."""
        if branch == trunk:
            return SweepOutcome(branch, SKIPPED, "trunk")

        try:
            verdict = self.detector.detect_merge(trunk, branch)
        except GitError as e:
            self.console.print(f"[red]Failed to compare {branch} with {trunk}: {e}[/red]")
            return SweepOutcome(branch, ERROR, str(e))

        if verdict is None:
            return SweepOutcome(branch, SKIPPED, "no trunk commits to compare")

        reason = self.classify(verdict)
        if reason is None:
            return SweepOutcome(branch, SKIPPED, "below thresholds", verdict)

        if reason == POTENTIALLY_MERGED:
            if self.config.perfect_only:
                return SweepOutcome(branch, SKIPPED, "not a perfect match", verdict)
            return SweepOutcome(branch, POTENTIAL, reason, verdict)

        if self.config.dry_run:
            return SweepOutcome(branch, SUGGESTED, reason, verdict)

        # Deletion failures propagate: a branch we meant to remove is still there
        self.git.delete_branch(branch)
        return SweepOutcome(branch, DELETED, reason, verdict)

    def classify(self, verdict: MergeVerdict) -> Optional[str]:
        """Map a verdict to a merge reason, or None when it is not convincing."""
        if verdict.exact:
            return CLEANLY_MERGED

        if not (
            verdict.subject_similarity > self.config.min_subject_score
            and verdict.diff_similarity > self.config.min_diff_score
        ):
            return None

        if verdict.diff_similarity == 1.0 and verdict.diff_size > self.config.min_diff_size:
            return MERGED

        return POTENTIALLY_MERGED

    def _print_summary(self, outcomes: List[SweepOutcome]) -> None:
        counts: Dict[str, int] = {}
        for outcome in outcomes:
            counts[outcome.action] = counts.get(outcome.action, 0) + 1
        summary = ", ".join(f"{count} {action}" for action, count in sorted(counts.items()))
        self.console.print(f"[dim]Checked {len(outcomes)} branches: {summary or 'nothing'}[/dim]")
