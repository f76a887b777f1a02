"""Configuration for a branchsweep run."""

from dataclasses import dataclass
from typing import Tuple

TRUNK_BRANCHES: Tuple[str, ...] = ("main", "master", "trunk")

DEFAULT_MIN_SUBJECT_SCORE = 0.9
DEFAULT_MIN_DIFF_SCORE = 0.9
# Any two tiny diffs (a one-line version bump, an empty commit) can coincide
DEFAULT_MIN_DIFF_SIZE = 100
DEFAULT_DIFF_TOOL = "meld"


@dataclass
class SweepConfig:
    """Thresholds and policy for one sweep, built from command-line options."""

    min_subject_score: float = DEFAULT_MIN_SUBJECT_SCORE
    min_diff_score: float = DEFAULT_MIN_DIFF_SCORE
    min_diff_size: int = DEFAULT_MIN_DIFF_SIZE
    perfect_only: bool = False
    dry_run: bool = False
    diff_tool: str = DEFAULT_DIFF_TOOL
    verbose: bool = False

    def __post_init__(self) -> None:
        for name in ("min_subject_score", "min_diff_score"):
            value = getattr(self, name)
            if not 0.0 <= value <= 1.0:
                raise ValueError(f"{name} must be between 0 and 1, got {value}")
        if self.min_diff_size < 0:
            raise ValueError(f"min_diff_size must not be negative, got {self.min_diff_size}")
        if not self.diff_tool.strip():
            raise ValueError("diff_tool must not be empty")


def is_trunk_branch(branch_name: str) -> bool:
    """Check if a branch name is one of the accepted trunk names."""
    return branch_name in TRUNK_BRANCHES
