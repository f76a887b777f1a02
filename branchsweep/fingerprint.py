"""Commit fingerprints and their per-run cache."""

import threading
from dataclasses import dataclass
from typing import Dict, Hashable, Tuple

from .diff_normalizer import extract_diff, normalize_diff
from .formatting import format_short_sha
from .git_basic import GitBasicInterface


@dataclass(frozen=True)
class CommitFingerprint:
    """
    Subject line and normalized diff of one commit.

    Two commits carrying the same change have equal subjects and equal
    normalized diffs even when their SHAs differ after a rebase.
    """

    sha: str
    subject: str
    normalized_diff: str

    @property
    def short_sha(self) -> str:
        """8-character abbreviated SHA for display."""
        return format_short_sha(self.sha)

    @property
    def diff_size(self) -> int:
        return len(self.normalized_diff)

    def __str__(self) -> str:
        """Human-readable string representation."""
        return f"{self.short_sha}: {self.subject}"


class FingerprintCache:
    """
    Memoizes commit fingerprints and range diffs for one run.

    The same trunk commits are fingerprinted again for every candidate branch,
    so each is computed once and shared. Entries are pure functions of their
    key and are never evicted. A lock per key lets concurrent callers wait for
    the first computation instead of repeating it.
    """

    def __init__(self, git: GitBasicInterface):
        """Initialize with the git interface used to compute missing entries."""
        self.git = git
        self._fingerprints: Dict[str, CommitFingerprint] = {}
        self._range_diffs: Dict[Tuple[str, str], str] = {}
        self._lock = threading.Lock()
        self._key_locks: Dict[Hashable, threading.Lock] = {}

    def _lock_for(self, key: Hashable) -> threading.Lock:
        with self._lock:
            return self._key_locks.setdefault(key, threading.Lock())

    def fingerprint_of(self, sha: str) -> CommitFingerprint:
        """Get the fingerprint of a commit, computing it on first request."""
        cached = self._fingerprints.get(sha)
        if cached is not None:
            return cached

        with self._lock_for(("commit", sha)):
            cached = self._fingerprints.get(sha)
            if cached is not None:
                return cached

            subject = self.git.get_commit_subject(sha)
            show_text = self.git.get_commit_show(sha)
            fingerprint = CommitFingerprint(
                sha=sha,
                subject=subject,
                normalized_diff=normalize_diff(extract_diff(show_text)),
            )
            self._fingerprints[sha] = fingerprint
            return fingerprint

    def range_diff(self, start: str, end: str) -> str:
        """Get the normalized cumulative diff from start to end."""
        key = (start, end)
        cached = self._range_diffs.get(key)
        if cached is not None:
            return cached

        with self._lock_for(("range",) + key):
            cached = self._range_diffs.get(key)
            if cached is not None:
                return cached

            diff = normalize_diff(self.git.get_combined_diff(start, end))
            self._range_diffs[key] = diff
            return diff

    def __len__(self) -> int:
        return len(self._fingerprints)
