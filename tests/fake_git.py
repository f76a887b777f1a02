"""In-memory stand-in for GitBasicInterface used by the unit tests."""

from collections import Counter
from typing import Dict, List, Optional, Set

from branchsweep.git_basic import BRANCH_PREFIX, GitCommandFailed, NoCommonAncestor


def make_diff(
    path: str,
    added: List[str],
    old_hash: str = "1a2b3c4",
    new_hash: str = "5d6e7f8",
    start: int = 10,
    context: str = "def login(user):",
) -> str:
    """Build a small unified diff that appends lines to one file."""
    lines = [
        f"diff --git a/{path} b/{path}",
        f"index {old_hash}..{new_hash} 100644",
        f"--- a/{path}",
        f"+++ b/{path}",
        f"@@ -{start},3 +{start},{3 + len(added)} @@ {context}",
        "     user.check()",
        "     user.refresh()",
        "     return user",
    ]
    lines.extend(f"+{line}" for line in added)
    return "\n".join(lines) + "\n"


class FakeCommit:
    def __init__(self, sha: str, parent: Optional[str], subject: str, diff: str):
        self.sha = sha
        self.parent = parent
        self.subject = subject
        self.diff = diff


class FakeGit:
    """
    Linear-history repository model with call counting.

    Commits have at most one parent. Refs resolve as "refs/heads/<name>",
    bare names (tags before branches, as git does), SHAs, or "<ref>^" for the
    parent.
    """

    def __init__(self) -> None:
        self.commits: Dict[str, FakeCommit] = {}
        self.branches: Dict[str, str] = {}
        self.tags: Dict[str, str] = {}
        self.current_branch = "main"
        self.calls: Counter = Counter()
        self.deleted: List[str] = []
        self.fail_delete: Set[str] = set()
        self.range_diffs: Dict[tuple, str] = {}

    # Building history
    def commit(self, sha: str, parent: Optional[str], subject: str, diff: str = "") -> str:
        self.commits[sha] = FakeCommit(sha, parent, subject, diff)
        return sha

    def branch(self, name: str, sha: str) -> None:
        self.branches[name] = sha

    def tag(self, name: str, sha: str) -> None:
        self.tags[name] = sha

    # Helpers
    def resolve(self, ref: str) -> str:
        if ref.endswith("^"):
            parent = self.commits[self.resolve(ref[:-1])].parent
            if parent is None:
                raise GitCommandFailed(["rev-parse", ref], 128, f"bad revision '{ref}'")
            return parent
        if ref.startswith(BRANCH_PREFIX) and ref[len(BRANCH_PREFIX) :] in self.branches:
            return self.branches[ref[len(BRANCH_PREFIX) :]]
        if ref in self.tags:
            return self.tags[ref]
        if ref in self.branches:
            return self.branches[ref]
        if ref in self.commits:
            return ref
        raise GitCommandFailed(["rev-parse", ref], 128, f"unknown revision '{ref}'")

    def history(self, ref: str) -> List[str]:
        """Commits reachable from ref, newest first."""
        shas = []
        sha: Optional[str] = self.resolve(ref)
        while sha is not None:
            shas.append(sha)
            sha = self.commits[sha].parent
        return shas

    # GitBasicInterface surface
    def list_local_branches(self) -> List[str]:
        self.calls["list_local_branches"] += 1
        return list(self.branches)

    def get_current_branch(self) -> str:
        self.calls["get_current_branch"] += 1
        return self.current_branch

    def get_merge_base(self, a: str, b: str) -> str:
        self.calls["get_merge_base"] += 1
        reachable = set(self.history(a))
        for sha in self.history(b):
            if sha in reachable:
                return sha
        raise NoCommonAncestor(f"{a} and {b} have no common ancestor")

    def rev_parse(self, ref: str) -> str:
        self.calls["rev_parse"] += 1
        return self.resolve(ref)

    def get_commits_between(self, start: str, end: str) -> List[str]:
        self.calls["get_commits_between"] += 1
        excluded = set(self.history(start))
        return [sha for sha in self.history(end) if sha not in excluded]

    def get_commit_subject(self, sha: str) -> str:
        self.calls["get_commit_subject"] += 1
        return self.commits[self.resolve(sha)].subject

    def get_commit_show(self, sha: str) -> str:
        self.calls["get_commit_show"] += 1
        commit = self.commits[self.resolve(sha)]
        return (
            f"commit {commit.sha}\n"
            "Author: A U Thor <author@example.com>\n"
            "Date:   Mon Oct 12 10:00:00 2026 +0000\n"
            "\n"
            f"    {commit.subject}\n"
            "\n"
            f"{commit.diff}"
        )

    def get_combined_diff(self, start: str, end: str) -> str:
        self.calls["get_combined_diff"] += 1
        key = (self.resolve(start), self.resolve(end))
        if key in self.range_diffs:
            return self.range_diffs[key]
        excluded = set(self.history(start))
        shas = [sha for sha in self.history(end) if sha not in excluded]
        return "".join(self.commits[sha].diff for sha in reversed(shas))

    def delete_branch(self, name: str) -> None:
        self.calls["delete_branch"] += 1
        if name in self.fail_delete:
            raise GitCommandFailed(["branch", "-D", name], 1, f"error: cannot delete '{name}'")
        del self.branches[name]
        self.deleted.append(name)
