"""Masking of volatile tokens in unified diffs.

Rebasing a commit changes the blob hashes on its ``index`` lines and usually
shifts the line numbers in its hunk headers, while the added and removed lines
stay the same. Masking those tokens lets two rewrites of the same change
compare as equal.
"""

import re

NULL_HASH = "0000000"
OLD_HASH = "1111111"
NEW_HASH = "2222222"
HUNK_PLACEHOLDER = "@@ -0,0 +0,0 @@"

# index <old>..<new>[ <mode>]
INDEX_LINE = re.compile(r"^index (?P<old>[0-9a-f]+)\.\.(?P<new>[0-9a-f]+)(?P<mode> [0-7]+)?$")

# @@ -a[,b] +c[,d] @@[ context]
HUNK_HEADER = re.compile(r"^@@ -\d+(?:,\d+)? \+\d+(?:,\d+)? @@(?P<context>.*)$")

DIFF_START = re.compile(r"^diff --(?:git|cc|combined) ", re.MULTILINE)


def _is_null(sha: str) -> bool:
    return set(sha) == {"0"}


def _normalize_index_line(match: "re.Match[str]") -> str:
    mode = match.group("mode") or ""
    if _is_null(match.group("old")):
        # new file
        return f"index {NULL_HASH}..{OLD_HASH}{mode}"
    if _is_null(match.group("new")):
        # deleted file
        return f"index {OLD_HASH}..{NULL_HASH}{mode}"
    return f"index {OLD_HASH}..{NEW_HASH}{mode}"


def normalize_line(line: str) -> str:
    """Normalize a single diff line without its line ending."""
    index_match = INDEX_LINE.match(line)
    if index_match:
        return _normalize_index_line(index_match)

    hunk_match = HUNK_HEADER.match(line)
    if hunk_match:
        return HUNK_PLACEHOLDER + hunk_match.group("context")

    return line


def normalize_diff(diff_text: str) -> str:
    """
    Mask blob hashes and hunk positions in a unified diff.

    Lines are normalized one at a time and their line endings are kept, so the
    result has the same shape as the input. Content lines always start with
    ``+``, ``-`` or a space and are never touched.

    Args:
        diff_text: Raw unified diff, as printed by git diff or git show

    Returns:
        The diff with every index line and hunk header replaced by placeholders
    """
    if not diff_text:
        return ""

    normalized = []
    for line in diff_text.split("\n"):
        body = line.rstrip("\r")
        normalized.append(normalize_line(body) + line[len(body) :])
    return "\n".join(normalized)


def extract_diff(show_text: str) -> str:
    """Return the diff part of a git show rendering, dropping the commit header and message."""
    match = DIFF_START.search(show_text)
    if not match:
        return ""
    return show_text[match.start() :]
