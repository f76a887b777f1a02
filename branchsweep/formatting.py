"""Common formatting utilities for branchsweep output."""


def format_short_sha(sha: str) -> str:
    """
    Format SHA to 8-character abbreviated format for display.

    Args:
        sha: Full or partial SHA string

    Returns:
        8-character SHA or original if shorter than 8 chars
    """
    if not sha:
        return ""
    return sha[:8] if len(sha) >= 8 else sha


def format_score(score: float) -> str:
    """Format a similarity score with three decimals, e.g. 0.953."""
    return f"{score:.3f}"


def format_size(size: int) -> str:
    """Format a diff size in characters, e.g. 1.2k chars."""
    if size >= 1000:
        return f"{size / 1000:.1f}k chars"
    return f"{size} chars"
