"""Jaro and Jaro-Winkler string similarity."""

from typing import Dict, List, Tuple

DEFAULT_PREFIX_SCALE = 0.1
MAX_PREFIX_LENGTH = 4


def _ordered(a: str, b: str) -> Tuple[str, str]:
    # Greedy matching depends on which string is scanned first
    return (a, b) if (len(a), a) <= (len(b), b) else (b, a)


def jaro(a: str, b: str) -> float:
    """
    Jaro similarity of two strings, in [0, 1].

    Two characters match when they are equal and no further apart than half
    the longer string's length minus one. The score averages the matched share
    of each string and the share of matches that are not transposed.
    """
    if a == b:
        return 1.0
    if not a or not b:
        return 0.0

    a, b = _ordered(a, b)
    window = max(max(len(a), len(b)) // 2 - 1, 0)

    positions: Dict[str, List[int]] = {}
    for j, char in enumerate(b):
        positions.setdefault(char, []).append(j)

    # The window only slides right and each char takes its leftmost free slot,
    # so a cursor per char replaces rescanning the window.
    cursors: Dict[str, int] = {}
    b_matched = [False] * len(b)
    a_matches = []
    for i, char in enumerate(a):
        candidates = positions.get(char)
        if not candidates:
            continue
        start = max(0, i - window)
        end = min(i + window + 1, len(b))
        k = cursors.get(char, 0)
        while k < len(candidates) and candidates[k] < start:
            k += 1
        if k < len(candidates) and candidates[k] < end:
            b_matched[candidates[k]] = True
            a_matches.append(char)
            k += 1
        cursors[char] = k

    matches = len(a_matches)
    if matches == 0:
        return 0.0

    b_matches = [char for char, matched in zip(b, b_matched) if matched]
    transpositions = sum(1 for x, y in zip(a_matches, b_matches) if x != y) // 2

    return (matches / len(a) + matches / len(b) + (matches - transpositions) / matches) / 3


def jaro_winkler(
    a: str,
    b: str,
    prefix_scale: float = DEFAULT_PREFIX_SCALE,
    max_prefix: int = MAX_PREFIX_LENGTH,
) -> float:
    """
    Jaro-Winkler similarity of two strings, in [0, 1].

    Boosts the Jaro score by the length of the common prefix (capped at
    max_prefix characters), so strings that start the same way score higher.
    Commit subjects that survived a rebase keep their leading words even when
    a trailing ticket number or PR suffix changed.

    Args:
        a: First string
        b: Second string
        prefix_scale: Weight of each shared prefix character, at most 0.25
        max_prefix: Maximum number of prefix characters that count

    Returns:
        1.0 for identical strings, 0.0 when nothing matches
    """
    score = jaro(a, b)
    if score in (0.0, 1.0):
        return score

    prefix = 0
    for x, y in zip(a[:max_prefix], b[:max_prefix]):
        if x != y:
            break
        prefix += 1

    return min(score + prefix * prefix_scale * (1.0 - score), 1.0)
