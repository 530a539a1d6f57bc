"""Approximate substring matching for typo-tolerant search.

This module finds the substring of a text that is closest (in edit distance)
to a query, without tokenizing either side.

Smart Defaults:
- Case-insensitive, compared per code point
- Score = edit distance / query length (0.0 is an exact substring)
- Matches scoring above the threshold (0.6) are rejected
- Leftmost best-scoring end position wins inside one text

The distance search uses Myers' bit-parallel algorithm (one pass over the
text, O(1) big-int operations per character). Match ranges are recovered
afterwards with a small dynamic-programming traceback limited to the window
that can contain the best alignment.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol


DEFAULT_THRESHOLD = 0.6


@dataclass(frozen=True, slots=True)
class MatchResult:
    """Outcome of matching one query against one text.

    Attributes:
        score: distance / len(query), in [0, 1]; lower is better.
        distance: Edit distance between the query and the matched substring.
        ranges: Ascending, non-overlapping half-open (start, end) offsets of
            the text characters aligned exactly with query characters.
    """

    score: float
    distance: int
    ranges: tuple[tuple[int, int], ...]


class Matcher(Protocol):
    """Anything that can locate a query inside a field value."""

    def match(self, query: str, text: str) -> MatchResult | None: ...


def fold_case(text: str) -> str:
    """Lowercase text without changing its length.

    str.lower() may expand a few characters (e.g. 'İ'); those are kept as-is
    so offsets into the folded text stay valid for the original.
    """
    lowered = text.lower()
    if len(lowered) == len(text):
        return lowered
    return "".join(low if len(low := ch.lower()) == 1 else ch for ch in text)


def best_match_end(pattern: str, text: str) -> tuple[int, int]:
    """Find the minimum edit distance of pattern to any substring of text.

    Args:
        pattern: Non-empty query string.
        text: Text to search.

    Returns:
        Tuple of (distance, end) where text[:end] ends the leftmost best
        match. (len(pattern), 0) when nothing aligns.

    Examples:
        >>> best_match_end("server", "mcp server setup")
        (0, 10)
        >>> best_match_end("sevrer", "mcp server setup")
        (2, 10)
    """
    m = len(pattern)
    mask = (1 << m) - 1
    high = 1 << (m - 1)

    peq: dict[str, int] = {}
    for i, ch in enumerate(pattern):
        peq[ch] = peq.get(ch, 0) | (1 << i)

    pv, mv = mask, 0
    score = m
    best, best_end = m, 0

    for j, ch in enumerate(text):
        eq = peq.get(ch, 0)
        xv = eq | mv
        xh = ((((eq & pv) + pv) ^ pv) | eq) & mask
        ph = (mv | ~(xh | pv)) & mask
        mh = pv & xh
        if ph & high:
            score += 1
        elif mh & high:
            score -= 1
        # Row 0 is all zeros: a match may start anywhere, so nothing shifts in
        ph = (ph << 1) & mask
        mh = (mh << 1) & mask
        pv = (mh | ~(xv | ph)) & mask
        mv = ph & xv

        if score < best:
            best, best_end = score, j + 1
            if best == 0:
                break

    return best, best_end


def align_ranges(pattern: str, text: str, end: int, distance: int) -> tuple[tuple[int, int], ...]:
    """Recover which characters of text[:end] align with the pattern.

    The best alignment ending at `end` spans at most len(pattern) + distance
    characters, so only that window is examined.
    """
    m = len(pattern)
    if distance == 0:
        return ((end - m, end),)

    lo = max(0, end - m - distance)
    window = text[lo:end]
    n = len(window)

    # rows[i][j]: distance of pattern[:i] to the best suffix of window[:j]
    rows = [[0] * (n + 1)]
    for i in range(1, m + 1):
        prev = rows[-1]
        row = [i] + [0] * n
        p_ch = pattern[i - 1]
        for j in range(1, n + 1):
            cost = 0 if p_ch == window[j - 1] else 1
            row[j] = min(prev[j - 1] + cost, prev[j] + 1, row[j - 1] + 1)
        rows.append(row)

    matched: list[int] = []
    i, j = m, n
    while i > 0 and j > 0:
        cost = 0 if pattern[i - 1] == window[j - 1] else 1
        if rows[i][j] == rows[i - 1][j - 1] + cost:
            if cost == 0:
                matched.append(lo + j - 1)
            i -= 1
            j -= 1
        elif rows[i][j] == rows[i - 1][j] + 1:
            i -= 1
        else:
            j -= 1
    matched.reverse()

    ranges: list[tuple[int, int]] = []
    for pos in matched:
        if ranges and ranges[-1][1] == pos:
            ranges[-1] = (ranges[-1][0], pos + 1)
        else:
            ranges.append((pos, pos + 1))
    return tuple(ranges)


class ApproximateMatcher:
    """Bounded-error approximate substring matcher.

    Args:
        threshold: Highest accepted score (distance / query length).
        ignore_case: Compare case-insensitively (default True).
    """

    def __init__(self, threshold: float = DEFAULT_THRESHOLD, *, ignore_case: bool = True) -> None:
        if not 0.0 <= threshold <= 1.0:
            raise ValueError(f"threshold must be within [0, 1], got {threshold}")
        self.threshold = threshold
        self.ignore_case = ignore_case

    def match(self, query: str, text: str) -> MatchResult | None:
        """Match query against text; None when nothing is close enough.

        Examples:
            >>> ApproximateMatcher().match("SSE", "Use SSE transport")
            MatchResult(score=0.0, distance=0, ranges=((4, 7),))
            >>> ApproximateMatcher().match("", "anything") is None
            True
        """
        if not query or not text:
            return None

        if self.ignore_case:
            query = fold_case(query)
            text = fold_case(text)

        distance, end = best_match_end(query, text)
        score = min(distance / len(query), 1.0)
        if score > self.threshold:
            return None

        ranges = align_ranges(query, text, end, distance)
        if not ranges:
            return None
        return MatchResult(score=score, distance=distance, ranges=ranges)
