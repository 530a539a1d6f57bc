"""Highlight extraction for search results.

Turns the match ranges of a scored document into short context snippets.

Smart Defaults:
- Only the first matched field is used (fields are reported by weight order)
- Each range is widened by 50 characters on each side, clipped to the field
- Windows that overlap after widening are merged into one snippet
- At most 3 snippets per result; blank snippets are skipped
"""

from __future__ import annotations

from collections.abc import Sequence

from mcp_docs_server.search.scorer import FieldMatch


MAX_HIGHLIGHTS = 3
DEFAULT_CONTEXT_RADIUS = 50


def _context_windows(
    ranges: Sequence[tuple[int, int]],
    length: int,
    context_radius: int,
) -> list[tuple[int, int]]:
    """Widen ranges by the context radius and merge overlapping windows."""
    windows: list[tuple[int, int]] = []
    for start, end in ranges:
        if end <= start or start >= length:
            continue
        lo = max(0, start - context_radius)
        hi = min(length, end + context_radius)
        if windows and lo <= windows[-1][1]:
            windows[-1] = (windows[-1][0], max(windows[-1][1], hi))
        else:
            windows.append((lo, hi))
    return windows


def extract_highlights(
    field_matches: Sequence[FieldMatch],
    context_radius: int = DEFAULT_CONTEXT_RADIUS,
    max_highlights: int = MAX_HIGHLIGHTS,
) -> list[str]:
    """Extract context snippets around the matched characters.

    Args:
        field_matches: Per-field matches in reporting order.
        context_radius: Characters of context on each side of a range.
        max_highlights: Cap on the number of snippets.

    Returns:
        Snippets in order of appearance within the first matched field.

    Example:
        >>> match = FieldMatch("title", "SSE Transport", 0.0, 0.4, ((0, 3),))
        >>> extract_highlights([match], context_radius=4)
        ['SSE Tra']
    """
    if not field_matches:
        return []

    first = field_matches[0]
    value = first.value

    highlights: list[str] = []
    for lo, hi in _context_windows(first.ranges, len(value), max(context_radius, 0)):
        snippet = value[lo:hi].strip()
        if not snippet:
            continue
        highlights.append(snippet)
        if len(highlights) >= max_highlights:
            break
    return highlights
