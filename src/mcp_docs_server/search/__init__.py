"""
Fuzzy search engine package.

- fuzzy: Approximate substring matching (edit distance, match ranges)
- scorer: Weighted multi-field document scoring
- highlights: Context snippets around matches
- index: Immutable in-memory document index
"""
