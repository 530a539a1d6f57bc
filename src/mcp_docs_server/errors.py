"""Exceptions raised by the documentation server."""


class DocsServerError(Exception):
    """Base class for every error raised by mcp_docs_server."""


class LoadError(DocsServerError):
    """A single corpus file could not be read or parsed.

    Corpus loading logs the error and skips the file, so one broken
    document never prevents the rest of the corpus from loading.
    """

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(f"Failed to load {path}: {reason}")
        self.path = path
        self.reason = reason


class QueryRejected(DocsServerError, ValueError):
    """Malformed search input, rejected before it reaches the index."""
