"""Markdown corpus loader.

Walks a data directory for `*.md` files and turns each one into an immutable
Document. Failures are isolated per file: a file that cannot be read or
parsed is logged and skipped, and the rest of the corpus still loads.
"""

from __future__ import annotations

from datetime import datetime, timezone
import logging
from pathlib import Path
import re

from pydantic import ValidationError
import yaml

from mcp_docs_server.domain.categories import categorize_path
from mcp_docs_server.domain.model import Document
from mcp_docs_server.errors import LoadError
from mcp_docs_server.observability.metrics import INDEX_LOAD_ERRORS
from mcp_docs_server.utils.front_matter import coerce_tags, parse_front_matter


logger = logging.getLogger(__name__)

MARKDOWN_SUFFIX = ".md"
DEFAULT_TITLE = "Untitled"

_NON_ALNUM = re.compile(r"[^a-zA-Z0-9]")
_HEADING = re.compile(r"^#\s+(.+)$", re.MULTILINE)


def generate_document_id(path: str) -> str:
    """Derive a stable id from a document path.

    Example:
        >>> generate_document_id("data/Guides/SSE-transport.md")
        'data_guides_sse_transport_md'
    """
    return _NON_ALNUM.sub("_", path).lower()


def extract_title(markdown: str) -> str:
    """Return the text of the first level-one heading, or "Untitled"."""
    match = _HEADING.search(markdown)
    return match.group(1).strip() if match else DEFAULT_TITLE


def load_markdown_file(path: Path, data_dir: Path) -> Document:
    """Parse one markdown file into a Document.

    Categories are assigned from the path relative to data_dir so the
    location of the data directory itself never influences them.

    Raises:
        LoadError: If the file cannot be read, decoded or parsed.
    """
    source = str(path)
    try:
        raw = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise LoadError(source, str(exc)) from exc

    try:
        metadata, markdown = parse_front_matter(raw)
    except yaml.YAMLError as exc:
        raise LoadError(source, f"invalid front matter: {exc}") from exc

    try:
        relative = path.relative_to(data_dir).as_posix()
    except ValueError:
        relative = path.as_posix()

    title = metadata.get("title")
    try:
        return Document(
            id=generate_document_id(source),
            title=str(title) if title else extract_title(markdown),
            content=markdown,
            category=categorize_path(relative),
            tags=coerce_tags(metadata.get("tags")),
            source=source,
            last_updated=datetime.now(timezone.utc),
        )
    except ValidationError as exc:
        raise LoadError(source, str(exc)) from exc


def discover_markdown_files(data_dir: Path) -> list[Path]:
    """All markdown files below data_dir, sorted for a deterministic corpus order."""
    return sorted(p for p in data_dir.rglob(f"*{MARKDOWN_SUFFIX}") if p.is_file())


def load_corpus(data_dir: Path) -> list[Document]:
    """Load every markdown document below data_dir.

    Returns:
        Documents in sorted path order. A missing directory yields an empty
        corpus; unreadable files are logged and skipped.
    """
    if not data_dir.is_dir():
        logger.error("Documentation directory not found: %s", data_dir)
        return []

    documents: list[Document] = []
    for path in discover_markdown_files(data_dir):
        try:
            documents.append(load_markdown_file(path, data_dir))
        except LoadError as exc:
            INDEX_LOAD_ERRORS.inc()
            logger.error("Skipping document: %s", exc, extra={"source": exc.path})

    logger.info("Loaded %d documentation sections from %s", len(documents), data_dir)
    return documents
