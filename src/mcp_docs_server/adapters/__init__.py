"""Adapters layer - corpus loading from the filesystem."""

from .markdown_loader import (
    discover_markdown_files,
    extract_title,
    generate_document_id,
    load_corpus,
    load_markdown_file,
)


__all__ = [
    "discover_markdown_files",
    "extract_title",
    "generate_document_id",
    "load_corpus",
    "load_markdown_file",
]
