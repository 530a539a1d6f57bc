"""Service layer - use case orchestration.

- services: initialize/search functions over an explicit DocumentIndex
- documentation_service: owns the index built at startup
"""

from .documentation_service import DocumentationService
from .services import initialize, query_index, search


__all__ = [
    "DocumentationService",
    "initialize",
    "query_index",
    "search",
]
