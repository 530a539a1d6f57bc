"""Domain model - documents and search value objects.

Value objects are immutable (frozen=True): a Document is created once by the
corpus loader and never changes for the lifetime of the index built from it.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field
from pydantic.dataclasses import dataclass


class Category(str, Enum):
    """Closed set of documentation categories."""

    SPECIFICATION = "specification"
    IMPLEMENTATION = "implementation"
    TROUBLESHOOTING = "troubleshooting"
    EXAMPLES = "examples"


# Searchable fields, in the order matches are reported
SEARCHABLE_FIELDS: tuple[str, ...] = ("title", "content", "tags", "category")

TAG_SEPARATOR = ", "


@dataclass(frozen=True)
class Document:
    """A parsed documentation page.

    Attributes:
        id: Stable identifier derived from the origin path.
        title: Front matter title, first heading, or "Untitled".
        content: Markdown body without front matter.
        category: Category assigned from the origin path.
        tags: Free-form labels from front matter, in declaration order.
        source: Origin path or URI, used for citation only.
        last_updated: Load time (not the file modification time).
    """

    id: Annotated[str, Field(min_length=1)]
    title: str
    content: str
    category: Category = Category.IMPLEMENTATION
    tags: tuple[str, ...] = ()
    source: str = ""
    last_updated: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    def field_value(self, name: str) -> str:
        """Return the searchable text of a field."""
        if name == "title":
            return self.title
        if name == "content":
            return self.content
        if name == "tags":
            return TAG_SEPARATOR.join(self.tags)
        if name == "category":
            return self.category.value
        raise KeyError(f"Unknown searchable field: {name}")


class FieldWeights(BaseModel):
    """Per-field weights used to combine match scores.

    Weights are independent and need not sum to 1.
    """

    model_config = ConfigDict(frozen=True)

    title: float = Field(default=0.4, gt=0.0, le=1.0)
    content: float = Field(default=0.3, gt=0.0, le=1.0)
    tags: float = Field(default=0.2, gt=0.0, le=1.0)
    category: float = Field(default=0.1, gt=0.0, le=1.0)

    def items(self) -> tuple[tuple[str, float], ...]:
        """(field, weight) pairs in reporting order."""
        return tuple((name, getattr(self, name)) for name in SEARCHABLE_FIELDS)


class SearchHit(BaseModel):
    """One ranked result at the search boundary."""

    model_config = ConfigDict(frozen=True)

    title: str
    category: Category
    source: str
    score: float = Field(ge=0.0, le=1.0, description="0.0 is a perfect match")
    highlights: list[str] = Field(default_factory=list)
