"""
Pydantic schema definitions for the catalog module.

``Record`` and ``Section`` mirror the entries of the static
``tutoriels.json`` document. Models are frozen so that a loaded catalog
can be shared between requests without anyone mutating it in place; a
reload replaces the whole tuple instead.

Identifiers are always stored as strings. The JSON document is free to
use numbers (``"id": 1``) while paths and persisted favourites only
ever carry text, so both sides go through ``ids.normalize_id`` and are
compared as plain strings everywhere else.
"""

from typing import Any, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..ids import normalize_id

TUTORIAL = "tutorial"
# Spelling used by the original French catalogue documents.
_TYPE_ALIASES = {"tutoriel": TUTORIAL}


class Section(BaseModel):
    """A sub-unit of a tutorial."""

    model_config = ConfigDict(frozen=True)

    id: str
    title: str
    content: str = ""

    @field_validator("id", mode="before")
    @classmethod
    def _canonical_id(cls, value: Any) -> str:
        return normalize_id(value)


class Record(BaseModel):
    """A catalogue entry: a tutorial or another kind of resource.

    Only ``id`` and ``title`` are required. ``tags`` and ``sections``
    default to empty lists when the document omits them. ``type`` is
    kept verbatim except for the French ``"tutoriel"`` which is folded
    into ``"tutorial"``.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    title: str
    type: str = ""
    author: Optional[str] = None
    description: Optional[str] = None
    tags: List[str] = Field(default_factory=list)
    sections: List[Section] = Field(default_factory=list)

    @field_validator("id", mode="before")
    @classmethod
    def _canonical_id(cls, value: Any) -> str:
        return normalize_id(value)

    @field_validator("type", mode="before")
    @classmethod
    def _canonical_type(cls, value: Any) -> Any:
        if value is None:
            return ""
        if isinstance(value, str):
            return _TYPE_ALIASES.get(value.strip().lower(), value)
        return value

    @field_validator("tags", "sections", mode="before")
    @classmethod
    def _none_is_empty(cls, value: Any) -> Any:
        return [] if value is None else value

    @property
    def is_tutorial(self) -> bool:
        return self.type == TUTORIAL


Catalog = Tuple[Record, ...]


# ---------------------------------------------------------------------------
# Response models


class SectionLink(BaseModel):
    id: str
    title: str
    href: str


class RecordSummary(BaseModel):
    """A list entry. ``href`` is only set for tutorials; other resource
    kinds are display-only."""

    id: str
    title: str
    type: str
    href: Optional[str] = None


class RecordDetail(BaseModel):
    id: str
    title: str
    type: str
    author: Optional[str] = None
    description: Optional[str] = None
    tags: List[str] = Field(default_factory=list)
    sections: List[SectionLink] = Field(default_factory=list)


class PaginatedRecords(BaseModel):
    """A wrapper for paginated results returned from the list views."""

    page: int
    page_size: int
    total: int
    total_pages: int
    items: List[RecordSummary]


class FavoritesState(BaseModel):
    ids: List[str]


class CatalogStatus(BaseModel):
    state: str
    count: int
    error: Optional[str] = None
