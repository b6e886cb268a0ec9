"""
Query engine and record/section resolver for the catalogue.

Everything in this module is a pure function of an already loaded
``Catalog`` (a tuple of ``Record``) and the transient parameters of a
view: search term, selected tag, page number and page size. Nothing
here performs I/O, so the HTTP layer can call these helpers as often as
it likes and tests can feed them hand-built catalogues.

Two filtering policies coexist on purpose:

* the tag filter treats an empty tag as "no filter" and returns every
  record;
* the title search treats an empty term as "no query yet" and returns
  nothing, which is what the search view shows before anything is
  typed.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, List, Optional, Sequence, Set, Tuple, Union

from typing_extensions import Literal  # Py3.8 compatibility

from ..ids import coerce_id
from .schemas import Record, Section

DEFAULT_PAGE_SIZE = 12

_NOT_FOUND_MESSAGES = {
    "record": "Tutoriel introuvable",
    "section": "Section introuvable",
}


@dataclass(frozen=True)
class NotFound:
    """Result of a lookup whose target is absent.

    ``what`` tells whether the record itself is missing or whether the
    record exists but has no section with the requested id.
    """

    what: Literal["record", "section"]
    record_id: str
    section_id: Optional[str] = None

    @property
    def message(self) -> str:
        return _NOT_FOUND_MESSAGES[self.what]


@dataclass(frozen=True)
class QueryResult:
    visible: List[Record]
    total: int
    total_pages: int


def _norm(s: Optional[str]) -> str:
    """Normalize a string for case-insensitive comparison."""
    return (s or "").lower()


# ---------------------------------------------------------------------------
# Query engine


def filter_by_tag(records: Iterable[Record], tag: Optional[str]) -> List[Record]:
    """Keep the records carrying ``tag`` (exact, case-sensitive).

    An empty or missing tag keeps every record, in their original order.
    """
    if not tag:
        return list(records)
    return [r for r in records if tag in r.tags]


def search_by_title(records: Iterable[Record], term: Optional[str]) -> List[Record]:
    """Keep the records whose title contains ``term``, ignoring case.

    An empty term yields an empty list rather than the whole catalogue.
    """
    if not term:
        return []
    needle = _norm(term)
    return [r for r in records if needle in _norm(r.title)]


def total_pages_for(count: int, page_size: int) -> int:
    if page_size < 1:
        raise ValueError("page_size must be at least 1")
    return max(1, (count + page_size - 1) // page_size)


def paginate(
    records: Sequence[Record], page: int, page_size: int
) -> Tuple[List[Record], int]:
    """Slice ``records`` for a 1-indexed ``page``.

    Returns the slice and the total number of pages (never less than
    one). The page is not clamped: a page outside ``1..total_pages``
    simply yields an empty slice.
    """
    total_pages = total_pages_for(len(records), page_size)
    if page < 1:
        return [], total_pages
    start = (page - 1) * page_size
    return list(records[start:start + page_size]), total_pages


def clamp_page(page: int, total_pages: int) -> int:
    """Clamp a requested page into ``1..total_pages``."""
    return min(max(1, page), max(1, total_pages))


def query(
    catalog: Sequence[Record],
    term: Optional[str] = "",
    tag: Optional[str] = "",
    page: int = 1,
    page_size: int = DEFAULT_PAGE_SIZE,
) -> QueryResult:
    """Derive the visible page of ``catalog`` for a set of view parameters.

    The tag filter is applied first. The title filter only applies when
    ``term`` is non-empty, so browsing with an empty term behaves like
    the list view; use ``search_by_title`` directly for the search view
    semantics. Pagination comes last.
    """
    items = filter_by_tag(catalog, tag)
    if term:
        items = search_by_title(items, term)
    visible, total_pages = paginate(items, page, page_size)
    return QueryResult(visible=visible, total=len(items), total_pages=total_pages)


def tag_universe(catalog: Iterable[Record]) -> Set[str]:
    """Return every tag used anywhere in the catalogue."""
    tags: Set[str] = set()
    for record in catalog:
        tags.update(record.tags)
    return tags


def favorite_records(catalog: Iterable[Record], favorites: Iterable[Any]) -> List[Record]:
    """Return the favourited tutorials, in catalogue order.

    Identifiers that are not in the catalogue (or that point to a
    non-tutorial resource) are skipped.
    """
    wanted = {i for i in (coerce_id(f) for f in favorites) if i is not None}
    return [r for r in catalog if r.is_tutorial and r.id in wanted]


def record_path(record_id: str, section_id: Optional[str] = None) -> str:
    if section_id is None:
        return f"/records/{record_id}"
    return f"/records/{record_id}/{section_id}"


def tutorial_paths(catalog: Iterable[Record]) -> List[str]:
    """Detail paths of every tutorial; other kinds have no page."""
    return [record_path(r.id) for r in catalog if r.is_tutorial]


# ---------------------------------------------------------------------------
# Resolver


def find_record(catalog: Iterable[Record], record_id: Any) -> Union[Record, NotFound]:
    """Locate a record by id.

    ``record_id`` may be given as a number or a string; it is compared
    in its canonical string form. Returns ``NotFound("record")`` when no
    record matches.
    """
    wanted = coerce_id(record_id)
    if wanted is not None:
        for record in catalog:
            if record.id == wanted:
                return record
    return NotFound("record", str(record_id))


def find_section(
    catalog: Iterable[Record], record_id: Any, section_id: Any
) -> Union[Section, NotFound]:
    """Locate a section within a record.

    Returns ``NotFound("record")`` when the record is absent and
    ``NotFound("section")`` when the record exists but has no such
    section.
    """
    record = find_record(catalog, record_id)
    if isinstance(record, NotFound):
        return NotFound("record", record.record_id, str(section_id))
    wanted = coerce_id(section_id)
    # Only tutorials expose sections.
    sections = record.sections if record.is_tutorial else []
    for section in sections:
        if section.id == wanted:
            return section
    return NotFound("section", record.id, str(section_id))
