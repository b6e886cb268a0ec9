"""Unit tests for the catalogue query engine.

These tests exercise the pure helpers of ``tutorial_catalog.catalog.store``
that derive the list, tag-filter and search views: filtering, pagination and
the tag universe. They build catalogues in memory; no file or network access
is involved.
"""

from __future__ import annotations

import typing as typ

import pytest

from tutorial_catalog.catalog.schemas import Record
from tutorial_catalog.catalog.store import (
    clamp_page,
    favorite_records,
    filter_by_tag,
    paginate,
    query,
    search_by_title,
    tag_universe,
    tutorial_paths,
)


def _records(count: int) -> list[Record]:
    return [Record(id=i, title=f"Tutoriel {i}", type="tutorial") for i in range(1, count + 1)]


def test_tag_filter_keeps_both_js_records(catalog: tuple[Record, ...]) -> None:
    """Filtering on ``js`` keeps the tutorial and the article, one page."""
    result = query(catalog[:2], term="", tag="js", page=1, page_size=2)
    assert [r.id for r in result.visible] == ["1", "2"], (
        f"expected both js records, got {result.visible!r}"
    )
    assert result.total_pages == 1


def test_term_matches_title_case_insensitively(catalog: tuple[Record, ...]) -> None:
    result = query(catalog[:2], term="adv", tag="", page=1, page_size=2)
    assert [r.id for r in result.visible] == ["2"]


def test_empty_tag_returns_input_in_order(catalog: tuple[Record, ...]) -> None:
    assert filter_by_tag(catalog, "") == list(catalog)
    assert filter_by_tag(catalog, None) == list(catalog)


def test_tag_filter_is_case_sensitive(catalog: tuple[Record, ...]) -> None:
    assert filter_by_tag(catalog, "JS") == [], "tag matching must be exact"
    assert [r.id for r in filter_by_tag(catalog, "perf")] == ["2"]


def test_empty_search_term_shows_nothing(catalog: tuple[Record, ...]) -> None:
    """The search view shows no results until a term is typed."""
    assert search_by_title(catalog, "") == []
    assert search_by_title(catalog, None) == []


def test_search_matches_substring_anywhere_in_title(catalog: tuple[Record, ...]) -> None:
    assert [r.id for r in search_by_title(catalog, "INTRO")] == ["1", "3"]
    assert search_by_title(catalog, "python") == []


def test_query_combines_tag_and_term(catalog: tuple[Record, ...]) -> None:
    result = query(catalog, term="intro", tag="css")
    assert [r.id for r in result.visible] == ["3"]
    assert result.total == 1


@pytest.mark.parametrize(
    ("count", "page_size", "expected_pages"),
    [(0, 5, 1), (1, 5, 1), (5, 5, 1), (6, 5, 2), (11, 5, 3)],
)
def test_total_pages(count: int, page_size: int, expected_pages: int) -> None:
    _, total_pages = paginate(_records(count), 1, page_size)
    assert total_pages == expected_pages, (
        f"{count} records by {page_size} should give {expected_pages} pages"
    )


def test_last_page_holds_the_remainder() -> None:
    records = _records(11)
    visible, total_pages = paginate(records, 3, 5)
    assert total_pages == 3
    assert [r.id for r in visible] == ["11"]


def test_full_last_page() -> None:
    visible, total_pages = paginate(_records(10), 2, 5)
    assert total_pages == 2
    assert len(visible) == 5


@pytest.mark.parametrize("page", [0, -1, 4, 100])
def test_out_of_range_page_is_empty_not_clamped(page: int) -> None:
    visible, total_pages = paginate(_records(11), page, 5)
    assert visible == []
    assert total_pages == 3


def test_empty_result_still_has_one_page() -> None:
    result = query(_records(3), tag="nope", page=1, page_size=2)
    assert result.visible == []
    assert result.total == 0
    assert result.total_pages == 1


def test_page_size_must_be_positive() -> None:
    with pytest.raises(ValueError, match="page_size"):
        paginate(_records(3), 1, 0)


def test_clamp_page() -> None:
    assert clamp_page(0, 3) == 1
    assert clamp_page(2, 3) == 2
    assert clamp_page(9, 3) == 3
    assert clamp_page(5, 0) == 1


def test_tag_universe_is_deduplicated(catalog: tuple[Record, ...]) -> None:
    assert tag_universe(catalog) == {"js", "perf", "css"}
    assert tag_universe([]) == set()


def test_favorite_records_keep_catalogue_order(catalog: tuple[Record, ...]) -> None:
    favs: set[typ.Any] = {"3", 1, "2", "404"}
    records = favorite_records(catalog, favs)
    assert [r.id for r in records] == ["1", "3"], (
        "articles and unknown ids must be skipped, catalogue order kept"
    )


def test_tutorial_paths_skip_other_kinds(catalog: tuple[Record, ...]) -> None:
    assert tutorial_paths(catalog) == ["/records/1", "/records/3"]


def test_query_does_not_mutate_catalogue(catalog: tuple[Record, ...]) -> None:
    before = list(catalog)
    query(catalog, term="intro", tag="js", page=2, page_size=1)
    assert list(catalog) == before
