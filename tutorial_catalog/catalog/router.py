"""
Route definitions for the catalogue API.

Endpoints under /api/catalog:
- GET    /records                         : list view, optional tag filter
- GET    /search                          : search view (title contains q)
- GET    /tags                            : every tag, sorted
- GET    /paths                           : detail paths of every tutorial
- GET    /records/{record_id}             : detail view
- GET    /records/{record_id}/{section_id}: section view
- GET    /favorites                       : favourite tutorials
- POST   /favorites/{record_id}           : toggle a favourite
- DELETE /favorites/{record_id}           : remove a favourite
- DELETE /favorites                       : clear favourites
- GET    /status                          : catalogue load state
- POST   /reload                          : start a new load attempt

The catalogue is loaded lazily by the first request of the session. A
failed load is reported to every request until ``/reload`` is called.
"""

from __future__ import annotations

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request

from ..storage import FavoritesStore
from .loader import CatalogLoader, CatalogSession, LoadState, MalformedCatalog
from .schemas import (
    Catalog,
    CatalogStatus,
    FavoritesState,
    PaginatedRecords,
    Record,
    RecordDetail,
    RecordSummary,
    Section,
    SectionLink,
)
from .store import (
    NotFound,
    clamp_page,
    favorite_records,
    filter_by_tag,
    find_record,
    find_section,
    paginate,
    record_path,
    search_by_title,
    tag_universe,
    total_pages_for,
    tutorial_paths,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/catalog", tags=["catalog"])

LOAD_ERROR = "Erreur de récupération des tutoriels"


# ---------------------------------------------------------------------------
# Dependencies
#
# The application factory stores the session, the loader and the
# favourites store on ``app.state``. Tests build their own app with an
# in-memory favourites store and a temporary catalogue file.


def get_session(request: Request) -> CatalogSession:
    return request.app.state.session


def get_loader(request: Request) -> CatalogLoader:
    return request.app.state.loader


def get_favorites(request: Request) -> FavoritesStore:
    return request.app.state.favorites


def get_page_size(request: Request) -> int:
    return request.app.state.page_size


def get_catalog(
    session: CatalogSession = Depends(get_session),
    loader: CatalogLoader = Depends(get_loader),
) -> Catalog:
    """Return the loaded catalogue or fail the request with a 5xx."""
    state = session.ensure_loaded(loader)
    if state is LoadState.READY:
        return session.catalog
    if state is LoadState.FAILED:
        status = 502 if isinstance(session.error, MalformedCatalog) else 503
        raise HTTPException(status_code=status, detail=f"{LOAD_ERROR}: {session.error}")
    raise HTTPException(status_code=503, detail="Chargement des tutoriels...")


def _summary(record: Record) -> RecordSummary:
    return RecordSummary(
        id=record.id,
        title=record.title,
        type=record.type,
        href=record_path(record.id) if record.is_tutorial else None,
    )


def _page(records: List[Record], page: int, page_size: int) -> PaginatedRecords:
    total = len(records)
    page = clamp_page(page, total_pages_for(total, page_size))
    items, total_pages = paginate(records, page, page_size)
    return PaginatedRecords(
        page=page,
        page_size=page_size,
        total=total,
        total_pages=total_pages,
        items=[_summary(r) for r in items],
    )


# ---------------------------------------------------------------------------
# Browsing


@router.get("/records", response_model=PaginatedRecords)
def list_records(
    tag: Optional[str] = Query(default=None, description="Filtrer par tag"),
    page: int = Query(default=1, ge=1, description="Page courante (1-indexée)"),
    catalog: Catalog = Depends(get_catalog),
    page_size: int = Depends(get_page_size),
) -> PaginatedRecords:
    """Returns the catalogue, optionally restricted to one tag."""
    return _page(filter_by_tag(catalog, tag), page, page_size)


@router.get("/search", response_model=PaginatedRecords)
def search_records(
    q: Optional[str] = Query(default=None, description="Recherche dans les titres"),
    page: int = Query(default=1, ge=1, description="Page courante (1-indexée)"),
    catalog: Catalog = Depends(get_catalog),
    page_size: int = Depends(get_page_size),
) -> PaginatedRecords:
    """Returns the records whose title contains ``q``.

    Nothing is returned until a term is given.
    """
    return _page(search_by_title(catalog, q), page, page_size)


@router.get("/tags", response_model=List[str])
def list_tags(catalog: Catalog = Depends(get_catalog)) -> List[str]:
    return sorted(tag_universe(catalog))


@router.get("/paths", response_model=List[str])
def list_paths(catalog: Catalog = Depends(get_catalog)) -> List[str]:
    return tutorial_paths(catalog)


@router.get("/records/{record_id}", response_model=RecordDetail)
def get_record(record_id: str, catalog: Catalog = Depends(get_catalog)) -> RecordDetail:
    record = find_record(catalog, record_id)
    if isinstance(record, NotFound):
        raise HTTPException(status_code=404, detail=record.message)
    sections: List[SectionLink] = []
    if record.is_tutorial:
        sections = [
            SectionLink(id=s.id, title=s.title, href=record_path(record.id, s.id))
            for s in record.sections
        ]
    return RecordDetail(
        id=record.id,
        title=record.title,
        type=record.type,
        author=record.author,
        description=record.description,
        tags=list(record.tags),
        sections=sections,
    )


@router.get("/records/{record_id}/{section_id}", response_model=Section)
def get_section(
    record_id: str, section_id: str, catalog: Catalog = Depends(get_catalog)
) -> Section:
    section = find_section(catalog, record_id, section_id)
    if isinstance(section, NotFound):
        raise HTTPException(status_code=404, detail=section.message)
    return section


# ---------------------------------------------------------------------------
# Favourites


@router.get("/favorites", response_model=List[RecordSummary])
def list_favorites(
    catalog: Catalog = Depends(get_catalog),
    favorites: FavoritesStore = Depends(get_favorites),
) -> List[RecordSummary]:
    """Favourite tutorials, in catalogue order."""
    return [_summary(r) for r in favorite_records(catalog, favorites.get())]


@router.post("/favorites/{record_id}", response_model=FavoritesState)
def toggle_favorite(
    record_id: str,
    catalog: Catalog = Depends(get_catalog),
    favorites: FavoritesStore = Depends(get_favorites),
) -> FavoritesState:
    """Add the tutorial to the favourites, or take it out if already there."""
    record = find_record(catalog, record_id)
    if isinstance(record, NotFound):
        raise HTTPException(status_code=404, detail=record.message)
    if not record.is_tutorial:
        raise HTTPException(
            status_code=409, detail="Seuls les tutoriels peuvent être ajoutés aux favoris"
        )
    favorites.toggle(record.id)
    return FavoritesState(ids=favorites.ordered())


@router.delete("/favorites/{record_id}", response_model=FavoritesState)
def remove_favorite(
    record_id: str, favorites: FavoritesStore = Depends(get_favorites)
) -> FavoritesState:
    favorites.remove(record_id)
    return FavoritesState(ids=favorites.ordered())


@router.delete("/favorites", response_model=FavoritesState)
def clear_favorites(favorites: FavoritesStore = Depends(get_favorites)) -> FavoritesState:
    favorites.clear()
    return FavoritesState(ids=[])


# ---------------------------------------------------------------------------
# Loading


@router.get("/status", response_model=CatalogStatus)
def catalog_status(session: CatalogSession = Depends(get_session)) -> CatalogStatus:
    return CatalogStatus(
        state=session.state.value,
        count=len(session.catalog),
        error=str(session.error) if session.error else None,
    )


@router.post("/reload", response_model=CatalogStatus)
def reload_catalog(
    session: CatalogSession = Depends(get_session),
    loader: CatalogLoader = Depends(get_loader),
) -> CatalogStatus:
    state = session.load(loader)
    logger.info("Catalogue reload finished: %s", state.value)
    return catalog_status(session)
