# tutorial_catalog/main.py
import logging
from typing import Optional

from fastapi import FastAPI

from .catalog import catalog_router
from .catalog.loader import CatalogLoader, CatalogSession
from .config import Settings, settings as default_settings
from .storage import FavoritesStore, JsonFileStorage

logger = logging.getLogger(__name__)


def create_app(
    settings: Optional[Settings] = None,
    loader: Optional[CatalogLoader] = None,
    favorites: Optional[FavoritesStore] = None,
) -> FastAPI:
    """Build the application.

    ``loader`` and ``favorites`` default to the ones described by the
    settings; tests pass their own.
    """
    settings = settings or default_settings
    settings.validate()
    logging.basicConfig(
        level=settings.LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    app = FastAPI(
        title="Tutoriels et Ressources",
        description=(
            "Navigation dans un catalogue statique de tutoriels : liste, "
            "recherche, filtre par tag, favoris et détail des sections."
        ),
        version="1.0.0",
    )
    app.state.session = CatalogSession()
    app.state.loader = loader or CatalogLoader(
        settings.CATALOG_SOURCE, timeout=settings.CATALOG_TIMEOUT
    )
    app.state.favorites = favorites or FavoritesStore(
        JsonFileStorage(settings.FAVORITES_FILE), key=settings.FAVORITES_KEY
    )
    app.state.page_size = settings.PAGE_SIZE

    # Route de base pour tester rapidement
    @app.get("/")
    def health_check():
        return {"status": "ok", "catalog": app.state.session.state.value}

    app.include_router(catalog_router)
    logger.info("Catalogue source: %s", app.state.loader.source)
    return app


# uvicorn tutorial_catalog.main:app
app = create_app()
