"""
Catalog package for the tutorial browser.

This package loads the static tutorial catalogue, derives the list,
search, tag-filter and favourites views from it, and resolves single
records and their sections. The HTTP routes live in ``router``; the
pure query and lookup helpers live in ``store`` so that they can be
used without FastAPI.
"""

from .router import router as catalog_router  # noqa: F401
