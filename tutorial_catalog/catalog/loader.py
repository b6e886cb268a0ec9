"""
Catalogue loading.

``CatalogLoader`` fetches the static ``tutoriels.json`` document and
parses it into a tuple of ``Record``. The source may be an HTTP(S) URL,
a ``file://`` URL or a plain filesystem path. Only the Python standard
library is used for the transfer.

Two failures are distinguished:

* ``SourceUnavailable``: the document cannot be reached, or the server
  answered with a non-success status;
* ``MalformedCatalog``: the body is not a JSON array of records.

There is no automatic retry. Callers ask for another load explicitly,
usually through ``CatalogSession.load()``, which also tracks the
``idle → loading → ready | failed`` state of the current attempt and
drops results that arrive after a newer attempt has started.
"""

from __future__ import annotations

import enum
import http.client
import json
import logging
import threading
import urllib.error
import urllib.request
from pathlib import Path
from typing import Optional, Union

from pydantic import TypeAdapter, ValidationError

from .schemas import Catalog

logger = logging.getLogger(__name__)

_records_adapter = TypeAdapter(Catalog)


class CatalogError(Exception):
    """Base class for catalogue loading failures."""


class SourceUnavailable(CatalogError):
    """The catalogue document could not be retrieved."""


class MalformedCatalog(CatalogError):
    """The catalogue document is not a sequence of records."""


def _is_url(source: str) -> bool:
    return source.split(":", 1)[0].lower() in ("http", "https", "file")


class CatalogLoader:
    """Read the catalogue from a URL or a local path.

    ``timeout`` is passed to ``urlopen`` when set; by default no timeout
    is applied.
    """

    def __init__(self, source: Union[str, Path], timeout: Optional[float] = None) -> None:
        self.source = str(source)
        self.timeout = timeout

    def _read_url(self) -> bytes:
        request = urllib.request.Request(
            self.source,
            headers={"Accept": "application/json"},
        )
        kwargs = {} if self.timeout is None else {"timeout": self.timeout}
        try:
            with urllib.request.urlopen(request, **kwargs) as response:
                status = getattr(response, "status", None) or 200
                if not 200 <= status < 300:
                    raise SourceUnavailable(
                        f"{self.source} returned status {status}"
                    )
                return response.read()
        except urllib.error.HTTPError as exc:
            raise SourceUnavailable(f"{self.source} returned status {exc.code}") from exc
        except (urllib.error.URLError, http.client.HTTPException, OSError) as exc:
            raise SourceUnavailable(f"cannot reach {self.source}: {exc}") from exc

    def _read_path(self) -> bytes:
        try:
            return Path(self.source).read_bytes()
        except OSError as exc:
            raise SourceUnavailable(f"cannot read {self.source}: {exc}") from exc

    def fetch(self) -> bytes:
        """Return the raw document."""
        return self._read_url() if _is_url(self.source) else self._read_path()

    def load(self) -> Catalog:
        """Fetch and parse the catalogue.

        Returns every record in document order. Raises
        ``SourceUnavailable`` or ``MalformedCatalog``.
        """
        try:
            body = self.fetch()
        except SourceUnavailable as exc:
            logger.error("Error fetching catalogue: %s", exc)
            raise
        try:
            data = json.loads(body.decode("utf-8-sig"))
        except (UnicodeDecodeError, json.JSONDecodeError) as exc:
            logger.error("Catalogue at %s is not valid JSON: %s", self.source, exc)
            raise MalformedCatalog(f"invalid JSON: {exc}") from exc
        if not isinstance(data, list):
            logger.error("Catalogue at %s is not a JSON array", self.source)
            raise MalformedCatalog("catalogue root must be a JSON array")
        try:
            records = _records_adapter.validate_python(data)
        except ValidationError as exc:
            logger.error("Catalogue at %s has invalid records: %s", self.source, exc)
            raise MalformedCatalog(str(exc)) from exc
        logger.info("Loaded %d records from %s", len(records), self.source)
        return records


class LoadState(str, enum.Enum):
    IDLE = "idle"
    LOADING = "loading"
    READY = "ready"
    FAILED = "failed"


class CatalogSession:
    """Holds the catalogue of one browsing session and its load state.

    Every call to ``begin()`` hands out a new ticket and supersedes the
    previous ones; ``complete()`` and ``fail()`` only take effect for
    the latest ticket, so a slow response can never overwrite a fresher
    one.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._ticket = 0
        self.state = LoadState.IDLE
        self.catalog: Catalog = ()
        self.error: Optional[CatalogError] = None

    def begin(self) -> int:
        with self._lock:
            self._ticket += 1
            self.state = LoadState.LOADING
            return self._ticket

    def complete(self, ticket: int, catalog: Catalog) -> bool:
        with self._lock:
            if ticket != self._ticket:
                logger.debug("Ignoring superseded catalogue load #%d", ticket)
                return False
            self.catalog = tuple(catalog)
            self.error = None
            self.state = LoadState.READY
            return True

    def fail(self, ticket: int, error: CatalogError) -> bool:
        with self._lock:
            if ticket != self._ticket:
                logger.debug("Ignoring superseded catalogue failure #%d", ticket)
                return False
            self.error = error
            self.state = LoadState.FAILED
            return True

    def load(self, loader: CatalogLoader) -> LoadState:
        """Run one load attempt and return the resulting state.

        The state is ``LOADING`` for the whole attempt. On failure
        ``catalog`` keeps the previous records but the state is
        ``FAILED``. Any error raised by the loader ends the attempt as
        ``FAILED``; unexpected ones are wrapped in ``SourceUnavailable``.
        """
        ticket = self.begin()
        try:
            records = loader.load()
        except CatalogError as exc:
            self.fail(ticket, exc)
        except Exception as exc:
            logger.exception("Unexpected error while loading the catalogue")
            self.fail(ticket, SourceUnavailable(f"{type(exc).__name__}: {exc}"))
        else:
            self.complete(ticket, records)
        return self.state

    def ensure_loaded(self, loader: CatalogLoader) -> LoadState:
        """Load once per session. A failed attempt is not retried here."""
        with self._lock:
            idle = self.state is LoadState.IDLE
        if idle:
            return self.load(loader)
        return self.state
