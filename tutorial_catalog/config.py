# tutorial_catalog/config.py
"""
Environment-driven configuration.

Values are read from the environment each time a property is accessed,
so tests can change them with ``monkeypatch.setenv`` without rebuilding
anything.
"""

import logging
import os
from pathlib import Path
from typing import Optional

from .catalog.store import DEFAULT_PAGE_SIZE
from .storage import DEFAULT_FAVORITES_KEY

PACKAGE_DIR = Path(__file__).resolve().parent
DEFAULT_CATALOG_SOURCE = PACKAGE_DIR / "data" / "tutoriels.json"


class Settings:
    """Configuration loaded from environment variables."""

    @property
    def CATALOG_SOURCE(self) -> str:
        return os.getenv("CATALOG_SOURCE") or str(DEFAULT_CATALOG_SOURCE)

    @property
    def CATALOG_TIMEOUT(self) -> Optional[float]:
        # No timeout unless one is configured.
        raw = os.getenv("CATALOG_TIMEOUT", "").strip()
        return float(raw) if raw else None

    @property
    def FAVORITES_FILE(self) -> Path:
        return Path(os.getenv("FAVORITES_FILE") or Path.cwd() / "data" / "favorites.json")

    @property
    def FAVORITES_KEY(self) -> str:
        return os.getenv("FAVORITES_KEY") or DEFAULT_FAVORITES_KEY

    @property
    def PAGE_SIZE(self) -> int:
        return int(os.getenv("PAGE_SIZE", str(DEFAULT_PAGE_SIZE)))

    @property
    def LOG_LEVEL(self) -> str:
        return os.getenv("LOG_LEVEL", "INFO").upper()

    def validate(self) -> None:
        """Raise ``ValueError`` when a setting cannot be used."""
        if self.PAGE_SIZE < 1:
            raise ValueError("PAGE_SIZE must be at least 1")
        timeout = self.CATALOG_TIMEOUT
        if timeout is not None and timeout <= 0:
            raise ValueError("CATALOG_TIMEOUT must be positive")
        if not self.FAVORITES_KEY.strip():
            raise ValueError("FAVORITES_KEY must not be blank")
        if not isinstance(logging.getLevelName(self.LOG_LEVEL), int):
            raise ValueError(f"unknown LOG_LEVEL: {self.LOG_LEVEL}")


settings = Settings()
