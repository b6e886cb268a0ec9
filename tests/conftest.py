"""Shared fixtures for the catalogue tests."""

from __future__ import annotations

import json
import typing as typ

import pytest

from tutorial_catalog.catalog.schemas import Record
from tutorial_catalog.storage import FavoritesStore, MemoryStorage

if typ.TYPE_CHECKING:
    from pathlib import Path

RAW_CATALOG: list[dict[str, typ.Any]] = [
    {
        "id": 1,
        "title": "Intro",
        "type": "tutorial",
        "tags": ["js"],
        "sections": [{"id": 5, "title": "Setup", "content": "Install node."}],
    },
    {"id": 2, "title": "Advanced", "type": "article", "tags": ["js", "perf"]},
    {
        "id": "3",
        "title": "Introduction au CSS",
        "type": "tutoriel",
        "author": "Claire",
        "tags": ["css"],
        "sections": [
            {"id": 1, "title": "Sélecteurs", "content": "..."},
            {"id": 2, "title": "Cascade", "content": "..."},
        ],
    },
]


@pytest.fixture
def raw_catalog() -> list[dict[str, typ.Any]]:
    return [dict(entry) for entry in RAW_CATALOG]


@pytest.fixture
def catalog(raw_catalog: list[dict[str, typ.Any]]) -> tuple[Record, ...]:
    return tuple(Record.model_validate(entry) for entry in raw_catalog)


@pytest.fixture
def catalog_file(tmp_path: Path, raw_catalog: list[dict[str, typ.Any]]) -> Path:
    path = tmp_path / "tutoriels.json"
    path.write_text(json.dumps(raw_catalog), encoding="utf-8")
    return path


@pytest.fixture
def memory_storage() -> MemoryStorage:
    return MemoryStorage()


@pytest.fixture
def favorites(memory_storage: MemoryStorage) -> FavoritesStore:
    return FavoritesStore(memory_storage)
