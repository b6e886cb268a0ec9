"""Unit tests for environment-driven settings."""

from __future__ import annotations

from pathlib import Path

import pytest

from tutorial_catalog.config import DEFAULT_CATALOG_SOURCE, Settings


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch) -> pytest.MonkeyPatch:
    for name in (
        "CATALOG_SOURCE",
        "CATALOG_TIMEOUT",
        "FAVORITES_FILE",
        "FAVORITES_KEY",
        "PAGE_SIZE",
        "LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


def test_defaults(clean_env: pytest.MonkeyPatch) -> None:
    settings = Settings()
    assert settings.CATALOG_SOURCE == str(DEFAULT_CATALOG_SOURCE)
    assert settings.CATALOG_TIMEOUT is None
    assert settings.FAVORITES_KEY == "favoris"
    assert settings.PAGE_SIZE == 12
    assert settings.LOG_LEVEL == "INFO"
    settings.validate()


def test_packaged_catalogue_exists() -> None:
    assert Path(DEFAULT_CATALOG_SOURCE).is_file()


def test_values_are_read_on_access(clean_env: pytest.MonkeyPatch, tmp_path: Path) -> None:
    settings = Settings()
    clean_env.setenv("CATALOG_SOURCE", "https://example.invalid/tutoriels.json")
    clean_env.setenv("CATALOG_TIMEOUT", "3")
    clean_env.setenv("FAVORITES_FILE", str(tmp_path / "f.json"))
    clean_env.setenv("PAGE_SIZE", "5")
    clean_env.setenv("LOG_LEVEL", "debug")
    assert settings.CATALOG_SOURCE == "https://example.invalid/tutoriels.json"
    assert settings.CATALOG_TIMEOUT == 3.0
    assert settings.FAVORITES_FILE == tmp_path / "f.json"
    assert settings.PAGE_SIZE == 5
    assert settings.LOG_LEVEL == "DEBUG"


@pytest.mark.parametrize(
    ("name", "value"),
    [
        ("PAGE_SIZE", "0"),
        ("PAGE_SIZE", "abc"),
        ("CATALOG_TIMEOUT", "-1"),
        ("FAVORITES_KEY", "  "),
        ("LOG_LEVEL", "LOUD"),
    ],
)
def test_validate_rejects_bad_values(
    clean_env: pytest.MonkeyPatch, name: str, value: str
) -> None:
    clean_env.setenv(name, value)
    with pytest.raises(ValueError):
        Settings().validate()
