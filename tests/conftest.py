"""Shared fixtures for bibfinder tests."""

from __future__ import annotations

from pathlib import Path

import pytest

from bibfinder.config import BIB_EXPORT_ENV, JSON_EXPORT_ENV
from bibfinder.metadata.resolver import MetadataResolver

FIXTURES_DIR = Path(__file__).parent / "fixtures" / "bibliography"


@pytest.fixture(autouse=True)
def _isolate_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep exports configured in the developer's shell out of the tests."""
    monkeypatch.delenv(JSON_EXPORT_ENV, raising=False)
    monkeypatch.delenv(BIB_EXPORT_ENV, raising=False)


@pytest.fixture
def json_export() -> Path:
    return FIXTURES_DIR / "bibliography.json"


@pytest.fixture
def bib_export() -> Path:
    return FIXTURES_DIR / "bibliography.bib"


@pytest.fixture
def resolver() -> MetadataResolver:
    return MetadataResolver()
