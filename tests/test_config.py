"""Tests for application configuration."""

from __future__ import annotations

from pathlib import Path

import pytest

from bibfinder.config import BIB_EXPORT_ENV, JSON_EXPORT_ENV, AppConfig


class TestAppConfig:
    """Test AppConfig dataclass."""

    def test_default_config(self) -> None:
        """Should leave exports unconfigured without environment values."""
        config = AppConfig()

        assert config.json_path is None
        assert config.bib_path is None
        assert config.max_records_per_path == 5

    def test_environment_defaults(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Should read export paths from the environment."""
        monkeypatch.setenv(JSON_EXPORT_ENV, "/exports/library.json")
        monkeypatch.setenv(BIB_EXPORT_ENV, "/exports/library.bib")

        config = AppConfig()

        assert config.json_path == Path("/exports/library.json")
        assert config.bib_path == Path("/exports/library.bib")

    def test_blank_environment_ignored(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Should treat blank environment values as unset."""
        monkeypatch.setenv(JSON_EXPORT_ENV, "   ")

        assert AppConfig().json_path is None

    def test_explicit_values_win(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Should not override explicit paths with the environment."""
        monkeypatch.setenv(JSON_EXPORT_ENV, "/exports/library.json")

        config = AppConfig(json_path=Path("/custom/library.json"))

        assert config.json_path == Path("/custom/library.json")

    def test_resolve_paths_overrides(self) -> None:
        """Should prefer per-call overrides."""
        config = AppConfig(json_path=Path("/a.json"), bib_path=Path("/a.bib"))

        assert config.resolve_paths("/b.json", None) == (Path("/b.json"), Path("/a.bib"))
        assert config.resolve_paths(None, Path("/b.bib")) == (Path("/a.json"), Path("/b.bib"))
        assert config.resolve_paths() == (Path("/a.json"), Path("/a.bib"))

    def test_resolve_paths_expands_home(self) -> None:
        """Should expand ~ in overrides."""
        json_path, _ = AppConfig().resolve_paths("~/library.json")

        assert json_path == Path.home() / "library.json"
