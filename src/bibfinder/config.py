"""Application configuration defaults."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

JSON_EXPORT_ENV = "BIBLIOGRAPHY_JSON"
BIB_EXPORT_ENV = "BIBLIOGRAPHY_BIB"


def _path_from_env(name: str) -> Path | None:
    value = os.environ.get(name, "").strip()
    return Path(value).expanduser() if value else None


@dataclass(slots=True)
class AppConfig:
    json_path: Path | None = None
    bib_path: Path | None = None
    max_records_per_path: int = 5

    def __post_init__(self) -> None:
        if self.json_path is None:
            self.json_path = _path_from_env(JSON_EXPORT_ENV)
        if self.bib_path is None:
            self.bib_path = _path_from_env(BIB_EXPORT_ENV)

    def resolve_paths(
        self,
        json_path: str | Path | None = None,
        bib_path: str | Path | None = None,
    ) -> tuple[Path | None, Path | None]:
        """Apply per-call overrides on top of the configured export paths."""
        resolved_json = Path(json_path).expanduser() if json_path else self.json_path
        resolved_bib = Path(bib_path).expanduser() if bib_path else self.bib_path
        return resolved_json, resolved_bib
