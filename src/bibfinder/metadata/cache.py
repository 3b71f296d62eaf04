"""Memoized reads of export files."""

from __future__ import annotations

import asyncio
import json
import logging
from pathlib import Path
from typing import Dict, List, Tuple

from bibfinder.metadata.bibtex import parse_entries
from bibfinder.models import BibEntry, JsonValue

LOGGER = logging.getLogger(__name__)


def _cache_key(path: Path) -> str:
    return str(Path(path).expanduser().absolute())


def _read_text(path: Path) -> str:
    return Path(path).expanduser().read_text(encoding="utf-8")


def _path_exists(path: Path) -> bool:
    return Path(path).expanduser().exists()


class MetadataCache:
    """Parsed export contents keyed by absolute file path.

    Entries live until :meth:`clear`; a failed read or parse is not stored so
    the next lookup goes back to the filesystem.
    """

    def __init__(self) -> None:
        self.json: Dict[str, JsonValue] = {}
        self.bib: Dict[str, List[BibEntry]] = {}

    def clear(self) -> None:
        self.json.clear()
        self.bib.clear()

    async def exists(self, path: Path) -> bool:
        return await asyncio.to_thread(_path_exists, path)

    async def read_json(self, path: Path) -> Tuple[bool, JsonValue]:
        """Return ``(ok, data)``; ``ok`` is false when the file could not be parsed."""
        key = _cache_key(path)
        if key in self.json:
            LOGGER.debug("JSON cache hit for %s", key)
            return True, self.json[key]

        try:
            raw = await asyncio.to_thread(_read_text, path)
            parsed = json.loads(raw)
        except (OSError, UnicodeDecodeError, json.JSONDecodeError, RecursionError) as exc:
            LOGGER.warning("Unable to load JSON export %s: %s", path, exc)
            return False, None

        self.json[key] = parsed
        return True, parsed

    async def read_bib(self, path: Path) -> List[BibEntry] | None:
        key = _cache_key(path)
        if key in self.bib:
            LOGGER.debug("BibTeX cache hit for %s", key)
            return self.bib[key]

        try:
            content = await asyncio.to_thread(_read_text, path)
        except (OSError, UnicodeDecodeError) as exc:
            LOGGER.warning("Unable to load BibTeX export %s: %s", path, exc)
            return None

        entries = parse_entries(content)
        LOGGER.debug("Parsed %d BibTeX entries from %s", len(entries), path)
        self.bib[key] = entries
        return entries
