"""Lookups across the JSON and BibTeX exports."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Sequence

from bibfinder.config import BIB_EXPORT_ENV, JSON_EXPORT_ENV, AppConfig
from bibfinder.metadata.cache import MetadataCache
from bibfinder.metadata.descriptor import (
    BIB_ALTERNATE_KEY_FIELDS,
    JSON_CITATION_KEY_FIELDS,
    build_structured_descriptor,
    build_text_descriptor,
)
from bibfinder.metadata.structured import (
    find_top_level_field,
    find_value,
    iter_items,
    matched_field_name,
)
from bibfinder.models import LookupFailure, LookupResult, StructuredMatch, TextMatch
from bibfinder.utils.paths import matches_variants, path_variants

LOGGER = logging.getLogger(__name__)

JSON_KIND = "JSON"
BIB_KIND = "BibTeX"
EMPTY_KEY_ERROR = "Citation key must not be empty"


def _not_configured_error() -> str:
    return (
        "No bibliography metadata files configured. "
        f"Provide {JSON_EXPORT_ENV} or {BIB_EXPORT_ENV}, or pass explicit export paths."
    )


def _not_found_error(kind: str, path: Path) -> str:
    return f"{kind} metadata file not found at {path}"


def _normalize_key(value: str) -> str:
    return value.strip().casefold()


class MetadataResolver:
    """Resolve a file path or citation key to bibliography metadata.

    The JSON export is always consulted before the BibTeX export. Errors from
    every configured source are collected and returned together when nothing
    matches.
    """

    def __init__(
        self,
        config: AppConfig | None = None,
        cache: MetadataCache | None = None,
    ) -> None:
        self._config = config
        self.cache = cache if cache is not None else MetadataCache()

    @property
    def config(self) -> AppConfig:
        # Built per access so environment changes are picked up.
        return self._config if self._config is not None else AppConfig()

    def clear_cache(self) -> None:
        self.cache.clear()

    async def lookup_by_path(
        self,
        finder_path: str,
        *,
        json_path: str | Path | None = None,
        bib_path: str | Path | None = None,
    ) -> LookupResult:
        resolved_json, resolved_bib = self.config.resolve_paths(json_path, bib_path)
        variants = path_variants(finder_path)
        errors: List[str] = []

        if resolved_json is not None:
            if await self.cache.exists(resolved_json):
                match = await self._path_in_json(variants, resolved_json)
                if match is not None:
                    return match
                errors.append(f"No matching entry found in {JSON_KIND} metadata at {resolved_json}")
            else:
                errors.append(_not_found_error(JSON_KIND, resolved_json))

        if resolved_bib is not None:
            if await self.cache.exists(resolved_bib):
                match = await self._path_in_bib(variants, resolved_bib)
                if match is not None:
                    return match
                errors.append(f"No matching entry found in {BIB_KIND} metadata at {resolved_bib}")
            else:
                errors.append(_not_found_error(BIB_KIND, resolved_bib))

        if resolved_json is None and resolved_bib is None:
            errors.append(_not_configured_error())

        LOGGER.debug("Path lookup for %s failed: %s", finder_path, errors)
        return LookupFailure(errors=errors)

    async def lookup_by_citation_key(
        self,
        citation_key: str,
        *,
        json_path: str | Path | None = None,
        bib_path: str | Path | None = None,
    ) -> LookupResult:
        key = citation_key.strip()
        if not key:
            return LookupFailure(errors=[EMPTY_KEY_ERROR])

        resolved_json, resolved_bib = self.config.resolve_paths(json_path, bib_path)
        errors: List[str] = []

        if resolved_json is not None:
            if await self.cache.exists(resolved_json):
                match = await self._citation_in_json(key, resolved_json)
                if match is not None:
                    return match
                errors.append(f"No entry with citation key '{key}' in {JSON_KIND} metadata at {resolved_json}")
            else:
                errors.append(_not_found_error(JSON_KIND, resolved_json))

        if resolved_bib is not None:
            if await self.cache.exists(resolved_bib):
                match = await self._citation_in_bib(key, resolved_bib)
                if match is not None:
                    return match
                errors.append(f"No entry with citation key '{key}' in {BIB_KIND} metadata at {resolved_bib}")
            else:
                errors.append(_not_found_error(BIB_KIND, resolved_bib))

        if resolved_json is None and resolved_bib is None:
            errors.append(_not_configured_error())

        LOGGER.debug("Citation key lookup for %s failed: %s", key, errors)
        return LookupFailure(errors=errors)

    async def _path_in_json(self, variants: Sequence[str], path: Path) -> StructuredMatch | None:
        ok, data = await self.cache.read_json(path)
        if not ok:
            return None

        for item in iter_items(data):
            found = find_value(item, variants)
            if found is None:
                continue
            property_path, value = found
            return StructuredMatch(
                match_type="path",
                match_value=value,
                property_path=property_path,
                item=item,
                descriptor=build_structured_descriptor(item),
                metadata_file=str(path),
                matched_field=matched_field_name(property_path),
            )
        return None

    async def _path_in_bib(self, variants: Sequence[str], path: Path) -> TextMatch | None:
        entries = await self.cache.read_bib(path)
        if entries is None:
            return None

        for entry in entries:
            for field_name, value in entry.fields.items():
                if matches_variants(value, variants):
                    return TextMatch(
                        match_type="path",
                        match_value=value,
                        entry=entry,
                        descriptor=build_text_descriptor(entry),
                        metadata_file=str(path),
                        matched_field=field_name,
                    )
        return None

    async def _citation_in_json(self, key: str, path: Path) -> StructuredMatch | None:
        ok, data = await self.cache.read_json(path)
        if not ok:
            return None

        for item in iter_items(data):
            found = find_top_level_field(item, JSON_CITATION_KEY_FIELDS, key)
            if found is None:
                continue
            field_name, value = found
            return StructuredMatch(
                match_type="citationKey",
                match_value=value,
                property_path=(field_name,),
                item=item,
                descriptor=build_structured_descriptor(item),
                metadata_file=str(path),
                matched_field=field_name,
            )
        return None

    async def _citation_in_bib(self, key: str, path: Path) -> TextMatch | None:
        entries = await self.cache.read_bib(path)
        if entries is None:
            return None

        target = _normalize_key(key)
        for entry in entries:
            descriptor = build_text_descriptor(entry)
            if descriptor.citation_key and _normalize_key(descriptor.citation_key) == target:
                return TextMatch(
                    match_type="citationKey",
                    match_value=descriptor.citation_key,
                    entry=entry,
                    descriptor=descriptor,
                    metadata_file=str(path),
                    matched_field="key",
                )
            for field_name in BIB_ALTERNATE_KEY_FIELDS:
                value = entry.fields.get(field_name)
                if value is not None and _normalize_key(value) == target:
                    return TextMatch(
                        match_type="citationKey",
                        match_value=value,
                        entry=entry,
                        descriptor=descriptor,
                        metadata_file=str(path),
                        matched_field=field_name,
                    )
        return None
