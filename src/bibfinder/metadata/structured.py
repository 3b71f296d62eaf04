"""Walkers over the JSON export of a reference library."""

from __future__ import annotations

from typing import Dict, Iterable, Iterator, List, Sequence, Tuple

from bibfinder.models import JsonValue, PathSegment
from bibfinder.utils.attachments import is_likely_attachment, normalize_attachment
from bibfinder.utils.paths import matches_variants


def collect_entries(data: JsonValue) -> List[JsonValue]:
    """Return the list of entries held by a parsed export."""
    if isinstance(data, list):
        return data
    if isinstance(data, dict):
        items = data.get("items")
        if isinstance(items, list):
            return items
        return [data]
    return []


def iter_items(data: JsonValue) -> Iterator[Dict[str, JsonValue]]:
    """Yield the map-shaped entries of an export, skipping anything else."""
    for entry in collect_entries(data):
        if isinstance(entry, dict):
            yield entry


def collect_attachments(entry: JsonValue) -> List[str]:
    """Collect normalized attachment paths in traversal order."""
    found: Dict[str, None] = {}
    # Explicit stack so deeply nested exports cannot exhaust the call stack.
    stack: List[Tuple[JsonValue, str | None]] = [(entry, None)]
    while stack:
        value, key_hint = stack.pop()
        if isinstance(value, str):
            if is_likely_attachment(value, key_hint):
                normalized = normalize_attachment(value)
                if normalized:
                    found.setdefault(normalized, None)
        elif isinstance(value, list):
            stack.extend((child, key_hint) for child in reversed(value))
        elif isinstance(value, dict):
            stack.extend((child, key) for key, child in reversed(list(value.items())))
    return list(found)


def find_value(
    entry: JsonValue,
    variants: Sequence[str],
    property_path: Tuple[PathSegment, ...] = (),
) -> Tuple[Tuple[PathSegment, ...], str] | None:
    """Depth-first search for the first string matching ``variants``.

    Returns the key/index path to the string together with the string itself.
    """
    stack: List[Tuple[JsonValue, Tuple[PathSegment, ...]]] = [(entry, property_path)]
    while stack:
        value, path = stack.pop()
        if isinstance(value, str):
            if matches_variants(value, variants):
                return path, value
        elif isinstance(value, list):
            stack.extend(
                (child, path + (index,)) for index, child in reversed(list(enumerate(value)))
            )
        elif isinstance(value, dict):
            stack.extend((child, path + (key,)) for key, child in reversed(list(value.items())))
    return None


def matched_field_name(property_path: Sequence[PathSegment]) -> str | None:
    """Name of the closest map key on a property path."""
    for segment in reversed(property_path):
        if isinstance(segment, str):
            return segment
    return None


def first_string(item: Dict[str, JsonValue], keys: Iterable[str]) -> str | None:
    for key in keys:
        candidate = item.get(key)
        if isinstance(candidate, str) and candidate.strip():
            return candidate.strip()
    return None


def find_top_level_field(
    item: Dict[str, JsonValue], keys: Iterable[str], target: str
) -> Tuple[str, str] | None:
    """Return ``(field, value)`` for the first key whose value equals ``target``.

    Comparison ignores case and surrounding whitespace.
    """
    normalized_target = target.strip().casefold()
    for key in keys:
        candidate = item.get(key)
        if isinstance(candidate, str) and candidate.strip().casefold() == normalized_target:
            return key, candidate
    return None
