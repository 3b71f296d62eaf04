"""Match resolved attachments against an external document store.

The store itself is pluggable: anything implementing :class:`RecordStore`
can be queried with the path variants of every attachment.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Protocol, Sequence

from bibfinder.config import AppConfig
from bibfinder.metadata.resolver import MetadataResolver
from bibfinder.utils.paths import path_variants

LOGGER = logging.getLogger(__name__)

Record = Dict[str, Any]


class RecordStore(Protocol):
    def lookup_records_with_path(self, path: str) -> Sequence[Record]:
        """Return records stored at ``path``."""


@dataclass(slots=True)
class AttachmentRequest:
    path: str
    variants: List[str] = field(default_factory=list)


@dataclass(slots=True)
class AttachmentRecords:
    path: str
    records: List[Record] = field(default_factory=list)


def build_attachment_requests(paths: Iterable[str]) -> List[AttachmentRequest]:
    """Pair every attachment path with the variants to query the store with."""
    requests: List[AttachmentRequest] = []
    for path in paths:
        trimmed = path.strip()
        variants: List[str] = [trimmed] if trimmed else []
        for variant in path_variants(trimmed):
            variant = variant.strip()
            if variant and variant not in variants:
                variants.append(variant)
        requests.append(AttachmentRequest(path=trimmed, variants=variants))
    return requests


def record_identity(record: Record) -> str | None:
    if record.get("uuid"):
        return str(record["uuid"])
    if record.get("id") is not None:
        return f"id:{record['id']}"
    return None


def find_records_for_attachments(
    paths: Sequence[str],
    store: RecordStore,
    *,
    max_per_path: int = 5,
) -> List[AttachmentRecords]:
    """Query ``store`` with every variant, merging records by identity.

    A variant whose query fails is skipped. Records without a ``uuid`` or
    ``id`` share a single identity, so only the first of them is kept.
    """
    results: List[AttachmentRecords] = []
    for request in build_attachment_requests(paths):
        seen: set[str | None] = set()
        records: List[Record] = []
        for variant in request.variants:
            try:
                found = store.lookup_records_with_path(variant)
            except Exception as exc:
                LOGGER.debug("Record lookup failed for variant %s: %s", variant, exc)
                continue
            for record in list(found)[:max_per_path]:
                identity = record_identity(record)
                if identity in seen:
                    continue
                seen.add(identity)
                records.append(record)
        results.append(AttachmentRecords(path=request.path, records=records))
    return results


async def find_records_by_citation_key(
    resolver: MetadataResolver,
    citation_key: str,
    store: RecordStore,
    *,
    json_path: str | None = None,
    bib_path: str | None = None,
    max_per_path: int | None = None,
) -> Dict[str, Any]:
    """Resolve a citation key and collect the store records of its attachments."""
    key = citation_key.strip()
    config: AppConfig = resolver.config
    resolved_json, resolved_bib = config.resolve_paths(json_path, bib_path)
    paths_checked = {
        "json": str(resolved_json) if resolved_json else None,
        "bib": str(resolved_bib) if resolved_bib else None,
    }
    limit = max_per_path if max_per_path is not None else config.max_records_per_path

    result = await resolver.lookup_by_citation_key(key, json_path=resolved_json, bib_path=resolved_bib)
    if not result.success:
        return {
            "success": False,
            "error": f"No bibliography metadata entry found for citation key '{key}'",
            "citationKey": key,
            "details": list(result.errors),
            "pathsChecked": paths_checked,
        }

    attachments = result.descriptor.attachment_paths
    records: List[Record] = []
    if attachments:
        try:
            matches = await asyncio.to_thread(
                find_records_for_attachments, attachments, store, max_per_path=limit
            )
        except Exception as exc:
            LOGGER.error("Record lookup failed for %s: %s", key, exc)
            return {
                "success": False,
                "error": str(exc),
                "citationKey": key,
                "details": [f"Attachment lookup failed for {len(attachments)} path(s)"],
                "pathsChecked": paths_checked,
            }
        for match in matches:
            records.extend(match.records)

    return {
        "success": True,
        "citationKey": key,
        "title": result.descriptor.title,
        "records": records,
    }
