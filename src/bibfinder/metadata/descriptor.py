"""Projection of export entries onto :class:`MetadataDescriptor`."""

from __future__ import annotations

from typing import Dict, List

from bibfinder.metadata.bibtex import parse_file_field
from bibfinder.metadata.structured import collect_attachments, first_string
from bibfinder.models import BibEntry, JsonValue, MetadataDescriptor
from bibfinder.utils.attachments import PATH_HINT_KEYS, is_likely_attachment, normalize_attachment

JSON_CITATION_KEY_FIELDS = ("citationKey", "citationkey", "id")
JSON_EXTERNAL_ID_FIELDS = ("bibliographyId", "zotero_id", "key", "id")
BIB_EXTERNAL_ID_FIELDS = ("zotero_id", "id", "citationkey")
BIB_ALTERNATE_KEY_FIELDS = ("citationkey", "zotero_id", "id")


def build_structured_descriptor(item: Dict[str, JsonValue]) -> MetadataDescriptor:
    return MetadataDescriptor(
        source="structured",
        citation_key=first_string(item, JSON_CITATION_KEY_FIELDS),
        external_id=first_string(item, JSON_EXTERNAL_ID_FIELDS),
        title=first_string(item, ("title",)),
        attachment_paths=collect_attachments(item),
    )


def collect_bib_attachments(entry: BibEntry) -> List[str]:
    """Attachment paths from the ``file`` field plus any path-like fields."""
    found: Dict[str, None] = {}
    for key, value in entry.fields.items():
        if key == "file":
            for parsed in parse_file_field(value):
                found.setdefault(parsed, None)
        elif key in PATH_HINT_KEYS and is_likely_attachment(value, key):
            normalized = normalize_attachment(value)
            if normalized:
                found.setdefault(normalized, None)
    return list(found)


def build_text_descriptor(entry: BibEntry) -> MetadataDescriptor:
    external_id = next(
        (entry.fields[name] for name in BIB_EXTERNAL_ID_FIELDS if name in entry.fields),
        None,
    )
    return MetadataDescriptor(
        source="text",
        citation_key=entry.key or None,
        external_id=external_id,
        title=entry.fields.get("title"),
        attachment_paths=collect_bib_attachments(entry),
    )
