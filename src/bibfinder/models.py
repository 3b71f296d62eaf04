"""Core bibfinder data models."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Literal, Tuple, Union

JsonValue = Union[None, bool, int, float, str, List["JsonValue"], Dict[str, "JsonValue"]]
PathSegment = Union[str, int]

Source = Literal["structured", "text"]
MatchType = Literal["path", "citationKey"]


@dataclass(slots=True)
class MetadataDescriptor:
    """Source-agnostic summary of one bibliography entry."""

    source: Source
    citation_key: str | None = None
    external_id: str | None = None
    title: str | None = None
    attachment_paths: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "source": self.source,
            "citationKey": self.citation_key,
            "externalId": self.external_id,
            "title": self.title,
            "attachmentPaths": list(self.attachment_paths),
        }


@dataclass(slots=True)
class BibEntry:
    """One parsed entry of a BibTeX export."""

    entry_type: str
    key: str
    fields: Dict[str, str]
    raw: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.entry_type,
            "key": self.key,
            "fields": dict(self.fields),
        }


@dataclass(slots=True)
class StructuredMatch:
    """An entry of the JSON export matched by a lookup."""

    match_type: MatchType
    match_value: str
    property_path: Tuple[PathSegment, ...]
    item: Dict[str, JsonValue]
    descriptor: MetadataDescriptor
    metadata_file: str
    matched_field: str | None = None
    source: Source = "structured"

    @property
    def success(self) -> bool:
        return True

    def to_dict(self) -> Dict[str, Any]:
        return {
            "success": True,
            "source": self.source,
            "matchType": self.match_type,
            "matchValue": self.match_value,
            "matchedField": self.matched_field,
            "propertyPath": list(self.property_path),
            "item": self.item,
            "descriptor": self.descriptor.to_dict(),
            "metadataFile": self.metadata_file,
        }


@dataclass(slots=True)
class TextMatch:
    """An entry of the BibTeX export matched by a lookup."""

    match_type: MatchType
    match_value: str
    entry: BibEntry
    descriptor: MetadataDescriptor
    metadata_file: str
    matched_field: str | None = None
    source: Source = "text"

    @property
    def success(self) -> bool:
        return True

    @property
    def raw_entry(self) -> str:
        return self.entry.raw

    def to_dict(self) -> Dict[str, Any]:
        return {
            "success": True,
            "source": self.source,
            "matchType": self.match_type,
            "matchValue": self.match_value,
            "matchedField": self.matched_field,
            "rawEntry": self.raw_entry,
            "entry": self.entry.to_dict(),
            "descriptor": self.descriptor.to_dict(),
            "metadataFile": self.metadata_file,
        }


@dataclass(slots=True)
class LookupFailure:
    """Diagnostics collected from every source that was tried."""

    errors: List[str]

    @property
    def success(self) -> bool:
        return False

    def to_dict(self) -> Dict[str, Any]:
        return {"success": False, "errors": list(self.errors)}


MetadataMatch = Union[StructuredMatch, TextMatch]
LookupResult = Union[StructuredMatch, TextMatch, LookupFailure]
