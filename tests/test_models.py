"""Tests for core data models."""

from __future__ import annotations

import json

from bibfinder.models import (
    BibEntry,
    LookupFailure,
    MetadataDescriptor,
    StructuredMatch,
    TextMatch,
)


def _descriptor(source: str = "structured") -> MetadataDescriptor:
    return MetadataDescriptor(
        source=source,  # type: ignore[arg-type]
        citation_key="smith2024deep",
        external_id="ABC12345",
        title="Deep Learning",
        attachment_paths=["/papers/a.pdf"],
    )


class TestMetadataDescriptor:
    """Test MetadataDescriptor dataclass."""

    def test_defaults(self) -> None:
        """Should default optional fields to empty values."""
        descriptor = MetadataDescriptor(source="text")

        assert descriptor.citation_key is None
        assert descriptor.attachment_paths == []

    def test_to_dict(self) -> None:
        """Should use camelCase keys."""
        assert _descriptor().to_dict() == {
            "source": "structured",
            "citationKey": "smith2024deep",
            "externalId": "ABC12345",
            "title": "Deep Learning",
            "attachmentPaths": ["/papers/a.pdf"],
        }


class TestMatchResults:
    """Test match result envelopes."""

    def test_structured_envelope(self) -> None:
        """Should expose the property path and item."""
        match = StructuredMatch(
            match_type="path",
            match_value="/papers/a.pdf",
            property_path=("attachments", 0, "localPath"),
            item={"id": "smith2024deep"},
            descriptor=_descriptor(),
            metadata_file="/exports/library.json",
            matched_field="localPath",
        )
        payload = match.to_dict()

        assert match.success
        assert payload["success"] is True
        assert payload["source"] == "structured"
        assert payload["matchType"] == "path"
        assert payload["propertyPath"] == ["attachments", 0, "localPath"]
        assert payload["descriptor"]["citationKey"] == "smith2024deep"
        json.dumps(payload)

    def test_text_envelope(self) -> None:
        """Should expose the raw entry text and matched field."""
        entry = BibEntry(
            entry_type="article",
            key="smith2024deep",
            fields={"title": "Deep"},
            raw="@article{smith2024deep, title={Deep}}",
        )
        match = TextMatch(
            match_type="citationKey",
            match_value="smith2024deep",
            entry=entry,
            descriptor=_descriptor("text"),
            metadata_file="/exports/library.bib",
            matched_field="key",
        )
        payload = match.to_dict()

        assert match.raw_entry == entry.raw
        assert payload["source"] == "text"
        assert payload["rawEntry"].startswith("@article")
        assert payload["entry"] == {"type": "article", "key": "smith2024deep", "fields": {"title": "Deep"}}
        assert payload["matchedField"] == "key"

    def test_failure_envelope(self) -> None:
        """Should carry the error list."""
        failure = LookupFailure(errors=["first", "second"])

        assert not failure.success
        assert failure.to_dict() == {"success": False, "errors": ["first", "second"]}
