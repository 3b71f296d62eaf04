"""Minimal BibTeX reader for reference-manager exports.

Only what the lookups need is supported: splitting a file into entries,
reading ``key = value`` pairs (braced, quoted or bare values) and decoding
the ``file`` field written by Zotero/Better BibTeX.
"""

from __future__ import annotations

import re
from typing import Dict, List

from bibfinder.models import BibEntry
from bibfinder.utils.attachments import normalize_attachment

_HEADER_RE = re.compile(r"^@(\w+)\s*\{\s*([^,]+),")
_FILE_SEGMENT_RE = re.compile(r"^([^:]+):(.+):([^:]+)$")
_KEY_CHARS = frozenset("abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789_-")


class BibCursor:
    """Position-tracking reader over the body of one entry."""

    def __init__(self, text: str) -> None:
        self.text = text
        self.pos = 0

    def at_end(self) -> bool:
        return self.pos >= len(self.text)

    def peek(self) -> str:
        return "" if self.at_end() else self.text[self.pos]

    def advance(self, count: int = 1) -> None:
        self.pos = min(self.pos + count, len(self.text))

    def skip_whitespace(self, *, commas: bool = False) -> None:
        while not self.at_end():
            char = self.text[self.pos]
            if not (char.isspace() or (commas and char == ",")):
                break
            self.pos += 1

    def read_key(self) -> str:
        start = self.pos
        while not self.at_end() and self.text[self.pos] in _KEY_CHARS:
            self.pos += 1
        return self.text[start : self.pos]

    def read_value(self) -> str:
        self.skip_whitespace(commas=True)
        if self.at_end():
            return ""
        opener = self.peek()
        if opener == "{":
            return self._read_braced()
        if opener == '"':
            return self._read_quoted()
        return self._read_bare()

    def _read_braced(self) -> str:
        self.advance()
        start = self.pos
        depth = 1
        while not self.at_end():
            char = self.text[self.pos]
            if char == "{":
                depth += 1
            elif char == "}":
                depth -= 1
                if depth == 0:
                    value = self.text[start : self.pos]
                    self.advance()
                    return value.strip()
            self.pos += 1
        return self.text[start:].strip()

    def _read_quoted(self) -> str:
        self.advance()
        start = self.pos
        while not self.at_end():
            if self.text[self.pos] == '"' and self.text[self.pos - 1] != "\\":
                value = self.text[start : self.pos]
                self.advance()
                return value.strip()
            self.pos += 1
        return self.text[start:].strip()

    def _read_bare(self) -> str:
        start = self.pos
        while not self.at_end() and self.text[self.pos] not in ",\n":
            self.pos += 1
        return self.text[start : self.pos].strip()


def parse_fields(body: str) -> Dict[str, str]:
    """Parse ``key = value`` pairs; later duplicates overwrite earlier ones."""
    fields: Dict[str, str] = {}
    cursor = BibCursor(body)
    while True:
        cursor.skip_whitespace(commas=True)
        if cursor.at_end():
            break

        key = cursor.read_key()
        if not key:
            cursor.advance()
            continue

        cursor.skip_whitespace()
        if cursor.peek() != "=":
            # stray token, resync one character later
            cursor.advance()
            continue
        cursor.advance()

        fields[key.lower()] = cursor.read_value()
    return fields


def split_entries(content: str) -> List[str]:
    """Split an export into raw ``@type{...}`` entry texts."""
    entries: List[str] = []
    index = 0
    while index < len(content):
        start = content.find("@", index)
        if start == -1:
            break
        brace = content.find("{", start)
        if brace == -1:
            break

        depth = 1
        current = brace + 1
        while current < len(content) and depth > 0:
            char = content[current]
            if char == "{":
                depth += 1
            elif char == "}":
                depth -= 1
            current += 1

        if depth != 0:
            break
        entries.append(content[start:current])
        index = current
    return entries


def parse_entry(entry_text: str) -> BibEntry | None:
    """Parse one entry, or return None when the header is not recognized."""
    header = _HEADER_RE.match(entry_text)
    if not header:
        return None

    entry_type, key = header.group(1), header.group(2)
    body = entry_text[header.end() : entry_text.rfind("}")]
    return BibEntry(
        entry_type=entry_type,
        key=key.strip(),
        fields=parse_fields(body),
        raw=entry_text.strip(),
    )


def parse_entries(content: str) -> List[BibEntry]:
    """Parse every well-formed entry in an export, in file order."""
    entries: List[BibEntry] = []
    for entry_text in split_entries(content):
        parsed = parse_entry(entry_text)
        if parsed is not None:
            entries.append(parsed)
    return entries


def parse_file_field(value: str) -> List[str]:
    """Extract attachment paths from a ``file`` field.

    The field is a ``;``-separated list of ``description:path:mimetype``
    triples; only the middle part is kept.
    """
    paths: List[str] = []
    for segment in (part.strip() for part in value.split(";")):
        if not segment:
            continue
        match = _FILE_SEGMENT_RE.match(segment)
        if not match:
            continue
        normalized = normalize_attachment(match.group(2))
        if normalized:
            paths.append(normalized)
    return paths
