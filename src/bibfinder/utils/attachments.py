"""Heuristics for recognizing local attachment paths."""

from __future__ import annotations

import re
from pathlib import Path
from urllib.parse import unquote

from bibfinder.utils.paths import canonicalize

PATH_HINT_KEYS = frozenset({"path", "localPath", "file", "uri", "url", "relativePath"})

_REMOTE_SCHEME_RE = re.compile(r"^(https?|zotero|attachment)://", re.IGNORECASE)
_DRIVE_LETTER_RE = re.compile(r"^[A-Za-z]:[\\/]")
_ATTACHMENT_EXTENSION_RE = re.compile(
    r"\.(pdf|docx?|pptx?|rtf|txt|md|html?|epub|zip|gz|xlsx?|csv|png|jpe?g|gif|tiff|heic)$",
    re.IGNORECASE,
)


def is_likely_attachment(value: str, key_hint: str | None = None) -> bool:
    """Guess whether ``value`` points at a local file.

    ``key_hint`` is the name of the key holding the value, if any.
    """
    trimmed = value.strip()
    if not trimmed:
        return False
    if _REMOTE_SCHEME_RE.match(trimmed):
        return False
    if key_hint is not None and key_hint in PATH_HINT_KEYS:
        return True

    normalized = canonicalize(trimmed)
    if normalized.startswith(("/", "~", ":")):
        return True
    if _DRIVE_LETTER_RE.match(trimmed):
        return True
    return bool(_ATTACHMENT_EXTENSION_RE.search(normalized))


def _decode_safe(value: str) -> str:
    try:
        return unquote(value, errors="strict")
    except UnicodeDecodeError:
        return value


def _expand_home(value: str) -> str:
    if value.startswith("~/"):
        home = Path.home().as_posix().rstrip("/")
        if home:
            return f"{home}/{value[2:]}"
    return value


def normalize_attachment(value: str) -> str | None:
    """Normalize an attachment path, returning ``None`` when nothing is left."""
    trimmed = value.strip()
    if not trimmed:
        return None

    normalized = canonicalize(trimmed)
    if normalized.startswith(":"):
        normalized = normalized[1:]
    normalized = _expand_home(_decode_safe(normalized))
    return normalized or None
