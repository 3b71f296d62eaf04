"""Path canonicalization and variant matching.

Reference managers and document stores disagree on how a local file is
written down: plain POSIX paths, ``file://`` URLs, percent-encoded strings,
or colon-delimited volume paths. Everything is funneled through
:func:`canonicalize` before comparison.
"""

from __future__ import annotations

import posixpath
from pathlib import Path
from typing import Iterable, List
from urllib.parse import quote, unquote, urlparse

FILE_SCHEME = "file://"

# Characters left alone by URI-style encoding (RFC 3986 reserved set plus "#").
_URI_SAFE = ";,/?:@&=+$!*'()#"
# Characters left alone inside the path component of a file URL.
_FILE_URL_SAFE = "/:@!$&'()*+,;=~"


def _file_url_to_path(url: str) -> str:
    parsed = urlparse(url)
    if parsed.netloc not in ("", "localhost"):
        raise ValueError(f"File URL host must be empty or localhost: {url}")
    if "%2f" in parsed.path.lower():
        raise ValueError(f"File URL path must not contain encoded '/': {url}")
    return unquote(parsed.path, errors="strict")


def canonicalize(value: str) -> str:
    """Return the single comparable form of a path-like string."""
    normalized = value.strip()
    if normalized.lower().startswith(FILE_SCHEME):
        try:
            normalized = _file_url_to_path(normalized)
        except (ValueError, UnicodeDecodeError):
            pass
    return normalized.replace("\\", "/")


def to_file_url(path: str) -> str:
    """Build a ``file://`` URL for a slash-normalized path."""
    absolute = path
    if not absolute.startswith("/"):
        absolute = posixpath.join(Path.cwd().as_posix(), absolute)
        if not absolute.startswith("/"):
            absolute = "/" + absolute
    return FILE_SCHEME + quote(absolute, safe=_FILE_URL_SAFE)


def _with_volume_forms(path: str) -> List[str]:
    forms = [path]
    if path.startswith("/"):
        forms.extend([f":{path}", f":{path}:"])
    return forms


def _home_relative(path: str) -> str | None:
    home = Path.home().as_posix().rstrip("/")
    if home and path.startswith(home + "/"):
        return "~" + path[len(home):]
    return None


def path_variants(path: str) -> List[str]:
    """Expand one path into the textual encodings treated as equivalent."""
    normalized = path.strip().replace("\\", "/")
    if not normalized:
        return []

    raw: List[str] = []
    raw.extend(_with_volume_forms(normalized))
    raw.extend(_with_volume_forms(quote(normalized, safe=_URI_SAFE)))

    file_url = to_file_url(normalized)
    raw.append(file_url)
    raw.append(file_url.replace(FILE_SCHEME, "", 1))

    raw.append(normalized.replace(" ", "\\ "))
    raw.append(normalized.replace(" ", "%20"))

    try:
        decoded = unquote(normalized, errors="strict")
    except UnicodeDecodeError:
        decoded = normalized
    if decoded != normalized:
        raw.extend(_with_volume_forms(decoded))

    home_relative = _home_relative(decoded)
    if home_relative:
        raw.append(home_relative)

    variants: List[str] = []
    for candidate in raw:
        canonical = canonicalize(candidate)
        if canonical and canonical not in variants:
            variants.append(canonical)
    return variants


def matches_variants(value: str, variants: Iterable[str]) -> bool:
    """Check a stored value against a variant set.

    Containment is accepted as well as equality so stored values wrapped in
    extra syntax (volume qualifiers, descriptor prefixes) still match.
    """
    normalized = canonicalize(value)
    return any(normalized == variant or variant in normalized for variant in variants)
