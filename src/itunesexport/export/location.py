"""Turn library location URIs into plain filesystem paths."""

from __future__ import annotations

import re
from urllib.parse import unquote_plus

from itunesexport.export.errors import LocationDecodeError

LOCALHOST_PREFIX = "file://localhost"

# A '%' must introduce exactly two hex digits.
_BAD_ESCAPE = re.compile(r"%(?![0-9A-Fa-f]{2})")


def decode_location(location: str) -> str:
    """Percent-decode *location* in query style, so ``+`` becomes a space.

    Decoded bytes that are not valid UTF-8 are kept as surrogate escapes and
    come back out unchanged when written with ``errors="surrogateescape"``.
    Raises :class:`LocationDecodeError` on a malformed escape.
    """
    bad = _BAD_ESCAPE.search(location)
    if bad is not None:
        snippet = location[bad.start() : bad.start() + 3]
        raise LocationDecodeError(location, f'invalid URL escape "{snippet}"')
    return unquote_plus(location, encoding="utf-8", errors="surrogateescape")


def normalize_location(location: str, *, windows_paths: bool) -> str:
    """Decode *location* and strip the ``file://localhost`` prefix.

    With Windows-style paths one further leading ``/`` is removed so that
    ``file://localhost/C:/Music/a.mp3`` becomes ``C:/Music/a.mp3``.  Other
    locations are left as decoded, whatever their shape.
    """
    path = decode_location(location)
    path = path.removeprefix(LOCALHOST_PREFIX)
    if windows_paths:
        path = path.removeprefix("/")
    return path
