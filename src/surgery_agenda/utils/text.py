"""Text helpers for search and file naming."""

import re
import unicodedata

_WHITESPACE = re.compile(r"\s+")
_UNSAFE_FILENAME_CHARS = re.compile(r"[^a-zA-Z0-9.\-_]")


def fold_accents(value: str) -> str:
    """Strip diacritics: ``"Conceição"`` -> ``"Conceicao"``."""
    decomposed = unicodedata.normalize("NFKD", value)
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch))


def sanitize_filename(filename: str) -> str:
    """Make a filename safe for storage paths.

    Diacritics are stripped, whitespace runs become ``_`` and anything outside
    ``[a-zA-Z0-9.-_]`` is dropped.
    """
    name = fold_accents(filename.strip())
    name = _WHITESPACE.sub("_", name)
    return _UNSAFE_FILENAME_CHARS.sub("", name)
