"""
Reel - Text Utilities
======================
Stateless helpers for normalising corpus fields and user input, and
for order-preserving de-duplication of rendered strings.
"""

from __future__ import annotations

import re
import unicodedata
from collections.abc import Iterable

# Control characters (C0/C1) plus BOM, zero-width chars, soft hyphens
# and directional marks that sneak in from copy-pasted synopses.
_NON_PRINTABLE_RE = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f-\x9f\ufeff\u200b\u200c\u200d\u200e\u200f\u00ad\u2060\ufffe]")
_WHITESPACE_RE = re.compile(r"\s+")


def clean_field(text: str) -> str:
    """
    Normalise a single-line corpus field (title, description, reference).

    Steps:
        1. Unicode NFC normalisation.
        2. Strip non-printable / zero-width characters.
        3. Collapse every whitespace run (newlines included) to one space.
        4. Strip leading / trailing whitespace.
    """
    text = unicodedata.normalize("NFC", text)
    text = _NON_PRINTABLE_RE.sub("", text)
    text = _WHITESPACE_RE.sub(" ", text)
    return text.strip()


def is_blank(text: str | None) -> bool:
    """True for ``None``, the empty string, or whitespace-only input."""
    return text is None or not text.strip()


def unique_in_order(items: Iterable[str]) -> list[str]:
    """
    Drop exact-duplicate strings, keeping the first occurrence.

    Equality is plain string equality: two entries that differ by a
    single character are both kept.
    """
    return list(dict.fromkeys(items))
