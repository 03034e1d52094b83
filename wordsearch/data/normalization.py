"""Shared helpers for word normalization."""

from __future__ import annotations

import re
import unicodedata

NON_LETTER_RE = re.compile(r"[^A-Z]")
WHITESPACE_RE = re.compile(r"\s+")


def normalize_word(text: str) -> str:
    """Return the uppercase A-Z form of ``text`` used for grid placement.

    Whitespace is removed, accents are folded to their base letter and any
    remaining non-letter is dropped, so ``" ice cream "`` becomes
    ``"ICECREAM"`` and ``"Café"`` becomes ``"CAFE"``.
    """

    if not text:
        return ""
    compact = WHITESPACE_RE.sub("", text.strip())
    decomposed = unicodedata.normalize("NFKD", compact)
    ascii_word = "".join(char for char in decomposed if not unicodedata.combining(char))
    return NON_LETTER_RE.sub("", ascii_word.upper())


def word_key(text: str) -> str:
    """Identity used for uniqueness checks: the word as it lands in the grid.

    ``"ice cream"``, ``"icecream"`` and ``"Ice-Cream"`` share one key.
    """

    return normalize_word(text)


__all__ = ["normalize_word", "word_key"]
