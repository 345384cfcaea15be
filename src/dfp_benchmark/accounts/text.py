"""Text folding used to reconcile free-text company names."""

from __future__ import annotations

import unicodedata


def remove_diacritics(original: str) -> str:
    """Strip nonspacing marks, e.g. "žůžo" becomes "zuzo".

    The string is decomposed (NFD), combining marks (category Mn) are
    dropped and the result is recomposed (NFC).
    """
    decomposed = unicodedata.normalize("NFD", original)
    stripped = "".join(ch for ch in decomposed if unicodedata.category(ch) != "Mn")
    return unicodedata.normalize("NFC", stripped)


def fold_match(source: str, target: str) -> bool:
    """Return True if every character of `source` appears in `target` in order.

    Comparison is case-insensitive. Callers remove diacritics from both sides
    first.
    """
    remaining = iter(target.casefold())
    return all(ch in remaining for ch in source.casefold())
