"""Text folding for case- and accent-insensitive catalog search."""

import unicodedata


def fold_text(value: str | None, strip_accents: bool = True) -> str:
    """
    Normalize text for substring matching.

    Case is folded always; accents are removed when ``strip_accents`` is set,
    so "Cera Líquida" and "cera liquida" fold to the same string.
    """
    if not value:
        return ""
    folded = value.casefold()
    if not strip_accents:
        return folded
    decomposed = unicodedata.normalize("NFD", folded)
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch))
