"""
Label normalization rules.

Two forms of a label are used throughout the package:

    normalize_label:
        Trimmed, internal whitespace runs collapsed to one space.
        Case is preserved. This is the display form the extractor returns.

    translation_key:
        normalize_label + lowercase. This is the key under which the
        translation store writes and looks up every entry.

Both are idempotent: f(f(s)) == f(s).
"""

import re
import unicodedata
from typing import Tuple

_WHITESPACE_RUN = re.compile(r"\s+")


def normalize_label(label: str) -> str:
    """Trim a label and collapse internal whitespace runs to single spaces."""
    return _WHITESPACE_RUN.sub(" ", label.strip())


def translation_key(label: str) -> str:
    """Canonical store key of a label: normalized and lowercased."""
    return normalize_label(label).lower()


def _strip_accents(text: str) -> str:
    decomposed = unicodedata.normalize("NFKD", text)
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch))


def collation_key(label: str) -> Tuple[str, str, str]:
    """
    Sort key approximating locale collation, independent of process locale.

    Compares base letters first (case and accents ignored), then accents,
    then case, so "Apple" < "apple" < "ápple" < "banana".
    The raw string is the final tie-breaker, which keeps the order total.
    """
    folded = label.casefold()
    return (_strip_accents(folded), folded, label)
