"""Text normalization utilities for artist, venue and festival names.

This module owns two concerns:

1. **Slug derivation** -- :func:`slugify` is the one implementation of the
   URL-safe identity key used for artists and festivals.  Every call site
   (API sync, curated ingestion, dedup guard) imports it from here so the
   keys written by different ingestion paths always agree.

2. **Name similarity** -- small comparison helpers used by the dedup
   policies.  ``token_similarity`` uses rapidfuzz ``token_sort_ratio`` so
   word-order differences ("Festival Envision" vs "Envision Festival")
   still score highly.
"""

import re
import unicodedata

from rapidfuzz import fuzz

_NON_ALNUM_RUN = re.compile(r"[^a-z0-9]+")


def slugify(text: str) -> str:
    """Return the normalized, lowercase, hyphenated form of *text*.

    Diacritics are stripped via NFKD decomposition, so "Christian Löffler"
    and "christian loffler" share the slug ``christian-loffler``.  Any run
    of characters outside ``[a-z0-9]`` becomes a single hyphen and leading
    or trailing hyphens are trimmed.

    Args:
        text: Raw display name.

    Returns:
        The slug; empty when *text* has no ASCII letters or digits.
    """
    decomposed = unicodedata.normalize("NFKD", text.lower())
    stripped = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return _NON_ALNUM_RUN.sub("-", stripped).strip("-")


def collapse_whitespace(text: str) -> str:
    """Trim *text* and collapse internal whitespace runs to one space."""
    return re.sub(r"\s+", " ", text).strip()


def prefix_contained(candidate: str, existing: str, prefix_length: int = 20) -> bool:
    """Check whether the first *prefix_length* characters of *candidate*
    appear anywhere in *existing*, ignoring case.

    An empty candidate never matches.
    """
    prefix = candidate.strip()[:prefix_length].lower()
    if not prefix:
        return False
    return prefix in existing.lower()


def token_similarity(first: str, second: str) -> float:
    """Return the rapidfuzz token-sort similarity of two names on a 0-1 scale."""
    if not first.strip() or not second.strip():
        return 0.0
    return fuzz.token_sort_ratio(first.lower(), second.lower()) / 100.0
