"""Name normalization for identity comparison.

Two names denote the same identity iff their normalized keys are equal.
Normalization is deliberately conservative: accents and punctuation are kept,
so "Chéri Hérouard" and "Cheri Herouard" are different keys and the variant
spelling is carried as an alias instead.
"""

from __future__ import annotations

import re
import unicodedata
from collections.abc import Iterable
from urllib.parse import urlsplit

from poster_attribution.errors import ValidationError

_WHITESPACE = re.compile(r"\s+")

# Second-level suffixes that need three labels to form a root domain
COMPOUND_TLDS = frozenset({"co.uk", "com.au", "co.nz", "co.jp", "com.br", "co.za"})


def normalize_name(text: str | None) -> str:
    """Return the comparison key for a free-text name.

    Rules:
    - Unicode NFC (composed and decomposed accents compare equal)
    - Trim leading/trailing whitespace
    - Case-fold
    - Collapse internal whitespace runs to a single space

    Examples:
        "  Chéri   Hérouard " -> "chéri hérouard"
        "HEROUARD" -> "herouard"
        "   " -> ""
    """
    if not text:
        return ""
    text = unicodedata.normalize("NFC", text)
    return _WHITESPACE.sub(" ", text.strip()).casefold()


def clean_display_name(text: str | None) -> str:
    """Trim and collapse whitespace, keeping the original casing."""
    if not text:
        return ""
    text = unicodedata.normalize("NFC", text)
    return _WHITESPACE.sub(" ", text.strip())


def require_name(text: str | None, *, what: str = "name") -> str:
    """Return the cleaned display name or raise if nothing is left."""
    cleaned = clean_display_name(text)
    if not cleaned:
        raise ValidationError(f"Empty {what}: nothing to resolve")
    return cleaned


def dedupe_names(names: Iterable[str | None], *, exclude: Iterable[str] = ()) -> list[str]:
    """Drop empties and normalized duplicates, keeping first-seen order.

    Args:
        names: Candidate strings.
        exclude: Keys (already normalized) that must not appear in the result.

    Returns:
        Cleaned display strings, one per distinct key.
    """
    seen = set(exclude)
    result: list[str] = []
    for name in names:
        key = normalize_name(name)
        if not key or key in seen:
            continue
        seen.add(key)
        result.append(clean_display_name(name))
    return result


def extract_root_domain(website: str | None) -> str:
    """Return the registrable root domain of a website or URL.

    Examples:
        "https://www.christies.com/en/lot" -> "christies.com"
        "shop.bonhams.co.uk" -> "bonhams.co.uk"
    """
    if not website:
        return ""
    candidate = website.strip()
    if "://" not in candidate:
        candidate = f"https://{candidate}"
    host = (urlsplit(candidate).hostname or "").lower()
    if host.startswith("www."):
        host = host[4:]
    parts = [p for p in host.split(".") if p]
    if len(parts) > 2:
        last_two = ".".join(parts[-2:])
        if last_two in COMPOUND_TLDS:
            return ".".join(parts[-3:])
        return last_two
    return ".".join(parts)
