"""Infobox extraction from raw Wikipedia wikitext.

Wikitext is not a regular language, so the infobox is located by counting
``{{``/``}}`` depth rather than by a single regex. Field values are then
flattened to plain text with a fixed sequence of substitutions.

Example:
    >>> parse_infobox("{{Infobox company | name = Chaix | founded = [[1875]] }}")
    {'name': 'Chaix', 'founded': '1875'}
"""

from __future__ import annotations

import html
import re

_INFOBOX_START = re.compile(r"\{\{\s*infobox\b", re.IGNORECASE)

# Plausible years for posters, printers and their publishers
YEAR_PATTERN = re.compile(r"\b(1[5-9]\d{2}|20[0-2]\d)\b")

_COMMENT = re.compile(r"<!--.*?-->", re.DOTALL)
_REF_SELF_CLOSING = re.compile(r"<ref\b[^>/]*/>", re.IGNORECASE)
_REF_BLOCK = re.compile(r"<ref\b[^>]*>.*?</ref\s*>", re.IGNORECASE | re.DOTALL)
_DATE_TEMPLATE = re.compile(
    r"\{\{\s*(?:birth|death|start|end|foundation|founding|dissolution)[ _]"
    r"(?:date|year)(?:[ _]and[ _](?:age|years))?\s*\|([^{}]*)\}\}",
    re.IGNORECASE,
)
_PIPED_LINK = re.compile(r"\[\[(?!\s*(?:file|image):)([^\[\]|]*)\|([^\[\]]*)\]\]", re.IGNORECASE)
_PLAIN_LINK = re.compile(r"\[\[(?!\s*(?:file|image):)([^\[\]|]*)\]\]", re.IGNORECASE)
_FILE_LINK = re.compile(r"\[\[\s*(?:file|image):[^\[\]]*\]\]", re.IGNORECASE)
_LABELLED_URL = re.compile(r"\[(?:https?:)?//[^\s\]]+\s+([^\]]+)\]")
_BARE_URL = re.compile(r"\[(?:https?:)?//[^\s\]]+\]")
_INNER_TEMPLATE = re.compile(r"\{\{[^{}]*\}\}")
_LINE_BREAK = re.compile(r"<br\s*/?>", re.IGNORECASE)
_TAG = re.compile(r"</?[a-zA-Z][^>]*>")
_EMPHASIS = re.compile(r"'{2,}")
_WHITESPACE = re.compile(r"\s+")


def extract_year(text: str | None) -> int | None:
    """Return the first 4-digit year in [1500, 2029], or None.

    Examples:
        "c. 1875, Paris" -> 1875
        "1942-01-01" -> 1942
        "12345" -> None
    """
    if not text:
        return None
    match = YEAR_PATTERN.search(text)
    return int(match.group(1)) if match else None


def find_infobox(wikitext: str) -> str | None:
    """Return the body of the first ``{{Infobox ...}}`` template, braces excluded."""
    match = _INFOBOX_START.search(wikitext)
    if match is None:
        return None

    start = match.start()
    depth = 0
    i = start
    while i < len(wikitext) - 1:
        pair = wikitext[i : i + 2]
        if pair == "{{":
            depth += 1
            i += 2
            continue
        if pair == "}}":
            depth -= 1
            i += 2
            if depth == 0:
                return wikitext[start + 2 : i - 2]
            continue
        i += 1

    # Unterminated: take everything after the opening braces
    return wikitext[start + 2 :]


def split_fields(body: str) -> list[str]:
    """Split an infobox body on ``|`` that are not inside a nested template or link."""
    parts: list[str] = []
    current: list[str] = []
    braces = 0
    brackets = 0
    i = 0
    while i < len(body):
        pair = body[i : i + 2]
        if pair == "{{":
            braces += 1
            current.append(pair)
            i += 2
            continue
        if pair == "}}" and braces:
            braces -= 1
            current.append(pair)
            i += 2
            continue
        if pair == "[[":
            brackets += 1
            current.append(pair)
            i += 2
            continue
        if pair == "]]" and brackets:
            brackets -= 1
            current.append(pair)
            i += 2
            continue

        char = body[i]
        if char == "|" and not braces and not brackets:
            parts.append("".join(current))
            current = []
        else:
            current.append(char)
        i += 1

    parts.append("".join(current))
    return parts


def _date_from_template(match: re.Match[str]) -> str:
    numbers = [
        p.strip() for p in match.group(1).split("|") if "=" not in p and p.strip().isdigit()
    ]
    if not numbers:
        return ""
    if len(numbers) >= 3:
        year, month, day = numbers[:3]
        return f"{year}-{int(month):02d}-{int(day):02d}"
    return numbers[0]


def clean_wiki_markup(value: str) -> str:
    """Flatten a wikitext field value to plain text."""
    text = _COMMENT.sub("", value)
    text = _REF_SELF_CLOSING.sub("", text)
    text = _REF_BLOCK.sub("", text)
    text = _DATE_TEMPLATE.sub(_date_from_template, text)

    text = _PIPED_LINK.sub(r"\2", text)
    text = _PLAIN_LINK.sub(r"\1", text)
    text = _FILE_LINK.sub("", text)
    text = _LABELLED_URL.sub(r"\1", text)
    text = _BARE_URL.sub("", text)

    # Drop remaining templates, innermost first
    while True:
        stripped = _INNER_TEMPLATE.sub("", text)
        if stripped == text:
            break
        text = stripped

    text = _LINE_BREAK.sub(" ", text)
    text = _TAG.sub("", text)
    text = html.unescape(text)
    text = _EMPHASIS.sub("", text)
    return _WHITESPACE.sub(" ", text).strip()


def normalize_key(key: str) -> str:
    """Infobox keys compare lower-cased with spaces as underscores."""
    return _WHITESPACE.sub("_", key.strip().lower())


def parse_infobox(wikitext: str | None) -> dict[str, str]:
    """Extract the first infobox as a ``{key: plain text value}`` dict.

    Keys are normalized with ``normalize_key``. Fields whose value is empty
    after cleaning are dropped. Returns an empty dict if there is no infobox.
    """
    if not wikitext:
        return {}
    body = find_infobox(wikitext)
    if body is None:
        return {}

    fields: dict[str, str] = {}
    # First segment is the template name ("Infobox company")
    for segment in split_fields(body)[1:]:
        if "=" not in segment:
            continue
        raw_key, raw_value = segment.split("=", 1)
        key = normalize_key(raw_key)
        value = clean_wiki_markup(raw_value)
        if key and value and key not in fields:
            fields[key] = value
    return fields
