"""Street address normalisation, tokenising and house-number extraction."""

from __future__ import annotations

import re

_ABBREVIATIONS = (
    (re.compile(r"\bst\b"), "street"),
    (re.compile(r"\brd\b"), "road"),
    (re.compile(r"\bave\b"), "avenue"),
)

_TOKEN_SPLIT_RE = re.compile(r"[^a-z0-9]+")
_HOUSE_NUMBER_RE = re.compile(r"\b\d{1,5}\b")
_WHITESPACE_RE = re.compile(r"\s+")


def normalize_address(raw: str | None) -> str:
    if not raw:
        return ""

    cleaned = str(raw).lower()
    cleaned = cleaned.replace(",", " ")
    cleaned = cleaned.replace("&", " and ")
    for pattern, replacement in _ABBREVIATIONS:
        cleaned = pattern.sub(replacement, cleaned)
    cleaned = _WHITESPACE_RE.sub(" ", cleaned)
    return cleaned.strip()


def address_tokens(raw: str | None) -> set[str]:
    return {token for token in _TOKEN_SPLIT_RE.split(normalize_address(raw)) if token}


def extract_house_number(raw: str | None) -> str:
    match = _HOUSE_NUMBER_RE.search(normalize_address(raw))
    return match.group(0) if match else ""
