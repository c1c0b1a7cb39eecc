"""Free-text number parsing for valuation, rates and parcel size cells."""

from __future__ import annotations

import math
import re

_NON_NUMERIC_RE = re.compile(r"[^\d.\-]")
_WHITESPACE_RE = re.compile(r"\s+")


def parse_number(raw: object) -> float | None:
    if raw is None:
        return None
    cleaned = _WHITESPACE_RE.sub("", str(raw).strip())
    cleaned = cleaned.replace(",", "")
    cleaned = _NON_NUMERIC_RE.sub("", cleaned)
    if not cleaned:
        return None
    # Mirror a leading-prefix float parse: "12.5.3" reads as 12.5, "-" as nothing.
    match = re.match(r"-?(\d+(\.\d*)?|\.\d+)", cleaned)
    if match is None:
        return None
    value = float(match.group(0))
    return value if math.isfinite(value) else None


def parse_size_number(raw: object) -> float | None:
    """Parse an ERF size, summing ``+``-joined multi-parcel entries."""
    if raw is None:
        return None
    text = str(raw).strip()
    if not text:
        return None

    if "+" in text:
        parts = [parse_number(part) for part in text.split("+")]
        parts = [part for part in parts if part is not None]
        if not parts:
            return None
        return sum(parts)

    return parse_number(text)
