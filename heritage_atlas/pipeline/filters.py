"""Dashboard-equivalent feature filtering over a snapshot."""

from __future__ import annotations

SEARCH_FIELDS = ("name", "address", "significance", "owner", "usage", "zoning")
ALL = "all"


def _normalise(text: object) -> str:
    return str(text or "").lower()


def _is_open(choice: str | None) -> bool:
    return choice is None or choice == ALL


def filter_features(
    features: list[dict],
    *,
    usage: str | None = None,
    zoning: str | None = None,
    search: str | None = None,
) -> list[dict]:
    needle = _normalise(search)
    selected = []
    for feature in features:
        props = feature.get("properties") or {}
        if not _is_open(usage) and props.get("usage") != usage:
            continue
        if not _is_open(zoning) and props.get("zoning") != zoning:
            continue
        if needle:
            haystack = " ".join(_normalise(props.get(key)) for key in SEARCH_FIELDS)
            if needle not in haystack:
                continue
        selected.append(feature)
    return selected


def unique_values(features: list[dict], key: str) -> list[str]:
    values = {str(f.get("properties", {}).get(key) or "").strip() for f in features}
    values.discard("")
    return sorted(values)
