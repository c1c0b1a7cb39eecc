"""Helpers for deterministic ordering and serialisation."""

from __future__ import annotations

from typing import Callable, Iterable, TypeVar

T = TypeVar("T")


def stable_sorted(items: Iterable[T], key: Callable[[T], object], *, reverse: bool = False) -> list[T]:
    # sorted() keeps input order for equal keys in both directions.
    return sorted(items, key=key, reverse=reverse)


def mean(values: list[float]) -> float | None:
    if not values:
        return None
    return sum(values) / len(values)
