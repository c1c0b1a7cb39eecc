"""Per-row heritage enrichment: spatial containment first, fuzzy address fallback."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from typing import Any, Iterable

from heritage_atlas.common.constants import (
    CONFIDENCE_HIGH,
    CONFIDENCE_LOW,
    CONFIDENCE_MEDIUM,
    EXACT_SPATIAL_SCORE,
    METHOD_ADDRESS_FUZZY,
    METHOD_ADDRESS_FUZZY_LOW,
    METHOD_EXACT_SPATIAL,
    SKIPPED_SAMPLE_LIMIT,
)
from heritage_atlas.common.geometry import Point
from heritage_atlas.common.ids import fallback_record_id
from heritage_atlas.common.models import MatchResult, SourceRecord
from heritage_atlas.common.scoring import DEFAULT_WEIGHTS, score_candidate
from heritage_atlas.pipeline.coordinates import parse_gps, project_to_web_mercator
from heritage_atlas.pipeline.heritage_index import HeritageIndex


@dataclass(frozen=True)
class MatchSettings:
    high_threshold: int = 8
    low_threshold: int = 6
    weights: dict = field(default_factory=lambda: dict(DEFAULT_WEIGHTS))

    @classmethod
    def from_config(cls, matching: dict) -> "MatchSettings":
        return cls(
            high_threshold=int(matching["high_threshold"]),
            low_threshold=int(matching["low_threshold"]),
            weights={**DEFAULT_WEIGHTS, **(matching.get("weights") or {})},
        )

    def thresholds(self) -> dict[str, int]:
        return {"high": self.high_threshold, "low": self.low_threshold}


@dataclass
class EnrichmentResult:
    features: list[dict] = field(default_factory=list)
    total_rows: int = 0
    skipped_rows: int = 0
    matched_rows: int = 0
    method_counts: Counter = field(default_factory=Counter)
    skipped_samples: list[dict] = field(default_factory=list)


def match_by_address(record: SourceRecord, index: HeritageIndex, settings: MatchSettings) -> MatchResult:
    best_candidate = None
    best_score = 0
    best_explanation = None
    for candidate in index.candidates:
        score, explanation = score_candidate(
            record.address,
            record.name,
            candidate.address_norm,
            candidate.site_name_norm,
            weights=settings.weights,
        )
        # Strictly greater: the earliest candidate keeps a tie.
        if score > best_score:
            best_candidate, best_score, best_explanation = candidate, score, explanation

    if best_candidate is None:
        return MatchResult()
    if best_score >= settings.high_threshold:
        return MatchResult(best_candidate, METHOD_ADDRESS_FUZZY, best_score, CONFIDENCE_MEDIUM, best_explanation)
    if best_score >= settings.low_threshold:
        return MatchResult(best_candidate, METHOD_ADDRESS_FUZZY_LOW, best_score, CONFIDENCE_LOW, best_explanation)
    return MatchResult()


def match_record(
    record: SourceRecord,
    point: Point,
    index: HeritageIndex,
    settings: MatchSettings,
) -> MatchResult:
    """Match one record whose GPS has already been parsed and projected."""
    candidate = index.find_containing(point)
    if candidate is not None:
        return MatchResult(candidate, METHOD_EXACT_SPATIAL, EXACT_SPATIAL_SCORE, CONFIDENCE_HIGH)
    return match_by_address(record, index, settings)


def build_feature(record: SourceRecord, lon_lat: tuple[float, float], record_id: str, match: MatchResult) -> dict[str, Any]:
    properties: dict[str, Any] = record.to_properties(record_id)
    properties.update(match.to_properties())
    return {
        "type": "Feature",
        "geometry": {"type": "Point", "coordinates": [lon_lat[0], lon_lat[1]]},
        "properties": properties,
    }


def enrich_records(
    records: Iterable[SourceRecord],
    index: HeritageIndex,
    settings: MatchSettings,
) -> EnrichmentResult:
    result = EnrichmentResult()

    for record in records:
        result.total_rows += 1
        lon_lat = parse_gps(record.gps)
        if lon_lat is None:
            result.skipped_rows += 1
            if len(result.skipped_samples) < SKIPPED_SAMPLE_LIMIT:
                result.skipped_samples.append(
                    {"row_number": record.row_number, "record_id": record.record_id, "gps": record.gps}
                )
            continue

        point = project_to_web_mercator(*lon_lat)
        match = match_record(record, point, index, settings)
        if match.matched:
            result.matched_rows += 1
            result.method_counts[match.method] += 1

        record_id = record.record_id or fallback_record_id(len(result.features))
        result.features.append(build_feature(record, lon_lat, record_id, match))

    return result
