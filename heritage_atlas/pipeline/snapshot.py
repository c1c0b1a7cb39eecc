"""Snapshot GeoJSON emission and the accompanying build report."""

from __future__ import annotations

from pathlib import Path

from heritage_atlas.common.constants import MATCH_METHODS
from heritage_atlas.common.fs import write_json
from heritage_atlas.pipeline.enrich import EnrichmentResult, MatchSettings


def build_snapshot(
    result: EnrichmentResult,
    *,
    workbook_name: str,
    heritage_name: str | None,
    settings: MatchSettings,
    generated_at: str,
) -> dict:
    return {
        "type": "FeatureCollection",
        "generatedAt": generated_at,
        "sourceWorkbook": workbook_name,
        "sourceHeritageGeoJSON": heritage_name,
        "totalRows": result.total_rows,
        "skippedRows": result.skipped_rows,
        "matchedHeritageRows": result.matched_rows,
        "matchMethodCounts": {method: result.method_counts.get(method, 0) for method in MATCH_METHODS},
        "matchThresholds": settings.thresholds(),
        "features": result.features,
    }


def write_snapshot(path: Path, snapshot: dict) -> Path:
    write_json(path, snapshot)
    return path


def write_build_report(
    path: Path,
    result: EnrichmentResult,
    *,
    run_id: str,
    generated_at: str,
    heritage_candidates: int,
    heritage_excluded: int,
    warnings: list[str],
) -> Path:
    emitted = len(result.features)
    payload = {
        "run_id": run_id,
        "generated_at": generated_at,
        "counts": {
            "total_rows": result.total_rows,
            "skipped_rows": result.skipped_rows,
            "emitted_features": emitted,
            "matched_rows": result.matched_rows,
            "unmatched_rows": emitted - result.matched_rows,
            "heritage_candidates": heritage_candidates,
            "heritage_excluded": heritage_excluded,
        },
        "match_methods": {method: result.method_counts.get(method, 0) for method in MATCH_METHODS},
        "match_coverage_percent": 0.0 if emitted == 0 else round((result.matched_rows / emitted) * 100, 2),
        "skipped_samples": result.skipped_samples,
        "warnings": sorted(set(warnings)),
    }
    write_json(path, payload)
    return path
