"""Build stage: survey workbook + heritage inventory -> snapshot GeoJSON."""

from __future__ import annotations

from pathlib import Path

from heritage_atlas.common.config_loader import ConfigBundle
from heritage_atlas.pipeline.enrich import MatchSettings, enrich_records
from heritage_atlas.pipeline.heritage_index import load_heritage_index
from heritage_atlas.pipeline.snapshot import build_snapshot, write_build_report, write_snapshot
from heritage_atlas.pipeline.workbook import load_source_records


def run_build(
    bundle: ConfigBundle,
    *,
    workbook_path: Path,
    heritage_path: Path | None,
    data_dir: Path,
    run_id: str,
    generated_at: str,
) -> dict:
    pipeline_cfg = bundle.pipeline

    # Fatal input problems surface here, before anything is written.
    records = load_source_records(workbook_path, bundle.columns["source_fields"])
    index = load_heritage_index(
        heritage_path,
        bundle.columns["heritage"],
        source_epsg=int(pipeline_cfg["heritage"]["source_epsg"]),
    )

    settings = MatchSettings.from_config(pipeline_cfg["matching"])
    result = enrich_records(records, index, settings)

    snapshot = build_snapshot(
        result,
        workbook_name=workbook_path.name,
        heritage_name=index.source_name,
        settings=settings,
        generated_at=generated_at,
    )
    snapshot_path = write_snapshot(data_dir / "out" / pipeline_cfg["output"]["snapshot_filename"], snapshot)

    warnings = list(index.warnings)
    if result.skipped_rows:
        warnings.append("ROWS_SKIPPED_INVALID_GPS")
    report_path = write_build_report(
        data_dir / "out" / "reports" / "build_report.json",
        result,
        run_id=run_id,
        generated_at=generated_at,
        heritage_candidates=len(index),
        heritage_excluded=index.excluded_features,
        warnings=warnings,
    )

    return {
        "snapshot_path": snapshot_path,
        "report_path": report_path,
        "total_rows": result.total_rows,
        "emitted_features": len(result.features),
        "skipped_rows": result.skipped_rows,
        "matched_rows": result.matched_rows,
        "heritage_candidates": len(index),
        "warnings": sorted(set(warnings)),
    }
