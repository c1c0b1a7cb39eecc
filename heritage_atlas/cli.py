"""CLI entrypoint for the heritage atlas data pipeline."""

from __future__ import annotations

import argparse
import logging
import sys
import time
from pathlib import Path

from heritage_atlas.common.config_loader import ConfigBundle, load_all_configs
from heritage_atlas.common.constants import EXIT_HARD_FAIL, EXIT_PARTIAL, EXIT_SUCCESS, STAGES
from heritage_atlas.common.errors import PipelineError
from heritage_atlas.common.ids import generate_run_id
from heritage_atlas.common.logging import build_logger, log_event, log_warning
from heritage_atlas.common.time_utils import parse_generated_at
from heritage_atlas.harvest.fetch import run_fetch
from heritage_atlas.pipeline.build import run_build
from heritage_atlas.pipeline.trends import run_trends_report

FATAL_ERROR_CODES = {"CONTRACT_ERROR", "INPUT_MISSING", "CONFIG_ERROR"}


def parse_args(argv: list[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("command", choices=[*STAGES, "all"])
    parser.add_argument("--run-id", default=None)
    parser.add_argument("--generated-at", default=None, help="Pin the snapshot timestamp (ISO 8601).")
    parser.add_argument("--config-dir", default="./config")
    parser.add_argument("--overlay-config-dir", default=None)
    parser.add_argument("--data-dir", default="./data")
    parser.add_argument("--workbook", default=None, help="Override the configured survey workbook path.")
    parser.add_argument("--heritage", default=None, help="Override the configured heritage GeoJSON path.")
    parser.add_argument("--usage", default=None)
    parser.add_argument("--zoning", default=None)
    parser.add_argument("--search", default=None)
    parser.add_argument("--log-level", default="INFO", choices=["DEBUG", "INFO", "WARN", "ERROR"])
    parser.add_argument("--strict", action="store_true")
    return parser.parse_args(argv)


def resolve_input_paths(args: argparse.Namespace, bundle: ConfigBundle, data_dir: Path) -> tuple[Path, Path]:
    inputs = bundle.pipeline["inputs"]
    workbook = Path(args.workbook) if args.workbook else data_dir / inputs["workbook"]
    heritage = Path(args.heritage) if args.heritage else data_dir / inputs["heritage_geojson"]
    return workbook, heritage


def execute_stage(
    stage: str,
    bundle: ConfigBundle,
    args: argparse.Namespace,
    data_dir: Path,
    run_id: str,
    generated_at: str,
    logger: logging.Logger,
) -> None:
    workbook_path, heritage_path = resolve_input_paths(args, bundle, data_dir)

    if stage == "fetch":
        result = run_fetch(bundle.pipeline, heritage_path)
        for warning in result["warnings"]:
            log_warning(logger, "fetch skipped", run_id=run_id, stage=stage, event="STAGE_WARN", status="warn", error_code=warning)
        if result["output_path"]:
            log_event(
                logger,
                f"fetched heritage inventory to {result['output_path']}",
                run_id=run_id,
                stage=stage,
                event="FETCH_DONE",
                status="ok",
                rows_out=result["row_count"],
            )
    elif stage == "build":
        summary = run_build(
            bundle,
            workbook_path=workbook_path,
            heritage_path=heritage_path,
            data_dir=data_dir,
            run_id=run_id,
            generated_at=generated_at,
        )
        for warning in summary["warnings"]:
            log_warning(logger, "build degraded", run_id=run_id, stage=stage, event="STAGE_WARN", status="warn", error_code=warning)
        log_event(
            logger,
            f"wrote {summary['emitted_features']} features to {summary['snapshot_path']}",
            run_id=run_id,
            stage=stage,
            event="SNAPSHOT_WRITTEN",
            status="ok",
            source=workbook_path.name,
            rows_in=summary["total_rows"],
            rows_out=summary["emitted_features"],
            skipped_rows=summary["skipped_rows"],
            matched_rows=summary["matched_rows"],
        )
    elif stage == "report":
        snapshot_path = data_dir / "out" / bundle.pipeline["output"]["snapshot_filename"]
        report_path = run_trends_report(
            bundle.metrics,
            snapshot_path,
            data_dir / "out" / "reports",
            usage=args.usage,
            zoning=args.zoning,
            search=args.search,
        )
        log_event(logger, f"wrote trends report to {report_path}", run_id=run_id, stage=stage, event="REPORT_WRITTEN", status="ok")
    else:
        raise ValueError(f"Unknown stage: {stage}")


def run_command(args: argparse.Namespace) -> int:
    run_id = args.run_id or generate_run_id()
    config_dir = Path(args.config_dir)
    overlay_config_dir = Path(args.overlay_config_dir) if args.overlay_config_dir else None
    data_dir = Path(args.data_dir)

    logger = build_logger(run_id, data_dir=data_dir, level=args.log_level)
    try:
        generated_at = parse_generated_at(args.generated_at)
        bundle = load_all_configs(config_dir, overlay_config_dir=overlay_config_dir)
    except PipelineError as exc:
        log_event(logger, str(exc), run_id=run_id, event="CONFIG_FAIL", status="error", error_code=exc.error_code)
        return EXIT_HARD_FAIL
    stages = STAGES if args.command == "all" else (args.command,)

    had_partial_failure = False
    failed_stages: set[str] = set()

    for stage in stages:
        # The report reads the snapshot; a failed build would leave a stale one.
        if stage == "report" and "build" in failed_stages:
            log_warning(
                logger,
                "stage skipped: build failed",
                run_id=run_id,
                stage=stage,
                event="STAGE_SKIP",
                status="warn",
                error_code="UPSTREAM_FAILED",
            )
            continue
        log_event(logger, "stage start", run_id=run_id, stage=stage, event="STAGE_START", status="ok")
        started = time.monotonic()
        try:
            execute_stage(stage, bundle, args, data_dir, run_id, generated_at, logger)
        except PipelineError as exc:
            had_partial_failure = True
            failed_stages.add(stage)
            log_event(
                logger,
                f"stage failed: {exc}",
                run_id=run_id,
                stage=stage,
                event="STAGE_FAIL",
                status="error",
                error_code=exc.error_code,
            )
            if exc.error_code in FATAL_ERROR_CODES or args.strict:
                return EXIT_HARD_FAIL
        except Exception:
            logger.exception(
                "unexpected stage failure",
                extra={"run_id": run_id, "stage": stage, "event": "STAGE_FAIL", "status": "error", "error_code": "UNEXPECTED_ERROR"},
            )
            return EXIT_HARD_FAIL
        duration_ms = int((time.monotonic() - started) * 1000)
        log_event(logger, "stage end", run_id=run_id, stage=stage, event="STAGE_END", status="ok", duration_ms=duration_ms)

    if had_partial_failure:
        return EXIT_PARTIAL
    return EXIT_SUCCESS


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv if argv is not None else sys.argv[1:])
    try:
        return run_command(args)
    except PipelineError:
        return EXIT_HARD_FAIL


if __name__ == "__main__":
    raise SystemExit(main())
