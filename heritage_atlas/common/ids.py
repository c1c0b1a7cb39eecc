"""Run identifier helpers."""

from __future__ import annotations

from datetime import datetime, timezone


def generate_run_id() -> str:
    now = datetime.now(tz=timezone.utc)
    # Sortable by start time; one id per CLI invocation.
    return now.strftime("run-%Y%m%dT%H%M%S%fZ")


def fallback_record_id(emitted_count: int) -> str:
    return f"row-{emitted_count + 1}"
