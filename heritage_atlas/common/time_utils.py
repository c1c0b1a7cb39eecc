"""UTC-focused helpers for run metadata."""

from __future__ import annotations

from datetime import datetime, timezone

from heritage_atlas.common.errors import ConfigError


def utc_timestamp_iso() -> str:
    return datetime.now(tz=timezone.utc).isoformat(timespec="milliseconds")


def parse_generated_at(value: str | None) -> str:
    """Return a UTC ISO timestamp, pinned to ``value`` when one is given."""
    if not value:
        return utc_timestamp_iso()
    try:
        parsed = datetime.fromisoformat(value)
    except ValueError as exc:
        raise ConfigError(f"--generated-at is not an ISO 8601 timestamp: {value!r}") from exc
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc).isoformat(timespec="milliseconds")
