"""Heritage inventory download stage."""

from __future__ import annotations

from pathlib import Path

from heritage_atlas.common.fs import write_json
from heritage_atlas.common.http import HttpClient, HttpRequestError, TimeoutConfig


def run_fetch(pipeline_config: dict, heritage_path: Path, *, client: HttpClient | None = None) -> dict:
    fetch_cfg = pipeline_config["fetch"]
    if not fetch_cfg.get("enabled"):
        return {"row_count": 0, "output_path": None, "warnings": ["FETCH_DISABLED"]}

    url = fetch_cfg["heritage_url"]
    timeout = TimeoutConfig(read=float(fetch_cfg.get("timeout_seconds", 120)))

    owns_client = client is None
    client = client or HttpClient(timeout=timeout)
    try:
        payload = client.get_json(url, timeout=timeout)
    finally:
        if owns_client:
            client.close()

    if not isinstance(payload, dict) or payload.get("type") != "FeatureCollection":
        raise HttpRequestError(f"Heritage download from {url} is not a GeoJSON FeatureCollection")

    write_json(heritage_path, payload)
    return {
        "row_count": len(payload.get("features") or []),
        "output_path": str(heritage_path),
        "warnings": [],
    }
