"""Minimal strict schemas for YAML config validation."""

from __future__ import annotations

from heritage_atlas.common.errors import ConfigError
from heritage_atlas.common.models import HERITAGE_ATTRIBUTE_KEYS, SOURCE_FIELDS


def _assert_required_keys(obj: dict, required: set[str], ctx: str) -> None:
    if not isinstance(obj, dict):
        raise ConfigError(f"{ctx} must be a mapping")
    missing = required - set(obj)
    if missing:
        missing_str = ", ".join(sorted(missing))
        raise ConfigError(f"Missing keys in {ctx}: {missing_str}")


def _assert_no_unknown_keys(obj: dict, known: set[str], ctx: str, allow_unknown: bool) -> None:
    if allow_unknown:
        return
    unknown = set(obj) - known
    if unknown:
        unknown_str = ", ".join(sorted(unknown))
        raise ConfigError(f"Unknown keys in {ctx}: {unknown_str}")


def validate_pipeline_config(cfg: dict, *, allow_unknown: bool = False) -> dict:
    top_required = {"inputs", "heritage", "matching", "output", "fetch"}
    _assert_required_keys(cfg, top_required, "pipeline config")
    _assert_no_unknown_keys(cfg, top_required, "pipeline config", allow_unknown)

    _assert_required_keys(cfg["inputs"], {"workbook", "heritage_geojson"}, "inputs")
    _assert_required_keys(cfg["heritage"], {"source_epsg"}, "heritage")
    _assert_required_keys(cfg["matching"], {"high_threshold", "low_threshold"}, "matching")
    _assert_required_keys(cfg["output"], {"snapshot_filename"}, "output")
    _assert_required_keys(cfg["fetch"], {"enabled"}, "fetch")

    matching = cfg["matching"]
    try:
        high = int(matching["high_threshold"])
        low = int(matching["low_threshold"])
    except (TypeError, ValueError) as exc:
        raise ConfigError("matching thresholds must be integers") from exc
    if low > high:
        raise ConfigError(f"matching.low_threshold ({low}) exceeds matching.high_threshold ({high})")

    weights = matching.get("weights") or {}
    if not isinstance(weights, dict):
        raise ConfigError("matching.weights must be a mapping")
    _assert_no_unknown_keys(weights, {"house_number", "token_overlap", "substring"}, "matching.weights", allow_unknown)
    for name, weight in weights.items():
        # bool is an int subclass; YAML yes/no would otherwise pass as 1/0.
        if isinstance(weight, bool) or not isinstance(weight, int) or weight < 0:
            raise ConfigError(f"matching.weights.{name} must be a non-negative integer, got {weight!r}")

    if cfg["fetch"]["enabled"] and not cfg["fetch"].get("heritage_url"):
        raise ConfigError("fetch.heritage_url is required when fetch is enabled")

    return cfg


def validate_columns_config(cfg: dict, *, allow_unknown: bool = False) -> dict:
    _assert_required_keys(cfg, {"source_fields", "heritage"}, "columns")

    source_fields = cfg["source_fields"]
    _assert_required_keys(source_fields, {"gps"}, "columns.source_fields")
    # Unknown field names would never reach the snapshot, so they are always rejected.
    _assert_no_unknown_keys(source_fields, set(SOURCE_FIELDS), "columns.source_fields", allow_unknown=False)
    for name, spec in source_fields.items():
        _assert_required_keys(spec, {"headers"}, f"columns.source_fields.{name}")
        if not isinstance(spec["headers"], list) or not spec["headers"]:
            raise ConfigError(f"columns.source_fields.{name}.headers must be a non-empty list")

    heritage = cfg["heritage"]
    _assert_required_keys(heritage, {"address_field", "site_name_field", "attributes"}, "columns.heritage")
    _assert_no_unknown_keys(
        heritage["attributes"],
        set(HERITAGE_ATTRIBUTE_KEYS),
        "columns.heritage.attributes",
        allow_unknown,
    )
    return cfg


def validate_metrics_config(cfg: dict) -> dict:
    _assert_required_keys(cfg, {"size_ceiling", "leaderboard_size", "overrides"}, "metrics")
    if not isinstance(cfg["overrides"], list):
        raise ConfigError("metrics.overrides must be a list")
    for idx, override in enumerate(cfg["overrides"]):
        _assert_required_keys(override, {"name", "address"}, f"metrics.overrides[{idx}]")
    if int(cfg["leaderboard_size"]) <= 0:
        raise ConfigError("metrics.leaderboard_size must be positive")
    return cfg
