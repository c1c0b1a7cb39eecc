"""Configuration loading and validation."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

from heritage_atlas.common.errors import ConfigError
from heritage_atlas.common.fs import read_yaml
from heritage_atlas.common.schema import (
    validate_columns_config,
    validate_metrics_config,
    validate_pipeline_config,
)

CONFIG_FILES = ("pipeline.yml", "columns.yml", "metrics.yml")


@dataclass(frozen=True)
class ConfigBundle:
    pipeline: dict
    columns: dict
    metrics: dict


def _deep_merge(base: Any, overlay: Any) -> Any:
    if isinstance(base, dict) and isinstance(overlay, dict):
        merged = dict(base)
        for key, value in overlay.items():
            if key in merged:
                merged[key] = _deep_merge(merged[key], value)
            else:
                merged[key] = value
        return merged
    return overlay


def _load_yaml_with_overlay(path: Path, overlay_path: Path | None) -> dict:
    if not path.exists():
        raise ConfigError(f"Missing config file: {path}")
    base = read_yaml(path)
    if overlay_path is None or not overlay_path.exists():
        return base
    overlay = read_yaml(overlay_path)
    if overlay is None:
        return base
    return _deep_merge(base, overlay)


def load_all_configs(
    config_dir: Path,
    *,
    allow_unknown: bool = False,
    overlay_config_dir: Path | None = None,
) -> ConfigBundle:
    loaded = {}
    for filename in CONFIG_FILES:
        overlay_path = overlay_config_dir / filename if overlay_config_dir is not None else None
        loaded[filename] = _load_yaml_with_overlay(config_dir / filename, overlay_path)

    return ConfigBundle(
        pipeline=validate_pipeline_config(loaded["pipeline.yml"], allow_unknown=allow_unknown),
        columns=validate_columns_config(loaded["columns.yml"], allow_unknown=allow_unknown),
        metrics=validate_metrics_config(loaded["metrics.yml"]),
    )
