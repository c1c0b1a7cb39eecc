from pathlib import Path

import pytest

from heritage_atlas.common.config_loader import load_all_configs
from heritage_atlas.common.errors import ConfigError


def test_load_all_configs_from_repo_config_dir():
    bundle = load_all_configs(Path("config"))

    assert bundle.pipeline["matching"]["high_threshold"] == 8
    assert bundle.pipeline["matching"]["low_threshold"] == 6
    assert bundle.columns["source_fields"]["gps"]["required"] is True
    assert bundle.columns["heritage"]["attributes"]["heritageStatus"] == "HRTG_INV_STS"
    assert bundle.metrics["size_ceiling"] == 20000


def test_load_all_configs_applies_overlay_values(tmp_path: Path):
    overlay = tmp_path / "overlay"
    overlay.mkdir()
    (overlay / "pipeline.yml").write_text(
        """matching:
  high_threshold: 10
inputs:
  workbook: raw/refresh.xlsx
""",
        encoding="utf-8",
    )

    bundle = load_all_configs(Path("config"), overlay_config_dir=overlay)

    assert bundle.pipeline["matching"]["high_threshold"] == 10
    assert bundle.pipeline["matching"]["low_threshold"] == 6
    assert bundle.pipeline["inputs"]["workbook"] == "raw/refresh.xlsx"
    assert bundle.pipeline["inputs"]["heritage_geojson"] == "raw/cbd_heritage_buildings.geojson"


def test_load_all_configs_ignores_empty_overlay_file(tmp_path: Path):
    overlay = tmp_path / "overlay"
    overlay.mkdir()
    (overlay / "metrics.yml").write_text("", encoding="utf-8")

    bundle = load_all_configs(Path("config"), overlay_config_dir=overlay)

    assert bundle.metrics["leaderboard_size"] == 10


def test_load_all_configs_rejects_inverted_thresholds_from_overlay(tmp_path: Path):
    overlay = tmp_path / "overlay"
    overlay.mkdir()
    (overlay / "pipeline.yml").write_text("matching:\n  low_threshold: 9\n", encoding="utf-8")

    with pytest.raises(ConfigError):
        load_all_configs(Path("config"), overlay_config_dir=overlay)


def test_load_all_configs_missing_file(tmp_path: Path):
    with pytest.raises(ConfigError):
        load_all_configs(tmp_path)


def test_load_all_configs_rejects_non_numeric_weight_from_overlay(tmp_path: Path):
    overlay = tmp_path / "overlay"
    overlay.mkdir()
    (overlay / "pipeline.yml").write_text("matching:\n  weights:\n    substring: high\n", encoding="utf-8")

    with pytest.raises(ConfigError, match="substring"):
        load_all_configs(Path("config"), overlay_config_dir=overlay)
