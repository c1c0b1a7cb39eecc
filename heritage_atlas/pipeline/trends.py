"""Valuation trends report over a (filtered) snapshot."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from pathlib import Path

from heritage_atlas.common.deterministic import mean, stable_sorted
from heritage_atlas.common.errors import MissingInputError
from heritage_atlas.common.fs import read_json, write_csv, write_json
from heritage_atlas.common.numbers import parse_number, parse_size_number
from heritage_atlas.pipeline.filters import filter_features, unique_values

LEADERBOARD_HEADERS = ["id", "name", "size", "value", "price_per_m2"]


@dataclass(frozen=True)
class MetricsRow:
    id: str
    name: str
    size: float | None
    value: float | None
    rates: float | None
    price_per_m2: float | None


def override_key(name: object, address: object) -> str:
    return f"{str(name or '').lower()}|{str(address or '').lower()}"


def build_overrides(metrics_config: dict) -> dict[str, dict]:
    overrides = {}
    for item in metrics_config.get("overrides", []):
        overrides[override_key(item["name"], item["address"])] = {
            "size": item.get("size"),
            "value": item.get("value"),
        }
    return overrides


def metrics_row(properties: dict, overrides: dict[str, dict]) -> MetricsRow:
    override = overrides.get(override_key(properties.get("name"), properties.get("address")), {})

    size = override.get("size")
    if size is None:
        size = parse_size_number(properties.get("erfSize"))

    value = override.get("value")
    if value is None:
        value = parse_number(properties.get("cmaMunicipalValue2023"))
    if value is None:
        value = parse_number(properties.get("estValue"))

    price_per_m2 = None
    if size is not None and size > 0 and value is not None:
        price_per_m2 = value / size

    return MetricsRow(
        id=str(properties.get("id") or ""),
        name=properties.get("name") or "Unnamed site",
        size=size,
        value=value,
        rates=parse_number(properties.get("cmaRatesEstimate")),
        price_per_m2=price_per_m2,
    )


def summarise_rows(rows: list[MetricsRow], *, size_ceiling: float) -> dict:
    sized = [row for row in rows if row.size is not None and 0 < row.size < size_ceiling]
    usable = [row for row in sized if row.value is not None and row.value > 0]

    return {
        "portfolio_value": sum(row.value for row in usable),
        "portfolio_footprint_m2": sum(row.size for row in sized),
        "avg_value_per_m2": mean([row.price_per_m2 for row in usable if row.price_per_m2 is not None]),
        "avg_rates": mean([row.rates for row in rows if row.rates is not None]),
        "usable_rows": len(usable),
    }


def leaderboard(rows: list[MetricsRow], *, size: int) -> list[MetricsRow]:
    priced = [row for row in rows if row.price_per_m2 is not None]
    return stable_sorted(priced, key=lambda row: row.price_per_m2, reverse=True)[:size]


def build_trends_report(
    snapshot: dict,
    metrics_config: dict,
    *,
    usage: str | None = None,
    zoning: str | None = None,
    search: str | None = None,
) -> dict:
    features = snapshot.get("features", [])
    visible = filter_features(features, usage=usage, zoning=zoning, search=search)
    overrides = build_overrides(metrics_config)
    rows = [metrics_row(feature.get("properties") or {}, overrides) for feature in visible]

    return {
        "filters": {"usage": usage or "all", "zoning": zoning or "all", "search": search or ""},
        "filter_options": {
            "usage": unique_values(features, "usage"),
            "zoning": unique_values(features, "zoning"),
        },
        "stats": {
            "visible": len(visible),
            "total": len(features),
            "missing_gps": int(snapshot.get("skippedRows") or 0),
            "heritage_matched": sum(1 for f in visible if (f.get("properties") or {}).get("hasHeritageMatch")),
        },
        "trends": summarise_rows(rows, size_ceiling=float(metrics_config["size_ceiling"])),
        "leaderboard": [asdict(row) for row in leaderboard(rows, size=int(metrics_config["leaderboard_size"]))],
    }


def write_trends_report(reports_dir: Path, report: dict) -> Path:
    report_path = reports_dir / "trends_report.json"
    write_json(report_path, report)
    write_csv(
        reports_dir / "pricing_leaderboard.csv",
        LEADERBOARD_HEADERS,
        [{key: row.get(key) for key in LEADERBOARD_HEADERS} for row in report["leaderboard"]],
    )
    return report_path


def run_trends_report(
    metrics_config: dict,
    snapshot_path: Path,
    reports_dir: Path,
    *,
    usage: str | None = None,
    zoning: str | None = None,
    search: str | None = None,
) -> Path:
    if not snapshot_path.exists():
        raise MissingInputError(f"Snapshot not found: {snapshot_path}; run the build stage first")
    snapshot = read_json(snapshot_path)
    report = build_trends_report(snapshot, metrics_config, usage=usage, zoning=zoning, search=search)
    return write_trends_report(reports_dir, report)
