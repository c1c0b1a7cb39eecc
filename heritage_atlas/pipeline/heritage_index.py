"""Heritage inventory polygons: loading, candidate index and bbox prefilter."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterator

from heritage_atlas.common.address import normalize_address
from heritage_atlas.common.errors import StageError
from heritage_atlas.common.fs import read_json
from heritage_atlas.common.geometry import Point, compute_bbox, multipolygon_contains_point, point_in_bbox
from heritage_atlas.common.models import HeritageCandidate
from heritage_atlas.pipeline.coordinates import reproject_rings

_EPSG_NAME_RE = re.compile(r"EPSG:+(\d+)$", re.IGNORECASE)
# Legacy GeoJSON "CRS84" names WGS84 with lon/lat axis order.
_CRS84_NAMES = {"urn:ogc:def:crs:ogc:1.3:crs84", "crs84"}


@dataclass(frozen=True)
class HeritageIndex:
    candidates: tuple[HeritageCandidate, ...] = ()
    source_name: str | None = None
    excluded_features: int = 0
    warnings: list[str] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.candidates)

    def candidates_near(self, point: Point) -> Iterator[HeritageCandidate]:
        for candidate in self.candidates:
            if point_in_bbox(point, candidate.bbox):
                yield candidate

    def find_containing(self, point: Point) -> HeritageCandidate | None:
        # First hit wins; inventory polygons are assumed not to overlap.
        for candidate in self.candidates_near(point):
            if multipolygon_contains_point(candidate.polygons, point):
                return candidate
        return None


def _as_text(value: object) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _is_vertex(vertex: object) -> bool:
    return (
        isinstance(vertex, (list, tuple))
        and len(vertex) >= 2
        and all(isinstance(v, (int, float)) and not isinstance(v, bool) for v in vertex[:2])
    )


def _is_polygon(rings: object) -> bool:
    return (
        isinstance(rings, list)
        and bool(rings)
        and all(isinstance(ring, list) and ring and all(_is_vertex(v) for v in ring) for ring in rings)
    )


def _polygons_from_geometry(geometry: object) -> list:
    """Return the geometry as a list of polygons, or [] if it is not a usable (Multi)Polygon."""
    if not isinstance(geometry, dict):
        return []
    coordinates = geometry.get("coordinates")
    if not isinstance(coordinates, list):
        return []
    if geometry.get("type") == "MultiPolygon":
        polygons = coordinates
    elif geometry.get("type") == "Polygon":
        polygons = [coordinates]
    else:
        return []
    if not polygons or not all(_is_polygon(rings) for rings in polygons):
        return []
    return polygons


def declared_epsg(payload: dict) -> int | None:
    name = (((payload.get("crs") or {}).get("properties") or {}).get("name") or "").strip()
    if not name:
        return None
    if name.lower() in _CRS84_NAMES:
        return 4326
    match = _EPSG_NAME_RE.search(name)
    return int(match.group(1)) if match else None


def build_candidate(feature: object, heritage_columns: dict, source_epsg: int) -> HeritageCandidate | None:
    if not isinstance(feature, dict):
        return None
    props = feature.get("properties")
    if not isinstance(props, dict):
        props = {}
    polygons = _polygons_from_geometry(feature.get("geometry"))

    heritage_address = _as_text(props.get(heritage_columns["address_field"]))
    heritage_site_name = _as_text(props.get(heritage_columns["site_name_field"]))
    if (not heritage_address and not heritage_site_name) or not polygons:
        return None

    polygons = reproject_rings(polygons, source_epsg)
    attributes = {key: _as_text(props.get(source)) for key, source in heritage_columns["attributes"].items()}

    return HeritageCandidate(
        polygons=tuple(polygons),
        bbox=compute_bbox(polygons),
        address_norm=normalize_address(heritage_address),
        site_name_norm=normalize_address(heritage_site_name),
        attributes=attributes,
    )


def build_index(payload: dict, heritage_columns: dict, *, source_epsg: int, source_name: str | None = None) -> HeritageIndex:
    if payload.get("type") != "FeatureCollection":
        raise StageError(f"Heritage input {source_name or ''} is not a GeoJSON FeatureCollection")

    epsg = declared_epsg(payload) or source_epsg
    candidates = []
    excluded = 0
    for feature in payload.get("features") or []:
        candidate = build_candidate(feature, heritage_columns, epsg)
        if candidate is None:
            excluded += 1
            continue
        candidates.append(candidate)

    warnings = ["HERITAGE_FEATURES_EXCLUDED"] if excluded else []
    return HeritageIndex(
        candidates=tuple(candidates),
        source_name=source_name,
        excluded_features=excluded,
        warnings=warnings,
    )


def load_heritage_index(path: Path | None, heritage_columns: dict, *, source_epsg: int) -> HeritageIndex:
    """Load the inventory; a missing file yields an empty index, not an error."""
    if path is None or not path.exists():
        return HeritageIndex(warnings=["HERITAGE_INPUT_MISSING"])
    payload = read_json(path)
    return build_index(payload, heritage_columns, source_epsg=source_epsg, source_name=path.name)
