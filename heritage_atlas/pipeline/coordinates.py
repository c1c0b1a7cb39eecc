"""GPS text parsing and Web-Mercator projection."""

from __future__ import annotations

import re
from functools import lru_cache

from pyproj import CRS, Transformer

WEB_MERCATOR_EPSG = 3857
WGS84_EPSG = 4326
MAX_MERCATOR_LAT = 85.05112878

_COORD_RE = re.compile(r"(-?\d+(?:\.\d+)?)\s*°?\s*([NSEW])?", re.IGNORECASE)
_LAT_HEMISPHERES = {"N", "S"}
_LON_HEMISPHERES = {"E", "W"}


def parse_coord(text: str, axis: str) -> tuple[float, str] | None:
    """Parse one half of a GPS string into ``(value, hemisphere)``.

    The hemisphere letter wins over any sign written on the number. Without a
    letter, the latitude slot is forced south since the survey area lies in
    the southern hemisphere.
    """
    match = _COORD_RE.search(text.strip())
    if match is None:
        return None

    value = float(match.group(1))
    hemisphere = (match.group(2) or "").upper()
    if hemisphere:
        value = -abs(value) if hemisphere in {"S", "W"} else abs(value)
    elif axis == "lat":
        value = -abs(value)
    return value, hemisphere


def parse_gps(raw: object) -> tuple[float, float] | None:
    """Return ``(lon, lat)`` for a "lon, lat" style string, or None."""
    if raw is None:
        return None
    parts = [part.strip() for part in str(raw).split(",")]
    parts = [part for part in parts if part]
    if len(parts) < 2:
        return None

    first = parse_coord(parts[0], "lon")
    second = parse_coord(parts[1], "lat")
    if first is None or second is None:
        return None

    (first_value, first_hemi), (second_value, second_hemi) = first, second
    lon, lat = first_value, second_value

    # Hemisphere letters naming both axes settle the order; otherwise fall back
    # to magnitude, which only helps when the longitude exceeds 90.
    letters_reversed = first_hemi in _LAT_HEMISPHERES and second_hemi in _LON_HEMISPHERES
    letters_ordered = first_hemi in _LON_HEMISPHERES and second_hemi in _LAT_HEMISPHERES
    if letters_reversed or (not letters_ordered and abs(first_value) <= 90 and abs(second_value) > 90):
        lon, lat = second_value, first_value

    if abs(lat) > 90 or abs(lon) > 180:
        return None
    return lon, lat


@lru_cache(maxsize=8)
def _transformer(source_epsg: int, target_epsg: int) -> Transformer:
    return Transformer.from_crs(CRS.from_epsg(source_epsg), CRS.from_epsg(target_epsg), always_xy=True)


def clamp_latitude(lat: float) -> float:
    return max(-MAX_MERCATOR_LAT, min(MAX_MERCATOR_LAT, lat))


def project_to_web_mercator(lon: float, lat: float) -> tuple[float, float]:
    x, y = _transformer(WGS84_EPSG, WEB_MERCATOR_EPSG).transform(lon, clamp_latitude(lat))
    return float(x), float(y)


def reproject_rings(polygons: list, source_epsg: int) -> list:
    """Reproject multipolygon rings from ``source_epsg`` into Web Mercator."""
    if source_epsg == WEB_MERCATOR_EPSG:
        return polygons
    if source_epsg == WGS84_EPSG:
        return [
            [[project_to_web_mercator(vertex[0], vertex[1]) for vertex in ring] for ring in rings]
            for rings in polygons
        ]

    transformer = _transformer(source_epsg, WEB_MERCATOR_EPSG)
    out = []
    for rings in polygons:
        projected_rings = []
        for ring in rings:
            xs, ys = transformer.transform([v[0] for v in ring], [v[1] for v in ring])
            projected_rings.append([(float(x), float(y)) for x, y in zip(xs, ys)])
        out.append(projected_rings)
    return out
