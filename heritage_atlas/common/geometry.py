"""Planar geometry helpers: bounding boxes and ray-casting containment.

Rings are sequences of ``(x, y)`` pairs (extra ordinates are ignored). A
polygon is a list of rings where ring 0 is the exterior boundary and every
further ring is a hole. A multipolygon is a list of polygons.
"""

from __future__ import annotations

import sys
from typing import Sequence

Point = tuple[float, float]
Ring = Sequence[Sequence[float]]
Polygon = Sequence[Ring]
BBox = tuple[float, float, float, float]

_HORIZONTAL_EDGE_EPSILON = sys.float_info.epsilon


def compute_bbox(polygons: Sequence[Polygon]) -> BBox:
    min_x = min_y = float("inf")
    max_x = max_y = float("-inf")
    for rings in polygons:
        for ring in rings:
            for vertex in ring:
                x, y = vertex[0], vertex[1]
                min_x = min(min_x, x)
                min_y = min(min_y, y)
                max_x = max(max_x, x)
                max_y = max(max_y, y)
    return min_x, min_y, max_x, max_y


def point_in_bbox(point: Point, bbox: BBox) -> bool:
    x, y = point
    min_x, min_y, max_x, max_y = bbox
    return min_x <= x <= max_x and min_y <= y <= max_y


def ring_contains_point(ring: Ring, point: Point) -> bool:
    x, y = point
    inside = False
    j = len(ring) - 1
    for i in range(len(ring)):
        xi, yi = ring[i][0], ring[i][1]
        xj, yj = ring[j][0], ring[j][1]
        if (yi > y) != (yj > y):
            denominator = (yj - yi) or _HORIZONTAL_EDGE_EPSILON
            if x < (xj - xi) * (y - yi) / denominator + xi:
                inside = not inside
        j = i
    return inside


def polygon_contains_point(rings: Polygon, point: Point) -> bool:
    if not rings:
        return False
    if not ring_contains_point(rings[0], point):
        return False
    return not any(ring_contains_point(hole, point) for hole in rings[1:])


def multipolygon_contains_point(polygons: Sequence[Polygon], point: Point) -> bool:
    return any(polygon_contains_point(rings, point) for rings in polygons)
