"""Polygon and segment geometry for floorplan graphs.

This module provides the small set of planar primitives used by the room
detection and graph editing code: distances, segment intersection, the turn
angle metric of the tightest-cycle search, and polygon orientation and area.
"""

from __future__ import annotations

import math
from typing import Optional, Sequence, Tuple

from shapely.geometry import LinearRing, LineString, Polygon
from shapely.geometry import Point as ShapelyPoint

from ..config import EPSILON
from ..core.model import Point

TWO_PI = 2.0 * math.pi


def distance(a: Point, b: Point) -> float:
    """Calculate Euclidean distance between two points."""
    return math.hypot(a.x - b.x, a.y - b.y)


def segment_intersection(
    a1: Point, a2: Point, b1: Point, b2: Point, epsilon: float = EPSILON
) -> Optional[Point]:
    """Intersect segment a1-a2 with segment b1-b2.

    Only crossings strictly inside both segments are reported: the normalized
    position along each segment must lie in (epsilon, 1 - epsilon). Segments
    that touch at an endpoint, are parallel or overlap do not intersect.

    Args:
        a1: Start of the first segment.
        a2: End of the first segment.
        b1: Start of the second segment.
        b2: End of the second segment.
        epsilon: Parametric margin excluded at both ends.

    Returns:
        The intersection point, or None.
    """
    line = LineString([(a1.x, a1.y), (a2.x, a2.y)])
    other = LineString([(b1.x, b1.y), (b2.x, b2.y)])
    if line.length == 0 or other.length == 0:
        return None

    inter = line.intersection(other)
    # Overlaps come back as lines and are not crossings
    if inter.is_empty or not isinstance(inter, ShapelyPoint):
        return None

    for segment in (line, other):
        position = segment.project(inter, normalized=True)
        if not epsilon < position < 1.0 - epsilon:
            return None

    return Point(inter.x, inter.y)


def signed_turn_angle(prev: Point, pivot: Point, nxt: Point) -> float:
    """Clockwise angle swept from (prev - pivot) to (nxt - pivot).

    The result lies in [0, 2*pi). Walking a planar graph and always leaving a
    corner through the edge with the smallest angle traces the face on the
    left of the walk.
    """
    v1x, v1y = prev.x - pivot.x, prev.y - pivot.y
    v2x, v2y = nxt.x - pivot.x, nxt.y - pivot.y
    theta = -math.atan2(v1x * v2y - v1y * v2x, v1x * v2x + v1y * v2y)
    if theta < 0.0:
        theta += TWO_PI
    return theta


def signed_area(polygon: Sequence[Point]) -> float:
    """Polygon area, positive for counter-clockwise polygons."""
    if len(polygon) < 3:
        return 0.0
    coords = [(p.x, p.y) for p in polygon]
    area = Polygon(coords).area
    return area if LinearRing(coords).is_ccw else -area


def is_clockwise(polygon: Sequence[Point]) -> bool:
    """Check polygon winding. Degenerate polygons count as clockwise."""
    return signed_area(polygon) <= 0.0


def polygon_area(polygon: Sequence[Point]) -> float:
    """Unsigned polygon area."""
    return abs(signed_area(polygon))


def closest_point_on_segment(p: Point, a: Point, b: Point) -> Point:
    """Project p onto segment a-b, clamped to the segment."""
    line = LineString([(a.x, a.y), (b.x, b.y)])
    if line.length == 0:
        return a
    projected = line.interpolate(line.project(ShapelyPoint(p.x, p.y)))
    return Point(projected.x, projected.y)


def point_segment_distance(p: Point, a: Point, b: Point) -> float:
    """Shortest distance from p to segment a-b."""
    if a == b:
        return distance(p, a)
    return LineString([(a.x, a.y), (b.x, b.y)]).distance(ShapelyPoint(p.x, p.y))


def bounds(points: Sequence[Point]) -> Optional[Tuple[float, float, float, float]]:
    """Axis-aligned bounds (min_x, min_y, max_x, max_y), None when empty."""
    if not points:
        return None
    xs = [p.x for p in points]
    ys = [p.y for p in points]
    return min(xs), min(ys), max(xs), max(ys)
