"""Geometry utilities for floorplan graphs.

This module provides the planar primitives used by room detection and
graph editing: segment intersection, turn angles, winding and area.
"""

from .polygon import is_clockwise, polygon_area, segment_intersection, signed_area, signed_turn_angle

__all__ = ["segment_intersection", "signed_turn_angle", "signed_area", "is_clockwise", "polygon_area"]
