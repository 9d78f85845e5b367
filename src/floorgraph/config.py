"""
Configuration for floorplan editing and room detection
"""

from __future__ import annotations

from dataclasses import dataclass

# Corner creation returns an existing corner closer than this
CORNER_MERGE_TOLERANCE = 20.0

# Default pick distance for corners and walls
HIT_TOLERANCE = 10.0

# Neighbour distance within which a corner aligns to the same x or y
AXIS_SNAP_TOLERANCE = 25.0

# Parametric margin for segment intersections at endpoints
EPSILON = 1e-9


@dataclass(frozen=True)
class FloorplanSettings:
    """Tolerances used by a floorplan.

    Attributes:
        merge_tolerance: Distance under which a new or moved corner is merged
            into an existing corner (or wall, when moving).
        hit_tolerance: Default distance for corner and wall picking.
        snap_tolerance: Axis snapping distance used after intersection splits.
        epsilon: Parametric margin excluding segment endpoints from
            intersection tests.
    """

    merge_tolerance: float = CORNER_MERGE_TOLERANCE
    hit_tolerance: float = HIT_TOLERANCE
    snap_tolerance: float = AXIS_SNAP_TOLERANCE
    epsilon: float = EPSILON


DEFAULT_SETTINGS = FloorplanSettings()
