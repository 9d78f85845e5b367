"""Core data models for floorplan graphs.

This module defines the entities of a floorplan: corners (graph vertices),
walls (graph edges between two corners), the half-edges that describe each
face of a wall, and the rooms derived from the graph. Walls refer to corners
by id; adjacency and room membership are derived by the floorplan.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from typing import Any, Iterable, Optional, Tuple

from shapely.geometry import Point as ShapelyPoint
from shapely.geometry import Polygon


def new_id() -> str:
    """Generate a fresh entity identifier."""
    return str(uuid.uuid4())


@dataclass(frozen=True)
class Point:
    """Represents a 2D point in space.

    Attributes:
        x: The x-coordinate of the point.
        y: The y-coordinate of the point.
    """

    x: float
    y: float


@dataclass
class Corner:
    """Represents a corner of the floorplan graph.

    Attributes:
        id: Unique identifier within the floorplan.
        x: The x-coordinate of the corner.
        y: The y-coordinate of the corner.
        elevation: Height of the corner, 0 by default.
    """

    id: str
    x: float
    y: float
    elevation: float = 0.0

    @property
    def point(self) -> Point:
        return Point(self.x, self.y)


@dataclass(frozen=True)
class HalfEdge:
    """One face of a wall.

    A front edge runs from the wall start to the wall end and a back edge
    runs the other way. Edges created for orphan walls have no room.

    Attributes:
        wall_id: ID of the wall this edge belongs to.
        front: Whether this is the front face of the wall.
        start: Corner ID the edge starts at.
        end: Corner ID the edge ends at.
        room: Signature of the room bounded by this edge, if any.
    """

    wall_id: str
    front: bool
    start: str
    end: str
    room: Optional[str] = None


@dataclass
class Wall:
    """Represents a wall between two corners.

    Attributes:
        start: ID of the start corner.
        end: ID of the end corner.
        id: Internal identifier, not persisted.
        front_texture: Opaque texture reference for the front face.
        back_texture: Opaque texture reference for the back face.
        front_edge: Derived front half-edge, reset on every update.
        back_edge: Derived back half-edge, reset on every update.
        orphan: True when the wall bounds no room.
    """

    start: str
    end: str
    id: str = field(default_factory=new_id)
    front_texture: Any = None
    back_texture: Any = None
    front_edge: Optional[HalfEdge] = None
    back_edge: Optional[HalfEdge] = None
    orphan: bool = False

    def reset_edges(self) -> None:
        self.front_edge = None
        self.back_edge = None
        self.orphan = False

    def make_edge(self, front: bool, room: Optional[str] = None) -> HalfEdge:
        """Create a half-edge for one face and attach it to the wall."""
        if front:
            edge = HalfEdge(self.id, True, self.start, self.end, room)
            self.front_edge = edge
        else:
            edge = HalfEdge(self.id, False, self.end, self.start, room)
            self.back_edge = edge
        return edge

    def edges(self) -> Tuple[HalfEdge, ...]:
        return tuple(e for e in (self.front_edge, self.back_edge) if e is not None)

    def touches(self, corner_id: str) -> bool:
        return corner_id in (self.start, self.end)

    def connects(self, a: str, b: str) -> bool:
        """Check whether the wall joins corners a and b in either direction."""
        return (self.start, self.end) in ((a, b), (b, a))

    def other_end(self, corner_id: str) -> str:
        if corner_id == self.start:
            return self.end
        if corner_id == self.end:
            return self.start
        raise ValueError(f"Corner '{corner_id}' is not an end of wall '{self.id}'")


@dataclass
class Room:
    """Represents a room derived from a closed cycle of corners.

    Rooms are rebuilt on every update, so the only stable handle on a room is
    its set of corner ids.

    Attributes:
        corner_ids: Boundary corners in counter-clockwise order.
        points: Boundary positions matching corner_ids.
        name: User-assigned name, if any.
        area: Floor area.
        edges: Half-edges along the boundary, in corner order.
    """

    corner_ids: Tuple[str, ...]
    points: Tuple[Point, ...]
    name: Optional[str] = None
    area: float = 0.0
    edges: Tuple[HalfEdge, ...] = ()

    @property
    def signature(self) -> str:
        """Comma-joined corner ids in boundary order, used as persistence key."""
        return ",".join(self.corner_ids)

    @property
    def texture_key(self) -> str:
        """Order-independent key used for floor textures."""
        return ",".join(sorted(self.corner_ids))

    def has_all_corners(self, ids: Iterable[str]) -> bool:
        """Check whether ids name exactly the corners of this room."""
        return set(ids) == set(self.corner_ids)

    @property
    def polygon(self) -> Polygon:
        return Polygon([(p.x, p.y) for p in self.points])

    def contains(self, point: Point) -> bool:
        """Check whether point lies strictly inside the room."""
        if len(self.points) < 3:
            return False
        shape = self.polygon
        if not shape.is_valid:
            shape = shape.buffer(0)
        return shape.contains(ShapelyPoint(point.x, point.y))


@dataclass(frozen=True)
class RoomMetadata:
    """User data attached to a room through its corner-id signature."""

    name: Optional[str] = None


@dataclass(frozen=True)
class FloorTexture:
    """Floor texture reference for a room, keyed by the room texture key."""

    url: str
    scale: float = 1.0


@dataclass(frozen=True)
class ReferenceImage:
    """Reference image overlay, carried for the editor and not interpreted."""

    url: str = ""
    transparency: float = 1.0
    x: float = 0.0
    y: float = 0.0
    anchor_x: float = 0.0
    anchor_y: float = 0.0
    width: float = 0.0
    height: float = 0.0
