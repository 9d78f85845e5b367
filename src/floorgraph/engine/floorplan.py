"""Floorplan aggregate: graph editing and room derivation.

A Floorplan owns its corners and walls and rebuilds its rooms with a full
update pass after every edit that can change them. Rooms, wall half-edges
and adjacency are derived data; the wall list is the source of truth.
"""

from __future__ import annotations

import copy
import logging
from typing import Dict, List, Mapping, Optional, Sequence, Tuple, Union

from ..config import DEFAULT_SETTINGS, FloorplanSettings
from ..core.events import (
    CornerCreated,
    CornerRemoved,
    EventBus,
    Loaded,
    StructureUpdated,
    WallCreated,
    WallRemoved,
)
from ..core.model import (
    Corner,
    FloorTexture,
    HalfEdge,
    Point,
    ReferenceImage,
    Room,
    RoomMetadata,
    Wall,
    new_id,
)
from ..geom.polygon import (
    bounds,
    closest_point_on_segment,
    distance,
    point_segment_distance,
    polygon_area,
    segment_intersection,
)
from ..io.document import CornerRecord, FloorplanDocument, WallRecord
from .rooms import adjacency_from_walls, find_rooms
from .validators import InvalidOperation, validate_corner, validate_wall, validate_wall_ends

LOGGER = logging.getLogger(__name__)


class Floorplan:
    """A set of corners and walls and the rooms they enclose.

    Args:
        settings: Tolerances for merging, picking and snapping.
    """

    def __init__(self, settings: Optional[FloorplanSettings] = None) -> None:
        self.settings = settings or DEFAULT_SETTINGS
        self.events = EventBus()
        self.room_metadata: Dict[str, RoomMetadata] = {}
        self.floor_textures: Dict[str, FloorTexture] = {}
        self.reference_image: Optional[ReferenceImage] = None
        self._corners: Dict[str, Corner] = {}
        self._walls: List[Wall] = []
        self._rooms: List[Room] = []

    @property
    def corners(self) -> Tuple[Corner, ...]:
        return tuple(self._corners.values())

    @property
    def walls(self) -> Tuple[Wall, ...]:
        return tuple(self._walls)

    @property
    def rooms(self) -> Tuple[Room, ...]:
        return tuple(self._rooms)

    def get_corner(self, corner_id: str) -> Optional[Corner]:
        return self._corners.get(corner_id)

    # ------------------------------------------------------------------
    # Graph mutation
    # ------------------------------------------------------------------

    def insert_corner(self, x: float, y: float, corner_id: Optional[str] = None) -> Corner:
        """Create a corner, or return the existing one within merge tolerance.

        Args:
            x: The x-coordinate.
            y: The y-coordinate.
            corner_id: Optional id; a fresh one is generated if omitted.

        Returns:
            The new corner, or the first existing corner closer than
            settings.merge_tolerance to (x, y).

        Raises:
            InvalidOperation: If corner_id is already used by a distant corner.
        """
        target = Point(float(x), float(y))
        for existing in self._corners.values():
            if distance(existing.point, target) < self.settings.merge_tolerance:
                return existing

        corner_id = new_id() if corner_id is None else str(corner_id)
        if corner_id in self._corners:
            raise InvalidOperation(f"Corner id '{corner_id}' is already in use")

        corner = Corner(id=corner_id, x=target.x, y=target.y)
        self._corners[corner_id] = corner
        self.events.publish(CornerCreated(corner))
        return corner

    def insert_wall(self, start: Corner, end: Corner) -> Optional[Wall]:
        """Create a wall from start to end and rebuild the rooms.

        A wall from a corner to itself is not created.

        Returns:
            The new wall, or None for a degenerate wall.

        Raises:
            InvalidOperation: If either corner is not part of this floorplan.
        """
        validate_corner(self._corners, start)
        validate_corner(self._corners, end)
        if start is end:
            LOGGER.warning("Ignoring zero-length wall at corner %s", start.id)
            return None

        wall = self._add_wall(start.id, end.id)
        self.update()
        return wall

    def remove_corner(self, corner: Corner) -> None:
        """Unregister a corner. Rooms are rebuilt on the next update."""
        validate_corner(self._corners, corner)
        del self._corners[corner.id]
        self.events.publish(CornerRemoved(corner))

    def remove_wall(self, wall: Wall) -> None:
        """Unregister a wall and rebuild the rooms."""
        validate_wall(self._walls, wall)
        self._discard_wall(wall)
        self.update()

    def draw_wall(self, start: Corner, end: Corner) -> Optional[Wall]:
        """Insert a wall and split it and every wall it crosses."""
        wall = self.insert_wall(start, end)
        if wall is not None:
            self.split_on_intersections(start, end)
        return wall

    def split_on_intersections(self, start: Corner, end: Corner) -> bool:
        """Split walls crossed by the segment start-end.

        A corner is inserted at every crossing (merge tolerance applies) and
        each crossed wall is cut in two at that corner. An existing wall
        between start and end is re-routed through the new corners. Then, in
        two rounds with an update pass after each, every corner is merged
        with a corner or wall within tolerance and snapped to its
        neighbours' axes.

        Returns:
            True if any crossing was found.
        """
        validate_corner(self._corners, start)
        validate_corner(self._corners, end)

        crossings: List[Corner] = []
        for wall in list(self._walls):
            ends = self._wall_ends(wall)
            if ends is None:
                continue
            point = segment_intersection(
                start.point, end.point, ends[0], ends[1], self.settings.epsilon
            )
            if point is None:
                continue
            corner = self.insert_corner(point.x, point.y)
            if not wall.touches(corner.id):
                self._split_wall(wall, corner)
            crossings.append(corner)

        if crossings:
            LOGGER.debug("Segment %s-%s crosses %d wall(s)", start.id, end.id, len(crossings))
            waypoints: List[Corner] = []
            for corner in sorted(crossings, key=lambda c: distance(start.point, c.point)):
                if corner.id in (start.id, end.id) or any(w is corner for w in waypoints):
                    continue
                waypoints.append(corner)
            segment = self.wall_between(start, end)
            if segment is not None and waypoints:
                if segment.start != start.id:
                    waypoints.reverse()
                self._reroute_wall(segment, waypoints)

        for _ in range(2):
            for corner in list(self._corners.values()):
                if self._corners.get(corner.id) is not corner:
                    continue
                self._merge_with_intersected(corner)
                self._snap_to_axis(corner, self.settings.snap_tolerance)
            self.update()

        return bool(crossings)

    def move_corner(self, corner: Corner, x: float, y: float, merge: bool = True) -> None:
        """Move a corner and rebuild the rooms.

        When merging, a corner landing within tolerance of another corner is
        combined with it; otherwise, one landing within tolerance of a wall it
        does not belong to is projected onto the wall and splits it.
        """
        validate_corner(self._corners, corner)
        corner.x = float(x)
        corner.y = float(y)
        if merge:
            self._merge_with_intersected(corner)
        self.update()

    def snap_to_axis(self, corner: Corner, tolerance: Optional[float] = None) -> Tuple[bool, bool]:
        """Align a corner with the x or y of close adjacent corners.

        Returns:
            Whether the corner snapped in x and in y.
        """
        validate_corner(self._corners, corner)
        if tolerance is None:
            tolerance = self.settings.snap_tolerance
        snapped = self._snap_to_axis(corner, tolerance)
        self.update()
        return snapped

    def reset(self) -> None:
        """Remove every corner and wall."""
        for wall in list(self._walls):
            self._discard_wall(wall)
        for corner in list(self._corners.values()):
            self.remove_corner(corner)
        self._rooms = []

    # ------------------------------------------------------------------
    # Derived structure
    # ------------------------------------------------------------------

    def update(self) -> None:
        """Rebuild rooms, wall half-edges and floor textures from the graph."""
        for wall in self._walls:
            wall.reset_edges()

        positions = {corner_id: corner.point for corner_id, corner in self._corners.items()}
        cycles = find_rooms(positions, self.adjacency())

        rooms = []
        for cycle in cycles:
            room = Room(corner_ids=cycle, points=tuple(positions[c] for c in cycle))
            room.name = self._saved_name(room)
            room.area = polygon_area(room.points)
            room.edges = self._attach_edges(room)
            rooms.append(room)
        self._rooms = rooms

        self._assign_orphan_edges()
        self._prune_floor_textures()

        LOGGER.debug(
            "Updated floorplan: %d corners, %d walls, %d rooms",
            len(self._corners),
            len(self._walls),
            len(self._rooms),
        )
        snapshot = copy.deepcopy((self.corners, self.walls, self.rooms))
        self.events.publish(StructureUpdated(*snapshot))

    def adjacency(self) -> Dict[str, List[str]]:
        """Adjacent corner ids for every corner, derived from the walls."""
        return adjacency_from_walls(
            list(self._corners), [(wall.start, wall.end) for wall in self._walls]
        )

    def adjacent_corners(self, corner: Corner) -> List[Corner]:
        return [self._corners[c] for c in self.adjacency().get(corner.id, [])]

    def walls_of(self, corner: Corner) -> List[Wall]:
        return [wall for wall in self._walls if wall.touches(corner.id)]

    def wall_between(self, a: Corner, b: Corner) -> Optional[Wall]:
        for wall in self._walls:
            if wall.connects(a.id, b.id):
                return wall
        return None

    def wall_points(self, wall: Wall) -> Tuple[Point, Point]:
        """Start and end positions of a wall.

        Raises:
            InvalidOperation: If an end corner has been removed.
        """
        validate_wall_ends(self._corners, wall)
        return self._corners[wall.start].point, self._corners[wall.end].point

    def wall_edges(self) -> List[HalfEdge]:
        edges: List[HalfEdge] = []
        for wall in self._walls:
            edges.extend(wall.edges())
        return edges

    def orphan_walls(self) -> List[Wall]:
        return [wall for wall in self._walls if wall.orphan]

    def set_room_name(self, room: Room, name: Optional[str]) -> None:
        """Name a room; the name follows the room's corners across updates."""
        for key in [k for k in self.room_metadata if room.has_all_corners(k.split(","))]:
            del self.room_metadata[key]
        self.room_metadata[room.signature] = RoomMetadata(name=name)
        room.name = name

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def overlapped_corner(self, x: float, y: float, tolerance: Optional[float] = None) -> Optional[Corner]:
        if tolerance is None:
            tolerance = self.settings.hit_tolerance
        target = Point(float(x), float(y))
        for corner in self._corners.values():
            if distance(corner.point, target) < tolerance:
                return corner
        return None

    def overlapped_wall(self, x: float, y: float, tolerance: Optional[float] = None) -> Optional[Wall]:
        if tolerance is None:
            tolerance = self.settings.hit_tolerance
        target = Point(float(x), float(y))
        for wall in self._walls:
            ends = self._wall_ends(wall)
            if ends is not None and point_segment_distance(target, *ends) < tolerance:
                return wall
        return None

    def overlapped_room(self, x: float, y: float) -> Optional[Room]:
        target = Point(float(x), float(y))
        for room in self._rooms:
            if room.contains(target):
                return room
        return None

    def get_center(self) -> Tuple[float, float]:
        return self.get_dimensions(center=True)

    def get_size(self) -> Tuple[float, float]:
        return self.get_dimensions(center=False)

    def get_dimensions(self, center: bool = False) -> Tuple[float, float]:
        """Center or size of the corner bounding box, (0, 0) when empty."""
        box = bounds([corner.point for corner in self._corners.values()])
        if box is None:
            return 0.0, 0.0
        min_x, min_y, max_x, max_y = box
        if center:
            return (min_x + max_x) * 0.5, (min_y + max_y) * 0.5
        return max_x - min_x, max_y - min_y

    def get_floor_texture(self, key: str) -> Optional[FloorTexture]:
        return self.floor_textures.get(key)

    def set_floor_texture(self, key: str, url: str, scale: float = 1.0) -> None:
        self.floor_textures[key] = FloorTexture(url=url, scale=float(scale))

    # ------------------------------------------------------------------
    # Document import / export
    # ------------------------------------------------------------------

    def load(self, document: Union[FloorplanDocument, Mapping]) -> None:
        """Replace the floorplan with the content of a document.

        The document is fully validated before the current graph is cleared,
        so a failed load leaves the floorplan untouched.

        Raises:
            InvalidFloorplan: If the document is malformed.
        """
        if isinstance(document, FloorplanDocument):
            document.validate()
        else:
            document = FloorplanDocument.from_dict(document)

        self.reset()

        corners: Dict[str, Corner] = {}
        for record in document.corners:
            corner = self.insert_corner(record.x, record.y, record.id)
            if record.elevation:
                corner.elevation = record.elevation
            corners[record.id] = corner

        for record in document.walls:
            start = corners[record.corner1]
            end = corners[record.corner2]
            if start is end:
                LOGGER.warning(
                    "Skipping wall %s-%s: both ends merged into corner %s",
                    record.corner1,
                    record.corner2,
                    start.id,
                )
                continue
            self._add_wall(start.id, end.id, record.front_texture, record.back_texture)

        self.floor_textures = dict(document.floor_textures)
        self.room_metadata = dict(document.rooms)
        self.reference_image = document.reference_image

        self.update()
        LOGGER.info(
            "Loaded floorplan with %d corners, %d walls, %d rooms",
            len(self._corners),
            len(self._walls),
            len(self._rooms),
        )
        self.events.publish(Loaded(copy.deepcopy(self.rooms)))

    def save(self) -> FloorplanDocument:
        """Export the floorplan. Only corners used by a wall are written."""
        used = set()
        walls = []
        for wall in self._walls:
            if wall.start not in self._corners or wall.end not in self._corners:
                LOGGER.warning("Not saving wall %s: it references a removed corner", wall.id)
                continue
            walls.append(WallRecord(wall.start, wall.end, wall.front_texture, wall.back_texture))
            used.update((wall.start, wall.end))

        corners = [
            CornerRecord(corner.id, corner.x, corner.y, corner.elevation)
            for corner in self._corners.values()
            if corner.id in used
        ]
        rooms = {room.signature: RoomMetadata(name=room.name) for room in self._rooms}
        return FloorplanDocument(
            corners=corners,
            walls=walls,
            rooms=rooms,
            floor_textures=dict(self.floor_textures),
            reference_image=self.reference_image,
        )

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _add_wall(
        self, start_id: str, end_id: str, front_texture: object = None, back_texture: object = None
    ) -> Wall:
        wall = Wall(start=start_id, end=end_id, front_texture=front_texture, back_texture=back_texture)
        self._walls.append(wall)
        self.events.publish(WallCreated(wall))
        return wall

    def _discard_wall(self, wall: Wall) -> None:
        self._walls = [existing for existing in self._walls if existing is not wall]
        self.events.publish(WallRemoved(wall))

    def _wall_ends(self, wall: Wall) -> Optional[Tuple[Point, Point]]:
        start = self._corners.get(wall.start)
        end = self._corners.get(wall.end)
        if start is None or end is None:
            return None
        return start.point, end.point

    def _split_wall(self, wall: Wall, corner: Corner) -> Wall:
        """Cut a wall at corner; the second half is returned as a new wall."""
        second = self._add_wall(corner.id, wall.end, wall.front_texture, wall.back_texture)
        wall.end = corner.id
        return second

    def _reroute_wall(self, wall: Wall, waypoints: Sequence[Corner]) -> None:
        chain = [wall.start] + [corner.id for corner in waypoints] + [wall.end]
        wall.end = chain[1]
        for a, b in zip(chain[1:], chain[2:]):
            self._add_wall(a, b, wall.front_texture, wall.back_texture)

    def _snap_to_axis(self, corner: Corner, tolerance: float) -> Tuple[bool, bool]:
        snapped_x = snapped_y = False
        for other in self.adjacent_corners(corner):
            if abs(other.x - corner.x) < tolerance:
                corner.x = other.x
                snapped_x = True
            if abs(other.y - corner.y) < tolerance:
                corner.y = other.y
                snapped_y = True
        return snapped_x, snapped_y

    def _merge_with_intersected(self, corner: Corner) -> bool:
        tolerance = self.settings.merge_tolerance
        for other in list(self._corners.values()):
            if other is not corner and distance(corner.point, other.point) < tolerance:
                self._combine_corners(corner, other)
                return True

        for wall in list(self._walls):
            if wall.touches(corner.id):
                continue
            ends = self._wall_ends(wall)
            if ends is None:
                continue
            if point_segment_distance(corner.point, *ends) < tolerance:
                projected = closest_point_on_segment(corner.point, *ends)
                corner.x, corner.y = projected.x, projected.y
                self._split_wall(wall, corner)
                return True
        return False

    def _combine_corners(self, keep: Corner, absorbed: Corner) -> None:
        """Move keep onto absorbed and hand it all of absorbed's walls."""
        keep.x, keep.y = absorbed.x, absorbed.y
        for wall in self._walls:
            if wall.start == absorbed.id:
                wall.start = keep.id
            if wall.end == absorbed.id:
                wall.end = keep.id
        self.remove_corner(absorbed)
        self._remove_duplicate_walls(keep)

    def _remove_duplicate_walls(self, corner: Corner) -> None:
        seen = set()
        for wall in self.walls_of(corner):
            pair = frozenset((wall.start, wall.end))
            if wall.start == wall.end or pair in seen:
                self._discard_wall(wall)
            else:
                seen.add(pair)

    def _saved_name(self, room: Room) -> Optional[str]:
        name = None
        for key, meta in self.room_metadata.items():
            if room.has_all_corners(key.split(",")):
                name = meta.name
        return name

    def _attach_edges(self, room: Room) -> Tuple[HalfEdge, ...]:
        edges = []
        ids = room.corner_ids
        for i, first in enumerate(ids):
            second = ids[(i + 1) % len(ids)]
            wall_to = next((w for w in self._walls if (w.start, w.end) == (first, second)), None)
            wall_from = next((w for w in self._walls if (w.start, w.end) == (second, first)), None)
            if wall_to is not None:
                edges.append(wall_to.make_edge(True, room.signature))
            elif wall_from is not None:
                edges.append(wall_from.make_edge(False, room.signature))
            else:
                LOGGER.warning("Corners %s and %s are not connected by a wall", first, second)
        return tuple(edges)

    def _prune_floor_textures(self) -> None:
        live = {room.texture_key for room in self._rooms}
        stale = [key for key in self.floor_textures if key not in live]
        for key in stale:
            del self.floor_textures[key]
        if stale:
            LOGGER.debug("Dropped %d floor texture(s) of vanished rooms", len(stale))

    def _assign_orphan_edges(self) -> None:
        for wall in self._walls:
            if wall.front_edge is None and wall.back_edge is None:
                wall.orphan = True
                wall.make_edge(True)
                wall.make_edge(False)
