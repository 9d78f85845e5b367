"""Core data models for floorplan graphs."""

from .events import CornerCreated, CornerRemoved, EventBus, Loaded, StructureUpdated, WallCreated, WallRemoved
from .model import Corner, HalfEdge, Point, Room, Wall
from .topology import build_corner_graph, build_room_graph, build_wall_adjacency

__all__ = [
    "Corner",
    "CornerCreated",
    "CornerRemoved",
    "EventBus",
    "HalfEdge",
    "Loaded",
    "Point",
    "Room",
    "StructureUpdated",
    "Wall",
    "WallCreated",
    "WallRemoved",
    "build_corner_graph",
    "build_room_graph",
    "build_wall_adjacency",
]
