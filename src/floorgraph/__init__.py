"""floorgraph - corner/wall floorplan graphs and the rooms they enclose."""

__version__ = "0.1.0"

from .config import FloorplanSettings
from .core.model import Corner, HalfEdge, Point, Room, Wall
from .engine.floorplan import Floorplan
from .io.parser import load_floorplan, save_floorplan

__all__ = [
    "Corner",
    "Floorplan",
    "FloorplanSettings",
    "HalfEdge",
    "Point",
    "Room",
    "Wall",
    "load_floorplan",
    "save_floorplan",
]
