"""Engine module for floorplan editing.

This module provides the Floorplan aggregate and the room detection
algorithm it runs after every structural edit.
"""

from .floorplan import Floorplan
from .rooms import find_rooms
from .validators import InvalidOperation

__all__ = ["Floorplan", "find_rooms", "InvalidOperation"]
