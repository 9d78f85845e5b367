"""Reference checks for edits on a live floorplan.

Edits name corners and walls by object; these helpers make sure the objects
belong to the floorplan being edited before anything is mutated.
"""

from __future__ import annotations

from typing import Mapping, Sequence

from ..core.model import Corner, Wall


class InvalidOperation(Exception):
    """Raised when an edit references an entity the floorplan does not own."""

    pass


def validate_corner(corners: Mapping[str, Corner], corner: Corner) -> Corner:
    """Check that a corner is registered in the floorplan.

    Args:
        corners: The floorplan's corners by id.
        corner: The corner to check.

    Returns:
        The corner itself.

    Raises:
        InvalidOperation: If the corner is not the one registered under its id.
    """
    if corners.get(corner.id) is not corner:
        raise InvalidOperation(f"Corner '{corner.id}' is not part of this floorplan")
    return corner


def validate_wall(walls: Sequence[Wall], wall: Wall) -> Wall:
    """Check that a wall is registered in the floorplan.

    Raises:
        InvalidOperation: If the wall is not in the wall list.
    """
    if not any(existing is wall for existing in walls):
        raise InvalidOperation(f"Wall '{wall.id}' is not part of this floorplan")
    return wall


def validate_wall_ends(corners: Mapping[str, Corner], wall: Wall) -> None:
    """Check that both ends of a wall are registered corners.

    Raises:
        InvalidOperation: If either end has been removed.
    """
    for corner_id in (wall.start, wall.end):
        if corner_id not in corners:
            raise InvalidOperation(
                f"Wall '{wall.id}' references missing corner '{corner_id}'"
            )
