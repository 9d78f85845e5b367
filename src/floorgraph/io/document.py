"""Records of the floorplan interchange document.

The document is the durable JSON shape of a floorplan:

    {
      "corners": {"<id>": {"x": 0, "y": 0, "elevation": 0}},
      "walls": [{"corner1": "<id>", "corner2": "<id>",
                 "frontTexture": ..., "backTexture": ...}],
      "rooms": {"<id>,<id>,<id>": {"name": "Kitchen"}},
      "newFloorTextures": {"<sorted ids>": {"url": "...", "scale": 1}},
      "carbonSheet": {"url": "...", "transparency": 1, "x": 0, "y": 0,
                      "anchorX": 0, "anchorY": 0, "width": 0, "height": 0}
    }

Parsing validates the whole document before anything is built from it.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional

from ..core.model import FloorTexture, ReferenceImage, RoomMetadata


class InvalidFloorplan(ValueError):
    """Raised when a floorplan document is malformed or inconsistent."""

    pass


@dataclass(frozen=True)
class CornerRecord:
    id: str
    x: float
    y: float
    elevation: float = 0.0


@dataclass(frozen=True)
class WallRecord:
    corner1: str
    corner2: str
    front_texture: Any = None
    back_texture: Any = None


@dataclass
class FloorplanDocument:
    """Validated content of a floorplan document.

    Attributes:
        corners: Corner records in document order.
        walls: Wall records in document order.
        rooms: Room metadata keyed by comma-joined corner ids.
        floor_textures: Floor textures keyed by room texture key.
        reference_image: Optional overlay block.
    """

    corners: List[CornerRecord] = field(default_factory=list)
    walls: List[WallRecord] = field(default_factory=list)
    rooms: Dict[str, RoomMetadata] = field(default_factory=dict)
    floor_textures: Dict[str, FloorTexture] = field(default_factory=dict)
    reference_image: Optional[ReferenceImage] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "FloorplanDocument":
        """Parse and validate a document mapping.

        Args:
            data: Decoded JSON document.

        Returns:
            The validated document.

        Raises:
            InvalidFloorplan: If a section is malformed or a wall references
                a corner id missing from the corners section.
        """
        if not isinstance(data, Mapping):
            raise InvalidFloorplan("Floorplan document must be a JSON object")

        corners = []
        for corner_id, corner_data in _section(data, "corners", dict).items():
            try:
                corners.append(
                    CornerRecord(
                        id=str(corner_id),
                        x=float(corner_data["x"]),
                        y=float(corner_data["y"]),
                        elevation=float(corner_data.get("elevation") or 0.0),
                    )
                )
            except (KeyError, TypeError, ValueError, AttributeError) as e:
                raise InvalidFloorplan(f"Invalid corner data for {corner_id}: {e}") from e

        walls = []
        for index, wall_data in enumerate(_section(data, "walls", list)):
            try:
                corner1 = str(wall_data["corner1"])
                corner2 = str(wall_data["corner2"])
            except (KeyError, TypeError) as e:
                raise InvalidFloorplan(f"Invalid wall data at index {index}: {e}") from e
            walls.append(
                WallRecord(
                    corner1=corner1,
                    corner2=corner2,
                    front_texture=wall_data.get("frontTexture"),
                    back_texture=wall_data.get("backTexture"),
                )
            )

        rooms = {}
        for key, room_data in _section(data, "rooms", dict).items():
            name = room_data.get("name") if isinstance(room_data, Mapping) else None
            rooms[str(key)] = RoomMetadata(name=name)

        textures_data = data.get("newFloorTextures")
        if textures_data is None:
            textures_data = data.get("floorTextures") or {}
        if not isinstance(textures_data, Mapping):
            raise InvalidFloorplan("'newFloorTextures' must be a JSON object")
        floor_textures = {}
        for key, texture in textures_data.items():
            try:
                floor_textures[str(key)] = FloorTexture(
                    url=str(texture["url"]), scale=float(texture.get("scale", 1.0))
                )
            except (KeyError, TypeError, ValueError, AttributeError) as e:
                raise InvalidFloorplan(f"Invalid floor texture for {key}: {e}") from e

        sheet = data.get("carbonSheet") or None
        reference_image = None
        if sheet:
            try:
                reference_image = ReferenceImage(
                    url=str(sheet.get("url", "")),
                    transparency=float(sheet.get("transparency", 1.0)),
                    x=float(sheet.get("x", 0.0)),
                    y=float(sheet.get("y", 0.0)),
                    anchor_x=float(sheet.get("anchorX", 0.0)),
                    anchor_y=float(sheet.get("anchorY", 0.0)),
                    width=float(sheet.get("width", 0.0)),
                    height=float(sheet.get("height", 0.0)),
                )
            except (TypeError, ValueError, AttributeError) as e:
                raise InvalidFloorplan(f"Invalid carbonSheet data: {e}") from e

        document = cls(
            corners=corners,
            walls=walls,
            rooms=rooms,
            floor_textures=floor_textures,
            reference_image=reference_image,
        )
        document.validate()
        return document

    def validate(self) -> None:
        """Check corner ids are unique and every wall end names a corner.

        Raises:
            InvalidFloorplan: On a duplicate corner id or a wall referencing
                a corner id missing from the corners section.
        """
        known = set()
        for corner in self.corners:
            if corner.id in known:
                raise InvalidFloorplan(f"Duplicate corner id '{corner.id}'")
            known.add(corner.id)

        for index, wall in enumerate(self.walls):
            for corner_id in (wall.corner1, wall.corner2):
                if corner_id not in known:
                    raise InvalidFloorplan(
                        f"Wall at index {index} references nonexistent corner '{corner_id}'"
                    )

    def to_dict(self) -> Dict[str, Any]:
        """Convert the document to its JSON-compatible shape."""
        walls = []
        for wall in self.walls:
            wall_data: Dict[str, Any] = {"corner1": wall.corner1, "corner2": wall.corner2}
            if wall.front_texture is not None:
                wall_data["frontTexture"] = wall.front_texture
            if wall.back_texture is not None:
                wall_data["backTexture"] = wall.back_texture
            walls.append(wall_data)

        data: Dict[str, Any] = {
            "corners": {
                corner.id: {"x": corner.x, "y": corner.y, "elevation": corner.elevation}
                for corner in self.corners
            },
            "walls": walls,
            "rooms": {key: {"name": meta.name} for key, meta in self.rooms.items()},
            "newFloorTextures": {
                key: {"url": texture.url, "scale": texture.scale}
                for key, texture in self.floor_textures.items()
            },
        }

        if self.reference_image is not None:
            sheet = self.reference_image
            data["carbonSheet"] = {
                "url": sheet.url,
                "transparency": sheet.transparency,
                "x": sheet.x,
                "y": sheet.y,
                "anchorX": sheet.anchor_x,
                "anchorY": sheet.anchor_y,
                "width": sheet.width,
                "height": sheet.height,
            }
        return data


def _section(data: Mapping[str, Any], name: str, kind: type) -> Any:
    value = data.get(name)
    if value is None:
        return kind()
    if not isinstance(value, kind):
        raise InvalidFloorplan(f"'{name}' must be a JSON {'object' if kind is dict else 'array'}")
    return value
