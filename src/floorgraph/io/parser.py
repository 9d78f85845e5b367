"""Reading and writing floorplan JSON files.

This module provides functionality to load floorplan documents from JSON
files into Floorplan objects and to save them back.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Optional, Union

from ..config import FloorplanSettings
from ..engine.floorplan import Floorplan
from .document import FloorplanDocument, InvalidFloorplan

LOGGER = logging.getLogger(__name__)

PathLike = Union[str, Path]


def read_document(path: PathLike) -> FloorplanDocument:
    """Read and validate a floorplan document.

    Args:
        path: Path to the JSON file.

    Returns:
        The validated document.

    Raises:
        FileNotFoundError: If the file doesn't exist.
        InvalidFloorplan: If the JSON is invalid or the document malformed.
    """
    file_path = Path(path)
    if not file_path.exists():
        raise FileNotFoundError(f"File not found: {path}")

    with open(file_path, encoding="utf-8") as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as e:
            raise InvalidFloorplan(f"Invalid JSON in {path}: {e}") from e

    return FloorplanDocument.from_dict(data)


def load_floorplan(path: PathLike, settings: Optional[FloorplanSettings] = None) -> Floorplan:
    """Load a floorplan from a JSON file and derive its rooms.

    Args:
        path: Path to the JSON file.
        settings: Tolerances for the new floorplan.

    Returns:
        The loaded floorplan.
    """
    document = read_document(path)
    floorplan = Floorplan(settings)
    floorplan.load(document)
    LOGGER.debug("Loaded %s", path)
    return floorplan


def save_floorplan(floorplan: Floorplan, path: PathLike) -> None:
    """Save a floorplan to a JSON file.

    Args:
        floorplan: The floorplan to save.
        path: Where to write the JSON file.
    """
    output = Path(path)
    output.parent.mkdir(parents=True, exist_ok=True)
    with open(output, "w", encoding="utf-8") as f:
        json.dump(floorplan.save().to_dict(), f, indent=2)
    LOGGER.debug("Saved %s", path)
