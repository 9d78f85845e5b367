from __future__ import annotations

import pytest

from floorgraph import Floorplan, FloorplanSettings

# Tight tolerances so plans measured in single units do not merge or snap.
FINE = FloorplanSettings(merge_tolerance=1.0, hit_tolerance=1.0, snap_tolerance=1.0)

SQUARE = {"A": (0.0, 0.0), "B": (10.0, 0.0), "C": (10.0, 10.0), "D": (0.0, 10.0)}
SQUARE_WALLS = [("A", "B"), ("B", "C"), ("C", "D"), ("D", "A")]


@pytest.fixture
def build():
    def _build(corners, walls, settings=FINE):
        plan = Floorplan(settings)
        for corner_id, (x, y) in corners.items():
            plan.insert_corner(x, y, corner_id)
        for start, end in walls:
            plan.insert_wall(plan.get_corner(start), plan.get_corner(end))
        return plan

    return _build


@pytest.fixture
def square(build):
    return build(SQUARE, SQUARE_WALLS)


@pytest.fixture
def square_document():
    return {
        "corners": {
            "a": {"x": 0, "y": 0},
            "b": {"x": 200, "y": 0},
            "c": {"x": 200, "y": 200, "elevation": 250},
            "d": {"x": 0, "y": 200},
        },
        "walls": [
            {"corner1": "a", "corner2": "b", "frontTexture": {"url": "brick.png"}},
            {"corner1": "b", "corner2": "c"},
            {"corner1": "c", "corner2": "d"},
            {"corner1": "d", "corner2": "a"},
        ],
        "rooms": {"a,b,c,d": {"name": "Living"}},
    }
