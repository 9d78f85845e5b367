from __future__ import annotations

import json

import pytest

from floorgraph import Floorplan, load_floorplan, save_floorplan
from floorgraph.core.events import Loaded
from floorgraph.io.document import CornerRecord, FloorplanDocument, InvalidFloorplan, WallRecord
from floorgraph.io.parser import read_document


def test_load_reattaches_room_names(square_document) -> None:
    plan = Floorplan()
    plan.load(square_document)
    assert len(plan.rooms) == 1
    room = plan.rooms[0]
    assert room.name == "Living"
    assert room.area == pytest.approx(40000.0)
    assert plan.get_corner("c").elevation == 250.0
    assert plan.walls[0].front_texture == {"url": "brick.png"}


def test_name_matches_any_rotation_of_the_signature(square_document) -> None:
    square_document["rooms"] = {"c,d,a,b": {"name": "Living"}}
    plan = Floorplan()
    plan.load(square_document)
    assert plan.rooms[0].name == "Living"


def test_unmatched_room_metadata_is_dropped_on_save(square_document) -> None:
    square_document["rooms"] = {"x,y,z": {"name": "Ghost"}}
    plan = Floorplan()
    plan.load(square_document)
    assert plan.rooms[0].name is None
    assert plan.save().to_dict()["rooms"] == {"a,b,c,d": {"name": None}}


def test_save_skips_corners_without_walls(square_document) -> None:
    square_document["corners"]["lonely"] = {"x": 1000, "y": 1000}
    plan = Floorplan()
    plan.load(square_document)
    assert plan.get_corner("lonely") is not None
    saved = plan.save().to_dict()
    assert set(saved["corners"]) == {"a", "b", "c", "d"}
    assert saved["rooms"] == {"a,b,c,d": {"name": "Living"}}


def test_round_trip_is_stable(square_document) -> None:
    square_document["newFloorTextures"] = {
        "a,b,c,d": {"url": "oak.png", "scale": 2},
        "gone": {"url": "old.png", "scale": 1},
    }
    square_document["carbonSheet"] = {
        "url": "sketch.png",
        "transparency": 0.5,
        "x": 10,
        "y": 20,
        "anchorX": 1,
        "anchorY": 2,
        "width": 300,
        "height": 400,
    }
    first = Floorplan()
    first.load(square_document)
    saved = first.save().to_dict()

    second = Floorplan()
    second.load(json.loads(json.dumps(saved)))
    assert second.save().to_dict() == saved

    assert saved["newFloorTextures"] == {"a,b,c,d": {"url": "oak.png", "scale": 2.0}}
    assert saved["carbonSheet"]["anchorY"] == 2.0
    assert saved["walls"][0] == {"corner1": "a", "corner2": "b", "frontTexture": {"url": "brick.png"}}


def test_legacy_floor_textures_key(square_document) -> None:
    square_document["floorTextures"] = {"a,b,c,d": {"url": "oak.png"}}
    plan = Floorplan()
    plan.load(square_document)
    assert plan.get_floor_texture("a,b,c,d").scale == 1.0


def test_duplicate_corners_merge_on_load(square_document) -> None:
    square_document["corners"]["a2"] = {"x": 5, "y": 5}
    square_document["walls"].append({"corner1": "a2", "corner2": "c"})
    square_document["walls"].append({"corner1": "a", "corner2": "a2"})
    plan = Floorplan()
    plan.load(square_document)
    assert plan.get_corner("a2") is None
    assert len(plan.corners) == 4
    assert len(plan.walls) == 5
    assert len(plan.rooms) == 2


def test_missing_corner_aborts_without_touching_graph(square_document) -> None:
    plan = Floorplan()
    plan.load(square_document)

    broken = dict(square_document)
    broken["walls"] = square_document["walls"] + [{"corner1": "a", "corner2": "nowhere"}]
    with pytest.raises(InvalidFloorplan, match="nowhere"):
        plan.load(broken)

    assert len(plan.corners) == 4
    assert len(plan.walls) == 4
    assert plan.rooms[0].name == "Living"


@pytest.mark.parametrize(
    "document",
    [
        [],
        {"corners": []},
        {"corners": {"a": {"x": "left", "y": 0}}},
        {"corners": {"a": {"y": 0}}},
        {"walls": [{"corner1": "a"}]},
        {"newFloorTextures": {"k": {"scale": 1}}},
    ],
)
def test_malformed_documents(document) -> None:
    with pytest.raises(InvalidFloorplan):
        FloorplanDocument.from_dict(document)


def test_empty_document_loads_empty_plan() -> None:
    plan = Floorplan()
    plan.load({})
    assert plan.corners == ()
    assert plan.rooms == ()
    assert plan.get_size() == (0.0, 0.0)


def test_loaded_event(square_document) -> None:
    plan = Floorplan()
    events = []
    plan.events.subscribe(Loaded, events.append)
    plan.load(square_document)
    assert len(events) == 1
    assert events[0].rooms[0].name == "Living"


def test_file_round_trip(tmp_path, square_document) -> None:
    source = tmp_path / "plan.json"
    source.write_text(json.dumps(square_document), encoding="utf-8")

    plan = load_floorplan(source)
    target = tmp_path / "out" / "saved.json"
    save_floorplan(plan, target)

    reloaded = load_floorplan(target)
    assert [room.name for room in reloaded.rooms] == ["Living"]
    assert json.loads(target.read_text(encoding="utf-8"))["rooms"] == {"a,b,c,d": {"name": "Living"}}


def test_read_document_errors(tmp_path) -> None:
    with pytest.raises(FileNotFoundError):
        read_document(tmp_path / "missing.json")

    bad = tmp_path / "bad.json"
    bad.write_text("{not json", encoding="utf-8")
    with pytest.raises(InvalidFloorplan):
        read_document(bad)


@pytest.mark.parametrize(
    "corners, walls, message",
    [
        ([CornerRecord("a", 0, 0)], [WallRecord("a", "nowhere")], "nowhere"),
        ([CornerRecord("a", 0, 0), CornerRecord("a", 500, 500)], [], "Duplicate"),
    ],
)
def test_invalid_built_document_leaves_plan_untouched(square_document, corners, walls, message) -> None:
    plan = Floorplan()
    plan.load(square_document)

    with pytest.raises(InvalidFloorplan, match=message):
        plan.load(FloorplanDocument(corners=corners, walls=walls))

    assert len(plan.corners) == 4
    assert len(plan.walls) == 4
    assert plan.rooms[0].name == "Living"


def test_load_built_document() -> None:
    document = FloorplanDocument(
        corners=[
            CornerRecord("a", 0, 0),
            CornerRecord("b", 100, 0),
            CornerRecord("c", 0, 100, elevation=30),
        ],
        walls=[WallRecord("a", "b"), WallRecord("b", "c"), WallRecord("c", "a")],
    )
    plan = Floorplan()
    plan.load(document)
    assert len(plan.rooms) == 1
    assert plan.rooms[0].area == pytest.approx(5000.0)
    assert plan.get_corner("c").elevation == 30
