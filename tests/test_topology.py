from __future__ import annotations

from floorgraph.core.topology import (
    build_corner_graph,
    build_room_graph,
    build_wall_adjacency,
    connected_parts,
)


def test_corner_graph(square) -> None:
    square.insert_wall(square.get_corner("A"), square.get_corner("C"))
    G = build_corner_graph(square)
    assert G.number_of_nodes() == 4
    assert G.number_of_edges() == 5
    assert G.nodes["C"]["pos"] == (10.0, 10.0)


def test_wall_adjacency(square) -> None:
    diagonal = square.insert_wall(square.get_corner("A"), square.get_corner("C"))
    adjacency = build_wall_adjacency(square)
    assert len(adjacency[diagonal.id]) == 2
    outer = [rooms for wall_id, rooms in adjacency.items() if wall_id != diagonal.id]
    assert all(len(rooms) == 1 for rooms in outer)


def test_room_graph_links_rooms_sharing_a_wall(square) -> None:
    diagonal = square.insert_wall(square.get_corner("A"), square.get_corner("C"))
    square.set_room_name(square.rooms[0], "Hall")
    G = build_room_graph(square)
    assert G.number_of_nodes() == 2
    assert G.number_of_edges() == 1
    (_, _, data), = G.edges(data=True)
    assert data["wall_ids"] == [diagonal.id]
    assert "Hall" in {G.nodes[n]["name"] for n in G.nodes}


def test_connected_parts(square) -> None:
    assert connected_parts(square) == 1
    square.insert_corner(50, 50)
    assert connected_parts(square) == 2
