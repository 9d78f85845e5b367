"""Topology analysis for floorplan graphs.

This module provides NetworkX views of a floorplan: the corner/wall graph
itself, the mapping from walls to the rooms they bound, and the graph of
rooms that share a wall.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Dict, Set

import networkx as nx

if TYPE_CHECKING:
    from ..engine.floorplan import Floorplan


def build_corner_graph(floorplan: Floorplan) -> nx.Graph:
    """Build an undirected graph of corners connected by walls.

    Args:
        floorplan: Floorplan to convert.

    Returns:
        NetworkX Graph with corner ids as nodes (with ``pos``) and one edge
        per connected corner pair (with the first ``wall_id`` found).
    """
    G = nx.Graph()
    for corner in floorplan.corners:
        G.add_node(corner.id, pos=(corner.x, corner.y))

    for wall in floorplan.walls:
        if wall.start == wall.end:
            continue
        if not (G.has_node(wall.start) and G.has_node(wall.end)):
            continue
        if not G.has_edge(wall.start, wall.end):
            G.add_edge(wall.start, wall.end, wall_id=wall.id)

    return G


def build_wall_adjacency(floorplan: Floorplan) -> Dict[str, Set[str]]:
    """Build adjacency mapping from walls to rooms.

    For each wall, collect the rooms bound by its front and back edges.
    Orphan walls map to an empty set.

    Args:
        floorplan: Floorplan with up-to-date rooms.

    Returns:
        Dictionary mapping wall id to set of room signatures.
    """
    adjacency = {}
    for wall in floorplan.walls:
        adjacency[wall.id] = {edge.room for edge in wall.edges() if edge.room is not None}
    return adjacency


def build_room_graph(floorplan: Floorplan) -> nx.Graph:
    """Build a graph of rooms that share at least one wall.

    Args:
        floorplan: Floorplan with up-to-date rooms.

    Returns:
        NetworkX Graph with room signatures as nodes (with ``name`` and
        ``area``) and edges listing the shared ``wall_ids``.
    """
    G = nx.Graph()
    for room in floorplan.rooms:
        G.add_node(room.signature, name=room.name, area=room.area)

    for wall_id, rooms in build_wall_adjacency(floorplan).items():
        if len(rooms) != 2:
            continue
        r1, r2 = sorted(rooms)
        if G.has_edge(r1, r2):
            G[r1][r2]["wall_ids"].append(wall_id)
        else:
            G.add_edge(r1, r2, wall_ids=[wall_id])

    return G


def connected_parts(floorplan: Floorplan) -> int:
    """Number of connected groups of corners, isolated corners included."""
    return nx.number_connected_components(build_corner_graph(floorplan))
