"""Room detection on a planar straight-line graph.

Rooms are the bounded faces of the corner/wall graph. Each face is recovered
by a tightest-cycle walk started from every directed edge: at every corner
the walk leaves through the edge making the smallest clockwise turn from the
edge it arrived on, so it keeps to the face on its left. Every face is found
once per boundary edge, hence the rotation dedup, and the unbounded outside
face of each connected component comes out clockwise and is dropped.
"""

from __future__ import annotations

import logging
from typing import Dict, List, Mapping, Sequence, Set, Tuple

from ..core.model import Point
from ..geom.polygon import is_clockwise, signed_turn_angle

LOGGER = logging.getLogger(__name__)

Cycle = Tuple[str, ...]


def find_tightest_cycle(
    first: str,
    second: str,
    positions: Mapping[str, Point],
    adjacency: Mapping[str, Sequence[str]],
) -> Cycle:
    """Walk the tightest cycle through the directed edge first -> second.

    The search is depth-first over an explicit stack of (corner, path)
    frontiers. The start corner may only be re-entered to close the cycle,
    never straight back from the second corner.

    Args:
        first: Corner the walk starts from.
        second: First corner visited after the start.
        positions: Corner id to position.
        adjacency: Corner id to adjacent corner ids.

    Returns:
        The cycle as corner ids starting with first, or an empty tuple when
        the walk dead-ends.
    """
    stack: List[Tuple[str, Cycle]] = []
    visited: Set[str] = {first}
    frontier = (second, (first,))

    while True:
        current, previous = frontier
        visited.add(current)

        if current == first:
            return previous

        candidates = [
            corner
            for corner in adjacency.get(current, ())
            if corner not in visited or (corner == first and current != second)
        ]

        path = previous + (current,)
        if len(candidates) > 1:
            came_from = positions[previous[-1]]
            pivot = positions[current]
            # Descending, so the smallest turn is popped first
            candidates.sort(
                key=lambda corner: signed_turn_angle(came_from, pivot, positions[corner]),
                reverse=True,
            )

        stack.extend((corner, path) for corner in candidates)

        if not stack:
            return ()
        frontier = stack.pop()


def remove_duplicate_cycles(cycles: Sequence[Cycle]) -> List[Cycle]:
    """Keep the first occurrence of every cycle up to rotation.

    Reversed cycles are distinct; the orientation filter deals with them.
    """
    unique: List[Cycle] = []
    seen: Set[Cycle] = set()
    for cycle in cycles:
        if not cycle:
            continue
        if any(cycle[i:] + cycle[:i] in seen for i in range(len(cycle))):
            continue
        seen.add(cycle)
        unique.append(cycle)
    return unique


def find_rooms(
    positions: Mapping[str, Point], adjacency: Mapping[str, Sequence[str]]
) -> List[Cycle]:
    """Find the rooms of a floorplan graph.

    Args:
        positions: Corner id to position, in corner order.
        adjacency: Corner id to adjacent corner ids, in adjacency order.

    Returns:
        Counter-clockwise corner cycles, one per bounded face.
    """
    loops: List[Cycle] = []
    for first in positions:
        for second in adjacency.get(first, ()):
            loops.append(find_tightest_cycle(first, second, positions, adjacency))

    unique = remove_duplicate_cycles(loops)
    rooms = [
        cycle
        for cycle in unique
        if not is_clockwise([positions[corner_id] for corner_id in cycle])
    ]

    LOGGER.debug(
        "Room detection: %d walks, %d unique cycles, %d rooms",
        len(loops),
        len(unique),
        len(rooms),
    )
    return rooms


def adjacency_from_walls(
    corner_ids: Sequence[str], walls: Sequence[Tuple[str, str]]
) -> Dict[str, List[str]]:
    """Derive corner adjacency from (start, end) wall pairs.

    For every corner the end corners of its outgoing walls come first, then
    the start corners of its incoming walls, each in wall order. Repeated
    neighbours, degenerate walls and walls to unknown corners are ignored.
    """
    outgoing: Dict[str, List[str]] = {corner_id: [] for corner_id in corner_ids}
    incoming: Dict[str, List[str]] = {corner_id: [] for corner_id in corner_ids}
    for start, end in walls:
        if start == end or start not in outgoing or end not in outgoing:
            continue
        outgoing[start].append(end)
        incoming[end].append(start)

    adjacency: Dict[str, List[str]] = {}
    for corner_id in outgoing:
        neighbours: List[str] = []
        for other in outgoing[corner_id] + incoming[corner_id]:
            if other not in neighbours:
                neighbours.append(other)
        adjacency[corner_id] = neighbours
    return adjacency
