"""Change notifications published by a floorplan.

Observers subscribe a callback per event type. StructureUpdated and Loaded
carry tuples of copied entities, so changing them never changes the floorplan.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from dataclasses import dataclass
from typing import Any, Callable, DefaultDict, List, Tuple, Type

from .model import Corner, Room, Wall

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class CornerCreated:
    corner: Corner


@dataclass(frozen=True)
class CornerRemoved:
    corner: Corner


@dataclass(frozen=True)
class WallCreated:
    wall: Wall


@dataclass(frozen=True)
class WallRemoved:
    wall: Wall


@dataclass(frozen=True)
class StructureUpdated:
    """Published at the end of every update pass."""

    corners: Tuple[Corner, ...]
    walls: Tuple[Wall, ...]
    rooms: Tuple[Room, ...]


@dataclass(frozen=True)
class Loaded:
    """Published once a document has been loaded and rooms derived."""

    rooms: Tuple[Room, ...]


Callback = Callable[[Any], None]


class EventBus:
    """Registered-callback lists keyed by event type."""

    def __init__(self) -> None:
        self._subscribers: DefaultDict[Type[Any], List[Callback]] = defaultdict(list)

    def subscribe(self, event_type: Type[Any], callback: Callback) -> Callable[[], None]:
        """Register a callback and return a function that unregisters it."""
        self._subscribers[event_type].append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers[event_type]:
                self._subscribers[event_type].remove(callback)

        return unsubscribe

    def publish(self, event: Any) -> None:
        callbacks = list(self._subscribers.get(type(event), ()))
        LOGGER.debug("Publishing %s to %d subscriber(s)", type(event).__name__, len(callbacks))
        for callback in callbacks:
            callback(event)
