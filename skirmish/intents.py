"""
Player intents delivered by the input layer.

Input sources push intents onto a queue; the simulator drains it once per
update tick, so it never depends on any particular event loop.
"""

from collections import deque
from dataclasses import dataclass
from typing import Union


@dataclass(frozen=True)
class TileSelected:
    row: int
    col: int


@dataclass(frozen=True)
class EntityTapped:
    entity_id: str


Intent = Union[TileSelected, EntityTapped]


class IntentQueue:
    """FIFO of pending player intents."""

    def __init__(self):
        self._pending: deque[Intent] = deque()

    def select_tile(self, row: int, col: int):
        self._pending.append(TileSelected(row, col))

    def tap_entity(self, entity_id: str):
        self._pending.append(EntityTapped(entity_id))

    def push(self, intent: Intent):
        self._pending.append(intent)

    def drain(self) -> list[Intent]:
        """Remove and return everything queued, oldest first."""
        intents = list(self._pending)
        self._pending.clear()
        return intents

    def __len__(self) -> int:
        return len(self._pending)
