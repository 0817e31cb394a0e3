# timetabling_engine/search/frontier.py

"""
Node storage for one or-tree search episode.

Nodes live in a ``NodeArena`` and are addressed by integer index. The
``Frontier`` holds the indices of the unresolved leaves of the whole episode
and supports constant-time insertion, removal and uniform random picks.
"""

import random
from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional, Tuple

from ..core.problem_model import Slot


class NodeState(Enum):
    UNKNOWN = "unknown"
    SOLVABLE = "solvable"
    DEAD = "dead"


@dataclass
class SearchNode:
    assignment: Tuple[Optional[Slot], ...]
    state: NodeState = NodeState.UNKNOWN


class NodeArena:
    """Index-addressed node store; released slots are reused."""

    def __init__(self):
        self._nodes: List[Optional[SearchNode]] = []
        self._free: List[int] = []

    def add(self, node: SearchNode) -> int:
        if self._free:
            index = self._free.pop()
            self._nodes[index] = node
        else:
            index = len(self._nodes)
            self._nodes.append(node)
        return index

    def get(self, index: int) -> SearchNode:
        node = self._nodes[index]
        if node is None:
            raise KeyError(f"Arena slot {index} has been released")
        return node

    def release(self, index: int) -> None:
        if self._nodes[index] is not None:
            self._nodes[index] = None
            self._free.append(index)

    def clear(self) -> None:
        self._nodes.clear()
        self._free.clear()

    def __len__(self) -> int:
        return len(self._nodes) - len(self._free)


class Frontier:
    """Unresolved leaf nodes of a search episode, capped at ``max_size``."""

    def __init__(self, max_size: int):
        self.max_size = max_size
        self._items: List[int] = []
        self._positions: Dict[int, int] = {}
        self.peak_size = 0

    def add(self, node_index: int) -> None:
        if node_index in self._positions:
            return
        self._positions[node_index] = len(self._items)
        self._items.append(node_index)
        self.peak_size = max(self.peak_size, len(self._items))

    def discard(self, node_index: int) -> None:
        position = self._positions.pop(node_index, None)
        if position is None:
            return
        last = self._items.pop()
        if last != node_index:
            self._items[position] = last
            self._positions[last] = position

    def random_pick(self, rng: random.Random) -> int:
        if not self._items:
            raise IndexError("random_pick from an empty frontier")
        return self._items[rng.randrange(len(self._items))]

    def reset(self, root_index: int) -> None:
        """Drop every member; the fresh root becomes the only one."""
        self._items.clear()
        self._positions.clear()
        self.add(root_index)

    @property
    def overflowed(self) -> bool:
        return len(self._items) > self.max_size

    def __contains__(self, node_index: int) -> bool:
        return node_index in self._positions

    def __len__(self) -> int:
        return len(self._items)

    def __bool__(self) -> bool:
        return bool(self._items)
