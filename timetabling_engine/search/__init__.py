# timetabling_engine/search/__init__.py

"""Or-tree search: cold-start construction and parent-guided crossover."""

from .frontier import Frontier, NodeArena, NodeState, SearchNode
from .or_tree import OrTreeSearch, DEAD_SCORE

__all__ = [
    "Frontier",
    "NodeArena",
    "NodeState",
    "SearchNode",
    "OrTreeSearch",
    "DEAD_SCORE",
]
