# timetabling_engine/search/or_tree.py

"""
Randomized or-tree search over class-to-slot assignments.

Two modes share one engine:

* ``search`` (cold start) grows a tree from a possibly partial assignment,
  filling classes most-constrained first. On a dead end it does not backtrack;
  it jumps to a random unresolved leaf anywhere in the episode and carries on
  from there. When the frontier outgrows its cap the episode restarts from the
  original root.
* ``crossover`` walks the classes in index order and builds a child from two
  feasible parents, keeping their consensus and only improvising where the
  parents disagree or would break a hard rule.

Neither mode raises when nothing is found; both return a ``SearchResult``.
Only malformed input raises ``ProblemConfigurationError``.
"""

import sys
import random
import logging
from typing import List, Optional, Sequence

from ..config import SearchConfig
from ..core.problem_model import ProblemContext, Slot, UNASSIGNED
from ..core.oracles import ConstraintOracle
from ..core.solution import (
    Assignment,
    SearchResult,
    SearchStats,
    count_unassigned,
    is_complete,
)
from .frontier import Frontier, NodeArena, NodeState, SearchNode

logger = logging.getLogger(__name__)

# Score of a node that violates a hard rule
DEAD_SCORE = sys.maxsize

SOLVED_SCORE = 0
BOTH_PARENTS_SCORE = 1
ONE_PARENT_SCORE = 2
NO_PARENT_SCORE = 3


class OrTreeSearch:
    """Builds single feasible assignments for one problem context."""

    def __init__(
        self,
        context: ProblemContext,
        constraint_oracle: ConstraintOracle,
        config: Optional[SearchConfig] = None,
    ):
        self.context = context
        self.constraint_oracle = constraint_oracle
        self.config = config or SearchConfig()

    def score(self, assignment: Sequence[Optional[Slot]]) -> int:
        """0 if solved, DEAD_SCORE if dead, else the number of open classes."""
        if is_complete(assignment):
            if self.constraint_oracle.is_fully_feasible(assignment):
                return SOLVED_SCORE
            return DEAD_SCORE
        if not self.constraint_oracle.is_partially_feasible(assignment):
            return DEAD_SCORE
        return count_unassigned(assignment)

    def joint_score(
        self,
        child: Sequence[Optional[Slot]],
        parent1: Sequence[Optional[Slot]],
        parent2: Sequence[Optional[Slot]],
        index: int,
    ) -> int:
        """Score the child's entry at ``index`` against both parents."""
        if is_complete(child) and self.constraint_oracle.is_fully_feasible(child):
            return SOLVED_SCORE
        if not self.constraint_oracle.is_partially_feasible(child):
            return DEAD_SCORE
        value = child[index]
        matches = (value == parent1[index]) + (value == parent2[index])
        if matches == 2:
            return BOTH_PARENTS_SCORE
        if matches == 1:
            return ONE_PARENT_SCORE
        return NO_PARENT_SCORE

    def altern(self, assignment: Sequence[Optional[Slot]], class_index: int) -> List[Assignment]:
        """Children of ``assignment`` giving ``class_index`` each viable slot."""
        children = []
        for slot in self.context.slots_for(class_index):
            candidate = list(assignment)
            candidate[class_index] = slot
            if self.constraint_oracle.is_partially_feasible(candidate):
                children.append(tuple(candidate))
        return children

    def search(
        self,
        rng: random.Random,
        initial: Optional[Sequence[Optional[Slot]]] = None,
    ) -> SearchResult:
        """
        Cold-start search for one complete feasible assignment.

        Args:
            rng: Source of randomness for child choice and frontier jumps.
            initial: Start assignment; the context's partial assignments when
                omitted.

        Returns:
            SearchResult with SUCCESS and the assignment, or EXHAUSTED.
        """
        start = tuple(initial) if initial is not None else self.context.initial_assignment
        self.context.check_assignment_shape(start)

        stats = SearchStats()
        try:
            result = self._search_from(start, rng, stats)
        except (RecursionError, MemoryError) as e:
            logger.error(f"Cold-start search aborted: {type(e).__name__}: {e}")
            return SearchResult.exhausted(stats, reason=type(e).__name__)

        if result.succeeded:
            logger.debug(
                f"Cold-start search succeeded after {stats.expansions} expansions, "
                f"{stats.frontier_jumps} jumps, {stats.frontier_resets} resets"
            )
        else:
            logger.warning(f"Cold-start search exhausted: {result.reason}")
        return result

    def _search_from(
        self, start: Assignment, rng: random.Random, stats: SearchStats
    ) -> SearchResult:
        order = self.context.priority_order
        arena = NodeArena()
        frontier = Frontier(self.config.max_frontier_size)

        current = arena.add(SearchNode(start))
        frontier.add(current)
        depth = 0

        while True:
            if frontier.overflowed:
                if stats.frontier_resets >= self.config.max_frontier_resets:
                    stats.peak_frontier_size = max(stats.peak_frontier_size, frontier.peak_size)
                    return SearchResult.exhausted(
                        stats,
                        reason=f"frontier reset limit ({self.config.max_frontier_resets}) reached",
                    )
                stats.frontier_resets += 1
                stats.peak_frontier_size = max(stats.peak_frontier_size, frontier.peak_size)
                logger.debug(
                    f"Frontier exceeded {frontier.max_size} nodes, "
                    f"restarting from the root (reset #{stats.frontier_resets})"
                )
                arena.clear()
                current = arena.add(SearchNode(start))
                frontier = Frontier(self.config.max_frontier_size)
                frontier.reset(current)
                depth = 0

            node = arena.get(current)
            node_score = self.score(node.assignment)

            if node_score == SOLVED_SCORE:
                node.state = NodeState.SOLVABLE
                stats.peak_frontier_size = max(stats.peak_frontier_size, frontier.peak_size)
                return SearchResult.success(node.assignment, stats)

            if node_score != DEAD_SCORE:
                # Incomplete node, so an open class is reached within one lap
                class_index = order[depth % len(order)]
                while node.assignment[class_index] is not UNASSIGNED:
                    depth += 1
                    class_index = order[depth % len(order)]

                children = self.altern(node.assignment, class_index)
                stats.expansions += 1
                frontier.discard(current)
                arena.release(current)
                child_indices = [arena.add(SearchNode(child)) for child in children]
                for child_index in child_indices:
                    frontier.add(child_index)

                if child_indices:
                    current = rng.choice(child_indices)
                    depth += 1
                    continue
            else:
                frontier.discard(current)
                arena.release(current)

            # Dead end: continue from a random open node elsewhere in the tree
            node.state = NodeState.DEAD
            stats.dead_ends += 1
            if not frontier:
                stats.peak_frontier_size = max(stats.peak_frontier_size, frontier.peak_size)
                return SearchResult.exhausted(stats, reason="frontier emptied")
            current = frontier.random_pick(rng)
            stats.frontier_jumps += 1
            depth = 0

    def crossover(
        self,
        parent1: Sequence[Optional[Slot]],
        parent2: Sequence[Optional[Slot]],
        rng: random.Random,
        child: Optional[Sequence[Optional[Slot]]] = None,
    ) -> SearchResult:
        """
        Parent-guided search for one child of two feasible assignments.

        Free entries are decided in index order. Where both parents agree and
        the shared value keeps the child feasible the child inherits it; where
        they disagree a feasible parent value is chosen at random; where
        neither parent value is feasible the entry is drawn from the viable
        alternatives, and the attempt fails if there are none.
        """
        for assignment in (parent1, parent2):
            self.context.check_assignment_shape(assignment)
        start = list(child) if child is not None else list(self.context.initial_assignment)
        self.context.check_assignment_shape(start)

        stats = SearchStats()
        try:
            working: Optional[List[Optional[Slot]]] = start
            for index in range(len(start)):
                if working[index] is not UNASSIGNED:
                    continue
                working = self._combine_traits(working, index, parent1, parent2, rng, stats)
                if working is None:
                    name = self.context.class_at(index).name
                    logger.debug(f"Crossover failed: no viable slot for {name}")
                    return SearchResult.exhausted(stats, reason=f"no viable slot for {name}")
        except (RecursionError, MemoryError) as e:
            logger.error(f"Crossover aborted: {type(e).__name__}: {e}")
            return SearchResult.exhausted(stats, reason=type(e).__name__)

        if not self.constraint_oracle.is_fully_feasible(working):
            return SearchResult.exhausted(stats, reason="child is not fully feasible")
        return SearchResult.success(working, stats)

    def _combine_traits(
        self,
        working: List[Optional[Slot]],
        index: int,
        parent1: Sequence[Optional[Slot]],
        parent2: Sequence[Optional[Slot]],
        rng: random.Random,
        stats: SearchStats,
    ) -> Optional[List[Optional[Slot]]]:
        working[index] = parent1[index]
        first = self.joint_score(working, parent1, parent2, index)
        if first in (SOLVED_SCORE, BOTH_PARENTS_SCORE):
            return working

        working[index] = parent2[index]
        second = self.joint_score(working, parent1, parent2, index)
        if second in (SOLVED_SCORE, BOTH_PARENTS_SCORE):
            return working

        if first < DEAD_SCORE and second < DEAD_SCORE:
            working[index] = rng.choice((parent1[index], parent2[index]))
            return working
        if first < DEAD_SCORE:
            working[index] = parent1[index]
            return working
        if second < DEAD_SCORE:
            return working

        working[index] = UNASSIGNED
        alternatives = self.altern(working, index)
        stats.alternatives_used += 1
        stats.expansions += 1
        if not alternatives:
            return None
        return list(rng.choice(alternatives))
