# timetabling_engine/genetic_algorithm/population.py

"""
Population controller for the set-based search.

The population is a bounded multiset of complete feasible assignments. Fitness
is never cached on an individual; it is re-evaluated through the fitness
oracle whenever a cycle needs it. Each control cycle does exactly one thing:
it either prunes the worst individuals or tries to add one crossover child.
Per-cycle fitness statistics are compiled with DEAP and kept in a logbook.
"""

import heapq
import logging
import random
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional, Sequence, Tuple

import numpy as np
from deap import tools

from ..config import CycleAction, PopulationConfig
from ..core.oracles import FitnessOracle
from ..core.problem_model import ProblemContext, Slot
from ..core.solution import Assignment, PopulationStatistics
from ..search.or_tree import OrTreeSearch
from .operators.selection import RouletteSelector

logger = logging.getLogger(__name__)


@dataclass
class CycleReport:
    """Outcome of one control cycle"""

    generation: int
    action: CycleAction
    removed: List[Assignment] = field(default_factory=list)
    added: Optional[Assignment] = None
    statistics: Optional[PopulationStatistics] = None

    @property
    def changed(self) -> bool:
        return bool(self.removed) or self.added is not None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "generation": self.generation,
            "action": self.action.value,
            "removed": len(self.removed),
            "added": self.added is not None,
            "statistics": self.statistics.to_dict() if self.statistics else None,
        }


class PopulationController:
    """Owns the population and runs reduce / crossover cycles on it."""

    def __init__(
        self,
        context: ProblemContext,
        search: OrTreeSearch,
        fitness_oracle: FitnessOracle,
        config: Optional[PopulationConfig] = None,
        rng: Optional[random.Random] = None,
    ):
        self.context = context
        self.search = search
        self.fitness_oracle = fitness_oracle
        self.config = config or PopulationConfig()
        self.rng = rng or random.Random()
        self.individuals: List[Assignment] = []
        self.generation = 0

        self.stats = tools.Statistics(key=self.fitness_oracle.fitness)
        self.stats.register("min", np.min)
        self.stats.register("max", np.max)
        self.stats.register("avg", np.mean)
        self.logbook = tools.Logbook()
        self.logbook.header = ["gen", "action", "size", "removed", "added", "min", "avg", "max"]

    def __len__(self) -> int:
        return len(self.individuals)

    def __iter__(self) -> Iterator[Assignment]:
        return iter(self.individuals)

    def add(self, individual: Sequence[Optional[Slot]]) -> None:
        self.context.check_assignment_shape(individual)
        self.individuals.append(tuple(individual))

    def extend(self, individuals: Sequence[Sequence[Optional[Slot]]]) -> None:
        for individual in individuals:
            self.add(individual)

    def control(self) -> CycleReport:
        """Run one cycle: reduce when over the maximum, otherwise crossover."""
        self.generation += 1
        if len(self.individuals) > self.config.max_population:
            report = CycleReport(self.generation, CycleAction.REDUCE, removed=self.reduce())
        else:
            report = CycleReport(self.generation, CycleAction.CROSSOVER, added=self.crossover())

        record = self._compile()
        report.statistics = self._to_statistics(record)
        self.logbook.record(
            gen=self.generation,
            action=report.action.value,
            size=len(self.individuals),
            removed=len(report.removed),
            added=int(report.added is not None),
            **record,
        )
        logger.debug(
            f"Cycle {self.generation}: {report.action.value}, "
            f"population {len(self.individuals)}, best {record.get('min')}"
        )
        return report

    def reduce(self) -> List[Assignment]:
        """
        Remove the ``num_remove`` individuals with the highest fitness, always
        keeping at least one individual.

        Keeps a min-heap of at most ``num_remove`` entries while scanning the
        population, so the worst are found without sorting everything. Among
        equal fitness the earlier individual is removed first.
        """
        k = min(self.config.num_remove, len(self.individuals) - 1)
        if k <= 0:
            return []

        worst: List[Tuple[int, int]] = []
        for position, individual in enumerate(self.individuals):
            entry = (self.fitness_oracle.fitness(individual), -position)
            if len(worst) < k:
                heapq.heappush(worst, entry)
            elif entry > worst[0]:
                heapq.heapreplace(worst, entry)

        doomed = {-negated for _, negated in worst}
        removed = [ind for i, ind in enumerate(self.individuals) if i in doomed]
        self.individuals = [ind for i, ind in enumerate(self.individuals) if i not in doomed]
        logger.debug(
            f"Reduced population by {len(removed)} "
            f"(fitness {sorted(f for f, _ in worst)})"
        )
        return removed

    def crossover(self) -> Optional[Assignment]:
        """
        Breed one child from two distinct roulette-selected parents.

        Returns the child when it was added; None when no parents could be
        drawn or the guided search failed.
        """
        if len(self.individuals) < 2:
            logger.debug("Crossover skipped: fewer than two individuals")
            return None

        parents = self._select_parents()
        if parents is None:
            logger.debug("Crossover skipped: no distinct parents selected")
            return None

        first, second = parents
        result = self.search.crossover(self.individuals[first], self.individuals[second], self.rng)
        if not result.succeeded:
            logger.debug(f"Crossover of {first} and {second} failed: {result.reason}")
            return None

        self.individuals.append(result.assignment)
        return result.assignment

    def _select_parents(self) -> Optional[Tuple[int, int]]:
        selector = RouletteSelector(self.individuals, self.fitness_oracle, self.rng)
        first: Optional[int] = None
        for _ in range(self.search.config.selection_attempts):
            if first is None:
                first = selector.select()
                if first is None:
                    continue
            second = selector.select(exclude=first)
            if second is not None:
                return first, second
        return None

    def statistics(self) -> PopulationStatistics:
        return self._to_statistics(self._compile())

    def best(self) -> Optional[Assignment]:
        """Individual with the lowest fitness; the earliest on ties."""
        if not self.individuals:
            return None
        return min(self.individuals, key=self.fitness_oracle.fitness)

    def _compile(self) -> Dict[str, float]:
        if not self.individuals:
            return {}
        return self.stats.compile(self.individuals)

    def _to_statistics(self, record: Dict[str, float]) -> PopulationStatistics:
        nan = float("nan")
        return PopulationStatistics(
            size=len(self.individuals),
            min_fitness=float(record.get("min", nan)),
            max_fitness=float(record.get("max", nan)),
            mean_fitness=float(record.get("avg", nan)),
        )
