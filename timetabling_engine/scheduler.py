# timetabling_engine/scheduler.py

"""
Timetable scheduler - orchestrates one scheduling run.

The run seeds a population with cold-start or-tree searches, then refines it
with population control cycles until the generation limit is hit, the best
fitness has been stable for long enough, or the time budget runs out. The
caller receives the final population and its best member.
"""

from typing import Dict, List, Optional, Any, Callable
from dataclasses import dataclass, field
import random
import time

from deap import tools

from .config import get_logger, SchedulingEngineConfig
from .core.problem_model import ProblemContext
from .core.oracles import ConstraintOracle, FitnessOracle, MAX_FITNESS
from .core.solution import Assignment, assignment_to_dict, unique_assignments
from .search.or_tree import OrTreeSearch
from .genetic_algorithm.population import PopulationController, CycleReport
from .utils.logging import RunLogger, RunPhase, CycleMetrics
from .utils.watchdog import TimeBudgetWatchdog

logger = get_logger("scheduler")

STOP_MAX_GENERATIONS = "max_generations"
STOP_STABLE = "stable"
STOP_TIME_LIMIT = "time_limit"
STOP_SINGLE_SOLUTION = "single_solution"
STOP_NO_SOLUTION = "no_solution"


@dataclass
class ScheduleResult:
    """Results of one scheduling run"""

    best: Optional[Assignment] = None
    best_fitness: int = MAX_FITNESS
    population: List[Assignment] = field(default_factory=list)
    logbook: Optional[tools.Logbook] = None

    generations_run: int = 0
    seeding_attempts: int = 0
    stop_reason: str = ""
    runtime_seconds: float = 0.0
    operation_timings: Dict[str, Dict[str, float]] = field(default_factory=dict)

    @property
    def found_solution(self) -> bool:
        return self.best is not None

    def to_dict(self, context: Optional[ProblemContext] = None) -> Dict[str, Any]:
        result: Dict[str, Any] = {
            "found_solution": self.found_solution,
            "best_fitness": self.best_fitness if self.found_solution else None,
            "population_size": len(self.population),
            "generations_run": self.generations_run,
            "seeding_attempts": self.seeding_attempts,
            "stop_reason": self.stop_reason,
            "runtime_seconds": self.runtime_seconds,
        }
        if context is not None and self.best is not None:
            result["assignment"] = assignment_to_dict(context, self.best)
        return result


class StabilityTracker:
    """
    Counts generations without a significant improvement of the best fitness.

    An improvement of at most ``threshold``, or no change, adds one to the
    counter; a larger improvement resets it.
    """

    def __init__(self, threshold: int, limit: int):
        self.threshold = threshold
        self.limit = limit
        self.best = MAX_FITNESS
        self.counter = 0

    def update(self, current: float) -> bool:
        """Feed the cycle's best fitness; True once the run is stable."""
        if current < self.best:
            if self.best - current <= self.threshold:
                self.counter += 1
            else:
                self.counter = 0
            self.best = current
        elif current == self.best:
            self.counter += 1
        return self.counter >= self.limit


class TimetableScheduler:
    """
    Runs the seeding phase and the set-based search for one problem.

    The problem context and both oracles are fixed for the scheduler's life;
    each ``run`` builds a fresh population.
    """

    def __init__(
        self,
        context: ProblemContext,
        constraint_oracle: ConstraintOracle,
        fitness_oracle: FitnessOracle,
        config: Optional[SchedulingEngineConfig] = None,
        run_logger: Optional[RunLogger] = None,
    ):
        self.config = config or SchedulingEngineConfig()
        self.config.validate()

        self.context = context
        self.constraint_oracle = constraint_oracle
        self.fitness_oracle = fitness_oracle
        self.search = OrTreeSearch(context, constraint_oracle, self.config.search)
        self.run_logger = run_logger or RunLogger()

        logger.info(
            f"TimetableScheduler initialized for {context.num_classes} classes "
            f"({context.num_courses} courses, {context.num_labs} labs)"
        )

    def seed_population(
        self,
        rng: random.Random,
        watchdog: Optional[TimeBudgetWatchdog] = None,
    ) -> List[Assignment]:
        """
        Build the initial population with independent cold-start searches.

        Exhausted attempts are skipped and duplicate solutions dropped, so the
        result may hold fewer than ``initial_population`` individuals.
        """
        solutions: List[Assignment] = []
        attempts = self.config.population.initial_population
        for attempt in range(1, attempts + 1):
            if watchdog is not None and watchdog.expired:
                logger.warning(f"Seeding stopped by time budget after {attempt - 1} attempts")
                break
            with self.run_logger.timed("cold_start_search"):
                result = self.search.search(rng)
            if result.succeeded:
                solutions.append(result.assignment)
                logger.debug(f"Seed attempt {attempt}: solution found")
            else:
                logger.debug(f"Seed attempt {attempt}: {result.reason}")

        unique = unique_assignments(solutions)
        if len(unique) < len(solutions):
            logger.info(f"Dropped {len(solutions) - len(unique)} duplicate seed solutions")
        return unique

    def run(
        self,
        seed: Optional[int] = None,
        on_cycle: Optional[Callable[[CycleReport], None]] = None,
    ) -> ScheduleResult:
        """
        Seed and refine a population, returning its best member.

        Args:
            seed: Random seed; falls back to the configured seed.
            on_cycle: Called with every cycle's report.
        """
        seed = seed if seed is not None else self.config.seed
        rng = random.Random(seed)
        start_time = time.time()
        result = ScheduleResult()

        controller = PopulationController(
            self.context, self.search, self.fitness_oracle, self.config.population, rng
        )
        result.logbook = controller.logbook

        with TimeBudgetWatchdog(self.config.time_limit_seconds) as watchdog:
            with self.run_logger.phase(
                RunPhase.SEEDING,
                {"initial_population": self.config.population.initial_population},
            ):
                controller.extend(self.seed_population(rng, watchdog))
            result.seeding_attempts = self.config.population.initial_population

            if len(controller) == 0:
                result.stop_reason = STOP_NO_SOLUTION
                logger.warning("No feasible timetable found while seeding")
            elif len(controller) == 1:
                result.stop_reason = STOP_SINGLE_SOLUTION
                logger.info("Only one solution found, skipping the set-based search")
            elif watchdog.expired:
                result.stop_reason = STOP_TIME_LIMIT
            else:
                with self.run_logger.phase(
                    RunPhase.SET_BASED_SEARCH, {"seeded": len(controller)}
                ):
                    self._refine(controller, watchdog, result, on_cycle)

        with self.run_logger.phase(RunPhase.FINALIZATION):
            result.population = list(controller)
            result.best = controller.best()
            if result.best is not None:
                result.best_fitness = self.fitness_oracle.fitness(result.best)
            result.operation_timings = self.run_logger.operation_summary()
            result.runtime_seconds = time.time() - start_time

        logger.info(
            f"Scheduling run finished ({result.stop_reason}): "
            f"{result.generations_run} generations, best fitness "
            f"{result.best_fitness if result.found_solution else 'n/a'}, "
            f"{result.runtime_seconds:.2f}s"
        )
        return result

    def _refine(
        self,
        controller: PopulationController,
        watchdog: TimeBudgetWatchdog,
        result: ScheduleResult,
        on_cycle: Optional[Callable[[CycleReport], None]],
    ) -> None:
        population_config = self.config.population
        stability = StabilityTracker(
            population_config.stable_threshold, population_config.max_stable_generations
        )
        result.stop_reason = STOP_MAX_GENERATIONS

        for _ in range(population_config.max_generations):
            if watchdog.expired:
                result.stop_reason = STOP_TIME_LIMIT
                break

            with self.run_logger.timed("control_cycle"):
                report = controller.control()
            result.generations_run += 1
            statistics = report.statistics

            stable = stability.update(statistics.min_fitness)
            self.run_logger.record_cycle(
                CycleMetrics(
                    generation=report.generation,
                    action=report.action.value,
                    population_size=statistics.size,
                    best_fitness=statistics.min_fitness,
                    mean_fitness=statistics.mean_fitness,
                    worst_fitness=statistics.max_fitness,
                    stable_generations=stability.counter,
                )
            )
            if on_cycle is not None:
                on_cycle(report)

            if stable:
                self.run_logger.record_stable(
                    report.generation, stability.counter, stability.limit
                )
                result.stop_reason = STOP_STABLE
                break
