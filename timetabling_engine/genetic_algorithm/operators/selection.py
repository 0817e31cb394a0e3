# timetabling_engine/genetic_algorithm/operators/selection.py

"""
Fitness-proportionate (roulette wheel) parent selection.

The wheel is built from the fitness of every individual at construction time,
so a selector is meant for one selection round: build a new one whenever the
population has changed.
"""

import random
import logging
from typing import Optional, Sequence

import numpy as np

from ...core.oracles import FitnessOracle
from ...core.solution import Assignment

logger = logging.getLogger(__name__)


class RouletteSelector:
    """
    Roulette wheel over a population.

    Individual ``i`` owns the share ``fitness_i / total`` of the wheel. When
    the total is 0 the divisor is 1, so every share is 0 and draws above 0
    find no individual.
    """

    def __init__(
        self,
        population: Sequence[Assignment],
        fitness_oracle: FitnessOracle,
        rng: random.Random,
    ):
        if len(population) == 0:
            raise ValueError("Cannot select from an empty population")

        self.rng = rng
        self.fitness = np.array(
            [fitness_oracle.fitness(individual) for individual in population],
            dtype=float,
        )
        total = float(self.fitness.sum())
        self.total_fitness = total
        self.cumulative = np.cumsum(self.fitness / (total if total != 0 else 1.0))
        if total != 0:
            # Guard against rounding leaving the last edge just below 1
            self.cumulative[-1] = 1.0

    @property
    def shares(self) -> np.ndarray:
        return np.diff(self.cumulative, prepend=0.0)

    def select(self, exclude: Optional[int] = None) -> Optional[int]:
        """
        Spin the wheel once.

        Returns the first index whose cumulative share reaches the draw,
        skipping ``exclude``; None when no index qualifies.
        """
        draw = self.rng.random()
        for index in np.flatnonzero(self.cumulative >= draw):
            if index != exclude:
                return int(index)
        logger.debug(f"No individual selected for draw {draw:.4f} (excluded {exclude})")
        return None
