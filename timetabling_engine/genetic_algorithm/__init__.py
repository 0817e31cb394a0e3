# timetabling_engine/genetic_algorithm/__init__.py
"""
Initializes the set-based search module.

A population of feasible timetables is refined cycle by cycle: the worst
individuals are pruned once the population is over its maximum, otherwise two
roulette-selected parents are blended by the or-tree crossover.

Key components:
- PopulationController: owns the population and runs the control cycles.
- RouletteSelector: fitness-proportionate parent selection.
"""

from .population import PopulationController, CycleReport
from .operators.selection import RouletteSelector

__all__ = ["PopulationController", "CycleReport", "RouletteSelector"]
