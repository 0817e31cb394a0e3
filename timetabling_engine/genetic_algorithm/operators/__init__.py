# timetabling_engine/genetic_algorithm/operators/__init__.py

"""
Genetic operators of the set-based search.

Crossover itself is the parent-guided mode of the or-tree search
(``timetabling_engine.search.OrTreeSearch.crossover``); this package holds
the parent selection.
"""

from .selection import RouletteSelector

__all__ = ["RouletteSelector"]
