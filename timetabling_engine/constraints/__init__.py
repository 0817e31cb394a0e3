# timetabling_engine/constraints/__init__.py

"""
This package contains the hard and soft timetabling rules and the oracles
that combine them for the search.
"""

from .base_constraint import HardRule, SoftRule, RuleViolation
from .constraint_manager import SectionConstraintOracle, PenaltyFitnessOracle
from .hard_constraints import *
from .soft_constraints import *
