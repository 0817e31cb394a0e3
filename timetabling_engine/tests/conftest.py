# timetabling_engine/tests/conftest.py

"""
Pytest configuration and fixtures for timetabling engine tests.
"""

import random
import logging

import pytest

from timetabling_engine.config import PenaltyWeights, SearchConfig
from timetabling_engine.constraints import SectionConstraintOracle, PenaltyFitnessOracle
from timetabling_engine.search.or_tree import OrTreeSearch
from timetabling_engine.tests.sample_problem import build_sample_context

# Configure logging for tests
logging.basicConfig(
    level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)


@pytest.fixture
def sample_context():
    """The six-class problem of timetabling_engine.tests.sample_problem"""
    return build_sample_context()


@pytest.fixture
def constraint_oracle(sample_context):
    return SectionConstraintOracle(sample_context)


@pytest.fixture
def fitness_oracle(sample_context):
    return PenaltyFitnessOracle(sample_context, PenaltyWeights())


@pytest.fixture
def or_tree(sample_context, constraint_oracle):
    return OrTreeSearch(sample_context, constraint_oracle, SearchConfig())


@pytest.fixture
def feasible_assignment(sample_context):
    """
    A complete feasible timetable of the sample problem.

    Soft penalties with unit weights: lab slot MO 8:00 stays below its
    minimum (1) and the paired sections 1 and 3 are apart (1).
    """
    mo8, mo9, tu930, tu1230 = sample_context.course_slots
    lab_tu10, lab_fr10 = sample_context.lab_slots[1], sample_context.lab_slots[2]
    return (mo9, tu1230, tu930, mo8, lab_tu10, lab_fr10)


@pytest.fixture
def alternative_assignment(sample_context):
    """A second feasible timetable differing from the first at indices 1 and 4"""
    mo8, mo9, tu930, tu1230 = sample_context.course_slots
    lab_fr10 = sample_context.lab_slots[2]
    return (mo9, mo9, tu930, mo8, lab_fr10, lab_fr10)


@pytest.fixture
def rng():
    return random.Random(1234)


class StubFitnessOracle:
    """Fitness looked up from a table keyed by assignment"""

    def __init__(self, table, default=0):
        self.table = dict(table)
        self.default = default
        self.calls = 0

    def fitness(self, assignment):
        self.calls += 1
        return self.table.get(assignment, self.default)


@pytest.fixture
def stub_fitness_factory():
    return StubFitnessOracle
