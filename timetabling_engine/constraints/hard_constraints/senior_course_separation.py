# timetabling_engine/constraints/hard_constraints/senior_course_separation.py

"""
500-Level Separation Hard Rule

All 500-level sections must be scheduled into different slots. Lectures and
labs are checked separately.
"""

from typing import Dict, Optional
import logging

from ..base_constraint import HardRule, RuleViolation, AssignmentView
from ...core.problem_model import Slot, UNASSIGNED

logger = logging.getLogger(__name__)

SENIOR_LEVEL_PREFIX = "5"


class SeniorCourseSeparationRule(HardRule):
    constraint_id = "SENIOR_COURSE_SEPARATION"
    name = "500-Level Sections in Distinct Slots"

    def __init__(self, context):
        super().__init__(context)
        self.senior_indices = tuple(
            index
            for index, section in enumerate(context.classes)
            if section.number.startswith(SENIOR_LEVEL_PREFIX)
        )

    def find_violation(self, assignment: AssignmentView) -> Optional[RuleViolation]:
        occupied: Dict[Slot, int] = {}
        for index in self.senior_indices:
            slot = assignment[index]
            if slot is UNASSIGNED:
                continue
            if slot in occupied:
                return self.violation(
                    (occupied[slot], index),
                    f"500-level sections {self.context.class_at(occupied[slot]).name} "
                    f"and {self.context.class_at(index).name} share {slot!r}",
                )
            occupied[slot] = index
        return None
