# timetabling_engine/constraints/soft_constraints/section_spread.py

"""
Section Spread Soft Rule

Lecture sections of the same course should be at different times. Every
extra section sharing a day and time with another costs pen_section.
"""

from typing import Dict, Tuple
from collections import Counter

from ..base_constraint import SoftRule, AssignmentView
from ...core.problem_model import UNASSIGNED


class SectionSpreadRule(SoftRule):
    constraint_id = "SECTION_SPREAD"
    name = "Course Sections Spread Out"
    weight_key = "w_sec_diff"

    def penalty(self, assignment: AssignmentView) -> int:
        counts: Dict[Tuple[str, str, str, str], int] = Counter()
        for index in range(self.context.num_courses):
            slot = assignment[index]
            if slot is UNASSIGNED:
                continue
            section = self.context.courses[index]
            counts[(section.department, section.number, slot.day, slot.time)] += 1
        return sum(
            (count - 1) * self.weights.pen_section
            for count in counts.values()
            if count > 1
        )
