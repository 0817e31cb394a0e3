# timetabling_engine/constraints/soft_constraints/minimum_fill.py

"""
Minimum Fill Soft Rule

Each slot with a minimum below which it should not fall costs pen_course_min
(course slots) or pen_lab_min (lab slots) when it holds fewer classes.
"""

from typing import Dict
from collections import Counter

from ..base_constraint import SoftRule, AssignmentView
from ...core.problem_model import Slot, UNASSIGNED


class MinimumFillRule(SoftRule):
    constraint_id = "MINIMUM_FILL"
    name = "Slots Reach Their Minimum"
    weight_key = "w_min_filled"

    def penalty(self, assignment: AssignmentView) -> int:
        counts: Dict[Slot, int] = Counter(
            slot for slot in assignment if slot is not UNASSIGNED
        )
        total = 0
        for slot in self.context.course_slots:
            if slot.min_fill is not None and counts[slot] < slot.min_fill:
                total += self.weights.pen_course_min
        for slot in self.context.lab_slots:
            if slot.min_fill is not None and counts[slot] < slot.min_fill:
                total += self.weights.pen_lab_min
        return total
