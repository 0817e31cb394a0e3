# timetabling_engine/constraints/soft_constraints/paired_classes.py

"""
Paired Classes Soft Rule

Each pair(a, b) whose classes are both placed but not at the same day and
time costs pen_not_paired.
"""

from ..base_constraint import SoftRule, AssignmentView
from ...core.problem_model import UNASSIGNED


class PairedClassesRule(SoftRule):
    constraint_id = "PAIRED_CLASSES"
    name = "Paired Classes Together"
    weight_key = "w_pair"

    def penalty(self, assignment: AssignmentView) -> int:
        total = 0
        for first, second in self.context.pairs:
            slot_a = assignment[first]
            slot_b = assignment[second]
            if slot_a is UNASSIGNED or slot_b is UNASSIGNED:
                continue
            if slot_a.day_time != slot_b.day_time:
                total += self.weights.pen_not_paired
        return total
