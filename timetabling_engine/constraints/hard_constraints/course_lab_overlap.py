# timetabling_engine/constraints/hard_constraints/course_lab_overlap.py

"""
Course/Lab Overlap Hard Rule

A lecture and any lab of that lecture must not run at the same time. Slots
are named by their first meeting day; a lecture slot on MO also meets WE and
FR, a lecture slot on TU also meets TH, and lab slots on FR run two hours.
"""

from typing import List, Optional, Tuple
import logging

from ..base_constraint import HardRule, RuleViolation, AssignmentView
from ...core.problem_model import Slot, SlotKind, UNASSIGNED

logger = logging.getLogger(__name__)

# (kind, slot day) -> (meeting days, duration in minutes)
MEETING_PATTERNS = {
    (SlotKind.COURSE, "MO"): (("MO", "WE", "FR"), 60),
    (SlotKind.COURSE, "TU"): (("TU", "TH"), 90),
    (SlotKind.LAB, "MO"): (("MO", "WE"), 60),
    (SlotKind.LAB, "TU"): (("TU", "TH"), 60),
    (SlotKind.LAB, "FR"): (("FR",), 120),
}
DEFAULT_DURATION = 60


def occupied_intervals(slot: Slot) -> List[Tuple[str, int, int]]:
    """(day, start minute, end minute) for every meeting of the slot."""
    days, duration = MEETING_PATTERNS.get(
        (slot.kind, slot.day), ((slot.day,), DEFAULT_DURATION)
    )
    start = slot.start_minutes
    return [(day, start, start + duration) for day in days]


def slots_overlap(first: Slot, second: Slot) -> bool:
    for day_a, start_a, end_a in occupied_intervals(first):
        for day_b, start_b, end_b in occupied_intervals(second):
            if day_a == day_b and start_a < end_b and start_b < end_a:
                return True
    return False


class CourseLabOverlapRule(HardRule):
    constraint_id = "COURSE_LAB_OVERLAP"
    name = "Lecture and Lab Do Not Overlap"

    def find_violation(self, assignment: AssignmentView) -> Optional[RuleViolation]:
        for course_index in range(self.context.num_courses):
            course_slot = assignment[course_index]
            if course_slot is UNASSIGNED:
                continue
            for lab_index in self.context.lab_sections[course_index]:
                lab_slot = assignment[lab_index]
                if lab_slot is UNASSIGNED:
                    continue
                if slots_overlap(course_slot, lab_slot):
                    return self.violation(
                        (course_index, lab_index),
                        f"{self.context.class_at(course_index).name} at {course_slot!r} "
                        f"overlaps its lab {self.context.class_at(lab_index).name} "
                        f"at {lab_slot!r}",
                    )
        return None
