# timetabling_engine/constraints/hard_constraints/slot_capacity.py

"""
Slot Capacity Hard Rule

No more than coursemax(s) courses may be assigned to course slot s, and no
more than labmax(s) labs to lab slot s.
"""

from typing import Dict, Optional
from collections import defaultdict
import logging

from ..base_constraint import HardRule, RuleViolation, AssignmentView
from ...core.problem_model import Slot, UNASSIGNED

logger = logging.getLogger(__name__)


class SlotCapacityRule(HardRule):
    constraint_id = "SLOT_CAPACITY"
    name = "Slot Maximum Capacity"

    def find_violation(self, assignment: AssignmentView) -> Optional[RuleViolation]:
        counts: Dict[Slot, int] = defaultdict(int)
        for index, slot in enumerate(assignment):
            if slot is UNASSIGNED:
                continue
            counts[slot] += 1
            if counts[slot] > slot.max_capacity:
                return self.violation(
                    (index,),
                    f"{slot!r} holds {counts[slot]} classes, max is {slot.max_capacity}",
                )
        return None
