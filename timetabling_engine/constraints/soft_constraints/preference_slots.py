# timetabling_engine/constraints/soft_constraints/preference_slots.py

"""
Preference Slots Soft Rule

Instructors rank slots for their classes. A class not placed in a preferred
slot costs that preference's value. Preferences naming a slot that does not
exist for the class's kind are ignored.
"""

from typing import List
import logging

from ..base_constraint import SoftRule, AssignmentView
from ...core.problem_model import Preference, UNASSIGNED

logger = logging.getLogger(__name__)


class PreferenceSlotsRule(SoftRule):
    constraint_id = "PREFERENCE_SLOTS"
    name = "Preferred Slots"
    weight_key = "w_pref"

    def __init__(self, context, weights):
        super().__init__(context, weights)
        self.active_preferences: List[Preference] = []
        for preference in context.preferences:
            day_times = {s.day_time for s in context.slots_for(preference.class_index)}
            if (preference.day, preference.time) in day_times:
                self.active_preferences.append(preference)
            else:
                logger.debug(
                    f"Preference of {context.class_at(preference.class_index).name} "
                    f"for {preference.day} {preference.time} names no slot, ignored"
                )

    def penalty(self, assignment: AssignmentView) -> int:
        total = 0
        for preference in self.active_preferences:
            slot = assignment[preference.class_index]
            if slot is UNASSIGNED or slot.day_time != (preference.day, preference.time):
                total += preference.value
        return total
