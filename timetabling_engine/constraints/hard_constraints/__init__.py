# timetabling_engine/constraints/hard_constraints/__init__.py

from .slot_capacity import SlotCapacityRule
from .course_lab_overlap import CourseLabOverlapRule, slots_overlap, occupied_intervals
from .not_compatible import NotCompatibleRule
from .partial_assignment import PartialAssignmentRule
from .unwanted_slot import UnwantedSlotRule
from .evening_sections import EveningSectionRule
from .senior_course_separation import SeniorCourseSeparationRule
from .full_assignment import FullAssignmentRule

__all__ = [
    "SlotCapacityRule",
    "CourseLabOverlapRule",
    "NotCompatibleRule",
    "PartialAssignmentRule",
    "UnwantedSlotRule",
    "EveningSectionRule",
    "SeniorCourseSeparationRule",
    "FullAssignmentRule",
    "slots_overlap",
    "occupied_intervals",
]
