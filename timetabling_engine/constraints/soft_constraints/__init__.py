# timetabling_engine/constraints/soft_constraints/__init__.py

from .minimum_fill import MinimumFillRule
from .preference_slots import PreferenceSlotsRule
from .paired_classes import PairedClassesRule
from .section_spread import SectionSpreadRule

# Define package exports
__all__ = [
    "MinimumFillRule",
    "PreferenceSlotsRule",
    "PairedClassesRule",
    "SectionSpreadRule",
]
