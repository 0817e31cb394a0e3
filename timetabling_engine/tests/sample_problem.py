# timetabling_engine/tests/sample_problem.py

"""
Sample timetabling problem shared by the test modules.

The problem has four lecture sections and two labs:

    index 0  CPSC 231 LEC 01          (lab: index 4, not compatible with 3)
    index 1  CPSC 231 LEC 02          (paired with 3)
    index 2  CPSC 433 LEC 01          (lab: index 5, MO 8:00 unwanted, prefers TU 9:30)
    index 3  SENG 300 LEC 01
    index 4  CPSC 231 LEC 01 TUT 01
    index 5  CPSC 433 LEC 01 LAB 01
"""

from timetabling_engine.core.problem_model import ProblemContext

CPSC_231_01 = ("CPSC", "231", "LEC", "01")
CPSC_231_02 = ("CPSC", "231", "LEC", "02")
CPSC_433_01 = ("CPSC", "433", "LEC", "01")
SENG_300_01 = ("SENG", "300", "LEC", "01")
CPSC_231_01_TUT = ("CPSC", "231", "LEC", "01", "TUT", "01")
CPSC_433_01_LAB = ("CPSC", "433", "LEC", "01", "LAB", "01")


def build_sample_context(**overrides) -> ProblemContext:
    """Build the sample problem, replacing any of the raw inputs given"""
    data = dict(
        courses=[CPSC_231_01, CPSC_231_02, CPSC_433_01, SENG_300_01],
        labs=[CPSC_231_01_TUT, CPSC_433_01_LAB],
        course_slots=[
            ("MO", "8:00", 3, 1),
            ("MO", "9:00", 3, 0),
            ("TU", "9:30", 2, 1),
            ("TU", "12:30", 2),
        ],
        lab_slots=[
            ("MO", "8:00", 2, 1),
            ("TU", "10:00", 2),
            ("FR", "10:00", 2),
        ],
        not_compatible=[(CPSC_231_01, SENG_300_01)],
        unwanted=[(CPSC_433_01, "MO", "8:00")],
        preferences=[("TU", "9:30", CPSC_433_01, 10)],
        pairs=[(CPSC_231_02, SENG_300_01)],
    )
    data.update(overrides)
    return ProblemContext.build(**data)
