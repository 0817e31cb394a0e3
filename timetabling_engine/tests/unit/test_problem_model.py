# timetabling_engine/tests/unit/test_problem_model.py

"""
Tests for ProblemContext construction and the problem entities.

Tests cover:
- Slot and ClassSection derived properties
- Context assembly, class indexing and lab association
- Priority order computation
- Department rules applied to every instance
- Rejection of malformed problem data
"""

import pytest

from timetabling_engine.core.problem_model import (
    ProblemContext,
    Slot,
    SlotKind,
    ClassSection,
    UNASSIGNED,
    EVENING_PRIORITY_BONUS,
)
from timetabling_engine.exceptions import ProblemConfigurationError
from timetabling_engine.tests.sample_problem import (
    build_sample_context,
    CPSC_231_01,
    CPSC_231_02,
    CPSC_433_01,
    SENG_300_01,
)


class TestProblemModelEntities:
    """Tests for individual entity classes"""

    def test_slot_time_properties(self):
        """Test Slot hour, minutes and evening detection"""
        morning = Slot(SlotKind.COURSE, "TU", "9:30", 2)
        evening = Slot(SlotKind.COURSE, "MO", "18:00", 2, 1)

        assert morning.hour == 9
        assert morning.start_minutes == 570
        assert morning.is_evening is False
        assert evening.is_evening is True
        assert morning.day_time == ("TU", "9:30")

    def test_slot_kinds_are_distinct(self):
        """Test a course slot and a lab slot at the same time are different slots"""
        course_slot = Slot(SlotKind.COURSE, "MO", "8:00", 2)
        lab_slot = Slot(SlotKind.LAB, "MO", "8:00", 2)

        assert course_slot != lab_slot
        assert course_slot.day_time == lab_slot.day_time

    def test_slot_to_dict(self):
        slot = Slot(SlotKind.LAB, "FR", "10:00", 2, 1)

        assert slot.to_dict() == {
            "kind": "lab",
            "day": "FR",
            "time": "10:00",
            "max_capacity": 2,
            "min_fill": 1,
        }

    def test_class_section_properties(self):
        """Test ClassSection naming and evening detection"""
        day_section = ClassSection(("CPSC", "433", "LEC", "01"), SlotKind.COURSE)
        evening_section = ClassSection(("CPSC", "433", "LEC", "91"), SlotKind.COURSE)
        open_tutorial = ClassSection(("CPSC", "433", "TUT", "01"), SlotKind.LAB)

        assert day_section.name == "CPSC 433 LEC 01"
        assert day_section.department == "CPSC"
        assert day_section.number == "433"
        assert day_section.is_evening is False
        assert evening_section.is_evening is True
        assert open_tutorial.is_evening is False


class TestProblemContextBuild:
    """Tests for assembling a context from raw problem data"""

    def test_classes_indexed_courses_then_labs(self, sample_context):
        assert sample_context.num_courses == 4
        assert sample_context.num_labs == 2
        assert sample_context.num_classes == 6
        assert sample_context.class_at(0).identifier == CPSC_231_01
        assert sample_context.class_at(4).kind == SlotKind.LAB
        assert sample_context.is_course_index(3) is True
        assert sample_context.is_course_index(4) is False

    def test_slots_for_uses_class_kind(self, sample_context):
        assert sample_context.slots_for(0) == sample_context.course_slots
        assert sample_context.slots_for(5) == sample_context.lab_slots
        assert all(slot.kind == SlotKind.LAB for slot in sample_context.lab_slots)

    def test_rules_resolved_to_indices(self, sample_context):
        assert sample_context.not_compatible == ((0, 3),)
        assert sample_context.unwanted == ((2, "MO", "8:00"),)
        assert sample_context.pairs == ((1, 3),)
        assert len(sample_context.preferences) == 1
        preference = sample_context.preferences[0]
        assert (preference.class_index, preference.day, preference.time, preference.value) == (
            2,
            "TU",
            "9:30",
            10,
        )

    def test_initial_assignment_is_empty_without_partials(self, sample_context):
        assert sample_context.initial_assignment == (UNASSIGNED,) * 6
        assert sample_context.empty_assignment() == (UNASSIGNED,) * 6
        assert sample_context.unassigned is UNASSIGNED

    def test_partial_assignment_resolved(self):
        context = build_sample_context(partial_assignments=[(CPSC_433_01, "TU", "9:30")])

        assert context.initial_assignment[2] == context.course_slots[2]
        assert context.initial_assignment.count(UNASSIGNED) == 5

    def test_repeated_identical_partial_assignment_accepted(self):
        context = build_sample_context(
            partial_assignments=[
                (CPSC_433_01, "TU", "9:30"),
                (CPSC_433_01, "TU", "9:30"),
            ]
        )

        assert context.initial_assignment[2] == context.course_slots[2]

    def test_lab_association(self, sample_context):
        """Test labs are linked to the lecture whose tokens they contain"""
        assert sample_context.lab_sections[0] == (4,)
        assert sample_context.lab_sections[1] == ()
        assert sample_context.lab_sections[2] == (5,)
        assert sample_context.lab_sections[4] == ()

    def test_open_tutorial_belongs_to_every_section(self):
        """Test a tutorial without LEC token is linked to all sections of the course"""
        context = ProblemContext.build(
            courses=[CPSC_231_01, CPSC_231_02, CPSC_433_01],
            labs=[("CPSC", "231", "TUT", "01")],
            course_slots=[("MO", "8:00", 3)],
            lab_slots=[("TU", "10:00", 2)],
        )

        assert context.lab_sections[0] == (3,)
        assert context.lab_sections[1] == (3,)
        assert context.lab_sections[2] == ()

    def test_unknown_class_in_preference_ignored(self):
        context = build_sample_context(
            preferences=[("TU", "9:30", ("MATH", "211", "LEC", "01"), 5)],
            pairs=[(("MATH", "211", "LEC", "01"), CPSC_231_01)],
        )

        assert context.preferences == ()
        assert context.pairs == ()


CPSC_313_01 = ("CPSC", "313", "LEC", "01")
CPSC_313_01_TUT = ("CPSC", "313", "LEC", "01", "TUT", "01")
CPSC_813_TUT = ("CPSC", "813", "TUT", "01")


def build_quiz_context(**overrides):
    data = dict(
        courses=[CPSC_313_01, CPSC_231_01],
        labs=[CPSC_313_01_TUT],
        course_slots=[("MO", "8:00", 2), ("TU", "11:00", 2), ("TU", "17:00", 2)],
        lab_slots=[("MO", "8:00", 2), ("TU", "18:00", 2)],
    )
    data.update(overrides)
    return ProblemContext.build(**data)


class TestDepartmentRules:
    """Tests for the rules applied to every problem instance"""

    def test_tuesday_eleven_course_slot_removed(self):
        context = ProblemContext.build(
            courses=[CPSC_231_01],
            labs=[],
            course_slots=[("MO", "8:00", 2), ("TU", "11:00", 2), ("TU", "12:30", 2)],
            lab_slots=[("TU", "11:00", 2)],
        )

        assert [s.day_time for s in context.course_slots] == [("MO", "8:00"), ("TU", "12:30")]
        # lab slots at the same time stay
        assert context.lab_slots[0].day_time == ("TU", "11:00")

    def test_only_blocked_slot_leaves_no_course_slots(self):
        with pytest.raises(ProblemConfigurationError, match="no course slots"):
            ProblemContext.build(
                courses=[CPSC_231_01], labs=[], course_slots=[("TU", "11:00", 2)], lab_slots=[]
            )

    def test_quiz_tutorial_added_and_booked(self):
        context = build_quiz_context()
        tu18 = context.lab_slots[1]

        assert context.labs[-1].identifier == CPSC_813_TUT
        assert context.num_classes == 4
        assert context.initial_assignment == (UNASSIGNED, UNASSIGNED, UNASSIGNED, tu18)

    def test_quiz_course_sections_kept_clear(self):
        context = build_quiz_context()

        assert set(context.unwanted) == {
            (0, "TU", "17:00"),
            (0, "TU", "18:30"),
            (2, "TU", "18:00"),
        }

    def test_listed_quiz_tutorial_not_duplicated(self):
        context = build_quiz_context(labs=[CPSC_313_01_TUT, CPSC_813_TUT])

        assert [lab.identifier for lab in context.labs] == [CPSC_313_01_TUT, CPSC_813_TUT]
        assert context.initial_assignment[3] == context.lab_slots[1]

    def test_lab_only_offering_triggers_booking(self):
        context = build_quiz_context(
            courses=[CPSC_231_01], labs=[("CPSC", "413", "TUT", "01")]
        )

        assert context.labs[-1].identifier == ("CPSC", "913", "TUT", "01")
        assert (1, "TU", "18:00") in context.unwanted

    def test_no_quiz_course_no_booking(self, sample_context):
        assert [lab.number for lab in sample_context.labs] == ["231", "433"]

    def test_missing_quiz_slot_rejected(self):
        with pytest.raises(ProblemConfigurationError, match="no TU 18:00 lab slot"):
            build_quiz_context(lab_slots=[("MO", "8:00", 2)])

    def test_quiz_tutorial_assigned_elsewhere_rejected(self):
        with pytest.raises(ProblemConfigurationError, match="instead of TU 18:00"):
            build_quiz_context(
                labs=[CPSC_313_01_TUT, CPSC_813_TUT],
                partial_assignments=[(CPSC_813_TUT, "MO", "8:00")],
            )

    def test_quiz_tutorial_unwanted_at_quiz_slot_rejected(self):
        with pytest.raises(ProblemConfigurationError, match="unwanted at TU 18:00"):
            build_quiz_context(
                labs=[CPSC_313_01_TUT, CPSC_813_TUT],
                unwanted=[(CPSC_813_TUT, "TU", "18:00")],
            )


class TestPriorityOrder:
    """Tests for the most-constrained-first ordering"""

    def test_priority_scores(self, sample_context):
        # unwanted + incompatible + labs (+ evening bonus)
        assert sample_context.priority_scores == (2, 0, 2, 1, 0, 0)

    def test_ties_keep_index_order(self, sample_context):
        assert sample_context.priority_order == (0, 2, 3, 1, 4, 5)

    def test_evening_section_first(self):
        evening = ("CPSC", "231", "LEC", "91")
        context = ProblemContext.build(
            courses=[CPSC_231_01, SENG_300_01, evening],
            labs=[],
            course_slots=[("MO", "8:00", 3), ("MO", "18:00", 3)],
            lab_slots=[],
            not_compatible=[(CPSC_231_01, SENG_300_01)],
        )

        assert context.priority_scores[2] == EVENING_PRIORITY_BONUS
        assert context.priority_order[0] == 2

    def test_priority_order_is_permutation(self, sample_context):
        assert sorted(sample_context.priority_order) == list(range(6))


class TestProblemContextValidation:
    """Tests for malformed problem data"""

    def test_duplicate_class_rejected(self):
        with pytest.raises(ProblemConfigurationError, match="more than once"):
            build_sample_context(courses=[CPSC_231_01, CPSC_231_01])

    def test_empty_identifier_rejected(self):
        with pytest.raises(ProblemConfigurationError, match="empty identifier"):
            build_sample_context(courses=[()], labs=[], not_compatible=[], unwanted=[])

    def test_unknown_class_in_not_compatible_rejected(self):
        with pytest.raises(ProblemConfigurationError, match="unknown class"):
            build_sample_context(
                not_compatible=[(CPSC_231_01, ("MATH", "211", "LEC", "01"))]
            )

    def test_unknown_class_in_unwanted_rejected(self):
        with pytest.raises(ProblemConfigurationError, match="unwanted"):
            build_sample_context(unwanted=[(("MATH", "211", "LEC", "01"), "MO", "8:00")])

    def test_partial_assignment_to_missing_slot_rejected(self):
        with pytest.raises(ProblemConfigurationError, match="no such slot"):
            build_sample_context(partial_assignments=[(CPSC_231_01, "WE", "8:00")])

    def test_partial_assignment_uses_class_kind(self):
        """Test a lab cannot be partially assigned to a course-only time"""
        with pytest.raises(ProblemConfigurationError, match="no such slot"):
            build_sample_context(
                partial_assignments=[(("CPSC", "433", "LEC", "01", "LAB", "01"), "MO", "9:00")]
            )

    def test_conflicting_partial_assignments_rejected(self):
        with pytest.raises(ProblemConfigurationError, match="Multiple different slots"):
            build_sample_context(
                partial_assignments=[
                    (CPSC_231_02, "MO", "8:00"),
                    (CPSC_231_02, "TU", "9:30"),
                ]
            )

    def test_courses_without_slots_rejected(self):
        with pytest.raises(ProblemConfigurationError, match="no course slots"):
            build_sample_context(course_slots=[])

    def test_labs_without_slots_rejected(self):
        with pytest.raises(ProblemConfigurationError, match="no lab slots"):
            build_sample_context(lab_slots=[])

    def test_invalid_time_rejected(self):
        with pytest.raises(ProblemConfigurationError):
            build_sample_context(course_slots=[("MO", "8h00", 3)])

    def test_negative_capacity_rejected(self):
        with pytest.raises(ProblemConfigurationError, match="Negative capacity"):
            build_sample_context(course_slots=[("MO", "8:00", -1)])

    def test_duplicate_slot_rejected(self):
        with pytest.raises(ProblemConfigurationError, match="Duplicate"):
            build_sample_context(course_slots=[("MO", "8:00", 3), ("MO", "8:00", 2)])

    def test_short_slot_row_rejected(self):
        with pytest.raises(ProblemConfigurationError, match="needs day, time and max"):
            build_sample_context(course_slots=[("MO", "8:00")])

    def test_lab_slot_among_course_slots_rejected(self):
        with pytest.raises(ProblemConfigurationError, match="listed among course slots"):
            build_sample_context(course_slots=[Slot(SlotKind.LAB, "MO", "8:00", 2)])

    def test_check_assignment_shape(self, sample_context):
        sample_context.check_assignment_shape((UNASSIGNED,) * 6)
        with pytest.raises(ProblemConfigurationError, match="Assignment has 5 entries"):
            sample_context.check_assignment_shape((UNASSIGNED,) * 5)
