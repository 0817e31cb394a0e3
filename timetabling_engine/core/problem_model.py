# timetabling_engine/core/problem_model.py

"""
Immutable problem definition shared by every engine component.

A ``ProblemContext`` is built once from the parsed problem data, validated, and
then passed by reference into the oracles, the or-tree search and the
population controller. Classes are indexed courses first, then labs; the same
index addresses a class in every assignment for the whole run.
"""

from __future__ import annotations
from typing import Dict, List, Optional, Any, Tuple, Sequence, Union
from dataclasses import dataclass, field
from enum import Enum
import logging
from collections import defaultdict

from ..exceptions import ProblemConfigurationError

logger = logging.getLogger(__name__)

# Entry of an assignment whose class has not been given a slot yet
UNASSIGNED = None

EVENING_PRIORITY_BONUS = 50
EVENING_START_HOUR = 18

# No lecture may be held in this course slot
BLOCKED_COURSE_SLOT = ("TU", "11:00")

# Courses whose quiz tutorial is booked into a fixed lab slot
QUIZ_TUTORIALS = {"313": "813", "413": "913"}
QUIZ_SLOT = ("TU", "18:00")
QUIZ_LECTURE_UNWANTED = ("17:00", "18:30")


class SlotKind(Enum):
    COURSE = "course"
    LAB = "lab"


@dataclass(frozen=True)
class Slot:
    """A (day, time) bucket for one kind of class, with its fill limits."""

    kind: SlotKind
    day: str
    time: str
    max_capacity: int
    min_fill: Optional[int] = None

    @property
    def day_time(self) -> Tuple[str, str]:
        return (self.day, self.time)

    @property
    def hour(self) -> int:
        return int(self.time.split(":", 1)[0])

    @property
    def start_minutes(self) -> int:
        hours, _, minutes = self.time.partition(":")
        return int(hours) * 60 + int(minutes or 0)

    @property
    def is_evening(self) -> bool:
        return self.hour >= EVENING_START_HOUR

    def to_dict(self) -> Dict[str, Any]:
        return {
            "kind": self.kind.value,
            "day": self.day,
            "time": self.time,
            "max_capacity": self.max_capacity,
            "min_fill": self.min_fill,
        }

    def __repr__(self):
        return f"Slot({self.kind.value}, {self.day} {self.time})"


@dataclass(frozen=True)
class ClassSection:
    """A lecture section or a lab/tutorial section, e.g. CPSC 433 LEC 01."""

    identifier: Tuple[str, ...]
    kind: SlotKind

    @property
    def name(self) -> str:
        return " ".join(self.identifier)

    @property
    def department(self) -> str:
        return self.identifier[0]

    @property
    def number(self) -> str:
        return self.identifier[1] if len(self.identifier) > 1 else ""

    @property
    def is_evening(self) -> bool:
        # Evening lecture sections are numbered 9x
        return len(self.identifier) > 3 and self.identifier[3].startswith("9")

    def __repr__(self):
        return f"ClassSection({self.name})"


@dataclass(frozen=True)
class Preference:
    class_index: int
    day: str
    time: str
    value: int


SlotLike = Union[Slot, Sequence[Any]]
Identifier = Sequence[str]


@dataclass(frozen=True)
class ProblemContext:
    """
    Everything the search needs to know about one problem instance.

    Rules reference classes by index. ``initial_assignment`` already holds the
    partial assignments; ``priority_order`` lists class indices most
    constrained first.
    """

    courses: Tuple[ClassSection, ...]
    labs: Tuple[ClassSection, ...]
    course_slots: Tuple[Slot, ...]
    lab_slots: Tuple[Slot, ...]
    not_compatible: Tuple[Tuple[int, int], ...] = ()
    unwanted: Tuple[Tuple[int, str, str], ...] = ()
    preferences: Tuple[Preference, ...] = ()
    pairs: Tuple[Tuple[int, int], ...] = ()
    lab_sections: Tuple[Tuple[int, ...], ...] = ()
    initial_assignment: Tuple[Optional[Slot], ...] = ()
    priority_order: Tuple[int, ...] = ()
    priority_scores: Tuple[int, ...] = field(default=(), repr=False)

    @property
    def unassigned(self) -> None:
        return UNASSIGNED

    @property
    def num_courses(self) -> int:
        return len(self.courses)

    @property
    def num_labs(self) -> int:
        return len(self.labs)

    @property
    def num_classes(self) -> int:
        return len(self.courses) + len(self.labs)

    @property
    def classes(self) -> Tuple[ClassSection, ...]:
        return self.courses + self.labs

    def is_course_index(self, index: int) -> bool:
        return index < len(self.courses)

    def class_at(self, index: int) -> ClassSection:
        if index < len(self.courses):
            return self.courses[index]
        return self.labs[index - len(self.courses)]

    def slots_for(self, index: int) -> Tuple[Slot, ...]:
        """Candidate slots of the class at ``index``."""
        return self.course_slots if self.is_course_index(index) else self.lab_slots

    def empty_assignment(self) -> Tuple[Optional[Slot], ...]:
        return (UNASSIGNED,) * self.num_classes

    def check_assignment_shape(self, assignment: Sequence[Any]) -> None:
        """Raise when an assignment cannot belong to this problem."""
        if len(assignment) != self.num_classes:
            raise ProblemConfigurationError(
                f"Assignment has {len(assignment)} entries, "
                f"problem has {self.num_classes} classes"
            )

    @classmethod
    def build(
        cls,
        courses: Sequence[Identifier],
        labs: Sequence[Identifier],
        course_slots: Sequence[SlotLike],
        lab_slots: Sequence[SlotLike],
        not_compatible: Sequence[Tuple[Identifier, Identifier]] = (),
        unwanted: Sequence[Tuple[Identifier, str, str]] = (),
        preferences: Sequence[Tuple[str, str, Identifier, int]] = (),
        pairs: Sequence[Tuple[Identifier, Identifier]] = (),
        partial_assignments: Sequence[Tuple[Identifier, str, str]] = (),
    ) -> "ProblemContext":
        """
        Validate raw problem data and assemble the context.

        Slots may be given as ``Slot`` objects or ``(day, time, max[, min])``
        rows. Class identifiers are token sequences such as
        ``("CPSC", "433", "LEC", "01")``.

        Raises:
            ProblemConfigurationError: on any inconsistency in the data.
        """
        built_course_slots = _build_slots(course_slots, SlotKind.COURSE)
        built_lab_slots = _build_slots(lab_slots, SlotKind.LAB)
        built_course_slots, labs, unwanted, partial_assignments = _apply_department_rules(
            courses, labs, built_course_slots, built_lab_slots, unwanted, partial_assignments
        )

        course_sections = tuple(
            ClassSection(tuple(ident), SlotKind.COURSE) for ident in courses
        )
        lab_sections_list = tuple(
            ClassSection(tuple(ident), SlotKind.LAB) for ident in labs
        )
        all_classes = course_sections + lab_sections_list

        index_of: Dict[Tuple[str, ...], int] = {}
        for i, section in enumerate(all_classes):
            if not section.identifier:
                raise ProblemConfigurationError(f"Class #{i} has an empty identifier")
            if section.identifier in index_of:
                raise ProblemConfigurationError(
                    f"Class {section.name} is listed more than once"
                )
            index_of[section.identifier] = i

        if course_sections and not built_course_slots:
            raise ProblemConfigurationError("Courses are listed but no course slots")
        if lab_sections_list and not built_lab_slots:
            raise ProblemConfigurationError("Labs are listed but no lab slots")

        def resolve(ident: Identifier, rule: str) -> int:
            key = tuple(ident)
            if key not in index_of:
                raise ProblemConfigurationError(
                    f"{rule} references unknown class {' '.join(key)}"
                )
            return index_of[key]

        incompatible_pairs = tuple(
            (resolve(a, "not-compatible"), resolve(b, "not-compatible"))
            for a, b in not_compatible
        )
        unwanted_rules = tuple(
            (resolve(ident, "unwanted"), day, time) for ident, day, time in unwanted
        )

        # Soft rules on classes that are not part of this instance carry no penalty
        preference_rules = []
        for day, time, ident, value in preferences:
            if tuple(ident) not in index_of:
                logger.warning(
                    f"Ignoring preference for unknown class {' '.join(ident)}"
                )
                continue
            preference_rules.append(
                Preference(index_of[tuple(ident)], day, time, int(value))
            )
        pair_rules = []
        for a, b in pairs:
            if tuple(a) not in index_of or tuple(b) not in index_of:
                logger.warning(f"Ignoring pair with unknown class: {a} / {b}")
                continue
            pair_rules.append((index_of[tuple(a)], index_of[tuple(b)]))

        num_courses = len(course_sections)
        initial: List[Optional[Slot]] = [UNASSIGNED] * len(all_classes)
        for ident, day, time in partial_assignments:
            index = resolve(ident, "partial assignment")
            candidates = built_course_slots if index < num_courses else built_lab_slots
            slot = next((s for s in candidates if s.day_time == (day, time)), None)
            if slot is None:
                raise ProblemConfigurationError(
                    f"Partial assignment of {all_classes[index].name} to "
                    f"{day} {time}: no such slot"
                )
            if initial[index] is not UNASSIGNED and initial[index] != slot:
                raise ProblemConfigurationError(
                    f"Multiple different slots partially assigned to "
                    f"{all_classes[index].name}"
                )
            initial[index] = slot

        lab_links = _associate_labs(course_sections, lab_sections_list)

        unwanted_count: Dict[int, int] = defaultdict(int)
        for index, _, _ in unwanted_rules:
            unwanted_count[index] += 1
        incompatible_count: Dict[int, int] = defaultdict(int)
        for a, b in incompatible_pairs:
            incompatible_count[a] += 1
            incompatible_count[b] += 1

        scores = tuple(
            unwanted_count[i]
            + incompatible_count[i]
            + len(lab_links[i])
            + (EVENING_PRIORITY_BONUS if section.is_evening else 0)
            for i, section in enumerate(all_classes)
        )
        # sorted() is stable: equal scores keep class index order
        priority_order = tuple(
            sorted(range(len(all_classes)), key=lambda i: scores[i], reverse=True)
        )

        context = cls(
            courses=course_sections,
            labs=lab_sections_list,
            course_slots=built_course_slots,
            lab_slots=built_lab_slots,
            not_compatible=incompatible_pairs,
            unwanted=unwanted_rules,
            preferences=tuple(preference_rules),
            pairs=tuple(pair_rules),
            lab_sections=lab_links,
            initial_assignment=tuple(initial),
            priority_order=priority_order,
            priority_scores=scores,
        )
        logger.info(
            f"Problem context built: {num_courses} courses, {len(lab_sections_list)} labs, "
            f"{len(built_course_slots)} course slots, {len(built_lab_slots)} lab slots, "
            f"{sum(s is not UNASSIGNED for s in initial)} partial assignments"
        )
        return context


def _apply_department_rules(
    courses: Sequence[Identifier],
    labs: Sequence[Identifier],
    course_slots: Tuple[Slot, ...],
    lab_slots: Tuple[Slot, ...],
    unwanted: Sequence[Tuple[Identifier, str, str]],
    partial_assignments: Sequence[Tuple[Identifier, str, str]],
):
    """
    Fixed department rules applied to every instance.

    The TU 11:00 course slot is dropped. When CPSC 313 or 413 is offered, its
    quiz tutorial (CPSC 813 / 913 TUT 01) is added and partially assigned to
    the TU 18:00 lab slot; the 313/413 lectures become unwanted at TU 17:00
    and TU 18:30 and their labs at TU 18:00.

    Returns the course slots, labs, unwanted rules and partial assignments to
    build the context from.
    """
    kept_course_slots = tuple(s for s in course_slots if s.day_time != BLOCKED_COURSE_SLOT)
    if len(kept_course_slots) != len(course_slots):
        logger.info("Removed the TU 11:00 course slot: no lectures are held then")

    labs = [tuple(ident) for ident in labs]
    unwanted = list(unwanted)
    partial_assignments = list(partial_assignments)
    day, time = QUIZ_SLOT

    for number, quiz_number in QUIZ_TUTORIALS.items():
        lectures = [tuple(i) for i in courses if tuple(i[:2]) == ("CPSC", number)]
        lab_sections = [i for i in labs if i[:2] == ("CPSC", number)]
        if not lectures and not lab_sections:
            continue

        if not any(s.day_time == QUIZ_SLOT for s in lab_slots):
            raise ProblemConfigurationError(
                f"CPSC {number} is offered but there is no TU 18:00 lab slot"
            )
        for ident, at_day, at_time in partial_assignments:
            if tuple(ident[:2]) == ("CPSC", quiz_number) and (at_day, at_time) != QUIZ_SLOT:
                raise ProblemConfigurationError(
                    f"CPSC {number} is offered but CPSC {quiz_number} is partially "
                    f"assigned to {at_day} {at_time} instead of TU 18:00"
                )
        for ident, at_day, at_time in unwanted:
            if tuple(ident[:2]) == ("CPSC", quiz_number) and (at_day, at_time) == QUIZ_SLOT:
                raise ProblemConfigurationError(
                    f"CPSC {number} is offered but CPSC {quiz_number} is unwanted at TU 18:00"
                )

        quiz = ("CPSC", quiz_number, "TUT", "01")
        if quiz not in labs:
            labs.append(quiz)
        partial_assignments.append((quiz, day, time))
        unwanted.extend(
            (lecture, day, blocked) for lecture in lectures for blocked in QUIZ_LECTURE_UNWANTED
        )
        unwanted.extend((lab, day, time) for lab in lab_sections)
        logger.info(f"CPSC {number} offered: CPSC {quiz_number} TUT 01 booked at TU 18:00")

    return kept_course_slots, labs, unwanted, partial_assignments


def _build_slots(rows: Sequence[SlotLike], kind: SlotKind) -> Tuple[Slot, ...]:
    slots: List[Slot] = []
    seen = set()
    for row in rows:
        if isinstance(row, Slot):
            if row.kind != kind:
                raise ProblemConfigurationError(
                    f"{row!r} listed among {kind.value} slots"
                )
            slot = row
        else:
            if len(row) < 3:
                raise ProblemConfigurationError(
                    f"{kind.value} slot {row!r} needs day, time and max"
                )
            try:
                slot = Slot(
                    kind=kind,
                    day=str(row[0]).strip(),
                    time=str(row[1]).strip(),
                    max_capacity=int(row[2]),
                    min_fill=int(row[3]) if len(row) > 3 and row[3] is not None else None,
                )
            except (TypeError, ValueError) as e:
                raise ProblemConfigurationError(
                    f"Invalid {kind.value} slot {row!r}: {e}"
                ) from e

        try:
            slot.start_minutes
        except ValueError as e:
            raise ProblemConfigurationError(f"Invalid time in {slot!r}") from e
        if slot.max_capacity < 0 or (slot.min_fill is not None and slot.min_fill < 0):
            raise ProblemConfigurationError(f"Negative capacity in {slot!r}")
        if slot.day_time in seen:
            raise ProblemConfigurationError(f"Duplicate {kind.value} slot {slot!r}")
        seen.add(slot.day_time)
        slots.append(slot)
    return tuple(slots)


def _associate_labs(
    courses: Tuple[ClassSection, ...], labs: Tuple[ClassSection, ...]
) -> Tuple[Tuple[int, ...], ...]:
    """
    Lab indices belonging to each course; labs themselves own none.

    A lab belongs to a lecture when its identifier contains every token of the
    lecture's identifier (CPSC 433 LEC 01 TUT 01), or when it is open to all
    sections of the course (CPSC 433 TUT 01, no LEC token).
    """
    num_courses = len(courses)
    links: List[Tuple[int, ...]] = []
    for course in courses:
        tokens = set(course.identifier)
        owned = []
        for j, lab in enumerate(labs):
            if tokens.issubset(lab.identifier):
                owned.append(num_courses + j)
            elif "LEC" not in lab.identifier and (
                lab.department == course.department and lab.number == course.number
            ):
                owned.append(num_courses + j)
        links.append(tuple(owned))
    links.extend(() for _ in labs)
    return tuple(links)
