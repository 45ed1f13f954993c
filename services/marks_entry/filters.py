"""
Filter form of the marks entry screen.

MarksFilter is immutable; every change_* function returns the next filter with
the dependent fields reset the way the form resets them. Nothing here touches
the network.
"""

from dataclasses import dataclass, field, replace
from datetime import date
from typing import Iterable, List, Optional, Sequence

from services.marks_entry.entities import Exam, Subject, TeacherLevel

# terminal (GPA only) exams and the class each one is fixed to
TERMINAL_EXAM_LEVELS = {"JSC": "8", "SSC": "10"}


def is_terminal_exam(exam_name: str) -> bool:
    return exam_name in TERMINAL_EXAM_LEVELS


@dataclass(frozen=True)
class MarksFilter:
    year: int = field(default_factory=lambda: date.today().year)
    exam_name: str = ""
    level: str = ""
    department: str = ""
    section: str = ""
    specific: int = 0   # selected subject id, 0 = none

    @property
    def terminal(self) -> bool:
        return is_terminal_exam(self.exam_name)

    @property
    def resolved(self) -> bool:
        """Year, exam and class are all chosen"""
        return bool(self.year and self.exam_name and self.level)


def change_year(f: MarksFilter, year: int) -> MarksFilter:
    return MarksFilter(year=int(year))


def change_exam(f: MarksFilter, exam_name: str) -> MarksFilter:
    return replace(
        f,
        exam_name=exam_name,
        level=TERMINAL_EXAM_LEVELS.get(exam_name, ""),
        department="",
        section="",
        specific=0,
    )


def change_level(f: MarksFilter, level) -> MarksFilter:
    if f.terminal:
        # class select is locked for JSC / SSC
        return f
    return replace(f, level="" if level in (None, "") else str(level), department="", section="", specific=0)


def change_department(f: MarksFilter, department: Optional[str]) -> MarksFilter:
    return replace(f, department=department or "")


def change_section(f: MarksFilter, section: Optional[str]) -> MarksFilter:
    return replace(f, section=section or "")


def subjects_for_class(subjects: Iterable[Subject], level: str) -> List[Subject]:
    if not level:
        return []
    return [s for s in subjects if s.class_level == str(level)]


def select_subject(f: MarksFilter, subject_id: int, subjects: Iterable[Subject]) -> MarksFilter:
    """Picking a department scoped subject also picks its department"""
    if not subject_id:
        return replace(f, specific=0, department="")
    subject = next((s for s in subjects_for_class(subjects, f.level) if s.id == int(subject_id)), None)
    if subject is None:
        return replace(f, specific=0, department="")
    return replace(f, specific=subject.id, department=subject.department or "")


def reconcile_specific(f: MarksFilter, subjects: Iterable[Subject]) -> MarksFilter:
    if f.specific and not any(s.id == f.specific for s in subjects_for_class(subjects, f.level)):
        return replace(f, specific=0, department="")
    return f


# ==========================================================
# options offered by the selects
# ==========================================================

def assigned_classes(levels: Sequence[TeacherLevel]) -> List[int]:
    return sorted({lv.class_name for lv in levels})


def assigned_sections(levels: Sequence[TeacherLevel], level: str) -> List[str]:
    if not level:
        return []
    sections = []
    for lv in levels:
        if str(lv.class_name) == str(level) and lv.section not in sections:
            sections.append(lv.section)
    return sections


def available_exams(exams: Sequence[Exam], year: int, levels: Sequence[TeacherLevel]) -> List[str]:
    """Exams of the year, plus JSC / SSC when the teacher holds class 8 / 10"""
    names = []
    for e in exams:
        if e.exam_year == int(year) and e.exam_name not in names:
            names.append(e.exam_name)
    classes = assigned_classes(levels)
    for name, fixed_level in TERMINAL_EXAM_LEVELS.items():
        if int(fixed_level) in classes and name not in names:
            names.append(name)
    return names


def available_levels(f: MarksFilter, exams: Sequence[Exam], levels: Sequence[TeacherLevel]) -> List[str]:
    classes = assigned_classes(levels)
    if f.terminal:
        fixed = TERMINAL_EXAM_LEVELS[f.exam_name]
        return [fixed] if int(fixed) in classes else []
    exam = next((e for e in exams if e.exam_name == f.exam_name and e.exam_year == f.year), None)
    if exam is not None and exam.levels:
        classes = [c for c in classes if c in exam.levels]
    return [str(c) for c in classes]
