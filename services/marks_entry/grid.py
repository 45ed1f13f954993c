"""
Cell editing of the marks and GPA tables.

Tables are plain dicts treated as immutable values: an edit returns a new
outer dict in which only the edited student's row is a new object.

    MarksTable: {student_id: (SubjectMarks, ...)}
    GpaTable:   {student_id: "4.50"}
"""

import math
import re
from typing import Dict, Iterable, Optional, Tuple

from services.marks_entry.entities import COMPONENTS, Student, Subject, SubjectMarks
from services.marks_entry.errors import SubjectNotAvailable

MarksTable = Dict[int, Tuple[SubjectMarks, ...]]
GpaTable = Dict[int, str]

# fallback when the subject is not one of the class subjects
DEFAULT_COMPONENT_MAX = 100
MAX_MARK_DIGITS = 3
MAX_GPA = 5.0
GPA_DECIMALS = 2

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")
_PLAIN_DECIMAL = re.compile(r"^[+-]?\d*\.?\d*$")


def parse_int(raw) -> Optional[int]:
    """Leading integer of the input ("12.5" -> 12, "abc" -> None)"""
    if raw is None:
        return None
    if isinstance(raw, (int, float)) and not isinstance(raw, bool):
        return int(raw) if math.isfinite(raw) else None
    match = _LEADING_INT.match(str(raw))
    return int(match.group(1)) if match else None


def clamp_mark(raw, maximum: int) -> int:
    text = "" if raw is None else str(raw).strip()
    if text == "":
        return 0
    value = parse_int(text)
    if value is None or value < 0:
        return 0
    if value > maximum:
        return maximum
    return int(str(value)[:MAX_MARK_DIGITS])


def clamp_gpa(raw) -> str:
    """
    Caps at 5.00 and keeps two decimals. Negative input is kept as typed,
    the backend clamps it when the batch is saved.
    """
    text = "" if raw is None else str(raw).strip()
    if text == "":
        return ""
    try:
        value = float(text)
    except ValueError:
        return ""
    if not math.isfinite(value):
        return ""
    if value > MAX_GPA:
        text = f"{MAX_GPA:.{GPA_DECIMALS}f}"
    elif not _PLAIN_DECIMAL.match(text):
        # exponent or other float spellings ("1e-1") become plain decimals
        text = f"{math.trunc(value * 10 ** GPA_DECIMALS) / 10 ** GPA_DECIMALS:.{GPA_DECIMALS}f}"
    if "." in text:
        int_part, dec_part = text.split(".", 1)
        text = f"{int_part}.{dec_part[:GPA_DECIMALS]}"
    return text


def component_max(subject: Optional[Subject], component: str) -> int:
    if subject is None:
        return DEFAULT_COMPONENT_MAX
    return subject.component_max(component)


def edit_mark(
    table: MarksTable,
    student: Student,
    subject_id: int,
    component: str,
    raw,
    class_subjects: Iterable[Subject],
) -> MarksTable:
    if component not in COMPONENTS:
        raise ValueError(f"unknown mark component: {component}")

    subject = next((s for s in class_subjects if s.id == subject_id), None)
    if subject is not None and subject.restricted_for(student):
        raise SubjectNotAvailable(
            f"{subject.name} is not available for the {student.department or 'general'} department"
        )

    value = clamp_mark(raw, component_max(subject, component))
    row = table.get(student.student_id, ())

    for i, entry in enumerate(row):
        if entry.subject_id == subject_id:
            new_row = row[:i] + (entry.model_copy(update={component: value}),) + row[i + 1:]
            break
    else:
        new_row = row + (SubjectMarks(subject_id=subject_id, **{component: value}),)

    updated = dict(table)
    updated[student.student_id] = new_row
    return updated


def edit_gpa(table: GpaTable, student_id: int, raw) -> GpaTable:
    updated = dict(table)
    updated[student_id] = clamp_gpa(raw)
    return updated


def find_marks(table: MarksTable, student_id: int, subject_id: int) -> Optional[SubjectMarks]:
    return next((m for m in table.get(student_id, ()) if m.subject_id == subject_id), None)
