"""
Batch payloads posted when the teacher presses Save.

Only the students visible under the active filter are ever included. For
standard exams the subject set is the visible one as well: with a single
subject selected, only that subject's marks are sent and the student's other
subjects are left untouched on the server.
"""

from typing import Any, Dict, List, Sequence

from services.marks_entry.entities import COMPONENTS, Student, Subject
from services.marks_entry.errors import EmptySubmission
from services.marks_entry.filters import MarksFilter
from services.marks_entry.grid import GpaTable, MarksTable, find_marks, parse_int


def visible_subjects(class_subjects: Sequence[Subject], specific: int) -> List[Subject]:
    return [s for s in class_subjects if not specific or s.id == specific]


def can_submit(f: MarksFilter, filtered_students: Sequence[Student], class_subjects: Sequence[Subject]) -> bool:
    if not filtered_students or not f.exam_name:
        return False
    if f.terminal:
        return True
    subject = next((s for s in class_subjects if s.id == f.specific), None)
    return subject is not None and subject.gradable


def _gpa_number(value: str) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        return 0.0


def build_gpa_payload(gpa_table: GpaTable, visible_students: Sequence[Student], exam_name: str) -> Dict[str, Any]:
    return {
        "students": [
            {"studentId": s.student_id, "gpa": _gpa_number(gpa_table[s.student_id])}
            for s in visible_students
            if s.student_id in gpa_table
        ],
        "examName": exam_name,
    }


def build_marks_payload(
    marks_table: MarksTable,
    visible_students: Sequence[Student],
    class_subjects: Sequence[Subject],
    f: MarksFilter,
) -> Dict[str, Any]:
    if not visible_students:
        raise EmptySubmission("No students found to submit marks for")

    subjects = visible_subjects(class_subjects, f.specific)
    students = []
    for student in visible_students:
        subject_marks = []
        for subject in subjects:
            # department scoped subjects are never sent for students of another department
            if subject.restricted_for(student):
                continue
            existing = find_marks(marks_table, student.student_id, subject.id)
            subject_marks.append({
                "subjectId": subject.id,
                **{c: max(0, parse_int(getattr(existing, c, None)) or 0) for c in COMPONENTS},
            })
        if subject_marks:
            students.append({"studentId": student.student_id, "subjectMarks": subject_marks})

    if not students:
        raise EmptySubmission("No marks to submit for the selected subject")
    return {"students": students, "examName": f.exam_name, "year": f.year}
