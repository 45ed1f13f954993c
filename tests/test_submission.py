from dataclasses import replace

import pytest

from services.marks_entry.entities import Student, Subject, SubjectMarks
from services.marks_entry.errors import EmptySubmission
from services.marks_entry.filters import MarksFilter
from services.marks_entry.submission import build_gpa_payload, build_marks_payload, can_submit, visible_subjects

BANGLA = Subject.model_validate({"id": 1, "name": "Bangla", "class": 8, "full_mark": 100, "cq_mark": 70, "mcq_mark": 30})
DRAWING = Subject.model_validate({"id": 2, "name": "Drawing", "class": 8, "full_mark": 0})
CLASS_SUBJECTS = [BANGLA, DRAWING]

ARIF = Student.model_validate({"student_id": 7, "name": "Arif", "roll": 1, "section": "A", "class": 8})
BITHI = Student.model_validate({"student_id": 8, "name": "Bithi", "roll": 2, "section": "A", "class": 8})


def test_visible_subjects():
    assert visible_subjects(CLASS_SUBJECTS, 0) == CLASS_SUBJECTS
    assert visible_subjects(CLASS_SUBJECTS, 2) == [DRAWING]


def test_can_submit_standard_exam_needs_gradable_subject():
    f = MarksFilter(year=2024, exam_name="Annual", level="8", section="A")
    assert not can_submit(f, [ARIF], CLASS_SUBJECTS)
    assert can_submit(replace(f, specific=1), [ARIF], CLASS_SUBJECTS)
    assert not can_submit(replace(f, specific=2), [ARIF], CLASS_SUBJECTS)
    assert not can_submit(replace(f, specific=1), [], CLASS_SUBJECTS)


def test_can_submit_terminal_exam_needs_only_students():
    f = MarksFilter(year=2024, exam_name="JSC", level="8", section="A")
    assert can_submit(f, [ARIF], CLASS_SUBJECTS)
    assert not can_submit(f, [], CLASS_SUBJECTS)


def test_build_marks_payload_scoped_to_selected_subject_and_visible_students():
    table = {
        7: (SubjectMarks(subject_id=1, cq_marks=50, mcq_marks=20), SubjectMarks(subject_id=2, cq_marks=9)),
        99: (SubjectMarks(subject_id=1, cq_marks=1),),
    }
    f = MarksFilter(year=2024, exam_name="Annual", level="8", section="A", specific=1)

    payload = build_marks_payload(table, [ARIF, BITHI], CLASS_SUBJECTS, f)

    assert payload == {
        "students": [
            {"studentId": 7, "subjectMarks": [
                {"subjectId": 1, "cq_marks": 50, "mcq_marks": 20, "practical_marks": 0},
            ]},
            {"studentId": 8, "subjectMarks": [
                {"subjectId": 1, "cq_marks": 0, "mcq_marks": 0, "practical_marks": 0},
            ]},
        ],
        "examName": "Annual",
        "year": 2024,
    }


def test_build_marks_payload_without_students():
    f = MarksFilter(year=2024, exam_name="Annual", level="8", section="A", specific=1)
    with pytest.raises(EmptySubmission):
        build_marks_payload({}, [], CLASS_SUBJECTS, f)


def test_build_gpa_payload():
    table = {7: "-1", 8: "", 99: "4.00"}
    payload = build_gpa_payload(table, [ARIF, BITHI], "JSC")
    assert payload == {
        "students": [{"studentId": 7, "gpa": -1.0}, {"studentId": 8, "gpa": 0.0}],
        "examName": "JSC",
    }


PHYSICS = Subject.model_validate(
    {"id": 3, "name": "Physics", "class": 10, "department": "Science", "full_mark": 100, "cq_mark": 50}
)
DIPA = Student.model_validate(
    {"student_id": 31, "name": "Dipa", "roll": 1, "section": "A", "class": 10, "department": "Science"}
)
EMON = Student.model_validate(
    {"student_id": 32, "name": "Emon", "roll": 2, "section": "A", "class": 10, "department": "Business"}
)


def test_build_marks_payload_leaves_out_students_of_other_departments():
    table = {31: (SubjectMarks(subject_id=3, cq_marks=44),), 32: (SubjectMarks(subject_id=3, cq_marks=12),)}
    f = MarksFilter(year=2024, exam_name="Annual", level="10", section="A", specific=3)

    payload = build_marks_payload(table, [DIPA, EMON], [PHYSICS], f)

    assert payload["students"] == [
        {"studentId": 31, "subjectMarks": [{"subjectId": 3, "cq_marks": 44, "mcq_marks": 0, "practical_marks": 0}]},
    ]


def test_build_marks_payload_with_only_excluded_students():
    f = MarksFilter(year=2024, exam_name="Annual", level="10", section="A", specific=3)
    with pytest.raises(EmptySubmission):
        build_marks_payload({}, [EMON], [PHYSICS], f)
