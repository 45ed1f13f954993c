import asyncio

import pytest

from services.marks_entry.errors import StudentNotVisible
from services.marks_entry.session import MarksEntrySession
from services.school_api import SchoolApiError

SUBJECTS = [
    {"id": 1, "name": "Bangla", "class": 8, "full_mark": 100, "cq_mark": 70, "mcq_mark": 30},
    {"id": 2, "name": "Math", "class": 8, "full_mark": 100, "cq_mark": 40, "mcq_mark": 30, "practical_mark": 30},
    {"id": 3, "name": "Physics", "class": 10, "department": "Science", "full_mark": 100, "cq_mark": 50},
]
EXAMS = [{"exam_name": "Half Yearly", "exam_year": 2024, "levels": [6, 7, 8, 9]}]
STUDENTS = {
    "8": [
        {"student_id": 11, "name": "Arif", "roll": 2, "section": "A", "class": 8},
        {"student_id": 12, "name": "Bithi", "roll": 1, "section": "A", "class": 8},
        {"student_id": 13, "name": "Chandan", "roll": 1, "section": "B", "class": 8},
    ],
    "9": [
        {"student_id": 21, "name": "Farhan", "roll": 1, "section": "A", "class": 9},
    ],
    "10": [
        {"student_id": 31, "name": "Dipa", "roll": 1, "section": "A", "class": 10, "department": "Science"},
        {"student_id": 32, "name": "Emon", "roll": 2, "section": "A", "class": 10, "department": "Business"},
    ],
}


class FakeApi:
    """In-memory stand-in for SchoolApiClient"""

    def __init__(self):
        self.class_marks = []
        self.gpa_rows = []
        self.posted = []
        self.gates = {}
        self.failing = {}

    def _maybe_fail(self, name):
        if name in self.failing:
            raise self.failing[name]

    async def get_subjects(self):
        self._maybe_fail("get_subjects")
        return SUBJECTS

    async def get_exams(self):
        self._maybe_fail("get_exams")
        return EXAMS

    async def get_teacher_profile(self):
        self._maybe_fail("get_teacher_profile")
        return {"levels": [
            {"class_name": 8, "section": "A"},
            {"class_name": 9, "section": "A"},
            {"class_name": 10, "section": "A"},
        ]}

    async def get_students_by_class(self, year, level):
        if level in self.gates:
            await self.gates[level].wait()
        return STUDENTS.get(level, [])

    async def get_class_marks(self, level, year, exam):
        return self.class_marks

    async def get_gpa(self, year):
        return self.gpa_rows

    async def add_marks(self, payload):
        self._maybe_fail("add_marks")
        self.posted.append(payload)
        self.class_marks = [
            {"student_id": s["studentId"], "marks": [
                {"subject_id": m["subjectId"], **{k: v for k, v in m.items() if k != "subjectId"}}
                for m in s["subjectMarks"]
            ]}
            for s in payload["students"]
        ]
        return {"success": True, "message": f"Processed {len(payload['students'])} mark records"}

    async def add_gpa(self, payload):
        self.posted.append(payload)
        return {"success": True, "message": "GPA saved successfully"}


def _run(coro):
    return asyncio.run(coro)


def test_standard_exam_flow():
    async def scenario():
        api = FakeApi()
        s = MarksEntrySession(api, year=2024)
        await s.load_initial()
        assert s.available_exams == ["Half Yearly", "JSC", "SSC"]

        await s.set_exam("Half Yearly")
        assert s.available_levels == ["8", "9"]
        await s.set_level("8")
        assert s.roster.is_loaded
        assert s.filtered_students == []
        assert s.marks.status.value == "not_loaded"

        await s.set_section("A")
        assert [st.name for st in s.filtered_students] == ["Bithi", "Arif"]
        assert s.marks.is_loaded
        assert not s.can_submit

        await s.select_subject(2)
        assert s.can_submit
        s.edit_mark(11, 2, "cq_marks", "55")
        s.edit_mark(12, 2, "mcq_marks", "21")

        assert await s.submit()
        assert api.posted[0]["students"] == [
            {"studentId": 12, "subjectMarks": [{"subjectId": 2, "cq_marks": 0, "mcq_marks": 21, "practical_marks": 0}]},
            {"studentId": 11, "subjectMarks": [{"subjectId": 2, "cq_marks": 40, "mcq_marks": 0, "practical_marks": 0}]},
        ]
        assert s.notifier.history[-1].title == "Processed 2 mark records"
        # table was re-fetched from the server after saving
        math = next(m for m in s.marks.value[11] if m.subject_id == 2)
        assert math.cq_marks == 40

    _run(scenario())


def test_edit_outside_filter_is_rejected():
    async def scenario():
        s = MarksEntrySession(FakeApi(), year=2024)
        await s.load_initial()
        await s.set_exam("Half Yearly")
        await s.set_level("8")
        await s.set_section("A")
        with pytest.raises(StudentNotVisible):
            s.edit_mark(13, 1, "cq_marks", "10")

    _run(scenario())


def test_terminal_exam_flow():
    async def scenario():
        api = FakeApi()
        api.gpa_rows = [{"student_id": 31, "jsc_gpa": None, "ssc_gpa": 4.25}]
        s = MarksEntrySession(api, year=2024)
        await s.load_initial()

        await s.set_exam("SSC")
        assert s.filter.level == "10"
        await s.set_level("8")
        assert s.filter.level == "10"

        await s.set_section("A")
        assert s.gpa.value[31] == "4.25"
        assert s.can_submit

        s.edit_gpa(31, "5.5")
        s.edit_gpa(32, "-1")
        assert s.gpa.value == {31: "5.00", 32: "-1"}

        assert await s.submit()
        assert api.posted[0] == {
            "students": [{"studentId": 31, "gpa": 5.0}, {"studentId": 32, "gpa": -1.0}],
            "examName": "SSC",
        }

    _run(scenario())


def test_department_subject_selection_narrows_roster():
    async def scenario():
        s = MarksEntrySession(FakeApi(), year=2024)
        await s.load_initial()
        await s.set_exam("Half Yearly")
        await s.set_level("10")
        await s.set_section("A")
        assert s.departments == ["Science", "Business"]

        await s.select_subject(3)
        assert s.filter.department == "Science"
        assert [st.name for st in s.filtered_students] == ["Dipa"]

    _run(scenario())


def test_stale_roster_response_is_discarded():
    async def scenario():
        api = FakeApi()
        api.gates["8"] = asyncio.Event()
        s = MarksEntrySession(api, year=2024)
        await s.load_initial()
        await s.set_exam("Half Yearly")

        slow = asyncio.create_task(s.set_level("8"))
        await asyncio.sleep(0)
        await s.set_level("9")
        api.gates["8"].set()
        await slow

        assert s.filter.level == "9"
        assert [st.student_id for st in s.roster.value] == [21]

    _run(scenario())


def test_initial_load_failure_notifies():
    async def scenario():
        api = FakeApi()
        api.failing["get_exams"] = SchoolApiError("down", 503)
        s = MarksEntrySession(api, year=2024)
        await s.load_initial()
        assert s.exams == []
        assert len(s.subjects) == 3
        assert s.notifier.history[-1].title == "Failed to load initial data"

    _run(scenario())


def test_failed_submit_notifies_and_refetches():
    async def scenario():
        api = FakeApi()
        api.failing["add_marks"] = SchoolApiError("Exam not found", 404)
        api.class_marks = [{"student_id": 11, "marks": []}]
        s = MarksEntrySession(api, year=2024)
        await s.load_initial()
        await s.set_exam("Half Yearly")
        await s.set_level("8")
        await s.set_section("A")
        await s.select_subject(1)
        s.edit_mark(11, 1, "cq_marks", "30")

        assert not await s.submit()
        note = s.notifier.history[-1]
        assert (note.title, note.level) == ("Exam not found", "error")
        assert not s.submitting
        # local edit replaced by the server state
        assert s.marks.value[11][0].cq_marks == 0

    _run(scenario())


def test_year_change_clears_everything():
    async def scenario():
        s = MarksEntrySession(FakeApi(), year=2024)
        await s.load_initial()
        await s.set_exam("Half Yearly")
        await s.set_level("8")
        await s.set_year(2025)
        assert s.filter.exam_name == "" and s.filter.level == ""
        assert s.roster.value == []
        assert s.available_exams == ["JSC", "SSC"]

    _run(scenario())


def test_widening_department_never_posts_scoped_subject_for_others():
    async def scenario():
        api = FakeApi()
        s = MarksEntrySession(api, year=2024)
        await s.load_initial()
        await s.set_exam("Half Yearly")
        await s.set_level("10")
        await s.set_section("A")
        await s.select_subject(3)
        await s.set_department("")
        assert [st.student_id for st in s.filtered_students] == [31, 32]
        s.edit_mark(31, 3, "cq_marks", "45")

        assert await s.submit()
        assert [st["studentId"] for st in api.posted[0]["students"]] == [31]
        assert api.posted[0]["students"][0]["subjectMarks"][0]["cq_marks"] == 45

    _run(scenario())


def test_malformed_initial_rows_notify():
    async def scenario():
        api = FakeApi()

        async def broken_subjects():
            return [{"id": "not-a-number", "name": "Bangla", "class": 8}]

        api.get_subjects = broken_subjects
        s = MarksEntrySession(api, year=2024)
        await s.load_initial()
        assert s.subjects == []
        assert len(s.exams) == 1
        assert s.notifier.history[-1].title == "Failed to load initial data"

    _run(scenario())
