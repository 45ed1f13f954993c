"""
services/marks_entry/session.py

MarksEntrySession drives the teacher's marks screen:

- canonical state: filter, subjects, exams, teacher levels, roster and the
  marks / GPA table (each a Loadable)
- derived state (class subjects, visible students, submit guard) is computed
  from it on every access
- every fetch is tagged with a load generation; a response that arrives after
  the filter moved on is dropped instead of overwriting newer state
"""

import asyncio
import logging
from typing import List, Optional

from pydantic import ValidationError

from services.marks_entry import filters as fm
from services.marks_entry.entities import Exam, Student, Subject, TeacherLevel
from services.marks_entry.errors import MarksEntryError, StudentNotVisible
from services.marks_entry.grid import edit_gpa, edit_mark
from services.marks_entry.notifications import Notifier
from services.marks_entry.roster import filter_roster, load_roster
from services.marks_entry.state import Loadable
from services.marks_entry.submission import (
    build_gpa_payload,
    build_marks_payload,
    can_submit,
    visible_subjects,
)
from services.marks_entry.tables import fetch_gpa_table, fetch_marks_table
from services.school_api import SchoolApiClient, SchoolApiError

logger = logging.getLogger(__name__)


class MarksEntrySession:
    def __init__(self, api: SchoolApiClient, notifier: Optional[Notifier] = None, year: Optional[int] = None):
        self.api = api
        self.notifier = notifier or Notifier()
        self.filter = fm.MarksFilter(year=year) if year else fm.MarksFilter()

        self.subjects: List[Subject] = []
        self.exams: List[Exam] = []
        self.teacher_levels: List[TeacherLevel] = []

        self.roster = Loadable.not_loaded([])
        self.marks = Loadable.not_loaded({})
        self.gpa = Loadable.not_loaded({})
        self.submitting = False

        self._generation = 0
        self._table_key = None

    # ===============================================================
    # derived state
    # ===============================================================

    @property
    def class_subjects(self) -> List[Subject]:
        return fm.subjects_for_class(self.subjects, self.filter.level)

    @property
    def filtered_students(self) -> List[Student]:
        return filter_roster(self.roster.value, self.filter.department, self.filter.section)

    @property
    def visible_subjects(self) -> List[Subject]:
        return visible_subjects(self.class_subjects, self.filter.specific)

    @property
    def selected_subject(self) -> Optional[Subject]:
        return next((s for s in self.class_subjects if s.id == self.filter.specific), None)

    @property
    def available_exams(self) -> List[str]:
        return fm.available_exams(self.exams, self.filter.year, self.teacher_levels)

    @property
    def available_levels(self) -> List[str]:
        return fm.available_levels(self.filter, self.exams, self.teacher_levels)

    @property
    def available_sections(self) -> List[str]:
        return fm.assigned_sections(self.teacher_levels, self.filter.level)

    @property
    def departments(self) -> List[str]:
        found = []
        for s in self.roster.value:
            if s.department and s.department not in found:
                found.append(s.department)
        return found

    @property
    def can_submit(self) -> bool:
        return not self.submitting and can_submit(self.filter, self.filtered_students, self.class_subjects)

    # ===============================================================
    # loading
    # ===============================================================

    async def load_initial(self):
        """Subjects, exams and the teacher's assigned classes"""
        results = await asyncio.gather(
            self.api.get_subjects(),
            self.api.get_exams(),
            self.api.get_teacher_profile(),
            return_exceptions=True,
        )
        for result in results:
            if isinstance(result, Exception) and not isinstance(result, SchoolApiError):
                raise result

        subjects, exams, profile = results
        failed = [str(r) for r in results if isinstance(r, SchoolApiError)]

        def parse(model, rows):
            if isinstance(rows, Exception):
                return []
            try:
                return [model.model_validate(row) for row in rows]
            except ValidationError as e:
                failed.append(f"malformed {model.__name__} row: {e}")
                return []

        self.subjects = parse(Subject, subjects)
        self.exams = parse(Exam, exams)
        self.teacher_levels = parse(
            TeacherLevel, profile if isinstance(profile, Exception) else profile.get("levels") or []
        )

        if failed:
            logger.error("Initial data error: %s", "; ".join(failed))
            self.notifier.error("Failed to load initial data")

    def _clear_roster(self):
        self._generation += 1
        self.roster = Loadable.not_loaded([])
        self._clear_tables()

    def _clear_tables(self):
        self.marks = Loadable.not_loaded({})
        self.gpa = Loadable.not_loaded({})
        self._table_key = None

    async def _reload_roster(self):
        self._clear_roster()
        if not self.filter.level:
            return

        generation = self._generation
        result = await load_roster(self.api, self.filter.year, self.filter.level, self.notifier)
        if generation != self._generation:
            logger.debug("Discarding stale roster for class %s", self.filter.level)
            return

        self.roster = result
        self.filter = fm.reconcile_specific(self.filter, self.subjects)
        await self.refresh_table()

    async def refresh_table(self, force: bool = False):
        """Fetch the marks or GPA table once the visible roster is non-empty"""
        if not self.roster.value:
            self._clear_tables()
            return
        if not self.filtered_students or not self.filter.resolved:
            return

        key = (self.filter.year, self.filter.exam_name, self.filter.level)
        if not force and key == self._table_key:
            return

        generation = self._generation
        if self.filter.terminal:
            result = await fetch_gpa_table(self.api, self.filter, self.notifier)
        else:
            result = await fetch_marks_table(self.api, self.filter, self.class_subjects, self.notifier)
        if generation != self._generation:
            logger.debug("Discarding stale table for %s", key)
            return

        if self.filter.terminal:
            self.gpa = result
        else:
            self.marks = result
        self._table_key = key if result.is_loaded else None

    # ===============================================================
    # filter changes
    # ===============================================================

    async def set_year(self, year: int):
        self.filter = fm.change_year(self.filter, year)
        self._clear_roster()

    async def set_exam(self, exam_name: str):
        self.filter = fm.change_exam(self.filter, exam_name)
        await self._reload_roster()

    async def set_level(self, level):
        if self.filter.terminal:
            return
        self.filter = fm.change_level(self.filter, level)
        await self._reload_roster()

    async def set_department(self, department: Optional[str]):
        self.filter = fm.change_department(self.filter, department)
        await self.refresh_table()

    async def set_section(self, section: Optional[str]):
        self.filter = fm.change_section(self.filter, section)
        await self.refresh_table()

    async def select_subject(self, subject_id: int):
        self.filter = fm.select_subject(self.filter, subject_id, self.subjects)
        await self.refresh_table()

    # ===============================================================
    # editing
    # ===============================================================

    def _visible_student(self, student_id: int) -> Student:
        student = next((s for s in self.filtered_students if s.student_id == student_id), None)
        if student is None:
            raise StudentNotVisible(f"Student {student_id} is not in the current filter")
        return student

    def edit_mark(self, student_id: int, subject_id: int, component: str, raw):
        student = self._visible_student(student_id)
        table = edit_mark(self.marks.value, student, subject_id, component, raw, self.class_subjects)
        self.marks = self.marks.with_value(table)

    def edit_gpa(self, student_id: int, raw):
        self._visible_student(student_id)
        self.gpa = self.gpa.with_value(edit_gpa(self.gpa.value, student_id, raw))

    # ===============================================================
    # submit
    # ===============================================================

    async def submit(self) -> bool:
        """Post the visible batch, then re-fetch the table whatever the outcome"""
        if not self.can_submit:
            self.notifier.warning("Nothing to save for the current selection")
            return False

        self.submitting = True
        saved = False
        try:
            if self.filter.terminal:
                payload = build_gpa_payload(self.gpa.value, self.filtered_students, self.filter.exam_name)
                logger.info("Submitting GPA for %d students", len(payload["students"]))
                response = await self.api.add_gpa(payload)
            else:
                payload = build_marks_payload(
                    self.marks.value, self.filtered_students, self.class_subjects, self.filter
                )
                logger.info("Submitting marks for %d students", len(payload["students"]))
                response = await self.api.add_marks(payload)
            self.notifier.success(response.get("message") or "Marks saved successfully")
            saved = True
        except (SchoolApiError, MarksEntryError) as e:
            logger.error("Submission error: %s", e)
            self.notifier.error(str(e) or "Failed to save marks")
        finally:
            self.submitting = False
            await self.refresh_table(force=True)
        return saved
