import logging
from typing import Any, Dict, Iterable, List

from services.marks_entry.entities import COMPONENTS, Subject, SubjectMarks
from services.marks_entry.filters import MarksFilter
from services.marks_entry.grid import GpaTable, MarksTable, parse_int
from services.marks_entry.notifications import Notifier
from services.marks_entry.state import Loadable
from services.school_api import SchoolApiClient, SchoolApiError

logger = logging.getLogger(__name__)

GPA_FIELDS = {"JSC": "jsc_gpa", "SSC": "ssc_gpa"}


def build_marks_table(rows: Iterable[Dict[str, Any]], class_subjects: List[Subject]) -> MarksTable:
    """Every (student, class subject) cell gets a value; missing ones are 0"""
    table = {}
    for row in rows:
        stored = {m.get("subject_id"): m for m in row.get("marks") or []}
        cells = []
        for subject in class_subjects:
            existing = stored.get(subject.id) or {}
            cells.append(SubjectMarks(
                subject_id=subject.id,
                **{c: parse_int(existing.get(c)) or 0 for c in COMPONENTS},
            ))
        table[int(row["student_id"])] = tuple(cells)
    return table


def build_gpa_table(rows: Iterable[Dict[str, Any]], exam_name: str) -> GpaTable:
    column = GPA_FIELDS[exam_name]
    table = {}
    for row in rows:
        value = row.get(column)
        table[int(row["student_id"])] = "" if value is None else f"{float(value):.2f}"
    return table


async def fetch_marks_table(
    api: SchoolApiClient, f: MarksFilter, class_subjects: List[Subject], notifier: Notifier
) -> Loadable:
    try:
        rows = await api.get_class_marks(f.level, f.year, f.exam_name)
        table = build_marks_table(rows, class_subjects)
    except (SchoolApiError, KeyError, ValueError) as e:
        logger.error("Marks fetch error (%s / %s / %s): %s", f.level, f.year, f.exam_name, e)
        notifier.error("Failed to load existing marks")
        return Loadable.failed(str(e), {})
    return Loadable.loaded(table)


async def fetch_gpa_table(api: SchoolApiClient, f: MarksFilter, notifier: Notifier) -> Loadable:
    try:
        rows = await api.get_gpa(f.year)
        table = build_gpa_table(rows, f.exam_name)
    except (SchoolApiError, KeyError, ValueError, TypeError) as e:
        logger.error("GPA fetch error (%s / %s): %s", f.year, f.exam_name, e)
        notifier.error("Failed to load existing GPA")
        return Loadable.failed(str(e), {})
    return Loadable.loaded(table)
