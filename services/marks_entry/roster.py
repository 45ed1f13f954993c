import logging
from typing import Iterable, List

from pydantic import ValidationError

from services.marks_entry.entities import Student
from services.marks_entry.notifications import Notifier
from services.marks_entry.state import Loadable
from services.school_api import SchoolApiClient, SchoolApiError

logger = logging.getLogger(__name__)


async def load_roster(api: SchoolApiClient, year: int, level: str, notifier: Notifier) -> Loadable:
    """Full class roster of the year, not yet narrowed by section / department"""
    if not level:
        return Loadable.not_loaded([])

    try:
        rows = await api.get_students_by_class(year, level)
        students = [Student.model_validate(r) for r in rows]
    except (SchoolApiError, ValidationError) as e:
        logger.error("Students fetch error (class %s, %s): %s", level, year, e)
        notifier.error("Failed to load students")
        return Loadable.failed(str(e), [])

    return Loadable.loaded(students)


def filter_roster(students: Iterable[Student], department: str, section: str) -> List[Student]:
    """
    Students visible on screen: a section is required, the department narrows
    further when set, ordered by roll.
    """
    if not section:
        return []
    return sorted(
        (
            s for s in students
            if (not department or s.department == department) and s.section == section
        ),
        key=lambda s: s.roll,
    )
