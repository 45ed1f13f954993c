"""
Client side views of the backend rows used by the marks entry screen.

Class levels are kept as strings because the form works with select values
("8", "10"); the backend sends them as integers.
"""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

COMPONENTS = ("cq_marks", "mcq_marks", "practical_marks")

# mark component -> subject column holding its maximum
COMPONENT_MAX_FIELDS = {
    "cq_marks": "cq_mark",
    "mcq_marks": "mcq_mark",
    "practical_marks": "practical_mark",
}


class _Row(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore", frozen=True)


class Student(_Row):
    student_id: int
    name: str
    roll: int
    section: Optional[str] = None
    class_level: str = Field(alias="class")
    department: Optional[str] = None

    @field_validator("class_level", mode="before")
    @classmethod
    def _level_as_str(cls, v):
        return str(v)


class Subject(_Row):
    id: int
    name: str
    class_level: str = Field(alias="class")
    department: Optional[str] = None
    teacher_name: Optional[str] = None
    full_mark: Optional[int] = None
    pass_mark: Optional[int] = None
    cq_mark: Optional[int] = None
    mcq_mark: Optional[int] = None
    practical_mark: Optional[int] = None

    @field_validator("class_level", mode="before")
    @classmethod
    def _level_as_str(cls, v):
        return str(v)

    def component_max(self, component: str) -> int:
        return getattr(self, COMPONENT_MAX_FIELDS[component]) or 0

    @property
    def gradable(self) -> bool:
        """Positive full mark and at least one component with a maximum"""
        return (self.full_mark or 0) > 0 and any(self.component_max(c) for c in COMPONENTS)

    def restricted_for(self, student: Student) -> bool:
        return bool(self.department) and self.department != student.department


class Exam(_Row):
    exam_name: str
    exam_year: int
    levels: List[int] = []


class TeacherLevel(_Row):
    class_name: int
    section: str


class SubjectMarks(_Row):
    subject_id: int
    cq_marks: int = 0
    mcq_marks: int = 0
    practical_marks: int = 0
