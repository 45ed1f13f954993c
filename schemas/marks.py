"""
schemas/marks.py

Request bodies of the marks workflow. Field names follow the camelCase
contract the portal front end already posts (studentId, subjectMarks, examName).
"""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

TERMINAL_EXAMS = ("JSC", "SSC")
MAX_GPA = 5.0


# ==========================================================
# [Marks] standard exams
# ==========================================================

class SubjectMarkIn(BaseModel):
    subjectId: int
    cq_marks: int = 0
    mcq_marks: int = 0
    practical_marks: int = 0

    @field_validator("cq_marks", "mcq_marks", "practical_marks", mode="before")
    @classmethod
    def _none_as_zero(cls, v):
        return 0 if v is None or v == "" else v


class StudentMarksIn(BaseModel):
    studentId: int
    subjectMarks: List[SubjectMarkIn]


class AddMarksRequest(BaseModel):
    students: List[StudentMarksIn]
    examName: str
    year: int

    model_config = ConfigDict(extra="ignore")


# ==========================================================
# [GPA] terminal exams
# ==========================================================

class StudentGpaIn(BaseModel):
    studentId: int
    gpa: Optional[float] = None

    @field_validator("gpa", mode="before")
    @classmethod
    def _blank_as_none(cls, v):
        return None if v == "" else v

    @field_validator("gpa")
    @classmethod
    def _clamp(cls, v):
        # persisted values always live in [0.00, 5.00]
        if v is None:
            return 0.0
        return round(min(MAX_GPA, max(0.0, v)), 2)


class AddGpaRequest(BaseModel):
    students: List[StudentGpaIn]
    examName: str = Field(..., description="JSC or SSC")

    model_config = ConfigDict(extra="ignore")
