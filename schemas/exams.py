from pydantic import BaseModel, Field
from typing import List


# ✅ input
class ExamCreate(BaseModel):
    exam_name: str
    exam_year: int = Field(..., ge=2000, le=2100)
    levels: List[int] = []                   # eligible class levels


# ✅ output
class Exam(ExamCreate):
    id: int

    class Config:
        from_attributes = True
