from pydantic import BaseModel, Field
from typing import Optional


# ✅ input: POST / PUT body
class SubjectCreate(BaseModel):
    name: str                                        # subject name
    class_level: int = Field(..., ge=1, le=12)       # class the subject belongs to
    department: Optional[str] = None                 # only for department scoped subjects
    teacher_name: Optional[str] = None
    full_mark: int = Field(100, ge=0)
    pass_mark: int = Field(33, ge=0)
    cq_mark: Optional[int] = Field(None, ge=0)
    mcq_mark: Optional[int] = Field(None, ge=0)
    practical_mark: Optional[int] = Field(None, ge=0)


# ✅ output
class Subject(SubjectCreate):
    id: int

    class Config:
        from_attributes = True
