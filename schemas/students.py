from pydantic import BaseModel, Field
from typing import Optional


# ✅ input: creates the student and its enrollment for the given year
class StudentCreate(BaseModel):
    name: str
    year: int = Field(..., ge=2000, le=2100)
    class_level: int = Field(..., ge=1, le=12)
    roll: int = Field(..., ge=1)
    section: str
    department: Optional[str] = None
