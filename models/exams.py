from sqlalchemy import Column, Integer, String, JSON, UniqueConstraint
from database.db import Base


class Exam(Base):
    __tablename__ = "exams"  # exams scheduled per year
    __table_args__ = (
        UniqueConstraint("exam_name", "exam_year", name="unique_exam_year"),
    )

    id = Column(Integer, primary_key=True, index=True)
    exam_name = Column(String(100), nullable=False)           # e.g. Half Yearly, Annual
    exam_year = Column(Integer, nullable=False)
    levels = Column(JSON, nullable=False, default=list)       # eligible class levels, e.g. [6, 7, 8]
