from sqlalchemy import Column, Integer, Float, DateTime, ForeignKey, UniqueConstraint, func
from database.db import Base


class Mark(Base):
    __tablename__ = "marks"  # per subject component marks
    __table_args__ = (
        UniqueConstraint("enrollment_id", "subject_id", "exam_id", name="unique_marks_entry"),
    )

    id = Column(Integer, primary_key=True, index=True)
    enrollment_id = Column(Integer, ForeignKey("student_enrollments.id"), nullable=False)
    subject_id = Column(Integer, ForeignKey("subjects.id"), nullable=False)
    exam_id = Column(Integer, ForeignKey("exams.id"), nullable=False)
    cq_marks = Column(Integer, nullable=False, default=0)
    mcq_marks = Column(Integer, nullable=False, default=0)
    practical_marks = Column(Integer, nullable=False, default=0)
    marks = Column(Integer, nullable=False, default=0)        # cq + mcq + practical
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())


class Gpa(Base):
    __tablename__ = "gpa"  # terminal exam results (JSC / SSC)

    id = Column(Integer, primary_key=True, index=True)
    student_id = Column(Integer, ForeignKey("students.id"), unique=True, nullable=False)
    jsc_gpa = Column(Float)
    ssc_gpa = Column(Float)
