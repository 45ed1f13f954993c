from sqlalchemy import Column, Integer, String, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from database.db import Base


class Student(Base):
    __tablename__ = "students"  # student master table

    id = Column(Integer, primary_key=True, index=True)               # student ID (PK, server assigned)
    name = Column(String(100), nullable=False)                       # student name

    # ✅ one enrollment row per academic year (1:N)
    enrollments = relationship(
        "StudentEnrollment",
        back_populates="student",
        cascade="all, delete-orphan",
    )


class StudentEnrollment(Base):
    __tablename__ = "student_enrollments"  # yearly class placement
    __table_args__ = (
        UniqueConstraint("student_id", "year", name="unique_student_year"),
    )

    id = Column(Integer, primary_key=True, index=True)
    student_id = Column(Integer, ForeignKey("students.id"), nullable=False)
    year = Column(Integer, nullable=False)                           # academic year
    class_level = Column(Integer, nullable=False)                    # class 6 ~ 10
    roll = Column(Integer, nullable=False)                           # sort order inside a section
    section = Column(String(10), nullable=False)                     # e.g. A, B
    department = Column(String(50))                                  # Science / Humanities / Business (9~10 only)
    final_merit = Column(Integer)                                    # merit position after the final exam

    student = relationship("Student", back_populates="enrollments")
