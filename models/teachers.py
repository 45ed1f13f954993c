from sqlalchemy import Column, Integer, String, Boolean, ForeignKey
from sqlalchemy.orm import relationship
from database.db import Base


class Teacher(Base):
    __tablename__ = "teachers"

    id = Column(Integer, primary_key=True, index=True)      # teacher ID (PK)
    name = Column(String(100), nullable=False)
    username = Column(String(50), unique=True, nullable=False)
    password_hash = Column(String(255), nullable=False)
    designation = Column(String(100))
    available = Column(Boolean, default=True, nullable=False)  # disabled accounts cannot sign in

    # ✅ assigned (class, section) pairs (1:N)
    levels = relationship(
        "TeacherLevel",
        back_populates="teacher",
        cascade="all, delete-orphan",
    )


class TeacherLevel(Base):
    __tablename__ = "teacher_levels"

    id = Column(Integer, primary_key=True, index=True)
    teacher_id = Column(Integer, ForeignKey("teachers.id"), nullable=False)
    class_name = Column(Integer, nullable=False)            # class level, e.g. 8
    section = Column(String(10), nullable=False)

    teacher = relationship("Teacher", back_populates="levels")
