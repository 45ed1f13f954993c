import os

# must be set before config.settings is imported anywhere
os.environ["SQLALCHEMY_URL"] = "sqlite://"
os.environ["JWT_SECRET"] = "test-secret"

import pytest
from fastapi.testclient import TestClient

from database.db import Base, SessionLocal, engine
from models import exams, marks, students, subjects, teachers  # noqa: F401
from models.exams import Exam
from models.students import Student, StudentEnrollment
from models.subjects import Subject
from models.teachers import Teacher, TeacherLevel
from utils.security import create_access_token, hash_password

YEAR = 2024


@pytest.fixture
def db():
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db):
    from main import app

    with TestClient(app) as c:
        yield c


@pytest.fixture
def teacher(db):
    t = Teacher(
        name="Rahima Khatun",
        username="rahima",
        password_hash=hash_password("secret123"),
        designation="Assistant Teacher",
    )
    t.levels.append(TeacherLevel(class_name=8, section="A"))
    t.levels.append(TeacherLevel(class_name=10, section="A"))
    db.add(t)
    db.commit()
    db.refresh(t)
    return t


@pytest.fixture
def auth_headers(teacher):
    return {"Authorization": f"Bearer {create_access_token(teacher.id)}"}


@pytest.fixture
def school(db):
    """Class 8 and class 10 of YEAR with subjects, a Half Yearly exam and five students"""
    bangla = Subject(name="Bangla", class_level=8, full_mark=100, pass_mark=33, cq_mark=70, mcq_mark=30)
    math = Subject(name="Math", class_level=8, full_mark=100, pass_mark=33, cq_mark=40, mcq_mark=30, practical_mark=30)
    physics = Subject(
        name="Physics", class_level=10, department="Science",
        full_mark=100, pass_mark=33, cq_mark=50, mcq_mark=25, practical_mark=25,
    )
    exam = Exam(exam_name="Half Yearly", exam_year=YEAR, levels=[6, 7, 8, 9])
    db.add_all([bangla, math, physics, exam])

    roster = [
        ("Arif", 8, 2, "A", None),
        ("Bithi", 8, 1, "A", None),
        ("Chandan", 8, 1, "B", None),
        ("Dipa", 10, 1, "A", "Science"),
        ("Emon", 10, 2, "A", "Business"),
    ]
    created = {}
    for name, level, roll, section, department in roster:
        s = Student(name=name)
        s.enrollments.append(StudentEnrollment(
            year=YEAR, class_level=level, roll=roll, section=section, department=department,
        ))
        db.add(s)
        created[name] = s
    db.commit()

    return {
        "subjects": {"bangla": bangla.id, "math": math.id, "physics": physics.id},
        "exam": exam.id,
        "students": {name: s.id for name, s in created.items()},
    }
