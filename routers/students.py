from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from database.db import get_db
from models.students import Student as StudentModel, StudentEnrollment as EnrollmentModel
from schemas.students import StudentCreate

router = APIRouter(prefix="/students", tags=["students"])


def roster_row(student: StudentModel, enrollment: EnrollmentModel) -> dict:
    return {
        "student_id": student.id,
        "name": student.name,
        "roll": enrollment.roll,
        "section": enrollment.section,
        "class": enrollment.class_level,
        "department": enrollment.department,
    }


# ✅ [READ] full roster of a class for a year (not filtered by section / department)
@router.get("/getStudentsByClass/{year}/{level}")
def get_students_by_class(year: int, level: int, db: Session = Depends(get_db)):
    rows = (
        db.query(StudentModel, EnrollmentModel)
        .join(EnrollmentModel, EnrollmentModel.student_id == StudentModel.id)
        .filter(EnrollmentModel.year == year, EnrollmentModel.class_level == level)
        .order_by(EnrollmentModel.section, EnrollmentModel.roll)
        .all()
    )
    return {
        "success": True,
        "data": [roster_row(s, e) for s, e in rows],
        "message": f"{len(rows)} students in class {level} ({year})"
    }


# ✅ [CREATE] admit a student and enroll for the year
@router.post("/addStudent", status_code=201)
def create_student(payload: StudentCreate, db: Session = Depends(get_db)):
    student = StudentModel(name=payload.name)
    enrollment = EnrollmentModel(
        year=payload.year,
        class_level=payload.class_level,
        roll=payload.roll,
        section=payload.section,
        department=payload.department or None,
    )
    student.enrollments.append(enrollment)
    db.add(student)
    db.commit()
    db.refresh(student)
    return {
        "success": True,
        "data": roster_row(student, enrollment),
        "message": "Student added successfully"
    }
