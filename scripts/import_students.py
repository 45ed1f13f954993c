import csv
from sqlalchemy.orm import Session
from database.db import SessionLocal
from models.students import Student, StudentEnrollment  # ✅ model import

CSV_PATH = "data/students.csv"  # ✅ file path


def migrate_students(path: str = CSV_PATH):
    """
    One row per (student, year):
    student_id,name,year,class_level,roll,section,department
    """
    db: Session = SessionLocal()
    count = 0

    try:
        with open(path, newline="", encoding="utf-8-sig") as csvfile:
            reader = csv.DictReader(csvfile)
            for row in reader:
                student = db.get(Student, int(row["student_id"]))
                if student is None:
                    student = Student(id=int(row["student_id"]), name=row["name"])
                    db.add(student)
                    db.flush()

                enrollment = (
                    db.query(StudentEnrollment)
                    .filter(
                        StudentEnrollment.student_id == student.id,
                        StudentEnrollment.year == int(row["year"]),
                    )
                    .first()
                )
                if enrollment is None:
                    enrollment = StudentEnrollment(student_id=student.id, year=int(row["year"]))
                    db.add(enrollment)

                enrollment.class_level = int(row["class_level"])   # class 6 ~ 10
                enrollment.roll = int(row["roll"])
                enrollment.section = row["section"]
                enrollment.department = row.get("department") or None   # empty = no department
                count += 1

        db.commit()
    finally:
        db.close()
    print(f"✅ students CSV → DB migration done ({count} rows)")


if __name__ == "__main__":
    migrate_students()
