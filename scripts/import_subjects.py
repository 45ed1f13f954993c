import csv
from sqlalchemy.orm import Session
from database.db import SessionLocal
from models.subjects import Subject as SubjectModel  # ✅ model import

CSV_PATH = "data/subjects.csv"  # ✅ file path


def _int_or_none(value):
    return int(value) if value not in (None, "") else None


def migrate_subjects(path: str = CSV_PATH):
    db: Session = SessionLocal()

    with open(path, newline="", encoding="utf-8-sig") as csvfile:
        reader = csv.DictReader(csvfile)
        for row in reader:
            subject = SubjectModel(
                id=int(row["id"]),                              # subject ID (PK)
                name=row["name"],                               # subject name
                class_level=int(row["class_level"]),            # class the subject belongs to
                department=row.get("department") or None,       # empty = every department
                teacher_name=row.get("teacher_name") or None,
                full_mark=int(row.get("full_mark") or 100),
                pass_mark=int(row.get("pass_mark") or 33),
                cq_mark=_int_or_none(row.get("cq_mark")),
                mcq_mark=_int_or_none(row.get("mcq_mark")),
                practical_mark=_int_or_none(row.get("practical_mark")),
            )
            db.merge(subject)

    db.commit()
    db.close()
    print("✅ subjects CSV → DB migration done")


if __name__ == "__main__":
    migrate_subjects()
