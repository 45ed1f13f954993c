from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from database.db import get_db
from models.subjects import Subject as SubjectModel
from schemas.subjects import SubjectCreate

router = APIRouter(prefix="/sub", tags=["subjects"])


def subject_to_dict(s: SubjectModel) -> dict:
    return {
        "id": s.id,
        "name": s.name,
        "class": s.class_level,
        "department": s.department,
        "teacher_name": s.teacher_name,
        "full_mark": s.full_mark,
        "pass_mark": s.pass_mark,
        "cq_mark": s.cq_mark,
        "mcq_mark": s.mcq_mark,
        "practical_mark": s.practical_mark,
    }


# ✅ [READ] all subjects (every class)
@router.get("/getSubjects")
def read_subjects(db: Session = Depends(get_db)):
    records = db.query(SubjectModel).order_by(SubjectModel.class_level, SubjectModel.name).all()
    return {
        "success": True,
        "data": [subject_to_dict(r) for r in records],
        "message": "Subjects loaded"
    }


# ✅ [CREATE] add a subject
@router.post("/addSubject", status_code=201)
def create_subject(subject: SubjectCreate, db: Session = Depends(get_db)):
    db_subject = SubjectModel(**subject.model_dump())
    db.add(db_subject)
    db.commit()
    db.refresh(db_subject)
    return {
        "success": True,
        "data": subject_to_dict(db_subject),
        "message": "Subject added successfully"
    }


# ✅ [UPDATE] edit a subject
@router.put("/updateSubject/{subject_id}")
def update_subject(subject_id: int, updated: SubjectCreate, db: Session = Depends(get_db)):
    subject = db.query(SubjectModel).filter(SubjectModel.id == subject_id).first()
    if subject is None:
        raise HTTPException(status_code=404, detail="Subject not found")

    for key, value in updated.model_dump().items():
        setattr(subject, key, value)

    db.commit()
    db.refresh(subject)
    return {
        "success": True,
        "data": subject_to_dict(subject),
        "message": "Subject updated successfully"
    }


# ✅ [DELETE] remove a subject
@router.delete("/deleteSubject/{subject_id}")
def delete_subject(subject_id: int, db: Session = Depends(get_db)):
    subject = db.query(SubjectModel).filter(SubjectModel.id == subject_id).first()
    if subject is None:
        raise HTTPException(status_code=404, detail="Subject not found")

    db.delete(subject)
    db.commit()
    return {
        "success": True,
        "data": {"subject_id": subject_id},
        "message": "Subject deleted successfully"
    }
