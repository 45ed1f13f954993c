from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from database.db import get_db
from models.exams import Exam as ExamModel
from schemas.exams import ExamCreate

router = APIRouter(prefix="/exams", tags=["exams"])


def exam_to_dict(e: ExamModel) -> dict:
    return {
        "id": e.id,
        "exam_name": e.exam_name,
        "exam_year": e.exam_year,
        "levels": list(e.levels or []),
    }


# ✅ [READ] every exam, newest year first
@router.get("/getExams")
def read_exams(db: Session = Depends(get_db)):
    records = db.query(ExamModel).order_by(ExamModel.exam_year.desc(), ExamModel.id).all()
    return {
        "success": True,
        "data": [exam_to_dict(r) for r in records],
        "message": "Exams loaded"
    }


# ✅ [CREATE] schedule an exam for a year
@router.post("/addExam", status_code=201)
def create_exam(exam: ExamCreate, db: Session = Depends(get_db)):
    exists = (
        db.query(ExamModel)
        .filter(ExamModel.exam_name == exam.exam_name, ExamModel.exam_year == exam.exam_year)
        .first()
    )
    if exists:
        raise HTTPException(status_code=409, detail=f'Exam "{exam.exam_name}" already exists for {exam.exam_year}')

    db_exam = ExamModel(**exam.model_dump())
    db.add(db_exam)
    db.commit()
    db.refresh(db_exam)
    return {
        "success": True,
        "data": exam_to_dict(db_exam),
        "message": "Exam added successfully"
    }


# ✅ [DELETE] remove an exam
@router.delete("/deleteExam/{exam_id}")
def delete_exam(exam_id: int, db: Session = Depends(get_db)):
    exam = db.query(ExamModel).filter(ExamModel.id == exam_id).first()
    if exam is None:
        raise HTTPException(status_code=404, detail="Exam not found")

    db.delete(exam)
    db.commit()
    return {
        "success": True,
        "data": {"exam_id": exam_id},
        "message": "Exam deleted successfully"
    }
