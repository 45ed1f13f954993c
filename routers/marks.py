import logging
from collections import OrderedDict
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import Response
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from database.db import get_db
from dependencies.security import require_teacher
from models.exams import Exam as ExamModel
from models.marks import Gpa as GpaModel, Mark as MarkModel
from models.students import Student as StudentModel, StudentEnrollment as EnrollmentModel
from models.subjects import Subject as SubjectModel
from schemas.marks import TERMINAL_EXAMS, AddGpaRequest, AddMarksRequest
from services.pdf_service import PDFService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/marks", tags=["marks"])

pdf_service = PDFService()


# ==========================================================
# [common] helpers
# ==========================================================
def clamp_component(value: int, maximum: Optional[int]) -> int:
    """A stored component never leaves [0, subject max]; an unset max means 0"""
    return max(0, min(int(value), int(maximum or 0)))


def _pdf_response(content: bytes, filename: str) -> Response:
    return Response(
        content=content,
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


def _yearly_sheets(db: Session, year: int, student_id: Optional[int] = None) -> list:
    """Subject x exam pivot per student with per exam totals"""
    query = (
        db.query(MarkModel, EnrollmentModel, StudentModel, SubjectModel, ExamModel)
        .join(EnrollmentModel, MarkModel.enrollment_id == EnrollmentModel.id)
        .join(StudentModel, EnrollmentModel.student_id == StudentModel.id)
        .join(SubjectModel, MarkModel.subject_id == SubjectModel.id)
        .join(ExamModel, MarkModel.exam_id == ExamModel.id)
        .filter(EnrollmentModel.year == year)
    )
    if student_id is not None:
        query = query.filter(EnrollmentModel.student_id == student_id)
    rows = query.order_by(StudentModel.name, SubjectModel.name, ExamModel.id).all()

    sheets = OrderedDict()
    for mark, enrollment, student, subject, exam in rows:
        sheet = sheets.get(student.id)
        if sheet is None:
            sheet = sheets[student.id] = {
                "student_id": student.id,
                "student_name": student.name,
                "class_level": enrollment.class_level,
                "roll": enrollment.roll,
                "year": enrollment.year,
                "final_merit": enrollment.final_merit,
                "exams": [],
                "subjects": OrderedDict(),
                "total_marks_per_exam": {},
            }
        if exam.exam_name not in sheet["exams"]:
            sheet["exams"].append(exam.exam_name)
        row = sheet["subjects"].setdefault(subject.name, {"subject": subject.name, "exam_marks": {}})
        row["exam_marks"][exam.exam_name] = mark.marks
        totals = sheet["total_marks_per_exam"]
        totals[exam.exam_name] = totals.get(exam.exam_name, 0) + mark.marks

    result = []
    for sheet in sheets.values():
        sheet["subjects"] = list(sheet["subjects"].values())
        result.append(sheet)
    return result


# ==========================================================
# [1] write routers (teacher only)
# ==========================================================

# ✅ [CREATE/UPDATE] batch upsert of component marks for one exam
@router.post("/addMarks")
def add_marks(payload: AddMarksRequest, db: Session = Depends(get_db), teacher=Depends(require_teacher)):
    logger.info(
        "addMarks by teacher %s: exam=%s year=%s students=%d",
        teacher.id, payload.examName, payload.year, len(payload.students),
    )
    exam = (
        db.query(ExamModel)
        .filter(ExamModel.exam_name == payload.examName, ExamModel.exam_year == payload.year)
        .first()
    )
    if exam is None:
        raise HTTPException(status_code=404, detail=f'Exam "{payload.examName}" not found for year {payload.year}')

    subject_ids = {m.subjectId for s in payload.students for m in s.subjectMarks}
    subjects = {
        s.id: s for s in db.query(SubjectModel).filter(SubjectModel.id.in_(subject_ids)).all()
    } if subject_ids else {}

    count = 0
    errors = []
    # rows touched in this batch; a repeated (student, subject) updates the same row
    pending = {}
    try:
        for student in payload.students:
            enrollment = (
                db.query(EnrollmentModel)
                .filter(EnrollmentModel.student_id == student.studentId, EnrollmentModel.year == payload.year)
                .first()
            )
            if enrollment is None:
                errors.append(f"Student {student.studentId} not enrolled in {payload.year}")
                continue

            for entry in student.subjectMarks:
                subject = subjects.get(entry.subjectId)
                if subject is None:
                    errors.append(
                        f"Failed to process student {student.studentId} subject {entry.subjectId}: subject not found"
                    )
                    continue

                key = (enrollment.id, subject.id)
                mark = pending.get(key)
                if mark is None:
                    mark = (
                        db.query(MarkModel)
                        .filter(
                            MarkModel.enrollment_id == enrollment.id,
                            MarkModel.subject_id == subject.id,
                            MarkModel.exam_id == exam.id,
                        )
                        .first()
                    )
                if mark is None:
                    mark = MarkModel(enrollment_id=enrollment.id, subject_id=subject.id, exam_id=exam.id)
                    db.add(mark)
                pending[key] = mark

                mark.cq_marks = clamp_component(entry.cq_marks, subject.cq_mark)
                mark.mcq_marks = clamp_component(entry.mcq_marks, subject.mcq_mark)
                mark.practical_marks = clamp_component(entry.practical_marks, subject.practical_mark)
                mark.marks = mark.cq_marks + mark.mcq_marks + mark.practical_marks
                count += 1

        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception("addMarks failed, batch rolled back")
        raise

    if errors:
        logger.warning("addMarks finished with %d errors", len(errors))
    return {
        "success": True,
        "message": f"Processed {count} mark records",
        "count": count,
        "errors": errors or None,
    }


# ✅ [CREATE/UPDATE] batch upsert of JSC / SSC GPA
@router.post("/addGPA")
def add_gpa(payload: AddGpaRequest, db: Session = Depends(get_db), teacher=Depends(require_teacher)):
    if payload.examName not in TERMINAL_EXAMS:
        raise HTTPException(status_code=400, detail="examName must be JSC or SSC")
    column = "jsc_gpa" if payload.examName == "JSC" else "ssc_gpa"

    saved = 0
    skipped = []
    for entry in payload.students:
        if db.get(StudentModel, entry.studentId) is None:
            logger.warning("addGPA: student %s does not exist, skipped", entry.studentId)
            skipped.append(entry.studentId)
            continue

        row = db.query(GpaModel).filter(GpaModel.student_id == entry.studentId).first()
        if row is None:
            row = GpaModel(student_id=entry.studentId)
            db.add(row)
        setattr(row, column, entry.gpa)
        saved += 1

    db.commit()
    logger.info("addGPA by teacher %s: %s saved=%d skipped=%d", teacher.id, payload.examName, saved, len(skipped))
    return {
        "success": True,
        "message": "GPA saved successfully",
        "count": saved,
        "skipped": skipped or None,
    }


# ==========================================================
# [2] read routers
# ==========================================================

# ✅ [READ] every enrolled student of a class with every class subject's stored marks
@router.get("/getClassMarks/{level}/{year}/{exam}")
def get_class_marks(level: int, year: int, exam: str, db: Session = Depends(get_db)):
    enrolled = (
        db.query(StudentModel, EnrollmentModel)
        .join(EnrollmentModel, EnrollmentModel.student_id == StudentModel.id)
        .filter(EnrollmentModel.class_level == level, EnrollmentModel.year == year)
        .order_by(EnrollmentModel.section, EnrollmentModel.roll)
        .all()
    )
    if not enrolled:
        raise HTTPException(status_code=404, detail="No students found for the specified class and year.")

    subjects = (
        db.query(SubjectModel)
        .filter(SubjectModel.class_level == level)
        .order_by(SubjectModel.name)
        .all()
    )
    exam_row = db.query(ExamModel).filter(ExamModel.exam_name == exam, ExamModel.exam_year == year).first()

    stored = {}
    if exam_row is not None:
        enrollment_ids = [e.id for _, e in enrolled]
        for m in db.query(MarkModel).filter(
            MarkModel.exam_id == exam_row.id, MarkModel.enrollment_id.in_(enrollment_ids)
        ):
            stored[(m.enrollment_id, m.subject_id)] = m

    data = []
    for student, enrollment in enrolled:
        marks = []
        for subject in subjects:
            m = stored.get((enrollment.id, subject.id))
            marks.append({
                "subject_id": subject.id,
                "subject": subject.name,
                "cq_marks": m.cq_marks if m else None,
                "mcq_marks": m.mcq_marks if m else None,
                "practical_marks": m.practical_marks if m else None,
                "marks": m.marks if m else None,
            })
        data.append({
            "student_id": student.id,
            "name": student.name,
            "roll": enrollment.roll,
            "class": enrollment.class_level,
            "department": enrollment.department,
            "section": enrollment.section,
            "marks": marks,
        })

    return {"success": True, "data": data}


# ✅ [READ] JSC / SSC GPA of every student enrolled in the year
@router.get("/getGPA/{year}")
def get_gpa(year: int, db: Session = Depends(get_db)):
    rows = (
        db.query(StudentModel, EnrollmentModel, GpaModel)
        .join(EnrollmentModel, EnrollmentModel.student_id == StudentModel.id)
        .outerjoin(GpaModel, GpaModel.student_id == StudentModel.id)
        .filter(EnrollmentModel.year == year)
        .order_by(EnrollmentModel.class_level, EnrollmentModel.roll)
        .all()
    )
    if not rows:
        raise HTTPException(status_code=404, detail="No GPA records found for the specified year")

    return {
        "success": True,
        "data": [
            {
                "student_id": s.id,
                "student_name": s.name,
                "class": e.class_level,
                "roll": e.roll,
                "section": e.section,
                "jsc_gpa": g.jsc_gpa if g else None,
                "ssc_gpa": g.ssc_gpa if g else None,
            }
            for s, e, g in rows
        ],
    }


# ✅ [READ] one student's marks for one exam
@router.get("/getMarks/{student_id}/{year}/{exam}")
def get_student_marks(student_id: int, year: int, exam: str, db: Session = Depends(get_db)):
    rows = (
        db.query(MarkModel, EnrollmentModel, StudentModel, SubjectModel)
        .join(EnrollmentModel, MarkModel.enrollment_id == EnrollmentModel.id)
        .join(StudentModel, EnrollmentModel.student_id == StudentModel.id)
        .join(SubjectModel, MarkModel.subject_id == SubjectModel.id)
        .join(ExamModel, MarkModel.exam_id == ExamModel.id)
        .filter(
            EnrollmentModel.student_id == student_id,
            EnrollmentModel.year == year,
            ExamModel.exam_name == exam,
        )
        .order_by(SubjectModel.name)
        .all()
    )
    if not rows:
        raise HTTPException(status_code=404, detail="No marks found")

    return {
        "success": True,
        "data": [
            {
                "name": s.name,
                "subject": sub.name,
                "full_mark": sub.full_mark,
                "pass_mark": sub.pass_mark,
                "exam": exam,
                "cq_marks": m.cq_marks,
                "mcq_marks": m.mcq_marks,
                "practical_marks": m.practical_marks,
                "marks": m.marks,
                "class": e.class_level,
                "roll": e.roll,
                "year": e.year,
            }
            for m, e, s, sub in rows
        ],
    }


# ==========================================================
# [3] marksheets
# ==========================================================

# ✅ [PDF] single exam transcript
@router.get("/markSheet/{student_id}/marks/{year}/{exam}/download")
def download_exam_marksheet(student_id: int, year: int, exam: str, db: Session = Depends(get_db)):
    data = get_student_marks(student_id, year, exam, db)["data"]
    first = data[0]
    context = {
        "student_name": first["name"],
        "class_level": first["class"],
        "roll": first["roll"],
        "year": year,
        "exam": exam,
        "rows": data,
        "total_marks": sum(r["marks"] for r in data),
    }
    content = pdf_service.generate_exam_marksheet_pdf(context)
    return _pdf_response(content, f"marksheet_{student_id}_{exam}_{year}.pdf")


# ✅ [PDF] every student's yearly marksheet
@router.get("/all/{year}")
def download_all_marksheets(year: int, db: Session = Depends(get_db)):
    sheets = _yearly_sheets(db, year)
    if not sheets:
        raise HTTPException(status_code=404, detail="No marks found")
    content = pdf_service.generate_yearly_marksheets_pdf(sheets)
    return _pdf_response(content, f"all_marksheets_{year}.pdf")


# ✅ [READ] yearly marksheet preview (subject x exam)
@router.get("/{student_id}/{year}/preview")
def preview_marksheet(student_id: int, year: int, db: Session = Depends(get_db)):
    sheets = _yearly_sheets(db, year, student_id)
    if not sheets:
        raise HTTPException(status_code=404, detail="No marks found")
    return {"success": True, "data": sheets[0]}


# ✅ [PDF] yearly marksheet of one student
@router.get("/{student_id}/{year}/download")
def download_marksheet(student_id: int, year: int, db: Session = Depends(get_db)):
    sheets = _yearly_sheets(db, year, student_id)
    if not sheets:
        raise HTTPException(status_code=404, detail="No marks found")
    content = pdf_service.generate_yearly_marksheets_pdf(sheets)
    return _pdf_response(content, f"marksheet_{student_id}_{year}.pdf")
