import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from database.db import get_db
from dependencies.security import require_teacher
from models.teachers import Teacher as TeacherModel
from schemas.auth import LoginRequest, RefreshRequest, TeacherProfile, TokenPair
from schemas.common import SuccessEnvelope
from utils.security import (
    REFRESH,
    TokenError,
    create_access_token,
    create_refresh_token,
    decode_token,
    verify_password,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


def _issue_pair(teacher: TeacherModel) -> TokenPair:
    return TokenPair(
        access_token=create_access_token(teacher.id),
        refresh_token=create_refresh_token(teacher.id),
    )


# ✅ [LOGIN] teacher sign in
@router.post("/teacher/login", response_model=TokenPair)
def login(request: LoginRequest, db: Session = Depends(get_db)):
    teacher = db.query(TeacherModel).filter(TeacherModel.username == request.username).first()
    if teacher is None or not verify_password(request.password, teacher.password_hash):
        logger.info("Rejected login for %s", request.username)
        raise HTTPException(status_code=401, detail="Invalid username or password")
    if not teacher.available:
        raise HTTPException(status_code=403, detail="Account disabled")
    return _issue_pair(teacher)


# ✅ [REFRESH] rotate the access / refresh pair
@router.post("/teacher/refresh", response_model=TokenPair)
def refresh(request: RefreshRequest, db: Session = Depends(get_db)):
    try:
        payload = decode_token(request.refresh_token, expected_type=REFRESH)
    except TokenError as e:
        raise HTTPException(status_code=401, detail=str(e))

    teacher = (
        db.query(TeacherModel)
        .filter(TeacherModel.id == int(payload["sub"]), TeacherModel.available == True)  # noqa: E712
        .first()
    )
    if teacher is None:
        raise HTTPException(status_code=401, detail="Unauthorized")
    return _issue_pair(teacher)


# ✅ [READ] signed in teacher with assigned classes / sections
@router.get("/teacher/profile", response_model=SuccessEnvelope[TeacherProfile])
def profile(teacher: TeacherModel = Depends(require_teacher)):
    return {
        "success": True,
        "data": TeacherProfile.model_validate(teacher).model_dump(),
        "message": "Teacher profile"
    }
