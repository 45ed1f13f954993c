from typing import Optional, Annotated
from fastapi import Depends, Header, HTTPException
from sqlalchemy.orm import Session

from database.db import get_db
from models.teachers import Teacher as TeacherModel
from utils.security import TokenError, decode_token

AuthHeader = Annotated[Optional[str], Header(alias="Authorization")]


def _bearer_token(authorization: Optional[str]) -> str:
    if not authorization:
        raise HTTPException(
            status_code=401,
            detail="Missing Authorization header",
            headers={"WWW-Authenticate": "Bearer"},
        )

    # "Bearer <token>"
    try:
        scheme, token = authorization.split(" ", 1)
    except ValueError:
        raise HTTPException(
            status_code=401,
            detail="Invalid Authorization header format",
            headers={"WWW-Authenticate": "Bearer"},
        )

    if scheme.lower() != "bearer":
        raise HTTPException(
            status_code=401,
            detail="Invalid auth scheme",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return token.strip()


def require_teacher(authorization: AuthHeader = None, db: Session = Depends(get_db)) -> TeacherModel:
    token = _bearer_token(authorization)

    try:
        payload = decode_token(token)
    except TokenError as e:
        raise HTTPException(
            status_code=401,
            detail=str(e),
            headers={"WWW-Authenticate": "Bearer"},
        )

    if payload.get("role") != "teacher":
        raise HTTPException(status_code=401, detail="Unauthorized")

    teacher = (
        db.query(TeacherModel)
        .filter(TeacherModel.id == int(payload["sub"]), TeacherModel.available == True)  # noqa: E712
        .first()
    )
    if teacher is None:
        raise HTTPException(status_code=404, detail="Teacher not found")
    return teacher
