from pydantic import BaseModel
from typing import List, Optional


# ✅ request bodies
class LoginRequest(BaseModel):
    username: str
    password: str


class RefreshRequest(BaseModel):
    refresh_token: str


# ✅ responses
class TokenPair(BaseModel):
    access_token: str
    refresh_token: str
    token_type: str = "bearer"


class TeacherLevelOut(BaseModel):
    class_name: int
    section: str

    class Config:
        from_attributes = True


class TeacherProfile(BaseModel):
    id: int
    name: str
    username: str
    designation: Optional[str] = None
    levels: List[TeacherLevelOut] = []

    class Config:
        from_attributes = True
