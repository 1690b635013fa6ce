from pydantic import BaseModel, EmailStr, field_validator
from typing import Optional
from datetime import datetime
from readtrack.core.roles import Role
from readtrack.schemas.common import CamelModel

class UserCreate(BaseModel):
    email: EmailStr
    password: str
    name: str

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        v = v.strip()
        if not (1 <= len(v) <= 255):
            raise ValueError("Name must be between 1 and 255 characters")
        return v

    @field_validator("password")
    @classmethod
    def validate_password(cls, v: str) -> str:
        if len(v) < 8:
            raise ValueError("Password must be at least 8 characters")
        if len(v.encode("utf-8")) > 72:
            raise ValueError("Password must be at most 72 bytes")
        return v

class UserBrief(CamelModel):
    id: int
    name: str
    email: str
    role: Role
    avatar_url: Optional[str] = None

class UserOut(UserBrief):
    points: int = 0
    level: int = 1
    created_at: Optional[datetime] = None

class UserUpdate(CamelModel):
    name: Optional[str] = None
    avatar_url: Optional[str] = None

class RoleIn(BaseModel):
    role: Role

class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"
