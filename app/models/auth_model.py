# /app/models/auth_model.py

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from ..db.models.auth_models import UserRole


class OtpRequest(BaseModel):
    email: EmailStr


class OtpVerifyRequest(BaseModel):
    email: EmailStr
    otp: str = Field(..., description="The 6-digit code delivered by email.")


class RegisterRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=1)
    otp: str = Field(..., description="A fresh code from /auth/send-otp for this email.")


class ResetPasswordRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=1, description="The new password.")
    otp: str


class LoginRequest(BaseModel):
    email: str
    password: str


class TeacherUserCreate(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=1)


class User(BaseModel):
    """Public view of a credential. The password hash is never exposed."""
    model_config = ConfigDict(from_attributes=True)

    id: str
    email: EmailStr
    role: UserRole
    created_at: datetime


class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"
    role: UserRole
    expires_at: datetime


class TokenClaims(BaseModel):
    sub: str
    email: str
    role: UserRole


class MessageResponse(BaseModel):
    message: str
    notice: Optional[str] = None


class UsersCount(BaseModel):
    count: int
