# /app/db/models/auth_models.py

"""
SQLAlchemy models owned by the auth subsystem: administrator/teacher-proxy
credentials and the short-lived OTP records used to gate registration and
password resets.
"""

import enum

from sqlalchemy import Column, String, DateTime, Enum

from ..base_class import Base


class UserRole(str, enum.Enum):
    ADMIN = "admin"
    TEACHER = "teacher"


class User(Base):
    id = Column(String, primary_key=True, index=True)
    # Always stored lowercase.
    email = Column(String, unique=True, index=True, nullable=False)
    hashed_password = Column(String, nullable=False)
    role = Column(Enum(UserRole, native_enum=False, values_callable=lambda e: [m.value for m in e]), nullable=False, default=UserRole.ADMIN)
    created_at = Column(DateTime, nullable=False)


class OtpCode(Base):
    """
    One outstanding passcode for an email address.

    Only the sha256 digest of the code is stored. Email is deliberately not
    unique: a new request deletes older rows and inserts a fresh one.
    """
    __tablename__ = "otp_codes"

    id = Column(String, primary_key=True, index=True)
    email = Column(String, index=True, nullable=False)
    code_hash = Column(String, nullable=False)
    expires_at = Column(DateTime, nullable=False)
