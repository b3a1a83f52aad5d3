# /app/services/auth_service.py

"""
The auth session issuer: credential lifecycle and session tokens.

Password hashing happens in exactly one place, `hash_password`, called once
per registration and once per reset. The repositories only ever receive the
finished hash, so there is no save hook that could hash a value twice or not
at all.

Login answers INVALID_CREDENTIALS with one fixed message whether the email is
unknown or the password is wrong, so the response cannot be used to probe
which emails are registered.
"""

import logging
import uuid
from datetime import timedelta
from typing import List

from pydantic import ValidationError

from app.core.clock import Clock, utcnow
from app.core.errors import ErrorCode, ServiceResult
from app.core.security import JWTError, TokenCodec, hash_password, verify_password
from app.db.models.auth_models import User, UserRole

from ..models.auth_model import Token, TokenClaims
from .database_service import DatabaseService

logger = logging.getLogger(__name__)

SESSION_TTL = timedelta(hours=24)
INVALID_CREDENTIALS_MESSAGE = "Invalid credentials"


def normalize_email(email: str) -> str:
    return email.strip().lower()


class AuthService:
    def __init__(self, db: DatabaseService, codec: TokenCodec, session_ttl: timedelta = SESSION_TTL, clock: Clock = utcnow):
        self.db = db
        self.codec = codec
        self.session_ttl = session_ttl
        self.clock = clock

    def register(self, email: str, password: str, role: UserRole = UserRole.ADMIN) -> ServiceResult[User]:
        """
        Creates a credential. Registering an existing email is not an error: the
        stored credential is left untouched and the result carries an
        ALREADY_REGISTERED notice.
        """
        if not email or not password:
            return ServiceResult.failure(ErrorCode.INVALID_INPUT, "Email and password required.")
        email = normalize_email(email)

        existing = self.db.get_user_by_email(email)
        if existing is not None:
            return ServiceResult.success(existing, message="User already registered.", notice=ErrorCode.ALREADY_REGISTERED)

        new_user = self.db.add_user({
            "id": f"usr_{uuid.uuid4().hex[:12]}",
            "email": email,
            "hashed_password": hash_password(password),
            "role": role,
            "created_at": self.clock(),
        })
        if new_user is None:
            # A concurrent registration for the same email committed first.
            return ServiceResult.success(
                self.db.get_user_by_email(email), message="User already registered.", notice=ErrorCode.ALREADY_REGISTERED
            )

        logger.info("Registered %s user %s", role.value, new_user.id)
        return ServiceResult.success(new_user, message="Registered successfully!")

    def reset_password(self, email: str, new_password: str) -> ServiceResult[None]:
        if not email or not new_password:
            return ServiceResult.failure(ErrorCode.INVALID_INPUT, "Email and new password required.")

        user = self.db.get_user_by_email(normalize_email(email))
        if user is None:
            return ServiceResult.failure(ErrorCode.NOT_FOUND, "User not found.")

        self.db.update_password_hash(user.id, hash_password(new_password))
        logger.info("Password reset for user %s", user.id)
        return ServiceResult.success(message="Password reset successfully.")

    def login(self, email: str, password: str) -> ServiceResult[Token]:
        if not email or not password:
            return ServiceResult.failure(ErrorCode.INVALID_CREDENTIALS, INVALID_CREDENTIALS_MESSAGE)

        user = self.db.get_user_by_email(normalize_email(email))
        if user is None or not verify_password(password, user.hashed_password):
            return ServiceResult.failure(ErrorCode.INVALID_CREDENTIALS, INVALID_CREDENTIALS_MESSAGE)

        claims = TokenClaims(sub=user.id, email=user.email, role=user.role)
        access_token = self.codec.sign(claims.model_dump(mode="json"), self.session_ttl)
        return ServiceResult.success(Token(
            access_token=access_token,
            role=user.role,
            expires_at=self.clock() + self.session_ttl,
        ))

    def authorize(self, token: str) -> ServiceResult[TokenClaims]:
        """Checks signature and expiry only. Role checks belong to the caller."""
        if not token:
            return ServiceResult.failure(ErrorCode.INVALID_TOKEN, "Token is not valid.")
        try:
            payload = self.codec.verify(token)
            claims = TokenClaims.model_validate(payload)
        except (JWTError, ValidationError):
            return ServiceResult.failure(ErrorCode.INVALID_TOKEN, "Token is not valid.")
        return ServiceResult.success(claims)

    # --- Teacher-proxy accounts ---

    def list_users(self, role: UserRole) -> List[User]:
        return self.db.get_users_by_role(role)

    def delete_teacher_user(self, user_id: str) -> ServiceResult[None]:
        """Only teacher accounts can be removed here; an admin id reads as not found."""
        user = self.db.get_user_by_id(user_id)
        if user is None or user.role != UserRole.TEACHER:
            return ServiceResult.failure(ErrorCode.NOT_FOUND, "Teacher account not found.")
        self.db.delete_user(user_id)
        logger.info("Deleted teacher account %s", user_id)
        return ServiceResult.success(message="User deleted successfully!")

    def count_users(self) -> int:
        return self.db.count_users()
