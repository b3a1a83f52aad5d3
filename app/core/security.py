# /app/core/security.py

"""
Cryptographic helpers for the auth subsystem.

Provides:
 - hash_password(password) -> str
 - verify_password(plain_password, hashed_password) -> bool
 - hash_otp(code) -> str
 - TokenCodec: sign / verify for the HS256 session tokens

Passwords go through passlib's CryptContext. New hashes use pbkdf2_sha256;
bcrypt stays in the context so hashes carried over from older deployments
still verify. OTP codes are short-lived, so a plain sha256 digest is enough.
"""

import hashlib
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

from jose import JWTError, jwt
from passlib.context import CryptContext

pwd_context = CryptContext(schemes=["pbkdf2_sha256", "bcrypt"], deprecated="auto", default="pbkdf2_sha256")


def hash_password(password: str) -> str:
    """Returns a salted one-way hash for storage. Call exactly once per create/reset."""
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    if not hashed_password:
        return False
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except (ValueError, TypeError):
        # Unrecognised or malformed stored hash
        return False


def hash_otp(code: str) -> str:
    return hashlib.sha256(code.encode("utf-8")).hexdigest()


class TokenCodec:
    """Signs and verifies session tokens with a shared secret."""

    def __init__(self, secret: str, algorithm: str = "HS256"):
        self.secret = secret
        self.algorithm = algorithm

    def sign(self, claims: Dict[str, Any], expires_delta: timedelta, now: Optional[datetime] = None) -> str:
        issued_at = now or datetime.now(timezone.utc)
        to_encode = dict(claims)
        to_encode.update({"exp": issued_at + expires_delta, "iat": issued_at})
        return jwt.encode(to_encode, self.secret, algorithm=self.algorithm)

    def verify(self, token: str) -> Dict[str, Any]:
        """Returns the decoded claims. Raises JWTError on a bad signature or an expired token."""
        return jwt.decode(token, self.secret, algorithms=[self.algorithm])


__all__ = ["JWTError", "TokenCodec", "hash_otp", "hash_password", "verify_password", "pwd_context"]
