# /app/services/access_code_service.py

"""
The access-code registry.

An access code is six characters from the base36 alphabet (0-9, A-Z). Codes
are stored uppercase and compared case-insensitively. Random generation does
not guarantee uniqueness on its own; `issue_unique_code` checks candidates
against the stored students and the Student.access_code unique constraint is
the final guard.
"""

import hmac
import logging
import secrets
import string
from typing import Optional

from .database_service import DatabaseService

logger = logging.getLogger(__name__)

ACCESS_CODE_ALPHABET = string.digits + string.ascii_uppercase
ACCESS_CODE_LENGTH = 6
MAX_GENERATION_ATTEMPTS = 20


def normalize_code(code: str) -> str:
    return code.strip().upper()


def is_well_formed(code: str) -> bool:
    normalized = normalize_code(code)
    return len(normalized) == ACCESS_CODE_LENGTH and all(c in ACCESS_CODE_ALPHABET for c in normalized)


def generate_code() -> str:
    return "".join(secrets.choice(ACCESS_CODE_ALPHABET) for _ in range(ACCESS_CODE_LENGTH))


class AccessCodeService:
    def __init__(self, db: DatabaseService):
        self.db = db

    def issue_code(self, requested_code: Optional[str] = None) -> str:
        """Returns the requested code (normalized) when given, otherwise a new random code."""
        if requested_code:
            return normalize_code(requested_code)
        return generate_code()

    def is_available(self, code: str) -> bool:
        return self.db.get_student_by_access_code(normalize_code(code)) is None

    def issue_unique_code(self) -> str:
        """
        Generates codes until one is not held by any stored student.

        Raises RuntimeError if every attempt collided, which would mean the
        code space is close to exhausted.
        """
        for attempt in range(1, MAX_GENERATION_ATTEMPTS + 1):
            candidate = self.issue_code()
            if self.is_available(candidate):
                return candidate
            logger.info("Generated access code collided with an existing student (attempt %d)", attempt)
        raise RuntimeError("Could not generate a unique access code")

    def verify(self, student_id: str, supplied_code: Optional[str]) -> bool:
        """
        Case-insensitive exact match against the student's stored code.
        A missing student or a missing code is a plain False.
        """
        if not supplied_code:
            return False
        student = self.db.get_student_by_id(student_id)
        if student is None:
            return False
        return hmac.compare_digest(normalize_code(supplied_code).encode("utf-8"), student.access_code.upper().encode("utf-8"))
