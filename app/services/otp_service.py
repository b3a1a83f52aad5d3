# /app/services/otp_service.py

"""
The OTP flow controller: generate -> deliver -> verify -> consume.

Per email address a code moves from Issued to exactly one of Verified
(matched, record deleted), Expired (seen after its expiry, record deleted) or
Invalidated (superseded by a newer request). A wrong guess leaves the record
in place so the user can retry until it expires. There is no attempt limit.

The "delete older codes, insert new one" step is not atomic across
concurrent requests for the same email; the last write wins, which still
leaves a single outstanding code.
"""

import hmac
import logging
import secrets
import uuid
from datetime import timedelta

from app.core.clock import Clock, utcnow
from app.core.errors import ErrorCode, ServiceResult
from app.core.security import hash_otp

from .database_service import DatabaseService
from .notifier import Notifier, NotifierError

logger = logging.getLogger(__name__)

OTP_DIGITS = 6
DEFAULT_OTP_TTL = timedelta(minutes=5)


def normalize_email(email: str) -> str:
    return email.strip().lower()


def generate_otp() -> str:
    """Uniform 6-digit decimal code; leading zeros are kept."""
    return f"{secrets.randbelow(10 ** OTP_DIGITS):0{OTP_DIGITS}d}"


class OtpService:
    def __init__(self, db: DatabaseService, notifier: Notifier, clock: Clock = utcnow, ttl: timedelta = DEFAULT_OTP_TTL):
        self.db = db
        self.notifier = notifier
        self.clock = clock
        self.ttl = ttl

    def request_code(self, email: str) -> ServiceResult[None]:
        if not email or not email.strip():
            return ServiceResult.failure(ErrorCode.INVALID_INPUT, "Email is required.")
        email = normalize_email(email)
        code = generate_otp()

        self.db.replace_otp({
            "id": f"otp_{uuid.uuid4().hex[:12]}",
            "email": email,
            "code_hash": hash_otp(code),
            "expires_at": self.clock() + self.ttl,
        })

        try:
            self.notifier.deliver(email, code)
        except NotifierError as e:
            # The stored code stays valid; the caller may simply ask again.
            logger.warning("OTP delivery to %s failed: %s", email, e)
            return ServiceResult.failure(ErrorCode.DELIVERY_FAILED, "Failed to send OTP.")

        return ServiceResult.success(message="OTP sent successfully.")

    def verify_code(self, email: str, supplied_code: str) -> ServiceResult[None]:
        if not email or not supplied_code:
            return ServiceResult.failure(ErrorCode.INVALID_INPUT, "Email and OTP are required.")
        email = normalize_email(email)

        record = self.db.get_latest_otp(email)
        if record is None:
            return ServiceResult.failure(ErrorCode.NOT_FOUND, "OTP not found.")

        if self.clock() > record.expires_at:
            self.db.delete_otps_for_email(email)
            return ServiceResult.failure(ErrorCode.EXPIRED, "OTP expired.")

        if not hmac.compare_digest(hash_otp(supplied_code.strip()), record.code_hash):
            return ServiceResult.failure(ErrorCode.INVALID_CODE, "Invalid OTP.")

        self.db.delete_otps_for_email(email)
        return ServiceResult.success(message="OTP verified successfully.")
