# /app/services/rating_service.py

"""
The rating ledger.

`submit` enforces at most one rating per (student, teacher) pair per UTC
calendar day. The window query before the insert is only a fast path: two
concurrent submissions can both pass it, and the database's
`uq_rating_student_teacher_day` constraint decides which one lands. Either way
the loser gets DUPLICATE_SUBMISSION.
"""

import logging
import uuid
from typing import List

from app.core.clock import Clock, ONE_DAY, day_start, utcnow
from app.core.errors import ErrorCode, ServiceResult
from app.db.models.rating_models import Rating

from .access_code_service import AccessCodeService
from .database_service import DatabaseService

logger = logging.getLogger(__name__)

MIN_SCORE = 1
MAX_SCORE = 5

DUPLICATE_MESSAGE = "Already rated this teacher today."
UNAUTHORIZED_MESSAGE = "Invalid student code. Rating denied."


def is_valid_score(score) -> bool:
    # bool is a subclass of int and must not count as a score
    return isinstance(score, int) and not isinstance(score, bool) and MIN_SCORE <= score <= MAX_SCORE


class RatingService:
    def __init__(self, db: DatabaseService, clock: Clock = utcnow):
        self.db = db
        self.clock = clock
        self.access_codes = AccessCodeService(db)

    def submit(self, student_id: str, teacher_id: str, score, supplied_code: str) -> ServiceResult[Rating]:
        student = self.db.get_student_by_id(student_id)
        if student is None:
            return ServiceResult.failure(ErrorCode.NOT_FOUND, "Student not found.")

        if not self.access_codes.verify(student_id, supplied_code):
            logger.info("Rejected rating for student %s: access code mismatch", student_id)
            return ServiceResult.failure(ErrorCode.UNAUTHORIZED, UNAUTHORIZED_MESSAGE)

        if not is_valid_score(score):
            return ServiceResult.failure(
                ErrorCode.INVALID_INPUT, f"Score must be an integer between {MIN_SCORE} and {MAX_SCORE}."
            )

        if self.db.get_teacher_by_id(teacher_id) is None:
            return ServiceResult.failure(ErrorCode.NOT_FOUND, "Teacher not found.")

        now = self.clock()
        bucket_start = day_start(now)
        existing = self.db.find_rating_in_window(student_id, teacher_id, bucket_start, bucket_start + ONE_DAY)
        if existing is not None:
            return ServiceResult.failure(ErrorCode.DUPLICATE_SUBMISSION, DUPLICATE_MESSAGE)

        new_rating = self.db.add_rating({
            "id": f"rat_{uuid.uuid4().hex[:12]}",
            "student_id": student_id,
            "teacher_id": teacher_id,
            "score": score,
            "created_at": now,
            "day_bucket": bucket_start.date(),
        })
        if new_rating is None:
            # Lost the race to a concurrent submission for the same pair and day.
            logger.info("Concurrent duplicate rating for student %s / teacher %s", student_id, teacher_id)
            return ServiceResult.failure(ErrorCode.DUPLICATE_SUBMISSION, DUPLICATE_MESSAGE)

        logger.info("Rating %s recorded for teacher %s", new_rating.id, teacher_id)
        return ServiceResult.success(new_rating, message="Rating submitted!")

    def list_for_student_today(self, student_id: str) -> List[Rating]:
        return self.db.get_ratings_for_student_since(student_id, day_start(self.clock()))
