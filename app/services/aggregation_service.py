# /app/services/aggregation_service.py

"""
The aggregation engine.

Builds the per-teacher rating summaries and the enriched (name-joined) rating
views from the rating ledger. Nothing is cached: every call reads the ratings
afresh, and each teacher's summary is computed on its own so one teacher's
data never leaks into another's.

Averages over an empty set are reported as 0.0 rather than None, which keeps
the dashboard free of special cases.
"""

import logging
from typing import Dict, List, Optional

import pandas as pd

from app.core.clock import Clock, day_start, utcnow
from app.core.errors import ErrorCode, ServiceResult
from app.db.models.rating_models import Rating
from app.db.models.roster_models import Student, Teacher

from ..models.rating_model import RatingView, TeacherRatingEntry, TeacherRatingSummary
from ..models.teacher_model import SubjectAssignment
from .database_service import DatabaseService

logger = logging.getLogger(__name__)

UNKNOWN_STUDENT = "Unknown Student"
UNKNOWN_TEACHER = "Unknown Teacher"
UNKNOWN_SUBJECT = "Unknown Subject"
NOT_AVAILABLE = "N/A"

RATING_COLUMNS = ["id", "student_id", "teacher_id", "score", "created_at"]


def _ratings_frame(ratings: List[Rating]) -> pd.DataFrame:
    if not ratings:
        return pd.DataFrame(columns=RATING_COLUMNS)
    return pd.DataFrame([{c: getattr(r, c) for c in RATING_COLUMNS} for r in ratings])


def mean_or_zero(scores: pd.Series) -> float:
    if scores.empty:
        return 0.0
    return float(scores.astype(float).mean())


def subject_label(teacher: Optional[Teacher]) -> str:
    if teacher is None or not teacher.subjects:
        return UNKNOWN_SUBJECT
    return ", ".join(dict.fromkeys(s.subject for s in teacher.subjects))


class AggregationService:
    def __init__(self, db: DatabaseService, clock: Clock = utcnow):
        self.db = db
        self.clock = clock

    def _student_lookup(self) -> Dict[str, Student]:
        return {s.id: s for s in self.db.get_all_students()}

    def _summarize(self, teacher: Teacher, students: Dict[str, Student]) -> TeacherRatingSummary:
        ratings = self.db.get_ratings_for_teacher(teacher.id)
        df = _ratings_frame(ratings)
        today = day_start(self.clock())

        all_time_average = mean_or_zero(df["score"])
        today_scores = df.loc[pd.to_datetime(df["created_at"]) >= today, "score"] if not df.empty else df["score"]
        today_average = mean_or_zero(today_scores)

        entries = []
        for rating in ratings:
            student = students.get(rating.student_id)
            entries.append(TeacherRatingEntry(
                studentName=student.name if student else UNKNOWN_STUDENT,
                grade=str(student.grade) if student else NOT_AVAILABLE,
                score=rating.score,
                date=rating.created_at.date(),
            ))

        return TeacherRatingSummary(
            teacherId=teacher.id,
            name=teacher.name,
            subjects=[SubjectAssignment.model_validate(s) for s in teacher.subjects],
            allTimeAverage=all_time_average,
            todayAverage=today_average,
            ratingCount=len(ratings),
            ratings=entries,
        )

    def per_teacher_summary(self, teacher_id: str) -> ServiceResult[TeacherRatingSummary]:
        teacher = self.db.get_teacher_by_id(teacher_id)
        if teacher is None:
            return ServiceResult.failure(ErrorCode.NOT_FOUND, "Teacher not found.")
        return ServiceResult.success(self._summarize(teacher, self._student_lookup()))

    def list_summaries(self) -> List[TeacherRatingSummary]:
        students = self._student_lookup()
        return [self._summarize(teacher, students) for teacher in self.db.get_all_teachers()]

    def enriched_ratings(self) -> List[RatingView]:
        """Every stored rating joined with its student and teacher names."""
        students = self._student_lookup()
        teachers = {t.id: t for t in self.db.get_all_teachers()}
        views = []
        for rating in self.db.get_all_ratings():
            student = students.get(rating.student_id)
            teacher = teachers.get(rating.teacher_id)
            views.append(RatingView(
                id=rating.id,
                teacherName=teacher.name if teacher else UNKNOWN_TEACHER,
                subject=subject_label(teacher),
                studentName=student.name if student else UNKNOWN_STUDENT,
                grade=str(student.grade) if student else NOT_AVAILABLE,
                score=rating.score,
                date=rating.created_at.date(),
            ))
        return views
