# /app/db/models/rating_models.py

"""
SQLAlchemy model for a single submitted rating.

A Rating only references its Student and Teacher by id. It declares no
relationships; any view that needs names is assembled separately by the
aggregation service.
"""

from sqlalchemy import Column, String, Integer, Date, DateTime, ForeignKey, UniqueConstraint, CheckConstraint

from ..base_class import Base


class Rating(Base):
    __table_args__ = (
        # The authoritative guard for one rating per pair per UTC day. The
        # service-level pre-check only saves a round trip in the common case.
        UniqueConstraint("student_id", "teacher_id", "day_bucket", name="uq_rating_student_teacher_day"),
        CheckConstraint("score >= 1 AND score <= 5", name="ck_rating_score_range"),
    )

    id = Column(String, primary_key=True, index=True)
    student_id = Column(String, ForeignKey("students.id"), nullable=False, index=True)
    teacher_id = Column(String, ForeignKey("teachers.id"), nullable=False, index=True)
    score = Column(Integer, nullable=False)
    # Naive UTC timestamp of the submission.
    created_at = Column(DateTime, nullable=False, index=True)
    # UTC calendar date of created_at.
    day_bucket = Column(Date, nullable=False)
