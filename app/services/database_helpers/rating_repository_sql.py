# /app/services/database_helpers/rating_repository_sql.py

"""
Raw SQLAlchemy queries for the Rating table.

`add_rating` is the only place that turns the
`uq_rating_student_teacher_day` constraint into a normal return value: a
violation rolls the session back and yields None so the caller can report a
duplicate without an exception crossing the service boundary.
"""

from datetime import datetime
from typing import Dict, List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.db.models.rating_models import Rating


class RatingRepositorySQL:
    def __init__(self, db_session: Session):
        self.db = db_session

    def add_rating(self, record: Dict) -> Optional[Rating]:
        new_rating = Rating(**record)
        self.db.add(new_rating)
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            return None
        self.db.refresh(new_rating)
        return new_rating

    def find_rating_in_window(self, student_id: str, teacher_id: str, start: datetime, end: datetime) -> Optional[Rating]:
        """Returns a rating for the pair with start <= created_at < end, if any."""
        return (
            self.db.query(Rating)
            .filter(
                Rating.student_id == student_id,
                Rating.teacher_id == teacher_id,
                Rating.created_at >= start,
                Rating.created_at < end,
            )
            .first()
        )

    def get_ratings_for_student_since(self, student_id: str, since: datetime) -> List[Rating]:
        return (
            self.db.query(Rating)
            .filter(Rating.student_id == student_id, Rating.created_at >= since)
            .order_by(Rating.created_at)
            .all()
        )

    def get_ratings_for_teacher(self, teacher_id: str) -> List[Rating]:
        return (
            self.db.query(Rating)
            .filter(Rating.teacher_id == teacher_id)
            .order_by(Rating.created_at)
            .all()
        )

    def get_all_ratings(self) -> List[Rating]:
        return self.db.query(Rating).order_by(Rating.created_at).all()

    def delete_all_ratings(self) -> int:
        deleted = self.db.query(Rating).delete(synchronize_session=False)
        self.db.commit()
        return deleted
