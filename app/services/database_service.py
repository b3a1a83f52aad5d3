# /app/services/database_service.py

"""
The single persistence handle every core service is constructed with.

`DatabaseService` delegates to the SQL repositories and converts any
SQLAlchemy failure the repositories did not handle themselves into
`StorageUnavailable`, after rolling the session back so nothing from the
failed call is committed.
"""

import functools
import logging
from datetime import datetime
from typing import Dict, Generator, List, Optional

from fastapi import Depends
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

# --- Core Database Setup ---
from app.core.errors import StorageUnavailable
from app.db.database import get_db
from app.db.models.auth_models import User, OtpCode, UserRole
from app.db.models.rating_models import Rating
from app.db.models.roster_models import Student, Teacher

# --- Repository Imports ---
from .database_helpers.roster_repository_sql import RosterRepositorySQL
from .database_helpers.rating_repository_sql import RatingRepositorySQL
from .database_helpers.auth_repository_sql import AuthRepositorySQL

logger = logging.getLogger(__name__)


def _storage_guarded(method):
    @functools.wraps(method)
    def wrapper(self, *args, **kwargs):
        try:
            return method(self, *args, **kwargs)
        except SQLAlchemyError as e:
            logger.error("Storage failure in %s: %s", method.__name__, e)
            self.session.rollback()
            raise StorageUnavailable(f"Storage unavailable during {method.__name__}") from e
    return wrapper


class DatabaseService:
    def __init__(self, db_session: Session):
        if db_session is None:
            raise ValueError("A database session is required.")
        self.session = db_session
        self.roster_repo = RosterRepositorySQL(db_session)
        self.rating_repo = RatingRepositorySQL(db_session)
        self.auth_repo = AuthRepositorySQL(db_session)

    # --- STUDENT METHODS (DELEGATED) ---
    @_storage_guarded
    def get_student_by_id(self, student_id: str) -> Optional[Student]: return self.roster_repo.get_student_by_id(student_id)
    @_storage_guarded
    def get_student_by_access_code(self, access_code: str) -> Optional[Student]: return self.roster_repo.get_student_by_access_code(access_code)
    @_storage_guarded
    def get_all_students(self, grade: Optional[int] = None) -> List[Student]: return self.roster_repo.get_all_students(grade=grade)
    @_storage_guarded
    def add_student(self, student_record: Dict) -> Optional[Student]: return self.roster_repo.add_student(student_record)
    @_storage_guarded
    def update_student(self, student_id: str, student_update_data: Dict) -> Optional[Student]: return self.roster_repo.update_student(student_id, student_update_data)

    # --- TEACHER METHODS (DELEGATED) ---
    @_storage_guarded
    def get_teacher_by_id(self, teacher_id: str) -> Optional[Teacher]: return self.roster_repo.get_teacher_by_id(teacher_id)
    @_storage_guarded
    def get_all_teachers(self) -> List[Teacher]: return self.roster_repo.get_all_teachers()
    @_storage_guarded
    def add_teacher(self, teacher_record: Dict, subjects: List[Dict]) -> Teacher: return self.roster_repo.add_teacher(teacher_record, subjects)
    @_storage_guarded
    def update_teacher(self, teacher_id: str, teacher_update_data: Dict, subjects: Optional[List[Dict]] = None) -> Optional[Teacher]:
        return self.roster_repo.update_teacher(teacher_id, teacher_update_data, subjects)

    # --- RATING METHODS (DELEGATED) ---
    @_storage_guarded
    def add_rating(self, rating_record: Dict) -> Optional[Rating]: return self.rating_repo.add_rating(rating_record)
    @_storage_guarded
    def find_rating_in_window(self, student_id: str, teacher_id: str, start: datetime, end: datetime) -> Optional[Rating]:
        return self.rating_repo.find_rating_in_window(student_id, teacher_id, start, end)
    @_storage_guarded
    def get_ratings_for_student_since(self, student_id: str, since: datetime) -> List[Rating]: return self.rating_repo.get_ratings_for_student_since(student_id, since)
    @_storage_guarded
    def get_ratings_for_teacher(self, teacher_id: str) -> List[Rating]: return self.rating_repo.get_ratings_for_teacher(teacher_id)
    @_storage_guarded
    def get_all_ratings(self) -> List[Rating]: return self.rating_repo.get_all_ratings()
    @_storage_guarded
    def delete_all_ratings(self) -> int: return self.rating_repo.delete_all_ratings()

    # --- CREDENTIAL METHODS (DELEGATED) ---
    @_storage_guarded
    def get_user_by_id(self, user_id: str) -> Optional[User]: return self.auth_repo.get_user_by_id(user_id)
    @_storage_guarded
    def get_user_by_email(self, email: str) -> Optional[User]: return self.auth_repo.get_user_by_email(email)
    @_storage_guarded
    def add_user(self, user_record: Dict) -> Optional[User]: return self.auth_repo.add_user(user_record)
    @_storage_guarded
    def update_password_hash(self, user_id: str, hashed_password: str) -> Optional[User]: return self.auth_repo.update_password_hash(user_id, hashed_password)
    @_storage_guarded
    def get_users_by_role(self, role: UserRole) -> List[User]: return self.auth_repo.get_users_by_role(role)
    @_storage_guarded
    def delete_user(self, user_id: str) -> bool: return self.auth_repo.delete_user(user_id)
    @_storage_guarded
    def count_users(self) -> int: return self.auth_repo.count_users()

    # --- OTP METHODS (DELEGATED) ---
    @_storage_guarded
    def replace_otp(self, otp_record: Dict) -> OtpCode: return self.auth_repo.replace_otp(otp_record)
    @_storage_guarded
    def get_latest_otp(self, email: str) -> Optional[OtpCode]: return self.auth_repo.get_latest_otp(email)
    @_storage_guarded
    def delete_otps_for_email(self, email: str) -> int: return self.auth_repo.delete_otps_for_email(email)


# --- DEPENDENCY PROVIDER ---
def get_db_service(db: Session = Depends(get_db)) -> Generator[DatabaseService, None, None]:
    """FastAPI dependency that wraps the request-scoped Session in a DatabaseService."""
    yield DatabaseService(db_session=db)
