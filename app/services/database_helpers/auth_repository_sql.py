# /app/services/database_helpers/auth_repository_sql.py

"""
Raw SQLAlchemy queries for the User (credential) and OtpCode tables.
"""

from typing import Dict, List, Optional

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.db.models.auth_models import User, OtpCode, UserRole


class AuthRepositorySQL:
    def __init__(self, db_session: Session):
        self.db = db_session

    # --- User Methods ---

    def get_user_by_id(self, user_id: str) -> Optional[User]:
        return self.db.get(User, user_id)

    def get_user_by_email(self, email: str) -> Optional[User]:
        """Expects an already-normalized (lowercase) email."""
        return self.db.query(User).filter(User.email == email).first()

    def add_user(self, record: Dict) -> Optional[User]:
        """
        Creates a new User. Returns None if the email unique constraint fires,
        which happens when a concurrent registration won the race.
        """
        new_user = User(**record)
        self.db.add(new_user)
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            return None
        self.db.refresh(new_user)
        return new_user

    def update_password_hash(self, user_id: str, hashed_password: str) -> Optional[User]:
        db_user = self.get_user_by_id(user_id)
        if db_user:
            db_user.hashed_password = hashed_password
            self.db.commit()
            self.db.refresh(db_user)
        return db_user

    def get_users_by_role(self, role: UserRole) -> List[User]:
        return self.db.query(User).filter(User.role == role).order_by(User.created_at).all()

    def delete_user(self, user_id: str) -> bool:
        db_user = self.get_user_by_id(user_id)
        if db_user:
            self.db.delete(db_user)
            self.db.commit()
            return True
        return False

    def count_users(self) -> int:
        return self.db.query(func.count(User.id)).scalar()

    # --- OTP Methods ---

    def replace_otp(self, record: Dict) -> OtpCode:
        """Deletes every stored code for the email, then inserts the new one in the same commit."""
        self.db.query(OtpCode).filter(OtpCode.email == record["email"]).delete(synchronize_session=False)
        new_otp = OtpCode(**record)
        self.db.add(new_otp)
        self.db.commit()
        self.db.refresh(new_otp)
        return new_otp

    def get_latest_otp(self, email: str) -> Optional[OtpCode]:
        return (
            self.db.query(OtpCode)
            .filter(OtpCode.email == email)
            .order_by(OtpCode.expires_at.desc())
            .first()
        )

    def delete_otps_for_email(self, email: str) -> int:
        deleted = self.db.query(OtpCode).filter(OtpCode.email == email).delete(synchronize_session=False)
        self.db.commit()
        return deleted
