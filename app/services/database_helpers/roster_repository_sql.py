# /app/services/database_helpers/roster_repository_sql.py

"""
Raw SQLAlchemy queries for the Student, Teacher and TeacherSubject tables.

Methods that write commit immediately and hand back the refreshed ORM object,
or None when the target row does not exist.
"""

from typing import Dict, List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.db.models.roster_models import Student, Teacher, TeacherSubject


class RosterRepositorySQL:
    def __init__(self, db_session: Session):
        self.db = db_session

    # --- Student Methods ---

    def get_student_by_id(self, student_id: str) -> Optional[Student]:
        return self.db.get(Student, student_id)

    def get_student_by_access_code(self, access_code: str) -> Optional[Student]:
        """Global lookup; codes are stored uppercase, so the argument is upper-cased first."""
        return self.db.query(Student).filter(Student.access_code == access_code.upper()).first()

    def get_all_students(self, grade: Optional[int] = None) -> List[Student]:
        query = self.db.query(Student)
        if grade is not None:
            query = query.filter(Student.grade == grade)
        return query.order_by(Student.grade, Student.name).all()

    def add_student(self, record: Dict) -> Optional[Student]:
        """Returns None when the access code is already taken (unique constraint)."""
        new_student = Student(**record)
        self.db.add(new_student)
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            return None
        self.db.refresh(new_student)
        return new_student

    def update_student(self, student_id: str, data: Dict) -> Optional[Student]:
        """Returns None when the student is missing or the new access code is taken."""
        db_student = self.get_student_by_id(student_id)
        if db_student:
            for key, value in data.items():
                setattr(db_student, key, value)
            try:
                self.db.commit()
            except IntegrityError:
                self.db.rollback()
                return None
            self.db.refresh(db_student)
        return db_student

    # --- Teacher Methods ---

    def get_teacher_by_id(self, teacher_id: str) -> Optional[Teacher]:
        return self.db.get(Teacher, teacher_id)

    def get_all_teachers(self) -> List[Teacher]:
        return self.db.query(Teacher).order_by(Teacher.name).all()

    def add_teacher(self, record: Dict, subjects: List[Dict]) -> Teacher:
        new_teacher = Teacher(**record)
        new_teacher.subjects = [TeacherSubject(**s) for s in subjects]
        self.db.add(new_teacher)
        self.db.commit()
        self.db.refresh(new_teacher)
        return new_teacher

    def update_teacher(self, teacher_id: str, data: Dict, subjects: Optional[List[Dict]] = None) -> Optional[Teacher]:
        db_teacher = self.get_teacher_by_id(teacher_id)
        if db_teacher:
            for key, value in data.items():
                setattr(db_teacher, key, value)
            if subjects is not None:
                # delete-orphan cascade removes the old association rows
                db_teacher.subjects = [TeacherSubject(**s) for s in subjects]
            self.db.commit()
            self.db.refresh(db_teacher)
        return db_teacher
