# /app/db/models/roster_models.py

"""
SQLAlchemy models for the roster: students who submit ratings and the teachers
they rate.
"""

from sqlalchemy import Column, String, Integer, ForeignKey
from sqlalchemy.orm import relationship

from ..base_class import Base


class Student(Base):
    """
    A student able to rate teachers.

    `access_code` is the per-student secret that authorizes rating submissions.
    It is stored uppercase and must be unique across the whole system.
    """
    id = Column(String, primary_key=True, index=True)
    name = Column(String, index=True, nullable=False)
    grade = Column(Integer, nullable=False, index=True)
    access_code = Column(String(6), unique=True, index=True, nullable=False)


class Teacher(Base):
    id = Column(String, primary_key=True, index=True)
    name = Column(String, index=True, nullable=False)

    # A teacher may cover several (subject, grade) pairs. Deleting the
    # teacher removes the associations with it.
    subjects = relationship(
        "TeacherSubject",
        back_populates="teacher",
        cascade="all, delete-orphan",
        lazy="selectin",
        order_by="TeacherSubject.id",
    )


class TeacherSubject(Base):
    __tablename__ = "teacher_subjects"
    id = Column(Integer, primary_key=True, autoincrement=True)
    teacher_id = Column(String, ForeignKey("teachers.id", ondelete="CASCADE"), nullable=False, index=True)
    subject = Column(String, nullable=False)
    grade = Column(Integer, nullable=False)

    teacher = relationship("Teacher", back_populates="subjects")
